"""
Customer API endpoints.
"""

from typing import Optional

from fastapi import APIRouter, Query, status

from salesflow.api.deps import CurrentUser, DatabaseDep
from salesflow.database.models.customer import CustomerType
from salesflow.schemas.catalog import CustomerCreate, CustomerResponse, CustomerUpdate
from salesflow.services.catalog.customers import CustomerService

router = APIRouter(prefix="/customers", tags=["customers"])


@router.get("", response_model=list[CustomerResponse], summary="List customers")
def list_customers(
    current_user: CurrentUser,
    database: DatabaseDep,
    customer_type: Optional[CustomerType] = Query(None, alias="type"),
) -> list[CustomerResponse]:
    with database.session() as session:
        customers = CustomerService(session).list_customers(customer_type)
        return [CustomerResponse.model_validate(c) for c in customers]


@router.post(
    "",
    response_model=CustomerResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create customer",
)
def create_customer(
    request: CustomerCreate, current_user: CurrentUser, database: DatabaseDep
) -> CustomerResponse:
    with database.session() as session:
        customer = CustomerService(session).create_customer(current_user, request)
        return CustomerResponse.model_validate(customer)


@router.get("/{customer_id}", response_model=CustomerResponse, summary="Get customer")
def get_customer(
    customer_id: int, current_user: CurrentUser, database: DatabaseDep
) -> CustomerResponse:
    with database.session() as session:
        return CustomerResponse.model_validate(CustomerService(session).get_customer(customer_id))


@router.patch("/{customer_id}", response_model=CustomerResponse, summary="Update customer")
def update_customer(
    customer_id: int,
    request: CustomerUpdate,
    current_user: CurrentUser,
    database: DatabaseDep,
) -> CustomerResponse:
    with database.session() as session:
        customer = CustomerService(session).update_customer(current_user, customer_id, request)
        return CustomerResponse.model_validate(customer)
