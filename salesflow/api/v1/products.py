"""
Product catalog API endpoints.
"""

from fastapi import APIRouter, status

from salesflow.api.deps import CurrentUser, DatabaseDep
from salesflow.schemas.catalog import ProductCreate, ProductResponse, ProductUpdate
from salesflow.services.catalog.products import ProductService

router = APIRouter(prefix="/products", tags=["products"])


@router.get("", response_model=list[ProductResponse], summary="List products")
def list_products(current_user: CurrentUser, database: DatabaseDep) -> list[ProductResponse]:
    with database.session() as session:
        return [ProductResponse.model_validate(p) for p in ProductService(session).list_products()]


@router.post(
    "",
    response_model=ProductResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create product",
)
def create_product(
    request: ProductCreate, current_user: CurrentUser, database: DatabaseDep
) -> ProductResponse:
    with database.session() as session:
        product = ProductService(session).create_product(current_user, request)
        return ProductResponse.model_validate(product)


@router.get("/{product_id}", response_model=ProductResponse, summary="Get product")
def get_product(product_id: int, current_user: CurrentUser, database: DatabaseDep) -> ProductResponse:
    with database.session() as session:
        return ProductResponse.model_validate(ProductService(session).get_product(product_id))


@router.patch(
    "/{product_id}",
    response_model=ProductResponse,
    summary="Update product",
    description="Update prices, stock or description; existing orders keep their prices",
)
def update_product(
    product_id: int,
    request: ProductUpdate,
    current_user: CurrentUser,
    database: DatabaseDep,
) -> ProductResponse:
    with database.session() as session:
        product = ProductService(session).update_product(current_user, product_id, request)
        return ProductResponse.model_validate(product)
