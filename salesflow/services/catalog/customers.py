"""
Customer service for business logic operations.

This module implements the CustomerService class for creating and updating
customers together with their shipping addresses. Updates stamp the
last-modified audit fields with a summary of what changed.
"""

from typing import Optional, Sequence

from sqlalchemy import select
from sqlalchemy.orm import Session

from salesflow.core.logging import get_logger
from salesflow.database.base import utc_now
from salesflow.database.models.customer import Customer, CustomerAddress, CustomerType
from salesflow.database.models.user import User
from salesflow.schemas.catalog import AddressRequest, CustomerCreate, CustomerUpdate
from salesflow.services.authorization import Action, require_permission
from salesflow.services.errors import NotFoundError

logger = get_logger(__name__)

NO_CHANGES = "No changes"


def build_addresses(addresses: Sequence[AddressRequest]) -> list[CustomerAddress]:
    """
    Build address rows with exactly one default.

    The first address flagged default keeps the flag and any later flags are
    cleared. When none is flagged the first address becomes the default.
    """
    rows = []
    default_seen = False
    for request in addresses:
        is_default = request.is_default and not default_seen
        default_seen = default_seen or is_default
        rows.append(
            CustomerAddress(
                address=request.address,
                city=request.city,
                state=request.state,
                postal_code=request.postal_code,
                country=request.country,
                is_default=is_default,
            )
        )
    if rows and not default_seen:
        rows[0].is_default = True
    return rows


def _address_key(address) -> tuple:
    return (
        address.address,
        address.city,
        address.state,
        address.postal_code,
        address.country,
        address.is_default,
    )


class CustomerService:
    """
    Business logic service for customers.
    """

    def __init__(self, session: Session):
        self.session = session

    def create_customer(self, actor: User, data: CustomerCreate) -> Customer:
        """
        Create a customer with its addresses.

        Raises:
            PermissionDeniedError: If the actor may not manage customers
        """
        require_permission(actor.role, Action.MANAGE_CUSTOMERS, user_id=actor.id)

        customer = Customer(
            name=data.name,
            email=str(data.email),
            phone=data.phone,
            type=data.type,
            addresses=build_addresses(data.addresses),
        )
        self.session.add(customer)
        self.session.flush()

        logger.info(
            "Customer created",
            customer_id=customer.id,
            customer_type=customer.type.value,
            address_count=len(customer.addresses),
            created_by=actor.id,
        )
        return customer

    def update_customer(self, actor: User, customer_id: int, data: CustomerUpdate) -> Customer:
        """
        Apply a partial update and record who changed what.

        The change summary lists the changed parts ("Name, Email") or reads
        "No changes" when the update matched the stored values.

        Raises:
            PermissionDeniedError: If the actor may not manage customers
            NotFoundError: If the customer does not exist
        """
        require_permission(actor.role, Action.MANAGE_CUSTOMERS, user_id=actor.id)
        customer = self.get_customer(customer_id)

        changes = []
        for field, label in (("name", "Name"), ("email", "Email"), ("phone", "Phone"), ("type", "Type")):
            value = getattr(data, field)
            if value is None:
                continue
            if field == "email":
                value = str(value)
            if value != getattr(customer, field):
                setattr(customer, field, value)
                changes.append(label)

        if data.addresses is not None:
            new_addresses = build_addresses(data.addresses)
            if [_address_key(a) for a in new_addresses] != [
                _address_key(a) for a in customer.addresses
            ]:
                customer.addresses = new_addresses
                changes.append("Addresses")

        customer.last_modified_at = utc_now()
        customer.last_modified_by = actor.full_name
        customer.last_modified_changes = ", ".join(changes) if changes else NO_CHANGES
        self.session.flush()

        logger.info(
            "Customer updated",
            customer_id=customer.id,
            changes=customer.last_modified_changes,
            updated_by=actor.id,
        )
        return customer

    def get_customer(self, customer_id: int) -> Customer:
        customer = self.session.get(Customer, customer_id)
        if customer is None:
            raise NotFoundError("Customer", customer_id)
        return customer

    def list_customers(self, customer_type: Optional[CustomerType] = None) -> list[Customer]:
        """List customers newest first."""
        stmt = select(Customer)
        if customer_type is not None:
            stmt = stmt.where(Customer.type == customer_type)
        stmt = stmt.order_by(Customer.created_at.desc(), Customer.id.desc())
        return list(self.session.scalars(stmt))
