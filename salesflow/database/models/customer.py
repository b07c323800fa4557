"""
Customer and customer address models.

A customer owns one or more shipping addresses, exactly one of which is the
default, and a type that selects the product price point it buys at.
"""

import enum
from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, ForeignKey, Integer, String
from sqlalchemy import Enum as SQLEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship

from salesflow.database.base import Base, BaseModel, IntegerIdMixin, create_table_args


class CustomerType(str, enum.Enum):
    """Customer pricing tier."""

    RETAIL = "retail"
    WHOLESALE = "wholesale"
    OPEN_MARKET = "open_market"


class Customer(BaseModel):
    """
    Customer record with last-modification audit fields.
    """

    __tablename__ = "customers"

    name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    phone: Mapped[str] = mapped_column(String(50), nullable=False, default="")

    type: Mapped[CustomerType] = mapped_column(
        SQLEnum(
            CustomerType,
            name="customer_type",
            native_enum=False,
            values_callable=lambda types: [t.value for t in types],
        ),
        nullable=False,
        comment="Pricing tier",
    )

    last_modified_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    last_modified_by: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    last_modified_changes: Mapped[Optional[str]] = mapped_column(
        String(500), nullable=True, comment="Summary of changed fields"
    )

    addresses: Mapped[list["CustomerAddress"]] = relationship(
        "CustomerAddress",
        back_populates="customer",
        cascade="all, delete-orphan",
        order_by="CustomerAddress.id",
        lazy="selectin",
    )

    __table_args__ = create_table_args(comment="Customers")

    @property
    def default_address(self) -> Optional["CustomerAddress"]:
        """The address flagged default, else the first address."""
        for address in self.addresses:
            if address.is_default:
                return address
        return self.addresses[0] if self.addresses else None


class CustomerAddress(Base, IntegerIdMixin):
    """A customer shipping address."""

    __tablename__ = "customer_addresses"

    customer_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("customers.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    address: Mapped[str] = mapped_column(String(255), nullable=False)
    city: Mapped[str] = mapped_column(String(100), nullable=False)
    state: Mapped[str] = mapped_column(String(100), nullable=False)
    postal_code: Mapped[str] = mapped_column(String(20), nullable=False)
    country: Mapped[str] = mapped_column(String(100), nullable=False)
    is_default: Mapped[bool] = mapped_column(default=False, nullable=False)

    customer: Mapped["Customer"] = relationship("Customer", back_populates="addresses")

    __table_args__ = create_table_args(comment="Customer shipping addresses")

    def format(self) -> str:
        """Single-line form used for order ship-to snapshots."""
        return (
            f"{self.address}, {self.city}, {self.state}, "
            f"{self.country} {self.postal_code}"
        )
