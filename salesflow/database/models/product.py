"""
Product model with tiered pricing.
"""

from decimal import Decimal

from sqlalchemy import CheckConstraint, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from salesflow.database.base import BaseModel, create_table_args


class Product(BaseModel):
    """
    Catalog product.

    Carries a base cost and three price points, one per customer type.
    Stock quantity is informational; orders never reserve or decrement it.
    """

    __tablename__ = "products"

    name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    sku: Mapped[str] = mapped_column(String(64), nullable=False, unique=True)

    base_price: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    retail_price: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    wholesale_price: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    open_market_price: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)

    stock_quantity: Mapped[int] = mapped_column(nullable=False, default=0)

    __table_args__ = create_table_args(
        CheckConstraint("stock_quantity >= 0", name="ck_products_stock_non_negative"),
        CheckConstraint("retail_price >= 0", name="ck_products_retail_non_negative"),
        CheckConstraint("wholesale_price >= 0", name="ck_products_wholesale_non_negative"),
        CheckConstraint("open_market_price >= 0", name="ck_products_open_market_non_negative"),
        comment="Product catalog",
    )
