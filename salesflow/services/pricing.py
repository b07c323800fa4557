"""
Customer-type price resolution and line totals.

A product carries one price per customer type. The resolved price is copied
into the order line when the order is created and never re-resolved, so
later product edits do not touch existing orders.
"""

from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Optional, Union

from salesflow.core.logging import get_logger
from salesflow.database.models.customer import CustomerType
from salesflow.database.models.product import Product

logger = get_logger(__name__)

CENT = Decimal("0.01")

_PRICE_FIELDS = {
    CustomerType.RETAIL: "retail_price",
    CustomerType.WHOLESALE: "wholesale_price",
    CustomerType.OPEN_MARKET: "open_market_price",
}


def _coerce_customer_type(
    customer_type: Optional[Union[CustomerType, str]]
) -> Optional[CustomerType]:
    if isinstance(customer_type, CustomerType) or customer_type is None:
        return customer_type
    try:
        return CustomerType(customer_type.strip().lower())
    except ValueError:
        return None


def resolve_unit_price(
    product: Product,
    customer_type: Optional[Union[CustomerType, str]],
) -> Decimal:
    """
    Resolve the unit price a customer type pays for a product.

    Unrecognized customer types fall back to the retail price.

    Example:
        >>> resolve_unit_price(laptop, CustomerType.WHOLESALE)
        Decimal('900.00')
    """
    resolved_type = _coerce_customer_type(customer_type)
    if resolved_type is None:
        logger.warning(
            "Unknown customer type, using retail price",
            customer_type=str(customer_type),
            product_id=product.id,
        )
        resolved_type = CustomerType.RETAIL

    return Decimal(getattr(product, _PRICE_FIELDS[resolved_type])).quantize(CENT)


def line_total(quantity: int, unit_price: Decimal) -> Decimal:
    """quantity x unit price, rounded to cents."""
    return (Decimal(quantity) * unit_price).quantize(CENT, rounding=ROUND_HALF_UP)


def order_total(line_totals: Iterable[Decimal]) -> Decimal:
    return sum(line_totals, Decimal("0")).quantize(CENT, rounding=ROUND_HALF_UP)
