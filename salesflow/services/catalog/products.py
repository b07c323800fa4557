"""
Product service for catalog operations.
"""

from sqlalchemy import select
from sqlalchemy.orm import Session

from salesflow.core.logging import get_logger
from salesflow.database.models.product import Product
from salesflow.database.models.user import User
from salesflow.schemas.catalog import ProductCreate, ProductUpdate
from salesflow.services.authorization import Action, require_permission
from salesflow.services.errors import ConflictError, NotFoundError

logger = get_logger(__name__)


class ProductService:
    """
    Business logic service for the product catalog.

    Price changes only affect orders created afterwards; order lines keep
    the price captured when the order was placed.
    """

    def __init__(self, session: Session):
        self.session = session

    def create_product(self, actor: User, data: ProductCreate) -> Product:
        """
        Create a product.

        Raises:
            PermissionDeniedError: If the actor may not manage products
            ConflictError: If the sku is already in use
        """
        require_permission(actor.role, Action.MANAGE_PRODUCTS, user_id=actor.id)
        self._validate_sku_uniqueness(data.sku)

        product = Product(**data.model_dump())
        self.session.add(product)
        self.session.flush()

        logger.info(
            "Product created",
            product_id=product.id,
            sku=product.sku,
            created_by=actor.id,
        )
        return product

    def update_product(self, actor: User, product_id: int, data: ProductUpdate) -> Product:
        require_permission(actor.role, Action.MANAGE_PRODUCTS, user_id=actor.id)
        product = self.get_product(product_id)

        updates = data.model_dump(exclude_unset=True, exclude_none=True)
        for field, value in updates.items():
            setattr(product, field, value)
        self.session.flush()

        logger.info(
            "Product updated",
            product_id=product.id,
            updated_fields=sorted(updates),
            updated_by=actor.id,
        )
        return product

    def get_product(self, product_id: int) -> Product:
        product = self.session.get(Product, product_id)
        if product is None:
            raise NotFoundError("Product", product_id)
        return product

    def get_by_sku(self, sku: str):
        return self.session.scalar(select(Product).where(Product.sku == sku))

    def list_products(self) -> list[Product]:
        """List products newest first."""
        stmt = select(Product).order_by(Product.created_at.desc(), Product.id.desc())
        return list(self.session.scalars(stmt))

    def _validate_sku_uniqueness(self, sku: str) -> None:
        if self.get_by_sku(sku) is not None:
            raise ConflictError(f"Product with sku {sku!r} already exists", sku=sku)
