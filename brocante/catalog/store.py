"""Product lifecycle store.

Ownership-scoped listings, single-product reads and lifecycle writes over
the products table. Each read joins the seller's display fields and
returns view records rather than ORM rows.

Authorization is not checked here: callers decide who may delete or
reserve what.
"""

from datetime import datetime, timedelta, timezone
from typing import Any

import structlog
from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import contains_eager

from brocante.catalog.models import Cart, Product
from brocante.catalog.views import ProductDetail, ProductView, encode_photo
from brocante.domain.exceptions import ProductNotAvailableError, ProductNotFoundError
from brocante.domain.state_machines import ProductStatus
from brocante.domain.value_objects import ProductDraft
from brocante.infrastructure.config import settings

logger = structlog.get_logger()


class ProductLifecycleStore:
    """Store for product reads and lifecycle transitions.

    Example usage:
        async with async_session_factory() as session:
            store = ProductLifecycleStore(session)
            on_sale = await store.in_sale_by_user(user_id=4)
            await store.delete(on_sale[0].id)
            await session.commit()
    """

    def __init__(self, session: AsyncSession, bought_window_days: int | None = None) -> None:
        """Initialize store with database session.

        Args:
            session: Async SQLAlchemy session.
            bought_window_days: How long bought products stay in the
                buyer's view after the cart date.
        """
        self.session = session
        self.bought_window = timedelta(
            days=bought_window_days if bought_window_days is not None else settings.bought_window_days
        )

    # ------------------------------------------------------------------
    # Ownership-scoped listings
    # ------------------------------------------------------------------

    async def bought_by_user(self, user_id: int, now: datetime | None = None) -> list[ProductView]:
        """Products bought by a user, while still inside the visibility window.

        A product counts as bought when it is linked to a validated cart of
        the user. It stays listed while ``now < cart.date + window``; past
        that it silently drops out. Nothing is written when it does.

        Args:
            user_id: Buyer.
            now: Reference time; defaults to the current UTC time.

        Returns:
            Bought products, oldest first.
        """
        now = now or datetime.now(timezone.utc)
        cutoff = now - self.bought_window
        query = (
            self._select_with_seller()
            .join(Cart, Product.cart_id == Cart.id)
            .where(
                Cart.user_id == user_id,
                Cart.status_validation.is_(True),
                Cart.date > cutoff,
            )
        )
        return await self._fetch_views(query)

    async def in_sale_by_user(self, user_id: int) -> list[ProductView]:
        """Products a seller still has for sale.

        Unlike the public catalog, products reserved in a pending cart are
        included.
        """
        query = self._select_with_seller().where(
            Product.user_id == user_id,
            Product.status == ProductStatus.FOR_SALE.value,
        )
        return await self._fetch_views(query)

    async def in_cart_by_user(self, user_id: int) -> list[ProductView]:
        """Products of a seller currently held in any buyer's cart."""
        query = self._select_with_seller().where(
            Product.user_id == user_id,
            Product.cart_id.is_not(None),
        )
        return await self._fetch_views(query)

    async def sold_by_user(self, user_id: int) -> list[ProductView]:
        """Products a seller has sold."""
        query = self._select_with_seller().where(
            Product.user_id == user_id,
            Product.status == ProductStatus.SOLD.value,
        )
        return await self._fetch_views(query)

    async def latest(self, limit: int | None = None) -> list[ProductView]:
        """Most recently created products across all sellers.

        Args:
            limit: Maximum number of products; 0 or None returns all.

        Returns:
            Products by id descending.
        """
        query = self._select_with_seller(order_by=Product.id.desc())
        if limit:
            query = query.limit(limit)
        return await self._fetch_views(query)

    # ------------------------------------------------------------------
    # Single-product reads
    # ------------------------------------------------------------------

    async def by_id(self, product_id: int) -> ProductView:
        """Get a product with its seller display fields.

        Raises:
            ProductNotFoundError: If no product has this id.
        """
        query = self._select_with_seller().where(Product.id == product_id)
        result = await self.session.execute(query)
        product = result.scalar_one_or_none()
        if product is None:
            raise ProductNotFoundError(product_id)
        return ProductView.from_model(product)

    async def by_id_with_category(self, product_id: int) -> ProductDetail:
        """Get a product with its category and the seller's contact details.

        Raises:
            ProductNotFoundError: If no product has this id.
        """
        query = (
            self._select_with_seller()
            .join(Product.category)
            .options(contains_eager(Product.category))
            .where(Product.id == product_id)
        )
        result = await self.session.execute(query)
        product = result.scalar_one_or_none()
        if product is None:
            raise ProductNotFoundError(product_id)
        return ProductDetail.from_model(product)

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    async def create(self, draft: ProductDraft, seller_id: int) -> ProductView:
        """List a new product for sale.

        Args:
            draft: Validated listing content.
            seller_id: Seller.

        Returns:
            The created product.
        """
        product = Product(
            title=draft.title,
            description=draft.description,
            price=draft.price,
            photo=encode_photo(draft.photo),
            status=ProductStatus.FOR_SALE.value,
            user_id=seller_id,
            category_item_id=draft.category_id,
            room=draft.room,
            material=draft.material,
            condition=draft.condition,
            info=draft.info,
        )
        self.session.add(product)
        await self.session.flush()
        await self.session.refresh(product, attribute_names=["seller"])

        logger.info("Product created", product_id=product.id, seller_id=seller_id, price=draft.price)
        return ProductView.from_model(product)

    async def reserve(self, product_id: int, cart_id: int) -> None:
        """Put a for-sale product into a buyer's cart.

        Raises:
            ProductNotFoundError: If no product has this id.
            ProductNotAvailableError: If the product is sold or already in a cart.
        """
        result = await self.session.execute(
            update(Product)
            .where(
                Product.id == product_id,
                Product.cart_id.is_(None),
                Product.status == ProductStatus.FOR_SALE.value,
            )
            .values(cart_id=cart_id)
        )
        if result.rowcount == 1:
            logger.info("Product reserved", product_id=product_id, cart_id=cart_id)
            return

        current = await self.session.execute(
            select(Product.status, Product.cart_id).where(Product.id == product_id)
        )
        row = current.one_or_none()
        if row is None:
            raise ProductNotFoundError(product_id)
        raise ProductNotAvailableError(product_id, row.status, row.cart_id)

    async def mark_cart_sold(self, cart_id: int) -> int:
        """Mark every product of a validated cart as sold.

        Nothing happens while the cart is still pending. Products already
        sold are left alone. They stay linked to the cart so the buyer keeps
        seeing them.

        Args:
            cart_id: Cart whose products were paid for.

        Returns:
            Number of products moved to sold.
        """
        validated_cart = select(Cart.id).where(
            Cart.id == cart_id, Cart.status_validation.is_(True)
        )
        sellable = [
            status.value for status in ProductStatus if status.can_transition_to(ProductStatus.SOLD)
        ]
        result = await self.session.execute(
            update(Product)
            .where(Product.cart_id.in_(validated_cart), Product.status.in_(sellable))
            .values(status=ProductStatus.SOLD.value)
            .execution_options(synchronize_session="fetch")
        )
        logger.info("Cart products sold", cart_id=cart_id, count=result.rowcount)
        return result.rowcount

    async def delete(self, product_id: int) -> None:
        """Hard-delete a product.

        Deleting a missing product is a no-op.
        """
        result = await self.session.execute(delete(Product).where(Product.id == product_id))
        logger.info("Product deleted", product_id=product_id, deleted=result.rowcount)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _select_with_seller(self, order_by: Any = None) -> Any:
        """Base product query joined with the seller."""
        return (
            select(Product)
            .join(Product.seller)
            .options(contains_eager(Product.seller))
            .order_by(order_by if order_by is not None else Product.id.asc())
        )

    async def _fetch_views(self, query: Any) -> list[ProductView]:
        """Run a product query and convert the rows."""
        result = await self.session.execute(query)
        return [ProductView.from_model(p) for p in result.scalars().all()]
