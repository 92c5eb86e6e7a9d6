"""Catalog query engine.

Answers "what is on page P of the filtered, sorted public catalog, and how
many pages are there?".

A product is publicly listed when it matches the search terms, is
``for_sale`` and is not held by any cart. The same rule drives both the
count and the page fetch so that ``pages_count`` always describes the rows
that can actually be fetched.

The count and the fetch are two statements in the caller's session. Under
the store's default isolation level a concurrent insert or delete between
them can make ``pages_count`` off by one; callers needing a stable pair
should run the session at REPEATABLE READ or higher.
"""

from typing import Any

import structlog
from sqlalchemy import and_, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import contains_eager

from brocante.catalog.models import Product
from brocante.catalog.search_terms import SearchTerms
from brocante.catalog.views import CatalogPage, ProductView
from brocante.domain.exceptions import InvalidSortError
from brocante.domain.state_machines import ProductStatus
from brocante.infrastructure.config import settings

logger = structlog.get_logger()

SORT_COLUMNS: dict[str, Any] = {
    "date": Product.created_at,
    "price": Product.price,
    "title": Product.title,
    "id": Product.id,
}

SORT_ORDERS = ("asc", "desc")


def listing_conditions(search_terms: SearchTerms) -> list[Any]:
    """Conditions a product must meet to appear in the public catalog."""
    return [
        *search_terms.to_filter_predicate(),
        Product.cart_id.is_(None),
        Product.status == ProductStatus.FOR_SALE.value,
    ]


class CatalogQueryEngine:
    """Paginated, filtered reads over the public catalog.

    The engine never picks a different page than the one asked for. When
    ``page > pages_count`` it returns an empty page carrying the real
    ``pages_count``; retrying with that page is the caller's decision.

    Example usage:
        async with async_session_factory() as session:
            engine = CatalogQueryEngine(session)
            terms = SearchTerms.from_request(page="2")
            page = await engine.fetch_page(terms)
            if page.is_out_of_range:
                page = await engine.fetch_page(terms.with_page(page.pages_count))
    """

    def __init__(self, session: AsyncSession, page_size: int | None = None) -> None:
        """Initialize engine with database session.

        Args:
            session: Async SQLAlchemy session.
            page_size: Default products per page.
        """
        self.session = session
        self.page_size = page_size or settings.catalog_page_size

    async def fetch_page(
        self,
        search_terms: SearchTerms,
        page_size: int | None = None,
        sort_by: str = "date",
        sort_order: str = "desc",
    ) -> CatalogPage:
        """Fetch one page of listed products.

        Args:
            search_terms: Search, category and requested page.
            page_size: Products per page; defaults to the engine's.
            sort_by: Sort column, one of ``SORT_COLUMNS``.
            sort_order: "asc" or "desc".

        Returns:
            The page with the requested page number and the page count.

        Raises:
            InvalidSortError: If sort_by or sort_order is not allowed.
            ValueError: If page_size is lower than 1.
        """
        size = page_size if page_size is not None else self.page_size
        if size < 1:
            raise ValueError(f"page_size must be at least 1, got {size}")
        order_by = self._order_by(sort_by, sort_order)

        conditions = listing_conditions(search_terms)

        total = await self.count(search_terms)
        pages_count = (total + size - 1) // size
        offset = (search_terms.page - 1) * size

        products: list[ProductView] = []
        # Past the last row nothing can match; skip the fetch
        if offset < total:
            query = (
                select(Product)
                .join(Product.seller)
                .options(contains_eager(Product.seller))
                .where(and_(*conditions))
                .order_by(*order_by)
                .limit(size)
                .offset(offset)
            )
            result = await self.session.execute(query)
            products = [ProductView.from_model(p) for p in result.scalars().all()]

        logger.debug(
            "Catalog page fetched",
            page=search_terms.page,
            page_size=size,
            pages_count=pages_count,
            total=total,
            returned=len(products),
            search=search_terms.search,
            category_id=search_terms.category_id,
        )

        return CatalogPage(
            products=products,
            current_page=search_terms.page,
            pages_count=pages_count,
            total=total,
        )

    async def count(self, search_terms: SearchTerms) -> int:
        """Count listed products matching the search terms.

        Args:
            search_terms: Search and category filter; the page is ignored.

        Returns:
            Number of matching listed products.
        """
        query = select(func.count(Product.id)).where(and_(*listing_conditions(search_terms)))
        result = await self.session.execute(query)
        return result.scalar_one()

    def _order_by(self, sort_by: str, sort_order: str) -> list[Any]:
        """Resolve sort parameters against the allow-list.

        The product id is appended as a tie-breaker so equal sort keys
        keep a stable order across pages.
        """
        column = SORT_COLUMNS.get(sort_by)
        if column is None:
            raise InvalidSortError("sort_by", sort_by, list(SORT_COLUMNS))

        direction = sort_order.lower() if isinstance(sort_order, str) else sort_order
        if direction not in SORT_ORDERS:
            raise InvalidSortError("sort_order", str(sort_order), list(SORT_ORDERS))

        if direction == "desc":
            return [column.desc(), Product.id.desc()]
        return [column.asc(), Product.id.asc()]
