"""Product API endpoints.

Provides the public catalog, product pages, listing creation and deletion.
"""

from typing import Annotated

import structlog
from fastapi import APIRouter, Depends, Query, Response, status

from brocante.api.dependencies import get_catalog_engine, get_product_store
from brocante.api.schemas import (
    CatalogPageResponse,
    ErrorResponse,
    ProductCreateRequest,
    ProductDetailResponse,
    ProductListResponse,
    ProductResponse,
)
from brocante.catalog.query import CatalogQueryEngine
from brocante.catalog.search_terms import SearchTerms
from brocante.catalog.store import ProductLifecycleStore
from brocante.domain.value_objects import ProductDraft
from brocante.infrastructure.config import settings

logger = structlog.get_logger()

router = APIRouter(prefix="/products", tags=["Products"])


# ============================================================================
# Endpoints
# ============================================================================


@router.get(
    "",
    response_model=CatalogPageResponse,
    responses={400: {"model": ErrorResponse}},
    summary="Browse the catalog",
    description="Paginated list of products for sale and not held in a cart.",
)
async def list_catalog(
    engine: Annotated[CatalogQueryEngine, Depends(get_catalog_engine)],
    page: Annotated[str | None, Query(description="Page number, 1-based")] = None,
    search: Annotated[str | None, Query(description="Text searched in titles")] = None,
    category: Annotated[str | None, Query(description="Category id")] = None,
    sort_by: Annotated[str, Query(description="date, price, title or id")] = "date",
    sort_order: Annotated[str, Query(description="asc or desc")] = "desc",
) -> CatalogPageResponse:
    """Serve a catalog page.

    Raw page and category values are normalized by SearchTerms, so a
    malformed page means page 1 rather than a validation error. A page
    past the end is served as the last page.

    Args:
        engine: Catalog query engine.
        page: Requested page.
        search: Free-text search.
        category: Category filter.
        sort_by: Sort column.
        sort_order: Sort direction.

    Returns:
        The catalog page.
    """
    terms = SearchTerms.from_request(page=page, search=search, category_id=category)
    result = await engine.fetch_page(terms, sort_by=sort_by, sort_order=sort_order)

    if result.is_out_of_range and terms.page > 1:
        logger.info(
            "Catalog page out of range, serving last page",
            requested_page=terms.page,
            pages_count=result.pages_count,
        )
        result = await engine.fetch_page(
            terms.with_page(result.pages_count),
            sort_by=sort_by,
            sort_order=sort_order,
        )

    return CatalogPageResponse.from_page(result)


@router.get(
    "/latest",
    response_model=ProductListResponse,
    summary="Latest products",
)
async def list_latest(
    store: Annotated[ProductLifecycleStore, Depends(get_product_store)],
    limit: Annotated[int, Query(ge=0, description="0 returns every product")] = settings.latest_limit,
) -> ProductListResponse:
    """List the most recently created products."""
    products = await store.latest(limit)
    return ProductListResponse(
        items=[ProductResponse.from_view(p) for p in products],
        count=len(products),
    )


@router.get(
    "/{product_id}",
    response_model=ProductResponse,
    responses={404: {"model": ErrorResponse}},
    summary="Get a product",
)
async def get_product(
    product_id: int,
    store: Annotated[ProductLifecycleStore, Depends(get_product_store)],
) -> ProductResponse:
    """Get a product with its seller display fields.

    Raises:
        ProductNotFoundError: Mapped to 404.
    """
    return ProductResponse.from_view(await store.by_id(product_id))


@router.get(
    "/{product_id}/details",
    response_model=ProductDetailResponse,
    responses={404: {"model": ErrorResponse}},
    summary="Get a product with category and seller contact",
)
async def get_product_details(
    product_id: int,
    store: Annotated[ProductLifecycleStore, Depends(get_product_store)],
) -> ProductDetailResponse:
    """Get the product detail page data."""
    return ProductDetailResponse.from_detail(await store.by_id_with_category(product_id))


@router.post(
    "",
    response_model=ProductResponse,
    status_code=status.HTTP_201_CREATED,
    responses={422: {"model": ErrorResponse}},
    summary="List a product for sale",
)
async def create_product(
    request: ProductCreateRequest,
    store: Annotated[ProductLifecycleStore, Depends(get_product_store)],
) -> ProductResponse:
    """Create a listing.

    Raises:
        InvalidPriceError: Mapped to 422 when price is not positive.
    """
    draft = ProductDraft(
        title=request.title,
        description=request.description,
        price=request.price,
        category_id=request.category_id,
        photo=tuple(request.photo),
        room=request.room,
        material=request.material,
        condition=request.condition,
        info=request.info,
    )
    return ProductResponse.from_view(await store.create(draft, seller_id=request.seller_id))


@router.delete(
    "/{product_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a product",
)
async def delete_product(
    product_id: int,
    store: Annotated[ProductLifecycleStore, Depends(get_product_store)],
) -> Response:
    """Hard-delete a product. Deleting a missing product also returns 204."""
    await store.delete(product_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
