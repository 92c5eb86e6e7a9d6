"""User account API endpoints.

Lists a member's products by lifecycle state: bought, in sale, in a
buyer's cart, sold.
"""

from typing import Annotated

from fastapi import APIRouter, Depends

from brocante.api.dependencies import get_product_store
from brocante.api.schemas import ProductListResponse, ProductResponse
from brocante.catalog.store import ProductLifecycleStore
from brocante.catalog.views import ProductView

router = APIRouter(prefix="/users/{user_id}/products", tags=["Users"])


def _to_list(products: list[ProductView]) -> ProductListResponse:
    return ProductListResponse(
        items=[ProductResponse.from_view(p) for p in products],
        count=len(products),
    )


@router.get("/bought", response_model=ProductListResponse, summary="Recently bought products")
async def list_bought(
    user_id: int,
    store: Annotated[ProductLifecycleStore, Depends(get_product_store)],
) -> ProductListResponse:
    """Products from the user's validated carts, still inside the visibility window."""
    return _to_list(await store.bought_by_user(user_id))


@router.get("/in-sale", response_model=ProductListResponse, summary="Products for sale")
async def list_in_sale(
    user_id: int,
    store: Annotated[ProductLifecycleStore, Depends(get_product_store)],
) -> ProductListResponse:
    """The user's products still for sale, including reserved ones."""
    return _to_list(await store.in_sale_by_user(user_id))


@router.get("/in-cart", response_model=ProductListResponse, summary="Products in a cart")
async def list_in_cart(
    user_id: int,
    store: Annotated[ProductLifecycleStore, Depends(get_product_store)],
) -> ProductListResponse:
    """The user's products currently held in a buyer's cart."""
    return _to_list(await store.in_cart_by_user(user_id))


@router.get("/sold", response_model=ProductListResponse, summary="Sold products")
async def list_sold(
    user_id: int,
    store: Annotated[ProductLifecycleStore, Depends(get_product_store)],
) -> ProductListResponse:
    """The user's sold products."""
    return _to_list(await store.sold_by_user(user_id))
