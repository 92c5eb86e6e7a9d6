"""Tests for the product lifecycle store."""

from datetime import timedelta

import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError

from brocante.catalog.models import Product
from brocante.catalog.query import CatalogQueryEngine
from brocante.catalog.search_terms import SearchTerms
from brocante.catalog.store import ProductLifecycleStore
from brocante.domain import (
    InvalidPriceError,
    ProductDraft,
    ProductNotAvailableError,
    ProductNotFoundError,
    ProductStatus,
)


@pytest.fixture
def store(session) -> ProductLifecycleStore:
    """Store with a 7-day bought window."""
    return ProductLifecycleStore(session, bought_window_days=7)


@pytest.fixture
async def seller(factory):
    """A seller."""
    return await factory.user("seller", address="1 rue des Puces", phone_number="0600000000")


@pytest.fixture
async def buyer(factory):
    """A buyer."""
    return await factory.user("buyer")


@pytest.fixture
async def chairs(factory):
    """The chairs category."""
    return await factory.category("Chairs", logo="/logos/chair.svg")


class TestBoughtByUser:
    """The buyer's bought view and its 7-day window."""

    @pytest.mark.asyncio
    async def test_validated_cart_inside_window(
        self, store, factory, seller, buyer, chairs, now
    ) -> None:
        """Products of a validated cart stay visible during the window."""
        cart = await factory.cart(buyer, validated=True, date=now - timedelta(days=6, hours=23))
        product = await factory.product(seller, chairs, cart=cart, status=ProductStatus.SOLD)

        bought = await store.bought_by_user(buyer.id, now=now)

        assert [p.id for p in bought] == [product.id]
        assert bought[0].seller.pseudo == "seller"

    @pytest.mark.asyncio
    async def test_window_lapses_after_seven_days(
        self, store, factory, seller, buyer, chairs, now
    ) -> None:
        """At exactly seven days and after, the product drops out."""
        expired = await factory.cart(buyer, validated=True, date=now - timedelta(days=7))
        older = await factory.cart(buyer, validated=True, date=now - timedelta(days=30))
        await factory.product(seller, chairs, cart=expired, status=ProductStatus.SOLD)
        await factory.product(seller, chairs, cart=older, status=ProductStatus.SOLD)

        assert await store.bought_by_user(buyer.id, now=now) == []

    @pytest.mark.asyncio
    async def test_same_cart_moves_out_of_window_over_time(
        self, store, factory, seller, buyer, chairs, now
    ) -> None:
        """Only the reference time changes; the link itself is untouched."""
        cart = await factory.cart(buyer, validated=True, date=now)
        product = await factory.product(seller, chairs, cart=cart, status=ProductStatus.SOLD)

        assert len(await store.bought_by_user(buyer.id, now=now + timedelta(days=6))) == 1
        assert await store.bought_by_user(buyer.id, now=now + timedelta(days=8)) == []
        assert (await store.by_id(product.id)).cart_id == cart.id

    @pytest.mark.asyncio
    async def test_unvalidated_cart_excluded(
        self, store, factory, seller, buyer, chairs, now
    ) -> None:
        """Items in a pending cart are not bought yet."""
        cart = await factory.cart(buyer, validated=False, date=now)
        await factory.product(seller, chairs, cart=cart)

        assert await store.bought_by_user(buyer.id, now=now) == []

    @pytest.mark.asyncio
    async def test_other_buyers_cart_excluded(
        self, store, factory, seller, buyer, chairs, now
    ) -> None:
        """Only the user's own carts count."""
        someone = await factory.user("someone")
        cart = await factory.cart(someone, validated=True, date=now)
        await factory.product(seller, chairs, cart=cart, status=ProductStatus.SOLD)

        assert await store.bought_by_user(buyer.id, now=now) == []

    @pytest.mark.asyncio
    async def test_custom_window(self, session, factory, seller, buyer, chairs, now) -> None:
        """The window length is configurable."""
        cart = await factory.cart(buyer, validated=True, date=now - timedelta(days=10))
        await factory.product(seller, chairs, cart=cart, status=ProductStatus.SOLD)

        store = ProductLifecycleStore(session, bought_window_days=14)
        assert len(await store.bought_by_user(buyer.id, now=now)) == 1


class TestSellerViews:
    """In sale, in cart and sold views of a seller."""

    @pytest.fixture(autouse=True)
    async def listings(self, factory, seller, buyer, chairs, now) -> dict[str, Product]:
        other_seller = await factory.user("other")
        pending = await factory.cart(buyer, validated=False, date=now)
        paid = await factory.cart(buyer, validated=True, date=now)

        return {
            "free": await factory.product(seller, chairs, title="Free"),
            "pending": await factory.product(seller, chairs, title="Pending", cart=pending),
            "sold": await factory.product(
                seller, chairs, title="Sold", cart=paid, status=ProductStatus.SOLD
            ),
            "other": await factory.product(other_seller, chairs, title="Other"),
        }

    @pytest.mark.asyncio
    async def test_in_sale_includes_pending_cart(self, store, seller) -> None:
        """For-sale products are listed whether or not a cart holds them."""
        in_sale = await store.in_sale_by_user(seller.id)
        assert [p.title for p in in_sale] == ["Free", "Pending"]

    @pytest.mark.asyncio
    async def test_in_sale_differs_from_public_catalog(
        self, store, session, seller, listings
    ) -> None:
        """A reserved product is in the seller's view but not the catalog."""
        pending_id = listings["pending"].id

        in_sale = await store.in_sale_by_user(seller.id)
        catalog = await CatalogQueryEngine(session, page_size=12).fetch_page(SearchTerms())

        assert pending_id in {p.id for p in in_sale}
        assert pending_id not in {p.id for p in catalog.products}

    @pytest.mark.asyncio
    async def test_in_cart(self, store, seller) -> None:
        """Products held by any cart, validated or not."""
        in_cart = await store.in_cart_by_user(seller.id)
        assert [p.title for p in in_cart] == ["Pending", "Sold"]

    @pytest.mark.asyncio
    async def test_sold(self, store, seller) -> None:
        """Only sold products."""
        sold = await store.sold_by_user(seller.id)

        assert [p.title for p in sold] == ["Sold"]
        assert sold[0].status is ProductStatus.SOLD

    @pytest.mark.asyncio
    async def test_unknown_user_has_nothing(self, store) -> None:
        """Views of a user without products are empty."""
        assert await store.in_sale_by_user(9999) == []
        assert await store.in_cart_by_user(9999) == []
        assert await store.sold_by_user(9999) == []


class TestLatest:
    """Latest products across sellers."""

    @pytest.fixture(autouse=True)
    async def catalog(self, factory, seller, chairs) -> None:
        await factory.products(8, seller, chairs)

    @pytest.mark.asyncio
    async def test_latest_unbounded(self, store) -> None:
        """A limit of 0 returns everything, newest id first."""
        latest = await store.latest(0)
        ids = [p.id for p in latest]

        assert len(latest) == 8
        assert ids == sorted(ids, reverse=True)

    @pytest.mark.asyncio
    async def test_latest_none_is_unbounded(self, store) -> None:
        """None behaves like 0."""
        assert len(await store.latest(None)) == 8

    @pytest.mark.asyncio
    async def test_latest_bounded(self, store) -> None:
        """A positive limit bounds the result."""
        latest = await store.latest(5)

        assert len(latest) == 5
        assert latest[0].title == "Item 07"

    @pytest.mark.asyncio
    async def test_latest_includes_unlisted(self, store, factory, seller, buyer, chairs) -> None:
        """Latest is not restricted to publicly listed products."""
        cart = await factory.cart(buyer)
        reserved = await factory.product(seller, chairs, title="Reserved", cart=cart)

        latest = await store.latest(1)
        assert [p.id for p in latest] == [reserved.id]


class TestSingleProduct:
    """by_id and by_id_with_category."""

    @pytest.mark.asyncio
    async def test_by_id(self, store, factory, seller, chairs) -> None:
        """A product is returned with seller display fields."""
        product = await factory.product(seller, chairs, photo=["a.jpg", "b.jpg"])

        view = await store.by_id(product.id)

        assert view.id == product.id
        assert view.photo == ["a.jpg", "b.jpg"]
        assert view.seller.pseudo == "seller"
        assert view.seller.photo == "/avatars/seller.png"

    @pytest.mark.asyncio
    async def test_by_id_missing(self, store) -> None:
        """Missing products raise ProductNotFoundError."""
        with pytest.raises(ProductNotFoundError) as exc_info:
            await store.by_id(404)
        assert exc_info.value.details == {"product_id": 404}

    @pytest.mark.asyncio
    async def test_by_id_with_category(self, store, factory, seller, chairs) -> None:
        """Detail view carries category and seller contact."""
        product = await factory.product(seller, chairs)

        detail = await store.by_id_with_category(product.id)

        assert detail.product.id == product.id
        assert detail.category.title == "Chairs"
        assert detail.category.logo == "/logos/chair.svg"
        assert detail.contact.email == "seller@example.com"
        assert detail.contact.address == "1 rue des Puces"
        assert detail.contact.phone_number == "0600000000"

    @pytest.mark.asyncio
    async def test_by_id_with_category_missing(self, store) -> None:
        """Missing products raise ProductNotFoundError."""
        with pytest.raises(ProductNotFoundError):
            await store.by_id_with_category(404)


class TestDelete:
    """Hard delete."""

    @pytest.mark.asyncio
    async def test_delete_removes_product(self, store, factory, seller, chairs) -> None:
        """The product is gone afterwards."""
        product = await factory.product(seller, chairs)

        await store.delete(product.id)

        with pytest.raises(ProductNotFoundError):
            await store.by_id(product.id)

    @pytest.mark.asyncio
    async def test_delete_is_idempotent(self, store, session, factory, seller, chairs) -> None:
        """Deleting twice, or deleting a missing id, is not an error."""
        keep = await factory.product(seller, chairs, title="Keep")
        gone = await factory.product(seller, chairs, title="Gone")

        await store.delete(gone.id)
        await store.delete(gone.id)
        await store.delete(123456)

        count = (await session.execute(select(func.count(Product.id)))).scalar_one()
        assert count == 1
        assert (await store.by_id(keep.id)).title == "Keep"


class TestLifecycleWrites:
    """create, reserve and mark_cart_sold."""

    @pytest.mark.asyncio
    async def test_create(self, store, seller, chairs) -> None:
        """A created product is for sale, outside any cart."""
        draft = ProductDraft(
            title="Rattan chair",
            description="Light and sturdy",
            price=35,
            category_id=chairs.id,
            photo=("one.jpg", "two.jpg"),
            room="living room",
            material="rattan",
            condition="good",
            info="pickup only",
        )

        view = await store.create(draft, seller_id=seller.id)

        assert view.id is not None
        assert view.status is ProductStatus.FOR_SALE
        assert view.cart_id is None
        assert view.photo == ["one.jpg", "two.jpg"]
        assert view.seller.pseudo == "seller"
        assert (await store.by_id(view.id)).price == 35

    @pytest.mark.asyncio
    async def test_create_rejects_free_product(self, chairs) -> None:
        """Price 0 never reaches the store."""
        with pytest.raises(InvalidPriceError):
            ProductDraft(title="Gift", description="Free", price=0, category_id=chairs.id)

    @pytest.mark.asyncio
    async def test_reserve(self, store, factory, seller, buyer, chairs) -> None:
        """Reserving links the product to the cart and hides it from the catalog."""
        product = await factory.product(seller, chairs)
        cart = await factory.cart(buyer)

        await store.reserve(product.id, cart.id)

        in_cart = await store.in_cart_by_user(seller.id)
        assert [p.id for p in in_cart] == [product.id]
        assert in_cart[0].cart_id == cart.id
        assert not in_cart[0].is_listed

    @pytest.mark.asyncio
    async def test_reserve_already_reserved(self, store, factory, seller, buyer, chairs) -> None:
        """A product already in a cart cannot be reserved again."""
        first = await factory.cart(buyer)
        second = await factory.cart(buyer)
        product = await factory.product(seller, chairs, cart=first)

        with pytest.raises(ProductNotAvailableError) as exc_info:
            await store.reserve(product.id, second.id)
        assert exc_info.value.details["cart_id"] == first.id

    @pytest.mark.asyncio
    async def test_reserve_sold(self, store, factory, seller, buyer, chairs) -> None:
        """Sold products cannot be reserved."""
        product = await factory.product(seller, chairs, status=ProductStatus.SOLD)
        cart = await factory.cart(buyer)

        with pytest.raises(ProductNotAvailableError):
            await store.reserve(product.id, cart.id)

    @pytest.mark.asyncio
    async def test_reserve_missing(self, store, factory, buyer) -> None:
        """Reserving a missing product raises ProductNotFoundError."""
        cart = await factory.cart(buyer)
        with pytest.raises(ProductNotFoundError):
            await store.reserve(404, cart.id)

    @pytest.mark.asyncio
    async def test_mark_cart_sold(self, store, factory, seller, buyer, chairs, now) -> None:
        """Every for-sale product of the cart becomes sold and stays linked."""
        cart = await factory.cart(buyer, validated=True, date=now)
        other_cart = await factory.cart(buyer)
        await factory.product(seller, chairs, title="A", cart=cart)
        await factory.product(seller, chairs, title="B", cart=cart)
        await factory.product(seller, chairs, title="C", cart=other_cart)

        updated = await store.mark_cart_sold(cart.id)

        assert updated == 2
        sold = await store.sold_by_user(seller.id)
        assert [p.title for p in sold] == ["A", "B"]
        assert all(p.cart_id == cart.id for p in sold)
        assert len(await store.bought_by_user(buyer.id, now=now)) == 2

    @pytest.mark.asyncio
    async def test_mark_cart_sold_skips_already_sold(
        self, store, factory, seller, buyer, chairs
    ) -> None:
        """Already sold products are not counted again."""
        cart = await factory.cart(buyer, validated=True)
        await factory.product(seller, chairs, cart=cart, status=ProductStatus.SOLD)

        assert await store.mark_cart_sold(cart.id) == 0

    @pytest.mark.asyncio
    async def test_mark_cart_sold_ignores_pending_cart(
        self, store, factory, seller, buyer, chairs
    ) -> None:
        """A cart that checkout has not validated sells nothing."""
        cart = await factory.cart(buyer, validated=False)
        await factory.product(seller, chairs, title="Held", cart=cart)

        assert await store.mark_cart_sold(cart.id) == 0
        assert await store.sold_by_user(seller.id) == []
        assert [p.title for p in await store.in_sale_by_user(seller.id)] == ["Held"]

    @pytest.mark.asyncio
    async def test_create_with_unknown_seller(self, store, chairs) -> None:
        """An unknown seller is a store error, not a half-built view."""
        draft = ProductDraft(title="Orphan", description="No seller", price=10, category_id=chairs.id)

        with pytest.raises(IntegrityError):
            await store.create(draft, seller_id=9999)
