"""Read models returned by the catalog layer.

ORM rows never leave the data-access layer: queries convert them into
these frozen records, decoding the serialized photo column on the way.
"""

import json
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

import structlog

from brocante.catalog.models import Product
from brocante.domain.state_machines import ProductStatus

logger = structlog.get_logger()


def decode_photo(raw: str | None, product_id: int | None = None) -> list[str]:
    """Decode the JSON photo column into an ordered list of references.

    Malformed values decode to an empty list and are logged; decoding
    never raises.

    Args:
        raw: Stored column value.
        product_id: Owning product, for the log line.

    Returns:
        Image references in stored order.
    """
    if not raw:
        return []

    try:
        decoded: Any = json.loads(raw)
    except (TypeError, ValueError):
        logger.warning("photo_decode_failed", product_id=product_id, reason="invalid_json")
        return []

    if isinstance(decoded, str):
        return [decoded]
    if isinstance(decoded, list):
        return [str(item) for item in decoded if item is not None]

    logger.warning(
        "photo_decode_failed",
        product_id=product_id,
        reason="unexpected_shape",
        shape=type(decoded).__name__,
    )
    return []


def encode_photo(references: tuple[str, ...] | list[str]) -> str:
    """Serialize image references for the photo column."""
    return json.dumps(list(references))


@dataclass(frozen=True)
class SellerSummary:
    """Seller fields shown next to a product."""

    id: int
    pseudo: str
    photo: str | None
    rating: float


@dataclass(frozen=True)
class ProductView:
    """A product as listed in catalog and account pages.

    Attributes:
        id: Product identifier.
        title: Listing title.
        description: Listing description.
        price: Asking price.
        photo: Decoded image references.
        status: Lifecycle status.
        category_id: Category identifier.
        room: Room tag.
        material: Material tag.
        condition: Condition tag.
        info: Extra information tag.
        created_at: Creation timestamp.
        cart_id: Cart holding the product, if any.
        seller: Seller display fields.
    """

    id: int
    title: str
    description: str | None
    price: int
    photo: list[str]
    status: ProductStatus
    category_id: int
    room: str | None
    material: str | None
    condition: str | None
    info: str | None
    created_at: datetime
    cart_id: int | None
    seller: SellerSummary

    @classmethod
    def from_model(cls, product: Product) -> "ProductView":
        """Build a view from a product loaded together with its seller.

        Args:
            product: ORM product whose ``seller`` relationship is loaded.

        Returns:
            ProductView with decoded photos.
        """
        seller = product.seller
        return cls(
            id=product.id,
            title=product.title,
            description=product.description,
            price=product.price,
            photo=decode_photo(product.photo, product.id),
            status=ProductStatus(product.status),
            category_id=product.category_item_id,
            room=product.room,
            material=product.material,
            condition=product.condition,
            info=product.info,
            created_at=product.created_at,
            cart_id=product.cart_id,
            seller=SellerSummary(
                id=seller.id,
                pseudo=seller.pseudo,
                photo=seller.photo,
                rating=float(seller.rating),
            ),
        )

    @property
    def is_listed(self) -> bool:
        """Whether the product may appear in the public catalog."""
        return self.cart_id is None and self.status is ProductStatus.FOR_SALE


@dataclass(frozen=True)
class SellerContact:
    """Seller contact details for the product detail page."""

    pseudo: str
    address: str | None
    email: str
    phone_number: str | None
    rating: float


@dataclass(frozen=True)
class CategorySummary:
    """Category title and logo."""

    id: int
    title: str
    logo: str | None


@dataclass(frozen=True)
class ProductDetail:
    """A product with its category and full seller contact."""

    product: ProductView
    category: CategorySummary
    contact: SellerContact

    @classmethod
    def from_model(cls, product: Product) -> "ProductDetail":
        """Build a detail view from a product loaded with seller and category."""
        seller = product.seller
        category = product.category
        return cls(
            product=ProductView.from_model(product),
            category=CategorySummary(id=category.id, title=category.title, logo=category.logo),
            contact=SellerContact(
                pseudo=seller.pseudo,
                address=seller.address,
                email=seller.email,
                phone_number=seller.phone_number,
                rating=float(seller.rating),
            ),
        )


@dataclass
class CatalogPage:
    """One page of the public catalog.

    Attributes:
        products: Products on this page, at most one page size long.
        current_page: The page that was asked for.
        pages_count: Number of pages for the current filter.
        total: Number of matching listed products.
    """

    products: list[ProductView] = field(default_factory=list)
    current_page: int = 1
    pages_count: int = 0
    total: int = 0

    @property
    def is_out_of_range(self) -> bool:
        """Whether the requested page lies past the last page."""
        return self.current_page > self.pages_count

    @property
    def has_next(self) -> bool:
        """Check if there's a next page."""
        return self.current_page < self.pages_count

    @property
    def has_prev(self) -> bool:
        """Check if there's a previous page."""
        return self.current_page > 1
