"""API schemas.

Pydantic models for request/response validation and serialization.
"""

from datetime import datetime

from pydantic import BaseModel, Field

from brocante.catalog.views import CatalogPage, ProductDetail, ProductView
from brocante.domain.state_machines import ProductStatus


# ============================================================================
# Common Schemas
# ============================================================================


class ErrorResponse(BaseModel):
    """Standard error response.

    All API errors follow this format for consistency.
    """

    error_code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error message")
    details: list | dict = Field(default_factory=list, description="Additional error details")
    request_id: str | None = Field(default=None, description="Request ID for correlation")


# ============================================================================
# Product Schemas
# ============================================================================


class SellerSchema(BaseModel):
    """Seller display fields."""

    id: int
    pseudo: str
    photo: str | None = None
    rating: float


class ProductResponse(BaseModel):
    """A product as shown in listings."""

    id: int
    title: str
    description: str | None = None
    price: int = Field(..., description="Asking price, always greater than 0")
    photo: list[str] = Field(default_factory=list, description="Ordered image references")
    status: ProductStatus
    category_id: int
    room: str | None = None
    material: str | None = None
    condition: str | None = None
    info: str | None = None
    created_at: datetime
    cart_id: int | None = None
    seller: SellerSchema

    @classmethod
    def from_view(cls, view: ProductView) -> "ProductResponse":
        """Convert a ProductView to its response schema."""
        return cls(
            id=view.id,
            title=view.title,
            description=view.description,
            price=view.price,
            photo=view.photo,
            status=view.status,
            category_id=view.category_id,
            room=view.room,
            material=view.material,
            condition=view.condition,
            info=view.info,
            created_at=view.created_at,
            cart_id=view.cart_id,
            seller=SellerSchema(
                id=view.seller.id,
                pseudo=view.seller.pseudo,
                photo=view.seller.photo,
                rating=view.seller.rating,
            ),
        )


class CategorySchema(BaseModel):
    """Category title and logo."""

    id: int
    title: str
    logo: str | None = None


class SellerContactSchema(BaseModel):
    """Seller contact details."""

    pseudo: str
    address: str | None = None
    email: str
    phone_number: str | None = None
    rating: float


class ProductDetailResponse(BaseModel):
    """A product with category and seller contact."""

    product: ProductResponse
    category: CategorySchema
    contact: SellerContactSchema

    @classmethod
    def from_detail(cls, detail: ProductDetail) -> "ProductDetailResponse":
        """Convert a ProductDetail to its response schema."""
        return cls(
            product=ProductResponse.from_view(detail.product),
            category=CategorySchema(
                id=detail.category.id,
                title=detail.category.title,
                logo=detail.category.logo,
            ),
            contact=SellerContactSchema(
                pseudo=detail.contact.pseudo,
                address=detail.contact.address,
                email=detail.contact.email,
                phone_number=detail.contact.phone_number,
                rating=detail.contact.rating,
            ),
        )


class ProductListResponse(BaseModel):
    """Unpaginated product list."""

    items: list[ProductResponse]
    count: int


class CatalogPageResponse(BaseModel):
    """One page of the public catalog."""

    items: list[ProductResponse] = Field(..., description="Products on this page")
    current_page: int = Field(..., description="Page actually served (1-based)")
    pages_count: int = Field(..., description="Number of pages for this filter")
    total: int = Field(..., description="Number of matching listed products")
    has_next: bool
    has_prev: bool

    @classmethod
    def from_page(cls, page: CatalogPage) -> "CatalogPageResponse":
        """Convert a CatalogPage to its response schema."""
        return cls(
            items=[ProductResponse.from_view(p) for p in page.products],
            current_page=page.current_page,
            pages_count=page.pages_count,
            total=page.total,
            has_next=page.has_next,
            has_prev=page.has_prev,
        )


class ProductCreateRequest(BaseModel):
    """Request to list a new product."""

    seller_id: int = Field(..., ge=1, description="Seller listing the product")
    title: str = Field(..., min_length=2, max_length=20)
    description: str = Field(..., min_length=2, max_length=250)
    price: int = Field(..., description="Asking price, must be greater than 0")
    category_id: int = Field(..., ge=1)
    photo: list[str] = Field(..., min_length=1, description="Ordered image references")
    room: str = Field(..., min_length=1)
    material: str = Field(..., min_length=1)
    condition: str = Field(..., min_length=1)
    info: str = Field(..., min_length=1)
