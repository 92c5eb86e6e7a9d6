"""SQLAlchemy models for the marketplace catalog.

Defines users, category items, carts and products. Users and categories
are read-only from the catalog's point of view; they are joined into
product reads for display.
"""

from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from brocante.domain.state_machines import ProductStatus
from brocante.infrastructure.database import Base


class User(Base):
    """Marketplace member, acting as seller or buyer.

    Attributes:
        id: User identifier.
        pseudo: Public display name.
        photo: Avatar image reference.
        rating: Average seller rating (0.0-5.0).
        address: Postal address.
        email: Contact email.
        phone_number: Contact phone number.
    """

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    pseudo: Mapped[str] = mapped_column(String(100), nullable=False)
    photo: Mapped[str | None] = mapped_column(String(500), nullable=True)
    rating: Mapped[Decimal] = mapped_column(Numeric(2, 1), nullable=False, default=Decimal("0.0"))
    address: Mapped[str | None] = mapped_column(String(500), nullable=True)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    phone_number: Mapped[str | None] = mapped_column(String(50), nullable=True)

    products: Mapped[list["Product"]] = relationship("Product", back_populates="seller")

    def __repr__(self) -> str:
        """String representation."""
        return f"<User(id={self.id}, pseudo={self.pseudo})>"


class CategoryItem(Base):
    """Product category with its display logo."""

    __tablename__ = "category_items"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(100), nullable=False)
    logo: Mapped[str | None] = mapped_column(String(500), nullable=True)
    in_carousel: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    def __repr__(self) -> str:
        """String representation."""
        return f"<CategoryItem(id={self.id}, title={self.title})>"


class Cart(Base):
    """Buyer cart.

    Products join a cart through ``Product.cart_id``. The checkout flow
    flips ``status_validation`` once the purchase is confirmed.

    Attributes:
        id: Cart identifier.
        user_id: Buyer owning the cart.
        status_validation: Whether checkout validated the cart.
        date: Cart creation timestamp; starts the buyer visibility window.
    """

    __tablename__ = "carts"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    status_validation: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    user: Mapped["User"] = relationship("User")
    products: Mapped[list["Product"]] = relationship("Product", back_populates="cart")

    def __repr__(self) -> str:
        """String representation."""
        return f"<Cart(id={self.id}, user_id={self.user_id}, validated={self.status_validation})>"


class Product(Base):
    """Second-hand product listed by a seller.

    A product with a non-null ``cart_id`` is held by a buyer's cart and is
    hidden from the public catalog whatever its status.

    Attributes:
        id: Product identifier.
        title: Listing title.
        description: Listing description.
        price: Asking price, always > 0.
        photo: JSON array of image references, decoded on read.
        status: ProductStatus value.
        user_id: Seller.
        category_item_id: Category.
        room: Room tag.
        material: Material tag.
        condition: Condition tag.
        info: Extra information tag.
        created_at: Creation timestamp.
        cart_id: Cart holding the product, if any.
    """

    __tablename__ = "products"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    price: Mapped[int] = mapped_column(Integer, nullable=False)
    photo: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=ProductStatus.FOR_SALE.value, index=True
    )
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    category_item_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("category_items.id"), nullable=False, index=True
    )
    room: Mapped[str | None] = mapped_column(String(100), nullable=True)
    material: Mapped[str | None] = mapped_column(String(100), nullable=True)
    condition: Mapped[str | None] = mapped_column(String(100), nullable=True)
    info: Mapped[str | None] = mapped_column(String(255), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    cart_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("carts.id", ondelete="SET NULL"), nullable=True, index=True
    )

    # Relationships
    seller: Mapped["User"] = relationship("User", back_populates="products")
    category: Mapped["CategoryItem"] = relationship("CategoryItem")
    cart: Mapped[Cart | None] = relationship("Cart", back_populates="products")

    __table_args__ = (
        CheckConstraint("price > 0", name="ck_products_price_positive"),
    )

    def __repr__(self) -> str:
        """String representation."""
        return f"<Product(id={self.id}, title={self.title[:30]}, status={self.status})>"
