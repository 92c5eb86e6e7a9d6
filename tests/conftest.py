"""Shared fixtures: in-memory database and marketplace factory."""

import json
from collections.abc import AsyncGenerator
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Any

import pytest
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from brocante.catalog.models import Cart, CategoryItem, Product, User
from brocante.domain.state_machines import ProductStatus
from brocante.infrastructure.database import Base

FIXED_NOW = datetime(2026, 3, 15, 12, 0, tzinfo=timezone.utc)


# ============================================================================
# Database Fixtures
# ============================================================================


@pytest.fixture
async def db_engine() -> AsyncGenerator[AsyncEngine, None]:
    """In-memory SQLite engine with the schema created and foreign keys enforced."""
    engine = create_async_engine("sqlite+aiosqlite:///:memory:", poolclass=StaticPool)

    @event.listens_for(engine.sync_engine, "connect")
    def enable_foreign_keys(dbapi_connection, connection_record) -> None:
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(db_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Session factory bound to the test engine."""
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def session(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    """Session for arranging and asserting test data."""
    async with session_factory() as session:
        yield session


# ============================================================================
# Marketplace Factory
# ============================================================================


class MarketplaceFactory:
    """Creates users, categories, carts and products in a session.

    Each product gets a creation time one minute after the previous one,
    so "date desc" ordering is predictable.
    """

    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self._clock = FIXED_NOW - timedelta(days=30)
        self._users = 0

    async def user(self, pseudo: str | None = None, **kwargs: Any) -> User:
        self._users += 1
        pseudo = pseudo or f"member{self._users}"
        user = User(
            pseudo=pseudo,
            email=f"{pseudo}@example.com",
            rating=kwargs.pop("rating", Decimal("4.5")),
            photo=kwargs.pop("photo", f"/avatars/{pseudo}.png"),
            **kwargs,
        )
        self.session.add(user)
        await self.session.flush()
        return user

    async def category(self, title: str = "Chairs", logo: str | None = "/logos/chair.svg") -> CategoryItem:
        category = CategoryItem(title=title, logo=logo)
        self.session.add(category)
        await self.session.flush()
        return category

    async def cart(
        self,
        owner: User,
        validated: bool = False,
        date: datetime | None = None,
    ) -> Cart:
        cart = Cart(user=owner, status_validation=validated, date=date or FIXED_NOW)
        self.session.add(cart)
        await self.session.flush()
        return cart

    async def product(
        self,
        seller: User,
        category: CategoryItem,
        title: str = "Oak chair",
        price: int = 40,
        status: ProductStatus = ProductStatus.FOR_SALE,
        cart: Cart | None = None,
        photo: list[str] | None = None,
        raw_photo: str | None = None,
        **kwargs: Any,
    ) -> Product:
        self._clock += timedelta(minutes=1)
        product = Product(
            title=title,
            description=kwargs.pop("description", f"A nice {title.lower()}"),
            price=price,
            photo=raw_photo if raw_photo is not None else json.dumps(photo or ["front.jpg"]),
            status=status.value,
            seller=seller,
            category=category,
            cart=cart,
            created_at=kwargs.pop("created_at", self._clock),
            **kwargs,
        )
        self.session.add(product)
        await self.session.flush()
        return product

    async def products(self, count: int, seller: User, category: CategoryItem, **kwargs: Any) -> list[Product]:
        return [
            await self.product(seller, category, title=f"Item {i:02d}", **kwargs)
            for i in range(count)
        ]


@pytest.fixture
def factory(session: AsyncSession) -> MarketplaceFactory:
    """Marketplace factory bound to the test session."""
    return MarketplaceFactory(session)


@pytest.fixture
def now() -> datetime:
    """Reference time the factory's cart dates are based on."""
    return FIXED_NOW
