"""Shared FastAPI dependencies."""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from brocante.catalog.query import CatalogQueryEngine
from brocante.catalog.store import ProductLifecycleStore
from brocante.infrastructure.database import get_session


def get_catalog_engine(
    session: Annotated[AsyncSession, Depends(get_session)],
) -> CatalogQueryEngine:
    """Catalog query engine bound to the request session."""
    return CatalogQueryEngine(session)


def get_product_store(
    session: Annotated[AsyncSession, Depends(get_session)],
) -> ProductLifecycleStore:
    """Product store bound to the request session."""
    return ProductLifecycleStore(session)
