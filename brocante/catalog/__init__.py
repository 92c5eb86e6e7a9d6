"""Product catalog: search terms, catalog queries and product lifecycle."""

from brocante.catalog.generator import GeneratorConfig, MarketplaceGenerator
from brocante.catalog.models import Cart, CategoryItem, Product, User
from brocante.catalog.query import CatalogQueryEngine
from brocante.catalog.search_terms import SearchTerms
from brocante.catalog.store import ProductLifecycleStore
from brocante.catalog.views import (
    CatalogPage,
    CategorySummary,
    ProductDetail,
    ProductView,
    SellerContact,
    SellerSummary,
    decode_photo,
)

__all__ = [
    # Models
    "Cart",
    "CategoryItem",
    "Product",
    "User",
    # Queries
    "CatalogQueryEngine",
    "ProductLifecycleStore",
    "SearchTerms",
    # Views
    "CatalogPage",
    "CategorySummary",
    "ProductDetail",
    "ProductView",
    "SellerContact",
    "SellerSummary",
    "decode_photo",
    # Generator
    "GeneratorConfig",
    "MarketplaceGenerator",
]
