"""Catalog search terms.

Immutable description of what a visitor asked the catalog for. Inputs
come straight from query strings, so construction normalizes them rather
than rejecting them.
"""

import dataclasses
import re
from dataclasses import dataclass
from typing import Any, Self

from sqlalchemy import ColumnElement, false

from brocante.catalog.models import Product
from brocante.domain.base import ValueObject

_INTEGER_PATTERN = re.compile(r"^[+-]?\d+$")

# Largest value an INTEGER column holds
MAX_DB_INTEGER = 2**31 - 1


def _parse_positive_int(raw: Any) -> int | None:
    """Return ``raw`` as an integer >= 1, or None when it is not one."""
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        value = raw
    elif isinstance(raw, str) and _INTEGER_PATTERN.match(raw.strip()):
        value = int(raw.strip())
    else:
        return None
    return value if value >= 1 else None


def _escape_like(value: str) -> str:
    """Escape LIKE wildcards so user input matches literally."""
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


@dataclass(frozen=True)
class SearchTerms(ValueObject):
    """Free-text search, category filter and requested page.

    ``page`` is always an integer between 1 and ``MAX_DB_INTEGER`` after
    construction; anything else (missing, non-numeric, zero, negative)
    becomes 1 and larger pages are capped. Offset arithmetic downstream
    relies on it. A ``category_id`` too large for the column is kept and
    filters out every product.

    Example:
        terms = SearchTerms.from_request(page="3", search="chair", category_id=None)
        terms.page                   # 3
        terms.to_filter_predicate()  # [lower(products.title) LIKE lower(:param)]
    """

    page: Any = 1
    search: str | None = None
    category_id: Any = None

    def __post_init__(self) -> None:
        """Normalize raw inputs."""
        page = _parse_positive_int(self.page) or 1
        object.__setattr__(self, "page", min(page, MAX_DB_INTEGER))
        object.__setattr__(self, "category_id", _parse_positive_int(self.category_id))
        search = self.search.strip() if isinstance(self.search, str) else None
        object.__setattr__(self, "search", search or None)

    @classmethod
    def from_request(
        cls,
        page: Any = None,
        search: str | None = None,
        category_id: Any = None,
    ) -> Self:
        """Create search terms from untrusted request values.

        Args:
            page: Requested page, usually a query-string value.
            search: Free-text search.
            category_id: Category filter.

        Returns:
            Normalized SearchTerms.
        """
        return cls(page=page, search=search, category_id=category_id)

    def with_page(self, page: Any) -> Self:
        """Copy these terms for another page (normalized the same way)."""
        return dataclasses.replace(self, page=page)

    def to_filter_predicate(self) -> list[ColumnElement[bool]]:
        """Translate the terms into filter conditions.

        Returns:
            Conditions to AND together; empty when nothing filters.
        """
        conditions: list[ColumnElement[bool]] = []

        if self.search:
            pattern = f"%{_escape_like(self.search)}%"
            conditions.append(Product.title.ilike(pattern, escape="\\"))

        if self.category_id is not None and self.category_id > MAX_DB_INTEGER:
            conditions.append(false())
        elif self.category_id is not None:
            conditions.append(Product.category_item_id == self.category_id)

        return conditions
