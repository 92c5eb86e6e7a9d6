"""Domain layer - value objects, product state machine, domain errors.

Example usage:
    from brocante.domain import ProductDraft, ProductStatus

    draft = ProductDraft(title="Oak chair", description="Solid", price=40, category_id=3)
    assert ProductStatus.FOR_SALE.can_transition_to(ProductStatus.SOLD)
"""

from brocante.domain.base import ValueObject
from brocante.domain.exceptions import (
    DomainError,
    InvalidPriceError,
    InvalidSortError,
    ProductError,
    ProductNotAvailableError,
    ProductNotFoundError,
)
from brocante.domain.state_machines import ProductStatus
from brocante.domain.value_objects import ProductDraft

__all__ = [
    # Base
    "ValueObject",
    # Value objects
    "ProductDraft",
    # State machines
    "ProductStatus",
    # Exceptions
    "DomainError",
    "InvalidPriceError",
    "InvalidSortError",
    "ProductError",
    "ProductNotAvailableError",
    "ProductNotFoundError",
]
