"""Domain exceptions.

All domain-level errors that represent business rule violations.
Store failures are not wrapped here: SQLAlchemy errors propagate
unchanged to the caller.
"""

from typing import Any


class DomainError(Exception):
    """Base class for all domain exceptions.

    All domain errors should inherit from this class to allow
    catching domain-specific errors at the application layer.
    """

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """Initialize domain error.

        Args:
            message: Human-readable error message.
            details: Optional dictionary with additional error context.
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}


# ============================================================================
# Product Errors
# ============================================================================


class ProductError(DomainError):
    """Base class for product-related errors."""

    pass


class ProductNotFoundError(ProductError):
    """Raised when a single-product lookup finds nothing."""

    def __init__(self, product_id: int) -> None:
        """Initialize product not found error.

        Args:
            product_id: ID that was looked up.
        """
        super().__init__(
            f"Product {product_id} not found",
            details={"product_id": product_id},
        )


class ProductNotAvailableError(ProductError):
    """Raised when reserving a product that is sold or already in a cart."""

    def __init__(self, product_id: int, status: str, cart_id: int | None) -> None:
        """Initialize product not available error.

        Args:
            product_id: ID of the product.
            status: Current product status.
            cart_id: Cart currently holding the product, if any.
        """
        super().__init__(
            f"Product {product_id} is not available (status '{status}', cart {cart_id})",
            details={"product_id": product_id, "status": status, "cart_id": cart_id},
        )


class InvalidPriceError(ProductError):
    """Raised when a product is created with a non-positive price."""

    def __init__(self, price: int) -> None:
        """Initialize invalid price error.

        Args:
            price: The rejected price.
        """
        super().__init__(
            f"Product price must be greater than 0, got {price}",
            details={"price": price},
        )


# ============================================================================
# Catalog Errors
# ============================================================================


class InvalidSortError(DomainError):
    """Raised when a sort column or direction is not in the allow-list."""

    def __init__(self, field: str, value: str, allowed: list[str]) -> None:
        """Initialize invalid sort error.

        Args:
            field: Which sort parameter was rejected ("sort_by" or "sort_order").
            value: The rejected value.
            allowed: Accepted values.
        """
        super().__init__(
            f"Invalid {field} '{value}'. Allowed: {allowed}",
            details={"field": field, "value": value, "allowed": allowed},
        )
