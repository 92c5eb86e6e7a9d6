"""State machines for domain entities.

Products only move one way: once sold they stay sold. Membership in a
cart is a separate relation and not a status.
"""

from enum import Enum


class ProductStatus(str, Enum):
    """Product lifecycle states.

    State diagram:
        FOR_SALE ──── cart validated ────► SOLD
    """

    FOR_SALE = "for_sale"
    SOLD = "sold"

    def can_transition_to(self, target: "ProductStatus") -> bool:
        """Check if transition to target state is valid.

        Args:
            target: Target state to transition to.

        Returns:
            True if transition is valid.
        """
        return target in _PRODUCT_TRANSITIONS.get(self, set())

    def allowed_transitions(self) -> list["ProductStatus"]:
        """Get list of valid target states.

        Returns:
            List of states that can be transitioned to.
        """
        return list(_PRODUCT_TRANSITIONS.get(self, set()))

    def is_terminal(self) -> bool:
        """Check if this is a terminal (final) state."""
        return len(_PRODUCT_TRANSITIONS.get(self, set())) == 0


# Defined outside the enum to avoid Enum member restrictions
_PRODUCT_TRANSITIONS: dict[ProductStatus, set[ProductStatus]] = {
    ProductStatus.FOR_SALE: {ProductStatus.SOLD},
    ProductStatus.SOLD: set(),
}
