"""Value objects for the domain layer."""

from dataclasses import dataclass, field

from brocante.domain.base import ValueObject
from brocante.domain.exceptions import InvalidPriceError


@dataclass(frozen=True)
class ProductDraft(ValueObject):
    """A product listing about to be created.

    Price is a positive whole amount; it is checked here once and never
    re-validated when products are read back.

    Attributes:
        title: Listing title.
        description: Free-text description.
        price: Asking price, strictly positive.
        category_id: Category the listing belongs to.
        photo: Ordered image references.
        room: Room tag (e.g. "salon").
        material: Material tag.
        condition: Condition tag.
        info: Extra information tag.
    """

    title: str
    description: str
    price: int
    category_id: int
    photo: tuple[str, ...] = field(default_factory=tuple)
    room: str | None = None
    material: str | None = None
    condition: str | None = None
    info: str | None = None

    def __post_init__(self) -> None:
        """Validate draft constraints."""
        if isinstance(self.price, bool) or not isinstance(self.price, int) or self.price <= 0:
            raise InvalidPriceError(self.price)
        if not self.title or not self.title.strip():
            raise ValueError("Product title cannot be empty")
        object.__setattr__(self, "title", self.title.strip())
        object.__setattr__(self, "photo", tuple(self.photo))
