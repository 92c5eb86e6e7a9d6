"""Demo marketplace generator with deterministic seeding.

Builds users, categories, carts and second-hand products as ORM objects
ready to be added to a session. Uses seeded random for reproducibility.
"""

import hashlib
import json
import random
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from decimal import Decimal

from brocante.catalog.models import Cart, CategoryItem, Product, User
from brocante.domain.state_machines import ProductStatus


# ============================================================================
# Constants
# ============================================================================

CATEGORIES: list[tuple[str, str]] = [
    ("Chairs", "chair"),
    ("Tables", "table"),
    ("Lighting", "lamp"),
    ("Storage", "shelf"),
    ("Tableware", "plate"),
    ("Decoration", "vase"),
]

# (min, max) asking price per category, in whole euros
PRICE_RANGES: dict[str, tuple[int, int]] = {
    "Chairs": (10, 150),
    "Tables": (30, 400),
    "Lighting": (5, 120),
    "Storage": (20, 300),
    "Tableware": (2, 60),
    "Decoration": (3, 90),
}

ADJECTIVES = [
    "Vintage",
    "Rustic",
    "Antique",
    "Retro",
    "Industrial",
    "Scandinavian",
    "Painted",
    "Handmade",
]

ROOMS = ["living room", "kitchen", "bedroom", "bathroom", "office", "garden"]
MATERIALS = ["oak", "pine", "metal", "glass", "rattan", "ceramic", "linen"]
CONDITIONS = ["like new", "good", "worn", "to restore"]
INFOS = ["pickup only", "delivery possible", "negotiable"]

PSEUDOS = [
    "chinebelle",
    "atelier_marc",
    "lucie_deco",
    "vieuxbois",
    "grenier_paul",
    "maison_nina",
    "brocjules",
    "rosalie",
]


# ============================================================================
# Generator Configuration
# ============================================================================


@dataclass
class GeneratorConfig:
    """Configuration for marketplace generation.

    Attributes:
        seed: Random seed for reproducibility.
        user_count: Number of members (sellers and buyers).
        products_per_category: Number of products per category.
        reserved_ratio: Share of products put into a pending cart.
        sold_ratio: Share of products sold through a validated cart.
    """

    seed: int = 42
    user_count: int = 6
    products_per_category: int = 10
    reserved_ratio: float = 0.1
    sold_ratio: float = 0.1

    @classmethod
    def small(cls) -> "GeneratorConfig":
        """Create config for a small marketplace (~30 products)."""
        return cls(seed=42, user_count=4, products_per_category=5)

    @classmethod
    def full(cls) -> "GeneratorConfig":
        """Create config for a full marketplace (~120 products)."""
        return cls(seed=42, user_count=8, products_per_category=20)


@dataclass
class Marketplace:
    """Generated objects, in insertion order."""

    users: list[User] = field(default_factory=list)
    categories: list[CategoryItem] = field(default_factory=list)
    carts: list[Cart] = field(default_factory=list)
    products: list[Product] = field(default_factory=list)

    def all_objects(self) -> list[object]:
        """Every generated object, for ``session.add_all``."""
        return [*self.users, *self.categories, *self.carts, *self.products]


# ============================================================================
# Marketplace Generator
# ============================================================================


class MarketplaceGenerator:
    """Generates a demo marketplace with deterministic seeding.

    Example usage:
        marketplace = MarketplaceGenerator(GeneratorConfig.small()).generate()
        session.add_all(marketplace.all_objects())
    """

    def __init__(self, config: GeneratorConfig, now: datetime | None = None) -> None:
        """Initialize generator with configuration.

        Args:
            config: Generator configuration.
            now: Reference time for creation and cart dates.
        """
        self.config = config
        self.rng = random.Random(config.seed)
        self.now = now or datetime.now(timezone.utc)

    def _deterministic_seed(self, *args: str | int) -> int:
        """Create deterministic seed from arguments."""
        data = "|".join(str(a) for a in args)
        hash_bytes = hashlib.md5(data.encode()).digest()
        return int.from_bytes(hash_bytes[:4], "big")

    def _photo(self, *args: str | int) -> str:
        """Placeholder image URL."""
        return f"https://picsum.photos/seed/{self._deterministic_seed(*args)}/400/400"

    def _generate_users(self) -> list[User]:
        users = []
        for i in range(self.config.user_count):
            pseudo = PSEUDOS[i % len(PSEUDOS)] + ("" if i < len(PSEUDOS) else str(i))
            users.append(
                User(
                    pseudo=pseudo,
                    photo=self._photo("user", i),
                    rating=Decimal(str(round(self.rng.uniform(2.5, 5.0), 1))),
                    address=f"{self.rng.randint(1, 120)} rue des Puces",
                    email=f"{pseudo}@example.com",
                    phone_number=f"06{self.rng.randint(10000000, 99999999)}",
                )
            )
        return users

    def _generate_product(
        self,
        category: CategoryItem,
        noun: str,
        index: int,
        seller: User,
    ) -> Product:
        rng = random.Random(self._deterministic_seed(self.config.seed, category.title, index))
        adj = rng.choice(ADJECTIVES)
        material = rng.choice(MATERIALS)
        min_price, max_price = PRICE_RANGES[category.title]
        photos = [self._photo(category.title, index, n) for n in range(rng.randint(1, 3))]

        return Product(
            title=f"{adj} {material} {noun}"[:100],
            description=f"{adj} {noun} in {material}, found in a {rng.choice(ROOMS)}.",
            price=rng.randint(min_price, max_price),
            photo=json.dumps(photos),
            status=ProductStatus.FOR_SALE.value,
            seller=seller,
            category=category,
            room=rng.choice(ROOMS),
            material=material,
            condition=rng.choice(CONDITIONS),
            info=rng.choice(INFOS),
            created_at=self.now - timedelta(hours=rng.randint(1, 24 * 60)),
        )

    def generate(self) -> Marketplace:
        """Generate the whole marketplace.

        Returns:
            Users, categories, carts and products.
        """
        marketplace = Marketplace()
        marketplace.users = self._generate_users()
        marketplace.categories = [
            CategoryItem(title=title, logo=f"/assets/logos/{noun}.svg", in_carousel=i < 4)
            for i, (title, noun) in enumerate(CATEGORIES)
        ]

        for category, (_, noun) in zip(marketplace.categories, CATEGORIES):
            for i in range(self.config.products_per_category):
                seller = self.rng.choice(marketplace.users)
                marketplace.products.append(self._generate_product(category, noun, i, seller))

        for product in marketplace.products:
            draw = self.rng.random()
            if draw < self.config.sold_ratio:
                if self._put_in_cart(marketplace, product, validated=True):
                    product.status = ProductStatus.SOLD.value
            elif draw < self.config.sold_ratio + self.config.reserved_ratio:
                self._put_in_cart(marketplace, product, validated=False)

        return marketplace

    def _put_in_cart(self, marketplace: Marketplace, product: Product, validated: bool) -> bool:
        """Attach a product to a new cart owned by someone other than its seller."""
        buyers = [u for u in marketplace.users if u is not product.seller]
        if not buyers:
            return False
        cart = Cart(
            user=self.rng.choice(buyers),
            status_validation=validated,
            date=self.now - timedelta(days=self.rng.randint(0, 14)),
        )
        marketplace.carts.append(cart)
        product.cart = cart
        return True

    @property
    def expected_count(self) -> int:
        """Get expected number of products."""
        return len(CATEGORIES) * self.config.products_per_category
