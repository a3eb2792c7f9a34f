"""Sports catalog generator with deterministic seeding.

Generates a demo taxonomy (collections, categories, sub-categories,
brands) and product rows in the bulk-upload format. Uses seeded random
for reproducibility.
"""

import hashlib
import random
from collections.abc import Iterator
from dataclasses import dataclass
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from sportsmart.catalog.identifiers import slugify
from sportsmart.catalog.models import Brand, Category, Collection, SubCategory


# ============================================================================
# Constants
# ============================================================================

# Collection -> category -> sub-categories
TAXONOMY: dict[str, dict[str, list[str]]] = {
    "Team Sports": {
        "Cricket": ["Bats", "Balls", "Pads", "Gloves", "Helmets"],
        "Football": ["Balls", "Boots", "Shin Guards"],
        "Hockey": ["Sticks", "Balls"],
    },
    "Racquet Sports": {
        "Badminton": ["Racquets", "Shuttlecocks"],
        "Tennis": ["Racquets", "Balls"],
    },
    "Fitness": {
        "Training": ["Cones", "Skipping Ropes"],
    },
}

# Brands stocked per category
BRANDS_BY_CATEGORY: dict[str, list[str]] = {
    "Cricket": ["SG", "SS", "Kookaburra", "Gray-Nicolls"],
    "Football": ["Nivia", "Adidas", "Puma"],
    "Hockey": ["Vixen", "Adidas"],
    "Badminton": ["Yonex", "Li-Ning"],
    "Tennis": ["Wilson", "Head", "Yonex"],
    "Training": ["Nivia", "Cosco"],
}

# Shop price ranges by category (INR)
PRICE_RANGES: dict[str, tuple[int, int]] = {
    "Cricket": (499, 45000),
    "Football": (399, 15000),
    "Hockey": (599, 18000),
    "Badminton": (199, 22000),
    "Tennis": (299, 28000),
    "default": (199, 5000),
}

ADJECTIVES = [
    "Pro", "Elite", "Club", "Match", "Players", "Classic",
    "Xtreme", "Ultimate", "Test", "League", "Academy",
]

HSN_CODES: dict[str, str] = {
    "Cricket": "9506",
    "Football": "9506",
    "Hockey": "9506",
    "Badminton": "9506",
    "Tennis": "9506",
    "default": "9506",
}


# ============================================================================
# Generator Configuration
# ============================================================================


@dataclass
class SeedConfig:
    """Configuration for catalog generation.

    Attributes:
        seed: Random seed for reproducibility.
        products_per_sub_category: Number of products per sub-category.
        featured_ratio: Share of products flagged as featured.
        hidden_quote_ratio: Share of products hidden from the storefront.
    """

    seed: int = 42
    products_per_sub_category: int = 4
    featured_ratio: float = 0.15
    hidden_quote_ratio: float = 0.05

    @classmethod
    def small(cls) -> "SeedConfig":
        """Create config for a small demo catalog."""
        return cls(seed=42, products_per_sub_category=3)

    @classmethod
    def full(cls) -> "SeedConfig":
        """Create config for a larger catalog."""
        return cls(seed=42, products_per_sub_category=12)


# ============================================================================
# Catalog Generator
# ============================================================================


class CatalogGenerator:
    """Generates product rows for the demo taxonomy.

    Example usage:
        generator = CatalogGenerator(SeedConfig.small())
        for row in generator.generate():
            print(row["sku"], row["name"])
    """

    def __init__(self, config: SeedConfig) -> None:
        """Initialize generator with configuration.

        Args:
            config: Generator configuration.
        """
        self.config = config

    def _deterministic_seed(self, *args: str | int) -> int:
        data = "|".join(str(a) for a in args)
        hash_bytes = hashlib.md5(data.encode()).digest()
        return int.from_bytes(hash_bytes[:4], "big")

    def _generate_sku(self, category: str, sub_category: str, index: int) -> str:
        """Build a SKU like ``CRI-BAT-003``."""
        cat = "".join(c for c in category if c.isalpha())[:3].upper()
        sub = "".join(c for c in sub_category if c.isalpha())[:3].upper()
        return f"{cat}-{sub}-{index:03d}"

    def _generate_row(self, category: str, sub_category: str, index: int) -> dict[str, Any]:
        rng = random.Random(
            self._deterministic_seed(self.config.seed, category, sub_category, index)
        )

        brand = rng.choice(BRANDS_BY_CATEGORY[category])
        adj = rng.choice(ADJECTIVES)
        singular = sub_category[:-1] if sub_category.endswith("s") else sub_category
        name = f"{brand} {adj} {singular} {index + 1}"

        low, high = PRICE_RANGES.get(category, PRICE_RANGES["default"])
        mrp = rng.randint(low, high)
        # Round to ...99
        mrp = (mrp // 100) * 100 + 99
        shop = round(mrp * rng.uniform(0.8, 0.95))
        dealer = round(mrp * 0.7)

        return {
            "name": name,
            "sku": self._generate_sku(category, sub_category, index),
            "mrp_price": mrp,
            "shop_price": shop,
            "dealer_price": dealer,
            "counter_price": round(mrp * 0.85),
            "recommended_price": shop,
            "category": category,
            "sub_category": sub_category,
            "brand": brand,
            "description": f"{adj} grade {singular.lower()} from {brand} for {category.lower()}.",
            "short_description": f"{brand} {singular.lower()}",
            "hsn_code": HSN_CODES.get(category, HSN_CODES["default"]),
            "is_featured": rng.random() < self.config.featured_ratio,
            "unit": "1",
        }

    def generate(self) -> Iterator[dict[str, Any]]:
        """Generate all product rows.

        Yields:
            Rows in the bulk-upload format.
        """
        for categories in TAXONOMY.values():
            for category, sub_categories in categories.items():
                for sub_category in sub_categories:
                    for i in range(self.config.products_per_sub_category):
                        yield self._generate_row(category, sub_category, i)

    def generate_list(self) -> list[dict[str, Any]]:
        """Generate all product rows as a list."""
        return list(self.generate())

    @property
    def expected_count(self) -> int:
        """Get expected number of products."""
        sub_category_total = sum(
            len(subs) for categories in TAXONOMY.values() for subs in categories.values()
        )
        return sub_category_total * self.config.products_per_sub_category


async def seed_taxonomy(session: AsyncSession) -> dict[str, int]:
    """Insert the demo collections, categories, sub-categories and brands.

    Args:
        session: Async SQLAlchemy session. The caller commits.

    Returns:
        Counts of inserted rows per table.
    """
    counts = {"collections": 0, "categories": 0, "sub_categories": 0, "brands": 0}

    for collection_order, (collection_name, categories) in enumerate(TAXONOMY.items()):
        collection = Collection(
            name=collection_name,
            slug=slugify(collection_name),
            display_order=collection_order,
        )
        session.add(collection)
        counts["collections"] += 1

        for category_order, (category_name, sub_categories) in enumerate(categories.items()):
            category = Category(
                name=category_name,
                slug=slugify(category_name),
                collection=collection,
                display_order=category_order,
            )
            session.add(category)
            counts["categories"] += 1

            for sub_order, sub_name in enumerate(sub_categories):
                session.add(
                    SubCategory(name=sub_name, category=category, display_order=sub_order)
                )
                counts["sub_categories"] += 1

    brand_names = sorted({b for brands in BRANDS_BY_CATEGORY.values() for b in brands})
    for brand_name in brand_names:
        session.add(Brand(name=brand_name, slug=slugify(brand_name)))
        counts["brands"] += 1

    await session.flush()
    return counts
