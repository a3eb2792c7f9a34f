"""Tests for the demo catalog generator and taxonomy seeding."""

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from sportsmart.catalog.bulk import BulkUploadPipeline
from sportsmart.catalog.seed import (
    BRANDS_BY_CATEGORY,
    TAXONOMY,
    CatalogGenerator,
    SeedConfig,
    seed_taxonomy,
)
from sportsmart.catalog.taxonomy import TaxonomyRepository


class TestSeedConfig:
    """Tests for SeedConfig."""

    def test_small_config(self) -> None:
        assert SeedConfig.small().products_per_sub_category == 3

    def test_full_config(self) -> None:
        """Full config creates larger catalog."""
        assert SeedConfig.full().products_per_sub_category > SeedConfig.small().products_per_sub_category


class TestCatalogGenerator:
    """Tests for CatalogGenerator."""

    @pytest.fixture
    def generator(self) -> CatalogGenerator:
        """Create generator with small config."""
        return CatalogGenerator(SeedConfig.small())

    def test_expected_count(self, generator: CatalogGenerator) -> None:
        assert len(generator.generate_list()) == generator.expected_count

    def test_deterministic_generation(self) -> None:
        """Same seed produces same rows."""
        rows1 = CatalogGenerator(SeedConfig(seed=42, products_per_sub_category=2)).generate_list()
        rows2 = CatalogGenerator(SeedConfig(seed=42, products_per_sub_category=2)).generate_list()
        assert rows1 == rows2

    def test_different_seeds_produce_different_rows(self) -> None:
        rows1 = CatalogGenerator(SeedConfig(seed=42, products_per_sub_category=2)).generate_list()
        rows2 = CatalogGenerator(SeedConfig(seed=99, products_per_sub_category=2)).generate_list()
        assert [r["name"] for r in rows1] != [r["name"] for r in rows2]

    def test_skus_are_unique(self, generator: CatalogGenerator) -> None:
        skus = [row["sku"] for row in generator.generate()]
        assert len(skus) == len(set(skus))

    def test_sku_format(self, generator: CatalogGenerator) -> None:
        row = next(generator.generate())
        assert row["sku"] == "CRI-BAT-000"

    def test_rows_use_known_brands_and_sane_prices(self, generator: CatalogGenerator) -> None:
        for row in generator.generate():
            assert row["brand"] in BRANDS_BY_CATEGORY[row["category"]]
            assert 0 < row["shop_price"] <= row["mrp_price"]
            assert str(row["mrp_price"]).endswith("99")


class TestSeedTaxonomy:
    """Tests for seeding the taxonomy and importing generated rows."""

    @pytest.mark.asyncio
    async def test_seed_counts(self, session: AsyncSession) -> None:
        counts = await seed_taxonomy(session)

        assert counts["collections"] == len(TAXONOMY)
        assert counts["categories"] == sum(len(c) for c in TAXONOMY.values())
        assert counts["brands"] == len({b for bs in BRANDS_BY_CATEGORY.values() for b in bs})

        categories = await TaxonomyRepository(session).list_categories()
        cricket = next(c for c in categories if c["slug"] == "cricket")
        assert cricket["sub_category_count"] == len(TAXONOMY["Team Sports"]["Cricket"])

    @pytest.mark.asyncio
    async def test_generated_rows_import_cleanly(self, session: AsyncSession) -> None:
        await seed_taxonomy(session)
        generator = CatalogGenerator(SeedConfig(products_per_sub_category=1))

        result = await BulkUploadPipeline(session).run(generator.generate_list())

        assert result.errors == []
        assert result.created == generator.expected_count
