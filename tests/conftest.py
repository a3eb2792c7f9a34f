"""Shared fixtures: a throwaway SQLite catalog and an app client bound to it."""

from collections.abc import AsyncIterator
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import NullPool

from sportsmart.catalog.models import (
    Brand,
    Category,
    Collection,
    Product,
    ProductTag,
    SubCategory,
)
from sportsmart.infrastructure.database import Base, get_session, get_session_factory
from sportsmart.main import app

BASE_TIME = datetime(2026, 1, 1, tzinfo=timezone.utc)


@dataclass
class CatalogFixture:
    """Ids of the seeded test catalog, keyed by slug or SKU."""

    collections: dict[str, str] = field(default_factory=dict)
    categories: dict[str, str] = field(default_factory=dict)
    sub_categories: dict[str, int] = field(default_factory=dict)
    brands: dict[str, str] = field(default_factory=dict)
    tags: dict[str, str] = field(default_factory=dict)
    products: dict[str, str] = field(default_factory=dict)


@pytest_asyncio.fixture
async def engine(tmp_path: Path) -> AsyncIterator[AsyncEngine]:
    """Create a file-backed SQLite engine with the catalog schema."""
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'catalog.db'}",
        poolclass=NullPool,
    )

    # Let SQLAlchemy issue BEGIN itself so SAVEPOINT works on SQLite
    @event.listens_for(engine.sync_engine, "connect")
    def _disable_driver_transactions(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine.sync_engine, "begin")
    def _emit_begin(conn):
        conn.exec_driver_sql("BEGIN")

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Create a session factory bound to the test engine."""
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def session(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncIterator[AsyncSession]:
    """Open a session for the duration of a test."""
    async with session_factory() as session:
        yield session


def _product(
    sku: str,
    name: str,
    shop_price: float,
    created_offset: int,
    **fields,
) -> Product:
    created_at = BASE_TIME + timedelta(days=created_offset)
    return Product(
        sku=sku,
        name=name,
        slug=name.lower().replace(" ", "-"),
        mrp_price=round(shop_price * 1.2),
        dealer_price=round(shop_price * 0.7),
        shop_price=shop_price,
        created_at=created_at,
        updated_at=created_at,
        **fields,
    )


@pytest_asyncio.fixture
async def catalog(session_factory: async_sessionmaker[AsyncSession]) -> CatalogFixture:
    """Seed a small, fully known catalog.

    Storefront-visible products (7): five cricket, one football, one
    badminton. Also present: one inactive cricket bat and one
    quote-hidden football.
    """
    ids = CatalogFixture()

    async with session_factory() as session:
        team = Collection(name="Team Sports", slug="team-sports", display_order=0)
        racquet = Collection(name="Racquet Sports", slug="racquet-sports", display_order=1)

        cricket = Category(name="Cricket", slug="cricket", collection=team, display_order=0)
        football = Category(name="Football", slug="football", collection=team, display_order=1)
        badminton = Category(name="Badminton", slug="badminton", collection=racquet)

        bats = SubCategory(name="Bats", category=cricket, display_order=0)
        cricket_balls = SubCategory(name="Balls", category=cricket, display_order=1)
        football_balls = SubCategory(name="Balls", category=football)
        racquets = SubCategory(name="Racquets", category=badminton)

        sg = Brand(name="SG", slug="sg")
        kookaburra = Brand(name="Kookaburra", slug="kookaburra")
        nivia = Brand(name="Nivia", slug="nivia")
        yonex = Brand(name="Yonex", slug="yonex")

        session.add_all(
            [team, racquet, cricket, football, badminton,
             bats, cricket_balls, football_balls, racquets,
             sg, kookaburra, nivia, yonex]
        )
        await session.flush()

        bestseller = ProductTag(name="Bestseller", category_id=cricket.id)
        session.add(bestseller)
        await session.flush()

        products = [
            _product(
                "SG-BAT-1", "SG Test Bat", 1500, 0,
                category_id=cricket.id, sub_category_id=bats.id, brand_id=sg.id,
                is_featured=True,
            ),
            _product(
                "KB-BAT-1", "Kookaburra Carbon Bat", 12000, 1,
                category_id=cricket.id, sub_category_id=bats.id, brand_id=kookaburra.id,
                tag_id=bestseller.id,
            ),
            _product(
                "SG-BALL-1", "SG Club Ball", 450, 2,
                category_id=cricket.id, sub_category_id=cricket_balls.id, brand_id=sg.id,
                description="Leather ball for club cricket",
            ),
            _product(
                "SG-PAD-1", "SG Legacy Pads", 2000, 3,
                category_id=cricket.id, brand_id=sg.id,
                is_quote_hidden=None,
            ),
            _product(
                "KB-GLV-1", "Kookaburra Kahuna Gloves", 3200, 4,
                category_id=cricket.id, brand_id=kookaburra.id,
                description="Carbon fibre reinforced batting gloves",
            ),
            _product(
                "SG-BAT-OLD", "SG Retired Bat", 900, 5,
                category_id=cricket.id, sub_category_id=bats.id, brand_id=sg.id,
                is_active=False,
            ),
            _product(
                "NV-FB-1", "Nivia Storm Football", 800, 6,
                category_id=football.id, sub_category_id=football_balls.id, brand_id=nivia.id,
                is_featured=True,
            ),
            _product(
                "NV-FB-2", "Nivia Hidden Ball", 650, 7,
                category_id=football.id, sub_category_id=football_balls.id, brand_id=nivia.id,
                is_quote_hidden=True,
            ),
            _product(
                "YX-CARBON-88", "Yonex Astrox Racquet", 7000, 8,
                category_id=badminton.id, sub_category_id=racquets.id, brand_id=yonex.id,
            ),
        ]
        session.add_all(products)
        await session.flush()

        ids.collections = {c.slug: c.id for c in (team, racquet)}
        ids.categories = {c.slug: c.id for c in (cricket, football, badminton)}
        ids.sub_categories = {
            "cricket/bats": bats.id,
            "cricket/balls": cricket_balls.id,
            "football/balls": football_balls.id,
            "badminton/racquets": racquets.id,
        }
        ids.brands = {b.slug: b.id for b in (sg, kookaburra, nivia, yonex)}
        ids.tags = {"bestseller": bestseller.id}
        ids.products = {p.sku: p.id for p in products}

        await session.commit()

    return ids


@pytest_asyncio.fixture
async def client(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncIterator[AsyncClient]:
    """Create an API client whose sessions use the test database."""

    async def _get_session() -> AsyncIterator[AsyncSession]:
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_session] = _get_session
    app.dependency_overrides[get_session_factory] = lambda: session_factory

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()
