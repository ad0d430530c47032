"""Shared test fixtures and configuration."""
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import select
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import StaticPool

# Set test environment variables before importing app
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")

from app.main import app
from app.db.database import get_db
from app.db.models import Base, Dish, Restaurant, User
from app.services.catalog.seed import load_catalog_file, seed_catalog
from app.services.notifications.bus import NotificationBus
from app.services.ordering.models import Caller
from app.services.ordering.service import OrderService
from app.services.ordering.statuses import UserRole
from app.services.persistence.orders import OrderRepository


# Test database URL (in-memory SQLite)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@dataclass
class SeededCatalog:
    """Ids of the rows loaded from the test catalog."""

    users: Dict[str, Caller] = field(default_factory=dict)
    restaurants: Dict[str, Restaurant] = field(default_factory=dict)
    dishes: Dict[str, Dish] = field(default_factory=dict)

    @property
    def customer(self) -> Caller:
        return self.users["customer@example.com"]

    @property
    def other_customer(self) -> Caller:
        return self.users["other-customer@example.com"]

    @property
    def owner(self) -> Caller:
        return self.users["owner@example.com"]

    @property
    def other_owner(self) -> Caller:
        return self.users["other-owner@example.com"]

    @property
    def driver(self) -> Caller:
        return self.users["driver@example.com"]

    @property
    def other_driver(self) -> Caller:
        return self.users["other-driver@example.com"]


@pytest.fixture
async def test_db_engine():
    """Create test database engine."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    # Create all tables
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    # Drop all tables
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture
async def test_db(test_db_engine):
    """Create test database session."""
    async_session = async_sessionmaker(
        test_db_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with async_session() as session:
        yield session


@pytest.fixture
def test_catalog_path():
    """Return path to test catalog YAML file."""
    return Path(__file__).parent / "fixtures" / "catalog.yaml"


@pytest.fixture
async def catalog(test_db, test_catalog_path) -> SeededCatalog:
    """Seed the test catalog and index its rows."""
    await seed_catalog(test_db, load_catalog_file(test_catalog_path))

    seeded = SeededCatalog()
    for user in (await test_db.execute(select(User))).scalars():
        seeded.users[user.email] = Caller(id=user.id, role=UserRole(user.role))
    for restaurant in (await test_db.execute(select(Restaurant))).scalars():
        seeded.restaurants[restaurant.name] = restaurant
    for dish in (await test_db.execute(select(Dish))).scalars():
        seeded.dishes[dish.name] = dish
    return seeded


@pytest.fixture
def bus():
    """Fresh notification bus."""
    bus = NotificationBus(max_queue=10)
    yield bus
    bus.clear()


@pytest.fixture
def order_repository(test_db):
    return OrderRepository(test_db)


@pytest.fixture
def order_service(order_repository, bus):
    """Order service bound to the test database and bus."""
    return OrderService(repository=order_repository, bus=bus, page_size=25)


@pytest.fixture
def override_get_db(test_db):
    """Override get_db dependency with test database."""
    async def _override_get_db():
        yield test_db
    return _override_get_db


@pytest.fixture
async def async_client(override_get_db, bus, monkeypatch):
    """HTTP client bound to the app with test database and bus."""
    app.dependency_overrides[get_db] = override_get_db
    monkeypatch.setattr("app.services.notifications.bus._bus", bus)

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client

    # Clear overrides
    app.dependency_overrides.clear()
