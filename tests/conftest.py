"""Shared test fixtures and configuration."""
import pytest
import os
from datetime import date, time
from decimal import Decimal
from pathlib import Path
from types import SimpleNamespace
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import StaticPool

# Set test environment variables before importing app
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("BUSINESS_NAME", "Test Catering")

from catering.main import app
from catering.db.database import Base, get_db
from catering.db.models import Client
from catering.core.config import Settings
from catering.core.dependencies import get_inventory_hub, get_order_status_hub
from catering.services.inventory.monitor import InventoryThresholdMonitor
from catering.services.inventory.service import InventoryService
from catering.services.menu.catalog import MenuCatalog
from catering.services.notifications.hub import NotificationHub
from catering.services.ordering.engine import OrderTransactionEngine
from catering.services.ordering.models import CreateOrderRequest, OrderLineRequest


# Test database URL (in-memory SQLite)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

# Fixed "today" for inventory expiry checks
TODAY = date(2024, 6, 1)


class EventRecorder:
    """Listener that keeps every event it receives."""

    def __init__(self):
        self.events = []

    def __call__(self, event):
        self.events.append(event)


@pytest.fixture
def test_settings():
    """Override settings for testing."""
    return Settings(
        database_url=TEST_DATABASE_URL,
        business_name="Test Catering",
        tax_rate=Decimal("0.12"),
    )


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
def session_factory(test_db_engine):
    """Session factory bound to the test engine."""
    return async_sessionmaker(
        test_db_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


@pytest.fixture
async def test_db(session_factory):
    """Create test database session."""
    async with session_factory() as session:
        yield session


@pytest.fixture
def test_menu_path():
    """Return path to test menu YAML file."""
    return Path(__file__).parent / "fixtures" / "test_menu.yaml"


@pytest.fixture
async def seeded(test_db, test_menu_path):
    """
    Seed one client and the test menu.

    Only IDs are handed out: ORM instances expire whenever a test rolls the
    session back and cannot lazy-load under asyncio.
    """
    client = Client(
        first_name="Dana",
        last_name="Reyes",
        email="dana.reyes@example.com",
        phone="+15550100",
        address="12 Harbor Street, Springfield",
        company="Reyes Events",
    )
    test_db.add(client)
    await test_db.commit()

    items = await MenuCatalog(test_db).seed_from_yaml(test_menu_path)
    by_name = {item.name: item.id for item in items}
    return SimpleNamespace(
        client_id=client.id,
        lasagna_id=by_name["lasagna tray"],
        salad_id=by_name["garden salad"],
        paella_id=by_name["seafood paella"],
    )


@pytest.fixture
def make_order_request(seeded):
    """Build a CreateOrderRequest against the seeded data."""

    def _make(lines=None, **overrides):
        if lines is None:
            lines = [(seeded.lasagna_id, 2), (seeded.salad_id, 1)]
        fields = dict(
            client_id=seeded.client_id,
            delivery_date=date(2024, 7, 15),
            delivery_time=time(12, 30),
            delivery_address="45 Market Avenue, Springfield",
            notes="Ring the back door",
            party_size=12,
            items=[
                OrderLineRequest(menu_item_id=menu_item_id, quantity=quantity)
                for menu_item_id, quantity in lines
            ],
        )
        fields.update(overrides)
        return CreateOrderRequest(**fields)

    return _make


@pytest.fixture
def order_status_hub():
    """Fresh order-status hub per test."""
    return NotificationHub("order-status-test")


@pytest.fixture
def inventory_hub():
    """Fresh inventory hub per test."""
    return NotificationHub("inventory-test")


@pytest.fixture
def order_events(order_status_hub):
    """Recorder subscribed to the order-status hub."""
    recorder = EventRecorder()
    order_status_hub.subscribe(recorder)
    return recorder


@pytest.fixture
def inventory_events(inventory_hub):
    """Recorder subscribed to the inventory hub."""
    recorder = EventRecorder()
    inventory_hub.subscribe(recorder)
    return recorder


@pytest.fixture
def order_engine(test_db, order_status_hub, test_settings):
    """Order engine on the test session."""
    return OrderTransactionEngine(test_db, order_status_hub, tax_rate=test_settings.tax_rate)


@pytest.fixture
def today():
    """Fixed calendar date for expiry checks."""
    return TODAY


@pytest.fixture
def inventory_monitor(test_db, inventory_hub, today):
    """Inventory monitor with a fixed calendar."""
    return InventoryThresholdMonitor(test_db, inventory_hub, lookahead_days=30, today=lambda: today)


@pytest.fixture
def inventory_service(test_db, inventory_monitor):
    """Inventory service on the test session."""
    return InventoryService(test_db, inventory_monitor)


@pytest.fixture
def override_get_db(session_factory):
    """Override get_db dependency with a session on the test engine."""
    async def _override_get_db():
        async with session_factory() as session:
            yield session
    return _override_get_db


@pytest.fixture
def test_client(override_get_db, order_status_hub, inventory_hub, test_settings, monkeypatch):
    """Create FastAPI test client with overrides."""
    # Override dependencies
    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_order_status_hub] = lambda: order_status_hub
    app.dependency_overrides[get_inventory_hub] = lambda: inventory_hub

    # Override settings in modules that use it
    monkeypatch.setattr("catering.core.dependencies.settings", test_settings)

    client = TestClient(app)

    yield client

    # Clear overrides
    app.dependency_overrides.clear()


# Pytest configuration
def pytest_configure(config):
    """Configure pytest."""
    config.addinivalue_line(
        "markers", "asyncio: mark test as an asyncio test"
    )
