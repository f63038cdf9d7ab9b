"""Main FastAPI application."""
import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from catering.core.config import settings
from catering.core.exceptions import register_exception_handlers
from catering.core.logging import setup_logging
from catering.db.database import AsyncSessionLocal, init_db
from catering.api import health, inventory, orders
from catering.services.menu.catalog import MenuCatalog
from catering.services.notifications.events import InventoryEvent, OrderStatusChanged
from catering.services.notifications.hub import NotificationHub
from catering.services.notifications.listeners import (
    LoggingInventoryAlertListener,
    LoggingOrderStatusListener,
)

logger = logging.getLogger(__name__)


def build_notification_hubs(app: FastAPI) -> None:
    """Create the order-status and inventory hubs and their default listeners."""
    order_status_hub: NotificationHub[OrderStatusChanged] = NotificationHub("order-status")
    order_status_hub.subscribe(LoggingOrderStatusListener())

    inventory_hub: NotificationHub[InventoryEvent] = NotificationHub("inventory")
    inventory_hub.subscribe(LoggingInventoryAlertListener())

    app.state.order_status_hub = order_status_hub
    app.state.inventory_hub = inventory_hub


async def seed_menu(menu_file: str) -> None:
    """Load the menu YAML unless the catalog already has items."""
    async with AsyncSessionLocal() as session:
        catalog = MenuCatalog(session)
        existing = await catalog.count_items()
        if existing:
            logger.info(f"[MENU] Catalog already holds {existing} items, skipping {menu_file}")
            return
        await catalog.seed_from_yaml(menu_file)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    # Startup
    setup_logging()
    await init_db()
    if settings.menu_file:
        await seed_menu(settings.menu_file)
    build_notification_hubs(app)
    logger.info(f"{settings.business_name} catering service started")
    yield
    # Shutdown
    logger.info(f"{settings.business_name} catering service stopped")


app = FastAPI(
    title="Catering Orders",
    description="Order coordination for catering deliveries",
    version="0.1.0",
    lifespan=lifespan,
)

register_exception_handlers(app)

app.include_router(health.router, tags=["health"])
app.include_router(orders.router, tags=["orders"])
app.include_router(inventory.router, tags=["inventory"])


def run() -> None:
    """Serve the API with uvicorn."""
    uvicorn.run("catering.main:app", host=settings.host, port=settings.port)


if __name__ == "__main__":
    run()
