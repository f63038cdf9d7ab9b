"""FastAPI dependencies."""
from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from catering.core.config import settings
from catering.db.database import get_db
from catering.services.inventory.monitor import InventoryThresholdMonitor
from catering.services.inventory.service import InventoryService
from catering.services.notifications.events import InventoryEvent, OrderStatusChanged
from catering.services.notifications.hub import NotificationHub
from catering.services.ordering.engine import OrderTransactionEngine
from catering.services.ordering.order_number import OrderNumberGenerator


def get_order_status_hub(request: Request) -> NotificationHub[OrderStatusChanged]:
    """Get the order-status hub built at startup."""
    return request.app.state.order_status_hub


def get_inventory_hub(request: Request) -> NotificationHub[InventoryEvent]:
    """Get the inventory hub built at startup."""
    return request.app.state.inventory_hub


def get_order_engine(
    db: AsyncSession = Depends(get_db),
    status_hub: NotificationHub[OrderStatusChanged] = Depends(get_order_status_hub),
) -> OrderTransactionEngine:
    """Get order transaction engine instance."""
    return OrderTransactionEngine(
        db,
        status_hub,
        tax_rate=settings.tax_rate,
        number_generator=OrderNumberGenerator(prefix=settings.order_number_prefix),
        conflict_retries=settings.order_number_retries,
    )


def get_inventory_monitor(
    db: AsyncSession = Depends(get_db),
    hub: NotificationHub[InventoryEvent] = Depends(get_inventory_hub),
) -> InventoryThresholdMonitor:
    """Get inventory threshold monitor instance."""
    return InventoryThresholdMonitor(db, hub, lookahead_days=settings.expiry_lookahead_days)


def get_inventory_service(
    db: AsyncSession = Depends(get_db),
    monitor: InventoryThresholdMonitor = Depends(get_inventory_monitor),
) -> InventoryService:
    """Get inventory service instance."""
    return InventoryService(db, monitor)
