"""Listener interfaces for order and inventory events."""
import logging
from abc import ABC, abstractmethod
from typing import Sequence

from catering.db.models import Order, SupplyItem
from catering.services.notifications.events import (
    ExpiringSoon,
    InventoryEvent,
    LowStock,
    OrderStatusChanged,
)
from catering.services.ordering.status import OrderStatus

logger = logging.getLogger(__name__)


class OrderStatusListener(ABC):
    """Base class for components reacting to order status changes."""

    def __call__(self, event: OrderStatusChanged) -> None:
        self.on_order_status_changed(event.order, event.old_status, event.new_status)

    @abstractmethod
    def on_order_status_changed(
        self, order: Order, old_status: OrderStatus, new_status: OrderStatus
    ) -> None:
        """Handle a committed status change."""
        pass


class InventoryAlertListener(ABC):
    """Base class for components reacting to inventory alerts."""

    def __call__(self, event: InventoryEvent) -> None:
        if isinstance(event, LowStock):
            self.on_low_stock(event.item)
        elif isinstance(event, ExpiringSoon):
            self.on_expiring_soon(list(event.items))
        else:
            raise TypeError(f"Unsupported inventory event: {type(event).__name__}")

    @abstractmethod
    def on_low_stock(self, item: SupplyItem) -> None:
        """Handle a supply item at or below its minimum."""
        pass

    @abstractmethod
    def on_expiring_soon(self, items: Sequence[SupplyItem]) -> None:
        """Handle the batch of items about to expire."""
        pass


class LoggingOrderStatusListener(OrderStatusListener):
    """Writes every status change to the application log."""

    def on_order_status_changed(
        self, order: Order, old_status: OrderStatus, new_status: OrderStatus
    ) -> None:
        logger.info(
            f"[ORDERS] Order {order.order_number} (id={order.id}) "
            f"status changed: {old_status} -> {new_status}"
        )


class LoggingInventoryAlertListener(InventoryAlertListener):
    """Writes inventory alerts to the application log."""

    def on_low_stock(self, item: SupplyItem) -> None:
        logger.warning(
            f"[INVENTORY] Low stock: {item.name} at {item.current_quantity} {item.unit} "
            f"(minimum {item.minimum_quantity})"
        )

    def on_expiring_soon(self, items: Sequence[SupplyItem]) -> None:
        names = ", ".join(f"{item.name} ({item.expiry_date})" for item in items)
        logger.warning(f"[INVENTORY] {len(items)} item(s) expiring soon: {names}")
