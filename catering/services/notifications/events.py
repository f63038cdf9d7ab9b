"""Event payloads published through the notification hubs."""
from dataclasses import dataclass
from typing import Tuple, Union

from catering.db.models import Order, SupplyItem
from catering.services.ordering.status import OrderStatus


@dataclass(frozen=True)
class OrderStatusChanged:
    """An order moved from ``old_status`` to ``new_status``."""

    order: Order
    old_status: OrderStatus
    new_status: OrderStatus


@dataclass(frozen=True)
class LowStock:
    """A supply item is at or below its minimum quantity."""

    item: SupplyItem


@dataclass(frozen=True)
class ExpiringSoon:
    """Supply items whose expiry date falls inside the look-ahead window."""

    items: Tuple[SupplyItem, ...]


InventoryEvent = Union[LowStock, ExpiringSoon]
