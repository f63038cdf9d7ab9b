"""Inventory threshold monitor."""
import logging
from datetime import date, timedelta
from typing import Callable, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from catering.db.models import SupplyItem
from catering.services.inventory.models import SweepResult
from catering.services.notifications.events import ExpiringSoon, InventoryEvent, LowStock
from catering.services.notifications.hub import NotificationHub

logger = logging.getLogger(__name__)

DEFAULT_LOOKAHEAD_DAYS = 30


def is_low_stock(item: SupplyItem) -> bool:
    """An item is low when its quantity is at or below the minimum."""
    return item.current_quantity <= item.minimum_quantity


class InventoryThresholdMonitor:
    """
    Raises inventory alerts through the inventory hub.

    ``check`` is called after any change to a supply item. ``sweep`` is run on
    demand and re-announces every current condition; it keeps no memory of
    earlier runs, so two sweeps over unchanged data publish the same events.
    """

    def __init__(
        self,
        db: AsyncSession,
        hub: NotificationHub[InventoryEvent],
        lookahead_days: int = DEFAULT_LOOKAHEAD_DAYS,
        today: Optional[Callable[[], date]] = None,
    ):
        self.db = db
        self.hub = hub
        self.lookahead_days = lookahead_days
        self._today = today or date.today

    def check(self, item: SupplyItem) -> bool:
        """Publish a low-stock event if ``item`` is at or below its minimum."""
        if not is_low_stock(item):
            return False
        logger.info(
            f"[INVENTORY] {item.name} is low: {item.current_quantity} <= {item.minimum_quantity}"
        )
        self.hub.publish(LowStock(item))
        return True

    async def sweep(self, lookahead_days: Optional[int] = None) -> SweepResult:
        """Scan active supplies for low stock and upcoming expiry."""
        days = self.lookahead_days if lookahead_days is None else lookahead_days
        horizon = self._today() + timedelta(days=days)

        low_result = await self.db.execute(
            select(SupplyItem)
            .where(
                SupplyItem.active.is_(True),
                SupplyItem.current_quantity <= SupplyItem.minimum_quantity,
            )
            .order_by(SupplyItem.current_quantity, SupplyItem.id)
        )
        low_stock = list(low_result.scalars().all())

        expiring_result = await self.db.execute(
            select(SupplyItem)
            .where(
                SupplyItem.active.is_(True),
                SupplyItem.expiry_date.is_not(None),
                SupplyItem.expiry_date <= horizon,
            )
            .order_by(SupplyItem.expiry_date, SupplyItem.id)
        )
        expiring_soon = list(expiring_result.scalars().all())

        for item in low_stock:
            self.hub.publish(LowStock(item))
        if expiring_soon:
            self.hub.publish(ExpiringSoon(tuple(expiring_soon)))

        logger.info(
            f"[INVENTORY] Sweep complete - {len(low_stock)} low stock, "
            f"{len(expiring_soon)} expiring by {horizon}"
        )
        return SweepResult(low_stock=low_stock, expiring_soon=expiring_soon)
