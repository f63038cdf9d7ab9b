"""Inventory service."""
import logging
from typing import List

from sqlalchemy.ext.asyncio import AsyncSession

from catering.core.exceptions import ConflictError, NotFoundError
from catering.db.models import SupplyItem
from catering.services.inventory.models import StockUpdate, SupplyItemCreate, SupplyItemUpdate
from catering.services.inventory.monitor import InventoryThresholdMonitor
from catering.services.persistence.supplies import SupplyStore

logger = logging.getLogger(__name__)


class InventoryService:
    """Supply item mutations. Each one is followed by a threshold check."""

    def __init__(self, db: AsyncSession, monitor: InventoryThresholdMonitor):
        self.supplies = SupplyStore(db)
        self.monitor = monitor

    async def get(self, item_id: int) -> SupplyItem:
        """Get an active supply item or raise NotFoundError."""
        item = await self.supplies.find_by_id(item_id)
        if item is None:
            raise NotFoundError(f"Supply item {item_id} not found")
        return item

    async def list_active(self) -> List[SupplyItem]:
        """List active supply items."""
        return await self.supplies.list_active()

    async def create(self, data: SupplyItemCreate) -> SupplyItem:
        """Create a supply item."""
        if await self.supplies.find_by_name(data.name):
            raise ConflictError(f'A supply item named "{data.name}" already exists')

        item = await self.supplies.save(SupplyItem(**data.model_dump()))
        logger.info(f"[INVENTORY] Created supply item {item.name} (id={item.id})")
        self.monitor.check(item)
        return item

    async def update(self, item_id: int, data: SupplyItemUpdate) -> SupplyItem:
        """Apply a partial update to a supply item."""
        item = await self.get(item_id)
        changes = data.model_dump(exclude_unset=True, exclude_none=True)

        new_name = changes.get("name")
        if new_name and new_name != item.name and await self.supplies.find_by_name(new_name):
            raise ConflictError(f'A supply item named "{new_name}" already exists')

        for field_name, value in changes.items():
            setattr(item, field_name, value)

        item = await self.supplies.save(item)
        logger.info(f"[INVENTORY] Updated supply item {item.name} (id={item.id}): {sorted(changes)}")
        self.monitor.check(item)
        return item

    async def update_stock(self, item_id: int, data: StockUpdate) -> SupplyItem:
        """Set the on-hand quantity of a supply item."""
        item = await self.get(item_id)
        item.current_quantity = data.current_quantity
        item = await self.supplies.save(item)
        logger.info(f"[INVENTORY] Stock of {item.name} set to {item.current_quantity}")
        self.monitor.check(item)
        return item

    async def remove(self, item_id: int) -> None:
        """Soft-delete a supply item."""
        item = await self.get(item_id)
        item.active = False
        await self.supplies.save(item)
        logger.info(f"[INVENTORY] Deactivated supply item {item.name} (id={item.id})")
