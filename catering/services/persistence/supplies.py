"""Supply item persistence service."""
from typing import List, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from catering.core.exceptions import ConflictError
from catering.db.models import SupplyItem


class SupplyStore:
    """Service for persisting inventory supply items."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def save(self, item: SupplyItem) -> SupplyItem:
        """Insert or update a supply item and commit.

        A name clash that slips past the service's own lookup is caught by the
        unique index and raised as ConflictError after rolling back.
        """
        name = item.name
        self.db.add(item)
        try:
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            raise ConflictError(f'A supply item named "{name}" already exists') from e
        await self.db.refresh(item)
        return item

    async def find_by_id(self, item_id: int) -> Optional[SupplyItem]:
        """Get an active supply item by ID."""
        result = await self.db.execute(
            select(SupplyItem).where(SupplyItem.id == item_id, SupplyItem.active.is_(True))
        )
        return result.scalar_one_or_none()

    async def find_by_name(self, name: str) -> Optional[SupplyItem]:
        """Get a supply item by name, active or not."""
        result = await self.db.execute(select(SupplyItem).where(SupplyItem.name == name))
        return result.scalar_one_or_none()

    async def list_active(self) -> List[SupplyItem]:
        """List active supply items by name."""
        result = await self.db.execute(
            select(SupplyItem).where(SupplyItem.active.is_(True)).order_by(SupplyItem.name)
        )
        return list(result.scalars().all())
