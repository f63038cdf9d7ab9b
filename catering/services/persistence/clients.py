"""Client directory."""
from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from catering.core.exceptions import NotFoundError
from catering.db.models import Client


class ClientDirectory:
    """Looks up clients referenced by orders."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_client_by_id(self, client_id: int) -> Optional[Client]:
        """Get client by ID."""
        result = await self.db.execute(select(Client).where(Client.id == client_id))
        return result.scalar_one_or_none()

    async def resolve_client(self, client_id: int) -> Client:
        """Get client by ID or raise NotFoundError."""
        client = await self.get_client_by_id(client_id)
        if client is None:
            raise NotFoundError(f"Client {client_id} not found")
        return client
