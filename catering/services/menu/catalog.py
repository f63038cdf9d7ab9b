"""Menu catalog lookups."""
import logging
from decimal import Decimal
from pathlib import Path
from typing import List, Optional, Union

import yaml
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from catering.core.exceptions import NotFoundError
from catering.db.models import Category, MenuItem

logger = logging.getLogger(__name__)


class MenuCatalog:
    """Resolves menu items referenced by order lines."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_menu_item(self, menu_item_id: int) -> Optional[MenuItem]:
        """Get a menu item by ID."""
        result = await self.db.execute(select(MenuItem).where(MenuItem.id == menu_item_id))
        return result.scalar_one_or_none()

    async def count_items(self) -> int:
        """Count menu items, available or not."""
        result = await self.db.execute(select(func.count()).select_from(MenuItem))
        return result.scalar_one()

    async def resolve_menu_item(self, menu_item_id: int) -> MenuItem:
        """Get a menu item by ID or raise NotFoundError."""
        item = await self.get_menu_item(menu_item_id)
        if item is None:
            raise NotFoundError(f"Menu item {menu_item_id} not found")
        return item

    async def seed_from_yaml(self, menu_file: Union[str, Path]) -> List[MenuItem]:
        """
        Load categories and items from a YAML menu file.

        Expected layout::

            categories:
              - name: mains
                description: Main dishes
            items:
              - name: lasagna
                price: "10.00"
                category: mains
                available: true

        Categories referenced by items but not declared are created on the
        fly. Prices are read as strings so they become exact decimals.
        """
        with open(menu_file, "r") as f:
            data = yaml.safe_load(f) or {}

        categories = {}
        for entry in data.get("categories", []):
            category = Category(name=entry["name"], description=entry.get("description"))
            self.db.add(category)
            categories[category.name] = category

        items = []
        for entry in data.get("items", []):
            category_name = entry.get("category", "general")
            category = categories.get(category_name)
            if category is None:
                category = Category(name=category_name)
                self.db.add(category)
                categories[category_name] = category

            item = MenuItem(
                name=entry["name"],
                description=entry.get("description", ""),
                price=Decimal(str(entry["price"])),
                available=entry.get("available", True),
                preparation_minutes=entry.get("preparation_minutes", 0),
                ingredients=entry.get("ingredients", []),
                allergens=entry.get("allergens", []),
                category=category,
            )
            self.db.add(item)
            items.append(item)

        await self.db.commit()
        logger.info(
            f"[MENU] Seeded {len(items)} items in {len(categories)} categories from {menu_file}"
        )
        return items
