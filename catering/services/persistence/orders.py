"""Order persistence service."""
import logging
import math
from contextlib import asynccontextmanager
from datetime import date, datetime, time, timedelta
from decimal import Decimal
from typing import AsyncIterator, List, Optional

from sqlalchemy import desc, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from catering.core.exceptions import ConflictError
from catering.db.models import Client, MenuItem, Order, OrderItem
from catering.services.ordering.models import (
    DailyOrderCount,
    OrderFilters,
    OrderPage,
    OrderStatistics,
    RecurringClient,
    TopMenuItem,
)

logger = logging.getLogger(__name__)

# Most recent creation days reported in statistics
DAILY_STATS_DAYS = 30
# Clients with more orders than this count as recurring
RECURRING_CLIENT_MIN_ORDERS = 3


class OrderStore:
    """Service for persisting order data."""

    def __init__(self, db: AsyncSession):
        self.db = db

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[AsyncSession]:
        """
        Run a block as one unit of work.

        Commits when the block exits normally and rolls back on any error, so
        nothing written inside the block is visible unless all of it is.
        Unique-constraint clashes surface as ConflictError.
        """
        try:
            yield self.db
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            raise ConflictError(f"Order data conflicts with an existing record: {e.orig}") from e
        except Exception:
            await self.db.rollback()
            raise

    async def save_order(self, order: Order) -> Order:
        """Stage an order header and assign its primary key."""
        self.db.add(order)
        await self.db.flush()
        return order

    async def save_order_line(self, line: OrderItem) -> OrderItem:
        """Stage one order line."""
        self.db.add(line)
        await self.db.flush()
        return line

    async def find_order(self, order_id: int) -> Optional[Order]:
        """Get order by ID with items and client."""
        result = await self.db.execute(
            select(Order)
            .where(Order.id == order_id)
            .options(selectinload(Order.items), selectinload(Order.client))
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def count_orders(self) -> int:
        """Count all orders."""
        result = await self.db.execute(select(func.count()).select_from(Order))
        return result.scalar_one()

    async def list_orders(
        self, filters: Optional[OrderFilters] = None, page: int = 1, limit: int = 10
    ) -> OrderPage:
        """List orders newest first with optional filters."""
        filters = filters or OrderFilters()
        conditions = []
        if filters.status is not None:
            conditions.append(Order.status == filters.status)
        if filters.client_id is not None:
            conditions.append(Order.client_id == filters.client_id)
        if filters.date_from is not None:
            conditions.append(Order.delivery_date >= filters.date_from)
        if filters.date_to is not None:
            conditions.append(Order.delivery_date <= filters.date_to)

        count_result = await self.db.execute(
            select(func.count()).select_from(Order).where(*conditions)
        )
        total = count_result.scalar_one()

        result = await self.db.execute(
            select(Order)
            .where(*conditions)
            .options(selectinload(Order.items), selectinload(Order.client))
            .order_by(desc(Order.created_at), desc(Order.id))
            .offset((page - 1) * limit)
            .limit(limit)
        )
        orders: List[Order] = list(result.scalars().all())

        return OrderPage(
            orders=orders,
            total=total,
            page=page,
            limit=limit,
            total_pages=math.ceil(total / limit) if limit else 0,
        )

    async def statistics(
        self, date_from: Optional[date] = None, date_to: Optional[date] = None
    ) -> OrderStatistics:
        """
        Aggregate orders created inside the window.

        Reports totals by status, revenue, the most requested menu item, order
        counts for the latest creation days and clients with repeat business.
        """
        conditions = []
        if date_from is not None:
            conditions.append(Order.created_at >= datetime.combine(date_from, time.min))
        if date_to is not None:
            conditions.append(
                Order.created_at < datetime.combine(date_to + timedelta(days=1), time.min)
            )

        total_result = await self.db.execute(
            select(func.count()).select_from(Order).where(*conditions)
        )
        total_orders = total_result.scalar_one()

        status_result = await self.db.execute(
            select(Order.status, func.count())
            .where(*conditions)
            .group_by(Order.status)
        )
        orders_by_status = {str(status): count for status, count in status_result.all()}

        revenue_result = await self.db.execute(
            select(func.sum(Order.total)).where(*conditions)
        )
        revenue = revenue_result.scalar_one_or_none()

        top_result = await self.db.execute(
            select(MenuItem.id, MenuItem.name, func.sum(OrderItem.quantity).label("quantity"))
            .join(OrderItem, OrderItem.menu_item_id == MenuItem.id)
            .join(Order, Order.id == OrderItem.order_id)
            .where(*conditions)
            .group_by(MenuItem.id, MenuItem.name)
            .order_by(desc("quantity"))
            .limit(1)
        )
        top_row = top_result.first()

        order_day = func.date(Order.created_at)
        daily_result = await self.db.execute(
            select(order_day.label("day"), func.count().label("orders"))
            .where(*conditions)
            .group_by(order_day)
            .order_by(desc(order_day))
            .limit(DAILY_STATS_DAYS)
        )
        orders_by_day = [
            DailyOrderCount(day=day, orders=count) for day, count in daily_result.all()
        ]

        order_count = func.count(Order.id)
        recurring_result = await self.db.execute(
            select(Client.id, Client.first_name, Client.last_name, order_count.label("orders"))
            .join(Order, Order.client_id == Client.id)
            .where(*conditions)
            .group_by(Client.id, Client.first_name, Client.last_name)
            .having(order_count > RECURRING_CLIENT_MIN_ORDERS)
            .order_by(desc("orders"), Client.id)
        )
        recurring_clients = [
            RecurringClient(client_id=client_id, first_name=first, last_name=last, orders=count)
            for client_id, first, last, count in recurring_result.all()
        ]

        return OrderStatistics(
            total_orders=total_orders,
            orders_by_status=orders_by_status,
            revenue=Decimal(str(revenue or 0)).quantize(Decimal("0.01")),
            top_menu_item=(
                TopMenuItem(menu_item_id=top_row[0], name=top_row[1], quantity=int(top_row[2]))
                if top_row
                else None
            ),
            orders_by_day=orders_by_day,
            recurring_clients=recurring_clients,
        )
