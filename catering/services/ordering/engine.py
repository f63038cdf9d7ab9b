"""Order transaction engine."""
import logging
from datetime import date
from decimal import Decimal
from typing import List, Optional, Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from catering.core.exceptions import BusinessRuleViolation, ConflictError, NotFoundError
from catering.db.models import Order, OrderItem
from catering.services.menu.catalog import MenuCatalog
from catering.services.notifications.events import OrderStatusChanged
from catering.services.notifications.hub import NotificationHub
from catering.services.ordering.models import (
    CreateOrderRequest,
    OrderFilters,
    OrderLineRequest,
    OrderPage,
    OrderStatistics,
)
from catering.services.ordering.order_number import OrderNumberGenerator
from catering.services.ordering.status import INITIAL_STATUS, OrderStatus, can_cancel
from catering.services.persistence.clients import ClientDirectory
from catering.services.persistence.orders import OrderStore
from catering.services.pricing.calculator import DEFAULT_TAX_RATE, calculate_totals, to_money

logger = logging.getLogger(__name__)


class OrderTransactionEngine:
    """
    Creates catering orders and drives their status.

    Creation resolves the client and every menu item, prices the lines,
    assigns an order number and writes the header and all lines in a single
    transaction. Status changes are committed before the matching
    OrderStatusChanged event is published, so listeners only ever see durable
    state.
    """

    def __init__(
        self,
        db: AsyncSession,
        status_hub: NotificationHub[OrderStatusChanged],
        tax_rate: Decimal = DEFAULT_TAX_RATE,
        number_generator: Optional[OrderNumberGenerator] = None,
        conflict_retries: int = 0,
    ):
        self.db = db
        self.status_hub = status_hub
        self.tax_rate = tax_rate
        self.number_generator = number_generator or OrderNumberGenerator()
        # 0 keeps the plain behaviour: an order-number clash fails the request
        self.conflict_retries = max(conflict_retries, 0)
        self.clients = ClientDirectory(db)
        self.catalog = MenuCatalog(db)
        self.orders = OrderStore(db)

    async def create(self, request: CreateOrderRequest) -> Order:
        """Validate, price and persist a new order with all its lines."""
        attempts = 1 + self.conflict_retries
        for attempt in range(1, attempts + 1):
            try:
                order_id = await self._create_once(request)
            except ConflictError as e:
                if attempt == attempts:
                    logger.error(f"[ORDERS] Order creation conflicted: {e.message}")
                    raise
                logger.warning(
                    f"[ORDERS] Order number clash on attempt {attempt}/{attempts}, regenerating"
                )
                continue
            return await self.get_order(order_id)

    async def _create_once(self, request: CreateOrderRequest) -> int:
        # Refusals are raised before the write block and leave the session untouched.
        client = await self.clients.resolve_client(request.client_id)

        priced_lines: List[Tuple[OrderLineRequest, Decimal]] = []
        for line in request.items:
            menu_item = await self.catalog.resolve_menu_item(line.menu_item_id)
            if not menu_item.available:
                raise BusinessRuleViolation(f'Menu item "{menu_item.name}" is not available')
            priced_lines.append((line, to_money(menu_item.price)))

        pricing = calculate_totals(
            [(price, line.quantity) for line, price in priced_lines],
            discount=request.discount,
            tax_rate=self.tax_rate,
        )

        async with self.orders.transaction():
            order = Order(
                order_number=self.number_generator.generate(),
                client_id=client.id,
                status=INITIAL_STATUS,
                delivery_date=request.delivery_date,
                delivery_time=request.delivery_time,
                delivery_address=request.delivery_address,
                notes=request.notes,
                party_size=request.party_size,
                subtotal=pricing.subtotal,
                tax=pricing.tax,
                discount=pricing.discount,
                total=pricing.total,
            )
            await self.orders.save_order(order)

            for (line, price), line_subtotal in zip(priced_lines, pricing.line_subtotals):
                await self.orders.save_order_line(
                    OrderItem(
                        order_id=order.id,
                        menu_item_id=line.menu_item_id,
                        quantity=line.quantity,
                        unit_price=price,
                        subtotal=line_subtotal,
                        customizations=line.customizations,
                    )
                )
            order_id, order_number = order.id, order.order_number

        logger.info(
            f"[ORDERS] Created order {order_number} (id={order_id}) for client "
            f"{request.client_id} - {len(priced_lines)} lines, total {pricing.total}"
        )
        return order_id

    async def get_order(self, order_id: int) -> Order:
        """Get an order with its lines or raise NotFoundError."""
        order = await self.orders.find_order(order_id)
        if order is None:
            raise NotFoundError(f"Order {order_id} not found")
        return order

    async def list_orders(
        self, filters: Optional[OrderFilters] = None, page: int = 1, limit: int = 10
    ) -> OrderPage:
        """List orders newest first."""
        return await self.orders.list_orders(filters, page=page, limit=limit)

    async def get_statistics(
        self, date_from: Optional[date] = None, date_to: Optional[date] = None
    ) -> OrderStatistics:
        """Order counts and revenue for the given creation-date window."""
        return await self.orders.statistics(date_from, date_to)

    async def update_status(self, order_id: int, new_status: Optional[OrderStatus]) -> Order:
        """
        Set an order's status and announce the change.

        Any status may be set directly. Passing None returns the order
        untouched and publishes nothing.
        """
        order = await self.get_order(order_id)
        if new_status is None:
            return order

        old_status = order.status
        async with self.orders.transaction():
            order.status = new_status

        self._announce(order, old_status, new_status)
        return order

    async def cancel(self, order_id: int) -> Order:
        """Cancel an order unless it has already been delivered."""
        order = await self.get_order(order_id)
        old_status = order.status
        if not can_cancel(old_status):
            raise BusinessRuleViolation(
                f"Order {order.order_number} has already been delivered and cannot be cancelled"
            )

        async with self.orders.transaction():
            order.status = OrderStatus.CANCELLED

        self._announce(order, old_status, OrderStatus.CANCELLED)
        return order

    def _announce(self, order: Order, old_status: OrderStatus, new_status: OrderStatus) -> None:
        logger.info(f"[ORDERS] Order {order.order_number}: {old_status} -> {new_status}")
        report = self.status_hub.publish(OrderStatusChanged(order, old_status, new_status))
        if not report.ok:
            logger.warning(
                f"[ORDERS] {len(report.failures)} listener(s) failed for order {order.order_number}"
            )
