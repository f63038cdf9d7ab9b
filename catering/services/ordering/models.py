"""Order request and result models."""
from datetime import date, time
from decimal import Decimal
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from catering.db.models import Order
from catering.services.ordering.status import OrderStatus


class OrderLineRequest(BaseModel):
    """One requested menu selection."""

    menu_item_id: int = Field(gt=0)
    quantity: int = Field(gt=0)
    customizations: Optional[str] = None


class CreateOrderRequest(BaseModel):
    """Everything needed to place a catering order."""

    client_id: int = Field(gt=0)
    delivery_date: date
    delivery_time: time
    delivery_address: str = Field(min_length=10, max_length=255)
    notes: Optional[str] = None
    party_size: int = Field(gt=0)
    discount: Decimal = Field(default=Decimal("0"), ge=0, decimal_places=2)
    items: List[OrderLineRequest] = Field(min_length=1)


class OrderFilters(BaseModel):
    """Optional filters for order listings. Dates apply to the delivery date."""

    status: Optional[OrderStatus] = None
    client_id: Optional[int] = None
    date_from: Optional[date] = None
    date_to: Optional[date] = None


class OrderPage(BaseModel):
    """One page of an order listing."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    orders: List[Order]
    total: int
    page: int
    limit: int
    total_pages: int


class TopMenuItem(BaseModel):
    """Most requested menu item by quantity."""

    menu_item_id: int
    name: str
    quantity: int


class DailyOrderCount(BaseModel):
    """Orders created on one calendar day."""

    day: date
    orders: int


class RecurringClient(BaseModel):
    """Client with more than a handful of orders."""

    client_id: int
    first_name: str
    last_name: str
    orders: int


class OrderStatistics(BaseModel):
    """Aggregate order figures over a creation-date window."""

    total_orders: int
    orders_by_status: Dict[str, int] = {}
    revenue: Decimal = Decimal("0.00")
    top_menu_item: Optional[TopMenuItem] = None
    orders_by_day: List[DailyOrderCount] = []
    recurring_clients: List[RecurringClient] = []
