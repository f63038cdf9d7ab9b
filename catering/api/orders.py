"""Order API endpoints."""
import logging
from datetime import date, datetime, time
from decimal import Decimal
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from pydantic import BaseModel, ConfigDict

from catering.core.dependencies import get_order_engine
from catering.core.exceptions import CateringError
from catering.services.ordering.engine import OrderTransactionEngine
from catering.services.ordering.models import CreateOrderRequest, OrderFilters, OrderStatistics
from catering.services.ordering.status import OrderStatus

router = APIRouter()
logger = logging.getLogger(__name__)


class OrderItemResponse(BaseModel):
    """Order line response model."""
    id: int
    menu_item_id: int
    quantity: int
    unit_price: Decimal
    subtotal: Decimal
    customizations: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class OrderResponse(BaseModel):
    """Order response model."""
    id: int
    order_number: str
    status: OrderStatus
    client_id: int
    delivery_date: date
    delivery_time: time
    delivery_address: str
    notes: Optional[str] = None
    party_size: int
    subtotal: Decimal
    tax: Decimal
    discount: Decimal
    total: Decimal
    created_at: datetime
    updated_at: datetime
    items: List[OrderItemResponse] = []

    model_config = ConfigDict(from_attributes=True)


class OrderPageResponse(BaseModel):
    """Paginated order listing."""
    orders: List[OrderResponse]
    total: int
    page: int
    limit: int
    total_pages: int


class StatusUpdateRequest(BaseModel):
    """Status update payload."""
    status: Optional[OrderStatus] = None


@router.post("/api/orders", response_model=OrderResponse, status_code=201)
async def create_order(
    payload: CreateOrderRequest,
    engine: OrderTransactionEngine = Depends(get_order_engine),
):
    """Create a new catering order."""
    logger.info(
        f"[ORDERS] Create request - client: {payload.client_id}, lines: {len(payload.items)}"
    )
    order = await engine.create(payload)
    return OrderResponse.model_validate(order)


@router.get("/api/orders", response_model=OrderPageResponse)
async def list_orders(
    request: Request,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    status: Optional[OrderStatus] = None,
    client_id: Optional[int] = None,
    date_from: Optional[date] = None,
    date_to: Optional[date] = None,
    engine: OrderTransactionEngine = Depends(get_order_engine),
):
    """List orders with filters and pagination."""
    logger.info(
        f"[ORDERS] List request - page: {page}, limit: {limit}, status: {status}, "
        f"Client: {request.client.host if request.client else 'unknown'}"
    )

    try:
        filters = OrderFilters(
            status=status, client_id=client_id, date_from=date_from, date_to=date_to
        )
        result = await engine.list_orders(filters, page=page, limit=limit)
        logger.debug(f"[ORDERS] Found {result.total} matching orders")
        return OrderPageResponse(
            orders=[OrderResponse.model_validate(order) for order in result.orders],
            total=result.total,
            page=result.page,
            limit=result.limit,
            total_pages=result.total_pages,
        )

    except CateringError:
        raise
    except Exception as e:
        logger.error(
            f"[ORDERS] Error listing orders - Error: {type(e).__name__}: {str(e)}",
            exc_info=True
        )
        raise HTTPException(status_code=500, detail=f"Error listing orders: {str(e)}")


@router.get("/api/orders/statistics", response_model=OrderStatistics)
async def get_statistics(
    date_from: Optional[date] = None,
    date_to: Optional[date] = None,
    engine: OrderTransactionEngine = Depends(get_order_engine),
):
    """Get order statistics."""
    return await engine.get_statistics(date_from, date_to)


@router.get("/api/orders/{order_id}", response_model=OrderResponse)
async def get_order(
    order_id: int,
    engine: OrderTransactionEngine = Depends(get_order_engine),
):
    """Get an order by ID."""
    order = await engine.get_order(order_id)
    return OrderResponse.model_validate(order)


@router.patch("/api/orders/{order_id}/status", response_model=OrderResponse)
async def update_order_status(
    order_id: int,
    payload: StatusUpdateRequest,
    engine: OrderTransactionEngine = Depends(get_order_engine),
):
    """Update the status of an order."""
    logger.info(f"[ORDERS] Status update request - order: {order_id}, status: {payload.status}")
    order = await engine.update_status(order_id, payload.status)
    return OrderResponse.model_validate(order)


@router.patch("/api/orders/{order_id}/cancel", response_model=OrderResponse)
async def cancel_order(
    order_id: int,
    engine: OrderTransactionEngine = Depends(get_order_engine),
):
    """Cancel an order."""
    logger.info(f"[ORDERS] Cancel request - order: {order_id}")
    order = await engine.cancel(order_id)
    return OrderResponse.model_validate(order)
