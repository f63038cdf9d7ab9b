"""Inventory API endpoints."""
import logging
from datetime import date
from decimal import Decimal
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, ConfigDict

from catering.core.dependencies import get_inventory_monitor, get_inventory_service
from catering.services.inventory.models import StockUpdate, SupplyItemCreate, SupplyItemUpdate
from catering.services.inventory.monitor import InventoryThresholdMonitor
from catering.services.inventory.service import InventoryService

router = APIRouter()
logger = logging.getLogger(__name__)


class SupplyItemResponse(BaseModel):
    """Supply item response model."""
    id: int
    name: str
    description: Optional[str] = None
    unit: str
    current_quantity: Decimal
    minimum_quantity: Decimal
    unit_cost: Decimal
    supplier: Optional[str] = None
    expiry_date: Optional[date] = None
    active: bool

    model_config = ConfigDict(from_attributes=True)


class SweepResponse(BaseModel):
    """Inventory sweep response model."""
    low_stock: List[SupplyItemResponse] = []
    expiring_soon: List[SupplyItemResponse] = []


@router.get("/api/inventory", response_model=List[SupplyItemResponse])
async def list_supplies(service: InventoryService = Depends(get_inventory_service)):
    """List active supply items."""
    items = await service.list_active()
    logger.debug(f"[INVENTORY] Listing {len(items)} active supply items")
    return [SupplyItemResponse.model_validate(item) for item in items]


@router.post("/api/inventory", response_model=SupplyItemResponse, status_code=201)
async def create_supply(
    payload: SupplyItemCreate,
    service: InventoryService = Depends(get_inventory_service),
):
    """Create a supply item."""
    item = await service.create(payload)
    return SupplyItemResponse.model_validate(item)


@router.post("/api/inventory/sweep", response_model=SweepResponse)
async def run_sweep(
    lookahead_days: Optional[int] = Query(None, ge=0),
    monitor: InventoryThresholdMonitor = Depends(get_inventory_monitor),
):
    """Scan supplies and re-announce low stock and upcoming expiry."""
    logger.info(f"[INVENTORY] Sweep requested - lookahead_days: {lookahead_days}")
    result = await monitor.sweep(lookahead_days)
    return SweepResponse(
        low_stock=[SupplyItemResponse.model_validate(item) for item in result.low_stock],
        expiring_soon=[SupplyItemResponse.model_validate(item) for item in result.expiring_soon],
    )


@router.patch("/api/inventory/{item_id}", response_model=SupplyItemResponse)
async def update_supply(
    item_id: int,
    payload: SupplyItemUpdate,
    service: InventoryService = Depends(get_inventory_service),
):
    """Update a supply item."""
    item = await service.update(item_id, payload)
    return SupplyItemResponse.model_validate(item)


@router.patch("/api/inventory/{item_id}/stock", response_model=SupplyItemResponse)
async def update_stock(
    item_id: int,
    payload: StockUpdate,
    service: InventoryService = Depends(get_inventory_service),
):
    """Set the on-hand quantity of a supply item."""
    item = await service.update_stock(item_id, payload)
    return SupplyItemResponse.model_validate(item)


@router.delete("/api/inventory/{item_id}")
async def delete_supply(
    item_id: int,
    service: InventoryService = Depends(get_inventory_service),
):
    """Deactivate a supply item."""
    await service.remove(item_id)
    return {"success": True, "message": f"Supply item {item_id} deactivated"}
