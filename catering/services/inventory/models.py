"""Inventory request and result models."""
from datetime import date
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from catering.db.models import SupplyItem


class SupplyItemCreate(BaseModel):
    """New supply item."""

    name: str = Field(min_length=1, max_length=100)
    description: Optional[str] = None
    unit: str = Field(min_length=1, max_length=20)
    current_quantity: Decimal = Field(ge=0)
    minimum_quantity: Decimal = Field(ge=0)
    unit_cost: Decimal = Field(ge=0)
    supplier: Optional[str] = None
    expiry_date: Optional[date] = None


class SupplyItemUpdate(BaseModel):
    """Partial update of a supply item. Unset fields are left alone."""

    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    description: Optional[str] = None
    unit: Optional[str] = Field(default=None, min_length=1, max_length=20)
    current_quantity: Optional[Decimal] = Field(default=None, ge=0)
    minimum_quantity: Optional[Decimal] = Field(default=None, ge=0)
    unit_cost: Optional[Decimal] = Field(default=None, ge=0)
    supplier: Optional[str] = None
    expiry_date: Optional[date] = None


class StockUpdate(BaseModel):
    """New on-hand quantity for a supply item."""

    current_quantity: Decimal = Field(ge=0)


class SweepResult(BaseModel):
    """Items flagged by an inventory sweep."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    low_stock: List[SupplyItem] = []
    expiring_soon: List[SupplyItem] = []
