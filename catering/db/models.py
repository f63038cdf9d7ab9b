"""Database models."""
from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    Date,
    DateTime,
    Enum,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
    Time,
)
from sqlalchemy.orm import declarative_base, relationship

from catering.services.ordering.status import OrderStatus

Base = declarative_base()


def utcnow() -> datetime:
    """Naive UTC timestamp for created/updated columns."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def _money() -> Numeric:
    return Numeric(10, 2, asdecimal=True)


class Client(Base):
    """Catering client model."""

    __tablename__ = "clients"

    id = Column(Integer, primary_key=True, index=True)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    email = Column(String(255), unique=True, nullable=False)
    phone = Column(String(20), nullable=False)
    address = Column(String(255), nullable=False)
    company = Column(String(100), nullable=True)
    notes = Column(Text, nullable=True)
    active = Column(Boolean, default=True, nullable=False)  # soft-delete marker
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    # Relationships
    orders = relationship("Order", back_populates="client")


class Category(Base):
    """Menu category model."""

    __tablename__ = "categories"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), unique=True, nullable=False)
    description = Column(Text, nullable=True)
    active = Column(Boolean, default=True, nullable=False)

    # Relationships
    menu_items = relationship("MenuItem", back_populates="category")


class MenuItem(Base):
    """Menu item model."""

    __tablename__ = "menu_items"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False)
    description = Column(Text, nullable=False, default="")
    price = Column(_money(), nullable=False)
    available = Column(Boolean, default=True, nullable=False)
    preparation_minutes = Column(Integer, default=0, nullable=False)
    ingredients = Column(JSON, nullable=True)  # List of ingredient strings
    allergens = Column(JSON, nullable=True)  # List of allergen strings
    category_id = Column(Integer, ForeignKey("categories.id"), nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    # Relationships
    category = relationship("Category", back_populates="menu_items")


class Order(Base):
    """Catering order model."""

    __tablename__ = "orders"

    id = Column(Integer, primary_key=True, index=True)
    order_number = Column(String(50), unique=True, index=True, nullable=False)
    status = Column(
        Enum(
            OrderStatus,
            name="order_status",
            native_enum=False,
            length=20,
            values_callable=lambda enum: [member.value for member in enum],
        ),
        default=OrderStatus.PENDING,
        nullable=False,
    )
    delivery_date = Column(Date, nullable=False)
    delivery_time = Column(Time, nullable=False)
    delivery_address = Column(String(255), nullable=False)
    notes = Column(Text, nullable=True)
    subtotal = Column(_money(), nullable=False)
    tax = Column(_money(), default=Decimal("0.00"), nullable=False)
    discount = Column(_money(), default=Decimal("0.00"), nullable=False)
    total = Column(_money(), nullable=False)
    party_size = Column(Integer, nullable=False)
    client_id = Column(Integer, ForeignKey("clients.id"), nullable=False, index=True)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    # Relationships
    client = relationship("Client", back_populates="orders")
    items = relationship(
        "OrderItem",
        back_populates="order",
        order_by="OrderItem.id",
        cascade="all, delete-orphan",
    )


class OrderItem(Base):
    """Order line model. ``unit_price`` is a snapshot taken at creation."""

    __tablename__ = "order_items"

    id = Column(Integer, primary_key=True, index=True)
    order_id = Column(Integer, ForeignKey("orders.id"), nullable=False, index=True)
    menu_item_id = Column(Integer, ForeignKey("menu_items.id"), nullable=False)
    quantity = Column(Integer, nullable=False)
    unit_price = Column(_money(), nullable=False)
    subtotal = Column(_money(), nullable=False)
    customizations = Column(Text, nullable=True)

    # Relationships
    order = relationship("Order", back_populates="items")
    menu_item = relationship("MenuItem")


class SupplyItem(Base):
    """Inventory supply model."""

    __tablename__ = "supply_items"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), unique=True, nullable=False)
    description = Column(Text, nullable=True)
    unit = Column(String(20), nullable=False)  # kg, g, l, ml, unit
    current_quantity = Column(_money(), nullable=False)
    minimum_quantity = Column(_money(), nullable=False)
    unit_cost = Column(_money(), nullable=False)
    supplier = Column(String(100), nullable=True)
    expiry_date = Column(Date, nullable=True)
    active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)
