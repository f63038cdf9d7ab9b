"""Order status enumeration."""
from enum import Enum


class OrderStatus(str, Enum):
    """Delivery lifecycle of a catering order.

    The main chain runs PENDING -> CONFIRMED -> PREPARING -> READY -> DELIVERED.
    CANCELLED is a side exit from any state except DELIVERED. Status updates
    are permissive: any state may be set directly, only cancelling a
    delivered order is refused.
    """

    PENDING = "pending"
    CONFIRMED = "confirmed"
    PREPARING = "preparing"
    READY = "ready"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"

    def __str__(self) -> str:
        """Return the string value of the status."""
        return self.value


INITIAL_STATUS = OrderStatus.PENDING


def can_cancel(status: OrderStatus) -> bool:
    """Whether an order in ``status`` may be cancelled."""
    return status != OrderStatus.DELIVERED
