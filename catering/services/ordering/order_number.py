"""Order number generation."""
import random
from datetime import datetime
from typing import Callable, Optional

DEFAULT_PREFIX = "ORD"


class OrderNumberGenerator:
    """
    Builds human-facing order references such as ``ORD-2024-05-17-143005-042``.

    The number is the prefix, the local date, the time to the second and a
    three-digit random suffix. It never reads the database, so uniqueness is
    best-effort; the unique constraint on ``orders.order_number`` is what
    actually rejects a clash.
    """

    def __init__(
        self,
        prefix: str = DEFAULT_PREFIX,
        clock: Optional[Callable[[], datetime]] = None,
        rng: Optional[random.Random] = None,
    ):
        self.prefix = prefix
        self._clock = clock or datetime.now
        self._rng = rng or random.SystemRandom()

    def generate(self) -> str:
        """Return a fresh order number."""
        now = self._clock()
        suffix = self._rng.randint(0, 999)
        return f"{self.prefix}-{now:%Y-%m-%d}-{now:%H%M%S}-{suffix:03d}"
