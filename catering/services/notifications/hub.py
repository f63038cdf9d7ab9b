"""In-process publish/subscribe hub."""
import logging
import threading
from dataclasses import dataclass, field
from typing import Callable, Generic, List, Tuple, TypeVar

logger = logging.getLogger(__name__)

E = TypeVar("E")

Listener = Callable[[E], None]


@dataclass
class ListenerFailure:
    """A listener that raised while handling an event."""

    listener: Callable
    error: Exception


@dataclass
class PublishReport:
    """Outcome of one publish call."""

    delivered: int = 0
    failures: List[ListenerFailure] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures


class NotificationHub(Generic[E]):
    """
    Synchronous fan-out of events to subscribed listeners.

    Listeners are plain callables receiving the event. They are invoked in
    subscription order on the publishing thread. A listener that raises is
    logged and recorded in the returned report; the others still run and the
    publisher never sees the exception. Delivery is at-most-once and nothing
    is kept for listeners that subscribe later.

    The registry is copied under a lock before each fan-out, so listeners may
    subscribe or unsubscribe (themselves included) while an event is being
    delivered, from any thread.
    """

    def __init__(self, name: str):
        self.name = name
        self._listeners: List[Listener] = []
        self._lock = threading.RLock()

    def subscribe(self, listener: Listener) -> None:
        """Register a listener."""
        with self._lock:
            self._listeners.append(listener)
        logger.debug(f"[HUB:{self.name}] Subscribed {_describe(listener)}")

    def unsubscribe(self, listener: Listener) -> None:
        """Remove a listener. Unknown listeners are ignored."""
        with self._lock:
            try:
                self._listeners.remove(listener)
            except ValueError:
                return
        logger.debug(f"[HUB:{self.name}] Unsubscribed {_describe(listener)}")

    @property
    def listeners(self) -> Tuple[Listener, ...]:
        """Snapshot of the current listeners in subscription order."""
        with self._lock:
            return tuple(self._listeners)

    def __len__(self) -> int:
        with self._lock:
            return len(self._listeners)

    def publish(self, event: E) -> PublishReport:
        """Deliver ``event`` to every listener subscribed at call time."""
        report = PublishReport()
        for listener in self.listeners:
            try:
                listener(event)
            except Exception as e:
                logger.error(
                    f"[HUB:{self.name}] Listener {_describe(listener)} failed on "
                    f"{type(event).__name__} - Error: {type(e).__name__}: {str(e)}",
                    exc_info=True,
                )
                report.failures.append(ListenerFailure(listener=listener, error=e))
            else:
                report.delivered += 1
        return report


def _describe(listener: Callable) -> str:
    return getattr(listener, "__qualname__", None) or type(listener).__name__
