import logging
import threading
from collections import defaultdict
from typing import Callable, Dict, List

logger = logging.getLogger(__name__)

CART_UPDATED = "cart-updated"

Listener = Callable[..., None]


class EventChannel:
    """
    Process-wide publish/subscribe by event name.

    No widget owns the channel. Widgets subscribe when mounted and call the
    returned function when torn down. A failing listener is logged and does
    not stop delivery to the others.
    """

    def __init__(self):
        self._listeners: Dict[str, List[Listener]] = defaultdict(list)
        self._lock = threading.Lock()

    def subscribe(self, name: str, listener: Listener) -> Callable[[], None]:
        with self._lock:
            self._listeners[name].append(listener)

        def unsubscribe() -> None:
            self.unsubscribe(name, listener)

        return unsubscribe

    def unsubscribe(self, name: str, listener: Listener) -> None:
        with self._lock:
            listeners = self._listeners.get(name, [])
            if listener in listeners:
                listeners.remove(listener)

    def emit(self, name: str, *args) -> int:
        """Call every listener of `name`; returns how many were called"""
        with self._lock:
            listeners = list(self._listeners.get(name, []))

        for listener in listeners:
            try:
                listener(*args)
            except Exception:
                logger.exception(f"Listener for '{name}' failed")
        return len(listeners)

    def listener_count(self, name: str) -> int:
        with self._lock:
            return len(self._listeners.get(name, []))


# Shared by every widget in the process
events = EventChannel()
