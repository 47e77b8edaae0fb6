import logging
import threading
import uuid
from dataclasses import dataclass
from typing import Callable, List, Optional

from boboparty.core.config import config

logger = logging.getLogger(__name__)

TOAST_TYPES = ("success", "error", "info")

ToastListener = Callable[[List["Toast"]], None]
Scheduler = Callable[[float, Callable[[], None]], None]


@dataclass(frozen=True)
class Toast:
    id: str
    message: str
    type: str = "success"


def timer_scheduler(delay: float, callback: Callable[[], None]) -> None:
    timer = threading.Timer(delay, callback)
    timer.daemon = True
    timer.start()


class ToastCenter:
    """Short-lived notifications; each toast dismisses itself after `duration` seconds"""

    def __init__(self, duration: float = 3.0, scheduler: Optional[Scheduler] = None):
        self.duration = duration
        self._schedule = scheduler or timer_scheduler
        self._toasts: List[Toast] = []
        self._listeners: List[ToastListener] = []
        self._lock = threading.Lock()

    @property
    def messages(self) -> List[Toast]:
        with self._lock:
            return list(self._toasts)

    def show(self, message: str, type: str = "success") -> Toast:
        if type not in TOAST_TYPES:
            raise ValueError(f"Unknown toast type: {type}")
        toast = Toast(id=uuid.uuid4().hex, message=message, type=type)
        with self._lock:
            self._toasts.append(toast)
        self._notify()
        self._schedule(self.duration, lambda: self.dismiss(toast.id))
        return toast

    def dismiss(self, toast_id: str) -> None:
        with self._lock:
            before = len(self._toasts)
            self._toasts = [t for t in self._toasts if t.id != toast_id]
            changed = len(self._toasts) != before
        if changed:
            self._notify()

    def subscribe(self, listener: ToastListener) -> Callable[[], None]:
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        with self._lock:
            listeners = list(self._listeners)
            snapshot = list(self._toasts)
        for listener in listeners:
            try:
                listener(snapshot)
            except Exception:
                logger.exception("Toast listener failed")


toasts = ToastCenter(duration=config.cart.toast_duration_seconds)
