from .api import CartApiClient, CartFetchResult, CartRequestError
from .events import CART_UPDATED, EventChannel, events
from .storage import FileStorage, KeyValueStorage, MemoryStorage
from .store import CartStore
from .toast import Toast, ToastCenter, toasts
from .widgets import AddToCartButton, CartIcon, CartPage, QuickAddButton

__all__ = [
    "CartApiClient", "CartFetchResult", "CartRequestError",
    "CART_UPDATED", "EventChannel", "events",
    "FileStorage", "KeyValueStorage", "MemoryStorage",
    "CartStore",
    "Toast", "ToastCenter", "toasts",
    "AddToCartButton", "CartIcon", "CartPage", "QuickAddButton",
]
