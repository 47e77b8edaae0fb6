import logging
from typing import Callable, Optional

from boboparty.client.events import CART_UPDATED, EventChannel, events
from boboparty.client.storage import KeyValueStorage
from boboparty.core.config import config
from boboparty.models.cart import Cart

logger = logging.getLogger(__name__)


class CartStore:
    """
    Where the cart id lives, and how widgets tell each other it changed.

    The id is read from durable storage on every access; nothing keeps a copy
    in memory, so independent widgets never disagree about which cart they
    show. Cart contents are never shared here, only re-fetched.
    """

    def __init__(
        self,
        storage: KeyValueStorage,
        channel: EventChannel = events,
        key: str = config.cart.cart_id_key,
    ):
        self.storage = storage
        self.channel = channel
        self.key = key

    @property
    def cart_id(self) -> Optional[str]:
        return self.storage.get_item(self.key) or None

    def remember(self, cart: Cart) -> None:
        """Persist the cart's id; no write when it is unchanged."""
        if self.storage.get_item(self.key) != cart.id:
            logger.info(f"Persisting cart id {cart.id}")
            self.storage.set_item(self.key, cart.id)

    def forget(self) -> None:
        """Drop a stale id; the next add starts a new cart."""
        logger.info("Forgetting cart id")
        self.storage.remove_item(self.key)

    def notify_changed(self) -> int:
        return self.channel.emit(CART_UPDATED)

    def commit(self, cart: Cart) -> None:
        """What every widget does after a successful mutation"""
        self.remember(cart)
        self.notify_changed()

    def subscribe(self, listener: Callable[[], None]) -> Callable[[], None]:
        return self.channel.subscribe(CART_UPDATED, listener)
