"""
Cart widgets.

Each widget reads the cart id from the CartStore when it needs it, talks to
the proxy through CartApiClient, and after a successful mutation calls
`store.commit(cart)`: persist the id, broadcast `cart-updated`. Widgets that
display the cart listen for that signal and re-fetch. No widget calls
another one directly.
"""
import logging
from typing import Any, Callable, Dict, List, Optional

from boboparty.client.api import CartApiClient, CartRequestError
from boboparty.client.store import CartStore
from boboparty.client.toast import ToastCenter, toasts as default_toasts
from boboparty.core.config import config
from boboparty.i18n import CartDictionary, get_dictionary
from boboparty.models.cart import Cart, CartLineInput, CartLineUpdate
from boboparty.utils.formatting import FormattingUtils

logger = logging.getLogger(__name__)


class CartWidget:
    """Mount/unmount lifecycle shared by all widgets"""

    def __init__(self, store: CartStore, api: CartApiClient, dictionary: Optional[CartDictionary] = None):
        self.store = store
        self.api = api
        self.dictionary = dictionary or get_dictionary(config.app.default_locale)
        self._unsubscribe: Optional[Callable[[], None]] = None

    @property
    def is_mounted(self) -> bool:
        return self._unsubscribe is not None

    def mount(self) -> None:
        if self.is_mounted:
            return
        self._unsubscribe = self.store.subscribe(self.on_cart_updated)
        self.on_mount()

    def unmount(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    def on_mount(self) -> None:
        pass

    def on_cart_updated(self) -> None:
        pass

    def fetch_current_cart(self) -> Optional[Cart]:
        """
        GET the stored cart. An expired id is forgotten and reported as no
        cart; there is no automatic retry.

        Raises:
            CartRequestError: the proxy failed for any other reason
        """
        cart_id = self.store.cart_id
        if not cart_id:
            return None
        result = self.api.get_cart(cart_id)
        if result.expired:
            self.store.forget()
            return None
        return result.cart


class CartIcon(CartWidget):
    """Header badge with the cart's total quantity"""

    def __init__(self, store: CartStore, api: CartApiClient, dictionary: Optional[CartDictionary] = None):
        super().__init__(store, api, dictionary)
        self.item_count = 0
        self.refresh_count = 0

    @property
    def badge(self) -> str:
        return FormattingUtils.format_badge_count(self.item_count)

    def on_mount(self) -> None:
        self.refresh()

    def on_cart_updated(self) -> None:
        self.refresh()

    def refresh(self) -> None:
        self.refresh_count += 1
        try:
            cart = self.fetch_current_cart()
        except CartRequestError as e:
            # The badge is decorative; the cart page reports real failures
            logger.warning(f"Cart badge refresh failed: {e.message}")
            self.item_count = 0
            return
        self.item_count = cart.total_quantity if cart else 0


class CartPage(CartWidget):
    """Full cart view: lines, quantity stepper, removal and totals"""

    def __init__(self, store: CartStore, api: CartApiClient, dictionary: Optional[CartDictionary] = None):
        super().__init__(store, api, dictionary)
        self.cart: Optional[Cart] = None
        self.is_loading = False
        self.error_message: Optional[str] = None

    @property
    def is_empty(self) -> bool:
        return self.cart is None or self.cart.is_empty

    def on_mount(self) -> None:
        self.load()

    def on_cart_updated(self) -> None:
        # Someone else changed the cart; re-read it rather than trust a stale view
        if self.store.cart_id or self.cart is not None:
            self.load()

    def load(self) -> None:
        self.is_loading = True
        try:
            self.cart = self.fetch_current_cart()
            self.error_message = None
        except CartRequestError as e:
            self.error_message = e.message or self.dictionary.unable_to_load
        finally:
            self.is_loading = False

    def update_line_quantity(self, line_id: str, quantity: int) -> Optional[Cart]:
        if self.cart is None:
            return None
        return self._apply(
            lambda cart_id: self.api.update_lines(cart_id, [CartLineUpdate(line_id=line_id, quantity=quantity)])
        )

    def increment(self, line_id: str) -> Optional[Cart]:
        line = self.cart.get_line(line_id) if self.cart else None
        if line is None:
            return None
        return self.update_line_quantity(line_id, line.quantity + 1)

    def decrement(self, line_id: str) -> Optional[Cart]:
        """Never goes below 1; removing is remove_line()."""
        line = self.cart.get_line(line_id) if self.cart else None
        if line is None:
            return None
        return self.update_line_quantity(line_id, max(1, line.quantity - 1))

    def remove_line(self, line_id: str) -> Optional[Cart]:
        if self.cart is None:
            return None
        return self._apply(lambda cart_id: self.api.remove_lines(cart_id, [line_id]))

    def rows(self) -> List[Dict[str, Any]]:
        """Display rows for the line list"""
        if self.cart is None:
            return []
        return [
            {
                "id": line.id,
                "product_title": line.product_title,
                "variant_title": line.title,
                "quantity": line.quantity,
                "price": FormattingUtils.format_money(line.price.amount, line.price.currency_code, decimal_places=0),
                "image_url": line.image_url,
                "image_label": line.product_title if line.image_url else self.dictionary.no_image,
            }
            for line in self.cart.lines
        ]

    def summary(self) -> Optional[Dict[str, str]]:
        """Order summary box; None for an empty cart"""
        if self.is_empty:
            return None
        cost = self.cart.cost
        return {
            "subtotal": FormattingUtils.format_money(cost.subtotal.amount, cost.subtotal.currency_code, decimal_places=0),
            "shipping": self.dictionary.shipping_at_checkout,
            "total": FormattingUtils.format_money(cost.total.amount, cost.total.currency_code, decimal_places=0),
            "checkout_url": self.cart.checkout_url,
        }

    def status_text(self) -> Optional[str]:
        if self.is_loading:
            return self.dictionary.loading_cart
        if self.error_message:
            return self.error_message
        if self.is_empty:
            return self.dictionary.empty_cart
        return None

    def _apply(self, mutation: Callable[[str], Cart]) -> Optional[Cart]:
        self.is_loading = True
        try:
            cart = mutation(self.cart.id)
        except CartRequestError as e:
            self.error_message = e.message or self.dictionary.unable_to_update
            return None
        finally:
            self.is_loading = False
        self.cart = cart
        self.error_message = None
        self.store.commit(cart)
        return cart


class AddToCartButton(CartWidget):
    """Product page button. Creates the cart on first use."""

    def __init__(
        self,
        store: CartStore,
        api: CartApiClient,
        merchandise_id: str,
        quantity: int = 1,
        disabled: bool = False,
        on_added: Optional[Callable[[Cart], None]] = None,
        dictionary: Optional[CartDictionary] = None,
    ):
        super().__init__(store, api, dictionary)
        self.merchandise_id = merchandise_id
        self.quantity = quantity
        self.disabled = disabled
        self.on_added = on_added
        self.is_loading = False
        self.error_message: Optional[str] = None

    @property
    def label(self) -> str:
        if self.is_loading:
            return self.dictionary.adding
        if self.disabled:
            return self.dictionary.out_of_stock
        return self.dictionary.add_to_cart

    def click(self) -> Optional[Cart]:
        if self.disabled or self.is_loading:
            return None
        self.is_loading = True
        self.error_message = None
        try:
            cart = self.api.add_lines(
                [CartLineInput(merchandise_id=self.merchandise_id, quantity=self.quantity)],
                cart_id=self.store.cart_id,
            )
        except CartRequestError as e:
            self.error_message = e.message or self.dictionary.unable_to_add
            return None
        finally:
            self.is_loading = False

        self.store.commit(cart)
        if self.on_added:
            self.on_added(cart)
        return cart


class QuickAddButton(CartWidget):
    """Product card shortcut: adds one unit and reports through a toast"""

    def __init__(
        self,
        store: CartStore,
        api: CartApiClient,
        merchandise_id: str,
        product_name: str,
        toasts: Optional[ToastCenter] = None,
        dictionary: Optional[CartDictionary] = None,
    ):
        super().__init__(store, api, dictionary)
        self.merchandise_id = merchandise_id
        self.product_name = product_name
        self.toasts = toasts or default_toasts
        self.is_loading = False

    @property
    def label(self) -> str:
        return self.dictionary.adding if self.is_loading else self.dictionary.quick_add

    def click(self) -> Optional[Cart]:
        if self.is_loading:
            return None
        self.is_loading = True
        try:
            cart = self.api.add_lines(
                [CartLineInput(merchandise_id=self.merchandise_id, quantity=1)],
                cart_id=self.store.cart_id,
            )
        except CartRequestError as e:
            self.toasts.show(e.message or self.dictionary.unable_to_add, "error")
            return None
        finally:
            self.is_loading = False

        self.store.commit(cart)
        self.toasts.show(f"{self.product_name} {self.dictionary.added_to_cart}", "success")
        return cart
