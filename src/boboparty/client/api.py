import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional, Sequence, Tuple

import requests

from boboparty.models.cart import Cart, CartLineInput, CartLineUpdate

logger = logging.getLogger(__name__)


class CartRequestError(Exception):
    """The cart proxy refused or failed a request"""

    def __init__(self, message: str, status: Optional[int] = None):
        self.message = message
        self.status = status
        super().__init__(message)


@dataclass
class CartFetchResult:
    cart: Optional[Cart]
    expired: bool = False


class CartApiClient:
    """
    JSON client for the cart proxy.

    Holds no cart state: every call returns the proxy's full snapshot and the
    caller replaces its view with it.
    """

    def __init__(
        self,
        base_url: str = "",
        session: Optional[requests.Session] = None,
        timeout: float = 15.0,
        path: str = "/api/shopify/cart",
    ):
        self.url = f"{base_url.rstrip('/')}{path}"
        self.session = session or requests.Session()
        self.timeout = timeout

    def get_cart(self, cart_id: str) -> CartFetchResult:
        """
        `expired=True` means the id is stale and should be forgotten. A
        successful answer without a cart counts as expired too.
        """
        _, payload = self._send("GET", "Unable to load cart.", params={"cartId": cart_id})
        cart = payload.get("cart")
        if payload.get("expired") or not cart:
            return CartFetchResult(cart=None, expired=True)
        return CartFetchResult(cart=Cart.from_dict(cart))

    def add_lines(self, lines: Sequence[CartLineInput], cart_id: Optional[str] = None) -> Cart:
        """POST. Without cart_id, or with a stale one, the proxy answers with a new cart."""
        body: Dict[str, Any] = {"lines": [line.to_graphql() for line in lines]}
        if cart_id:
            body["cartId"] = cart_id
        return self._mutate("POST", body, "Unable to add to cart.")

    def update_lines(self, cart_id: str, updates: Sequence[CartLineUpdate]) -> Cart:
        body = {"cartId": cart_id, "lineUpdates": [update.to_graphql() for update in updates]}
        return self._mutate("PUT", body, "Unable to update cart.")

    def remove_lines(self, cart_id: str, line_ids: Sequence[str]) -> Cart:
        body = {"cartId": cart_id, "lineIds": list(line_ids)}
        return self._mutate("DELETE", body, "Unable to update cart.")

    def _mutate(self, method: str, body: Dict[str, Any], default_error: str) -> Cart:
        status, payload = self._send(method, default_error, json=body)
        cart = payload.get("cart")
        if not cart:
            raise CartRequestError(payload.get("error") or default_error, status)
        return Cart.from_dict(cart)

    def _send(self, method: str, default_error: str, **kwargs) -> Tuple[int, Dict[str, Any]]:
        try:
            response = self.session.request(method, self.url, timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            logger.error(f"Cart {method} failed: {e}")
            raise CartRequestError(default_error)

        try:
            payload = response.json()
        except ValueError:
            payload = None
        if not isinstance(payload, dict):
            payload = {}

        if not 200 <= response.status_code < 300:
            message = payload.get("error") or default_error
            logger.warning(f"Cart {method} answered {response.status_code}: {message}")
            raise CartRequestError(message, response.status_code)

        return response.status_code, payload
