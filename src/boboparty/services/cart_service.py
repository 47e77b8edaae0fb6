from typing import Any, Dict, List, Optional, Sequence
import logging

from boboparty.core.exceptions import CartNotFoundError, ErrorKind, ProtocolError, UpstreamError
from boboparty.gateways.queries import (
    ADD_LINES_MUTATION, CREATE_CART_MUTATION, GET_CART_QUERY,
    REMOVE_LINES_MUTATION, UPDATE_LINES_MUTATION,
)
from boboparty.gateways.shopify import NO_STORE, ShopifyGateway
from boboparty.models.cart import Cart, CartLineInput, CartLineUpdate
from boboparty.services.cart_mapper import map_cart

logger = logging.getLogger(__name__)


class CartService:
    """
    Shopify cart operations

    Each operation is one gateway call followed by one mapping step, and
    returns the complete cart Shopify sent back. Failures are raised, never
    rendered: deciding on HTTP status is the proxy's job.
    """

    def __init__(self, gateway: ShopifyGateway):
        self.gateway = gateway

    def create(self, lines: Optional[Sequence[CartLineInput]] = None) -> Cart:
        """Create a cart, optionally seeded with lines. Zero lines is valid."""
        logger.info(f"Creating cart with {len(lines or [])} line(s)")
        variables = {"lines": [line.to_graphql() for line in lines] if lines else None}
        cart = self._mutate("cartCreate", CREATE_CART_MUTATION, variables, "Shopify cart was not created.")
        logger.info(f"Created cart {cart.id}")
        return cart

    def get(self, cart_id: str) -> Cart:
        """
        Fetch a cart by id

        Raises:
            CartNotFoundError: Shopify returned no cart (expired or unknown id)
        """
        data = self.gateway.request(GET_CART_QUERY, {"cartId": cart_id}, cache=NO_STORE)
        payload = data.get("cart")
        if not payload:
            logger.info(f"Cart {cart_id} not found upstream")
            raise CartNotFoundError(cart_id)
        return map_cart(payload)

    def add_lines(self, cart_id: str, lines: Sequence[CartLineInput]) -> Cart:
        logger.info(f"Adding {len(lines)} line(s) to cart {cart_id}")
        variables = {"cartId": cart_id, "lines": [line.to_graphql() for line in lines]}
        return self._mutate("cartLinesAdd", ADD_LINES_MUTATION, variables, "Unable to add lines to cart.")

    def update_lines(self, cart_id: str, updates: Sequence[CartLineUpdate]) -> Cart:
        """Set line quantities. Callers guarantee quantity >= 1."""
        logger.info(f"Updating {len(updates)} line(s) in cart {cart_id}")
        variables = {"cartId": cart_id, "lines": [update.to_graphql() for update in updates]}
        return self._mutate("cartLinesUpdate", UPDATE_LINES_MUTATION, variables, "Unable to update cart lines.")

    def remove_lines(self, cart_id: str, line_ids: Sequence[str]) -> Cart:
        logger.info(f"Removing {len(line_ids)} line(s) from cart {cart_id}")
        variables = {"cartId": cart_id, "lineIds": list(line_ids)}
        return self._mutate("cartLinesRemove", REMOVE_LINES_MUTATION, variables, "Unable to remove cart lines.")

    # Private helpers
    def _mutate(self, field: str, query: str, variables: Dict[str, Any], failure_message: str) -> Cart:
        data = self.gateway.request(query, variables, cache=NO_STORE)

        result = data.get(field)
        if not isinstance(result, dict):
            raise ProtocolError(f"Shopify response is missing {field}.")

        self._assert_no_user_errors(field, result.get("userErrors") or [])

        if not result.get("cart"):
            logger.error(f"{field} returned no cart")
            raise UpstreamError(failure_message, kind=ErrorKind.UNKNOWN)

        return map_cart(result["cart"])

    @staticmethod
    def _assert_no_user_errors(field: str, user_errors: List[Dict[str, Any]]) -> None:
        if not user_errors:
            return
        messages = [str(error.get("message") or "Unknown error") for error in user_errors]
        error = UpstreamError.from_messages(messages)
        logger.error(f"{field} userErrors: {error.message} (kind={error.kind.value})")
        raise error
