import logging

from flask import Blueprint, jsonify, request

from boboparty.core.exceptions import RequestValidationError, StorefrontError
from boboparty.routes.schemas import AddCartLinesSchema, RemoveCartLinesSchema, UpdateCartLinesSchema
from boboparty.routes.utils import cart_response, get_container, load_json_body
from boboparty.services.cart_service import CartService

logger = logging.getLogger(__name__)

cart_bp = Blueprint("cart", __name__)

_add_schema = AddCartLinesSchema()
_update_schema = UpdateCartLinesSchema()
_remove_schema = RemoveCartLinesSchema()


def _cart_service() -> CartService:
    return get_container().get(CartService)


@cart_bp.route("", methods=["GET"])
def get_cart():
    """Return the cart, or {cart: null, expired: true} when Shopify no longer knows it."""
    cart_id = (request.args.get("cartId") or "").strip()
    if not cart_id:
        raise RequestValidationError("Missing cartId.")

    try:
        cart = _cart_service().get(cart_id)
    except StorefrontError as e:
        if e.is_not_found:
            logger.info(f"Cart {cart_id} has expired")
            return jsonify({"cart": None, "expired": True}), 200
        logger.error(f"get_cart error: {e.internal_message}")
        raise

    return cart_response(cart)


@cart_bp.route("", methods=["POST"])
def add_to_cart():
    """
    Create a cart, or add lines to an existing one.

    A stale cartId does not fail the request: the lines go into a new cart
    and the new id is returned for the client to persist.
    """
    data = load_json_body(_add_schema)
    cart_id = data["cart_id"]
    lines = data["lines"]
    service = _cart_service()

    if not cart_id:
        try:
            cart = service.create(lines)
        except StorefrontError as e:
            logger.error(f"add_to_cart create error: {e.internal_message}")
            raise
        return cart_response(cart)

    if not lines:
        raise RequestValidationError("Missing cart lines.")

    try:
        cart = service.add_lines(cart_id, lines)
    except StorefrontError as e:
        if not e.is_not_found:
            logger.error(f"add_to_cart error: {e.internal_message}")
            raise
        logger.info(f"Cart {cart_id} has expired; moving {len(lines)} line(s) to a new cart")
        try:
            cart = service.create(lines)
        except StorefrontError as create_error:
            logger.error(f"add_to_cart fallback create error: {create_error.internal_message}")
            raise

    return cart_response(cart)


@cart_bp.route("", methods=["PUT"])
def update_cart_lines():
    """Set quantities for existing lines."""
    data = load_json_body(_update_schema)

    try:
        cart = _cart_service().update_lines(data["cart_id"], data["line_updates"])
    except StorefrontError as e:
        logger.error(f"update_cart_lines error: {e.internal_message}")
        raise

    return cart_response(cart)


@cart_bp.route("", methods=["DELETE"])
def remove_cart_lines():
    """Remove lines by id."""
    data = load_json_body(_remove_schema)

    try:
        cart = _cart_service().remove_lines(data["cart_id"], data["line_ids"])
    except StorefrontError as e:
        logger.error(f"remove_cart_lines error: {e.internal_message}")
        raise

    return cart_response(cart)
