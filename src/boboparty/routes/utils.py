import logging
from typing import Any, Dict

from flask import current_app, jsonify, request
from marshmallow import Schema, ValidationError

from boboparty.core.dependencies import DependencyContainer
from boboparty.core.exceptions import RequestValidationError
from boboparty.models.cart import Cart

logger = logging.getLogger(__name__)

CONTAINER_KEY = "boboparty"


def get_container() -> DependencyContainer:
    """Dependency container attached to the running app by create_app()."""
    return current_app.extensions[CONTAINER_KEY]


def cart_response(cart: Cart, status: int = 200):
    """Every successful cart call answers {"cart": {...}}."""
    return jsonify({"cart": cart.to_dict()}), status


def first_error_message(messages: Any) -> str:
    """Pick the first message out of marshmallow's nested error structure."""
    if isinstance(messages, dict):
        for value in messages.values():
            return first_error_message(value)
    if isinstance(messages, (list, tuple)) and messages:
        return first_error_message(messages[0])
    return str(messages)


def load_json_body(schema: Schema) -> Dict[str, Any]:
    """
    Parse and validate the request body before any service call.

    Raises:
        RequestValidationError: body is not a JSON object or fails the schema
    """
    data = request.get_json(force=True, silent=True)
    if not isinstance(data, dict):
        logger.warning(f"Invalid JSON body on {request.method} {request.path}")
        raise RequestValidationError("Invalid JSON body.")

    try:
        return schema.load(data)
    except ValidationError as err:
        message = first_error_message(err.messages)
        logger.warning(f"Rejected {request.method} {request.path}: {message}")
        raise RequestValidationError(message, field_errors=[message])
