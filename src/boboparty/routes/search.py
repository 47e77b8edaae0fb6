import logging

from flask import Blueprint, jsonify, request

from boboparty.core.exceptions import StorefrontError
from boboparty.routes.utils import get_container
from boboparty.services.search_service import SearchService

logger = logging.getLogger(__name__)

search_bp = Blueprint("search", __name__)


@search_bp.route("", methods=["GET"])
def search_products():
    """Title search for the header search box. Short queries return nothing."""
    query = request.args.get("q", "")

    try:
        results = get_container().get(SearchService).search(query)
    except StorefrontError as e:
        logger.error(f"search_products error: {e.internal_message}")
        return jsonify({"results": []}), 500

    return jsonify({"results": [result.to_dict() for result in results]})
