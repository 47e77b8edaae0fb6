import logging
from datetime import datetime, timezone
from typing import Optional

from flask import Flask, jsonify

from boboparty.core.config import Config, config
from boboparty.core.dependencies import DependencyContainer
from boboparty.core.exceptions import StorefrontError
from boboparty.gateways.shopify import ShopifyGateway, status_summary
from boboparty.routes import cart_bp, search_bp
from boboparty.routes.utils import CONTAINER_KEY
from boboparty.services.cart_service import CartService
from boboparty.services.search_service import SearchService

logger = logging.getLogger(__name__)


def build_container(app_config: Config) -> DependencyContainer:
    """Wire services for one app instance. Tests replace ShopifyGateway here."""
    container = DependencyContainer()
    container.register_singleton(Config, app_config)
    container.register_factory(ShopifyGateway, lambda: ShopifyGateway(app_config.shopify))
    container.register_factory(CartService, lambda: CartService(container.get(ShopifyGateway)))
    container.register_factory(
        SearchService,
        lambda: SearchService(container.get(ShopifyGateway), app_config.shopify.search_cache_seconds),
    )
    return container


def create_app(app_config: Optional[Config] = None) -> Flask:
    """
    Application factory.

    Each call builds its own container, so tests can create apps with
    different configs and fake gateways side by side.
    """
    app_config = app_config or config

    logging.basicConfig(
        level=getattr(logging, app_config.app.log_level.upper(), logging.INFO),
        format="%(asctime)s  %(levelname)-8s  %(name)s  %(message)s",
    )

    app = Flask(__name__)
    app.config["DEBUG"] = app_config.app.debug
    app.extensions[CONTAINER_KEY] = build_container(app_config)

    # ------------------------------------------------------------------ #
    # Blueprints                                                          #
    # ------------------------------------------------------------------ #
    app.register_blueprint(cart_bp, url_prefix="/api/shopify/cart")
    app.register_blueprint(search_bp, url_prefix="/api/search")

    # ------------------------------------------------------------------ #
    # Error handlers: every error body is {"error": "..."}                #
    # ------------------------------------------------------------------ #
    @app.errorhandler(400)
    def bad_request(e):
        return jsonify({"error": str(e.description)}), 400

    @app.errorhandler(404)
    def not_found(e):
        return jsonify({"error": str(e.description)}), 404

    @app.errorhandler(405)
    def method_not_allowed(e):
        return jsonify({"error": str(e.description)}), 405

    @app.errorhandler(StorefrontError)
    def storefront_error(e: StorefrontError):
        if e.internal_message != e.message:
            logger.error(f"{e.__class__.__name__}: {e.internal_message}")
        return jsonify(e.to_dict()), e.status_code

    @app.errorhandler(500)
    def internal_error(e):
        return jsonify({"error": "An internal server error occurred."}), 500

    # ------------------------------------------------------------------ #
    # Health check                                                         #
    # ------------------------------------------------------------------ #
    @app.get("/health")
    def health():
        """Readiness probe. 503 when Shopify credentials are missing; no upstream call."""
        ready, shopify_status = status_summary(app_config.shopify)
        return jsonify({
            "status": "ok" if ready else "error",
            "shopify": shopify_status,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }), 200 if ready else 503

    return app


if __name__ == "__main__":
    application = create_app()
    application.run(debug=config.app.debug, host=config.app.host, port=config.app.port)
