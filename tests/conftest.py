"""Pytest configuration and fixtures"""
import itertools
import json
from decimal import Decimal
from typing import Any, Dict, List, Optional

import pytest

from boboparty.app import create_app
from boboparty.client.api import CartApiClient
from boboparty.client.events import EventChannel
from boboparty.client.storage import MemoryStorage
from boboparty.client.store import CartStore
from boboparty.core.config import AppConfig, CartConfig, Config, ShopifyConfig
from boboparty.gateways.shopify import ShopifyGateway
from boboparty.routes.utils import CONTAINER_KEY


CATALOG = {
    "gid://v1": {
        "title": "Gold / 40cm",
        "product_title": "Foil Balloon Number",
        "handle": "foil-balloon-number",
        "price": "38.00",
        "image": "https://cdn.example.com/balloon.jpg",
    },
    "gid://v2": {
        "title": "Default Title",
        "product_title": "Happy Birthday Banner",
        "handle": "happy-birthday-banner",
        "price": "49.90",
        "image": None,
    },
    "gid://v3": {
        "title": "Pack of 12",
        "product_title": "Confetti Cups",
        "handle": "confetti-cups",
        "price": "0.10",
        "image": "https://cdn.example.com/cups.jpg",
    },
}


OPERATIONS = (
    ("cartCreate(", "cartCreate"),
    ("cartLinesAdd(", "cartLinesAdd"),
    ("cartLinesUpdate(", "cartLinesUpdate"),
    ("cartLinesRemove(", "cartLinesRemove"),
    ("cart(id:", "cart"),
    ("products(", "products"),
)


class FakeShopify:
    """
    In-memory stand-in for ShopifyGateway speaking the Storefront cart API.

    Answers with the same payload shapes as the real API, including the
    userErrors Shopify sends for unknown carts and variants.
    """

    def __init__(self, catalog: Optional[Dict[str, Dict[str, Any]]] = None, currency: str = "HKD"):
        self.catalog = catalog if catalog is not None else CATALOG
        self.currency = currency
        self.carts: Dict[str, List[Dict[str, Any]]] = {}
        self.calls: List[Dict[str, Any]] = []
        self.products: List[Dict[str, Any]] = []
        self._cart_ids = itertools.count(1)
        self._line_ids = itertools.count(1)

    # ShopifyGateway interface
    def request(self, query, variables=None, cache="no-store", tags=(), revalidate=60, timeout_ms=None):
        variables = variables or {}
        self.calls.append({"query": query, "variables": variables, "cache": cache, "tags": tuple(tags)})

        if "cartCreate(" in query:
            return {"cartCreate": self._create(variables.get("lines"))}
        if "cartLinesAdd(" in query:
            return {"cartLinesAdd": self._add(variables["cartId"], variables["lines"])}
        if "cartLinesUpdate(" in query:
            return {"cartLinesUpdate": self._update(variables["cartId"], variables["lines"])}
        if "cartLinesRemove(" in query:
            return {"cartLinesRemove": self._remove(variables["cartId"], variables["lineIds"])}
        if "cart(id:" in query:
            cart_id = variables["cartId"]
            return {"cart": self._payload(cart_id) if cart_id in self.carts else None}
        if "products(" in query:
            return {"products": {"edges": [{"node": node} for node in self.products]}}
        raise AssertionError(f"Unexpected query: {query[:60]}")

    def invalidate_tags(self, tags):
        return 0

    # Helpers for tests
    def expire(self, cart_id: str) -> None:
        del self.carts[cart_id]

    def operations(self) -> List[str]:
        """Upstream operation names, in call order"""
        return [next(name for marker, name in OPERATIONS if marker in call["query"]) for call in self.calls]

    # Upstream behaviour
    def _create(self, lines):
        errors = self._unknown_variants(lines or [])
        if errors:
            return {"cart": None, "userErrors": errors}
        cart_id = f"gid://shopify/Cart/c{next(self._cart_ids)}"
        self.carts[cart_id] = []
        self._merge(cart_id, lines or [])
        return {"cart": self._payload(cart_id), "userErrors": []}

    def _add(self, cart_id, lines):
        if cart_id not in self.carts:
            return self._missing_cart()
        errors = self._unknown_variants(lines)
        if errors:
            return {"cart": None, "userErrors": errors}
        self._merge(cart_id, lines)
        return {"cart": self._payload(cart_id), "userErrors": []}

    def _update(self, cart_id, updates):
        if cart_id not in self.carts:
            return self._missing_cart()
        lines = self.carts[cart_id]
        for update in updates:
            line = next((l for l in lines if l["id"] == update["id"]), None)
            if line is None:
                return {"cart": None, "userErrors": [{"message": "Line is invalid."}]}
            line["quantity"] = update["quantity"]
        self.carts[cart_id] = [l for l in lines if l["quantity"] > 0]
        return {"cart": self._payload(cart_id), "userErrors": []}

    def _remove(self, cart_id, line_ids):
        if cart_id not in self.carts:
            return self._missing_cart()
        self.carts[cart_id] = [l for l in self.carts[cart_id] if l["id"] not in line_ids]
        return {"cart": self._payload(cart_id), "userErrors": []}

    def _merge(self, cart_id, lines):
        current = self.carts[cart_id]
        for line in lines:
            existing = next((l for l in current if l["merchandiseId"] == line["merchandiseId"]), None)
            if existing:
                existing["quantity"] += line["quantity"]
            else:
                current.append({
                    "id": f"gid://shopify/CartLine/l{next(self._line_ids)}",
                    "merchandiseId": line["merchandiseId"],
                    "quantity": line["quantity"],
                })

    def _unknown_variants(self, lines):
        return [
            {"message": f"The merchandise with id {line['merchandiseId']} does not exist."}
            for line in lines
            if line["merchandiseId"] not in self.catalog
        ]

    @staticmethod
    def _missing_cart():
        return {"cart": None, "userErrors": [{"message": "The specified cart does not exist."}]}

    def _money(self, amount: Decimal) -> Dict[str, str]:
        return {"amount": f"{amount:.2f}", "currencyCode": self.currency}

    def _payload(self, cart_id):
        edges = []
        subtotal = Decimal("0")
        for line in self.carts[cart_id]:
            variant = self.catalog[line["merchandiseId"]]
            subtotal += Decimal(variant["price"]) * line["quantity"]
            images = [{"node": {"url": variant["image"], "altText": None}}] if variant["image"] else []
            edges.append({
                "node": {
                    "id": line["id"],
                    "quantity": line["quantity"],
                    "merchandise": {
                        "id": line["merchandiseId"],
                        "title": variant["title"],
                        "price": {"amount": variant["price"], "currencyCode": self.currency},
                        "product": {
                            "title": variant["product_title"],
                            "handle": variant["handle"],
                            "images": {"edges": images},
                        },
                    },
                }
            })
        return {
            "id": cart_id,
            "checkoutUrl": f"https://boboparty.myshopify.com/cart/c/{cart_id.rsplit('/', 1)[-1]}",
            "totalQuantity": sum(l["quantity"] for l in self.carts[cart_id]),
            "cost": {"subtotalAmount": self._money(subtotal), "totalAmount": self._money(subtotal)},
            "lines": {"edges": edges},
        }


class FlaskSession:
    """requests.Session look-alike that sends CartApiClient calls to a Flask test client"""

    def __init__(self, test_client):
        self.test_client = test_client
        self.requests: List[Dict[str, Any]] = []

    def request(self, method, url, params=None, json=None, timeout=None):
        self.requests.append({"method": method, "params": params, "json": json})
        response = self.test_client.open(url, method=method, query_string=params, json=json)
        return _FlaskResponse(response)


class _FlaskResponse:
    def __init__(self, response):
        self.status_code = response.status_code
        self._body = response.get_data(as_text=True)

    def json(self):
        return json.loads(self._body)


class ManualScheduler:
    """Collects scheduled callbacks so tests decide when time passes"""

    def __init__(self):
        self.pending = []

    def __call__(self, delay, callback):
        self.pending.append((delay, callback))

    def run_all(self):
        pending, self.pending = self.pending, []
        for _, callback in pending:
            callback()


@pytest.fixture
def shopify_config():
    return ShopifyConfig(store_domain="boboparty.myshopify.com", storefront_token="test-storefront-token")


@pytest.fixture
def app_config(shopify_config):
    return Config(
        shopify=shopify_config,
        cart=CartConfig(),
        app=AppConfig(environment="testing", log_level="WARNING"),
    )


@pytest.fixture
def fake_shopify():
    return FakeShopify()


@pytest.fixture
def app(app_config, fake_shopify):
    application = create_app(app_config)
    application.testing = True
    application.extensions[CONTAINER_KEY].override(ShopifyGateway, fake_shopify)
    return application


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def channel():
    return EventChannel()


@pytest.fixture
def storage():
    return MemoryStorage()


@pytest.fixture
def store(storage, channel):
    return CartStore(storage, channel=channel)


@pytest.fixture
def flask_session(client):
    return FlaskSession(client)


@pytest.fixture
def api(flask_session):
    return CartApiClient(session=flask_session)


@pytest.fixture
def scheduler():
    return ManualScheduler()
