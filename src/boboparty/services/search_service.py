from typing import List
import logging

from pydantic import ValidationError

from boboparty.core.exceptions import ProtocolError
from boboparty.gateways.queries import SEARCH_PRODUCTS_QUERY
from boboparty.gateways.shopify import FORCE_CACHE, ShopifyGateway
from boboparty.models.product import ProductSearchResult
from boboparty.schemas.shopify_schemas import ShopifySearchProduct
from boboparty.services.cart_mapper import map_money

logger = logging.getLogger(__name__)


class SearchService:
    """Title search over the Shopify catalog"""

    MIN_QUERY_LENGTH = 2
    MAX_RESULTS = 10
    CACHE_TAGS = ("products", "search")

    def __init__(self, gateway: ShopifyGateway, cache_seconds: int = 60):
        self.gateway = gateway
        self.cache_seconds = cache_seconds

    def search(self, query: str) -> List[ProductSearchResult]:
        """Return up to MAX_RESULTS products whose title contains `query`"""
        term = (query or "").strip()
        if len(term) < self.MIN_QUERY_LENGTH:
            return []

        data = self.gateway.request(
            SEARCH_PRODUCTS_QUERY,
            {"query": f"title:*{term}*", "first": self.MAX_RESULTS},
            cache=FORCE_CACHE,
            tags=self.CACHE_TAGS,
            revalidate=self.cache_seconds,
        )

        edges = (data.get("products") or {}).get("edges") or []
        results = []
        for edge in edges:
            try:
                product = ShopifySearchProduct.model_validate(edge.get("node") or {})
            except ValidationError:
                raise ProtocolError("Shopify product payload was malformed.")
            results.append(
                ProductSearchResult(
                    id=product.id,
                    handle=product.handle,
                    name=product.title,
                    price=map_money(product.price_range.min_variant_price),
                    image_url=product.images.first_url,
                )
            )

        logger.info(f"Search '{term}' returned {len(results)} result(s)")
        return results
