from .shopify import ShopifyGateway, ResponseCache, NO_STORE, FORCE_CACHE

__all__ = ["ShopifyGateway", "ResponseCache", "NO_STORE", "FORCE_CACHE"]
