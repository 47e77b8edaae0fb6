from .shopify_schemas import ShopifyCart, ShopifyMoney, ShopifySearchProduct

__all__ = ["ShopifyCart", "ShopifyMoney", "ShopifySearchProduct"]
