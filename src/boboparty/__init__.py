"""Boboparty storefront: Shopify cart proxy and cart client."""

__version__ = "1.0.0"
