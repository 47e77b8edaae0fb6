import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv


load_dotenv()


@dataclass
class ShopifyConfig:
    """Storefront API connection settings"""
    store_domain: Optional[str] = None
    storefront_token: Optional[str] = None
    api_version: str = "2024-10"
    timeout_ms: int = 10000
    search_cache_seconds: int = 60

    @property
    def is_configured(self) -> bool:
        return bool(self.store_domain and self.storefront_token)


@dataclass
class CartConfig:
    """Client-side cart conventions shared by every widget"""
    cart_id_key: str = "boboparty_cart_id"
    toast_duration_seconds: float = 3.0


@dataclass
class AppConfig:
    """Application configuration"""
    debug: bool = False
    host: str = "0.0.0.0"
    port: int = 5000
    environment: str = "development"  # development, staging, production
    log_level: str = "INFO"
    default_locale: str = "zh-TW"


class Config:
    def __init__(
        self,
        shopify: Optional[ShopifyConfig] = None,
        cart: Optional[CartConfig] = None,
        app: Optional[AppConfig] = None,
    ):
        self.environment = os.getenv("ENVIRONMENT", "development")

        self.shopify = shopify or ShopifyConfig(
            store_domain=os.getenv("SHOPIFY_STORE_DOMAIN") or None,
            storefront_token=os.getenv("SHOPIFY_STOREFRONT_TOKEN") or None,
            api_version=os.getenv("SHOPIFY_API_VERSION", "2024-10"),
            timeout_ms=int(os.getenv("SHOPIFY_REQUEST_TIMEOUT_MS", "10000")),
            search_cache_seconds=int(os.getenv("SEARCH_CACHE_SECONDS", "60")),
        )

        self.cart = cart or CartConfig(
            cart_id_key=os.getenv("CART_ID_KEY", "boboparty_cart_id"),
        )

        self.app = app or AppConfig(
            debug=os.getenv("DEBUG", "false").lower() == "true",
            host=os.getenv("HOST", "0.0.0.0"),
            port=int(os.getenv("PORT", "5000")),
            environment=self.environment,
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            default_locale=os.getenv("DEFAULT_LOCALE", "zh-TW"),
        )
        if app is not None:
            self.environment = app.environment

    @property
    def is_development(self) -> bool:
        return self.environment == "development"

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    def validate(self) -> None:
        """Validate critical configuration"""
        if self.is_production and not self.shopify.is_configured:
            raise ValueError("SHOPIFY_STORE_DOMAIN and SHOPIFY_STOREFRONT_TOKEN must be set in production")

        if self.shopify.timeout_ms <= 0:
            raise ValueError("SHOPIFY_REQUEST_TIMEOUT_MS must be positive")


config = Config()
