import json
import logging
import threading
import time
from dataclasses import dataclass, field
from typing import Optional, Dict, Any, Iterable, Callable, FrozenSet, Tuple

import requests

from boboparty.core.config import ShopifyConfig
from boboparty.core.exceptions import (
    ConfigurationError, TransportError, UpstreamError, ProtocolError
)

logger = logging.getLogger(__name__)

NO_STORE = "no-store"
FORCE_CACHE = "force-cache"
CACHE_MODES = (NO_STORE, FORCE_CACHE)


def normalize_domain(domain: str) -> str:
    """'https://shop.example.com/some/path' -> 'shop.example.com'"""
    trimmed = domain.strip()
    for prefix in ("https://", "http://"):
        if trimmed.lower().startswith(prefix):
            trimmed = trimmed[len(prefix):]
            break
    return trimmed.split("/")[0]


@dataclass
class _CacheEntry:
    data: Dict[str, Any]
    expires_at: float
    tags: FrozenSet[str] = field(default_factory=frozenset)


class ResponseCache:
    """
    In-process cache for `force-cache` reads.

    Entries expire after their revalidate window and can be dropped early by
    tag, e.g. invalidate_tags(["products"]) after a catalog change.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._entries: Dict[str, _CacheEntry] = {}
        self._lock = threading.Lock()
        self._clock = clock

    @staticmethod
    def make_key(query: str, variables: Optional[Dict[str, Any]]) -> str:
        return json.dumps({"query": query, "variables": variables or {}}, sort_keys=True)

    def get(self, key: str) -> Optional[Dict[str, Any]]:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            if entry.expires_at <= self._clock():
                del self._entries[key]
                return None
            return entry.data

    def set(self, key: str, data: Dict[str, Any], revalidate: int, tags: Iterable[str] = ()) -> None:
        with self._lock:
            self._entries[key] = _CacheEntry(
                data=data,
                expires_at=self._clock() + revalidate,
                tags=frozenset(tags),
            )

    def invalidate_tags(self, tags: Iterable[str]) -> int:
        """Drop every entry labelled with any of `tags`; returns how many went"""
        wanted = set(tags)
        with self._lock:
            stale = [key for key, entry in self._entries.items() if entry.tags & wanted]
            for key in stale:
                del self._entries[key]
        return len(stale)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)


class ShopifyGateway:
    """
    Storefront GraphQL client.

    Every failure leaves this class as a StorefrontError subclass whose `kind`
    is already decided, so callers branch on kinds instead of re-reading
    messages.
    """

    def __init__(
        self,
        shopify_config: ShopifyConfig,
        session: Optional[requests.Session] = None,
        cache: Optional[ResponseCache] = None,
    ):
        self.config = shopify_config
        self.session = session or requests.Session()
        self.cache = cache or ResponseCache()

    @property
    def endpoint(self) -> str:
        if not self.config.store_domain:
            raise ConfigurationError("Missing SHOPIFY_STORE_DOMAIN environment variable.")
        domain = normalize_domain(self.config.store_domain)
        return f"https://{domain}/api/{self.config.api_version}/graphql.json"

    @property
    def headers(self) -> Dict[str, str]:
        if not self.config.storefront_token:
            raise ConfigurationError("Missing SHOPIFY_STOREFRONT_TOKEN environment variable.")
        return {
            "Content-Type": "application/json",
            "X-Shopify-Storefront-Access-Token": self.config.storefront_token,
        }

    def request(
        self,
        query: str,
        variables: Optional[Dict[str, Any]] = None,
        cache: str = NO_STORE,
        tags: Iterable[str] = (),
        revalidate: int = 60,
        timeout_ms: Optional[int] = None,
    ) -> Dict[str, Any]:
        """
        Execute a GraphQL operation and return its `data` object

        Args:
            query: GraphQL document
            variables: Operation variables
            cache: "no-store" always hits Shopify; "force-cache" serves from
                the response cache for `revalidate` seconds
            tags: Labels for later invalidate_tags()
            timeout_ms: Overrides the configured timeout. requests applies it
                to the connect and to each socket read separately, so it is not
                a hard deadline for the whole call.

        Raises:
            ConfigurationError: domain or token missing (raised before any I/O)
            TransportError: timeout, connection failure or non-2xx status
            UpstreamError: GraphQL `errors` present
            ProtocolError: neither `data` nor `errors`, or unreadable body
        """
        if cache not in CACHE_MODES:
            raise ValueError(f"Unknown cache mode: {cache}")

        endpoint = self.endpoint
        headers = self.headers
        timeout_ms = timeout_ms or self.config.timeout_ms

        cache_key = None
        if cache == FORCE_CACHE:
            cache_key = self.cache.make_key(query, variables)
            cached = self.cache.get(cache_key)
            if cached is not None:
                logger.debug("Shopify cache hit")
                return cached

        try:
            response = self.session.post(
                endpoint,
                headers=headers,
                json={"query": query, "variables": variables or {}},
                timeout=timeout_ms / 1000,
            )
        except requests.Timeout:
            logger.error(f"Shopify request timed out after {timeout_ms}ms")
            raise TransportError(f"Shopify request timed out after {timeout_ms}ms.")
        except requests.RequestException as e:
            logger.error(f"Shopify request failed: {e}")
            raise TransportError(f"Shopify request failed: {e}")

        if not response.ok:
            logger.error(f"Shopify request failed: {response.status_code} {response.reason}")
            raise TransportError(
                f"Shopify request failed: {response.status_code} {response.reason}",
                status=response.status_code,
                status_text=response.reason,
            )

        try:
            payload = response.json()
        except ValueError:
            raise ProtocolError("Shopify response was not valid JSON.")

        if not isinstance(payload, dict):
            raise ProtocolError("Shopify response was not a JSON object.")

        errors = payload.get("errors") or []
        if errors:
            messages = [self._error_message(error) for error in errors]
            error = UpstreamError.from_messages(messages, prefix="Shopify error: ")
            logger.error(f"{error.message} (kind={error.kind.value})")
            raise error

        data = payload.get("data")
        if not data:
            raise ProtocolError("Shopify response contained no data.")

        if cache_key is not None:
            self.cache.set(cache_key, data, revalidate, tags)

        return data

    def invalidate_tags(self, tags: Iterable[str]) -> int:
        return self.cache.invalidate_tags(tags)

    @staticmethod
    def _error_message(error: Any) -> str:
        if isinstance(error, dict):
            return str(error.get("message") or "Unknown error")
        return str(error)


def status_summary(shopify_config: ShopifyConfig) -> Tuple[bool, str]:
    """Readiness without touching the network, used by /health"""
    if shopify_config.is_configured:
        return True, "configured"
    return False, "missing configuration"
