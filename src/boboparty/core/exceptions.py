import re
from enum import Enum
from typing import Optional, Dict, Any, List


class ErrorKind(str, Enum):
    """Closed set of failure kinds, assigned where the failure is first seen"""
    NOT_FOUND = "not_found"
    VALIDATION = "validation"
    TRANSPORT = "transport"
    CONFIGURATION = "configuration"
    PROTOCOL = "protocol"
    UNKNOWN = "unknown"


# Shopify reports stale cart ids only through message text, in either language.
NOT_FOUND_PATTERNS = [
    re.compile(r"not found", re.IGNORECASE),
    re.compile(r"does not exist", re.IGNORECASE),
    re.compile(r"不存在"),
]


def classify_message(message: str, default: ErrorKind = ErrorKind.VALIDATION) -> ErrorKind:
    """Map an upstream error message onto an ErrorKind."""
    if any(pattern.search(message or "") for pattern in NOT_FOUND_PATTERNS):
        return ErrorKind.NOT_FOUND
    return default


class StorefrontError(Exception):
    def __init__(
        self,
        message: str,
        status_code: int = 500,
        kind: ErrorKind = ErrorKind.UNKNOWN,
        details: Optional[Dict[str, Any]] = None,
        internal_message: Optional[str] = None,
    ):
        self.message = message  # User-facing message
        self.internal_message = internal_message or message  # Logged, never rendered
        self.status_code = status_code
        self.kind = kind
        self.details = details or {}

        super().__init__(self.message)

    @property
    def is_not_found(self) -> bool:
        return self.kind is ErrorKind.NOT_FOUND

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to the proxy's JSON error body"""
        return {"error": self.message}


class RequestValidationError(StorefrontError):
    """Raised when a request body or query string is unusable"""

    def __init__(self, message: str = "Invalid request.", field_errors: Optional[List[str]] = None):
        details = {"field_errors": field_errors} if field_errors else {}
        super().__init__(message, 400, ErrorKind.VALIDATION, details)


class ConfigurationError(StorefrontError):
    """Raised when the Shopify domain or token is missing. Never retried."""

    def __init__(self, message: str):
        # Deployment details stay in the logs
        super().__init__(
            "Storefront is not configured.",
            500,
            ErrorKind.CONFIGURATION,
            internal_message=message,
        )


class TransportError(StorefrontError):
    """Raised for non-2xx responses, timeouts and connection failures"""

    def __init__(self, message: str, status: Optional[int] = None, status_text: Optional[str] = None):
        details = {}
        if status is not None:
            details = {"status": status, "status_text": status_text}
        super().__init__(message, 500, ErrorKind.TRANSPORT, details)
        self.status = status
        self.status_text = status_text


class UpstreamError(StorefrontError):
    """Raised when Shopify answers with GraphQL errors or cart userErrors"""

    def __init__(self, message: str, kind: Optional[ErrorKind] = None, messages: Optional[List[str]] = None):
        details = {"messages": messages} if messages else {}
        super().__init__(message, 500, kind or classify_message(message), details)

    @classmethod
    def from_messages(cls, messages: List[str], prefix: str = "") -> "UpstreamError":
        joined = "; ".join(messages)
        return cls(f"{prefix}{joined}", kind=classify_message(joined), messages=messages)


class CartNotFoundError(UpstreamError):
    """The cart id is no longer known upstream (expired or never existed)"""

    def __init__(self, cart_id: Optional[str] = None):
        super().__init__("Cart not found.", kind=ErrorKind.NOT_FOUND)
        self.cart_id = cart_id


class ProtocolError(StorefrontError):
    """Raised when Shopify's response breaks the GraphQL contract"""

    def __init__(self, message: str):
        super().__init__(message, 500, ErrorKind.PROTOCOL)


class UnsupportedLocaleError(StorefrontError):
    """Raised when a locale has no dictionary"""

    def __init__(self, locale: str):
        super().__init__(f"Dictionary not found for locale: {locale}", 400, ErrorKind.VALIDATION)
        self.locale = locale
