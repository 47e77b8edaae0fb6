from boboparty.routes.cart import cart_bp
from boboparty.routes.search import search_bp

__all__ = ["cart_bp", "search_bp"]
