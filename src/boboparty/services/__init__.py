from .cart_mapper import map_cart
from .cart_service import CartService
from .search_service import SearchService

__all__ = ["map_cart", "CartService", "SearchService"]
