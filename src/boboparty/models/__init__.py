from .cart import Money, CartLine, CartCost, Cart, CartLineInput, CartLineUpdate
from .product import ProductSearchResult

__all__ = [
    "Money", "CartLine", "CartCost", "Cart",
    "CartLineInput", "CartLineUpdate",
    "ProductSearchResult",
]
