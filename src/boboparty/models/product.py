from dataclasses import dataclass
from typing import Optional, Dict, Any

from boboparty.models.cart import Money


@dataclass
class ProductSearchResult:
    """Lightweight product row returned by the search endpoint"""
    id: str
    handle: str
    name: str
    price: Money  # Lowest variant price
    image_url: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "id": self.id,
            "handle": self.handle,
            "name": self.name,
            "price": self.price.to_dict(),
        }
        if self.image_url:
            data["imageUrl"] = self.image_url
        return data
