from dataclasses import dataclass, field
from typing import List, Optional, Dict, Any


@dataclass(frozen=True)
class Money:
    """Amount as Shopify sent it. Never parsed to float, never built client-side."""
    amount: str
    currency_code: str

    def to_dict(self) -> Dict[str, Any]:
        return {"amount": self.amount, "currencyCode": self.currency_code}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Money":
        return cls(amount=data["amount"], currency_code=data["currencyCode"])


@dataclass
class CartLine:
    """One merchandise line. quantity >= 1; removal deletes the line."""
    id: str
    merchandise_id: str
    quantity: int
    title: str
    product_title: str
    product_handle: str
    price: Money  # Unit price
    image_url: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the camelCase wire shape"""
        data = {
            "id": self.id,
            "quantity": self.quantity,
            "merchandiseId": self.merchandise_id,
            "title": self.title,
            "productTitle": self.product_title,
            "productHandle": self.product_handle,
            "price": self.price.to_dict(),
        }
        if self.image_url:
            data["imageUrl"] = self.image_url
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CartLine":
        return cls(
            id=data["id"],
            merchandise_id=data["merchandiseId"],
            quantity=data["quantity"],
            title=data["title"],
            product_title=data["productTitle"],
            product_handle=data["productHandle"],
            price=Money.from_dict(data["price"]),
            image_url=data.get("imageUrl"),
        )


@dataclass
class CartCost:
    subtotal: Money
    total: Money


@dataclass
class Cart:
    """
    A Shopify cart as seen by the storefront.

    Totals are computed upstream and copied as-is; the storefront never
    recalculates them. Line order follows Shopify and may change between
    mutations.
    """
    id: str
    checkout_url: str
    total_quantity: int
    cost: CartCost
    lines: List[CartLine] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return len(self.lines) == 0

    def get_line(self, line_id: str) -> Optional[CartLine]:
        """Find a line by its Shopify line id"""
        return next((line for line in self.lines if line.id == line_id), None)

    def get_line_by_merchandise(self, merchandise_id: str) -> Optional[CartLine]:
        return next((line for line in self.lines if line.merchandise_id == merchandise_id), None)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization"""
        return {
            "id": self.id,
            "checkoutUrl": self.checkout_url,
            "totalQuantity": self.total_quantity,
            "cost": {
                "subtotal": self.cost.subtotal.to_dict(),
                "total": self.cost.total.to_dict(),
            },
            "lines": [line.to_dict() for line in self.lines],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Cart":
        """Parse the proxy's JSON cart back into a Cart"""
        return cls(
            id=data["id"],
            checkout_url=data["checkoutUrl"],
            total_quantity=data["totalQuantity"],
            cost=CartCost(
                subtotal=Money.from_dict(data["cost"]["subtotal"]),
                total=Money.from_dict(data["cost"]["total"]),
            ),
            lines=[CartLine.from_dict(line) for line in data.get("lines", [])],
        )


@dataclass
class CartLineInput:
    """A variant to add, as accepted by cartCreate / cartLinesAdd"""
    merchandise_id: str
    quantity: int = 1

    def to_graphql(self) -> Dict[str, Any]:
        return {"merchandiseId": self.merchandise_id, "quantity": self.quantity}


@dataclass
class CartLineUpdate:
    """A new quantity for an existing line, as accepted by cartLinesUpdate"""
    line_id: str
    quantity: int

    def to_graphql(self) -> Dict[str, Any]:
        return {"id": self.line_id, "quantity": self.quantity}
