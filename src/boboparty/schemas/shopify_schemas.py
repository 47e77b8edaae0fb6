from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional


class ShopifyModel(BaseModel):
    """Base for Storefront API payloads: camelCase aliases, extra fields ignored"""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class ShopifyMoney(ShopifyModel):
    amount: str = Field(description="Decimal amount as a string")
    currency_code: str = Field(alias="currencyCode", description="ISO 4217 code")


class ShopifyImage(ShopifyModel):
    url: str
    alt_text: Optional[str] = Field(default=None, alias="altText")


class ShopifyImageEdge(ShopifyModel):
    node: ShopifyImage


class ShopifyImageConnection(ShopifyModel):
    edges: List[ShopifyImageEdge] = Field(default_factory=list)

    @property
    def first_url(self) -> Optional[str]:
        return self.edges[0].node.url if self.edges else None


class ShopifyCartProduct(ShopifyModel):
    title: str
    handle: str
    images: ShopifyImageConnection = Field(default_factory=ShopifyImageConnection)


class ShopifyMerchandise(ShopifyModel):
    id: str = Field(description="ProductVariant gid")
    title: str = Field(description="Variant display name")
    price: ShopifyMoney
    product: ShopifyCartProduct


class ShopifyCartLine(ShopifyModel):
    id: str
    quantity: int
    merchandise: ShopifyMerchandise


class ShopifyCartLineEdge(ShopifyModel):
    node: ShopifyCartLine


class ShopifyCartLineConnection(ShopifyModel):
    edges: List[ShopifyCartLineEdge] = Field(default_factory=list)


class ShopifyCartCost(ShopifyModel):
    subtotal_amount: ShopifyMoney = Field(alias="subtotalAmount")
    total_amount: ShopifyMoney = Field(alias="totalAmount")


class ShopifyCart(ShopifyModel):
    """Shape selected by CART_FRAGMENT"""
    id: str
    checkout_url: str = Field(alias="checkoutUrl")
    total_quantity: int = Field(alias="totalQuantity")
    cost: ShopifyCartCost
    lines: ShopifyCartLineConnection = Field(default_factory=ShopifyCartLineConnection)


class ShopifyPriceRange(ShopifyModel):
    min_variant_price: ShopifyMoney = Field(alias="minVariantPrice")


class ShopifySearchProduct(ShopifyModel):
    id: str
    handle: str
    title: str
    price_range: ShopifyPriceRange = Field(alias="priceRange")
    images: ShopifyImageConnection = Field(default_factory=ShopifyImageConnection)
