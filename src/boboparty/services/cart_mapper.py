from typing import Any, Dict, Union

from pydantic import ValidationError

from boboparty.core.exceptions import ProtocolError
from boboparty.models.cart import Cart, CartCost, CartLine, Money
from boboparty.schemas.shopify_schemas import ShopifyCart, ShopifyMoney


def map_money(money: ShopifyMoney) -> Money:
    return Money(amount=money.amount, currency_code=money.currency_code)


def map_cart(payload: Union[Dict[str, Any], ShopifyCart]) -> Cart:
    """
    Translate a CartFragment payload into the storefront's Cart.

    Pure: no I/O. Lines without an image get image_url=None. Amount strings
    are copied verbatim.

    Raises:
        ProtocolError: payload does not have the CartFragment shape
    """
    if isinstance(payload, ShopifyCart):
        shopify_cart = payload
    else:
        try:
            shopify_cart = ShopifyCart.model_validate(payload)
        except ValidationError as e:
            raise ProtocolError(f"Shopify cart payload was malformed: {e.error_count()} error(s).")

    lines = []
    for edge in shopify_cart.lines.edges:
        line = edge.node
        merchandise = line.merchandise
        lines.append(
            CartLine(
                id=line.id,
                merchandise_id=merchandise.id,
                quantity=line.quantity,
                title=merchandise.title,
                product_title=merchandise.product.title,
                product_handle=merchandise.product.handle,
                price=map_money(merchandise.price),
                image_url=merchandise.product.images.first_url,
            )
        )

    return Cart(
        id=shopify_cart.id,
        checkout_url=shopify_cart.checkout_url,
        total_quantity=shopify_cart.total_quantity,
        cost=CartCost(
            subtotal=map_money(shopify_cart.cost.subtotal_amount),
            total=map_money(shopify_cart.cost.total_amount),
        ),
        lines=lines,
    )
