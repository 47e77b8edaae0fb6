"""
Tests for mapping Shopify cart payloads
"""

import pytest

from boboparty.core.exceptions import ErrorKind, ProtocolError
from boboparty.models.cart import Money
from boboparty.services.cart_mapper import map_cart


def cart_payload(lines=None, subtotal="76.00", total="76.00"):
    return {
        "id": "gid://shopify/Cart/abc",
        "checkoutUrl": "https://boboparty.myshopify.com/cart/c/abc",
        "totalQuantity": sum(line["quantity"] for line in lines or []),
        "cost": {
            "subtotalAmount": {"amount": subtotal, "currencyCode": "HKD"},
            "totalAmount": {"amount": total, "currencyCode": "HKD"},
        },
        "lines": {"edges": [{"node": line} for line in lines or []]},
    }


def line_payload(line_id="gid://shopify/CartLine/1", quantity=2, price="38.00", images=None):
    return {
        "id": line_id,
        "quantity": quantity,
        "merchandise": {
            "id": "gid://shopify/ProductVariant/1",
            "title": "Gold / 40cm",
            "price": {"amount": price, "currencyCode": "HKD"},
            "product": {
                "title": "Foil Balloon Number",
                "handle": "foil-balloon-number",
                "images": {"edges": images if images is not None else [
                    {"node": {"url": "https://cdn.example.com/balloon.jpg", "altText": "Balloon"}},
                    {"node": {"url": "https://cdn.example.com/balloon-2.jpg", "altText": None}},
                ]},
            },
        },
    }


class TestMapCart:
    """Tests for map_cart"""

    def test_full_cart(self):
        cart = map_cart(cart_payload([line_payload()]))

        assert cart.id == "gid://shopify/Cart/abc"
        assert cart.checkout_url == "https://boboparty.myshopify.com/cart/c/abc"
        assert cart.total_quantity == 2
        assert cart.cost.subtotal == Money(amount="76.00", currency_code="HKD")
        assert cart.cost.total == Money(amount="76.00", currency_code="HKD")

        line = cart.lines[0]
        assert line.id == "gid://shopify/CartLine/1"
        assert line.merchandise_id == "gid://shopify/ProductVariant/1"
        assert line.quantity == 2
        assert line.title == "Gold / 40cm"
        assert line.product_title == "Foil Balloon Number"
        assert line.product_handle == "foil-balloon-number"
        assert line.price == Money(amount="38.00", currency_code="HKD")

    def test_first_image_is_used(self):
        cart = map_cart(cart_payload([line_payload()]))
        assert cart.lines[0].image_url == "https://cdn.example.com/balloon.jpg"

    def test_missing_image(self):
        cart = map_cart(cart_payload([line_payload(images=[])]))

        assert cart.lines[0].image_url is None
        assert "imageUrl" not in cart.to_dict()["lines"][0]

    def test_empty_cart(self):
        cart = map_cart(cart_payload([], subtotal="0.0", total="0.0"))

        assert cart.lines == []
        assert cart.is_empty
        assert cart.total_quantity == 0

    def test_amounts_are_copied_verbatim(self):
        """Test amounts keep Shopify's exact decimal strings"""
        cart = map_cart(cart_payload([line_payload(price="0.10", quantity=3)], subtotal="0.30", total="0.3"))

        assert cart.lines[0].price.amount == "0.10"
        assert cart.cost.subtotal.amount == "0.30"
        assert cart.cost.total.amount == "0.3"

    def test_line_order_is_preserved(self):
        lines = [line_payload(line_id=f"gid://shopify/CartLine/{n}", quantity=1) for n in (3, 1, 2)]

        cart = map_cart(cart_payload(lines))

        assert [line.id for line in cart.lines] == [
            "gid://shopify/CartLine/3", "gid://shopify/CartLine/1", "gid://shopify/CartLine/2",
        ]

    def test_wire_shape(self):
        data = map_cart(cart_payload([line_payload()])).to_dict()

        assert set(data) == {"id", "checkoutUrl", "totalQuantity", "cost", "lines"}
        assert data["cost"] == {
            "subtotal": {"amount": "76.00", "currencyCode": "HKD"},
            "total": {"amount": "76.00", "currencyCode": "HKD"},
        }
        assert data["lines"][0]["imageUrl"] == "https://cdn.example.com/balloon.jpg"

    @pytest.mark.parametrize("field", ["id", "checkoutUrl", "cost"])
    def test_missing_field(self, field):
        payload = cart_payload([line_payload()])
        del payload[field]

        with pytest.raises(ProtocolError) as exc_info:
            map_cart(payload)

        assert exc_info.value.kind is ErrorKind.PROTOCOL

    def test_null_lines(self):
        payload = cart_payload()
        payload["lines"] = None

        with pytest.raises(ProtocolError):
            map_cart(payload)

    def test_line_without_merchandise(self):
        line = line_payload()
        del line["merchandise"]

        with pytest.raises(ProtocolError):
            map_cart(cart_payload([line]))
