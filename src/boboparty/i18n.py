"""
Cart widget strings per locale.

The locale -> dictionary mapping is checked when this module is imported: a
locale without a dictionary (or a dictionary without a locale) stops the
process at startup instead of failing on the first request.
"""
from dataclasses import dataclass, fields
from typing import Dict, Tuple

from boboparty.core.exceptions import UnsupportedLocaleError

DEFAULT_LOCALE = "zh-TW"
LOCALES: Tuple[str, ...] = ("zh-TW", "en")


@dataclass(frozen=True)
class CartDictionary:
    add_to_cart: str
    adding: str
    quick_add: str
    added_to_cart: str
    out_of_stock: str
    unable_to_add: str
    unable_to_load: str
    unable_to_update: str
    loading_cart: str
    empty_cart: str
    remove: str
    no_image: str
    subtotal: str
    shipping: str
    shipping_at_checkout: str
    total: str
    checkout: str


DICTIONARIES: Dict[str, CartDictionary] = {
    "zh-TW": CartDictionary(
        add_to_cart="加入購物車",
        adding="加入中...",
        quick_add="快速加入",
        added_to_cart="已加入購物車！",
        out_of_stock="已售完",
        unable_to_add="無法加入購物車。",
        unable_to_load="無法載入購物車。",
        unable_to_update="無法更新購物車。",
        loading_cart="購物車載入中...",
        empty_cart="您的購物車是空的。",
        remove="移除",
        no_image="沒有圖片",
        subtotal="小計",
        shipping="運費",
        shipping_at_checkout="於結帳時計算",
        total="總計",
        checkout="前往結帳",
    ),
    "en": CartDictionary(
        add_to_cart="Add to cart",
        adding="Adding...",
        quick_add="Quick add",
        added_to_cart="added to cart!",
        out_of_stock="Out of stock",
        unable_to_add="Unable to add to cart.",
        unable_to_load="Unable to load cart.",
        unable_to_update="Unable to update cart.",
        loading_cart="Loading cart...",
        empty_cart="Your cart is empty.",
        remove="Remove",
        no_image="No image",
        subtotal="Subtotal",
        shipping="Shipping",
        shipping_at_checkout="Calculated at checkout",
        total="Total",
        checkout="Proceed to Checkout",
    ),
}


def _verify_dictionaries() -> None:
    missing = set(LOCALES) - set(DICTIONARIES)
    extra = set(DICTIONARIES) - set(LOCALES)
    if missing or extra:
        raise RuntimeError(
            f"Locale dictionaries out of sync: missing={sorted(missing)} extra={sorted(extra)}"
        )
    for locale, dictionary in DICTIONARIES.items():
        blank = [f.name for f in fields(dictionary) if not getattr(dictionary, f.name)]
        if blank:
            raise RuntimeError(f"Dictionary for {locale} has empty entries: {blank}")


_verify_dictionaries()


def get_dictionary(locale: str = DEFAULT_LOCALE) -> CartDictionary:
    """
    Raises:
        UnsupportedLocaleError: no dictionary for `locale`
    """
    try:
        return DICTIONARIES[locale]
    except KeyError:
        raise UnsupportedLocaleError(locale)
