from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Optional


class FormattingUtils:
    """
    Display formatting for the cart widgets

    Amounts arrive as Shopify decimal strings and are formatted through
    Decimal only, so display never introduces float rounding.
    """

    # Currency symbols as rendered by the en-HK storefront
    CURRENCY_FORMATS = {
        'HKD': {'symbol': 'HK$', 'decimal_places': 2},
        'TWD': {'symbol': 'NT$', 'decimal_places': 0},
        'USD': {'symbol': 'US$', 'decimal_places': 2},
        'JPY': {'symbol': '¥', 'decimal_places': 0},
        'EUR': {'symbol': '€', 'decimal_places': 2},
    }

    @classmethod
    def format_money(
        cls,
        amount: str,
        currency_code: str,
        decimal_places: Optional[int] = None,
    ) -> str:
        """
        Format a Shopify amount for display

        Args:
            amount: Decimal string, e.g. "120.50"
            currency_code: ISO 4217 code
            decimal_places: Overrides the currency default; the cart page uses 0

        Examples:
            format_money("120.50", "HKD") -> "HK$120.50"
            format_money("1280.5", "HKD", decimal_places=0) -> "HK$1,281"
        """
        try:
            value = Decimal(amount)
        except (InvalidOperation, TypeError):
            raise ValueError(f"Invalid amount: {amount!r}")

        currency_config = cls.CURRENCY_FORMATS.get(currency_code)
        if decimal_places is None:
            decimal_places = currency_config['decimal_places'] if currency_config else 2

        quantum = Decimal(1).scaleb(-decimal_places)
        rounded = value.quantize(quantum, rounding=ROUND_HALF_UP)
        formatted = f"{abs(rounded):,.{decimal_places}f}"
        sign = "-" if rounded < 0 else ""

        if currency_config:
            return f"{sign}{currency_config['symbol']}{formatted}"
        return f"{sign}{currency_code} {formatted}"

    @classmethod
    def format_badge_count(cls, count: int, cap: int = 9) -> str:
        """Header badge text: '' for an empty cart, '9+' above the cap"""
        if count <= 0:
            return ""
        return f"{cap}+" if count > cap else str(count)
