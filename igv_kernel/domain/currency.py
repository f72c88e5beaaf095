"""Currency -- ISO 4217 registry with precision and display symbols."""

from dataclasses import dataclass
from typing import ClassVar

from igv_kernel.exceptions import InvalidCurrencyError


@dataclass(frozen=True)
class CurrencyInfo:
    """Information about a single ISO 4217 currency."""

    code: str
    decimal_places: int
    name: str
    symbol: str = ""

    @property
    def display_symbol(self) -> str:
        """Symbol used on printed documents; falls back to the ISO code."""
        return self.symbol or self.code


class CurrencyRegistry:
    """Registry of the currencies an invoice may be issued in."""

    # Symbols follow the es-PE locale
    _CURRENCIES: ClassVar[dict[str, CurrencyInfo]] = {
        "PEN": CurrencyInfo("PEN", 2, "Peruvian Sol", "S/"),
        "USD": CurrencyInfo("USD", 2, "US Dollar", "US$"),
        "EUR": CurrencyInfo("EUR", 2, "Euro", "€"),
        "GBP": CurrencyInfo("GBP", 2, "Pound Sterling", "£"),
        "CHF": CurrencyInfo("CHF", 2, "Swiss Franc"),
        "CAD": CurrencyInfo("CAD", 2, "Canadian Dollar", "CA$"),
        "JPY": CurrencyInfo("JPY", 0, "Japanese Yen", "JPY"),
        "CNY": CurrencyInfo("CNY", 2, "Chinese Yuan", "CN¥"),
        "ARS": CurrencyInfo("ARS", 2, "Argentine Peso"),
        "BOB": CurrencyInfo("BOB", 2, "Bolivian Boliviano"),
        "BRL": CurrencyInfo("BRL", 2, "Brazilian Real", "R$"),
        "CLP": CurrencyInfo("CLP", 0, "Chilean Peso"),
        "COP": CurrencyInfo("COP", 2, "Colombian Peso"),
        "MXN": CurrencyInfo("MXN", 2, "Mexican Peso", "MX$"),
        "PYG": CurrencyInfo("PYG", 0, "Paraguayan Guarani"),
        "UYU": CurrencyInfo("UYU", 2, "Uruguayan Peso"),
        "KWD": CurrencyInfo("KWD", 3, "Kuwaiti Dinar"),
    }

    DEFAULT_DECIMAL_PLACES: ClassVar[int] = 2

    @classmethod
    def is_valid(cls, code: str) -> bool:
        """Check if a currency code is registered."""
        if not code or not isinstance(code, str):
            return False
        return code.upper().strip() in cls._CURRENCIES

    @classmethod
    def get_info(cls, code: str) -> CurrencyInfo | None:
        """Get currency information by code."""
        if not code or not isinstance(code, str):
            return None
        return cls._CURRENCIES.get(code.upper().strip())

    @classmethod
    def get_decimal_places(cls, code: str) -> int:
        """Get decimal places for a currency."""
        info = cls.get_info(code)
        return info.decimal_places if info else cls.DEFAULT_DECIMAL_PLACES

    @classmethod
    def validate(cls, code: str) -> str:
        """Validate and normalize a currency code."""
        if not cls.is_valid(code):
            raise InvalidCurrencyError(code)
        return code.upper().strip()

    @classmethod
    def require(cls, code: str) -> CurrencyInfo:
        """Return currency information or raise InvalidCurrencyError."""
        info = cls.get_info(code)
        if info is None:
            raise InvalidCurrencyError(code)
        return info

    @classmethod
    def all_codes(cls) -> frozenset[str]:
        """Get all valid currency codes."""
        return frozenset(cls._CURRENCIES.keys())
