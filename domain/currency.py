# domain/currency.py
from dataclasses import dataclass
from typing import List, Optional


@dataclass(frozen=True)
class Currency:
    code: str
    symbol: str
    name: str


CURRENCIES: List[Currency] = [
    Currency("USD", "$", "US Dollar"),
    Currency("EUR", "€", "Euro"),
    Currency("GBP", "£", "British Pound"),
    Currency("JPY", "¥", "Japanese Yen"),
    Currency("CNY", "¥", "Chinese Yuan"),
    Currency("AUD", "A$", "Australian Dollar"),
    Currency("CAD", "C$", "Canadian Dollar"),
    Currency("CHF", "CHF", "Swiss Franc"),
    Currency("INR", "₹", "Indian Rupee"),
    Currency("BRL", "R$", "Brazilian Real"),
    Currency("ZAR", "R", "South African Rand"),
    Currency("MXN", "MX$", "Mexican Peso"),
    Currency("SGD", "S$", "Singapore Dollar"),
    Currency("NZD", "NZ$", "New Zealand Dollar"),
    Currency("KRW", "₩", "South Korean Won"),
    Currency("SEK", "kr", "Swedish Krona"),
    Currency("NOK", "kr", "Norwegian Krone"),
    Currency("DKK", "kr", "Danish Krone"),
    Currency("PLN", "zł", "Polish Złoty"),
    Currency("THB", "฿", "Thai Baht"),
    Currency("IDR", "Rp", "Indonesian Rupiah"),
    Currency("HUF", "Ft", "Hungarian Forint"),
    Currency("CZK", "Kč", "Czech Koruna"),
    Currency("ILS", "₪", "Israeli Shekel"),
    Currency("CLP", "CL$", "Chilean Peso"),
    Currency("PHP", "₱", "Philippine Peso"),
    Currency("AED", "د.إ", "UAE Dirham"),
    Currency("SAR", "﷼", "Saudi Riyal"),
    Currency("MYR", "RM", "Malaysian Ringgit"),
    Currency("RON", "lei", "Romanian Leu"),
]


def get_currency_by_code(code: str) -> Optional[Currency]:
    for currency in CURRENCIES:
        if currency.code == code:
            return currency
    return None


def get_currency_symbol(code: str) -> str:
    """Symbol for a currency code; unknown codes (or bare symbols) are returned unchanged."""
    currency = get_currency_by_code(code)
    return currency.symbol if currency else code


def format_money(amount: float, currency: str = "") -> str:
    """Presentation rounding: 2 decimals with thousands separators."""
    symbol = get_currency_symbol(currency) if currency else ""
    sign = "-" if amount < 0 else ""
    return f"{sign}{symbol}{abs(amount):,.2f}"
