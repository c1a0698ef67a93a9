# app/domain/services/formatting.py

from __future__ import annotations

from datetime import date
from decimal import Decimal

DEFAULT_LOCALE = "it-IT"

MONTHS_SHORT = {
    "it": ["gen", "feb", "mar", "apr", "mag", "giu", "lug", "ago", "set", "ott", "nov", "dic"],
    "en": ["Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"],
}


def format_currency(amount: int) -> str:
    """Format an amount in cents as euros, Italian style: ``123456`` -> ``"1.234,56 €"``."""
    value = Decimal(amount) / 100
    text = f"{value:,.2f}".translate(str.maketrans(",.", ".,"))
    return f"{text} €"


def format_date_to_local(value: date | str, locale: str = DEFAULT_LOCALE) -> str:
    """
    Short, human date for tables.

    ``it-IT`` -> ``"15 gen 2025"``, ``en-*`` -> ``"Jan 15, 2025"``.
    Unknown languages fall back to Italian.
    """
    if isinstance(value, str):
        value = date.fromisoformat(value[:10])

    lang = locale.split("-")[0].lower()
    if lang not in MONTHS_SHORT:
        lang = "it"
    month = MONTHS_SHORT[lang][value.month - 1]

    if lang == "en":
        return f"{month} {value.day}, {value.year}"
    return f"{value.day} {month} {value.year}"
