# This file collects small currency formatting helpers for views built on the pricing engine.
# It exists so impact cards, tables, and exports present money consistently to operators.
# Invalid or missing inputs format as $0.00 (or a fallback label) instead of raising.

from __future__ import annotations

from typing import Any

from src.rent_optimizer.units import parse_rent


def format_currency(value: Any) -> str:
    number = parse_rent(value)
    if number is None:
        return "$0.00"
    if number < 0:
        return f"-${abs(number):,.2f}"
    return f"${number:,.2f}"


def format_currency_change(value: Any, *, show_sign: bool = True) -> str:
    number = parse_rent(value)
    if number is None or number == 0:
        return "$0.00"
    magnitude = f"${abs(number):,.2f}"
    if number < 0:
        return f"-{magnitude}"
    return f"+{magnitude}" if show_sign else magnitude


def format_currency_with_fallback(value: Any, fallback_text: str = "Contact for pricing") -> str:
    number = parse_rent(value)
    if number is None or number == 0:
        return fallback_text
    return format_currency(number)


def format_percent_change(value: float | int | None) -> str:
    if value is None:
        return "-"
    return f"{float(value):+.2f}%"
