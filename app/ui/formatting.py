from __future__ import annotations

from decimal import Decimal

from app.core.estimate import round_cents

UNBOUNDED_LABEL = "∞"


def format_currency(value: Decimal) -> str:
    return f"${round_cents(value):,.2f}"


def format_limit(value: Decimal | None) -> str:
    if value is None:
        return UNBOUNDED_LABEL
    return f"${value:,f}"


def format_rate(rate: Decimal) -> str:
    return f"{rate * 100:.1f}%"


def format_percent(value: Decimal) -> str:
    return f"{round_cents(value):.2f}%"


def bracket_range(lower: Decimal, upper: Decimal | None) -> str:
    return f"{format_limit(lower)} - {format_limit(upper)}"
