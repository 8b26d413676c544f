from __future__ import annotations

import logging
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

from app.core.brackets import TaxYearTable, bracket_breakdown, calculate_tax
from app.core.models import BracketRow, BracketShareRow, TaxEstimate, TaxYearSummary
from app.core.tax_years import get_tax_year_table

logger = logging.getLogger("tax_app.estimate")

_CENT = Decimal("0.01")
_HUNDRED = Decimal("100")


def to_decimal(value: float | int | str | Decimal) -> Decimal:
    return value if isinstance(value, Decimal) else Decimal(str(value))


def round_cents(value: float | Decimal) -> Decimal:
    return to_decimal(value).quantize(_CENT, rounding=ROUND_HALF_UP)


def parse_income(raw: Any) -> Decimal | None:
    """Turn user input into an income amount, or ``None`` for "no result".

    Blank, non-numeric, non-finite and negative values all map to ``None`` so
    the caller skips the calculation instead of reporting an error.
    """
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, (int, float, Decimal)):
        text = str(raw)
    else:
        text = str(raw).strip()
    if not text:
        return None
    try:
        amount = Decimal(text)
    except InvalidOperation:
        logger.debug("Ignoring non-numeric income input %r", text)
        return None
    if not amount.is_finite() or amount < 0:
        logger.debug("Ignoring out-of-domain income input %r", text)
        return None
    return amount


def after_tax_income(income: Decimal, tax: Decimal) -> Decimal:
    return income - tax


def effective_rate(income: Decimal, tax: Decimal) -> Decimal:
    if income > 0:
        return (tax / income) * _HUNDRED
    return Decimal("0")


def estimate_for_table(income: Decimal, table: TaxYearTable) -> TaxEstimate:
    tax = calculate_tax(income, table)
    shares = bracket_breakdown(income, table)
    logger.debug("Computed estimate tax_year=%s brackets_used=%s", table.year, len(shares))
    return TaxEstimate(
        tax_year=table.year,
        income=income,
        tax=tax,
        after_tax_income=after_tax_income(income, tax),
        effective_rate=effective_rate(income, tax),
        breakdown=[
            BracketShareRow(
                lower=share.lower,
                upper=share.upper,
                rate=share.rate,
                taxable=share.taxable,
                tax=share.tax,
            )
            for share in shares
        ],
    )


def estimate_tax(income: Decimal, tax_year: str) -> TaxEstimate:
    return estimate_for_table(income, get_tax_year_table(tax_year))


def estimate_from_text(raw: Any, tax_year: str) -> TaxEstimate | None:
    # Resolve the year first so an unknown year is reported even for blank income.
    table = get_tax_year_table(tax_year)
    income = parse_income(raw)
    if income is None:
        return None
    return estimate_for_table(income, table)


def summarize_table(table: TaxYearTable) -> TaxYearSummary:
    return TaxYearSummary(
        year=table.year,
        top_rate=table.top_rate,
        brackets=[BracketRow(lower=lower, upper=upper, rate=rate) for lower, upper, rate in table.bounds()],
    )


__all__ = [
    "after_tax_income",
    "effective_rate",
    "estimate_for_table",
    "estimate_from_text",
    "estimate_tax",
    "parse_income",
    "round_cents",
    "summarize_table",
    "to_decimal",
]
