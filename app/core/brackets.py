from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Iterator

D = Decimal

_CENT = D("0.01")
_ZERO = D("0")
_ONE = D("1")


class InvalidBracketTableError(ValueError):
    pass


@dataclass(frozen=True)
class TaxBracket:
    upper_limit: D | None  # None marks the unbounded top bracket
    rate: D

    @property
    def unbounded(self) -> bool:
        return self.upper_limit is None


@dataclass(frozen=True)
class BracketShare:
    lower: D
    upper: D | None
    rate: D
    taxable: D
    tax: D


@dataclass(frozen=True)
class TaxYearTable:
    """Progressive brackets for a single tax year.

    The lower bound of each bracket is the previous bracket's upper limit, so
    only upper limits are stored. Only the last bracket may be unbounded.
    """

    year: str
    brackets: tuple[TaxBracket, ...]

    def __post_init__(self) -> None:
        _validate_brackets(self.year, self.brackets)

    def __iter__(self) -> Iterator[TaxBracket]:
        return iter(self.brackets)

    def __len__(self) -> int:
        return len(self.brackets)

    @property
    def top_rate(self) -> D:
        return self.brackets[-1].rate

    def bounds(self) -> Iterator[tuple[D, D | None, D]]:
        previous = _ZERO
        for bracket in self.brackets:
            yield previous, bracket.upper_limit, bracket.rate
            if bracket.upper_limit is not None:
                previous = bracket.upper_limit


def _validate_brackets(year: str, brackets: tuple[TaxBracket, ...]) -> None:
    if not brackets:
        raise InvalidBracketTableError(f"Tax year {year} has no brackets")
    previous = _ZERO
    last_index = len(brackets) - 1
    for index, bracket in enumerate(brackets):
        if not (_ZERO <= bracket.rate <= _ONE):
            raise InvalidBracketTableError(
                f"Tax year {year} bracket {index} rate {bracket.rate} outside [0, 1]"
            )
        if bracket.upper_limit is None:
            if index != last_index:
                raise InvalidBracketTableError(
                    f"Tax year {year} bracket {index} is unbounded but is not the last bracket"
                )
            continue
        if bracket.upper_limit <= previous:
            raise InvalidBracketTableError(
                f"Tax year {year} bracket {index} limit {bracket.upper_limit} does not exceed {previous}"
            )
        previous = bracket.upper_limit
    if brackets[-1].upper_limit is not None:
        raise InvalidBracketTableError(f"Tax year {year} last bracket must be unbounded")


def make_table(year: str, rows: Iterable[tuple[str | None, str]]) -> TaxYearTable:
    brackets = tuple(
        TaxBracket(upper_limit=None if limit is None else D(limit), rate=D(rate))
        for limit, rate in rows
    )
    return TaxYearTable(year=year, brackets=brackets)


def _iter_shares(income: D, brackets: Iterable[TaxBracket]) -> Iterator[BracketShare]:
    previous = _ZERO
    for bracket in brackets:
        if income <= previous:
            break
        upper = bracket.upper_limit
        ceiling = income if upper is None else min(income, upper)
        taxable = ceiling - previous
        yield BracketShare(
            lower=previous,
            upper=upper,
            rate=bracket.rate,
            taxable=taxable,
            tax=taxable * bracket.rate,
        )
        if upper is None:
            break
        previous = upper


def calculate_tax(income: D, brackets: Iterable[TaxBracket]) -> D:
    """Total tax owed on ``income`` under progressive ``brackets``.

    ``income`` must already be a validated, non-negative amount; only the part
    of income inside each bracket is taxed at that bracket's rate. Income on a
    boundary belongs to the lower bracket.
    """
    tax = _ZERO
    for share in _iter_shares(income, brackets):
        tax += share.tax
    return tax.quantize(_CENT, rounding=ROUND_HALF_UP)


def bracket_breakdown(income: D, brackets: Iterable[TaxBracket]) -> list[BracketShare]:
    return list(_iter_shares(income, brackets))


__all__ = [
    "BracketShare",
    "InvalidBracketTableError",
    "TaxBracket",
    "TaxYearTable",
    "bracket_breakdown",
    "calculate_tax",
    "make_table",
]
