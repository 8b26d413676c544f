from __future__ import annotations

from functools import lru_cache
from typing import Mapping

from app.core.brackets import TaxYearTable
from app.core.tax_years.au import TABLES

DEFAULT_TAX_YEAR = "2024-2025"


class UnknownTaxYearError(KeyError):
    pass


@lru_cache(maxsize=1)
def _table_map() -> Mapping[str, TaxYearTable]:
    return {table.year: table for table in TABLES}


SUPPORTED_TAX_YEARS: tuple[str, ...] = tuple(_table_map().keys())


def get_tax_year_table(year: str) -> TaxYearTable:
    try:
        return _table_map()[year]
    except KeyError as exc:
        raise UnknownTaxYearError(f"Unsupported tax year {year}") from exc


def list_tax_year_tables() -> list[TaxYearTable]:
    return list(_table_map().values())


__all__ = [
    "DEFAULT_TAX_YEAR",
    "SUPPORTED_TAX_YEARS",
    "UnknownTaxYearError",
    "get_tax_year_table",
    "list_tax_year_tables",
]
