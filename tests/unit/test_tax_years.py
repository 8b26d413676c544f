from decimal import Decimal as D

import pytest

from app.core.brackets import calculate_tax
from app.core.tax_years import (
    DEFAULT_TAX_YEAR,
    SUPPORTED_TAX_YEARS,
    UnknownTaxYearError,
    get_tax_year_table,
    list_tax_year_tables,
)


def test_supported_years_newest_first():
    assert SUPPORTED_TAX_YEARS == ("2024-2025", "2023-2024", "2022-2023", "2021-2022")
    assert DEFAULT_TAX_YEAR in SUPPORTED_TAX_YEARS
    assert [t.year for t in list_tax_year_tables()] == list(SUPPORTED_TAX_YEARS)


def test_unknown_year_raises():
    with pytest.raises(UnknownTaxYearError, match="Unsupported tax year 2030-2031"):
        get_tax_year_table("2030-2031")


def test_unknown_year_is_a_key_error():
    with pytest.raises(KeyError):
        get_tax_year_table("")


@pytest.mark.parametrize("year", SUPPORTED_TAX_YEARS)
def test_every_table_is_progressive(year):
    table = get_tax_year_table(year)
    assert table.brackets[0].rate == D("0")
    assert table.brackets[-1].upper_limit is None
    rates = [b.rate for b in table]
    assert rates == sorted(rates)
    assert calculate_tax(D("0"), table) == D("0.00")


def test_2021_2022_differs_between_37000_and_45000():
    older = get_tax_year_table("2021-2022")
    newer = get_tax_year_table("2022-2023")
    assert [b.upper_limit for b in older][:3] == [D("18200"), D("37000"), D("90000")]
    assert calculate_tax(D("30000"), older) == calculate_tax(D("30000"), newer)
    assert calculate_tax(D("42000"), older) > calculate_tax(D("42000"), newer)


def test_recent_years_share_thresholds():
    tables = [get_tax_year_table(y) for y in ("2024-2025", "2023-2024", "2022-2023")]
    assert tables[0].brackets == tables[1].brackets == tables[2].brackets
