from decimal import Decimal as D

import pytest

from app.core.brackets import (
    InvalidBracketTableError,
    TaxBracket,
    TaxYearTable,
    bracket_breakdown,
    calculate_tax,
    make_table,
)
from app.core.tax_years import get_tax_year_table

TABLE_2025 = get_tax_year_table("2024-2025")


def test_zero_income_owes_nothing():
    assert calculate_tax(D("0"), TABLE_2025) == D("0.00")


@pytest.mark.parametrize("income", ["1", "15000", "18199.99", "18200"])
def test_income_inside_tax_free_threshold(income):
    assert calculate_tax(D(income), TABLE_2025) == D("0.00")


def test_fifty_thousand_2024_2025():
    # (45000-18200)*0.19 + (50000-45000)*0.325 = 5092 + 1625
    assert calculate_tax(D("50000"), TABLE_2025) == D("6717.00")


def test_hundred_thousand_2024_2025():
    # 5092 + (100000-45000)*0.325 = 5092 + 17875
    assert calculate_tax(D("100000"), TABLE_2025) == D("22967.00")


def test_top_bracket_has_no_ceiling():
    # 5092 + 75000*0.325 + 60000*0.37 + 20000*0.45
    assert calculate_tax(D("200000"), TABLE_2025) == D("60667.00")
    assert calculate_tax(D("10000000"), TABLE_2025) == D("4470667.00")


def test_boundary_income_belongs_to_lower_bracket():
    assert calculate_tax(D("45000"), TABLE_2025) == D("5092.00")
    assert calculate_tax(D("45001"), TABLE_2025) == D("5092.33")
    assert calculate_tax(D("18201"), TABLE_2025) == D("0.19")


def test_2021_2022_uses_lower_thresholds():
    table = get_tax_year_table("2021-2022")
    # (37000-18200)*0.19 + (40000-37000)*0.325 = 3572 + 975
    assert calculate_tax(D("40000"), table) == D("4547.00")
    assert calculate_tax(D("40000"), TABLE_2025) == D("4142.00")
    assert calculate_tax(D("90000"), table) == D("20797.00")


def test_accepts_plain_bracket_sequences():
    brackets = [TaxBracket(D("10000"), D("0.1")), TaxBracket(None, D("0.2"))]
    assert calculate_tax(D("15000"), brackets) == D("2000.00")


def test_breakdown_lists_reached_brackets_only():
    shares = bracket_breakdown(D("50000"), TABLE_2025)
    assert [(s.lower, s.upper) for s in shares] == [
        (D("0"), D("18200")),
        (D("18200"), D("45000")),
        (D("45000"), D("120000")),
    ]
    assert [s.taxable for s in shares] == [D("18200"), D("26800"), D("5000")]
    assert sum(s.tax for s in shares) == D("6717")


def test_breakdown_stops_at_boundary():
    assert bracket_breakdown(D("0"), TABLE_2025) == []
    assert len(bracket_breakdown(D("18200"), TABLE_2025)) == 1


def test_breakdown_reaches_unbounded_bracket():
    shares = bracket_breakdown(D("250000"), TABLE_2025)
    assert shares[-1].upper is None
    assert shares[-1].taxable == D("70000")


def test_table_bounds_chain_previous_limits():
    bounds = list(TABLE_2025.bounds())
    assert bounds[0] == (D("0"), D("18200"), D("0"))
    assert bounds[1][0] == D("18200")
    assert bounds[-1] == (D("180000"), None, D("0.45"))
    assert TABLE_2025.top_rate == D("0.45")
    assert len(TABLE_2025) == 5


@pytest.mark.parametrize(
    "rows,message",
    [
        ((), "no brackets"),
        ((("100", "0.1"),), "must be unbounded"),
        ((("100", "0.1"), ("50", "0.2"), (None, "0.3")), "does not exceed"),
        ((("100", "0.1"), ("100", "0.2"), (None, "0.3")), "does not exceed"),
        (((None, "0.1"), (None, "0.2")), "not the last bracket"),
        ((("100", "0.1"), (None, "1.5")), "outside"),
        ((("100", "-0.1"), (None, "0.2")), "outside"),
        ((("0", "0.1"), (None, "0.2")), "does not exceed"),
    ],
)
def test_invalid_tables_rejected(rows, message):
    with pytest.raises(InvalidBracketTableError, match=message):
        make_table("test", rows)


def test_tables_are_immutable():
    with pytest.raises(AttributeError):
        TABLE_2025.year = "other"  # type: ignore[misc]
    assert isinstance(TABLE_2025, TaxYearTable)
