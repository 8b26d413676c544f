from __future__ import annotations

from app.core.brackets import make_table

# Australian resident rates. 2022-23 onwards share the 45,000 / 120,000 thresholds.
_RATES_FROM_2022 = (
    ("18200", "0"),
    ("45000", "0.19"),
    ("120000", "0.325"),
    ("180000", "0.37"),
    (None, "0.45"),
)

TABLE_2024_2025 = make_table("2024-2025", _RATES_FROM_2022)
TABLE_2023_2024 = make_table("2023-2024", _RATES_FROM_2022)
TABLE_2022_2023 = make_table("2022-2023", _RATES_FROM_2022)
TABLE_2021_2022 = make_table(
    "2021-2022",
    (
        ("18200", "0"),
        ("37000", "0.19"),
        ("90000", "0.325"),
        ("180000", "0.37"),
        (None, "0.45"),
    ),
)

# Newest first; this is the order the year selector shows.
TABLES = (
    TABLE_2024_2025,
    TABLE_2023_2024,
    TABLE_2022_2023,
    TABLE_2021_2022,
)
