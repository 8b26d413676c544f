import argparse
import logging
import os
import sys
from decimal import Decimal
from pathlib import Path
from typing import Literal

if __package__ in (None, ""):
    sys.path.append(str(Path(__file__).resolve().parent.parent))

from fastapi import FastAPI
from fastapi.responses import RedirectResponse
from rich.console import Console
from rich.table import Table

from app.api.http import router as api_router
from app.config import get_settings
from app.core.estimate import estimate_tax, parse_income
from app.core.models import TaxEstimate
from app.core.tax_years import SUPPORTED_TAX_YEARS, get_tax_year_table
from app.lifespan import build_application_lifespan
from app.ui import router as ui_module
from app.ui.formatting import bracket_range, format_currency, format_percent, format_rate

logger = logging.getLogger("tax_app")


async def _announce_default_tax_year(_: FastAPI) -> None:
    settings = get_settings()
    logger.info(
        "Income tax calculator ready; default_tax_year=%s supported=%s",
        settings.default_tax_year,
        ",".join(SUPPORTED_TAX_YEARS),
    )


app = FastAPI(
    title="Income Tax Calculator",
    version="0.1.0",
    description="Progressive bracket income tax calculator for Australian resident tax years.",
    lifespan=build_application_lifespan("calculator", startup_hook=_announce_default_tax_year),
)

app.include_router(ui_module.router)
app.include_router(api_router)


@app.get("/", include_in_schema=False)
def index() -> RedirectResponse:
    return RedirectResponse(url="/ui/")


@app.get("/health")
def health():
    settings = getattr(app.state, "settings", get_settings())
    return {
        "ok": True,
        "default_tax_year": settings.default_tax_year,
        "tax_years": list(SUPPORTED_TAX_YEARS),
        "build": {
            "version": settings.build_version,
            "sha": settings.build_sha,
        },
    }


ColorPreference = Literal["auto", "always", "never"]


def _resolve_color_preference(pref: ColorPreference) -> ColorPreference:
    if pref == "auto" and os.getenv("NO_COLOR"):
        return "never"
    return pref


def _get_console(pref: ColorPreference) -> Console | None:
    resolved = _resolve_color_preference(pref)
    if resolved == "never":
        return None
    return Console(force_terminal=True if resolved == "always" else None)


def _console_print(console: Console | None, message: str) -> None:
    if console is not None:
        console.print(message)
    else:
        print(message)


def _print_estimate(estimate: TaxEstimate, console: Console | None) -> None:
    rows = [
        ("Tax year", estimate.tax_year),
        ("Annual income", format_currency(estimate.income)),
        ("Tax Payable", format_currency(estimate.tax)),
        ("After Tax Income", format_currency(estimate.after_tax_income)),
        ("Effective Tax Rate", format_percent(estimate.effective_rate)),
    ]
    if console is None:
        for label, value in rows:
            print(f"{label}: {value}")
        if estimate.breakdown:
            print("Breakdown:")
        for share in estimate.breakdown:
            print(
                f"  {bracket_range(share.lower, share.upper)} @ {format_rate(share.rate)}"
                f" on {format_currency(share.taxable)} = {format_currency(share.tax)}"
            )
        return

    summary = Table(title=f"Income tax estimate ({estimate.tax_year})", show_header=False)
    summary.add_column("Item")
    summary.add_column("Amount", justify="right")
    for label, value in rows[1:]:
        summary.add_row(label, value)
    console.print(summary)

    if estimate.breakdown:
        breakdown = Table(title="Breakdown by bracket")
        for column in ("Bracket", "Rate", "Taxable", "Tax"):
            breakdown.add_column(column, justify="left" if column == "Bracket" else "right")
        for share in estimate.breakdown:
            breakdown.add_row(
                bracket_range(share.lower, share.upper),
                format_rate(share.rate),
                format_currency(share.taxable),
                format_currency(share.tax),
            )
        console.print(breakdown)


def _print_brackets(tax_year: str, console: Console | None) -> None:
    table = get_tax_year_table(tax_year)
    if console is None:
        print(f"Tax Brackets ({tax_year})")
        for lower, upper, rate in table.bounds():
            print(f"  {bracket_range(lower, upper)}  {format_rate(rate)}")
        return
    output = Table(title=f"Tax Brackets ({tax_year})")
    output.add_column("Range")
    output.add_column("Rate", justify="right")
    for lower, upper, rate in table.bounds():
        output.add_row(bracket_range(lower, upper), format_rate(rate))
    console.print(output)


def _run_estimate(raw_income: str, tax_year: str, console: Console | None) -> int:
    income: Decimal | None = parse_income(raw_income)
    if income is None:
        _console_print(console, f"No result: '{raw_income}' is not a non-negative income amount.")
        return 1
    _print_estimate(estimate_tax(income, tax_year), console)
    return 0


def _serve(host: str, port: int) -> int:
    import uvicorn

    uvicorn.run(app, host=host, port=port, log_level=get_settings().log_level.lower())
    return 0


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="tax-calculator",
        description="Estimate Australian resident income tax from progressive brackets.",
    )
    parser.add_argument(
        "--color",
        choices=["auto", "always", "never"],
        default="auto",
        help="Color output preference (default: auto).",
    )
    parser.add_argument(
        "--no-color",
        dest="color",
        action="store_const",
        const="never",
        help="Alias for --color never.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    estimate_parser = subparsers.add_parser("estimate", help="Compute tax payable for an annual income.")
    estimate_parser.add_argument("income", help="Annual income in AUD.")
    estimate_parser.add_argument("--year", choices=SUPPORTED_TAX_YEARS, help="Tax year (default from settings).")

    brackets_parser = subparsers.add_parser("brackets", help="Show the bracket table for a tax year.")
    brackets_parser.add_argument("--year", choices=SUPPORTED_TAX_YEARS, help="Tax year (default from settings).")

    subparsers.add_parser("years", help="List supported tax years.")

    serve_parser = subparsers.add_parser("serve", help="Run the web calculator.")
    serve_parser.add_argument("--host", default="127.0.0.1")
    serve_parser.add_argument("--port", type=int, default=8000)
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    if args.command == "serve":
        return _serve(args.host, args.port)

    console = _get_console(args.color)
    if args.command == "years":
        default_year = get_settings().default_tax_year
        for year in SUPPORTED_TAX_YEARS:
            marker = " (default)" if year == default_year else ""
            _console_print(console, f"{year}{marker}")
        return 0

    tax_year = args.year or get_settings().default_tax_year
    if args.command == "brackets":
        _print_brackets(tax_year, console)
        return 0
    return _run_estimate(args.income, tax_year, console)


if __name__ == "__main__":
    raise SystemExit(main())
