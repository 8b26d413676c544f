from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from fastapi import APIRouter, HTTPException, Query, Request
from fastapi.responses import FileResponse, HTMLResponse
from fastapi.templating import Jinja2Templates

from app.config import Settings, get_settings
from app.core.estimate import estimate_from_text
from app.core.tax_years import SUPPORTED_TAX_YEARS, UnknownTaxYearError, get_tax_year_table
from app.ui.formatting import bracket_range, format_currency, format_percent, format_rate

logger = logging.getLogger("tax_app.ui")

router = APIRouter(prefix="/ui", tags=["ui"])

UI_ROOT = Path(__file__).resolve().parent
TEMPLATES = Jinja2Templates(directory=str(UI_ROOT / "templates"))
STATIC_ROOT = UI_ROOT / "static"

RESET_ACTION = "reset"


@router.get("/static/{path:path}", name="ui_static")
async def serve_ui_static(path: str) -> FileResponse:
    target_path = (STATIC_ROOT / path).resolve()
    try:
        target_path.relative_to(STATIC_ROOT.resolve())
    except ValueError as exc:
        raise HTTPException(status_code=404, detail="Static asset not found") from exc
    if not target_path.is_file():
        raise HTTPException(status_code=404, detail="Static asset not found")
    return FileResponse(target_path)


def _resolve_settings(request: Request) -> Settings:
    settings = getattr(request.app.state, "settings", None)
    if isinstance(settings, Settings):
        return settings
    return get_settings()


def _bracket_rows(tax_year: str) -> list[dict[str, str]]:
    table = get_tax_year_table(tax_year)
    return [
        {"range": bracket_range(lower, upper), "rate": format_rate(rate)}
        for lower, upper, rate in table.bounds()
    ]


def _result_cards(estimate) -> list[dict[str, str]]:
    return [
        {"title": "Tax Payable", "value": format_currency(estimate.tax)},
        {"title": "After Tax Income", "value": format_currency(estimate.after_tax_income)},
        {"title": "Effective Tax Rate", "value": format_percent(estimate.effective_rate)},
    ]


@router.get("/", response_class=HTMLResponse, name="ui_calculator")
def calculator(
    request: Request,
    income: str | None = Query(None),
    tax_year: str | None = Query(None),
    action: str | None = Query(None),
) -> HTMLResponse:
    settings = _resolve_settings(request)
    selected_year = tax_year or settings.default_tax_year
    income_text = "" if action == RESET_ACTION else (income or "").strip()

    try:
        estimate = estimate_from_text(income_text, selected_year)
    except UnknownTaxYearError as exc:
        logger.warning("Calculator requested for unsupported tax year %s", selected_year)
        raise HTTPException(status_code=404, detail=exc.args[0]) from exc

    context: dict[str, Any] = {
        "tax_years": SUPPORTED_TAX_YEARS,
        "selected_year": selected_year,
        "income": income_text,
        "estimate": estimate,
        "result_cards": _result_cards(estimate) if estimate is not None else [],
        "brackets": _bracket_rows(selected_year),
    }
    return TEMPLATES.TemplateResponse(request, "calculator.html", context)
