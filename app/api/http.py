import logging

from fastapi import APIRouter, HTTPException, Query, Request

from app.config import Settings, get_settings
from app.core.estimate import estimate_from_text, summarize_table
from app.core.models import EstimateResponse, TaxYearSummary, TaxYearsResponse
from app.core.tax_years import SUPPORTED_TAX_YEARS, UnknownTaxYearError, get_tax_year_table

logger = logging.getLogger("tax_app.api")

router = APIRouter(prefix="/tax", tags=["tax"])


def _resolve_settings(request: Request) -> Settings:
    settings = getattr(request.app.state, "settings", None)
    if isinstance(settings, Settings):
        return settings
    return get_settings()


def _unknown_year(year: str, exc: UnknownTaxYearError) -> HTTPException:
    logger.warning("Unsupported tax year requested: %s", year)
    return HTTPException(status_code=404, detail=exc.args[0])


@router.get("/years", response_model=TaxYearsResponse)
def list_years(request: Request):
    settings = _resolve_settings(request)
    return TaxYearsResponse(
        default_tax_year=settings.default_tax_year,
        tax_years=list(SUPPORTED_TAX_YEARS),
    )


@router.get("/estimate", response_model=EstimateResponse)
def estimate(
    request: Request,
    income: str | None = Query(None, description="Annual income; invalid or negative values yield no result"),
    tax_year: str | None = Query(None),
):
    year = tax_year or _resolve_settings(request).default_tax_year
    try:
        result = estimate_from_text(income, year)
    except UnknownTaxYearError as exc:
        raise _unknown_year(year, exc) from exc
    return EstimateResponse(tax_year=year, income=income, result=result)


@router.get("/{tax_year}/brackets", response_model=TaxYearSummary)
def brackets(tax_year: str):
    try:
        table = get_tax_year_table(tax_year)
    except UnknownTaxYearError as exc:
        raise _unknown_year(tax_year, exc) from exc
    return summarize_table(table)
