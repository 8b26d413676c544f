from decimal import Decimal, ROUND_HALF_UP

from pydantic import BaseModel, ConfigDict, Field, field_validator


_CENT = Decimal("0.01")


def _quantize_decimal(value: Decimal | None) -> Decimal | None:
    if value is None:
        return None
    return value.quantize(_CENT, rounding=ROUND_HALF_UP)


class BracketRow(BaseModel):
    lower: Decimal
    upper: Decimal | None = None
    rate: Decimal

    model_config = ConfigDict(frozen=True)


class TaxYearSummary(BaseModel):
    year: str
    top_rate: Decimal
    brackets: list[BracketRow]


class BracketShareRow(BaseModel):
    lower: Decimal
    upper: Decimal | None = None
    rate: Decimal
    taxable: Decimal
    tax: Decimal

    _quantize_amounts = field_validator("taxable", "tax", mode="after")(_quantize_decimal)


class TaxEstimate(BaseModel):
    tax_year: str
    income: Decimal = Field(..., ge=0)
    tax: Decimal = Field(..., ge=0)
    after_tax_income: Decimal
    effective_rate: Decimal = Field(..., ge=0, le=100, description="Percentage of income")
    breakdown: list[BracketShareRow] = Field(default_factory=list)

    _quantize_money = field_validator(
        "tax",
        "after_tax_income",
        "effective_rate",
        mode="after",
    )(_quantize_decimal)


class EstimateResponse(BaseModel):
    tax_year: str
    income: str | None = None
    result: TaxEstimate | None = None


class TaxYearsResponse(BaseModel):
    default_tax_year: str
    tax_years: list[str]
