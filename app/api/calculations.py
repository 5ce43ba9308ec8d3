"""
Financial calculation API endpoints.

These endpoints accept inputs and return calculated results without
storing anything. Used for live preview while a form is edited.
"""

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field
from typing import Dict, List, Optional
from datetime import date

from app.calculations import amortization
from app.calculations.engine import compute_both_regimes
from app.validation import SimulationForm, InvalidInput, parse_simulation_form

router = APIRouter()


class PreviewResponse(BaseModel):
    """Both regime results for an unsaved form."""

    name: str
    regime: str
    results: Dict[str, dict]


@router.post("/simulation", response_model=PreviewResponse)
async def preview_simulation(form: SimulationForm):
    """Compute micro and real results for a form without saving it."""
    try:
        parsed = parse_simulation_form(form)
    except InvalidInput as e:
        raise HTTPException(
            status_code=422, detail={"field": e.field, "detail": e.message}
        )

    results = compute_both_regimes(parsed.inputs)

    return PreviewResponse(
        name=parsed.name,
        regime=parsed.inputs.regime.name,
        results={regime: result.to_dict() for regime, result in results.items()},
    )


class AmortizationInput(BaseModel):
    """Input for amortization calculation."""

    loan_amount_cents: int = Field(ge=0)
    annual_rate_bps: int = Field(ge=0, le=1500)
    loan_years: int = Field(ge=5, le=30)
    start_date: Optional[date] = None


class AmortizationResponse(BaseModel):
    """Loan schedule with totals."""

    monthly_payment_cents: int
    schedule: List[dict]
    total_interest_cents: int
    total_principal_cents: int
    interest_year1_cents: int


@router.post("/amortization", response_model=AmortizationResponse)
async def calculate_amortization(inputs: AmortizationInput):
    """Generate loan amortization schedule."""

    from app.calculations.financing import calculate_monthly_payment

    schedule = amortization.generate_amortization_schedule(
        loan_amount_cents=inputs.loan_amount_cents,
        annual_rate_bps=inputs.annual_rate_bps,
        loan_years=inputs.loan_years,
        start_date=inputs.start_date,
    )

    return AmortizationResponse(
        monthly_payment_cents=calculate_monthly_payment(
            inputs.loan_amount_cents, inputs.annual_rate_bps, inputs.loan_years
        ),
        schedule=schedule,
        total_interest_cents=amortization.calculate_total_interest(schedule),
        total_principal_cents=amortization.calculate_total_principal(schedule),
        interest_year1_cents=amortization.calculate_total_interest(schedule[:12]),
    )
