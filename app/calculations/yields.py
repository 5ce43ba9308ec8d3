"""
Yield and verdict calculations.
"""

from typing import Tuple

from app.calculations.models import Verdict
from app.calculations.rounding import round_half_up, BPS_DENOMINATOR

# Monthly after-tax cash-flow below this is negative rather than near break-even
BREAK_EVEN_FLOOR_CENTS = -10_000

VERDICT_EXPLANATIONS = {
    Verdict.positive: "Cash-flow positif.",
    Verdict.break_even: "Cash-flow proche de l'equilibre.",
    Verdict.negative: "Cash-flow negatif.",
}


def calculate_gross_yield(annual_rent_gross_cents: int, total_project_cost_cents: int) -> int:
    """Gross rent over total project cost, in basis points."""
    if total_project_cost_cents <= 0:
        return 0
    return round_half_up(annual_rent_gross_cents / total_project_cost_cents * BPS_DENOMINATOR)


def calculate_net_yield(
    annual_rent_net_cents: int, annual_charges_cents: int, total_project_cost_cents: int
) -> int:
    """Net rent minus charges over total project cost, in basis points."""
    if total_project_cost_cents <= 0:
        return 0
    return round_half_up(
        (annual_rent_net_cents - annual_charges_cents)
        / total_project_cost_cents
        * BPS_DENOMINATOR
    )


def determine_verdict(monthly_cashflow_after_tax_cents: int) -> Tuple[Verdict, str]:
    """Classify the monthly after-tax cash-flow and return its explanation."""
    if monthly_cashflow_after_tax_cents >= 0:
        verdict = Verdict.positive
    elif monthly_cashflow_after_tax_cents >= BREAK_EVEN_FLOOR_CENTS:
        verdict = Verdict.break_even
    else:
        verdict = Verdict.negative
    return verdict, VERDICT_EXPLANATIONS[verdict]
