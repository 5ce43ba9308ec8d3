"""
Rental Income Tax Calculations

Taxable base and estimated income tax under the micro and real regimes.
"""

from typing import Dict

from app.calculations.models import MicroRegime, RealRegime, TaxRegime
from app.calculations.rounding import round_half_up, bps_to_decimal

MICRO_ALLOWANCE = 0.5

# Straight-line depreciation periods, in years
FURNITURE_DEPRECIATION_YEARS = 5
WORKS_DEPRECIATION_YEARS = 10
BUILDING_DEPRECIATION_YEARS = 30

# Land is not depreciable
BUILDING_SHARE_OF_PRICE = 0.85


def calculate_depreciation(
    regime: TaxRegime, price_cents: int, works_cents: int, furniture_cents: int
) -> int:
    """
    Annual depreciation deductible under the real regime.

    Each component is rounded on its own before summing.

    Args:
        regime: Tax regime; only RealRegime with amortization enabled deducts
        price_cents: Purchase price
        works_cents: Renovation works
        furniture_cents: Furniture

    Returns:
        Annual depreciation in cents
    """
    if not (isinstance(regime, RealRegime) and regime.amortization_enabled):
        return 0

    furniture = round_half_up(furniture_cents / FURNITURE_DEPRECIATION_YEARS)
    works = round_half_up(works_cents / WORKS_DEPRECIATION_YEARS)
    building_base = round_half_up(price_cents * BUILDING_SHARE_OF_PRICE)
    building = round_half_up(building_base / BUILDING_DEPRECIATION_YEARS)

    return furniture + works + building


def calculate_tax_base(
    regime: TaxRegime,
    annual_rent_net_cents: int,
    annual_charges_cents: int,
    interest_year1_cents: int,
    depreciation_cents: int,
) -> int:
    """
    Taxable rental income for the year.

    Micro ignores actual charges and applies the flat allowance. Real deducts
    charges, loan interest and depreciation; a fiscal loss floors at zero.
    """
    if isinstance(regime, MicroRegime):
        return round_half_up(annual_rent_net_cents * MICRO_ALLOWANCE)

    fiscal_result = (
        annual_rent_net_cents
        - annual_charges_cents
        - interest_year1_cents
        - depreciation_cents
    )
    return max(0, fiscal_result)


def calculate_tax(tax_base_cents: int, tmi_bps: int) -> int:
    """Estimated income tax at the marginal rate."""
    return round_half_up(tax_base_cents * bps_to_decimal(tmi_bps))


def calculate_cashflow_after_tax(
    annual_cashflow_before_tax_cents: int, tax_estimated_cents: int
) -> Dict[str, int]:
    """Annual and monthly cash-flow once the estimated tax is paid."""
    annual = annual_cashflow_before_tax_cents - tax_estimated_cents
    return {
        "annual": annual,
        "monthly": round_half_up(annual / 12),
    }
