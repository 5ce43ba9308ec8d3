"""
Cash Flow Calculations

Year-1 rental income, operating charges and pre-tax cash-flow.
"""

from typing import Dict

from app.calculations.rounding import round_half_up, bps_to_decimal


def calculate_annual_rent(rent_monthly_cents: int, vacancy_rate_bps: int) -> Dict[str, int]:
    """
    Annualize rent and apply the vacancy allowance.

    Returns:
        Dict with gross, vacancy and net annual rent in cents
    """
    annual_gross = rent_monthly_cents * 12
    vacancy = round_half_up(annual_gross * bps_to_decimal(vacancy_rate_bps))

    return {
        "gross": annual_gross,
        "vacancy": vacancy,
        "net": annual_gross - vacancy,
    }


def calculate_management_fees(annual_rent_net_cents: int, management_fee_bps: int) -> int:
    """Property management fee, charged on rent actually collected."""
    return round_half_up(annual_rent_net_cents * bps_to_decimal(management_fee_bps))


def calculate_annual_charges(
    non_recoverable_charges_monthly_cents: int,
    property_tax_cents: int,
    pno_cents: int,
    management_fee_bps: int,
    annual_rent_net_cents: int,
) -> int:
    """
    Calculate owner-borne annual charges.

    Recoverable charges are passed through to the tenant and are left out.

    Args:
        non_recoverable_charges_monthly_cents: Monthly charges kept by the owner
        property_tax_cents: Annual property tax
        pno_cents: Annual landlord insurance premium
        management_fee_bps: Management fee rate on net rent
        annual_rent_net_cents: Rent after vacancy

    Returns:
        Annual charges in cents
    """
    management_fees = calculate_management_fees(annual_rent_net_cents, management_fee_bps)
    return (
        non_recoverable_charges_monthly_cents * 12
        + property_tax_cents
        + pno_cents
        + management_fees
    )


def calculate_cashflow_before_tax(
    annual_rent_net_cents: int,
    annual_charges_cents: int,
    monthly_payment_total_cents: int,
) -> Dict[str, int]:
    """
    Cash-flow after charges and debt service, before income tax.

    Returns:
        Dict with annual and monthly cash-flow and the monthly savings effort
        (the owner's out-of-pocket top-up, 0 when cash-flow is not negative)
    """
    annual = annual_rent_net_cents - annual_charges_cents - monthly_payment_total_cents * 12
    monthly = round_half_up(annual / 12)

    return {
        "annual": annual,
        "monthly": monthly,
        "savings_effort": max(0, -monthly),
    }
