"""
Acquisition and Financing Calculations

Notary fees, project cost, loan sizing, fixed-rate loan payment and
borrower insurance. All amounts are integer cents.
"""

from typing import Optional

from app.calculations.models import FeeMode
from app.calculations.rounding import round_half_up, bps_to_decimal


def calculate_notary_fees(
    price_cents: int,
    mode: FeeMode,
    percent_bps: Optional[int],
    fixed_cents: Optional[int],
) -> int:
    """
    Resolve notary fees from either a rate on the price or a fixed amount.

    Args:
        price_cents: Purchase price
        mode: percent or fixed
        percent_bps: Fee rate in basis points (percent mode)
        fixed_cents: Fee amount (fixed mode)

    Returns:
        Notary fees in cents (0 when the selected field is missing)
    """
    if mode == FeeMode.percent and percent_bps is not None:
        return round_half_up(price_cents * bps_to_decimal(percent_bps))
    return fixed_cents if fixed_cents is not None else 0


def calculate_total_project_cost(
    price_cents: int, notary_fees_cents: int, works_cents: int, furniture_cents: int
) -> int:
    """Price plus notary fees, works and furniture."""
    return price_cents + notary_fees_cents + works_cents + furniture_cents


def calculate_loan_amount(total_project_cost_cents: int, down_payment_cents: int) -> int:
    """Amount to borrow; a down payment above the cost yields no loan."""
    return max(0, total_project_cost_cents - down_payment_cents)


def calculate_monthly_payment(
    loan_amount_cents: int, annual_rate_bps: int, loan_years: int
) -> int:
    """
    Calculate the fixed monthly loan payment (principal + interest).

    Matches Excel's PMT() function, rounded to the cent.

    Args:
        loan_amount_cents: Loan principal
        annual_rate_bps: Annual interest rate in basis points (400 = 4%)
        loan_years: Loan term in years

    Returns:
        Monthly payment in cents
    """
    months = loan_years * 12
    if months <= 0 or loan_amount_cents <= 0:
        return 0

    monthly_rate = bps_to_decimal(annual_rate_bps) / 12

    if monthly_rate == 0:
        return round_half_up(loan_amount_cents / months)

    payment = (loan_amount_cents * monthly_rate) / (1 - (1 + monthly_rate) ** (-months))

    return round_half_up(payment)


def calculate_monthly_insurance(
    loan_amount_cents: int,
    mode: FeeMode,
    rate_bps: Optional[int],
    fixed_monthly_cents: Optional[int],
) -> int:
    """Borrower insurance per month, as an annual rate on the loan or a flat fee."""
    if mode == FeeMode.percent and rate_bps is not None:
        return round_half_up(loan_amount_cents * bps_to_decimal(rate_bps) / 12)
    return fixed_monthly_cents if fixed_monthly_cents is not None else 0
