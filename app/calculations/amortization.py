"""
Loan Amortization Calculations

Builds the month-by-month schedule of a fixed-rate, fixed-term loan,
matching Excel's IPMT and PPMT split with cent rounding at each month.
"""

from typing import List, Dict, Optional
from datetime import date
from dateutil.relativedelta import relativedelta

from app.calculations.financing import calculate_monthly_payment
from app.calculations.rounding import round_half_up, bps_to_decimal


def generate_amortization_schedule(
    loan_amount_cents: int,
    annual_rate_bps: int,
    loan_years: int,
    start_date: Optional[date] = None,
) -> List[Dict]:
    """
    Generate the amortization schedule.

    Args:
        loan_amount_cents: Loan principal
        annual_rate_bps: Annual interest rate in basis points
        loan_years: Loan term in years
        start_date: Date of first payment; rows get a "date" key when set

    Returns:
        List of amortization rows, ending early once the balance is repaid
    """
    schedule = []
    months = loan_years * 12
    monthly_rate = bps_to_decimal(annual_rate_bps) / 12
    payment = calculate_monthly_payment(loan_amount_cents, annual_rate_bps, loan_years)
    balance = loan_amount_cents

    for month in range(1, months + 1):
        interest = round_half_up(balance * monthly_rate)

        # Interest alone can exceed the payment at very high rates
        principal = min(balance, max(0, payment - interest))

        balance = max(0, balance - principal)

        row = {
            "month": month,
            "interest_cents": interest,
            "principal_cents": principal,
            "balance_cents": balance,
        }
        if start_date is not None:
            row["date"] = (start_date + relativedelta(months=month - 1)).isoformat()
        schedule.append(row)

        if balance == 0:
            break

    return schedule


def calculate_interest_year1(
    loan_amount_cents: int, annual_rate_bps: int, loan_years: int
) -> int:
    """Interest paid over the first twelve months of the loan."""
    if loan_amount_cents <= 0 or loan_years <= 0:
        return 0
    schedule = generate_amortization_schedule(loan_amount_cents, annual_rate_bps, loan_years)
    return calculate_total_interest(schedule[:12])


def calculate_total_interest(schedule: List[Dict]) -> int:
    """Calculate total interest paid over a schedule."""
    return sum(row["interest_cents"] for row in schedule)


def calculate_total_principal(schedule: List[Dict]) -> int:
    """Calculate total principal repaid over a schedule."""
    return sum(row["principal_cents"] for row in schedule)
