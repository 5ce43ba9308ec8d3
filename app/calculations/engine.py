"""
Simulation Pipeline

Runs every calculation stage in order, from acquisition cost to verdict,
and assembles the SimulationResult.
"""

from typing import Dict

from app.calculations import financing, amortization, cashflow, tax, yields
from app.calculations.models import (
    SimulationInput,
    SimulationResult,
    MicroRegime,
    RealRegime,
)


def compute_simulation(inputs: SimulationInput) -> SimulationResult:
    """
    Compute year-1 financing, cash-flow, tax and yield figures.

    Pure function: the same inputs always give the same result.
    """
    # Acquisition and financing
    notary_fees = financing.calculate_notary_fees(
        inputs.price_cents,
        inputs.notary_fee_mode,
        inputs.notary_fee_percent_bps,
        inputs.notary_fee_cents,
    )
    total_project_cost = financing.calculate_total_project_cost(
        inputs.price_cents, notary_fees, inputs.works_cents, inputs.furniture_cents
    )
    loan_amount = financing.calculate_loan_amount(
        total_project_cost, inputs.down_payment_cents
    )
    monthly_payment = financing.calculate_monthly_payment(
        loan_amount, inputs.loan_rate_bps, inputs.loan_years
    )
    monthly_insurance = financing.calculate_monthly_insurance(
        loan_amount,
        inputs.insurance_mode,
        inputs.insurance_rate_bps,
        inputs.insurance_monthly_cents,
    )
    monthly_payment_total = monthly_payment + monthly_insurance

    # Operations
    rent = cashflow.calculate_annual_rent(inputs.rent_monthly_cents, inputs.vacancy_rate_bps)
    annual_charges = cashflow.calculate_annual_charges(
        inputs.non_recoverable_charges_monthly_cents,
        inputs.property_tax_cents,
        inputs.pno_cents,
        inputs.management_fee_bps,
        rent["net"],
    )
    before_tax = cashflow.calculate_cashflow_before_tax(
        rent["net"], annual_charges, monthly_payment_total
    )

    # Tax
    interest_year1 = amortization.calculate_interest_year1(
        loan_amount, inputs.loan_rate_bps, inputs.loan_years
    )
    depreciation = tax.calculate_depreciation(
        inputs.regime, inputs.price_cents, inputs.works_cents, inputs.furniture_cents
    )
    tax_base = tax.calculate_tax_base(
        inputs.regime, rent["net"], annual_charges, interest_year1, depreciation
    )
    tax_estimated = tax.calculate_tax(tax_base, inputs.tmi_bps)
    after_tax = tax.calculate_cashflow_after_tax(before_tax["annual"], tax_estimated)

    # Returns
    verdict, explanation = yields.determine_verdict(after_tax["monthly"])

    return SimulationResult(
        total_project_cost_cents=total_project_cost,
        notary_fees_cents=notary_fees,
        loan_amount_cents=loan_amount,
        monthly_payment_cents=monthly_payment,
        monthly_insurance_cents=monthly_insurance,
        monthly_payment_total_cents=monthly_payment_total,
        annual_rent_gross_cents=rent["gross"],
        annual_vacancy_cents=rent["vacancy"],
        annual_rent_net_cents=rent["net"],
        annual_charges_cents=annual_charges,
        annual_cashflow_before_tax_cents=before_tax["annual"],
        monthly_cashflow_before_tax_cents=before_tax["monthly"],
        monthly_savings_effort_cents=before_tax["savings_effort"],
        tax_base_cents=tax_base,
        tax_estimated_cents=tax_estimated,
        interest_year1_cents=interest_year1,
        amortization_annual_cents=depreciation,
        annual_cashflow_after_tax_cents=after_tax["annual"],
        monthly_cashflow_after_tax_cents=after_tax["monthly"],
        gross_yield_bps=yields.calculate_gross_yield(rent["gross"], total_project_cost),
        net_yield_bps=yields.calculate_net_yield(rent["net"], annual_charges, total_project_cost),
        verdict=verdict,
        verdict_explanation=explanation,
    )


def compute_both_regimes(inputs: SimulationInput) -> Dict[str, SimulationResult]:
    """
    Evaluate the same inputs under both regimes.

    Micro never depreciates; the real regime keeps the caller's
    amortization choice.
    """
    real_regime = RealRegime(amortization_enabled=inputs.amortization_enabled)
    return {
        "micro": compute_simulation(inputs.with_regime(MicroRegime())),
        "reel": compute_simulation(inputs.with_regime(real_regime)),
    }
