"""
Simulation Value Types

Immutable input and result records exchanged by the calculation engine.
Money is held in integer cents and rates in integer basis points.
"""

import enum
from dataclasses import dataclass, field, asdict, replace
from typing import Optional, Union


class FeeMode(str, enum.Enum):
    """How a fee is expressed: as a rate or as a fixed amount."""

    percent = "percent"
    fixed = "fixed"


@dataclass(frozen=True)
class MicroRegime:
    """Flat-allowance regime: half of net rent is taxable."""

    name: str = field(default="micro", init=False)


@dataclass(frozen=True)
class RealRegime:
    """Actual-charges regime, with optional depreciation."""

    amortization_enabled: bool = False
    name: str = field(default="reel", init=False)


TaxRegime = Union[MicroRegime, RealRegime]


def regime_from_name(name: str, amortization_enabled: bool = False) -> TaxRegime:
    """Build a regime from its stored tag."""
    if name == "micro":
        return MicroRegime()
    if name == "reel":
        return RealRegime(amortization_enabled=amortization_enabled)
    raise ValueError(f"Unknown tax regime: {name!r}")


@dataclass(frozen=True)
class SimulationInput:
    """Validated parameters for one simulation."""

    price_cents: int
    notary_fee_mode: FeeMode
    notary_fee_percent_bps: Optional[int]
    notary_fee_cents: Optional[int]
    works_cents: int
    furniture_cents: int
    down_payment_cents: int
    loan_rate_bps: int
    loan_years: int
    insurance_mode: FeeMode
    insurance_rate_bps: Optional[int]
    insurance_monthly_cents: Optional[int]
    rent_monthly_cents: int
    vacancy_rate_bps: int
    recoverable_charges_monthly_cents: int
    non_recoverable_charges_monthly_cents: int
    property_tax_cents: int
    pno_cents: int
    management_fee_bps: int
    tmi_bps: int
    regime: TaxRegime = field(default_factory=MicroRegime)

    def __post_init__(self):
        object.__setattr__(self, "notary_fee_mode", FeeMode(self.notary_fee_mode))
        object.__setattr__(self, "insurance_mode", FeeMode(self.insurance_mode))

        if self.notary_fee_mode == FeeMode.percent and self.notary_fee_cents is not None:
            raise ValueError("notary_fee_cents must be None in percent mode")
        if self.notary_fee_mode == FeeMode.fixed and self.notary_fee_percent_bps is not None:
            raise ValueError("notary_fee_percent_bps must be None in fixed mode")
        if self.insurance_mode == FeeMode.percent and self.insurance_monthly_cents is not None:
            raise ValueError("insurance_monthly_cents must be None in percent mode")
        if self.insurance_mode == FeeMode.fixed and self.insurance_rate_bps is not None:
            raise ValueError("insurance_rate_bps must be None in fixed mode")
        if not isinstance(self.regime, (MicroRegime, RealRegime)):
            raise ValueError(f"Unsupported regime: {self.regime!r}")

    @property
    def amortization_enabled(self) -> bool:
        return isinstance(self.regime, RealRegime) and self.regime.amortization_enabled

    def with_regime(self, regime: TaxRegime) -> "SimulationInput":
        """Copy of these inputs evaluated under another regime."""
        return replace(self, regime=regime)


class Verdict(str, enum.Enum):
    """Qualitative reading of the monthly after-tax cash-flow."""

    positive = "positive"
    break_even = "break_even"
    negative = "negative"


@dataclass(frozen=True)
class SimulationResult:
    """Year-1 figures derived from a SimulationInput."""

    total_project_cost_cents: int
    notary_fees_cents: int
    loan_amount_cents: int
    monthly_payment_cents: int
    monthly_insurance_cents: int
    monthly_payment_total_cents: int
    annual_rent_gross_cents: int
    annual_vacancy_cents: int
    annual_rent_net_cents: int
    annual_charges_cents: int
    annual_cashflow_before_tax_cents: int
    monthly_cashflow_before_tax_cents: int
    monthly_savings_effort_cents: int
    tax_base_cents: int
    tax_estimated_cents: int
    interest_year1_cents: int
    amortization_annual_cents: int
    annual_cashflow_after_tax_cents: int
    monthly_cashflow_after_tax_cents: int
    gross_yield_bps: int
    net_yield_bps: int
    verdict: Verdict
    verdict_explanation: str

    def to_dict(self) -> dict:
        data = asdict(self)
        data["verdict"] = self.verdict.value
        return data
