"""
Simulation form parsing and validation.

Turns the raw string fields of the simulation form into a typed
SimulationInput. Amounts are entered in currency units and percentages
in percent; both accept a decimal comma.
"""

import math
import re
from dataclasses import dataclass
from typing import Optional

from pydantic import BaseModel

from app.calculations.models import FeeMode, SimulationInput, regime_from_name
from app.calculations.rounding import round_half_up

NUMBER_PATTERN = re.compile(r"^[-+]?\d+([.,]\d+)?$")


class InvalidInput(ValueError):
    """A form field could not be parsed or is out of bounds."""

    def __init__(self, field: str, message: str):
        super().__init__(f"{field}: {message}")
        self.field = field
        self.message = message


class SimulationForm(BaseModel):
    """Raw simulation form, as submitted."""

    name: str
    price: str
    notary_fee_mode: str = "percent"
    notary_fee_percent: Optional[str] = None
    notary_fee_fixed: Optional[str] = None
    works: str = "0"
    furniture: str = "0"
    down_payment: str = "0"
    loan_rate: str
    loan_years: str
    insurance_mode: str = "percent"
    insurance_rate: Optional[str] = None
    insurance_fixed: Optional[str] = None
    rent_monthly: str
    vacancy_rate: str = "0"
    recoverable_charges_monthly: str = "0"
    non_recoverable_charges_monthly: str = "0"
    property_tax: str = "0"
    pno: str = "0"
    management_fee: str = "0"
    tmi: str
    regime: str = "micro"
    amortization_enabled: str = "false"


@dataclass(frozen=True)
class ParsedSimulation:
    """A validated simulation name and its engine inputs."""

    name: str
    inputs: SimulationInput


def _parse_number(field: str, value: Optional[str]) -> float:
    normalized = re.sub(r"\s", "", value or "")
    if not NUMBER_PATTERN.match(normalized):
        raise InvalidInput(field, "Nombre invalide")
    result = float(normalized.replace(",", "."))
    if not math.isfinite(result):
        raise InvalidInput(field, "Nombre invalide")
    return result


def parse_cents(field: str, value: Optional[str]) -> int:
    """Currency units to cents ("1 234,56" -> 123456)."""
    return round_half_up(_parse_number(field, value) * 100)


def parse_bps(field: str, value: Optional[str]) -> int:
    """Percent to basis points ("3,5" -> 350)."""
    return round_half_up(_parse_number(field, value) * 100)


def parse_integer(field: str, value: Optional[str]) -> int:
    return round_half_up(_parse_number(field, value))


def _parse_choice(field: str, value: str, choices) -> str:
    value = (value or "").strip()
    if value not in choices:
        raise InvalidInput(field, f"Valeur attendue parmi {', '.join(choices)}")
    return value


def _require(field: str, value: Optional[str], message: str) -> str:
    if value is None or value.strip() == "":
        raise InvalidInput(field, message)
    return value


def _check_non_negative(field: str, value: int):
    if value < 0:
        raise InvalidInput(field, "Valeur invalide")


def _check_range(field: str, value: int, low: int, high: int):
    if value < low or value > high:
        raise InvalidInput(field, "Valeur hors bornes")


def parse_simulation_form(form: SimulationForm) -> ParsedSimulation:
    """
    Validate a raw form and build the engine inputs.

    Only the field selected by each fee mode is read; the other one is
    discarded. Amortization is dropped under the micro regime.

    Raises:
        InvalidInput: on the first malformed or out-of-range field
    """
    name = form.name.strip()
    if len(name) < 2:
        raise InvalidInput("name", "Nom requis")

    notary_mode = _parse_choice("notary_fee_mode", form.notary_fee_mode, ("percent", "fixed"))
    insurance_mode = _parse_choice("insurance_mode", form.insurance_mode, ("percent", "fixed"))
    regime_name = _parse_choice("regime", form.regime, ("micro", "reel"))
    amortization_flag = _parse_choice(
        "amortization_enabled", form.amortization_enabled or "false", ("true", "false")
    )

    notary_percent_bps = None
    notary_cents = None
    if notary_mode == "percent":
        raw = _require("notary_fee_percent", form.notary_fee_percent, "Frais de notaire requis.")
        notary_percent_bps = parse_bps("notary_fee_percent", raw)
        _check_range("notary_fee_percent", notary_percent_bps, 0, 1500)
    else:
        raw = _require("notary_fee_fixed", form.notary_fee_fixed, "Frais de notaire requis.")
        notary_cents = parse_cents("notary_fee_fixed", raw)
        _check_non_negative("notary_fee_fixed", notary_cents)

    insurance_rate_bps = None
    insurance_cents = None
    if insurance_mode == "percent":
        raw = _require("insurance_rate", form.insurance_rate, "Assurance requise.")
        insurance_rate_bps = parse_bps("insurance_rate", raw)
        _check_range("insurance_rate", insurance_rate_bps, 0, 200)
    else:
        raw = _require("insurance_fixed", form.insurance_fixed, "Assurance requise.")
        insurance_cents = parse_cents("insurance_fixed", raw)
        _check_non_negative("insurance_fixed", insurance_cents)

    amounts = {}
    for field in (
        "price",
        "works",
        "furniture",
        "down_payment",
        "rent_monthly",
        "recoverable_charges_monthly",
        "non_recoverable_charges_monthly",
        "property_tax",
        "pno",
    ):
        amounts[field] = parse_cents(field, getattr(form, field))
        _check_non_negative(field, amounts[field])

    loan_rate_bps = parse_bps("loan_rate", form.loan_rate)
    _check_range("loan_rate", loan_rate_bps, 0, 1500)
    loan_years = parse_integer("loan_years", form.loan_years)
    _check_range("loan_years", loan_years, 5, 30)
    vacancy_rate_bps = parse_bps("vacancy_rate", form.vacancy_rate)
    _check_range("vacancy_rate", vacancy_rate_bps, 0, 5000)
    management_fee_bps = parse_bps("management_fee", form.management_fee)
    _check_range("management_fee", management_fee_bps, 0, 1500)
    tmi_bps = parse_bps("tmi", form.tmi)
    _check_range("tmi", tmi_bps, 0, 4500)

    inputs = SimulationInput(
        price_cents=amounts["price"],
        notary_fee_mode=FeeMode(notary_mode),
        notary_fee_percent_bps=notary_percent_bps,
        notary_fee_cents=notary_cents,
        works_cents=amounts["works"],
        furniture_cents=amounts["furniture"],
        down_payment_cents=amounts["down_payment"],
        loan_rate_bps=loan_rate_bps,
        loan_years=loan_years,
        insurance_mode=FeeMode(insurance_mode),
        insurance_rate_bps=insurance_rate_bps,
        insurance_monthly_cents=insurance_cents,
        rent_monthly_cents=amounts["rent_monthly"],
        vacancy_rate_bps=vacancy_rate_bps,
        recoverable_charges_monthly_cents=amounts["recoverable_charges_monthly"],
        non_recoverable_charges_monthly_cents=amounts["non_recoverable_charges_monthly"],
        property_tax_cents=amounts["property_tax"],
        pno_cents=amounts["pno"],
        management_fee_bps=management_fee_bps,
        tmi_bps=tmi_bps,
        regime=regime_from_name(regime_name, amortization_flag == "true"),
    )

    return ParsedSimulation(name=name, inputs=inputs)
