"""
Tests for simulation form parsing.
"""

import pytest

from app.calculations.models import FeeMode, MicroRegime, RealRegime
from app.validation import (
    SimulationForm,
    InvalidInput,
    parse_simulation_form,
    parse_cents,
    parse_bps,
)


def parse(form_data, **overrides):
    return parse_simulation_form(SimulationForm(**{**form_data, **overrides}))


class TestNumberParsing:
    """Test amount and rate conversion."""

    def test_cents_with_spaces_and_comma(self):
        assert parse_cents("price", "150 000,50") == 15_000_050

    def test_bps_with_comma(self):
        assert parse_bps("loan_rate", "3,8") == 380
        assert parse_bps("insurance_rate", "0,3") == 30

    def test_rejects_garbage(self):
        with pytest.raises(InvalidInput) as exc:
            parse_cents("price", "12abc")
        assert exc.value.field == "price"

    def test_rejects_empty(self):
        with pytest.raises(InvalidInput):
            parse_cents("works", "")

    def test_rejects_overflowing_number(self):
        with pytest.raises(InvalidInput) as exc:
            parse_bps("loan_rate", "9" * 400)
        assert exc.value.field == "loan_rate"


class TestSimulationForm:
    """Test full form validation."""

    def test_valid_form(self, form_data):
        parsed = parse(form_data)
        inputs = parsed.inputs

        assert parsed.name == "Studio Lyon"
        assert inputs.price_cents == 15_000_000
        assert inputs.notary_fee_mode == FeeMode.percent
        assert inputs.notary_fee_percent_bps == 750
        assert inputs.notary_fee_cents is None
        assert inputs.loan_rate_bps == 380
        assert inputs.loan_years == 20
        assert inputs.insurance_rate_bps == 30
        assert inputs.vacancy_rate_bps == 500
        assert inputs.tmi_bps == 3000
        assert inputs.regime == RealRegime(amortization_enabled=True)

    def test_micro_drops_amortization(self, form_data):
        parsed = parse(form_data, regime="micro", amortization_enabled="true")
        assert parsed.inputs.regime == MicroRegime()
        assert parsed.inputs.amortization_enabled is False

    def test_fixed_mode_discards_percent(self, form_data):
        parsed = parse(form_data, notary_fee_mode="fixed", notary_fee_fixed="8000")
        assert parsed.inputs.notary_fee_cents == 800_000
        assert parsed.inputs.notary_fee_percent_bps is None

    def test_fixed_insurance(self, form_data):
        parsed = parse(form_data, insurance_mode="fixed", insurance_fixed="25")
        assert parsed.inputs.insurance_monthly_cents == 2_500
        assert parsed.inputs.insurance_rate_bps is None

    @pytest.mark.parametrize(
        "field,value",
        [
            ("loan_rate", "15,5"),
            ("loan_years", "4"),
            ("loan_years", "31"),
            ("vacancy_rate", "51"),
            ("management_fee", "16"),
            ("tmi", "46"),
            ("notary_fee_percent", "16"),
            ("insurance_rate", "2,5"),
            ("price", "-5"),
            ("rent_monthly", "abc"),
            ("price", "9" * 400),
            ("works", "9" * 400),
        ],
    )
    def test_out_of_range(self, form_data, field, value):
        with pytest.raises(InvalidInput) as exc:
            parse(form_data, **{field: value})
        assert exc.value.field == field

    def test_missing_mode_field(self, form_data):
        with pytest.raises(InvalidInput) as exc:
            parse(form_data, notary_fee_percent=None)
        assert exc.value.field == "notary_fee_percent"

    def test_missing_fixed_insurance(self, form_data):
        with pytest.raises(InvalidInput) as exc:
            parse(form_data, insurance_mode="fixed", insurance_fixed=" ")
        assert exc.value.field == "insurance_fixed"

    def test_name_required(self, form_data):
        with pytest.raises(InvalidInput) as exc:
            parse(form_data, name=" a ")
        assert exc.value.field == "name"

    def test_unknown_regime(self, form_data):
        with pytest.raises(InvalidInput) as exc:
            parse(form_data, regime="lmnp")
        assert exc.value.field == "regime"
