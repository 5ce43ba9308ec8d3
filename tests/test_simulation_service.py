"""
Tests for simulation storage.
"""

import pytest

from app.db.models import Simulation, SimulationInputRecord, SimulationResultRecord
from app.services import simulations as service
from app.services.simulations import SimulationNotFound, SimulationWriteError
from app.validation import SimulationForm, parse_simulation_form


@pytest.fixture
def parsed(form_data):
    return parse_simulation_form(SimulationForm(**form_data))


@pytest.fixture
def stored(db_session, parsed):
    return service.create_simulation(db_session, parsed)


class TestCreateSimulation:
    """Test simulation creation."""

    def test_stores_one_result_per_regime(self, db_session, stored):
        regimes = sorted(r.regime for r in stored.results)
        assert regimes == ["micro", "reel"]
        assert db_session.query(SimulationResultRecord).count() == 2

    def test_stores_inputs(self, stored, parsed):
        record = stored.inputs
        assert record.simulation_id == stored.id
        assert "name" not in SimulationInputRecord.__table__.columns
        assert record.price_cents == parsed.inputs.price_cents
        assert record.regime == "reel"
        assert record.amortization_enabled is True
        assert record.notary_fee_mode == "percent"

    def test_micro_row_has_no_depreciation(self, stored):
        rows = {r.regime: r for r in stored.results}
        assert rows["micro"].amortization_annual_cents == 0
        assert rows["reel"].amortization_annual_cents > 0
        assert rows["reel"].verdict in ("positive", "break_even", "negative")

    def test_failed_result_write_leaves_nothing(self, db_session, parsed, monkeypatch):
        def clashing_rows(simulation_id, results):
            # Two rows for the same regime break the unique constraint
            return [
                SimulationResultRecord(
                    simulation_id=simulation_id, regime="micro", **results["micro"].to_dict()
                ),
                SimulationResultRecord(
                    simulation_id=simulation_id, regime="micro", **results["reel"].to_dict()
                ),
            ]

        monkeypatch.setattr(service, "build_result_records", clashing_rows)

        with pytest.raises(SimulationWriteError):
            service.create_simulation(db_session, parsed)

        assert db_session.query(Simulation).count() == 0
        assert db_session.query(SimulationInputRecord).count() == 0
        assert db_session.query(SimulationResultRecord).count() == 0


class TestReadSimulation:
    """Test lookups."""

    def test_get(self, db_session, stored):
        assert service.get_simulation(db_session, stored.id).name == "Studio Lyon"

    def test_get_missing(self, db_session):
        with pytest.raises(SimulationNotFound):
            service.get_simulation(db_session, "nonexistent-id")

    def test_list(self, db_session, stored):
        simulations = service.list_simulations(db_session)
        assert [s.id for s in simulations] == [stored.id]
        assert service.count_simulations(db_session) == 1


class TestUpdateSimulation:
    """Test updates."""

    def test_update_replaces_results(self, db_session, stored, form_data):
        before = {r.regime: r.annual_rent_gross_cents for r in stored.results}

        updated = parse_simulation_form(
            SimulationForm(**{**form_data, "name": "Studio Lyon bis", "rent_monthly": "800"})
        )
        simulation = service.update_simulation(db_session, stored.id, updated)

        rows = {r.regime: r for r in simulation.results}
        assert simulation.name == "Studio Lyon bis"
        assert service.get_simulation(db_session, stored.id).name == "Studio Lyon bis"
        assert simulation.inputs.rent_monthly_cents == 80_000
        assert rows["micro"].annual_rent_gross_cents == 960_000
        assert rows["micro"].annual_rent_gross_cents != before["micro"]
        assert db_session.query(SimulationResultRecord).count() == 2

    def test_update_regime_switch(self, db_session, stored, form_data):
        updated = parse_simulation_form(SimulationForm(**{**form_data, "regime": "micro"}))
        simulation = service.update_simulation(db_session, stored.id, updated)

        assert simulation.inputs.regime == "micro"
        assert simulation.inputs.amortization_enabled is False
        rows = {r.regime: r for r in simulation.results}
        assert rows["reel"].amortization_annual_cents == 0

    def test_update_missing(self, db_session, parsed):
        with pytest.raises(SimulationNotFound):
            service.update_simulation(db_session, "nonexistent-id", parsed)


class TestDeleteAndDuplicate:
    """Test deletion and duplication."""

    def test_delete_cascades(self, db_session, stored):
        service.delete_simulation(db_session, stored.id)

        assert db_session.query(Simulation).count() == 0
        assert db_session.query(SimulationInputRecord).count() == 0
        assert db_session.query(SimulationResultRecord).count() == 0

    def test_delete_missing(self, db_session):
        with pytest.raises(SimulationNotFound):
            service.delete_simulation(db_session, "nonexistent-id")

    def test_duplicate(self, db_session, stored, parsed):
        copy = service.duplicate_simulation(db_session, stored.id)

        assert copy.id != stored.id
        assert copy.name == "Copie - Studio Lyon"
        assert service.inputs_from_record(copy.inputs) == parsed.inputs
        assert len(copy.results) == 2
        assert db_session.query(Simulation).count() == 2

    def test_duplicate_missing(self, db_session):
        with pytest.raises(SimulationNotFound):
            service.duplicate_simulation(db_session, "nonexistent-id")
