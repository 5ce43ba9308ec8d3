"""
Simulation storage service.

Every write recomputes the micro and real results and stores the
simulation, its inputs and both result rows in one transaction, so a
failed write never leaves a partial simulation behind.
"""

import logging
from contextlib import contextmanager
from typing import Dict, List

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.calculations.engine import compute_both_regimes
from app.calculations.models import SimulationInput, SimulationResult, regime_from_name
from app.db.models import Simulation, SimulationInputRecord, SimulationResultRecord
from app.validation import ParsedSimulation

logger = logging.getLogger(__name__)

DUPLICATE_PREFIX = "Copie - "

INPUT_FIELDS = (
    "price_cents",
    "notary_fee_percent_bps",
    "notary_fee_cents",
    "works_cents",
    "furniture_cents",
    "down_payment_cents",
    "loan_rate_bps",
    "loan_years",
    "insurance_rate_bps",
    "insurance_monthly_cents",
    "rent_monthly_cents",
    "vacancy_rate_bps",
    "recoverable_charges_monthly_cents",
    "non_recoverable_charges_monthly_cents",
    "property_tax_cents",
    "pno_cents",
    "management_fee_bps",
    "tmi_bps",
)


class SimulationNotFound(LookupError):
    """No stored simulation has the requested id."""

    def __init__(self, simulation_id: str):
        super().__init__(f"Simulation not found: {simulation_id}")
        self.simulation_id = simulation_id


class SimulationWriteError(RuntimeError):
    """The database rejected a simulation write; nothing was stored."""


@contextmanager
def _write_transaction(db: Session, action: str):
    try:
        yield
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Failed to {action}: {str(e)}")
        raise SimulationWriteError(f"Failed to {action}") from e
    except Exception:
        db.rollback()
        raise


def input_record_fields(inputs: SimulationInput) -> Dict:
    """Column values of a SimulationInputRecord for these inputs."""
    fields = {field: getattr(inputs, field) for field in INPUT_FIELDS}
    fields.update(
        notary_fee_mode=inputs.notary_fee_mode.value,
        insurance_mode=inputs.insurance_mode.value,
        regime=inputs.regime.name,
        amortization_enabled=inputs.amortization_enabled,
    )
    return fields


def inputs_from_record(record: SimulationInputRecord) -> SimulationInput:
    """Rebuild engine inputs from a stored record."""
    return SimulationInput(
        notary_fee_mode=record.notary_fee_mode,
        insurance_mode=record.insurance_mode,
        regime=regime_from_name(record.regime, record.amortization_enabled),
        **{field: getattr(record, field) for field in INPUT_FIELDS},
    )


def build_result_records(
    simulation_id: str, results: Dict[str, SimulationResult]
) -> List[SimulationResultRecord]:
    """One result row per regime."""
    return [
        SimulationResultRecord(simulation_id=simulation_id, regime=regime, **result.to_dict())
        for regime, result in results.items()
    ]


def _store_new(db: Session, name: str, inputs: SimulationInput) -> Simulation:
    results = compute_both_regimes(inputs)

    simulation = Simulation(name=name)
    with _write_transaction(db, "create simulation"):
        db.add(simulation)
        db.flush()
        db.add(SimulationInputRecord(simulation_id=simulation.id, **input_record_fields(inputs)))
        db.add_all(build_result_records(simulation.id, results))

    db.refresh(simulation)
    logger.info(f"Created simulation {simulation.id} ({name})")
    return simulation


def create_simulation(db: Session, parsed: ParsedSimulation) -> Simulation:
    """Store a new simulation with its micro and real results."""
    return _store_new(db, parsed.name, parsed.inputs)


def get_simulation(db: Session, simulation_id: str) -> Simulation:
    """Load a simulation or raise SimulationNotFound."""
    simulation = db.query(Simulation).filter(Simulation.id == simulation_id).first()
    if not simulation:
        raise SimulationNotFound(simulation_id)
    return simulation


def list_simulations(db: Session, skip: int = 0, limit: int = 100) -> List[Simulation]:
    """Most recently created first."""
    return (
        db.query(Simulation)
        .order_by(Simulation.created_at.desc())
        .offset(skip)
        .limit(limit)
        .all()
    )


def count_simulations(db: Session) -> int:
    return db.query(Simulation).count()


def update_simulation(
    db: Session, simulation_id: str, parsed: ParsedSimulation
) -> Simulation:
    """
    Replace a simulation's inputs and recompute its results.

    Result rows are updated in place per regime, so a simulation never
    holds more than one row per regime.
    """
    simulation = get_simulation(db, simulation_id)
    results = compute_both_regimes(parsed.inputs)
    fields = input_record_fields(parsed.inputs)

    with _write_transaction(db, f"update simulation {simulation_id}"):
        simulation.name = parsed.name

        if simulation.inputs is None:
            db.add(SimulationInputRecord(simulation_id=simulation.id, **fields))
        else:
            for field, value in fields.items():
                setattr(simulation.inputs, field, value)

        existing = {record.regime: record for record in simulation.results}
        for regime, result in results.items():
            record = existing.get(regime)
            if record is None:
                db.add(
                    SimulationResultRecord(
                        simulation_id=simulation.id, regime=regime, **result.to_dict()
                    )
                )
            else:
                for field, value in result.to_dict().items():
                    setattr(record, field, value)

    db.refresh(simulation)
    logger.info(f"Updated simulation {simulation_id}")
    return simulation


def delete_simulation(db: Session, simulation_id: str) -> None:
    """Delete a simulation together with its inputs and results."""
    simulation = get_simulation(db, simulation_id)
    with _write_transaction(db, f"delete simulation {simulation_id}"):
        db.delete(simulation)
    logger.info(f"Deleted simulation {simulation_id}")


def duplicate_simulation(db: Session, simulation_id: str) -> Simulation:
    """Copy a simulation's inputs under a new name and recompute."""
    source = get_simulation(db, simulation_id)
    if source.inputs is None:
        raise SimulationNotFound(simulation_id)

    inputs = inputs_from_record(source.inputs)
    return _store_new(db, f"{DUPLICATE_PREFIX}{source.name}", inputs)
