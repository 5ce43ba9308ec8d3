"""
Simulation management API endpoints.
"""

from fastapi import APIRouter, HTTPException, Depends
from pydantic import BaseModel
from typing import Dict, List, Optional
from sqlalchemy.orm import Session

from app.db.database import get_db
from app.db.models import Simulation
from app.services import simulations as service
from app.services.simulations import SimulationNotFound, SimulationWriteError
from app.validation import SimulationForm, InvalidInput, parse_simulation_form

router = APIRouter()

INPUT_RESPONSE_FIELDS = service.INPUT_FIELDS + (
    "notary_fee_mode",
    "insurance_mode",
    "regime",
    "amortization_enabled",
)


class SimulationResponse(BaseModel):
    """Schema for simulation response."""

    id: str
    name: str
    inputs: Optional[dict] = None
    results: Dict[str, dict] = {}
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class SimulationSummary(BaseModel):
    """List entry: the simulation and its headline figure per regime."""

    id: str
    name: str
    regime: Optional[str] = None
    monthly_cashflow_after_tax_cents: Dict[str, int] = {}
    created_at: Optional[str] = None


class SimulationListResponse(BaseModel):
    """Response for listing simulations."""

    simulations: List[SimulationSummary]
    total: int


def simulation_to_response(simulation: Simulation) -> SimulationResponse:
    """Convert Simulation model to response schema."""
    inputs = None
    if simulation.inputs is not None:
        inputs = {
            field: getattr(simulation.inputs, field) for field in INPUT_RESPONSE_FIELDS
        }

    results = {}
    for record in simulation.results:
        results[record.regime] = {
            column.name: getattr(record, column.name)
            for column in record.__table__.columns
            if column.name not in ("id", "simulation_id", "regime", "created_at", "updated_at")
        }

    return SimulationResponse(
        id=simulation.id,
        name=simulation.name,
        inputs=inputs,
        results=results,
        created_at=simulation.created_at.isoformat() if simulation.created_at else None,
        updated_at=simulation.updated_at.isoformat() if simulation.updated_at else None,
    )


def _parse_or_422(form: SimulationForm):
    try:
        return parse_simulation_form(form)
    except InvalidInput as e:
        raise HTTPException(
            status_code=422, detail={"field": e.field, "detail": e.message}
        )


@router.get("/", response_model=SimulationListResponse)
async def list_simulations(
    skip: int = 0,
    limit: int = 100,
    db: Session = Depends(get_db),
):
    """List stored simulations, newest first."""
    simulations = service.list_simulations(db, skip=skip, limit=limit)

    return SimulationListResponse(
        simulations=[
            SimulationSummary(
                id=s.id,
                name=s.name,
                regime=s.inputs.regime if s.inputs else None,
                monthly_cashflow_after_tax_cents={
                    r.regime: r.monthly_cashflow_after_tax_cents for r in s.results
                },
                created_at=s.created_at.isoformat() if s.created_at else None,
            )
            for s in simulations
        ],
        total=service.count_simulations(db),
    )


@router.post("/", response_model=SimulationResponse, status_code=201)
async def create_simulation(
    form: SimulationForm,
    db: Session = Depends(get_db),
):
    """Create a simulation and store both regime results."""
    parsed = _parse_or_422(form)

    try:
        simulation = service.create_simulation(db, parsed)
    except SimulationWriteError as e:
        raise HTTPException(status_code=500, detail=str(e))

    return simulation_to_response(simulation)


@router.get("/{simulation_id}", response_model=SimulationResponse)
async def get_simulation(
    simulation_id: str,
    db: Session = Depends(get_db),
):
    """Get a simulation by ID with inputs and results."""
    try:
        simulation = service.get_simulation(db, simulation_id)
    except SimulationNotFound:
        raise HTTPException(status_code=404, detail="Simulation not found")

    return simulation_to_response(simulation)


@router.put("/{simulation_id}", response_model=SimulationResponse)
async def update_simulation(
    simulation_id: str,
    form: SimulationForm,
    db: Session = Depends(get_db),
):
    """Replace a simulation's inputs and recompute its results."""
    parsed = _parse_or_422(form)

    try:
        simulation = service.update_simulation(db, simulation_id, parsed)
    except SimulationNotFound:
        raise HTTPException(status_code=404, detail="Simulation not found")
    except SimulationWriteError as e:
        raise HTTPException(status_code=500, detail=str(e))

    return simulation_to_response(simulation)


@router.delete("/{simulation_id}")
async def delete_simulation(
    simulation_id: str,
    db: Session = Depends(get_db),
):
    """Delete a simulation."""
    try:
        service.delete_simulation(db, simulation_id)
    except SimulationNotFound:
        raise HTTPException(status_code=404, detail="Simulation not found")
    except SimulationWriteError as e:
        raise HTTPException(status_code=500, detail=str(e))

    return {"deleted": True, "id": simulation_id}


@router.post("/{simulation_id}/duplicate", response_model=SimulationResponse, status_code=201)
async def duplicate_simulation(
    simulation_id: str,
    db: Session = Depends(get_db),
):
    """Copy a simulation under a new name."""
    try:
        simulation = service.duplicate_simulation(db, simulation_id)
    except SimulationNotFound:
        raise HTTPException(status_code=404, detail="Simulation not found")
    except SimulationWriteError as e:
        raise HTTPException(status_code=500, detail=str(e))

    return simulation_to_response(simulation)
