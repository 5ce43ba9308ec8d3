"""
Seed the database with a demo studio simulation.
"""
import sys
import os

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from app.db.database import get_db_context, init_db
from app.db.models import Simulation
from app.services.simulations import create_simulation
from app.validation import SimulationForm, parse_simulation_form

DEMO_NAME = "Studio Lyon 3e"

DEMO_FORM = SimulationForm(
    name=DEMO_NAME,
    price="150000",
    notary_fee_mode="percent",
    notary_fee_percent="7,5",
    works="12000",
    furniture="4000",
    down_payment="20000",
    loan_rate="3,8",
    loan_years="20",
    insurance_mode="percent",
    insurance_rate="0,30",
    rent_monthly="720",
    vacancy_rate="4",
    recoverable_charges_monthly="40",
    non_recoverable_charges_monthly="25",
    property_tax="900",
    pno="120",
    management_fee="7",
    tmi="30",
    regime="reel",
    amortization_enabled="true",
)


def seed_demo(db):
    """Store the demo simulation unless one with the same name exists."""
    existing = db.query(Simulation).filter(Simulation.name == DEMO_NAME).first()
    if existing:
        print(f"Simulation '{DEMO_NAME}' already exists (ID: {existing.id})")
        return existing

    simulation = create_simulation(db, parse_simulation_form(DEMO_FORM))

    print(f"Created simulation: {simulation.name} (ID: {simulation.id})")
    for result in simulation.results:
        print(
            f"  {result.regime}: cash-flow after tax "
            f"{result.monthly_cashflow_after_tax_cents / 100:.2f}/month, "
            f"{result.verdict_explanation}"
        )
    return simulation


def main():
    init_db()
    with get_db_context() as db:
        seed_demo(db)


if __name__ == "__main__":
    main()
