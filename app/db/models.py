"""
SQLAlchemy ORM models for stored simulations.
"""

from datetime import datetime
from sqlalchemy import (
    Column,
    String,
    Integer,
    Boolean,
    DateTime,
    ForeignKey,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import declarative_base, relationship
import uuid

Base = declarative_base()


def generate_uuid():
    return str(uuid.uuid4())


class AuditMixin:
    """Mixin for audit fields on all models."""

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False
    )


class Simulation(AuditMixin, Base):
    """A named rental investment simulation."""

    __tablename__ = "simulations"

    id = Column(String, primary_key=True, default=generate_uuid)
    name = Column(String(255), nullable=False)

    # Relationships
    inputs = relationship(
        "SimulationInputRecord",
        back_populates="simulation",
        cascade="all, delete-orphan",
        uselist=False,
    )
    results = relationship(
        "SimulationResultRecord",
        back_populates="simulation",
        cascade="all, delete-orphan",
        order_by="SimulationResultRecord.regime",
    )


class SimulationInputRecord(AuditMixin, Base):
    """Parameters a simulation was computed from (money in cents, rates in bps)."""

    __tablename__ = "simulation_inputs"

    simulation_id = Column(String, ForeignKey("simulations.id"), primary_key=True)

    # Acquisition
    price_cents = Column(Integer, nullable=False)
    notary_fee_mode = Column(String(10), nullable=False, default="percent")
    notary_fee_percent_bps = Column(Integer, nullable=True)
    notary_fee_cents = Column(Integer, nullable=True)
    works_cents = Column(Integer, nullable=False, default=0)
    furniture_cents = Column(Integer, nullable=False, default=0)
    down_payment_cents = Column(Integer, nullable=False, default=0)

    # Financing
    loan_rate_bps = Column(Integer, nullable=False)
    loan_years = Column(Integer, nullable=False)
    insurance_mode = Column(String(10), nullable=False, default="percent")
    insurance_rate_bps = Column(Integer, nullable=True)
    insurance_monthly_cents = Column(Integer, nullable=True)

    # Operations
    rent_monthly_cents = Column(Integer, nullable=False)
    vacancy_rate_bps = Column(Integer, nullable=False, default=0)
    recoverable_charges_monthly_cents = Column(Integer, nullable=False, default=0)
    non_recoverable_charges_monthly_cents = Column(Integer, nullable=False, default=0)
    property_tax_cents = Column(Integer, nullable=False, default=0)
    pno_cents = Column(Integer, nullable=False, default=0)
    management_fee_bps = Column(Integer, nullable=False, default=0)

    # Tax
    tmi_bps = Column(Integer, nullable=False)
    regime = Column(String(10), nullable=False, default="micro")
    amortization_enabled = Column(Boolean, nullable=False, default=False)

    # Relationships
    simulation = relationship("Simulation", back_populates="inputs")


class SimulationResultRecord(AuditMixin, Base):
    """Computed year-1 figures for one simulation under one tax regime."""

    __tablename__ = "simulation_results"
    __table_args__ = (UniqueConstraint("simulation_id", "regime"),)

    id = Column(String, primary_key=True, default=generate_uuid)
    simulation_id = Column(
        String, ForeignKey("simulations.id"), nullable=False, index=True
    )
    regime = Column(String(10), nullable=False)

    # Financing
    total_project_cost_cents = Column(Integer, nullable=False)
    notary_fees_cents = Column(Integer, nullable=False)
    loan_amount_cents = Column(Integer, nullable=False)
    monthly_payment_cents = Column(Integer, nullable=False)
    monthly_insurance_cents = Column(Integer, nullable=False)
    monthly_payment_total_cents = Column(Integer, nullable=False)

    # Revenue and charges
    annual_rent_gross_cents = Column(Integer, nullable=False)
    annual_vacancy_cents = Column(Integer, nullable=False)
    annual_rent_net_cents = Column(Integer, nullable=False)
    annual_charges_cents = Column(Integer, nullable=False)

    # Cash flows
    annual_cashflow_before_tax_cents = Column(Integer, nullable=False)
    monthly_cashflow_before_tax_cents = Column(Integer, nullable=False)
    monthly_savings_effort_cents = Column(Integer, nullable=False)

    # Tax
    tax_base_cents = Column(Integer, nullable=False)
    tax_estimated_cents = Column(Integer, nullable=False)
    interest_year1_cents = Column(Integer, nullable=False)
    amortization_annual_cents = Column(Integer, nullable=False)
    annual_cashflow_after_tax_cents = Column(Integer, nullable=False)
    monthly_cashflow_after_tax_cents = Column(Integer, nullable=False)

    # Returns
    gross_yield_bps = Column(Integer, nullable=False)
    net_yield_bps = Column(Integer, nullable=False)
    verdict = Column(String(20), nullable=False)
    verdict_explanation = Column(Text, nullable=False)

    # Relationships
    simulation = relationship("Simulation", back_populates="results")
