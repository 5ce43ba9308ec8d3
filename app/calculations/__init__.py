"""
Rental Investment Calculation Engine

Core calculation modules for year-1 rental property analysis.
Money is in integer cents, rates in basis points, and every stage
rounds half-up to the cent.
"""

from app.calculations import financing, amortization, cashflow, tax, yields, engine

__all__ = ["financing", "amortization", "cashflow", "tax", "yields", "engine"]
