"""
Application services module.
"""

from app.services.simulations import SimulationNotFound, SimulationWriteError

__all__ = ["SimulationNotFound", "SimulationWriteError"]
