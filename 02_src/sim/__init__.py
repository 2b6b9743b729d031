"""SIM scenario."""

from .sim import ISim, Sim, SimRoute

__all__ = ["ISim", "Sim", "SimRoute"]
