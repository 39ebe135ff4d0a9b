"""Mini README: Plan replay used by the CLI, the HTTP API and the tests."""

from .validator import PlanValidator, SimulationTrace

__all__ = ["PlanValidator", "SimulationTrace"]
