"""Mini README: Planning facade, query parsing, routes and presets.

``DeliveryPlanner`` is the entry point for front ends; ``build_query`` and
``find_all_paths`` are usable on their own with any ``Domain``.
"""

from .planner import DeliveryPlanner, plan_by_drone
from .query import PlanningQuery, build_query
from .routes import find_all_paths
from .scenarios import SCENARIOS, Scenario, get_scenario, list_scenarios

__all__ = [
    "DeliveryPlanner",
    "PlanningQuery",
    "SCENARIOS",
    "Scenario",
    "build_query",
    "find_all_paths",
    "get_scenario",
    "list_scenarios",
    "plan_by_drone",
]
