"""Mini README: Depth-bounded plan search.

Usage:
    engine = SearchEngine(domain)
    result = engine.search(initial_state, goal_literals, max_depth=15)
    if result.solved:
        print(result.plan.as_strings())

Failure to find a plan is an outcome (``SearchOutcome``), never an
exception; ``PlanResult.plan`` is ``None`` unless the outcome is ``FOUND``.
"""

from .bounds import GoalDistanceBound
from .cancellation import CancellationToken
from .engine import Plan, PlanResult, SearchEngine, SearchNode, SearchOutcome, SearchStats, SearchStrategy

__all__ = [
    "CancellationToken",
    "GoalDistanceBound",
    "Plan",
    "PlanResult",
    "SearchEngine",
    "SearchNode",
    "SearchOutcome",
    "SearchStats",
    "SearchStrategy",
]
