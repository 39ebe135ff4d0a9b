"""Mini README: Core package initializer for the droneplanner engine.

The planner answers delivery queries for drones on a fixed location graph:
given initial facts and goal facts it searches, depth-bounded, for an
ordered list of primitive actions (move, pickup, drop, recharge,
recharge_full). Sub-packages split the work by concern: ``state``,
``domain``, ``grounding``, ``search``, ``validation``, ``planning``,
``execution`` and ``interface``. The file stays lightweight; import
``droneplanner.planning.DeliveryPlanner`` for the high-level facade.
"""

from .logging_utils import get_logger

__version__ = "0.1.0"

__all__ = ["get_logger", "__version__"]
