"""Mini README: Action grounding for the planning engine.

Turns the domain's action schemas into concrete, applicable actions for a
particular state. See ``grounder`` for the enumeration order contract.
"""

from .grounder import ActionGrounder, GroundAction

__all__ = ["ActionGrounder", "GroundAction"]
