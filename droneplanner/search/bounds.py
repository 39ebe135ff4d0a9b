"""Mini README: Admissible step bounds used to cut hopeless branches.

``GoalDistanceBound.estimate`` never overestimates the number of actions
still needed to reach a goal, so the search may drop any node whose
estimate exceeds its remaining depth budget without losing a plan that fits
the budget. The bound is only used for pruning, never for ordering, so the
first plan found is the same one an unpruned search would return.

Counted per unsatisfied goal literal:
    * at_package(P, L) - one pickup (unless held) and one drop, plus the
      graph distance P still has to travel.
    * holding(D, P) - one pickup, plus a drop if another drone holds P.
    * at_drone(D, L) - the graph distance from D's position to L.
Carrying moves of different packages are disjoint when drones carry one
package at a time, so their distances add up; otherwise the largest one is
used. An infinite estimate marks a goal that can never be reached.
"""

from __future__ import annotations

import math
from collections import deque
from typing import Dict, Iterable, Optional

from ..domain import Domain
from ..logging_utils import get_logger
from ..state import Literal, State, Term

LOGGER = get_logger(__name__)


class GoalDistanceBound:
    """Lower bound on plan length using shortest paths in the domain graph."""

    def __init__(self, domain: Domain) -> None:
        self.domain = domain
        self._distances: Dict[str, Dict[str, int]] = {
            location: self._breadth_first(location) for location in domain.connections
        }
        LOGGER.debug("Computed shortest path table for %s locations", len(self._distances))

    def _breadth_first(self, origin: str) -> Dict[str, int]:
        distances = {origin: 0}
        queue = deque([origin])
        while queue:
            current = queue.popleft()
            for neighbour in self.domain.neighbors(current):
                if neighbour not in distances:
                    distances[neighbour] = distances[current] + 1
                    queue.append(neighbour)
        return distances

    def distance(self, origin: Optional[Term], destination: Term) -> float:
        if origin is None:
            return math.inf
        if origin == destination:
            return 0
        return self._distances.get(origin, {}).get(destination, math.inf)

    def estimate(self, state: State, goal: Iterable[Literal]) -> float:
        handling = 0
        carrying = []
        drone_moves: float = 0
        for literal in goal:
            if literal in state:
                continue
            predicate, args = literal.predicate, literal.args
            if predicate == "at_package" and len(args) == 2:
                package, target = args
                resting = state.value_of("at_package", package)
                carrier = self._carrier(state, package)
                if resting is not None:
                    handling += 2
                    carrying.append(self.distance(resting, target))
                elif carrier is not None:
                    handling += 1
                    carrying.append(self.distance(state.value_of("at_drone", carrier), target))
                else:
                    return math.inf
            elif predicate == "holding" and len(args) == 2:
                carrier = self._carrier(state, args[1])
                handling += 1 if carrier is None else 2
            elif predicate == "at_drone" and len(args) == 2:
                drone_moves = max(drone_moves, self.distance(state.value_of("at_drone", args[0]), args[1]))
            elif predicate == "energy":
                continue
            elif not (self.domain.is_static(predicate) and self.domain.holds_static(literal)):
                return math.inf

        if self.domain.payload_capacity == 1:
            carry_moves = sum(carrying)
        else:
            carry_moves = max(carrying, default=0)
        return handling + max(carry_moves, drone_moves)

    @staticmethod
    def _carrier(state: State, package: Term) -> Optional[Term]:
        for literal in state.facts("holding"):
            if literal.args[1] == package:
                return literal.args[0]
        return None
