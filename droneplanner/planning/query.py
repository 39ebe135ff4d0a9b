"""Mini README: Turn front-end input into a checked planning query.

Structure:
    * PlanningQuery - parsed initial state, goal literals and depth bound.
    * build_query - parse and check the input against a domain.

Every problem found here raises ``MalformedQueryError`` so the search never
starts on input it cannot interpret: unparsable facts, unknown predicates,
wrong arity, variables, undefined objects, energy outside ``0..capacity``
or an initial state that gives a drone two positions or a package two
places. Static goal facts such as ``connected(a,b)`` are answered by the map
here: facts that hold are dropped from the goal and facts that do not hold
are rejected, so the search only ever sees fluent goals.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Tuple, Union

from ..domain import Domain, ObjectType
from ..domain.schema import FLUENT_ARITY
from ..errors import MalformedQueryError
from ..logging_utils import get_logger
from ..state import Literal, State, parse_literals

LOGGER = get_logger(__name__)

FactsInput = Union[str, Iterable[Union[str, Literal]]]

_ARGUMENT_TYPES = {
    "at_drone": (ObjectType.DRONE, ObjectType.LOCATION),
    "at_package": (ObjectType.PACKAGE, ObjectType.LOCATION),
    "holding": (ObjectType.DRONE, ObjectType.PACKAGE),
    "connected": (ObjectType.LOCATION, ObjectType.LOCATION),
}


@dataclass(frozen=True, slots=True)
class PlanningQuery:
    initial: State
    goal: Tuple[Literal, ...]
    max_depth: int


def _check_literal(domain: Domain, literal: Literal, role: str) -> None:
    predicate = literal.predicate
    if not literal.is_ground:
        raise MalformedQueryError(f"{role} facts must not contain variables", {"literal": str(literal)})
    if predicate in FLUENT_ARITY:
        expected = FLUENT_ARITY[predicate]
    elif domain.is_static(predicate) and role == "Goal":
        expected = 2
    else:
        raise MalformedQueryError(f"Unknown predicate in {role.lower()} facts", {"literal": str(literal)})
    if len(literal.args) != expected:
        raise MalformedQueryError(
            f"Wrong number of arguments in {role.lower()} facts",
            {"literal": str(literal), "expected": expected},
        )

    if predicate == "energy":
        drone, level = literal.args
        if domain.object_kind(drone) is not ObjectType.DRONE:
            raise MalformedQueryError("Unknown drone", {"literal": str(literal)})
        if not isinstance(level, int):
            raise MalformedQueryError("Energy must be an integer", {"literal": str(literal)})
        capacity = domain.capacity(drone)
        if not 0 <= level <= capacity:
            raise MalformedQueryError(
                "Energy outside the drone's capacity",
                {"literal": str(literal), "capacity": capacity},
            )
        return

    for arg, expected_type in zip(literal.args, _ARGUMENT_TYPES[predicate]):
        if domain.object_kind(arg) is not expected_type:
            raise MalformedQueryError(
                f"Unknown {expected_type.value} '{arg}'",
                {"literal": str(literal)},
            )


def _resolve_static_goals(domain: Domain, literals: List[Literal]) -> List[Literal]:
    remaining: List[Literal] = []
    for literal in literals:
        if not domain.is_static(literal.predicate):
            remaining.append(literal)
        elif domain.holds_static(literal):
            LOGGER.debug("Goal fact %s holds in the map; dropped from the search goal", literal)
        else:
            raise MalformedQueryError("Goal fact does not hold in the map", {"literal": str(literal)})
    return remaining


def build_query(domain: Domain, initial: FactsInput, goal: FactsInput, max_depth: int) -> PlanningQuery:
    """Parse and check a query; raises ``MalformedQueryError``."""

    if isinstance(max_depth, bool) or not isinstance(max_depth, int) or max_depth < 0:
        raise MalformedQueryError("Depth bound must be a non-negative integer", {"max_depth": max_depth})

    initial_literals: List[Literal] = parse_literals(initial)
    goal_literals: List[Literal] = parse_literals(goal)
    for literal in initial_literals:
        _check_literal(domain, literal, "Initial")
    for literal in goal_literals:
        _check_literal(domain, literal, "Goal")
    if not goal_literals:
        LOGGER.warning("Query has an empty goal; it is trivially satisfied")
    goal_literals = _resolve_static_goals(domain, goal_literals)

    state = State.of(initial_literals)
    violations = state.invariant_violations()
    if violations:
        raise MalformedQueryError("Initial state is inconsistent", {"violations": "; ".join(violations)})

    ordered_goal = tuple(dict.fromkeys(goal_literals))
    return PlanningQuery(initial=state, goal=ordered_goal, max_depth=max_depth)
