"""Mini README: Bind action schemas to concrete objects for a given state.

Structure:
    * GroundAction - a schema with bound arguments, evaluated precondition,
      add and delete sets, and the energy delta it causes.
    * ActionGrounder - enumerates applicable ground actions for a state and
      instantiates single actions by name for plan validation.

Enumeration is targeted rather than a cross product over the object
universe: moves follow the acting drone's current location to its graph
neighbours, pickups/drops only pair co-located drones and packages, and
recharges only consider drones that have an energy fact. The result order
is fixed (schema order, then ascending arguments); the search relies on it
to decide which of several valid plans is returned first.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Iterable, Iterator, List, Sequence, Tuple

from ..domain import ActionKind, ActionSchema, Domain, EnergyOperation
from ..domain.schema import ENERGY_VARIABLE
from ..logging_utils import get_logger
from ..state import Literal, State, Term, literal_sort_key

LOGGER = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class GroundAction:
    """Concrete action, immutable once grounded."""

    kind: ActionKind
    args: Tuple[Term, ...]
    preconditions: FrozenSet[Literal]
    add_effects: FrozenSet[Literal]
    delete_effects: FrozenSet[Literal]
    energy_delta: int = 0

    @property
    def name(self) -> str:
        return self.kind.value

    @property
    def drone(self) -> Term:
        return self.args[0]

    def __str__(self) -> str:
        return f"{self.name}({', '.join(str(arg) for arg in self.args)})"

    def apply(self, state: State) -> State:
        """Successor state (delete-before-add); preconditions are not checked."""

        return state.apply(self.delete_effects, self.add_effects)


@dataclass(slots=True)
class _StateIndex:
    """Lookup tables for one state, built in a single pass."""

    positions: Dict[Term, Term] = field(default_factory=dict)
    energy: Dict[Term, int] = field(default_factory=dict)
    packages_at: Dict[Term, List[Term]] = field(default_factory=dict)
    holdings: Dict[Term, List[Term]] = field(default_factory=dict)

    @classmethod
    def of(cls, state: State) -> "_StateIndex":
        index = cls()
        for literal in state.literals:
            if len(literal.args) != 2:
                continue
            first, second = literal.args
            if literal.predicate == "at_drone":
                index.positions[first] = second
            elif literal.predicate == "energy" and isinstance(second, int):
                index.energy[first] = second
            elif literal.predicate == "at_package":
                index.packages_at.setdefault(second, []).append(first)
            elif literal.predicate == "holding":
                index.holdings.setdefault(first, []).append(second)
        return index


def _ordered(values: Iterable[Term]) -> List[Term]:
    return sorted(values, key=lambda value: (isinstance(value, str), value if isinstance(value, int) else 0, str(value)))


class ActionGrounder:
    """Produce ground actions for states of one domain."""

    def __init__(self, domain: Domain) -> None:
        self.domain = domain
        LOGGER.debug("Initialised ActionGrounder for domain '%s'", domain.name)

    def applicable_actions(self, state: State) -> List[GroundAction]:
        """All ground actions whose preconditions hold, in the fixed order."""

        index = _StateIndex.of(state)
        applicable: List[GroundAction] = []
        for schema in self.domain.schemas:
            for args in self._candidate_arguments(schema.kind, index):
                action = self._build(schema, args, index)
                if not self._violations(action, state, index):
                    applicable.append(action)
        return applicable

    def instantiate(self, name: str, args: Sequence[Term], state: State) -> GroundAction:
        """Bind one action by name against ``state``.

        Raises ``KeyError`` for unknown action names and ``ValueError`` for
        arity mismatches. Preconditions are not checked; use ``violations``.
        """

        schema = self.domain.schema(name)
        schema.bindings_for(args)
        return self._build(schema, tuple(args), _StateIndex.of(state))

    def violations(self, action: GroundAction, state: State) -> List[str]:
        """Describe every unmet precondition of ``action`` in ``state``."""

        return self._violations(action, state, _StateIndex.of(state))

    def _candidate_arguments(self, kind: ActionKind, index: _StateIndex) -> Iterator[Tuple[Term, ...]]:
        if kind is ActionKind.MOVE:
            for drone in _ordered(index.positions):
                origin = index.positions[drone]
                for destination in self.domain.neighbors(origin):
                    yield (drone, origin, destination)
        elif kind is ActionKind.PICKUP:
            for drone in _ordered(index.positions):
                location = index.positions[drone]
                for package in _ordered(index.packages_at.get(location, ())):
                    yield (drone, package, location)
        elif kind is ActionKind.DROP:
            for drone in _ordered(index.positions):
                location = index.positions[drone]
                for package in _ordered(index.holdings.get(drone, ())):
                    yield (drone, package, location)
        else:
            for drone in _ordered(index.energy):
                yield (drone,)

    def _build(self, schema: ActionSchema, args: Tuple[Term, ...], index: _StateIndex) -> GroundAction:
        bindings = schema.bindings_for(args)
        add_effects = {pattern.bind(bindings) for pattern in schema.add_effects}
        delete_effects = {pattern.bind(bindings) for pattern in schema.delete_effects}
        energy_delta = 0

        drone = args[0]
        current = index.energy.get(drone)
        if schema.energy_effect is not None and current is not None and drone in self.domain.drones:
            bindings[ENERGY_VARIABLE] = current
            updated = schema.energy_effect.apply(current, self.domain.capacity(drone))
            energy_delta = updated - current
            delete_effects.add(Literal("energy", (drone, current)))
            add_effects.add(Literal("energy", (drone, updated)))

        return GroundAction(
            kind=schema.kind,
            args=args,
            preconditions=frozenset(pattern.bind(bindings) for pattern in schema.preconditions),
            add_effects=frozenset(add_effects),
            delete_effects=frozenset(delete_effects),
            energy_delta=energy_delta,
        )

    def _violations(self, action: GroundAction, state: State, index: _StateIndex) -> List[str]:
        schema = self.domain.schema(action.name)
        problems: List[str] = []

        for parameter, arg in zip(schema.parameters, action.args):
            if self.domain.object_kind(arg) is not parameter.type:
                problems.append(f"{arg} is not a known {parameter.type.value}")
        if problems:
            return problems

        for literal in sorted(action.preconditions, key=literal_sort_key):
            if not literal.is_ground:
                problems.append(f"no fact matches {literal}")
            elif self.domain.is_static(literal.predicate):
                if not self.domain.holds_static(literal):
                    problems.append(f"{literal} does not hold in the domain")
            elif literal not in state:
                problems.append(f"missing {literal}")

        drone = action.drone
        energy = index.energy.get(drone)
        effect = schema.energy_effect
        if effect is not None and energy is not None and not effect.permits(energy):
            problems.append(f"{drone} has energy {energy}, {effect.amount} required")

        if action.kind is ActionKind.PICKUP:
            carried = len(index.holdings.get(drone, ()))
            if carried >= self.domain.payload_capacity:
                problems.append(f"{drone} already carries {carried} package(s)")

        if (
            effect is not None
            and effect.operation is not EnergyOperation.CONSUME
            and self.domain.charging_stations
            and index.positions.get(drone) not in self.domain.charging_stations
        ):
            problems.append(f"{drone} is not at a charging station")
        return problems

