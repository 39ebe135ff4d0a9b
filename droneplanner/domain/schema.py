"""Mini README: Action templates for the delivery-drone planning domain.

Structure:
    * ActionKind - closed set of primitive actions, in grounding order.
    * Parameter / ObjectType - typed schema parameters.
    * EnergyEffect - numeric effect on a drone's energy level.
    * ActionSchema - preconditions, add/delete lists and energy effect.
    * build_action_catalog - the five schemas for a given cost model.

Patterns use ``?name`` variables. ``connected`` is a static predicate
answered by the domain graph rather than by the state. The energy literal
of the acting drone is bound to ``?energy`` at grounding time, and the
energy update (delete old value, add new value) is derived from the
schema's ``EnergyEffect`` rather than listed in the effect patterns.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterable, Optional, Sequence, Tuple

from ..state import Literal, Term

ENERGY_VARIABLE = "?energy"

STATIC_PREDICATES = frozenset({"connected"})

FLUENT_ARITY: Dict[str, int] = {
    "at_drone": 2,
    "at_package": 2,
    "holding": 2,
    "energy": 2,
}


class ActionKind(str, Enum):
    """Primitive actions; declaration order is the grounding order."""

    MOVE = "move"
    PICKUP = "pickup"
    DROP = "drop"
    RECHARGE = "recharge"
    RECHARGE_FULL = "recharge_full"


class ObjectType(str, Enum):
    DRONE = "drone"
    PACKAGE = "package"
    LOCATION = "location"


class EnergyOperation(str, Enum):
    CONSUME = "consume"
    RESTORE = "restore"
    FILL = "fill"


@dataclass(frozen=True, slots=True)
class Parameter:
    name: str
    type: ObjectType


@dataclass(frozen=True, slots=True)
class EnergyEffect:
    """Numeric effect over a drone's current energy and its capacity."""

    operation: EnergyOperation
    amount: int = 0

    def permits(self, energy: int) -> bool:
        """Consuming actions need at least ``amount`` energy available."""

        if self.operation is EnergyOperation.CONSUME:
            return energy >= self.amount
        return True

    def apply(self, energy: int, capacity: int) -> int:
        if self.operation is EnergyOperation.CONSUME:
            return energy - self.amount
        if self.operation is EnergyOperation.RESTORE:
            return min(capacity, energy + self.amount)
        return capacity


@dataclass(frozen=True, slots=True)
class ActionSchema:
    """Parameterised action template."""

    kind: ActionKind
    parameters: Tuple[Parameter, ...]
    preconditions: Tuple[Literal, ...]
    add_effects: Tuple[Literal, ...] = ()
    delete_effects: Tuple[Literal, ...] = ()
    energy_effect: Optional[EnergyEffect] = None

    @property
    def name(self) -> str:
        return self.kind.value

    @property
    def arity(self) -> int:
        return len(self.parameters)

    def bindings_for(self, args: Sequence[Term]) -> Dict[str, Term]:
        """Map parameter variables to concrete arguments (arity must match)."""

        if len(args) != len(self.parameters):
            raise ValueError(
                f"{self.name} expects {len(self.parameters)} arguments, got {len(args)}"
            )
        return {parameter.name: arg for parameter, arg in zip(self.parameters, args)}


def _lit(predicate: str, *args: Term) -> Literal:
    return Literal(predicate, tuple(args))


def build_action_catalog(
    move_cost: int,
    recharge_increment: int,
    enabled: Optional[Iterable[str]] = None,
) -> Tuple[ActionSchema, ...]:
    """Build the action schemas, in grounding order, for the cost model."""

    drone = Parameter("?drone", ObjectType.DRONE)
    package = Parameter("?package", ObjectType.PACKAGE)
    location = Parameter("?location", ObjectType.LOCATION)
    origin = Parameter("?from", ObjectType.LOCATION)
    destination = Parameter("?to", ObjectType.LOCATION)

    catalog = {
        ActionKind.MOVE: ActionSchema(
            kind=ActionKind.MOVE,
            parameters=(drone, origin, destination),
            preconditions=(
                _lit("at_drone", "?drone", "?from"),
                _lit("connected", "?from", "?to"),
                _lit("energy", "?drone", ENERGY_VARIABLE),
            ),
            add_effects=(_lit("at_drone", "?drone", "?to"),),
            delete_effects=(_lit("at_drone", "?drone", "?from"),),
            energy_effect=EnergyEffect(EnergyOperation.CONSUME, move_cost),
        ),
        ActionKind.PICKUP: ActionSchema(
            kind=ActionKind.PICKUP,
            parameters=(drone, package, location),
            preconditions=(
                _lit("at_drone", "?drone", "?location"),
                _lit("at_package", "?package", "?location"),
            ),
            add_effects=(_lit("holding", "?drone", "?package"),),
            delete_effects=(_lit("at_package", "?package", "?location"),),
        ),
        ActionKind.DROP: ActionSchema(
            kind=ActionKind.DROP,
            parameters=(drone, package, location),
            preconditions=(
                _lit("at_drone", "?drone", "?location"),
                _lit("holding", "?drone", "?package"),
            ),
            add_effects=(_lit("at_package", "?package", "?location"),),
            delete_effects=(_lit("holding", "?drone", "?package"),),
        ),
        ActionKind.RECHARGE: ActionSchema(
            kind=ActionKind.RECHARGE,
            parameters=(drone,),
            preconditions=(_lit("energy", "?drone", ENERGY_VARIABLE),),
            energy_effect=EnergyEffect(EnergyOperation.RESTORE, recharge_increment),
        ),
        ActionKind.RECHARGE_FULL: ActionSchema(
            kind=ActionKind.RECHARGE_FULL,
            parameters=(drone,),
            preconditions=(_lit("energy", "?drone", ENERGY_VARIABLE),),
            energy_effect=EnergyEffect(EnergyOperation.FILL),
        ),
    }

    wanted = set(ActionKind) if enabled is None else {ActionKind(name) for name in enabled}
    return tuple(catalog[kind] for kind in ActionKind if kind in wanted)
