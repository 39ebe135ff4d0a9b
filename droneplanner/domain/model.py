"""Mini README: The static world description handed to the planner.

Structure:
    * LocationKind - categories used by maps and simulations.
    * Location - identifier, kind and optional map coordinates.
    * Domain - object universe, connectivity graph, capacities, cost model
      and action schema catalog.

A ``Domain`` is built once (see ``droneplanner.domain.loader``) and never
mutated afterwards; its mappings are read-only proxies, so a single
instance can be shared by concurrent planning calls without locking.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Dict, FrozenSet, Iterable, List, Mapping, Optional, Tuple

from ..logging_utils import get_logger
from ..state import Literal
from .schema import STATIC_PREDICATES, ActionSchema, ObjectType

LOGGER = get_logger(__name__)


class LocationKind(str, Enum):
    WAREHOUSE = "warehouse"
    HOUSE = "house"
    CROSSROAD = "crossroad"
    JUNCTION = "junction"
    BASE = "base"


@dataclass(frozen=True, slots=True)
class Location:
    """Node of the delivery graph."""

    location_id: str
    kind: LocationKind = LocationKind.CROSSROAD
    position: Optional[Tuple[float, float]] = None


@dataclass(frozen=True, eq=False)
class Domain:
    """Read-only planning domain."""

    name: str
    locations: Mapping[str, Location]
    connections: Mapping[str, Tuple[str, ...]]
    drones: Mapping[str, int]
    packages: Tuple[str, ...]
    schemas: Tuple[ActionSchema, ...]
    move_cost: int
    recharge_increment: int
    payload_capacity: int = 1
    charging_stations: FrozenSet[str] = field(default_factory=frozenset)

    @classmethod
    def build(
        cls,
        *,
        name: str,
        locations: Iterable[Location],
        edges: Iterable[Tuple[str, str]],
        drones: Mapping[str, int],
        packages: Iterable[str],
        schemas: Iterable[ActionSchema],
        move_cost: int,
        recharge_increment: int,
        payload_capacity: int = 1,
        charging_stations: Iterable[str] = (),
    ) -> "Domain":
        """Assemble a domain from plain collections; edges are undirected."""

        location_map = {location.location_id: location for location in locations}
        adjacency: Dict[str, set] = {location_id: set() for location_id in location_map}
        for first, second in edges:
            adjacency.setdefault(first, set()).add(second)
            adjacency.setdefault(second, set()).add(first)
        domain = cls(
            name=name,
            locations=MappingProxyType(dict(sorted(location_map.items()))),
            connections=MappingProxyType(
                {location_id: tuple(sorted(neighbours)) for location_id, neighbours in sorted(adjacency.items())}
            ),
            drones=MappingProxyType(dict(sorted(drones.items()))),
            packages=tuple(sorted(packages)),
            schemas=tuple(schemas),
            move_cost=move_cost,
            recharge_increment=recharge_increment,
            payload_capacity=payload_capacity,
            charging_stations=frozenset(charging_stations),
        )
        LOGGER.debug(
            "Built domain '%s' with %s locations, %s drones, %s packages and actions %s",
            name,
            len(domain.locations),
            len(domain.drones),
            len(domain.packages),
            [schema.name for schema in domain.schemas],
        )
        return domain

    def schema(self, name: str) -> ActionSchema:
        """Look up an enabled schema by action name."""

        for schema in self.schemas:
            if schema.name == name:
                return schema
        raise KeyError(f"Action '{name}' is not defined in domain {self.name}")

    def neighbors(self, location: str) -> Tuple[str, ...]:
        return self.connections.get(location, ())

    def is_connected(self, first: str, second: str) -> bool:
        return second in self.connections.get(first, ())

    def capacity(self, drone: str) -> int:
        if drone not in self.drones:
            raise KeyError(f"Drone {drone} is not defined in domain {self.name}")
        return self.drones[drone]

    @staticmethod
    def is_static(predicate: str) -> bool:
        return predicate in STATIC_PREDICATES

    def holds_static(self, literal: Literal) -> bool:
        """Evaluate a static literal against the connectivity graph."""

        if literal.predicate == "connected" and len(literal.args) == 2:
            first, second = literal.args
            return isinstance(first, str) and isinstance(second, str) and self.is_connected(first, second)
        return False

    def object_kind(self, identifier: object) -> Optional[ObjectType]:
        if identifier in self.drones:
            return ObjectType.DRONE
        if identifier in self.packages:
            return ObjectType.PACKAGE
        if identifier in self.locations:
            return ObjectType.LOCATION
        return None

    def edges(self) -> List[Tuple[str, str]]:
        """Undirected edges, each listed once in ascending order."""

        return [
            (location, neighbour)
            for location, neighbours in self.connections.items()
            for neighbour in neighbours
            if location < neighbour
        ]

    def describe(self) -> List[str]:
        """Human readable adjacency listing, one line per location."""

        lines = []
        for location_id, location in self.locations.items():
            neighbours = ", ".join(self.neighbors(location_id)) or "-"
            marker = " [charging]" if location_id in self.charging_stations else ""
            lines.append(f"{location_id} ({location.kind.value}){marker}: {neighbours}")
        return lines
