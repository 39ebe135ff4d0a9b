"""Mini README: Load and validate external domain descriptions.

Structure:
    * DomainDescription - pydantic model of the JSON domain file.
    * domain_from_mapping - validate a mapping and build a ``Domain``.
    * load_domain - read a JSON file from disk.
    * load_default_domain - the bundled Horn delivery map.

Every problem with the description (missing file, invalid JSON, schema
violations, references to undefined locations) surfaces as a
``DomainLoadError`` so construction of a planner fails before any search
can start.
"""

from __future__ import annotations

import json
import re
from functools import lru_cache
from importlib import resources
from pathlib import Path
from typing import Any, List, Mapping, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from ..errors import DomainLoadError
from ..logging_utils import get_logger
from .model import Domain, Location, LocationKind
from .schema import ActionKind, build_action_catalog

LOGGER = get_logger(__name__)

_IDENTIFIER = r"^[A-Za-z0-9_]+$"
_IDENTIFIER_RE = re.compile(_IDENTIFIER)
DEFAULT_DOMAIN_RESOURCE = "horn_world.json"


class LocationModel(BaseModel):
    model_config = ConfigDict(extra="forbid")

    id: str = Field(..., pattern=_IDENTIFIER)
    kind: LocationKind = LocationKind.CROSSROAD
    position: Optional[Tuple[float, float]] = None


class DroneModel(BaseModel):
    model_config = ConfigDict(extra="forbid")

    id: str = Field(..., pattern=_IDENTIFIER)
    max_energy: int = Field(..., gt=0, description="Maximum energy capacity.")


class EnergyModel(BaseModel):
    model_config = ConfigDict(extra="forbid")

    move_cost: int = Field(..., gt=0, description="Energy consumed per edge travelled.")
    recharge_increment: int = Field(..., gt=0, description="Energy restored by one recharge.")


class DomainDescription(BaseModel):
    """Schema of the external domain description."""

    model_config = ConfigDict(extra="forbid")

    name: str = Field(..., min_length=1)
    locations: List[LocationModel] = Field(..., min_length=1)
    connections: List[Tuple[str, str]] = Field(default_factory=list)
    drones: List[DroneModel] = Field(default_factory=list)
    packages: List[str] = Field(default_factory=list)
    energy: EnergyModel
    payload_capacity: int = Field(1, ge=1)
    charging_stations: List[str] = Field(default_factory=list)
    actions: Optional[List[ActionKind]] = None

    @model_validator(mode="after")
    def _check_references(self) -> "DomainDescription":
        location_ids = [location.id for location in self.locations]
        drone_ids = [drone.id for drone in self.drones]
        identifiers = location_ids + drone_ids + list(self.packages)
        duplicates = sorted({identifier for identifier in identifiers if identifiers.count(identifier) > 1})
        if duplicates:
            raise ValueError(f"duplicate object identifiers: {', '.join(duplicates)}")
        for package in self.packages:
            if not _IDENTIFIER_RE.match(package):
                raise ValueError(f"invalid package identifier '{package}'")

        known = set(location_ids)
        for first, second in self.connections:
            if first == second:
                raise ValueError(f"connection from {first} to itself")
            missing = [location for location in (first, second) if location not in known]
            if missing:
                raise ValueError(f"connection {first}-{second} references undefined location {missing[0]}")
        for station in self.charging_stations:
            if station not in known:
                raise ValueError(f"charging station {station} is not a defined location")
        return self


def domain_from_mapping(payload: Mapping[str, Any]) -> Domain:
    """Validate a decoded description and build the ``Domain``."""

    try:
        description = DomainDescription.model_validate(payload)
    except ValidationError as error:
        raise DomainLoadError(
            "Domain description is invalid",
            {"errors": "; ".join(
                f"{'.'.join(str(part) for part in issue['loc']) or 'root'}: {issue['msg']}"
                for issue in error.errors()
            )},
        ) from error

    enabled = None if description.actions is None else [kind.value for kind in description.actions]
    schemas = build_action_catalog(
        description.energy.move_cost,
        description.energy.recharge_increment,
        enabled,
    )
    return Domain.build(
        name=description.name,
        locations=[
            Location(location.id, location.kind, location.position) for location in description.locations
        ],
        edges=description.connections,
        drones={drone.id: drone.max_energy for drone in description.drones},
        packages=description.packages,
        schemas=schemas,
        move_cost=description.energy.move_cost,
        recharge_increment=description.energy.recharge_increment,
        payload_capacity=description.payload_capacity,
        charging_stations=description.charging_stations,
    )


def _decode(text: str, origin: str) -> Mapping[str, Any]:
    try:
        payload = json.loads(text)
    except json.JSONDecodeError as error:
        raise DomainLoadError("Domain description is not valid JSON", {"source": origin}) from error
    if not isinstance(payload, dict):
        raise DomainLoadError("Domain description must be a JSON object", {"source": origin})
    return payload


def load_domain(path: Union[str, Path]) -> Domain:
    """Read and validate a JSON domain description from disk."""

    domain_path = Path(path).expanduser()
    if not domain_path.is_file():
        raise DomainLoadError("Domain description not found", {"path": str(domain_path)})
    LOGGER.info("Loading domain description from %s", domain_path)
    return domain_from_mapping(_decode(domain_path.read_text(encoding="utf-8"), str(domain_path)))


@lru_cache(maxsize=1)
def load_default_domain() -> Domain:
    """Return the bundled Horn map domain (cached, it is immutable)."""

    resource = resources.files("droneplanner.domain") / "data" / DEFAULT_DOMAIN_RESOURCE
    LOGGER.debug("Loading bundled domain %s", DEFAULT_DOMAIN_RESOURCE)
    return domain_from_mapping(_decode(resource.read_text(encoding="utf-8"), DEFAULT_DOMAIN_RESOURCE))
