"""Mini README: Static domain description for the planning engine.

Structure:
    * ``schema`` - the closed set of action templates and their effects.
    * ``model`` - the immutable ``Domain`` (objects, graph, capacities).
    * ``loader`` - JSON loading/validation, including the bundled Horn map.
"""

from .loader import DomainDescription, domain_from_mapping, load_default_domain, load_domain
from .model import Domain, Location, LocationKind
from .schema import (
    ActionKind,
    ActionSchema,
    EnergyEffect,
    EnergyOperation,
    ObjectType,
    Parameter,
    build_action_catalog,
)

__all__ = [
    "ActionKind",
    "ActionSchema",
    "Domain",
    "DomainDescription",
    "EnergyEffect",
    "EnergyOperation",
    "Location",
    "LocationKind",
    "ObjectType",
    "Parameter",
    "build_action_catalog",
    "domain_from_mapping",
    "load_default_domain",
    "load_domain",
]
