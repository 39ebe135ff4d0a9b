"""Mini README: Shared fixtures for the droneplanner test-suite.

Provides the bundled Horn domain, its raw JSON description for building
variants, and a planner with default settings.
"""

from __future__ import annotations

import copy
import json
from importlib import resources

import pytest

from droneplanner.configuration import PlannerSettings
from droneplanner.domain import domain_from_mapping, load_default_domain
from droneplanner.planning import DeliveryPlanner


@pytest.fixture(scope="session")
def horn_description() -> dict:
    resource = resources.files("droneplanner.domain") / "data" / "horn_world.json"
    return json.loads(resource.read_text(encoding="utf-8"))


@pytest.fixture()
def make_domain(horn_description):
    """Build a Horn map variant with selected top-level fields replaced."""

    def _build(**overrides):
        description = copy.deepcopy(horn_description)
        description.update(overrides)
        return domain_from_mapping(description)

    return _build


@pytest.fixture(scope="session")
def horn_domain():
    return load_default_domain()


@pytest.fixture()
def planner(horn_domain) -> DeliveryPlanner:
    return DeliveryPlanner(horn_domain, settings=PlannerSettings())
