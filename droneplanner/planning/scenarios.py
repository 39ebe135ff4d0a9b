"""Mini README: Preset queries for the bundled Horn map.

The presets mirror the scenarios offered by the operator console so demos,
the CLI and the HTTP API share the same examples. Each carries a suggested
depth bound.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Dict, List


@dataclass(frozen=True, slots=True)
class Scenario:
    name: str
    title: str
    initial: str
    goal: str
    max_depth: int

    def to_dict(self) -> Dict[str, object]:
        return asdict(self)


SCENARIOS: Dict[str, Scenario] = {
    scenario.name: scenario
    for scenario in (
        Scenario(
            name="simple_move",
            title="Simple Move",
            initial="[at_drone(drone1,warehouse1), energy(drone1,100)]",
            goal="[at_drone(drone1,crossroad1)]",
            max_depth=10,
        ),
        Scenario(
            name="simple_delivery",
            title="Simple Delivery",
            initial="[at_drone(drone1,warehouse1), energy(drone1,100), at_package(pkg1,warehouse1)]",
            goal="[at_package(pkg1,houseA)]",
            max_depth=15,
        ),
        Scenario(
            name="multiple_packages",
            title="Multiple Packages",
            initial=(
                "[at_drone(drone1,warehouse1), energy(drone1,100), at_drone(drone2,warehouse2), "
                "energy(drone2,120), at_package(pkg1,warehouse1), at_package(pkg2,warehouse2)]"
            ),
            goal="[at_package(pkg1,houseA), at_package(pkg2,houseB)]",
            max_depth=25,
        ),
        Scenario(
            name="horn_map_test",
            title="Horn Map Test",
            initial=(
                "[at_drone(drone1,warehouse1), energy(drone1,100), at_drone(drone2,warehouse2), "
                "energy(drone2,120), at_package(pkg1,warehouse1), at_package(pkg2,warehouse1)]"
            ),
            goal="[at_package(pkg1,houseA), at_package(pkg2,houseB)]",
            max_depth=30,
        ),
        Scenario(
            name="low_energy",
            title="Low Energy Scenario",
            initial="[at_drone(drone1,warehouse1), energy(drone1,15), at_package(pkg1,warehouse1)]",
            goal="[at_package(pkg1,houseA)]",
            max_depth=35,
        ),
    )
}


def get_scenario(name: str) -> Scenario:
    try:
        return SCENARIOS[name]
    except KeyError:
        raise KeyError(f"Unknown scenario '{name}'") from None


def list_scenarios() -> List[Scenario]:
    return list(SCENARIOS.values())
