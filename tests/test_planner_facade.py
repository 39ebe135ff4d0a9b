"""Mini README: Tests for query checking, routes, presets and the facade."""

import pytest

from droneplanner.configuration import PlannerSettings
from droneplanner.errors import InvalidPlanError, MalformedQueryError
from droneplanner.planning import SCENARIOS, DeliveryPlanner, build_query, find_all_paths, plan_by_drone
from droneplanner.search import SearchOutcome
from droneplanner.state import Literal


def test_build_query_parses_text(horn_domain):
    query = build_query(horn_domain, "[at_drone(drone1,base), energy(drone1,40)]", ["energy(drone1,60)"], 5)
    assert Literal("energy", ("drone1", 40)) in query.initial
    assert query.goal == (Literal("energy", ("drone1", 60)),)
    assert query.max_depth == 5


@pytest.mark.parametrize(
    "initial, goal",
    [
        ("[flying(drone1)]", "[]"),
        ("[at_drone(drone1)]", "[]"),
        ("[at_drone(drone7,base)]", "[]"),
        ("[at_drone(drone1,mars)]", "[]"),
        ("[energy(drone1,101)]", "[]"),
        ("[energy(drone1,-1)]", "[]"),
        ("[at_drone(drone1,base), at_drone(drone1,houseA)]", "[]"),
        ("[at_package(pkg1,base), holding(drone1,pkg1)]", "[]"),
        ("[connected(base,crossroad1)]", "[]"),
        ("[]", "[energy(drone1,full)]"),
        ("[]", "[at_drone(drone1,?where)]"),
        ("[at_drone(drone1,base", "[]"),
    ],
)
def test_build_query_rejects_malformed_input(horn_domain, initial, goal):
    with pytest.raises(MalformedQueryError):
        build_query(horn_domain, initial, goal, 5)


def test_build_query_rejects_negative_depth(horn_domain):
    with pytest.raises(MalformedQueryError):
        build_query(horn_domain, "[]", "[]", -1)


def test_find_all_paths_lists_simple_routes(horn_domain):
    routes = find_all_paths(horn_domain, "warehouse1", "houseA")
    assert routes[0] == ["warehouse1", "crossroad1", "houseA"]
    for route in routes:
        assert route[0] == "warehouse1" and route[-1] == "houseA"
        assert len(set(route)) == len(route)
        for first, second in zip(route, route[1:]):
            assert horn_domain.is_connected(first, second)
    assert find_all_paths(horn_domain, "base", "base") == [["base"]]
    assert all(len(route) <= 4 for route in find_all_paths(horn_domain, "warehouse1", "houseB", max_length=3))


def test_find_all_paths_rejects_unknown_locations(horn_domain):
    with pytest.raises(MalformedQueryError):
        find_all_paths(horn_domain, "warehouse1", "atlantis")


def test_planner_uses_settings_default_depth(horn_domain):
    planner = DeliveryPlanner(horn_domain, settings=PlannerSettings(default_max_depth=3))
    result = planner.plan(
        "[at_drone(drone1,warehouse1), energy(drone1,100), at_package(pkg1,warehouse1)]",
        "[at_package(pkg1,houseA)]",
    )
    assert result.outcome is SearchOutcome.DEPTH_EXCEEDED
    assert result.max_depth == 3


def test_planner_applies_expansion_limit_from_settings(horn_domain):
    planner = DeliveryPlanner(horn_domain, settings=PlannerSettings(max_expansions=1))
    result = planner.plan_scenario("simple_delivery")
    assert result.outcome is SearchOutcome.CANCELLED


@pytest.mark.parametrize("name", ["simple_move", "simple_delivery", "multiple_packages", "low_energy"])
def test_preset_scenarios_are_solvable(planner, name):
    result = planner.plan_scenario(name)
    assert result.solved
    scenario = SCENARIOS[name]
    final = planner.validate(scenario.initial, result.plan, scenario.goal)
    assert final.satisfies(planner.query(scenario.initial, scenario.goal).goal)


def test_multiple_packages_is_split_between_drones(planner):
    result = planner.plan_scenario("multiple_packages")
    grouped = plan_by_drone(result.plan)
    assert set(grouped) == {"drone1", "drone2"}
    assert "drop(drone1, pkg1, houseA)" in [str(action) for action in grouped["drone1"]]
    assert "drop(drone2, pkg2, houseB)" in [str(action) for action in grouped["drone2"]]


def test_unknown_scenario_raises_key_error(planner):
    with pytest.raises(KeyError):
        planner.plan_scenario("moon_landing")


def test_validate_accepts_plan_text(planner):
    final = planner.validate(
        "[at_drone(drone1,warehouse1), energy(drone1,100)]",
        "[move(drone1,warehouse1,crossroad1), move(drone1,crossroad1,base), recharge_full(drone1)]",
        "[at_drone(drone1,base), energy(drone1,100)]",
    )
    assert final.value_of("energy", "drone1") == 100
    with pytest.raises(InvalidPlanError):
        planner.validate("[at_drone(drone1,warehouse1), energy(drone1,100)]", "[move(drone1,base,crossroad1)]")


def test_simulated_execution_tracks_fleet(planner):
    executor = planner.simulate_execution(
        "[at_drone(drone1,warehouse1), energy(drone1,100), at_package(pkg1,warehouse1)]",
        "[pickup(drone1,pkg1,warehouse1), move(drone1,warehouse1,crossroad1)]",
    )
    snapshot = executor.snapshot()
    (drone,) = snapshot["drones"]
    assert drone["location"] == "crossroad1"
    assert drone["energy"] == 95
    assert snapshot["packages"][0]["carried_by"] == "drone1"


def test_describe_map_lists_every_location(planner, horn_domain):
    lines = planner.describe_map()
    assert len(lines) == len(horn_domain.locations)
    assert lines[0].startswith("base (base): crossroad1, crossroad2")


def test_static_goal_facts_are_answered_by_the_map(planner):
    initial = "[at_drone(drone1,warehouse1), energy(drone1,100)]"
    result = planner.plan(initial, "[at_drone(drone1,crossroad1), connected(warehouse1,crossroad1)]", 5)
    assert result.solved
    assert result.plan.as_strings() == ["move(drone1, warehouse1, crossroad1)"]

    query = build_query(planner.domain, initial, "[connected(crossroad1,warehouse1)]", 5)
    assert query.goal == ()

    with pytest.raises(MalformedQueryError):
        planner.plan(initial, "[at_drone(drone1,crossroad1), connected(warehouse1,houseD)]", 5)

    final = planner.validate(initial, "[move(drone1,warehouse1,crossroad1)]", "[connected(warehouse1,crossroad1)]")
    assert Literal("at_drone", ("drone1", "crossroad1")) in final
