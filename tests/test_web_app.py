"""Mini README: Tests for the FastAPI interface using the test client."""

import inspect

import pytest
from fastapi.routing import APIRoute
from fastapi.testclient import TestClient

from droneplanner.configuration import PlannerSettings
from droneplanner.interface import create_application
from droneplanner.planning import DeliveryPlanner


@pytest.fixture()
def client(planner):
    return TestClient(create_application(planner))


def test_map_lists_locations_and_edges(client):
    response = client.get("/map")
    assert response.status_code == 200
    payload = response.json()
    assert payload["domain"] == "horn_world"
    assert len(payload["locations"]) == 13
    assert len(payload["edges"]) == 17
    assert {"id": "drone2", "max_energy": 120} in payload["drones"]


def test_paths_endpoint(client):
    response = client.get("/paths", params={"start": "warehouse1", "end": "crossroad1"})
    assert response.status_code == 200
    assert response.json()["paths"][0] == ["warehouse1", "crossroad1"]
    assert client.get("/paths", params={"start": "warehouse1", "end": "atlantis"}).status_code == 400


def test_scenarios_endpoint(client):
    names = [scenario["name"] for scenario in client.get("/scenarios").json()["scenarios"]]
    assert names == ["simple_move", "simple_delivery", "multiple_packages", "horn_map_test", "low_energy"]


def test_plan_from_facts(client):
    response = client.post(
        "/plan",
        json={
            "initial": "[at_drone(drone1,warehouse1), energy(drone1,100)]",
            "goal": ["at_drone(drone1,crossroad1)"],
            "max_depth": 5,
        },
    )
    assert response.status_code == 200
    payload = response.json()
    assert payload["solved"] is True
    assert payload["outcome"] == "found"
    assert payload["plan"] == ["move(drone1, warehouse1, crossroad1)"]
    assert payload["by_drone"] == {"drone1": ["move(drone1, warehouse1, crossroad1)"]}


def test_plan_from_scenario_with_simulation(client):
    response = client.post("/plan", json={"scenario": "simple_delivery", "simulate": True})
    payload = response.json()
    assert payload["solved"] is True
    assert len(payload["simulation"]["steps"]) == 4
    assert payload["simulation"]["final"]["packages"][0]["location"] == "houseA"


def test_no_plan_is_not_an_error(client):
    response = client.post("/plan", json={"scenario": "simple_delivery", "max_depth": 2})
    assert response.status_code == 200
    assert response.json()["solved"] is False
    assert response.json()["plan"] is None


def test_plan_error_statuses(client):
    assert client.post("/plan", json={"scenario": "moon_landing"}).status_code == 404
    assert client.post("/plan", json={"initial": "[at_drone(drone1,mars)]", "goal": "[]"}).status_code == 400
    assert client.post("/plan", json={"goal": "[]"}).status_code == 400


def test_validate_endpoint(client):
    initial = "[at_drone(drone1,warehouse1), energy(drone1,100)]"
    ok = client.post("/validate", json={"initial": initial, "plan": ["move(drone1,warehouse1,crossroad1)"]})
    assert ok.status_code == 200
    assert "at_drone(drone1, crossroad1)" in ok.json()["final_state"]

    bad = client.post("/validate", json={"initial": initial, "plan": "[move(drone1,crossroad1,base)]"})
    assert bad.status_code == 400
    assert bad.json()["detail"]["step"] == 1


def test_search_routes_run_in_the_threadpool(client):
    endpoints = {route.path: route.endpoint for route in client.app.routes if isinstance(route, APIRoute)}
    assert not inspect.iscoroutinefunction(endpoints["/plan"])
    assert not inspect.iscoroutinefunction(endpoints["/validate"])


def test_plan_request_timeout_cancels_search(client):
    response = client.post("/plan", json={"scenario": "horn_map_test", "timeout_seconds": 0.000001})
    assert response.status_code == 200
    payload = response.json()
    assert payload["outcome"] == "cancelled"
    assert payload["solved"] is False
    assert "timeout" in payload["reason"]


def test_configured_expansion_limit_applies_to_requests(horn_domain):
    planner = DeliveryPlanner(horn_domain, settings=PlannerSettings(_env_file=None, max_expansions=1))
    client = TestClient(create_application(planner))
    payload = client.post("/plan", json={"scenario": "simple_delivery"}).json()
    assert payload["outcome"] == "cancelled"
    assert payload["reason"] == "expansion limit 1 reached"


def test_plan_timeout_must_be_positive(client):
    assert client.post("/plan", json={"scenario": "simple_move", "timeout_seconds": 0}).status_code == 422
