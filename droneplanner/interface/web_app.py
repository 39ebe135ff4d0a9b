"""Mini README: FastAPI-powered HTTP interface for droneplanner.

Structure:
    * create_application - application factory wiring routes to a shared
      ``DeliveryPlanner``.
    * PlanRequest / ValidateRequest - JSON request bodies.

Routes:
    GET  /map        locations, edges, drones and packages of the domain
    GET  /paths      all simple routes between two locations
    GET  /scenarios  preset queries
    POST /plan       run a query (or a preset) and return the outcome
    POST /validate   replay a plan and return the final state

Malformed queries and invalid plans answer 400, unknown presets 404. "No
plan" is not an error: ``/plan`` answers 200 with ``solved: false``.

``/plan`` and ``/validate`` are plain functions so FastAPI runs them in its
threadpool; a long search never blocks the other routes. Every plan request
carries a cancellation token: the request's ``timeout_seconds``, else the
configured query timeout, else ``request_timeout_seconds``.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Union

from fastapi import FastAPI, HTTPException, Query
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from ..configuration import get_settings
from ..errors import InvalidPlanError, MalformedQueryError
from ..logging_utils import get_logger
from ..planning import DeliveryPlanner, get_scenario, list_scenarios, plan_by_drone
from ..search import CancellationToken

LOGGER = get_logger(__name__)

FactsField = Union[str, List[str]]


class PlanRequest(BaseModel):
    initial: Optional[FactsField] = None
    goal: Optional[FactsField] = None
    scenario: Optional[str] = Field(None, description="Name of a preset; replaces initial and goal.")
    max_depth: Optional[int] = Field(None, ge=0, le=200)
    timeout_seconds: Optional[float] = Field(None, gt=0, description="Give up on the search after this many seconds.")
    simulate: bool = Field(False, description="Also replay the plan through the simulated fleet.")


class ValidateRequest(BaseModel):
    initial: FactsField
    plan: FactsField
    goal: Optional[FactsField] = None


def create_application(planner: Optional[DeliveryPlanner] = None) -> FastAPI:
    """Create the FastAPI application with routes and dependencies."""

    app = FastAPI(title="Drone Delivery Planner", version="0.1.0")
    planner = planner or DeliveryPlanner(settings=get_settings())
    domain = planner.domain

    @app.get("/map")
    async def domain_map() -> JSONResponse:
        """Return the location graph and fleet of the loaded domain."""

        locations = [
            {
                "id": location.location_id,
                "kind": location.kind.value,
                "position": list(location.position) if location.position else None,
                "neighbours": list(domain.neighbors(location.location_id)),
                "charging_station": location.location_id in domain.charging_stations,
            }
            for location in domain.locations.values()
        ]
        LOGGER.debug("Returning map with %s locations", len(locations))
        return JSONResponse(
            {
                "domain": domain.name,
                "locations": locations,
                "edges": [list(edge) for edge in domain.edges()],
                "drones": [{"id": drone, "max_energy": capacity} for drone, capacity in domain.drones.items()],
                "packages": list(domain.packages),
                "actions": [schema.name for schema in domain.schemas],
                "move_cost": domain.move_cost,
                "recharge_increment": domain.recharge_increment,
            }
        )

    @app.get("/paths")
    async def paths(
        start: str = Query(...),
        end: str = Query(...),
        max_length: Optional[int] = Query(None, ge=0),
    ) -> JSONResponse:
        """Return every simple route between two locations."""

        try:
            found = planner.find_all_paths(start, end, max_length)
        except MalformedQueryError as error:
            raise HTTPException(status_code=400, detail=str(error)) from error
        return JSONResponse({"start": start, "end": end, "paths": found})

    @app.get("/scenarios")
    async def scenarios() -> JSONResponse:
        return JSONResponse({"scenarios": [scenario.to_dict() for scenario in list_scenarios()]})

    @app.post("/plan")
    def plan(request: PlanRequest) -> JSONResponse:
        """Run a planning query and return its outcome."""

        initial, goal, max_depth = request.initial, request.goal, request.max_depth
        if request.scenario is not None:
            try:
                scenario = get_scenario(request.scenario)
            except KeyError as error:
                raise HTTPException(status_code=404, detail=str(error.args[0])) from error
            initial, goal = scenario.initial, scenario.goal
            max_depth = scenario.max_depth if max_depth is None else max_depth
        if initial is None or goal is None:
            raise HTTPException(status_code=400, detail="Both initial and goal facts are required")

        settings = planner.settings
        token = CancellationToken(
            timeout_seconds=request.timeout_seconds or settings.timeout_seconds or settings.request_timeout_seconds,
            max_expansions=settings.max_expansions,
        )
        try:
            result = planner.plan(initial, goal, max_depth, cancellation=token)
        except MalformedQueryError as error:
            raise HTTPException(status_code=400, detail=str(error)) from error

        payload: Dict[str, Any] = {
            "outcome": result.outcome.value,
            "solved": result.solved,
            "max_depth": result.max_depth,
            "plan": result.plan.as_strings() if result.plan is not None else None,
            "by_drone": (
                {drone: [str(action) for action in actions] for drone, actions in plan_by_drone(result.plan).items()}
                if result.plan is not None
                else None
            ),
            "stats": result.stats.as_dict(),
            "reason": result.reason,
        }
        if request.simulate and result.plan is not None:
            executor = planner.simulate_execution(initial, result.plan)
            payload["simulation"] = {
                "steps": [
                    {"step": step.step_number, "action": step.action, "description": step.description}
                    for step in executor.steps
                ],
                "final": executor.snapshot(),
            }
        LOGGER.info("Plan request finished with outcome %s", result.outcome.value)
        return JSONResponse(payload)

    @app.post("/validate")
    def validate(request: ValidateRequest) -> JSONResponse:
        """Replay a plan; invalid steps answer 400 with the failing step."""

        try:
            final_state = planner.validate(request.initial, request.plan, request.goal)
        except MalformedQueryError as error:
            raise HTTPException(status_code=400, detail=str(error)) from error
        except InvalidPlanError as error:
            raise HTTPException(
                status_code=400,
                detail={"message": error.message, "step": error.step_index + 1, "action": error.action, "error": str(error)},
            ) from error
        return JSONResponse({"valid": True, "final_state": [str(literal) for literal in final_state]})

    return app
