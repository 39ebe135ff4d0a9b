"""Mini README: Entry point CLI for the drone delivery planner.

This script exposes a Typer CLI for planning queries, plan validation,
route listings, the map, preset scenarios, and launching the HTTP service.
Settings come from ``DRONEPLANNER_*`` environment variables; options given
on the command line win. Errors exit with status 1, malformed input with
status 2; a query without a plan exits with status 1 after reporting the
outcome.
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional

import typer
import uvicorn

from droneplanner.configuration import get_settings
from droneplanner.domain import load_domain
from droneplanner.errors import DomainLoadError, InvalidPlanError, MalformedQueryError
from droneplanner.logging_utils import configure_root_logger
from droneplanner.planning import DeliveryPlanner, get_scenario, list_scenarios, plan_by_drone
from droneplanner.search import CancellationToken

cli = typer.Typer(help="Plan, validate and inspect drone deliveries on a location graph.")

EXIT_FAILURE = 1
EXIT_MALFORMED = 2


def _planner(domain_path: Optional[Path]) -> DeliveryPlanner:
    settings = get_settings()
    configure_root_logger(settings.log_level)
    try:
        domain = load_domain(domain_path) if domain_path is not None else None
        return DeliveryPlanner(domain, settings=settings)
    except DomainLoadError as error:
        typer.echo(f"Error: {error}", err=True)
        raise typer.Exit(code=EXIT_FAILURE) from error


DomainOption = typer.Option(None, "--domain", "-w", help="JSON domain description (defaults to the Horn map).")


@cli.command()
def plan(
    initial: Optional[str] = typer.Option(None, "--initial", "-i", help="Initial facts, e.g. '[at_drone(drone1,warehouse1), energy(drone1,100)]'."),
    goal: Optional[str] = typer.Option(None, "--goal", "-g", help="Goal facts, e.g. '[at_drone(drone1,crossroad1)]'."),
    scenario: Optional[str] = typer.Option(None, "--scenario", "-s", help="Preset scenario name instead of facts."),
    max_depth: Optional[int] = typer.Option(None, "--max-depth", "-d", min=0, max=200, help="Depth bound."),
    timeout: Optional[float] = typer.Option(None, help="Give up after this many seconds."),
    simulate: bool = typer.Option(False, help="Replay the plan through the simulated fleet."),
    domain_path: Optional[Path] = DomainOption,
) -> None:
    """Search for a plan and print it step by step."""

    planner = _planner(domain_path)
    if scenario is not None:
        try:
            preset = get_scenario(scenario)
        except KeyError as error:
            typer.echo(f"Error: {error.args[0]}", err=True)
            raise typer.Exit(code=EXIT_FAILURE) from error
        initial, goal = preset.initial, preset.goal
        max_depth = preset.max_depth if max_depth is None else max_depth
    if initial is None or goal is None:
        typer.echo("Error: provide --initial and --goal, or --scenario", err=True)
        raise typer.Exit(code=EXIT_MALFORMED)

    token = CancellationToken(timeout_seconds=timeout) if timeout is not None else None
    try:
        result = planner.plan(initial, goal, max_depth, cancellation=token)
    except MalformedQueryError as error:
        typer.echo(f"Malformed query: {error}", err=True)
        raise typer.Exit(code=EXIT_MALFORMED) from error

    if not result.solved:
        detail = f" ({result.reason})" if result.reason else ""
        typer.echo(f"No plan found: {result.outcome.value} within depth {result.max_depth}{detail}.")
        raise typer.Exit(code=EXIT_FAILURE)

    typer.echo(f"Plan found ({len(result.plan)} steps, {result.stats.expanded} nodes expanded):")
    for index, action in enumerate(result.plan.as_strings(), start=1):
        typer.echo(f"{index}. {action}")
    grouped = plan_by_drone(result.plan)
    if len(grouped) > 1:
        for drone, actions in grouped.items():
            typer.echo(f"{drone}: {', '.join(str(action) for action in actions)}")
    if simulate:
        executor = planner.simulate_execution(initial, result.plan)
        for message in executor.recent_log():
            typer.echo(message)


@cli.command()
def validate(
    initial: str = typer.Option(..., "--initial", "-i", help="Initial facts."),
    steps: str = typer.Option(..., "--plan", "-p", help="Plan as '[move(drone1,warehouse1,crossroad1), ...]'."),
    goal: Optional[str] = typer.Option(None, "--goal", "-g", help="Goal facts the plan must reach."),
    domain_path: Optional[Path] = DomainOption,
) -> None:
    """Replay a plan and report the first step that cannot be applied."""

    planner = _planner(domain_path)
    try:
        final_state = planner.validate(initial, steps, goal)
    except MalformedQueryError as error:
        typer.echo(f"Malformed input: {error}", err=True)
        raise typer.Exit(code=EXIT_MALFORMED) from error
    except InvalidPlanError as error:
        typer.echo(f"Invalid plan: {error}", err=True)
        raise typer.Exit(code=EXIT_FAILURE) from error
    typer.echo("Plan is valid.")
    typer.echo(f"Final state: {final_state}")


@cli.command()
def paths(
    start: str = typer.Argument(..., help="Start location."),
    end: str = typer.Argument(..., help="End location."),
    max_length: Optional[int] = typer.Option(None, min=0, help="Longest route to list, in edges."),
    domain_path: Optional[Path] = DomainOption,
) -> None:
    """List all simple routes between two locations."""

    planner = _planner(domain_path)
    try:
        found = planner.find_all_paths(start, end, max_length)
    except MalformedQueryError as error:
        typer.echo(f"Malformed input: {error}", err=True)
        raise typer.Exit(code=EXIT_MALFORMED) from error
    if not found:
        typer.echo(f"No paths found from {start} to {end}.")
        return
    typer.echo(f"Found {len(found)} path(s):")
    for index, route in enumerate(found, start=1):
        typer.echo(f"Path {index}: {' -> '.join(route)}")


@cli.command("map")
def show_map(domain_path: Optional[Path] = DomainOption) -> None:
    """Print the location graph."""

    planner = _planner(domain_path)
    typer.echo(f"Domain {planner.domain.name}:")
    for line in planner.describe_map():
        typer.echo(f"  {line}")


@cli.command()
def scenarios() -> None:
    """List the preset scenarios."""

    for preset in list_scenarios():
        typer.echo(f"{preset.name} ({preset.title}, depth {preset.max_depth})")
        typer.echo(f"  initial: {preset.initial}")
        typer.echo(f"  goal:    {preset.goal}")


@cli.command()
def serve(
    host: str = typer.Option(None, help="Host interface to bind."),
    port: int = typer.Option(None, help="Port to listen on."),
    production: bool = typer.Option(False, help="Use production server settings (disable auto-reload)."),
) -> None:
    """Start the FastAPI application using uvicorn."""

    settings = get_settings()
    effective_host = host or settings.interface_host
    effective_port = port or settings.interface_port
    configure_root_logger(settings.log_level)

    browser_host = "127.0.0.1" if effective_host in {"0.0.0.0", "::"} else effective_host
    typer.echo(
        f"Starting droneplanner on {effective_host}:{effective_port}.\n"
        f"API docs at http://{browser_host}:{effective_port}/docs"
    )
    uvicorn.run(
        "droneplanner.interface.web_app:create_application",
        host=effective_host,
        port=effective_port,
        factory=True,
        reload=not production,
    )


def main(argv: Optional[List[str]] = None) -> None:
    cli(args=argv)


if __name__ == "__main__":
    main()
