"""Mini README: High level planning facade used by the CLI and HTTP API.

Structure:
    * DeliveryPlanner - owns one domain plus its grounder, search engine
      and validator; answers plan, validate, route and map requests.
    * plan_by_drone - split a plan into per-drone action lists.

Usage:
    planner = DeliveryPlanner()
    result = planner.plan("[at_drone(drone1,warehouse1), energy(drone1,100)]",
                          "[at_drone(drone1,crossroad1)]")
    print(result.outcome, result.plan.as_strings())

Default depth bound, search strategy and per-query limits come from
``PlannerSettings``. The planner keeps no per-query state, so one instance
can be shared by concurrent requests.
"""

from __future__ import annotations

from typing import Dict, Iterable, List, Optional, Union

from ..configuration import PlannerSettings, get_settings
from ..domain import Domain, load_default_domain, load_domain
from ..execution import REGISTRY, StepExecutor
from ..grounding import ActionGrounder, GroundAction
from ..logging_utils import get_logger
from ..search import CancellationToken, PlanResult, SearchEngine
from ..state import State, parse_literals
from ..validation import PlanValidator
from .query import FactsInput, PlanningQuery, build_query
from .routes import find_all_paths
from .scenarios import get_scenario

LOGGER = get_logger(__name__)

StepsInput = Union[str, Iterable[Union[GroundAction, str]]]


def plan_by_drone(plan: Iterable[GroundAction]) -> Dict[str, List[GroundAction]]:
    """Group actions by acting drone, keeping plan order within each group."""

    grouped: Dict[str, List[GroundAction]] = {}
    for action in plan:
        grouped.setdefault(str(action.drone), []).append(action)
    return grouped


class DeliveryPlanner:
    """Answer planning queries against a single domain."""

    def __init__(self, domain: Optional[Domain] = None, *, settings: Optional[PlannerSettings] = None) -> None:
        self.settings = settings or get_settings()
        if domain is None:
            if self.settings.domain_path is not None:
                domain = load_domain(self.settings.domain_path)
            else:
                domain = load_default_domain()
        self.domain = domain
        self.grounder = ActionGrounder(domain)
        self.engine = SearchEngine(domain, strategy=self.settings.search_strategy, grounder=self.grounder)
        self.validator = PlanValidator(domain, self.grounder)
        LOGGER.debug(
            "DeliveryPlanner ready for domain '%s' (default depth %s)",
            domain.name,
            self.settings.default_max_depth,
        )

    def query(self, initial: FactsInput, goal: FactsInput, max_depth: Optional[int] = None) -> PlanningQuery:
        depth = self.settings.default_max_depth if max_depth is None else max_depth
        return build_query(self.domain, initial, goal, depth)

    def _default_token(self) -> Optional[CancellationToken]:
        if self.settings.timeout_seconds is None and self.settings.max_expansions is None:
            return None
        return CancellationToken(
            timeout_seconds=self.settings.timeout_seconds,
            max_expansions=self.settings.max_expansions,
        )

    def plan(
        self,
        initial: FactsInput,
        goal: FactsInput,
        max_depth: Optional[int] = None,
        *,
        cancellation: Optional[CancellationToken] = None,
    ) -> PlanResult:
        """Search for a plan; raises ``MalformedQueryError`` on bad input."""

        query = self.query(initial, goal, max_depth)
        LOGGER.info("Planning for goal %s with depth bound %s", [str(item) for item in query.goal], query.max_depth)
        token = cancellation if cancellation is not None else self._default_token()
        return self.engine.search(query.initial, query.goal, query.max_depth, cancellation=token)

    def plan_scenario(self, name: str, max_depth: Optional[int] = None) -> PlanResult:
        """Plan one of the preset scenarios; raises ``KeyError`` if unknown."""

        scenario = get_scenario(name)
        depth = scenario.max_depth if max_depth is None else max_depth
        return self.plan(scenario.initial, scenario.goal, depth)

    @staticmethod
    def _steps(steps: StepsInput) -> List[Union[GroundAction, str]]:
        if isinstance(steps, str):
            return [str(literal) for literal in parse_literals(steps)]
        return list(steps)

    def validate(self, initial: FactsInput, steps: StepsInput, goal: Optional[FactsInput] = None) -> State:
        """Replay ``steps``; raises ``InvalidPlanError`` at the first bad step."""

        query = self.query(initial, goal if goal is not None else [], 0)
        return self.validator.validate(query.initial, self._steps(steps), query.goal if goal is not None else None)

    def simulate_execution(
        self,
        initial: FactsInput,
        steps: StepsInput,
        executor: str = "simulated",
    ) -> StepExecutor:
        """Run ``steps`` through a registered executor and return it."""

        query = self.query(initial, [], 0)
        return REGISTRY.replay(executor, self._steps(steps), domain=self.domain, initial_state=query.initial)

    def find_all_paths(self, start: str, end: str, max_length: Optional[int] = None) -> List[List[str]]:
        return find_all_paths(self.domain, start, end, max_length)

    def describe_map(self) -> List[str]:
        return self.domain.describe()
