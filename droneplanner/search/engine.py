"""Mini README: Depth-bounded backtracking search over drone world states.

Structure:
    * SearchOutcome / SearchStrategy - result states and pass schedules.
    * SearchNode - state, remaining budget and the plan that reached it.
    * Plan / PlanResult / SearchStats - what a query returns.
    * SearchEngine - the depth-first search itself.

Every pass is a depth-first search with a decreasing budget: test the goal,
then the budget, then expand the applicable actions in grounding order and
stop at the first child that succeeds. A state already on the current path
is never entered again. Across passes of one query a failure table records,
for every state whose subtree failed, the largest budget it failed with;
meeting the state again with no more budget skips it. Subtrees whose failure
depended on an ancestor of the node itself are not recorded, since another
path may still succeed through them.

``iterative_deepening`` (default) runs passes with bounds 0..max_depth and
stops at the first plan, or early when a pass ends without any depth cutoff
(the reachable space is then exhausted). ``depth_first`` runs a single pass
with the full bound.
"""

from __future__ import annotations

import math
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterable, Iterator, List, Optional, Tuple

from ..domain import Domain
from ..grounding import ActionGrounder, GroundAction
from ..logging_utils import get_logger
from ..state import Literal, State
from .bounds import GoalDistanceBound
from .cancellation import CancellationToken

LOGGER = get_logger(__name__)


class SearchOutcome(str, Enum):
    FOUND = "found"
    EXHAUSTED = "exhausted"
    DEPTH_EXCEEDED = "depth_exceeded"
    CANCELLED = "cancelled"


class SearchStrategy(str, Enum):
    DEPTH_FIRST = "depth_first"
    ITERATIVE_DEEPENING = "iterative_deepening"


@dataclass(frozen=True, slots=True)
class SearchNode:
    state: State
    remaining: int
    plan: Tuple[GroundAction, ...] = ()

    def child(self, action: GroundAction, successor: State) -> "SearchNode":
        return SearchNode(successor, self.remaining - 1, self.plan + (action,))


@dataclass(frozen=True, slots=True)
class Plan:
    """Ordered ground actions; empty when the goal already holds."""

    steps: Tuple[GroundAction, ...] = ()

    def __len__(self) -> int:
        return len(self.steps)

    def __iter__(self) -> Iterator[GroundAction]:
        return iter(self.steps)

    def __getitem__(self, index: int) -> GroundAction:
        return self.steps[index]

    def as_strings(self) -> List[str]:
        return [str(step) for step in self.steps]


@dataclass(slots=True)
class SearchStats:
    expanded: int = 0
    generated: int = 0
    pruned: int = 0
    passes: int = 0
    elapsed_seconds: float = 0.0

    def as_dict(self) -> Dict[str, float]:
        return {
            "expanded": self.expanded,
            "generated": self.generated,
            "pruned": self.pruned,
            "passes": self.passes,
            "elapsed_seconds": round(self.elapsed_seconds, 6),
        }


@dataclass(frozen=True, slots=True)
class PlanResult:
    outcome: SearchOutcome
    plan: Optional[Plan]
    stats: SearchStats
    max_depth: int
    reason: Optional[str] = None

    @property
    def solved(self) -> bool:
        return self.outcome is SearchOutcome.FOUND


@dataclass(slots=True)
class _Pass:
    """Mutable bookkeeping for one top-level query."""

    goal: Tuple[Literal, ...]
    stats: SearchStats
    cancellation: Optional[CancellationToken]
    failures: Dict[State, float] = field(default_factory=dict)
    path: Dict[State, int] = field(default_factory=dict)
    cutoff: bool = False
    solution: Optional[Tuple[GroundAction, ...]] = None


class SearchEngine:
    """Stateless between queries; one engine may serve many callers."""

    def __init__(
        self,
        domain: Domain,
        *,
        strategy: SearchStrategy = SearchStrategy.ITERATIVE_DEEPENING,
        grounder: Optional[ActionGrounder] = None,
    ) -> None:
        self.domain = domain
        self.strategy = SearchStrategy(strategy)
        self.grounder = grounder or ActionGrounder(domain)
        self.bound = GoalDistanceBound(domain)
        LOGGER.debug("Initialised SearchEngine (%s) for domain '%s'", self.strategy.value, domain.name)

    def search(
        self,
        initial: State,
        goal: Iterable[Literal],
        max_depth: int,
        *,
        cancellation: Optional[CancellationToken] = None,
    ) -> PlanResult:
        """Find a plan of at most ``max_depth`` actions from ``initial`` to ``goal``."""

        if max_depth < 0:
            raise ValueError("max_depth must not be negative")
        started = time.perf_counter()
        # connected(a,b) facts live in the map, never in a state
        fluent_goal = tuple(
            literal
            for literal in goal
            if not (self.domain.is_static(literal.predicate) and self.domain.holds_static(literal))
        )
        context = _Pass(goal=fluent_goal, stats=SearchStats(), cancellation=cancellation)
        if cancellation is not None:
            cancellation.start()

        if self.strategy is SearchStrategy.DEPTH_FIRST:
            bounds = [max_depth]
        else:
            bounds = list(range(max_depth + 1))

        outcome = SearchOutcome.EXHAUSTED
        for bound in bounds:
            context.stats.passes += 1
            context.cutoff = False
            context.path = {initial: 0}
            outcome, _ = self._expand(SearchNode(initial, bound), 0, context)
            if outcome is SearchOutcome.FOUND or outcome is SearchOutcome.CANCELLED:
                break
            outcome = SearchOutcome.DEPTH_EXCEEDED if context.cutoff else SearchOutcome.EXHAUSTED
            if not context.cutoff:
                break

        context.stats.elapsed_seconds = time.perf_counter() - started
        plan = Plan(context.solution) if outcome is SearchOutcome.FOUND else None
        reason = cancellation.reason if outcome is SearchOutcome.CANCELLED and cancellation else None
        LOGGER.info(
            "Search %s after %s expansions in %s pass(es) (max depth %s, plan length %s)",
            outcome.value,
            context.stats.expanded,
            context.stats.passes,
            max_depth,
            len(plan) if plan is not None else "-",
        )
        return PlanResult(outcome, plan, context.stats, max_depth, reason)

    def _expand(self, node: SearchNode, depth: int, context: _Pass) -> Tuple[SearchOutcome, float]:
        """Search below ``node``; also return the shallowest path depth it ran into."""

        if node.state.satisfies(context.goal):
            context.solution = node.plan
            return SearchOutcome.FOUND, math.inf
        if node.remaining == 0:
            context.cutoff = True
            return SearchOutcome.DEPTH_EXCEEDED, math.inf
        estimate = self.bound.estimate(node.state, context.goal)
        if estimate == math.inf:
            return SearchOutcome.EXHAUSTED, math.inf
        if estimate > node.remaining:
            context.cutoff = True
            return SearchOutcome.DEPTH_EXCEEDED, math.inf
        if context.cancellation is not None and context.cancellation.should_stop(context.stats.expanded):
            return SearchOutcome.CANCELLED, math.inf

        context.stats.expanded += 1
        shallowest = math.inf
        cutoff_before = context.cutoff
        context.cutoff = False
        for action in self.grounder.applicable_actions(node.state):
            successor = action.apply(node.state)
            context.stats.generated += 1
            on_path = context.path.get(successor)
            if on_path is not None:
                context.stats.pruned += 1
                shallowest = min(shallowest, on_path)
                continue
            failed_with = context.failures.get(successor, -1)
            if failed_with >= node.remaining - 1:
                context.stats.pruned += 1
                if failed_with != math.inf:
                    context.cutoff = True
                continue

            context.path[successor] = depth + 1
            outcome, reached = self._expand(node.child(action, successor), depth + 1, context)
            del context.path[successor]
            shallowest = min(shallowest, reached)
            if outcome is SearchOutcome.FOUND or outcome is SearchOutcome.CANCELLED:
                context.cutoff = context.cutoff or cutoff_before
                return outcome, shallowest

        # only cache failures that did not depend on a state above this node
        hit_cutoff = context.cutoff
        if shallowest >= depth:
            budget = node.remaining if hit_cutoff else math.inf
            context.failures[node.state] = max(context.failures.get(node.state, -1), budget)
        context.cutoff = hit_cutoff or cutoff_before
        return (SearchOutcome.DEPTH_EXCEEDED if hit_cutoff else SearchOutcome.EXHAUSTED), shallowest
