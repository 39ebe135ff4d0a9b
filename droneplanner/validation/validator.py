"""Mini README: Forward simulation and validation of plans.

Structure:
    * SimulationTrace - states visited while replaying a plan.
    * PlanValidator - checks each step's preconditions, applies it, and
      optionally checks the goal on the final state.

Steps may be ``GroundAction`` objects produced by the search or textual
actions such as ``move(drone1, warehouse1, crossroad1)``. Textual steps are
re-bound against the simulated state, so an energy literal is always read
from the state rather than trusted from the caller.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Union

from ..domain import Domain
from ..errors import InvalidPlanError, MalformedQueryError
from ..grounding import ActionGrounder, GroundAction
from ..logging_utils import get_logger
from ..state import Literal, State, parse_literal

LOGGER = get_logger(__name__)

PlanStep = Union[GroundAction, str]


@dataclass(slots=True)
class SimulationTrace:
    """Initial state plus the state after every applied step."""

    initial: State
    actions: List[GroundAction] = field(default_factory=list)
    states: List[State] = field(default_factory=list)

    @property
    def final(self) -> State:
        return self.states[-1] if self.states else self.initial

    def __len__(self) -> int:
        return len(self.actions)


class PlanValidator:
    """Replay plans against a domain."""

    def __init__(self, domain: Domain, grounder: Optional[ActionGrounder] = None) -> None:
        self.domain = domain
        self.grounder = grounder or ActionGrounder(domain)

    def apply_step(self, state: State, step: PlanStep, step_index: int = 0) -> GroundAction:
        """Resolve ``step`` in ``state`` and raise if it cannot be applied.

        Returns the action bound against ``state``; apply it with
        ``GroundAction.apply``.
        """

        text = str(step)
        try:
            action = self._resolve(state, step)
        except MalformedQueryError as error:
            raise InvalidPlanError(
                "Plan step is not a well formed action",
                step_index=step_index,
                action=text,
                context={"reason": error.message},
            ) from error
        except KeyError as error:
            raise InvalidPlanError(
                "Plan step names an unknown action",
                step_index=step_index,
                action=text,
                context={"reason": error.args[0] if error.args else text},
            ) from error
        except ValueError as error:
            raise InvalidPlanError(
                "Plan step has the wrong number of arguments",
                step_index=step_index,
                action=text,
                context={"reason": str(error)},
            ) from error

        problems = self.grounder.violations(action, state)
        if problems:
            raise InvalidPlanError(
                "Plan step preconditions do not hold",
                step_index=step_index,
                action=str(action),
                context={"unmet": "; ".join(problems)},
            )
        return action

    def simulate(self, initial: State, plan: Iterable[PlanStep]) -> SimulationTrace:
        """Apply every step in order, failing at the first invalid one."""

        trace = SimulationTrace(initial=initial)
        state = initial
        for index, step in enumerate(plan):
            action = self.apply_step(state, step, index)
            state = action.apply(state)
            trace.actions.append(action)
            trace.states.append(state)
        return trace

    def validate(
        self,
        initial: State,
        plan: Iterable[PlanStep],
        goal: Optional[Iterable[Literal]] = None,
    ) -> State:
        """Simulate ``plan`` and, when ``goal`` is given, require it at the end."""

        trace = self.simulate(initial, plan)
        if goal is not None:
            goal_literals = list(goal)
            missing = [
                literal
                for literal in goal_literals
                if literal not in trace.final
                and not (self.domain.is_static(literal.predicate) and self.domain.holds_static(literal))
            ]
            if missing:
                raise InvalidPlanError(
                    "Plan does not reach the goal",
                    step_index=max(len(trace) - 1, 0),
                    action=str(trace.actions[-1]) if trace.actions else "<empty plan>",
                    context={"missing": ", ".join(str(literal) for literal in missing)},
                )
        LOGGER.info("Validated plan of %s steps", len(trace))
        return trace.final

    def _resolve(self, state: State, step: PlanStep) -> GroundAction:
        if isinstance(step, GroundAction):
            return self.grounder.instantiate(step.name, step.args, state)
        literal = parse_literal(step)
        return self.grounder.instantiate(literal.predicate, literal.args, state)

