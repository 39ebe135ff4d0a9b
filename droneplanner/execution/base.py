"""Mini README: Abstract base classes for consumers that carry out plans.

Structure:
    * ExecutionStep - numbered plan step with a human readable description.
    * describe_action - sentence describing one action for displays.
    * StepExecutor - abstract interface implemented by executors.

Executors receive the initial state once and then one step at a time, so a
display can animate a plan, pause between steps, or forward them to real
vehicles. They interpret actions purely by name and arguments.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple, Union

from ..domain import Domain
from ..grounding import GroundAction
from ..logging_utils import get_logger
from ..state import State, Term, parse_literal

LOGGER = get_logger(__name__)

ActionLike = Union[GroundAction, str]


@dataclass(slots=True)
class ExecutionStep:
    """One numbered step handed to an executor."""

    step_number: int
    action: str
    description: str
    completed: bool = False


def action_parts(action: ActionLike) -> Tuple[str, Tuple[Term, ...]]:
    """Split an action into its name and arguments."""

    if isinstance(action, GroundAction):
        return action.name, action.args
    literal = parse_literal(action)
    return literal.predicate, literal.args


def describe_action(action: ActionLike) -> str:
    name, args = action_parts(action)
    if name == "move" and len(args) == 3:
        return f"{args[0]} flies from {args[1]} to {args[2]}"
    if name == "pickup" and len(args) == 3:
        return f"{args[0]} picks up {args[1]} at {args[2]}"
    if name == "drop" and len(args) == 3:
        return f"{args[0]} drops {args[1]} at {args[2]}"
    if name == "recharge" and args:
        return f"{args[0]} recharges"
    if name == "recharge_full" and args:
        return f"{args[0]} recharges to full capacity"
    return str(action)


class StepExecutor(ABC):
    """Base interface for plan executors."""

    executor_name: str = "generic"

    def __init__(self, domain: Domain) -> None:
        self.domain = domain
        self.steps: List[ExecutionStep] = []
        LOGGER.debug("Initialising %s executor for domain '%s'", self.executor_name, domain.name)

    @abstractmethod
    def begin(self, initial_state: State) -> None:
        """Reset the executor to ``initial_state`` before the first step."""

    @abstractmethod
    def execute(self, step: ExecutionStep) -> None:
        """Carry out a single step."""

    def prepare(self, plan: Iterable[ActionLike]) -> List[ExecutionStep]:
        self.steps = [
            ExecutionStep(index, str(action), describe_action(action))
            for index, action in enumerate(plan, start=1)
        ]
        return self.steps

    def run(self, plan: Iterable[ActionLike], initial_state: Optional[State] = None) -> List[ExecutionStep]:
        """Execute every step of ``plan`` in order and return the steps."""

        if initial_state is not None:
            self.begin(initial_state)
        for step in self.prepare(plan):
            self.execute(step)
            step.completed = True
        LOGGER.info("%s executor finished %s steps", self.executor_name, len(self.steps))
        return self.steps

    def metadata(self) -> Dict[str, str]:
        """Return diagnostic metadata for UI displays."""

        return {
            "executor": self.executor_name,
            "domain": self.domain.name,
            "steps": str(len(self.steps)),
            "completed": str(sum(1 for step in self.steps if step.completed)),
        }
