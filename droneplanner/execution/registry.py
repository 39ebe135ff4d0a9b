"""Mini README: Executor registry enabling pluggable plan consumers.

Structure:
    * ExecutorRegistry - maps executor names to ``StepExecutor`` classes and
      replays plans on fresh instances.

Built-in executors register themselves on import of
``droneplanner.execution.providers``; further packages may call
``REGISTRY.register`` with their own subclasses. A name belongs to one
class: registering a different class under a taken name is an error.
"""

from __future__ import annotations

from typing import Dict, Iterable, List, Optional, Type

from ..domain import Domain
from ..logging_utils import get_logger
from ..state import State
from .base import ActionLike, StepExecutor

LOGGER = get_logger(__name__)


class ExecutorRegistry:
    """Named executor classes for one process."""

    def __init__(self) -> None:
        self._executors: Dict[str, Type[StepExecutor]] = {}

    def register(self, executor: Type[StepExecutor]) -> Type[StepExecutor]:
        """Register ``executor`` under its ``executor_name``; usable as a decorator."""

        identifier = executor.executor_name.lower()
        existing = self._executors.get(identifier)
        if existing is not None and existing is not executor:
            raise ValueError(f"Executor name '{identifier}' is already used by {existing.__name__}")
        LOGGER.debug("Registering executor '%s'", identifier)
        self._executors[identifier] = executor
        return executor

    def available_executors(self) -> List[str]:
        return sorted(self._executors)

    def create(self, identifier: str, *, domain: Domain) -> StepExecutor:
        """Instantiate the executor registered as ``identifier``."""

        executor_cls = self._executors.get(identifier.lower())
        if executor_cls is None:
            raise KeyError(f"Unknown executor '{identifier}', available: {', '.join(self.available_executors())}")
        return executor_cls(domain)

    def replay(
        self,
        identifier: str,
        plan: Iterable[ActionLike],
        *,
        domain: Domain,
        initial_state: Optional[State] = None,
    ) -> StepExecutor:
        """Run ``plan`` on a fresh executor and return it for inspection."""

        executor = self.create(identifier, domain=domain)
        steps = executor.run(plan, initial_state)
        LOGGER.info(
            "Replayed %s step(s) on '%s' (%s completed)",
            len(steps),
            identifier,
            sum(1 for step in steps if step.completed),
        )
        return executor


REGISTRY = ExecutorRegistry()
