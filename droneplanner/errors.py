"""Mini README: Exception hierarchy shared by every droneplanner layer.

Hierarchy:
    PlannerError (base)
    ├── DomainLoadError      - domain description missing or malformed
    ├── MalformedQueryError  - initial/goal facts cannot be used for a query
    └── InvalidPlanError     - a plan step fails against the simulated state

"No plan found", "depth exceeded" and "cancelled" are ordinary search
outcomes (see ``droneplanner.search.SearchOutcome``) and are therefore not
exceptions. Nothing in the package retries on these errors; callers decide.
"""

from __future__ import annotations

from typing import Any, Dict, Optional


class PlannerError(Exception):
    """Base class carrying a message plus optional diagnostic context."""

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def __str__(self) -> str:
        if not self.context:
            return self.message
        details = ", ".join(f"{key}={value}" for key, value in self.context.items())
        return f"{self.message} ({details})"

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(message={self.message!r}, context={self.context!r})"


class DomainLoadError(PlannerError):
    """The external domain description is missing, malformed or inconsistent."""


class MalformedQueryError(PlannerError):
    """Initial or goal facts failed to parse or reference unknown objects."""


class InvalidPlanError(PlannerError):
    """A plan step's preconditions do not hold in the simulated state."""

    def __init__(
        self,
        message: str,
        *,
        step_index: int,
        action: str,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        merged = {"step": step_index + 1, "action": action}
        merged.update(context or {})
        super().__init__(message, merged)
        self.step_index = step_index
        self.action = action
