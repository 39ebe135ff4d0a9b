"""Mini README: Plan execution subsystem package initialiser.

Re-exports key abstractions for the CLI and web handlers. The package is
divided into ``base`` for abstract classes, ``registry`` for plugin
management, and ``providers`` for concrete executors.
"""

from .base import ExecutionStep, StepExecutor, describe_action
from .registry import ExecutorRegistry, REGISTRY
from . import providers  # noqa: F401  # ensure built-in executors register on import
from .providers import SimulatedFleetExecutor

__all__ = [
    "ExecutionStep",
    "ExecutorRegistry",
    "REGISTRY",
    "SimulatedFleetExecutor",
    "StepExecutor",
    "describe_action",
]
