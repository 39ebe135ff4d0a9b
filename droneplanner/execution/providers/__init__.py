"""Mini README: Built-in step executors.

New executors should subclass ``StepExecutor`` and call
``REGISTRY.register`` during module import to keep them discoverable.
"""

from .simulated import DroneStatus, PackageStatus, SimulatedFleetExecutor

__all__ = ["DroneStatus", "PackageStatus", "SimulatedFleetExecutor"]
