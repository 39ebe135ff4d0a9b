"""Mini README: In-memory fleet simulation used for previews and displays.

Structure:
    * DroneStatus / PackageStatus - what a display shows for each object.
    * SimulatedFleetExecutor - replays steps by interpreting action names
      and arguments, keeping the last 100 log messages.

Positions come from the domain's location coordinates when present. Energy
follows the domain's cost model; the executor does not check preconditions,
so it should be fed plans produced or validated by the planner.
"""

from __future__ import annotations

from collections import deque
from dataclasses import asdict, dataclass
from datetime import datetime
from typing import Any, Deque, Dict, List, Optional, Tuple

from ...domain import Domain
from ...logging_utils import get_logger
from ...state import State
from ..base import ExecutionStep, StepExecutor, action_parts
from ..registry import REGISTRY

LOGGER = get_logger(__name__)

LOG_LIMIT = 100


@dataclass(slots=True)
class DroneStatus:
    drone_id: str
    location: Optional[str]
    position: Optional[Tuple[float, float]]
    energy: int
    max_energy: int
    activity: str = "idle"


@dataclass(slots=True)
class PackageStatus:
    package_id: str
    location: Optional[str]
    carried_by: Optional[str] = None


class SimulatedFleetExecutor(StepExecutor):
    """Track drone and package status step by step without hardware."""

    executor_name = "simulated"

    def __init__(self, domain: Domain) -> None:
        super().__init__(domain)
        self.drones: Dict[str, DroneStatus] = {}
        self.packages: Dict[str, PackageStatus] = {}
        self.log: Deque[str] = deque(maxlen=LOG_LIMIT)
        self.current_step = 0

    def _position(self, location: Optional[str]) -> Optional[Tuple[float, float]]:
        known = self.domain.locations.get(location) if location is not None else None
        return known.position if known is not None else None

    def add_log_message(self, message: str) -> None:
        self.log.append(f"[{datetime.now().strftime('%H:%M:%S')}] {message}")

    def begin(self, initial_state: State) -> None:
        self.drones.clear()
        self.packages.clear()
        self.log.clear()
        self.current_step = 0
        for drone_id, capacity in self.domain.drones.items():
            location = initial_state.value_of("at_drone", drone_id)
            energy = initial_state.value_of("energy", drone_id)
            if location is None and energy is None:
                continue
            self.drones[drone_id] = DroneStatus(
                drone_id=drone_id,
                location=location,
                position=self._position(location),
                energy=energy if isinstance(energy, int) else capacity,
                max_energy=capacity,
            )
        for package_id in self.domain.packages:
            location = initial_state.value_of("at_package", package_id)
            carrier = next(
                (str(fact.args[0]) for fact in initial_state.facts("holding") if fact.args[1] == package_id),
                None,
            )
            if location is not None or carrier is not None:
                self.packages[package_id] = PackageStatus(package_id, location, carrier)
        self.add_log_message(f"Simulation reset with {len(self.drones)} drone(s) and {len(self.packages)} package(s)")

    def execute(self, step: ExecutionStep) -> None:
        name, args = action_parts(step.action)
        drone = self.drones.get(str(args[0])) if args else None
        if drone is None:
            LOGGER.warning("Skipping step %s: unknown drone in %s", step.step_number, step.action)
            self.add_log_message(f"Skipped step {step.step_number}: {step.action}")
            return

        if name == "move" and len(args) == 3:
            destination = str(args[2])
            drone.location = destination
            drone.position = self._position(destination)
            drone.energy = max(0, drone.energy - self.domain.move_cost)
            drone.activity = f"moving to {destination}"
        elif name == "pickup" and len(args) == 3:
            package = self.packages.setdefault(str(args[1]), PackageStatus(str(args[1]), None))
            package.location = None
            package.carried_by = drone.drone_id
            drone.activity = f"picked up {package.package_id}"
        elif name == "drop" and len(args) == 3:
            package = self.packages.setdefault(str(args[1]), PackageStatus(str(args[1]), None))
            if package.carried_by in (None, drone.drone_id):
                package.carried_by = None
                package.location = str(args[2])
            drone.activity = f"dropped {package.package_id}"
        elif name == "recharge":
            drone.energy = min(drone.max_energy, drone.energy + self.domain.recharge_increment)
            drone.activity = "recharging"
        elif name == "recharge_full":
            drone.energy = drone.max_energy
            drone.activity = "recharging"
        else:
            LOGGER.warning("Unrecognised action '%s' in step %s", name, step.step_number)

        self.current_step = step.step_number
        self.add_log_message(f"Executing step {step.step_number}: {step.action}")

    def snapshot(self) -> Dict[str, Any]:
        """Current status of every tracked drone and package."""

        return {
            "current_step": self.current_step,
            "drones": [asdict(status) for status in self.drones.values()],
            "packages": [asdict(status) for status in self.packages.values()],
        }

    def recent_log(self) -> List[str]:
        return list(self.log)


REGISTRY.register(SimulatedFleetExecutor)
