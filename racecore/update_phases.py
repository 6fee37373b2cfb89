"""Update phase definitions for explicit execution ordering.

Every tick runs the same phases in the same order. Ordering matters for
balance: obstacles spawned this tick are eligible for collision this
tick, and power-ups expire only after collisions have consulted them.

Systems declare their phase with ``@runs_in_phase`` and the engine runs
them phase by phase; within a phase, registration order applies.
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import TYPE_CHECKING, Callable, Dict, Optional

__all__ = [
    "UpdatePhase",
    "TickContext",
    "PHASE_DESCRIPTIONS",
    "runs_in_phase",
    "get_system_phase",
]

if TYPE_CHECKING:
    from racecore.systems.base import BaseSystem


class UpdatePhase(Enum):
    """Phases of a simulation tick.

    1. FRAME_START: Speed, distance, score and difficulty level
    2. ENTITY_ACT: Vehicle steering and entity movement
    3. SPAWN: Obstacles and power-ups
    4. BOSS: Boss battle entry, phases, attacks and rewards
    5. COLLISION: Contact resolution and pickups
    6. POWER_UPS: Active effect hooks and decay
    7. FRAME_END: Recovery window and statistics
    """

    FRAME_START = auto()
    ENTITY_ACT = auto()
    SPAWN = auto()
    BOSS = auto()
    COLLISION = auto()
    POWER_UPS = auto()
    FRAME_END = auto()


PHASE_DESCRIPTIONS: Dict[UpdatePhase, str] = {
    UpdatePhase.FRAME_START: "Advancing speed, distance and score",
    UpdatePhase.ENTITY_ACT: "Moving vehicle, obstacles, power-ups and bullets",
    UpdatePhase.SPAWN: "Spawning obstacles and power-ups",
    UpdatePhase.BOSS: "Running the boss battle",
    UpdatePhase.COLLISION: "Resolving collisions and pickups",
    UpdatePhase.POWER_UPS: "Applying and decaying active power-ups",
    UpdatePhase.FRAME_END: "Updating recovery and statistics",
}


@dataclass
class TickContext:
    """Context passed to systems for one tick.

    Attributes:
        frame: Tick counter since start
        dt_ms: Length of this tick in simulation ms
        now_ms: Simulation time at the start of this tick
        phase: Phase currently executing
    """

    frame: int
    dt_ms: float
    now_ms: float
    phase: UpdatePhase = UpdatePhase.FRAME_START


def runs_in_phase(phase: UpdatePhase) -> Callable:
    """Decorator to declare which phase a system runs in.

    Example:
        @runs_in_phase(UpdatePhase.COLLISION)
        class CollisionSystem(BaseSystem):
            ...
    """

    def decorator(cls):
        cls._phase = phase
        return cls

    return decorator


def get_system_phase(system: "BaseSystem") -> Optional[UpdatePhase]:
    """Get the phase a system is declared to run in."""
    return getattr(system, "_phase", None)
