"""Base class for simulation systems.

Each system owns one concern of the tick (spawning, collisions, the boss
battle...). Systems hold a reference to the engine that created them and
read and write the engine's single ``GameState``; they never keep game
state of their own beyond timers and per-tick counters.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Dict, Optional

__all__ = [
    "SystemResult",
    "BaseSystem",
]

if TYPE_CHECKING:
    from racecore.simulation.engine import SimulationEngine
    from racecore.update_phases import TickContext, UpdatePhase


@dataclass
class SystemResult:
    """Result of a system update.

    Attributes:
        entities_spawned: Number of new entities created
        entities_removed: Number of entities removed
        skipped: Whether the update was skipped (system disabled)
        details: System-specific details
    """

    entities_spawned: int = 0
    entities_removed: int = 0
    skipped: bool = False
    details: Dict[str, Any] = field(default_factory=dict)

    @staticmethod
    def skipped_result() -> "SystemResult":
        return SystemResult(skipped=True)

    @staticmethod
    def empty() -> "SystemResult":
        return SystemResult()


class BaseSystem(ABC):
    """Abstract base class for all simulation systems.

    Example:
        @runs_in_phase(UpdatePhase.SPAWN)
        class SpawnSystem(BaseSystem):
            def __init__(self, engine):
                super().__init__(engine, "Spawn")

            def _do_update(self, ctx):
                ...
    """

    _phase: Optional["UpdatePhase"] = None

    def __init__(self, engine: "SimulationEngine", name: str) -> None:
        self._engine = engine
        self._name = name
        self._enabled = True
        self._update_count = 0

    @property
    def name(self) -> str:
        return self._name

    @property
    def enabled(self) -> bool:
        return self._enabled

    @enabled.setter
    def enabled(self, value: bool) -> None:
        self._enabled = value

    @property
    def engine(self) -> "SimulationEngine":
        return self._engine

    @property
    def phase(self) -> Optional["UpdatePhase"]:
        return self._phase

    def update(self, ctx: "TickContext") -> SystemResult:
        """Run the system for one tick if it is enabled."""
        if not self._enabled:
            return SystemResult.skipped_result()

        result = self._do_update(ctx)
        self._update_count += 1
        if result is None:
            return SystemResult.empty()
        return result

    def reset(self) -> None:
        """Clear per-session timers. Called on engine start and reset."""

    @abstractmethod
    def _do_update(self, ctx: "TickContext") -> Optional[SystemResult]:
        """Implement system-specific update logic."""

    def get_debug_info(self) -> Dict[str, Any]:
        return {
            "name": self._name,
            "enabled": self._enabled,
            "update_count": self._update_count,
            "phase": self._phase.name if self._phase else None,
        }

    def __repr__(self) -> str:
        phase_str = f", phase={self._phase.name}" if self._phase else ""
        return f"{self.__class__.__name__}(name={self._name!r}, enabled={self._enabled}{phase_str})"
