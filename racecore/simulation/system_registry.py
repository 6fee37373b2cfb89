"""System registration and management.

Systems run phase by phase (see ``UpdatePhase``); within a phase they run
in registration order. Systems can be enabled or disabled at runtime
without removal.
"""

import logging
from typing import TYPE_CHECKING, Any, Dict, Iterator, List, Optional

from racecore.update_phases import UpdatePhase

if TYPE_CHECKING:
    from racecore.systems.base import BaseSystem

logger = logging.getLogger(__name__)


class SystemRegistry:
    """Registers simulation systems and yields them in execution order.

    Example:
        registry = SystemRegistry()
        registry.register(spawn_system)
        registry.register(collision_system)

        for phase in UpdatePhase:
            for system in registry.for_phase(phase):
                system.update(ctx)

        registry.set_enabled("Spawn", False)
    """

    def __init__(self) -> None:
        self._systems: List["BaseSystem"] = []

    def register(self, system: "BaseSystem") -> None:
        """Register a system; it must declare its phase with ``@runs_in_phase``."""
        if system.phase is None:
            raise ValueError(f"{system!r} does not declare an update phase")
        self._systems.append(system)
        logger.debug(f"Registered system: {system.name} ({system.phase.name})")

    def get(self, name: str) -> Optional["BaseSystem"]:
        for system in self._systems:
            if system.name == name:
                return system
        return None

    def get_all(self) -> List["BaseSystem"]:
        return self._systems.copy()

    def for_phase(self, phase: UpdatePhase) -> List["BaseSystem"]:
        return [system for system in self._systems if system.phase == phase]

    def set_enabled(self, name: str, enabled: bool) -> bool:
        """Enable or disable a system by name.

        Returns:
            True if the system was found
        """
        system = self.get(name)
        if system is not None:
            system.enabled = enabled
            logger.debug(f"System {name} enabled={enabled}")
            return True
        return False

    def reset_all(self) -> None:
        for system in self._systems:
            system.reset()

    def get_debug_info(self) -> Dict[str, Any]:
        return {system.name: system.get_debug_info() for system in self._systems}

    def __len__(self) -> int:
        return len(self._systems)

    def __iter__(self) -> Iterator["BaseSystem"]:
        return iter(self._systems)

    def __repr__(self) -> str:
        return f"SystemRegistry(systems={[s.name for s in self._systems]})"
