"""Lane Rush simulation core.

The core owns the fixed-step simulation of a lane-racing game: vehicle
integration, spawning, collision resolution, the power-up/combo registry,
boss battles and the slot machine. Rendering, UI and remote persistence
are collaborators that only see snapshots, events and small interfaces.
"""

from racecore.simulation import GameSnapshot, SimulationEngine

__all__ = ["GameSnapshot", "SimulationEngine"]
