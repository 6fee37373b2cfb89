"""Simulation package - orchestration of a racing session.

- engine.py: The SimulationEngine orchestrator
- state.py: GameState and the immutable GameSnapshot
- loop.py: Fixed-timestep accumulator
- scheduler.py: Deferred work on the simulation clock
- system_registry.py: System registration and phase ordering

Usage:
    from racecore.simulation import SimulationEngine

    engine = SimulationEngine(seed=42)
    engine.load_vehicle(get_preset("sporty"))
    engine.start(now_ms=0)
    engine.advance(now_ms=16.7)
"""

from racecore.simulation.engine import SimulationEngine
from racecore.simulation.state import GameSnapshot, GameState
from racecore.simulation.system_registry import SystemRegistry

__all__ = [
    "GameSnapshot",
    "GameState",
    "SimulationEngine",
    "SystemRegistry",
]
