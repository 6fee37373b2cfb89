"""Pytest configuration and fixtures for Lane Rush tests."""

import random

import pytest


@pytest.fixture
def seeded_rng():
    """Provide a deterministic RNG for tests."""
    return random.Random(42)


@pytest.fixture
def save_data():
    """Save data over an in-memory store."""
    from racecore.persistence import MemoryStore, SaveData

    return SaveData(MemoryStore())


@pytest.fixture
def engine(save_data):
    """Setup an idle engine with a deterministic seed and a vehicle loaded."""
    from racecore.config.vehicles import get_preset
    from racecore.simulation import SimulationEngine

    engine = SimulationEngine(seed=42, save_data=save_data)
    engine.load_vehicle(get_preset("sedan"))
    return engine


@pytest.fixture
def playing_engine(engine):
    """A started engine with random spawning switched off.

    Tests place obstacles and power-ups by hand, so the road stays
    exactly as the test arranged it.
    """
    engine.set_system_enabled("Spawn", False)
    engine.start(now_ms=0.0)
    return engine


@pytest.fixture
def tick_context():
    """Build a TickContext for calling systems directly."""
    from racecore.update_phases import TickContext

    def _make(frame: int = 0, now_ms: float = 0.0, dt_ms: float = 1000.0 / 60):
        return TickContext(frame=frame, dt_ms=dt_ms, now_ms=now_ms)

    return _make
