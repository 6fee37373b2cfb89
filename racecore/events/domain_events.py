"""Domain event definitions.

Events are frozen dataclasses carrying everything a handler needs, so
subscribers never reach back into live engine state.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class VehicleHitEvent:
    """The vehicle lost a heart.

    Attributes:
        hearts_left: Hearts remaining after the hit
        source: "obstacle" or "boss_attack"
        frame: Simulation frame when this occurred
    """

    hearts_left: int
    source: str
    frame: int


@dataclass(frozen=True)
class ComboCraftedEvent:
    """Two power-ups were combined."""

    source_type: str
    picked_type: str
    combo_type: str
    frame: int


@dataclass(frozen=True)
class BossEncounterStartedEvent:
    """A boss battle began at a distance milestone."""

    boss_number: int
    boss_name: str
    distance: float
    frame: int


@dataclass(frozen=True)
class BossDefeatedEvent:
    """A boss was defeated.

    Attributes:
        boss_number: Ordinal of the boss (1 for the first milestone)
        coin_reward: Coins granted
        elapsed_time: Battle duration in simulation ms
    """

    boss_number: int
    coin_reward: int
    elapsed_time: float
    frame: int


@dataclass(frozen=True)
class SlotSettledEvent:
    """A slot machine spin was settled."""

    results: tuple
    won: bool
    payout: int
    failure_streak: int
    frame: int


@dataclass(frozen=True)
class GameOverEvent:
    """The session ended. Carries the finished-game summary.

    Attributes:
        summary: Plain dict with distance, score, coins, statistics and
            the other fields persisted for the finished game
        vehicle: Vehicle configuration dict, if a vehicle was loaded
    """

    summary: Dict[str, Any]
    vehicle: Optional[Dict[str, Any]]
    frame: int
