"""Boss entity and its attack projectiles."""

from dataclasses import dataclass
from enum import Enum

from racecore.entities.base import Entity


class AttackPattern(str, Enum):
    """Named boss attack layouts."""

    SPREAD = "spread"  # Narrow multi-bullet spread
    BEAM = "beam"  # Full-height wide beam
    BARRAGE = "barrage"  # Falling objects across lanes


@dataclass
class Boss(Entity):
    """A boss hovering near the top of the road.

    Attributes:
        number: Ordinal of this boss (1 for the first milestone)
        health: Current health
        max_health: Health at spawn
        phase: 1-3, recomputed from the health fraction every tick
        last_attack_time: Simulation ms of the latest attack
        attack_pattern: Pattern used by the latest attack
        velocity_x: Horizontal speed
        direction: +1 moving right, -1 moving left
    """

    number: int = 1
    name: str = ""
    color: str = "#ff006e"
    health: float = 0.0
    max_health: float = 1.0
    phase: int = 1
    last_attack_time: float = 0.0
    attack_pattern: AttackPattern = AttackPattern.SPREAD
    velocity_x: float = 0.0
    direction: int = 1

    @property
    def health_fraction(self) -> float:
        return self.health / self.max_health if self.max_health > 0 else 0.0


@dataclass
class BossAttack(Entity):
    """One attack object. Beams stay in place until they expire."""

    pattern: AttackPattern = AttackPattern.SPREAD
    speed: float = 0.0
    active: bool = True
    damage: int = 1
    expires_at: float = 0.0  # Simulation ms; only used by beams
