"""Boss battle configuration.

A boss appears at every distance milestone. Later phases attack faster but
refresh reward power-ups less reliably.
"""

from dataclasses import dataclass
from typing import Dict, List, Tuple

from racecore.config.powerups import PowerUpType

BOSS_MILESTONE_DISTANCE = 100000.0  # Distance between boss encounters
BOSS_TRIGGER_WINDOW = 100.0  # Detection window after each milestone
BOSS_BASE_HEALTH = 1000
BOSS_HEALTH_INCREMENT = 500  # Extra health per boss ordinal
BOSS_WIDTH = 120
BOSS_HEIGHT = 80
BOSS_Y_POSITION = 100
BOSS_HORIZONTAL_SPEED = 2.0

BOSS_COIN_REWARD_PER_ORDINAL = 1000
BOSS_HEAL_ON_DEFEAT = 1
BOSS_REWARD_WAVE_SIZE = 5
BOSS_REWARD_WAVE_SPACING = 120.0  # Vertical stagger between wave power-ups


@dataclass(frozen=True)
class BossPhaseConfig:
    """Cadence of one boss phase.

    Attributes:
        health_percent: Nominal health fraction the phase is tuned for
        attack_interval_ms: Time between attacks
        power_up_spawn_interval_ms: Time between reward refresh attempts
        power_up_spawn_chance: Probability that a refresh attempt spawns
    """

    health_percent: float
    attack_interval_ms: float
    power_up_spawn_interval_ms: float
    power_up_spawn_chance: float


BOSS_PHASES: Dict[int, BossPhaseConfig] = {
    1: BossPhaseConfig(0.5, 3000.0, 8000.0, 0.9),
    2: BossPhaseConfig(0.3, 2000.0, 12000.0, 0.6),
    3: BossPhaseConfig(0.2, 1000.0, 20000.0, 0.3),
}

# Evaluated top-down, tightest threshold first; anything above falls to phase 1
BOSS_PHASE_THRESHOLDS: List[Tuple[float, int]] = [
    (BOSS_PHASES[3].health_percent, 3),
    (BOSS_PHASES[2].health_percent, 2),
]
DEFAULT_BOSS_PHASE = 1

# Attack geometry
SPREAD_BULLET_COUNT = 3
SPREAD_BULLET_GAP = 30.0
SPREAD_BULLET_SIZE = (6, 12)
SPREAD_BULLET_SPEED = 8.0
BEAM_WIDTH = 30
BEAM_LIFETIME_MS = 600.0
BARRAGE_COUNT = 3
BARRAGE_SIZE = (50, 80)
BARRAGE_SPEED = 5.0

BOSS_COLORS = ["#ff006e", "#00f5ff", "#ffbe0b", "#8338ec", "#06ffa5"]
BOSS_NAMES = [
    "Cyber Tyrant",
    "Neon Hunter",
    "Quantum Wrecker",
    "Plasma Overlord",
    "Data Devourer",
]

# Reward pool during and after a battle
BOSS_POWER_UP_TYPES: List[PowerUpType] = [
    PowerUpType.HEART,
    PowerUpType.MACHINE_GUN,
    PowerUpType.INVINCIBILITY,
    PowerUpType.SCORE_MULTIPLIER,
    PowerUpType.SPEED_BOOST,
    PowerUpType.COIN,
]
