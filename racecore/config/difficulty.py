"""Difficulty scaling constants and per-level tuning."""

from dataclasses import dataclass
from typing import Dict

DISTANCE_PER_KM = 1000.0
INITIAL_OBSTACLE_INTERVAL_MS = 2000.0
MIN_OBSTACLE_INTERVAL_MS = 500.0
OBSTACLE_INTERVAL_DECREMENT_MS = 50.0  # Per km travelled
SPEED_CURVE_DISTANCE = 10000.0  # Speed plateaus after this distance

SECOND_OBSTACLE_MIN_LEVEL = 5
SECOND_OBSTACLE_CHANCE = 0.3


@dataclass(frozen=True)
class DifficultyLevelConfig:
    """Player-selected difficulty.

    Attributes:
        speed_multiplier: Scales the base speed curve
        power_up_chance: Success chance of a basic power-up spawn attempt
        shop_power_up_chance: Success chance of a shop power-up spawn attempt
        heart_chance: Success chance of a heart spawn attempt
    """

    speed_multiplier: float
    power_up_chance: float
    shop_power_up_chance: float
    heart_chance: float


DIFFICULTY_LEVELS: Dict[str, DifficultyLevelConfig] = {
    "easy": DifficultyLevelConfig(0.8, 0.7, 0.5, 0.5),
    "medium": DifficultyLevelConfig(1.0, 0.5, 0.35, 0.3),
    "hard": DifficultyLevelConfig(1.2, 0.3, 0.2, 0.15),
}

DEFAULT_DIFFICULTY_LEVEL = "medium"
