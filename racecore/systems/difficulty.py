"""Difficulty scaling.

Pure functions of cumulative distance. The engine recomputes them every
tick; nothing here keeps state.
"""

import math
import random
from dataclasses import dataclass

from racecore.config.difficulty import (
    DIFFICULTY_LEVELS,
    DISTANCE_PER_KM,
    INITIAL_OBSTACLE_INTERVAL_MS,
    MIN_OBSTACLE_INTERVAL_MS,
    OBSTACLE_INTERVAL_DECREMENT_MS,
    SECOND_OBSTACLE_CHANCE,
    SECOND_OBSTACLE_MIN_LEVEL,
    SPEED_CURVE_DISTANCE,
    DifficultyLevelConfig,
)
from racecore.config.vehicles import INITIAL_SPEED


@dataclass(frozen=True)
class Difficulty:
    """Difficulty derived from distance.

    Attributes:
        level: 1 + whole kilometres travelled
        obstacle_spawn_interval_ms: Time between obstacle spawn events
    """

    level: int
    obstacle_spawn_interval_ms: float


def calculate_difficulty(distance: float) -> Difficulty:
    km = max(0.0, distance) / DISTANCE_PER_KM
    return Difficulty(
        level=int(math.floor(km)) + 1,
        obstacle_spawn_interval_ms=max(
            MIN_OBSTACLE_INTERVAL_MS,
            INITIAL_OBSTACLE_INTERVAL_MS - km * OBSTACLE_INTERVAL_DECREMENT_MS,
        ),
    )


def calculate_game_speed(distance: float, max_speed: float, speed_multiplier: float = 1.0) -> float:
    """Base speed on an exponential curve that plateaus at ``max_speed``.

    ``speed_multiplier`` is the player-selected difficulty level factor.
    """
    progress = min(1.0, max(0.0, distance) / SPEED_CURVE_DISTANCE)
    speed = INITIAL_SPEED + (max_speed - INITIAL_SPEED) * (1 - math.exp(-progress * 3))
    return speed * speed_multiplier


def get_obstacle_spawn_chance(difficulty: Difficulty) -> float:
    """Chance that an obstacle spawn event actually spawns: 70% rising to 95%."""
    return min(0.95, 0.7 + difficulty.level * 0.025)


def get_obstacle_count(difficulty: Difficulty, rng: random.Random) -> int:
    if difficulty.level >= SECOND_OBSTACLE_MIN_LEVEL and rng.random() < SECOND_OBSTACLE_CHANCE:
        return 2
    return 1


def get_difficulty_tier(level: int) -> str:
    if level <= 2:
        return "Easy"
    if level <= 5:
        return "Medium"
    if level <= 8:
        return "Hard"
    return "Extreme"


def get_level_config(difficulty_level: str) -> DifficultyLevelConfig:
    """Tuning of a player-selected level; unknown names raise KeyError."""
    return DIFFICULTY_LEVELS[difficulty_level]
