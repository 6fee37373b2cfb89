"""Tests for distance-based difficulty scaling."""

import random

import pytest

from racecore.config.vehicles import INITIAL_SPEED
from racecore.systems.difficulty import (
    calculate_difficulty,
    calculate_game_speed,
    get_difficulty_tier,
    get_level_config,
    get_obstacle_count,
    get_obstacle_spawn_chance,
)


class TestCalculateDifficulty:
    def test_level_is_one_plus_whole_kilometres(self) -> None:
        assert calculate_difficulty(0).level == 1
        assert calculate_difficulty(999).level == 1
        assert calculate_difficulty(2500).level == 3

    def test_obstacle_interval_shrinks_to_floor(self) -> None:
        assert calculate_difficulty(0).obstacle_spawn_interval_ms == 2000
        assert calculate_difficulty(10_000).obstacle_spawn_interval_ms == 1500
        assert calculate_difficulty(1_000_000).obstacle_spawn_interval_ms == 500


class TestGameSpeed:
    def test_starts_at_initial_speed(self) -> None:
        assert calculate_game_speed(0, 12.0) == pytest.approx(INITIAL_SPEED)

    def test_plateaus_after_curve_distance(self) -> None:
        assert calculate_game_speed(10_000, 12.0) == calculate_game_speed(80_000, 12.0)
        assert calculate_game_speed(10_000, 12.0) < 12.0

    def test_monotonic_in_distance(self) -> None:
        speeds = [calculate_game_speed(d, 12.0) for d in range(0, 12_000, 1000)]
        assert speeds == sorted(speeds)

    def test_level_multiplier_scales_speed(self) -> None:
        hard = get_level_config("hard").speed_multiplier
        assert calculate_game_speed(5000, 12.0, hard) == pytest.approx(
            calculate_game_speed(5000, 12.0) * hard
        )


class TestSpawnScaling:
    def test_spawn_chance_capped(self) -> None:
        assert get_obstacle_spawn_chance(calculate_difficulty(0)) == pytest.approx(0.725)
        assert get_obstacle_spawn_chance(calculate_difficulty(50_000)) == 0.95

    def test_single_obstacle_below_level_five(self, seeded_rng) -> None:
        difficulty = calculate_difficulty(3000)
        assert {get_obstacle_count(difficulty, seeded_rng) for _ in range(200)} == {1}

    def test_pairs_appear_from_level_five(self) -> None:
        difficulty = calculate_difficulty(4000)
        counts = {get_obstacle_count(difficulty, random.Random(seed)) for seed in range(50)}
        assert counts == {1, 2}


@pytest.mark.parametrize(
    "level, tier",
    [(1, "Easy"), (2, "Easy"), (3, "Medium"), (5, "Medium"), (8, "Hard"), (9, "Extreme")],
)
def test_difficulty_tier(level, tier) -> None:
    assert get_difficulty_tier(level) == tier


def test_unknown_level_raises() -> None:
    with pytest.raises(KeyError):
        get_level_config("nightmare")
