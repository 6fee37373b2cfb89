"""Tests for obstacle and power-up spawning."""

import random

import pytest

from racecore.config.boss import BOSS_MILESTONE_DISTANCE
from racecore.config.powerups import SHOP_SPAWN_TYPES, PowerUpType
from racecore.config.vehicles import get_preset
from racecore.entities import Obstacle
from racecore.simulation import SimulationEngine
from racecore.systems.powerups import activate
from racecore.systems.spawning import create_power_up, is_clear_of_obstacles


class ZeroRandom(random.Random):
    """Every chance succeeds and every draw picks the first option."""

    def random(self) -> float:
        return 0.0


@pytest.fixture
def road(save_data):
    """A started engine whose spawner is driven by hand."""
    engine = SimulationEngine(rng=ZeroRandom(), save_data=save_data)
    engine.load_vehicle(get_preset("sedan"))
    engine.start(now_ms=0.0)
    return engine


@pytest.fixture
def spawn(road, tick_context):
    def _spawn(now_ms: float):
        return road.spawning.update(tick_context(now_ms=now_ms))

    return _spawn


@pytest.fixture
def boss_road(road, tick_context):
    """A road held by a boss, so no obstacles can crowd the power-ups."""
    road.state.distance = BOSS_MILESTONE_DISTANCE
    road.boss_battle.start_battle(tick_context(now_ms=0.0))
    return road


def blocker_at(candidate) -> Obstacle:
    return Obstacle(x=candidate.x, y=candidate.y, width=45, height=80, type="car")


def types_on_road(engine):
    return [p.type for p in engine.state.power_ups]


class TestObstacles:
    def test_one_obstacle_per_event_early_on(self, road, spawn) -> None:
        spawn(2001.0)
        assert len(road.state.obstacles) == 1

    def test_pair_takes_distinct_lanes(self, road, spawn) -> None:
        road.state.distance = 5000

        spawn(2001.0)

        lanes = [o.lane for o in road.state.obstacles]
        assert lanes == [0, 1]

    def test_lanes_never_repeat_within_an_event(self, road, spawn, seeded_rng) -> None:
        road.rng = seeded_rng
        road.state.distance = 5000
        pairs = 0

        for i in range(1, 40):
            road.state.obstacles = []
            spawn(i * 2000.0 + 1)
            lanes = [o.lane for o in road.state.obstacles]
            assert len(lanes) == len(set(lanes))
            pairs += len(lanes) == 2

        assert pairs > 0

    def test_no_obstacles_during_boss_battle(self, boss_road, spawn) -> None:
        for now_ms in (5000.0, 10000.0, 15000.0):
            spawn(now_ms)

        assert boss_road.state.obstacles == []
        assert boss_road.spawning.get_debug_info()["obstacles"] == 0


class TestSeparation:
    def test_separation_window(self) -> None:
        candidate = create_power_up(PowerUpType.COIN, 1)

        def obstacle(dx, dy):
            return Obstacle(x=candidate.x + dx, y=candidate.y + dy, width=45, height=80)

        assert not is_clear_of_obstacles(candidate, [obstacle(0, 249)])
        assert is_clear_of_obstacles(candidate, [obstacle(0, 250)])
        assert not is_clear_of_obstacles(candidate, [obstacle(59, 0)])
        assert is_clear_of_obstacles(candidate, [obstacle(60, 0)])

    def test_crowded_candidate_is_discarded_not_retried(self, road, spawn) -> None:
        road.state.obstacles = [
            blocker_at(create_power_up(PowerUpType.COIN, lane)) for lane in range(3)
        ]

        spawn(2000.0)
        spawn(2100.0)

        assert road.state.power_ups == []
        assert road.spawning.get_debug_info()["discarded"] == 1

        road.state.obstacles = []
        spawn(4000.0)
        assert types_on_road(road) == [PowerUpType.SPEED_BOOST]


class TestShopPool:
    def test_full_pool_without_shield(self, road) -> None:
        assert road.spawning.shop_pool() == SHOP_SPAWN_TYPES

    @pytest.mark.parametrize(
        "shield",
        [
            PowerUpType.IRON_BODY,
            PowerUpType.GOLDEN_BELL,
            PowerUpType.INVINCIBLE_FIRE_WHEEL,
            PowerUpType.ROTATING_SHIELD_GUN,
        ],
    )
    def test_shield_combo_removes_invincibility(self, road, shield) -> None:
        road.state.active_power_ups = [activate(shield, 0.0)]

        pool = road.spawning.shop_pool()

        assert PowerUpType.INVINCIBILITY not in pool
        assert PowerUpType.MACHINE_GUN in pool

    def test_shop_drop_follows_pool(self, boss_road, spawn) -> None:
        spawn(30000.0)
        assert types_on_road(boss_road) == [PowerUpType.SPEED_BOOST, PowerUpType.INVINCIBILITY]

        boss_road.state.power_ups = []
        boss_road.state.active_power_ups = [activate(PowerUpType.IRON_BODY, 30000.0)]
        spawn(60000.0)
        assert types_on_road(boss_road) == [PowerUpType.SPEED_BOOST, PowerUpType.MACHINE_GUN]


class TestHearts:
    def test_no_heart_with_two_hearts_left(self, boss_road, spawn) -> None:
        boss_road.state.hearts = 2
        spawn(10.0)
        assert PowerUpType.HEART not in types_on_road(boss_road)

    def test_heart_attempts_thirty_seconds_apart(self, boss_road, spawn) -> None:
        boss_road.state.hearts = 1

        spawn(10.0)
        assert types_on_road(boss_road).count(PowerUpType.HEART) == 1

        spawn(1500.0)
        spawn(30009.0)
        assert types_on_road(boss_road).count(PowerUpType.HEART) == 1

        spawn(30010.0)
        assert types_on_road(boss_road).count(PowerUpType.HEART) == 2
