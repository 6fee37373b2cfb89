"""Tests for collision geometry and contact resolution."""

from racecore.config.powerups import PowerUpType, ShieldKind
from racecore.entities import Bullet, Entity, Obstacle
from racecore.events import VehicleHitEvent
from racecore.state_machine import GameStatus
from racecore.systems.collision import (
    check_padded_collision,
    is_off_screen,
    rects_intersect,
    strongest_shield,
)
from racecore.systems.powerups import activate


def obstacle_on(vehicle, dy: float = 0.0) -> Obstacle:
    """A car overlapping the vehicle's current position."""
    return Obstacle(x=vehicle.x, y=vehicle.y + dy, width=45, height=80, type="car", speed=2.0)


class TestGeometry:
    def test_touching_edges_do_not_intersect(self) -> None:
        a = Entity(0, 0, 10, 10)
        b = Entity(10, 0, 10, 10)
        assert not rects_intersect(a, b)
        assert rects_intersect(a, Entity(9, 9, 10, 10))

    def test_padding_shrinks_both_rectangles(self) -> None:
        a = Entity(0, 0, 50, 50)
        b = Entity(40, 0, 50, 50)
        assert rects_intersect(a, b)
        # 10 units of overlap vanish once each side is pulled in by 5
        assert not check_padded_collision(a, b, padding=5)
        assert check_padded_collision(a, Entity(30, 0, 50, 50), padding=5)

    def test_off_screen_after_full_height_past_bottom(self) -> None:
        assert not is_off_screen(Entity(0, 650, 10, 80), canvas_height=600)
        assert is_off_screen(Entity(0, 681, 10, 80), canvas_height=600)


class TestShieldPriority:
    def test_destructive_beats_tracked_and_immune(self, playing_engine) -> None:
        state = playing_engine.state
        state.active_power_ups = [
            activate(PowerUpType.INVINCIBILITY, 0),
            activate(PowerUpType.GOLDEN_BELL, 0),
            activate(PowerUpType.IRON_BODY, 0),
        ]
        assert strongest_shield(state) == ShieldKind.DESTRUCTIVE

    def test_tracked_beats_immune(self, playing_engine) -> None:
        state = playing_engine.state
        state.active_power_ups = [
            activate(PowerUpType.INVINCIBILITY, 0),
            activate(PowerUpType.GOLDEN_BELL, 0),
        ]
        assert strongest_shield(state) == ShieldKind.TRACKED

    def test_no_shield(self, playing_engine) -> None:
        assert strongest_shield(playing_engine.state) == ShieldKind.NONE


class TestObstacleContact:
    """Vehicle vs obstacle resolution inside a full tick."""

    def test_hit_costs_a_heart(self, playing_engine) -> None:
        """At full hearts a hit leaves two hearts, a recovery window and zero speed."""
        state = playing_engine.state
        hits = []
        playing_engine.events.subscribe(VehicleHitEvent, hits.append)
        state.obstacles = [obstacle_on(state.vehicle)]

        playing_engine.tick()

        assert state.hearts == 2
        assert state.is_recovering
        assert state.current_speed == 0.0
        assert state.obstacles == []
        assert playing_engine.status == GameStatus.PLAYING
        assert len(hits) == 1
        assert hits[0].hearts_left == 2

    def test_only_first_obstacle_is_removed(self, playing_engine) -> None:
        state = playing_engine.state
        state.obstacles = [obstacle_on(state.vehicle), obstacle_on(state.vehicle, dy=10)]

        playing_engine.tick()

        assert state.hearts == 2
        assert len(state.obstacles) == 1

    def test_recovery_window_ignores_contact(self, playing_engine) -> None:
        state = playing_engine.state
        state.is_recovering = True
        state.recovery_end_time = 10_000.0
        state.obstacles = [obstacle_on(state.vehicle)]

        playing_engine.tick()

        assert state.hearts == 3
        assert len(state.obstacles) == 1

    def test_last_heart_ends_game_in_same_tick(self, playing_engine) -> None:
        state = playing_engine.state
        state.hearts = 1
        state.obstacles = [obstacle_on(state.vehicle)]

        playing_engine.tick()

        assert state.hearts == 0
        assert playing_engine.status == GameStatus.GAME_OVER
        assert state.status == GameStatus.GAME_OVER

        frame = playing_engine.frame_count
        playing_engine.tick()
        assert playing_engine.frame_count == frame

    def test_immune_shield_ignores_contact(self, playing_engine) -> None:
        state = playing_engine.state
        state.active_power_ups = [activate(PowerUpType.INVINCIBILITY, 0)]
        state.obstacles = [obstacle_on(state.vehicle)]

        playing_engine.tick()

        assert state.hearts == 3
        assert len(state.obstacles) == 1

    def test_destructive_shield_destroys_for_coins(self, playing_engine) -> None:
        state = playing_engine.state
        state.coins = 0
        state.active_power_ups = [activate(PowerUpType.IRON_BODY, 0)]
        state.obstacles = [obstacle_on(state.vehicle), obstacle_on(state.vehicle, dy=10)]

        playing_engine.tick()

        assert state.hearts == 3
        assert state.obstacles == []
        assert state.coins == 20
        assert state.destroyed_obstacle_count == 2
        assert state.statistics.total_obstacles_destroyed == 2

    def test_fire_wheel_extends_on_destroy(self, playing_engine) -> None:
        state = playing_engine.state
        state.active_power_ups = [activate(PowerUpType.INVINCIBLE_FIRE_WHEEL, 0)]
        before = state.active_power_ups[0].remaining_time
        state.obstacles = [obstacle_on(state.vehicle)]

        playing_engine.tick()

        entry = state.find_active(PowerUpType.INVINCIBLE_FIRE_WHEEL)
        assert entry.remaining_time > before

    def test_golden_bell_records_breach(self, playing_engine) -> None:
        state = playing_engine.state
        state.active_power_ups = [activate(PowerUpType.GOLDEN_BELL, 0)]
        state.obstacles = [obstacle_on(state.vehicle)]

        playing_engine.tick()

        assert state.hearts == 3
        assert state.golden_bell_breached is True
        assert len(state.obstacles) == 1


class TestBulletsAndPickups:
    def test_bullet_destroys_obstacle(self, playing_engine) -> None:
        state = playing_engine.state
        state.coins = 0
        target = Obstacle(x=150, y=100, width=45, height=80, type="car", speed=2.0)
        state.obstacles = [target]
        # Placed so it still overlaps after one tick of movement
        state.bullets = [Bullet(x=170, y=150, width=4, height=10, speed=15.0)]

        playing_engine.tick()

        assert state.obstacles == []
        assert state.bullets == []
        assert state.coins == 10

    def test_vehicle_collects_power_up(self, playing_engine) -> None:
        from racecore.systems.spawning import create_power_up

        state = playing_engine.state
        power_up = create_power_up(PowerUpType.MAGNET, state.vehicle.lane, y=state.vehicle.y)
        state.power_ups = [power_up]

        playing_engine.tick()

        assert state.power_ups == []
        assert state.has_active(PowerUpType.MAGNET)
        assert state.statistics.stat_for(PowerUpType.MAGNET).collected == 1
