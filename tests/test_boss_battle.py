"""Tests for boss battle triggering, phases and resolution."""

import pytest

from racecore.config.boss import BOSS_MILESTONE_DISTANCE
from racecore.entities import AttackPattern
from racecore.events import BossDefeatedEvent, BossEncounterStartedEvent
from racecore.state_machine import BossBattleStatus
from racecore.systems.boss_battle import (
    compute_boss_phase,
    create_boss,
    create_boss_attack,
    move_boss,
    should_trigger_boss_battle,
)


def enter_battle(engine):
    """Put the engine right at the first milestone and run one tick."""
    engine.state.distance = BOSS_MILESTONE_DISTANCE
    engine.tick()
    assert engine.state.boss_battle.active
    return engine.state.boss_battle


class TestTrigger:
    def test_no_boss_before_first_milestone(self) -> None:
        assert not should_trigger_boss_battle(50_000, 0)

    def test_triggers_inside_window_only(self) -> None:
        assert should_trigger_boss_battle(100_000, 0)
        assert should_trigger_boss_battle(100_099, 0)
        assert not should_trigger_boss_battle(100_100, 0)

    def test_milestone_fires_once(self) -> None:
        assert not should_trigger_boss_battle(100_050, 100_000)
        assert should_trigger_boss_battle(200_010, 100_000)

    def test_battle_start_is_idempotent(self, playing_engine) -> None:
        started = []
        playing_engine.events.subscribe(BossEncounterStartedEvent, started.append)

        battle = enter_battle(playing_engine)
        playing_engine.run_ticks(5)

        assert len(started) == 1
        assert len(playing_engine.state.statistics.boss_records) == 1
        assert battle.last_milestone == BOSS_MILESTONE_DISTANCE
        assert playing_engine.boss_battle.status == BossBattleStatus.ACTIVE

    def test_battle_clears_obstacles_and_freezes_distance(self, playing_engine) -> None:
        from racecore.entities import Obstacle

        playing_engine.state.obstacles = [
            Obstacle(x=100, y=0, width=45, height=80, type="car", speed=2.0)
        ]
        enter_battle(playing_engine)
        assert playing_engine.state.obstacles == []

        distance = playing_engine.state.distance
        playing_engine.run_ticks(10)
        assert playing_engine.state.distance == distance


class TestBossPhases:
    def test_health_scales_with_ordinal(self) -> None:
        assert create_boss(100_000).max_health == 1500
        assert create_boss(300_000).max_health == 2500
        assert create_boss(200_000).name.endswith("Lv.2")

    @pytest.mark.parametrize(
        "fraction, phase",
        [(1.0, 1), (0.55, 1), (0.31, 1), (0.3, 2), (0.28, 2), (0.2, 3), (0.05, 3)],
    )
    def test_compute_phase(self, fraction, phase) -> None:
        assert compute_boss_phase(fraction) == phase

    def test_damage_jumps_straight_to_phase_two(self, playing_engine) -> None:
        """55% -> 28% health lands in phase 2 without passing through anything else."""
        battle = enter_battle(playing_engine)
        boss = battle.boss
        boss.health = boss.max_health * 0.55
        boss.phase = compute_boss_phase(boss.health_fraction)
        assert boss.phase == 1

        defeated = playing_engine.boss_battle.damage(boss.max_health * 0.27)

        assert not defeated
        assert boss.phase == 2

    def test_boss_bounces_off_road_edges(self) -> None:
        boss = create_boss(100_000)
        for _ in range(200):
            move_boss(boss)
        assert boss.direction in (1, -1)
        assert 60 <= boss.x <= 60 + 280 - boss.width

    def test_attack_shapes(self, seeded_rng) -> None:
        boss = create_boss(100_000)
        assert len(create_boss_attack(boss, AttackPattern.SPREAD, 0, seeded_rng)) == 3
        beam = create_boss_attack(boss, AttackPattern.BEAM, 0, seeded_rng)
        assert len(beam) == 1
        assert beam[0].expires_at == 600.0
        assert len(create_boss_attack(boss, AttackPattern.BARRAGE, 0, seeded_rng)) == 3


class TestResolution:
    def test_defeat_pays_heals_and_closes_record(self, playing_engine) -> None:
        defeated_events = []
        playing_engine.events.subscribe(BossDefeatedEvent, defeated_events.append)
        state = playing_engine.state
        state.coins = 0
        state.hearts = 2

        battle = enter_battle(playing_engine)
        playing_engine.run_ticks(3)
        state.power_ups = []
        assert playing_engine.boss_battle.damage(battle.boss.health)

        assert state.coins == 1000
        assert state.hearts == 3
        assert len(state.power_ups) == 5
        assert not battle.active
        assert battle.boss is None
        assert battle.boss_defeated
        assert playing_engine.boss_battle.status == BossBattleStatus.INACTIVE

        records = state.statistics.boss_records
        assert len(records) == 1
        assert records[0].defeated is True
        assert records[0].elapsed_time >= 0
        assert len(defeated_events) == 1
        assert defeated_events[0].coin_reward == 1000

    def test_bullets_damage_boss(self, playing_engine) -> None:
        from racecore.entities import Bullet

        battle = enter_battle(playing_engine)
        boss = battle.boss
        health = boss.health
        cx, cy = boss.center
        playing_engine.state.bullets = [Bullet(x=cx, y=cy + 10, width=4, height=10, speed=15.0)]

        playing_engine.tick()

        assert boss.health == health - 20

    def test_game_over_closes_record_undefeated(self, playing_engine) -> None:
        enter_battle(playing_engine)
        playing_engine.run_ticks(2)

        playing_engine.end_game()

        record = playing_engine.state.statistics.boss_records[-1]
        assert record.defeated is False
        assert record.elapsed_time >= 0
        assert playing_engine.boss_battle.status == BossBattleStatus.RESOLVED

    def test_restart_after_abandon_resets_battle(self, playing_engine) -> None:
        enter_battle(playing_engine)
        playing_engine.end_game()

        playing_engine.start(now_ms=0.0)

        assert playing_engine.boss_battle.status == BossBattleStatus.INACTIVE
        assert not playing_engine.state.boss_battle.active
