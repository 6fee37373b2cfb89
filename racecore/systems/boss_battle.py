"""Boss battle system.

A boss appears each time cumulative distance crosses a milestone. While
the battle runs, distance is frozen and obstacle spawning is suspended.
The boss bounces across the road, attacks on a phase-dependent cadence
and drops reward power-ups. Defeating it pays coins, heals one heart and
releases a wave of rewards.

Lifecycle (validated by ``create_boss_battle_machine``):
    INACTIVE -> ACTIVE -> RESOLVED -> INACTIVE
"""

import logging
import math
import random
from typing import TYPE_CHECKING, List, Optional

from racecore.config.boss import (
    BARRAGE_COUNT,
    BARRAGE_SIZE,
    BARRAGE_SPEED,
    BEAM_LIFETIME_MS,
    BEAM_WIDTH,
    BOSS_BASE_HEALTH,
    BOSS_COIN_REWARD_PER_ORDINAL,
    BOSS_COLORS,
    BOSS_HEAL_ON_DEFEAT,
    BOSS_HEALTH_INCREMENT,
    BOSS_HEIGHT,
    BOSS_HORIZONTAL_SPEED,
    BOSS_MILESTONE_DISTANCE,
    BOSS_NAMES,
    BOSS_PHASE_THRESHOLDS,
    BOSS_PHASES,
    BOSS_POWER_UP_TYPES,
    BOSS_REWARD_WAVE_SIZE,
    BOSS_REWARD_WAVE_SPACING,
    BOSS_TRIGGER_WINDOW,
    BOSS_WIDTH,
    BOSS_Y_POSITION,
    DEFAULT_BOSS_PHASE,
    SPREAD_BULLET_COUNT,
    SPREAD_BULLET_GAP,
    SPREAD_BULLET_SIZE,
    SPREAD_BULLET_SPEED,
    BossPhaseConfig,
)
from racecore.config.display import CANVAS_HEIGHT, CANVAS_WIDTH, get_lane_positions, road_bounds
from racecore.config.powerups import POWER_UP_SIZE
from racecore.entities import AttackPattern, Boss, BossAttack
from racecore.events import BossDefeatedEvent, BossEncounterStartedEvent
from racecore.simulation.state import MAX_HEARTS, BossRecord, add_coins
from racecore.state_machine import BossBattleStatus, create_boss_battle_machine
from racecore.systems.base import BaseSystem, SystemResult
from racecore.systems.collision import is_off_screen
from racecore.systems.powerups import get_obstacle_time_scale
from racecore.systems.spawning import create_power_up
from racecore.update_phases import TickContext, UpdatePhase, runs_in_phase

if TYPE_CHECKING:
    from racecore.simulation.engine import SimulationEngine

logger = logging.getLogger(__name__)


def should_trigger_boss_battle(distance: float, last_milestone: float) -> bool:
    """True inside the detection window of a milestone that has not fired yet."""
    milestone_index = math.floor(distance / BOSS_MILESTONE_DISTANCE)
    if milestone_index < 1:
        return False
    milestone = milestone_index * BOSS_MILESTONE_DISTANCE
    if milestone <= last_milestone:
        return False
    return milestone <= distance < milestone + BOSS_TRIGGER_WINDOW


def get_boss_number(distance: float) -> int:
    return int(math.floor(distance / BOSS_MILESTONE_DISTANCE))


def create_boss(distance: float) -> Boss:
    number = get_boss_number(distance)
    max_health = BOSS_BASE_HEALTH + number * BOSS_HEALTH_INCREMENT
    return Boss(
        x=CANVAS_WIDTH / 2 - BOSS_WIDTH / 2,
        y=BOSS_Y_POSITION,
        width=BOSS_WIDTH,
        height=BOSS_HEIGHT,
        number=number,
        name=f"{BOSS_NAMES[number % len(BOSS_NAMES)]} Lv.{number}",
        color=BOSS_COLORS[number % len(BOSS_COLORS)],
        health=max_health,
        max_health=max_health,
        velocity_x=BOSS_HORIZONTAL_SPEED,
        direction=1,
    )


def compute_boss_phase(health_fraction: float) -> int:
    """Phase for a health fraction; thresholds are checked tightest first."""
    for max_fraction, phase in BOSS_PHASE_THRESHOLDS:
        if health_fraction <= max_fraction:
            return phase
    return DEFAULT_BOSS_PHASE


def get_phase_config(phase: int) -> BossPhaseConfig:
    return BOSS_PHASES[phase]


def select_attack_pattern(phase: int, rng: random.Random) -> AttackPattern:
    """Later phases favour the heavier patterns."""
    if phase >= 3:
        return rng.choice([AttackPattern.SPREAD, AttackPattern.BEAM, AttackPattern.BARRAGE])
    if phase == 2:
        return AttackPattern.SPREAD if rng.random() < 0.7 else AttackPattern.BARRAGE
    return AttackPattern.SPREAD


def create_boss_attack(
    boss: Boss, pattern: AttackPattern, now_ms: float, rng: random.Random
) -> List[BossAttack]:
    """Attack objects for one use of ``pattern``, launched from the boss's bottom edge."""
    center_x = boss.x + boss.width / 2
    bottom_y = boss.bottom

    if pattern == AttackPattern.SPREAD:
        width, height = SPREAD_BULLET_SIZE
        half = SPREAD_BULLET_COUNT // 2
        return [
            BossAttack(
                x=center_x + i * SPREAD_BULLET_GAP - width / 2,
                y=bottom_y,
                width=width,
                height=height,
                pattern=pattern,
                speed=SPREAD_BULLET_SPEED,
            )
            for i in range(-half, half + 1)
        ]

    if pattern == AttackPattern.BEAM:
        return [
            BossAttack(
                x=center_x - BEAM_WIDTH / 2,
                y=bottom_y,
                width=BEAM_WIDTH,
                height=CANVAS_HEIGHT,
                pattern=pattern,
                speed=0.0,
                expires_at=now_ms + BEAM_LIFETIME_MS,
            )
        ]

    width, height = BARRAGE_SIZE
    lanes = get_lane_positions()
    return [
        BossAttack(
            x=rng.choice(lanes) - width / 2,
            y=bottom_y,
            width=width,
            height=height,
            pattern=pattern,
            speed=BARRAGE_SPEED,
        )
        for _ in range(BARRAGE_COUNT)
    ]


def move_boss(boss: Boss) -> None:
    """Slide horizontally, bouncing off the road edges."""
    min_x, max_x = road_bounds(boss.width)
    new_x = boss.x + boss.velocity_x * boss.direction
    if new_x <= min_x:
        new_x = min_x
        boss.direction = 1
    elif new_x >= max_x:
        new_x = max_x
        boss.direction = -1
    boss.x = new_x


@runs_in_phase(UpdatePhase.BOSS)
class BossBattleSystem(BaseSystem):
    """Runs boss entry, phases, attacks, rewards and resolution."""

    def __init__(self, engine: "SimulationEngine") -> None:
        super().__init__(engine, "BossBattle")
        self._machine = create_boss_battle_machine()
        self._bosses_defeated = 0

    @property
    def status(self) -> BossBattleStatus:
        return self._machine.state

    def reset(self) -> None:
        self._machine.force_state(BossBattleStatus.INACTIVE, reason="reset")
        self.engine.state.boss_battle.status = BossBattleStatus.INACTIVE

    def _transition(self, target: BossBattleStatus, reason: str) -> None:
        self._machine.transition(target, frame=self.engine.frame_count, reason=reason)
        self.engine.state.boss_battle.status = target

    def _do_update(self, ctx: TickContext) -> Optional[SystemResult]:
        state = self.engine.state
        battle = state.boss_battle
        if state.vehicle is None:
            return SystemResult.skipped_result()

        if not battle.active:
            if should_trigger_boss_battle(state.distance, battle.last_milestone):
                removed = self.start_battle(ctx)
                return SystemResult(entities_spawned=1, entities_removed=removed)
            return None

        boss = battle.boss
        battle.elapsed_time = ctx.now_ms - battle.start_time
        boss.phase = compute_boss_phase(boss.health_fraction)
        phase_config = get_phase_config(boss.phase)
        move_boss(boss)

        spawned = 0
        if ctx.now_ms - boss.last_attack_time >= phase_config.attack_interval_ms:
            boss.last_attack_time = ctx.now_ms
            boss.attack_pattern = select_attack_pattern(boss.phase, self.engine.rng)
            attacks = create_boss_attack(boss, boss.attack_pattern, ctx.now_ms, self.engine.rng)
            battle.attacks.extend(attacks)
            spawned += len(attacks)

        if ctx.now_ms - battle.power_up_spawn_timer >= phase_config.power_up_spawn_interval_ms:
            battle.power_up_spawn_timer = ctx.now_ms
            if self.engine.rng.random() < phase_config.power_up_spawn_chance:
                power_up_type = self.engine.rng.choice(BOSS_POWER_UP_TYPES)
                lane = self.engine.rng.randrange(len(get_lane_positions()))
                state.power_ups.append(create_power_up(power_up_type, lane))
                spawned += 1

        self._move_attacks(ctx)
        return SystemResult(entities_spawned=spawned, details={"phase": boss.phase})

    def _move_attacks(self, ctx: TickContext) -> None:
        battle = self.engine.state.boss_battle
        time_scale = get_obstacle_time_scale(self.engine.state.active_power_ups)
        kept = []
        for attack in battle.attacks:
            if attack.pattern == AttackPattern.BEAM:
                if ctx.now_ms >= attack.expires_at:
                    attack.active = False
            else:
                attack.y += attack.speed * time_scale
            if attack.active and not is_off_screen(attack):
                kept.append(attack)
        battle.attacks = kept

    def start_battle(self, ctx: TickContext) -> int:
        """Enter a battle at the current milestone.

        Returns:
            Number of obstacles cleared from the road
        """
        state = self.engine.state
        battle = state.boss_battle
        self._transition(BossBattleStatus.ACTIVE, "milestone reached")

        boss = create_boss(state.distance)
        boss.last_attack_time = ctx.now_ms
        cleared = len(state.obstacles)
        state.obstacles = []

        battle.active = True
        battle.boss = boss
        battle.attacks = []
        battle.start_time = ctx.now_ms
        battle.elapsed_time = 0.0
        battle.power_up_spawn_timer = ctx.now_ms
        battle.boss_defeated = False
        battle.power_ups_used = 0
        battle.last_milestone = boss.number * BOSS_MILESTONE_DISTANCE
        state.statistics.boss_records.append(
            BossRecord(
                boss_number=boss.number,
                boss_name=boss.name,
                start_distance=state.distance,
                start_time=ctx.now_ms,
            )
        )

        logger.info(f"Boss battle started: {boss.name} at distance {state.distance:.0f}")
        self.engine.events.emit(
            BossEncounterStartedEvent(
                boss_number=boss.number,
                boss_name=boss.name,
                distance=state.distance,
                frame=ctx.frame,
            )
        )
        return cleared

    def damage(self, amount: float) -> bool:
        """Apply damage to the boss; a killing blow resolves the battle at once.

        Returns:
            True if this damage defeated the boss
        """
        battle = self.engine.state.boss_battle
        if not battle.active or battle.boss is None:
            return False
        boss = battle.boss
        boss.health = max(0.0, boss.health - amount)
        boss.phase = compute_boss_phase(boss.health_fraction)
        if boss.health <= 0:
            self._resolve_defeat()
            return True
        return False

    def _resolve_defeat(self) -> None:
        state = self.engine.state
        battle = state.boss_battle
        boss = battle.boss
        now_ms = self.engine.now_ms
        self._transition(BossBattleStatus.RESOLVED, "boss defeated")

        reward = BOSS_COIN_REWARD_PER_ORDINAL * boss.number
        credited = add_coins(state, reward)
        if credited > 0:
            state.statistics.total_coins_collected += credited
        state.hearts = min(MAX_HEARTS, state.hearts + BOSS_HEAL_ON_DEFEAT)
        self._spawn_reward_wave()

        battle.elapsed_time = now_ms - battle.start_time
        self._close_record(defeated=True)
        battle.active = False
        battle.boss = None
        battle.attacks = []
        battle.boss_defeated = True
        self._bosses_defeated += 1
        self._transition(BossBattleStatus.INACTIVE, "battle over")

        logger.info(
            f"Boss defeated: {boss.name} in {battle.elapsed_time:.0f} ms, reward {reward} coins"
        )
        self.engine.events.emit(
            BossDefeatedEvent(
                boss_number=boss.number,
                coin_reward=reward,
                elapsed_time=battle.elapsed_time,
                frame=self.engine.frame_count,
            )
        )

    def _spawn_reward_wave(self) -> None:
        rng = self.engine.rng
        lane_count = len(get_lane_positions())
        for i in range(BOSS_REWARD_WAVE_SIZE):
            y = -POWER_UP_SIZE - i * BOSS_REWARD_WAVE_SPACING
            self.engine.state.power_ups.append(
                create_power_up(rng.choice(BOSS_POWER_UP_TYPES), rng.randrange(lane_count), y)
            )

    def _close_record(self, defeated: bool) -> None:
        battle = self.engine.state.boss_battle
        records = self.engine.state.statistics.boss_records
        if not records:
            return
        record = records[-1]
        record.defeated = defeated
        record.elapsed_time = max(0.0, battle.elapsed_time)
        record.power_ups_used = battle.power_ups_used

    def abandon(self) -> None:
        """Close an unfinished battle when the session ends."""
        battle = self.engine.state.boss_battle
        if not battle.active:
            return
        battle.elapsed_time = self.engine.now_ms - battle.start_time
        self._close_record(defeated=False)
        self._transition(BossBattleStatus.RESOLVED, "game over")
        battle.active = False
        battle.attacks = []
        logger.info(f"Boss battle abandoned after {battle.elapsed_time:.0f} ms")

    def get_debug_info(self):
        info = super().get_debug_info()
        info["status"] = self.status.value
        info["bosses_defeated"] = self._bosses_defeated
        return info
