"""Collision detection and resolution.

Geometry helpers are plain functions so spawning and the boss battle can
reuse them. ``CollisionSystem`` resolves contacts once per tick:

- vehicle vs obstacles, then vehicle vs boss attacks (one resolution
  branch per pass, chosen by the active shields)
- bullets vs obstacles and the boss
- vehicle vs power-ups (plain AABB, unpadded vehicle)

Shield priority, highest first:
    1. destructive (iron body, fire wheel): hit obstacles are destroyed
    2. tracked (golden bell): the contact is recorded as a breach
    3. immune shields or an open recovery window: contact is ignored
    4. otherwise the first hit costs a heart
"""

import logging
from typing import TYPE_CHECKING, List, Optional, Sequence

from racecore.config.display import CANVAS_HEIGHT
from racecore.config.obstacles import OBSTACLE_DESTROY_REWARD
from racecore.config.powerups import BULLET_BOSS_DAMAGE, ShieldKind, get_effect
from racecore.config.vehicles import (
    COLLISION_KNOCKBACK,
    COLLISION_PADDING,
    COLLISION_RECOVERY_TIME_MS,
)
from racecore.entities import Entity
from racecore.entities.vehicle import resting_y
from racecore.events import VehicleHitEvent
from racecore.simulation.state import GameState, add_coins
from racecore.systems.base import BaseSystem, SystemResult
from racecore.update_phases import TickContext, UpdatePhase, runs_in_phase

if TYPE_CHECKING:
    from racecore.simulation.engine import SimulationEngine

logger = logging.getLogger(__name__)


def rects_intersect(a: Entity, b: Entity) -> bool:
    """Strict AABB overlap; rectangles that only touch do not intersect."""
    return a.colliderect(b)


def check_padded_collision(a: Entity, b: Entity, padding: float = COLLISION_PADDING) -> bool:
    """AABB test after shrinking both rectangles inwards by ``padding``."""
    return (
        a.x + padding < b.x + b.width - padding
        and a.x + a.width - padding > b.x + padding
        and a.y + padding < b.y + b.height - padding
        and a.y + a.height - padding > b.y + padding
    )


def is_off_screen(entity: Entity, canvas_height: float = CANVAS_HEIGHT) -> bool:
    """True once an entity has scrolled fully past the bottom edge."""
    return entity.y > canvas_height + entity.height


def is_above_screen(entity: Entity) -> bool:
    """True once an upward-moving entity has left through the top edge."""
    return entity.y + entity.height < 0


def reward_destroyed_obstacles(state: GameState, count: int) -> int:
    """Credit the coin bonus for ``count`` destroyed obstacles.

    Returns:
        Coins actually credited after clamping
    """
    if count <= 0:
        return 0
    state.destroyed_obstacle_count += count
    state.statistics.total_obstacles_destroyed += count
    credited = add_coins(state, OBSTACLE_DESTROY_REWARD * count)
    if credited > 0:
        state.statistics.total_coins_collected += credited
    return credited


def start_recovery(state: GameState, now_ms: float) -> None:
    """Open (or restart) the post-hit grace window."""
    state.is_recovering = True
    state.recovery_end_time = now_ms + COLLISION_RECOVERY_TIME_MS


def strongest_shield(state: GameState) -> ShieldKind:
    """Shield kind that governs contact resolution this pass."""
    kinds = {get_effect(entry.type).shield for entry in state.active_power_ups}
    for kind in (ShieldKind.DESTRUCTIVE, ShieldKind.TRACKED, ShieldKind.IMMUNE):
        if kind in kinds:
            return kind
    return ShieldKind.NONE


@runs_in_phase(UpdatePhase.COLLISION)
class CollisionSystem(BaseSystem):
    """Resolves vehicle, bullet and pickup contacts for one tick."""

    def __init__(self, engine: "SimulationEngine") -> None:
        super().__init__(engine, "Collision")
        self._hits_taken = 0
        self._obstacles_destroyed = 0

    def _do_update(self, ctx: TickContext) -> Optional[SystemResult]:
        state = self.engine.state
        if state.vehicle is None:
            return SystemResult.skipped_result()

        removed = self._resolve_obstacles(ctx)
        if self.engine.is_game_over:
            return SystemResult(entities_removed=removed)

        self._resolve_boss_attacks(ctx)
        if self.engine.is_game_over:
            return SystemResult(entities_removed=removed)

        removed += self._resolve_bullets()
        self._collect_power_ups(ctx)
        return SystemResult(entities_removed=removed)

    def _resolve_obstacles(self, ctx: TickContext) -> int:
        state = self.engine.state
        vehicle = state.vehicle
        hits = [o for o in state.obstacles if check_padded_collision(vehicle, o)]
        if not hits:
            return 0

        shield = strongest_shield(state)
        if shield == ShieldKind.DESTRUCTIVE:
            state.obstacles = [o for o in state.obstacles if not any(o is h for h in hits)]
            reward_destroyed_obstacles(state, len(hits))
            self._extend_destructive_shields(len(hits))
            self._obstacles_destroyed += len(hits)
            return len(hits)
        if shield == ShieldKind.TRACKED:
            state.golden_bell_breached = True
            return 0
        if shield == ShieldKind.IMMUNE or state.is_recovering:
            return 0

        first = hits[0]
        state.obstacles = [o for o in state.obstacles if o is not first]
        self._take_hit(ctx, "obstacle")
        return 1

    def _resolve_boss_attacks(self, ctx: TickContext) -> None:
        state = self.engine.state
        vehicle = state.vehicle
        hits = [
            a
            for a in state.boss_battle.attacks
            if a.active and check_padded_collision(vehicle, a)
        ]
        if not hits:
            return

        shield = strongest_shield(state)
        if shield == ShieldKind.DESTRUCTIVE:
            for attack in hits:
                attack.active = False
        elif shield == ShieldKind.TRACKED:
            state.golden_bell_breached = True
        elif shield == ShieldKind.IMMUNE or state.is_recovering:
            return
        else:
            hits[0].active = False
            self._take_hit(ctx, "boss_attack")

    def _take_hit(self, ctx: TickContext, source: str) -> None:
        state = self.engine.state
        vehicle = state.vehicle
        state.hearts = max(0, state.hearts - 1)
        state.current_speed = 0.0
        start_recovery(state, ctx.now_ms)
        vehicle.y = min(vehicle.y + COLLISION_KNOCKBACK, resting_y())
        self._hits_taken += 1

        logger.debug(f"Vehicle hit by {source}, hearts left: {state.hearts}")
        self.engine.events.emit(
            VehicleHitEvent(hearts_left=state.hearts, source=source, frame=ctx.frame)
        )
        if state.hearts == 0:
            self.engine.end_game(ctx)

    def _extend_destructive_shields(self, destroyed: int) -> None:
        for entry in self.engine.state.active_power_ups:
            bonus = get_effect(entry.type).extend_on_destroy_ms
            if bonus > 0:
                entry.remaining_time += bonus * destroyed
                entry.total_duration += bonus * destroyed

    def _resolve_bullets(self) -> int:
        state = self.engine.state
        boss = state.boss_battle.boss if state.boss_battle.active else None
        destroyed: List[Entity] = []

        for bullet in state.bullets:
            if not bullet.active:
                continue
            target = self._first_hit(bullet, state.obstacles, destroyed)
            if target is not None:
                bullet.active = False
                destroyed.append(target)
                continue
            if boss is not None and rects_intersect(bullet, boss):
                bullet.active = False
                self.engine.boss_battle.damage(BULLET_BOSS_DAMAGE)

        if destroyed:
            state.obstacles = [o for o in state.obstacles if not any(o is d for d in destroyed)]
            reward_destroyed_obstacles(state, len(destroyed))
            self._obstacles_destroyed += len(destroyed)
        state.bullets = [b for b in state.bullets if b.active]
        return len(destroyed)

    @staticmethod
    def _first_hit(bullet: Entity, obstacles: Sequence[Entity], taken: Sequence[Entity]):
        for obstacle in obstacles:
            if any(obstacle is t for t in taken):
                continue
            if rects_intersect(bullet, obstacle):
                return obstacle
        return None

    def _collect_power_ups(self, ctx: TickContext) -> None:
        state = self.engine.state
        vehicle = state.vehicle
        for power_up in list(state.power_ups):
            if state.vehicle is None or self.engine.is_game_over:
                break
            if power_up.active and rects_intersect(vehicle, power_up):
                power_up.active = False
                self.engine.power_ups.collect(power_up, ctx)
        state.power_ups = [p for p in state.power_ups if p.active]

    def get_debug_info(self):
        info = super().get_debug_info()
        info["hits_taken"] = self._hits_taken
        info["obstacles_destroyed"] = self._obstacles_destroyed
        return info
