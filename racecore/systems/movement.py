"""Speed, steering and entity integration.

``ProgressSystem`` advances speed, distance and score at the start of a
tick. ``MovementSystem`` steers the vehicle and scrolls everything on the
road. ``RecoverySystem`` closes the post-hit grace window at the end of
the tick.
"""

import logging
import math
from typing import TYPE_CHECKING, Optional

from racecore.config.display import road_bounds
from racecore.config.powerups import PowerUpType
from racecore.config.vehicles import DRAG_SPEED_FACTOR
from racecore.simulation.state import ControlState
from racecore.entities import Vehicle
from racecore.systems.base import BaseSystem, SystemResult
from racecore.systems.collision import is_above_screen, is_off_screen
from racecore.systems.difficulty import calculate_difficulty, calculate_game_speed, get_level_config
from racecore.systems.powerups import (
    get_obstacle_time_scale,
    get_score_multiplier,
    get_speed_multiplier,
    get_speed_override,
)
from racecore.update_phases import TickContext, UpdatePhase, runs_in_phase

if TYPE_CHECKING:
    from racecore.simulation.engine import SimulationEngine

logger = logging.getLogger(__name__)


def steer(vehicle: Vehicle, controls: ControlState) -> None:
    """Move the vehicle horizontally for one tick, clamped to the road."""
    handling = vehicle.stats.handling
    min_x, max_x = road_bounds(vehicle.width)

    if controls.dragging and controls.drag_target_x is not None:
        target_x = controls.drag_target_x - vehicle.width / 2
        step = handling * DRAG_SPEED_FACTOR
        delta = max(-step, min(step, target_x - vehicle.x))
        vehicle.x += delta
    else:
        if controls.left:
            vehicle.x -= handling
        if controls.right:
            vehicle.x += handling

    vehicle.x = max(min_x, min(max_x, vehicle.x))
    vehicle.update_lane()


@runs_in_phase(UpdatePhase.FRAME_START)
class ProgressSystem(BaseSystem):
    """Speed curve, distance, score and difficulty level."""

    def __init__(self, engine: "SimulationEngine") -> None:
        super().__init__(engine, "Progress")

    def _do_update(self, ctx: TickContext) -> Optional[SystemResult]:
        state = self.engine.state
        if state.vehicle is None:
            return SystemResult.skipped_result()

        level = get_level_config(state.difficulty_level)
        base_speed = calculate_game_speed(state.distance, state.max_speed, level.speed_multiplier)
        state.base_speed = base_speed

        if state.is_recovering:
            state.current_speed = min(
                state.current_speed + state.vehicle.stats.acceleration, base_speed
            )
        else:
            override = get_speed_override(state.active_power_ups)
            if override is not None:
                state.current_speed = state.max_speed * override
            else:
                state.current_speed = base_speed * get_speed_multiplier(state.active_power_ups)

        # Distance is frozen while a boss holds the road
        if not state.boss_battle.active:
            state.distance += state.current_speed
            state.statistics.total_distance_traveled += state.current_speed

        state.score += math.floor(state.current_speed * get_score_multiplier(state.active_power_ups))
        state.top_speed_reached = max(state.top_speed_reached, state.current_speed)
        state.difficulty = calculate_difficulty(state.distance).level
        return None


@runs_in_phase(UpdatePhase.ENTITY_ACT)
class MovementSystem(BaseSystem):
    """Steers the vehicle and scrolls obstacles, power-ups and bullets."""

    def __init__(self, engine: "SimulationEngine") -> None:
        super().__init__(engine, "Movement")

    def _do_update(self, ctx: TickContext) -> Optional[SystemResult]:
        state = self.engine.state
        if state.vehicle is None:
            return SystemResult.skipped_result()

        steer(state.vehicle, state.controls)

        speed = state.current_speed
        time_scale = get_obstacle_time_scale(state.active_power_ups)
        before = len(state.obstacles) + len(state.power_ups) + len(state.bullets)

        for obstacle in state.obstacles:
            obstacle.y += (speed - obstacle.speed) * time_scale
        state.obstacles = [o for o in state.obstacles if not is_off_screen(o)]

        for power_up in state.power_ups:
            power_up.y += speed
        state.power_ups = [p for p in state.power_ups if p.active and not is_off_screen(p)]

        for bullet in state.bullets:
            bullet.y -= bullet.speed
        state.bullets = [b for b in state.bullets if b.active and not is_above_screen(b)]

        after = len(state.obstacles) + len(state.power_ups) + len(state.bullets)
        return SystemResult(entities_removed=before - after)


@runs_in_phase(UpdatePhase.FRAME_END)
class RecoverySystem(BaseSystem):
    """Ends the recovery window on time, or at once while nitro is active."""

    def __init__(self, engine: "SimulationEngine") -> None:
        super().__init__(engine, "Recovery")

    def _do_update(self, ctx: TickContext) -> Optional[SystemResult]:
        state = self.engine.state
        if not state.is_recovering:
            return None

        if state.has_active(PowerUpType.NITRO_BOOST):
            state.current_speed = state.max_speed
            state.is_recovering = False
            state.recovery_end_time = 0.0
            logger.debug("Nitro cut recovery short")
        elif ctx.now_ms >= state.recovery_end_time:
            state.is_recovering = False
            state.recovery_end_time = 0.0
        return None
