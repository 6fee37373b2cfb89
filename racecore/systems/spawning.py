"""Entity spawning system.

Spawns road traffic and collectible power-ups on timing gates measured in
simulation milliseconds. All randomness comes from the engine's seeded
generator, so a seed reproduces the same road.

Architecture Notes:
- Extends BaseSystem and runs in UpdatePhase.SPAWN
- Obstacle spawning is suspended while a boss battle is active
- Boss attacks and reward waves are spawned by BossBattleSystem through
  ``create_power_up``
"""

import logging
import random
from typing import TYPE_CHECKING, Dict, List, Optional

from racecore.config.display import get_lane_positions
from racecore.config.economy import COIN_VALUE
from racecore.config.obstacles import (
    OBSTACLE_COLORS,
    OBSTACLE_DIMENSIONS,
    OBSTACLE_SPEEDS,
    OBSTACLE_TYPE_WEIGHTS,
)
from racecore.config.powerups import (
    BASIC_POWER_UP_INTERVAL_MS,
    BASIC_SPAWN_TYPES,
    HEART_POWER_UP_INTERVAL_MS,
    POWER_UP_MIN_HORIZONTAL_GAP,
    POWER_UP_MIN_VERTICAL_GAP,
    POWER_UP_SIZE,
    SHOP_POWER_UP_INTERVAL_MS,
    SHOP_SPAWN_TYPES,
    PowerUpType,
)
from racecore.entities import Obstacle, PowerUp
from racecore.systems.base import BaseSystem, SystemResult
from racecore.systems.difficulty import (
    calculate_difficulty,
    get_level_config,
    get_obstacle_count,
    get_obstacle_spawn_chance,
)
from racecore.systems.powerups import has_shield_combo
from racecore.update_phases import TickContext, UpdatePhase, runs_in_phase

if TYPE_CHECKING:
    from racecore.simulation.engine import SimulationEngine

logger = logging.getLogger(__name__)


def create_power_up(power_up_type: PowerUpType, lane: int, y: float = -POWER_UP_SIZE) -> PowerUp:
    """A power-up centred in ``lane`` at height ``y``."""
    lane_x = get_lane_positions()[lane]
    return PowerUp(
        x=lane_x - POWER_UP_SIZE / 2,
        y=y,
        width=POWER_UP_SIZE,
        height=POWER_UP_SIZE,
        type=power_up_type,
        value=COIN_VALUE if power_up_type == PowerUpType.COIN else 0,
    )


def create_obstacle(lane: int, rng: random.Random) -> Obstacle:
    """An obstacle of a weighted random type just above the top edge."""
    types = [name for name, _ in OBSTACLE_TYPE_WEIGHTS]
    weights = [weight for _, weight in OBSTACLE_TYPE_WEIGHTS]
    obstacle_type = rng.choices(types, weights=weights, k=1)[0]
    width, height = OBSTACLE_DIMENSIONS[obstacle_type]
    lane_x = get_lane_positions()[lane]
    return Obstacle(
        x=lane_x - width / 2,
        y=-height,
        width=width,
        height=height,
        type=obstacle_type,
        speed=OBSTACLE_SPEEDS[obstacle_type],
        lane=lane,
        color=rng.choice(OBSTACLE_COLORS[obstacle_type]),
    )


def is_clear_of_obstacles(candidate: PowerUp, obstacles: List[Obstacle]) -> bool:
    """True if no obstacle lies inside the minimum separation window."""
    for obstacle in obstacles:
        if (
            abs(obstacle.y - candidate.y) < POWER_UP_MIN_VERTICAL_GAP
            and abs(obstacle.x - candidate.x) < POWER_UP_MIN_HORIZONTAL_GAP
        ):
            return False
    return True


@runs_in_phase(UpdatePhase.SPAWN)
class SpawnSystem(BaseSystem):
    """Spawns obstacles and basic, shop and heart power-ups.

    Attributes:
        _last_obstacle_spawn: Simulation ms of the latest obstacle event
        _last_power_up_spawn: Simulation ms of the latest basic power-up attempt
        _last_shop_spawn: Simulation ms of the latest shop power-up attempt
        _last_heart_spawn: Simulation ms of the latest heart attempt
    """

    def __init__(self, engine: "SimulationEngine") -> None:
        super().__init__(engine, "Spawn")
        self._totals: Dict[str, int] = {"obstacles": 0, "power_ups": 0, "discarded": 0}
        self.reset()

    def reset(self) -> None:
        self._last_obstacle_spawn = 0.0
        self._last_power_up_spawn = 0.0
        self._last_shop_spawn = 0.0
        self._last_heart_spawn = float("-inf")

    @property
    def rng(self) -> random.Random:
        return self.engine.rng

    def _do_update(self, ctx: TickContext) -> Optional[SystemResult]:
        state = self.engine.state
        if state.vehicle is None:
            return SystemResult.skipped_result()

        spawned = 0
        difficulty = calculate_difficulty(state.distance)
        if (
            not state.boss_battle.active
            and ctx.now_ms - self._last_obstacle_spawn > difficulty.obstacle_spawn_interval_ms
        ):
            self._last_obstacle_spawn = ctx.now_ms
            spawned += self._spawn_obstacles(difficulty)

        level = get_level_config(state.difficulty_level)

        if ctx.now_ms - self._last_power_up_spawn >= BASIC_POWER_UP_INTERVAL_MS:
            self._last_power_up_spawn = ctx.now_ms
            if self.rng.random() < level.power_up_chance:
                spawned += self._try_place(self.rng.choice(BASIC_SPAWN_TYPES))

        if ctx.now_ms - self._last_shop_spawn >= SHOP_POWER_UP_INTERVAL_MS:
            self._last_shop_spawn = ctx.now_ms
            if self.rng.random() < level.shop_power_up_chance:
                spawned += self._try_place(self.rng.choice(self.shop_pool()))

        if state.hearts <= 1 and ctx.now_ms - self._last_heart_spawn >= HEART_POWER_UP_INTERVAL_MS:
            self._last_heart_spawn = ctx.now_ms
            if self.rng.random() < level.heart_chance:
                spawned += self._try_place(PowerUpType.HEART)

        return SystemResult(entities_spawned=spawned)

    def _spawn_obstacles(self, difficulty) -> int:
        if self.rng.random() >= get_obstacle_spawn_chance(difficulty):
            return 0

        free_lanes = list(range(len(get_lane_positions())))
        count = get_obstacle_count(difficulty, self.rng)
        for _ in range(count):
            lane = self.rng.choice(free_lanes)
            free_lanes.remove(lane)
            self.engine.state.obstacles.append(create_obstacle(lane, self.rng))
        self._totals["obstacles"] += count
        return count

    def shop_pool(self) -> List[PowerUpType]:
        """Shop types that may drop now; no invincibility under a shield combo."""
        if has_shield_combo(self.engine.state):
            return [t for t in SHOP_SPAWN_TYPES if t != PowerUpType.INVINCIBILITY]
        return list(SHOP_SPAWN_TYPES)

    def _try_place(self, power_up_type: PowerUpType) -> int:
        """Place a candidate in a random lane; a crowded spot discards it."""
        lane = self.rng.randrange(len(get_lane_positions()))
        candidate = create_power_up(power_up_type, lane)
        if not is_clear_of_obstacles(candidate, self.engine.state.obstacles):
            self._totals["discarded"] += 1
            return 0
        self.engine.state.power_ups.append(candidate)
        self._totals["power_ups"] += 1
        return 1

    def get_debug_info(self):
        info = super().get_debug_info()
        info.update(self._totals)
        return info
