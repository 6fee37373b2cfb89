"""Power-up and combo registry.

The queue functions are pure over a list of ``ActivePowerUp`` entries so
the combo rules can be tested without an engine. ``PowerUpSystem`` wires
them to the game state: pickups, shop purchases, per-tick effect hooks
(guns, lightning, clearing beams, magnets) and expiry side effects.
"""

import logging
from typing import TYPE_CHECKING, List, Optional

from racecore.config.economy import MAX_COINS
from racecore.config.powerups import (
    BULLET_FIRE_INTERVAL_MS,
    BULLET_HEIGHT,
    BULLET_SPEED,
    BULLET_SPREAD,
    BULLET_WIDTH,
    COMBO_HEAL,
    INSTANT_TYPES,
    MAGNET_PULL_SPEED,
    SHIELD_COMBO_TYPES,
    SHOP_PRICES,
    PowerUpType,
    find_recipe,
    get_effect,
)
from racecore.entities import Bullet, PowerUp
from racecore.events import ComboCraftedEvent
from racecore.result import Err, Ok, Result
from racecore.simulation.state import MAX_HEARTS, ActivePowerUp, GameState, add_coins
from racecore.systems.base import BaseSystem, SystemResult
from racecore.systems.collision import reward_destroyed_obstacles, start_recovery
from racecore.update_phases import TickContext, UpdatePhase, runs_in_phase

if TYPE_CHECKING:
    from racecore.simulation.engine import SimulationEngine

logger = logging.getLogger(__name__)


# ============================================================================
# Queue operations
# ============================================================================


def find_combo(active: List[ActivePowerUp], picked: PowerUpType) -> Optional[PowerUpType]:
    """Combo produced by ``picked`` and the most recently added entry, if any.

    Only the last entry is considered; older entries never craft.
    """
    if not active:
        return None
    return find_recipe(active[-1].type, picked)


def activate(power_up_type: PowerUpType, now_ms: float) -> ActivePowerUp:
    duration = get_effect(power_up_type).duration_ms
    return ActivePowerUp(
        type=power_up_type,
        remaining_time=duration,
        total_duration=duration,
        start_time=now_ms,
    )


def collect_into_queue(
    active: List[ActivePowerUp], picked: PowerUpType, now_ms: float
) -> Optional[PowerUpType]:
    """Apply a pickup of ``picked`` to the queue in place.

    Returns:
        The crafted combo type, or None when no recipe matched
    """
    combo = find_combo(active, picked)
    if combo is not None:
        active.pop()
        # Keep one entry per type: a stale copy of the combo gives way
        active[:] = [entry for entry in active if entry.type != combo]
        active.append(activate(combo, now_ms))
        return combo

    if picked in INSTANT_TYPES:
        return None

    for entry in active:
        if entry.type == picked:
            duration = get_effect(picked).duration_ms
            entry.remaining_time += duration
            entry.total_duration += duration
            return None

    active.append(activate(picked, now_ms))
    return None


def decay(active: List[ActivePowerUp], dt_ms: float) -> List[ActivePowerUp]:
    """Count every entry down by ``dt_ms`` and drop the finished ones.

    Returns:
        The entries removed this call, in queue order
    """
    expired = []
    kept = []
    for entry in active:
        entry.remaining_time -= dt_ms
        if entry.remaining_time <= 0:
            expired.append(entry)
        else:
            kept.append(entry)
    active[:] = kept
    return expired


def get_speed_multiplier(active: List[ActivePowerUp]) -> float:
    multiplier = 1.0
    for entry in active:
        multiplier *= get_effect(entry.type).speed_multiplier
    return multiplier


def get_speed_override(active: List[ActivePowerUp]) -> Optional[float]:
    """Highest max-speed override among active entries."""
    overrides = [
        get_effect(entry.type).speed_override
        for entry in active
        if get_effect(entry.type).speed_override is not None
    ]
    return max(overrides) if overrides else None


def get_score_multiplier(active: List[ActivePowerUp]) -> float:
    multiplier = 1.0
    for entry in active:
        multiplier *= get_effect(entry.type).score_multiplier
    return multiplier


def get_coin_multiplier(active: List[ActivePowerUp]) -> float:
    multiplier = 1.0
    for entry in active:
        multiplier *= get_effect(entry.type).coin_multiplier
    return multiplier


def get_obstacle_time_scale(active: List[ActivePowerUp]) -> float:
    return min((get_effect(entry.type).obstacle_time_scale for entry in active), default=1.0)


def has_shield_combo(state: GameState) -> bool:
    return any(entry.type in SHIELD_COMBO_TYPES for entry in state.active_power_ups)


# ============================================================================
# System
# ============================================================================


@runs_in_phase(UpdatePhase.POWER_UPS)
class PowerUpSystem(BaseSystem):
    """Applies pickups and runs the per-tick hooks of active power-ups."""

    def __init__(self, engine: "SimulationEngine") -> None:
        super().__init__(engine, "PowerUps")
        self._last_fire_time = float("-inf")
        self._last_strike_time = 0.0
        self._combos_crafted = 0

    def reset(self) -> None:
        self._last_fire_time = float("-inf")
        self._last_strike_time = 0.0

    # ------------------------------------------------------------------
    # Pickups and purchases
    # ------------------------------------------------------------------

    def collect(self, power_up: PowerUp, ctx: TickContext) -> Optional[PowerUpType]:
        """Apply a collected road power-up.

        Returns:
            The crafted combo type, if the pickup crafted one
        """
        return self.apply(power_up.type, ctx.now_ms, ctx.frame, coin_value=power_up.value)

    def apply(
        self,
        picked: PowerUpType,
        now_ms: float,
        frame: int,
        coin_value: int = 0,
    ) -> Optional[PowerUpType]:
        state = self.engine.state
        state.statistics.stat_for(picked).collected += 1
        if state.boss_battle.active:
            state.boss_battle.power_ups_used += 1

        source = state.active_power_ups[-1].type if state.active_power_ups else None
        combo = collect_into_queue(state.active_power_ups, picked, now_ms)

        if combo is not None:
            self._on_crafted(source, picked, combo, frame, coin_value)
        elif picked == PowerUpType.COIN:
            self._on_coin(coin_value)
        elif picked == PowerUpType.HEART:
            state.hearts = min(MAX_HEARTS, state.hearts + 1)
        return combo

    def _on_crafted(
        self,
        source: PowerUpType,
        picked: PowerUpType,
        combo: PowerUpType,
        frame: int,
        coin_value: int,
    ) -> None:
        state = self.engine.state
        state.statistics.stat_for(combo).combo_crafted += 1
        self._combos_crafted += 1

        if picked == PowerUpType.COIN:
            self._credit(coin_value * get_coin_multiplier(state.active_power_ups))
        heal = COMBO_HEAL.get(combo, 0)
        if heal:
            state.hearts = min(MAX_HEARTS, state.hearts + heal)

        logger.debug(f"Combo crafted: {source.value} + {picked.value} -> {combo.value}")
        self.engine.events.emit(
            ComboCraftedEvent(
                source_type=source.value,
                picked_type=picked.value,
                combo_type=combo.value,
                frame=frame,
            )
        )

    def _on_coin(self, value: int) -> None:
        state = self.engine.state
        if state.has_active(PowerUpType.GOLDEN_BELL):
            state.golden_bell_coin_value += value
            return
        self._credit(value * get_coin_multiplier(state.active_power_ups))
        self.engine.slot_machine.add_coin(value)

    def _credit(self, amount: float) -> None:
        state = self.engine.state
        credited = add_coins(state, amount)
        if credited > 0:
            state.statistics.total_coins_collected += credited

    def purchase(self, power_up_type: PowerUpType, now_ms: float, frame: int) -> Result[int, str]:
        """Buy a shop item with session coins.

        Returns:
            Ok(remaining coins) or Err(reason) when the purchase is refused
        """
        state = self.engine.state
        price = SHOP_PRICES.get(power_up_type)
        if price is None:
            return Err(f"{power_up_type.value} is not sold in the shop")

        if power_up_type == PowerUpType.FULL_RECOVERY:
            if state.coins < MAX_COINS:
                return Err(f"full_recovery needs {MAX_COINS} coins")
            if state.hearts >= MAX_HEARTS:
                return Err("hearts are already full")
            add_coins(state, -price)
            state.hearts = MAX_HEARTS
            state.statistics.stat_for(power_up_type).collected += 1
            return Ok(state.coins)

        if state.coins < price:
            return Err(f"{power_up_type.value} costs {price}, balance is {state.coins}")
        if power_up_type == PowerUpType.INVINCIBILITY and has_shield_combo(state):
            return Err("a shield combo is already active")

        add_coins(state, -price)
        self.apply(power_up_type, now_ms, frame)
        return Ok(state.coins)

    # ------------------------------------------------------------------
    # Per-tick hooks
    # ------------------------------------------------------------------

    def _do_update(self, ctx: TickContext) -> Optional[SystemResult]:
        state = self.engine.state
        if state.vehicle is None:
            return SystemResult.skipped_result()

        spawned = self._fire(ctx)
        removed = self._strike(ctx) + self._clear(state)
        self._pull_power_ups(state)

        expired = decay(state.active_power_ups, ctx.dt_ms)
        for entry in expired:
            self._on_expired(entry, ctx)
        return SystemResult(
            entities_spawned=spawned,
            entities_removed=removed,
            details={"expired": [entry.type.value for entry in expired]},
        )

    def _fire(self, ctx: TickContext) -> int:
        state = self.engine.state
        count = max((get_effect(e.type).bullet_count for e in state.active_power_ups), default=0)
        if count == 0 or ctx.now_ms - self._last_fire_time < BULLET_FIRE_INTERVAL_MS:
            return 0

        self._last_fire_time = ctx.now_ms
        center_x, _ = state.vehicle.center
        first_x = center_x - (count - 1) * BULLET_SPREAD / 2
        for i in range(count):
            state.bullets.append(
                Bullet(
                    x=first_x + i * BULLET_SPREAD - BULLET_WIDTH / 2,
                    y=state.vehicle.y - BULLET_HEIGHT,
                    width=BULLET_WIDTH,
                    height=BULLET_HEIGHT,
                    speed=BULLET_SPEED,
                )
            )
        return count

    def _strike(self, ctx: TickContext) -> int:
        """Lightning destroys the closest obstacle ahead on each strike."""
        state = self.engine.state
        intervals = [
            get_effect(e.type).strike_interval_ms
            for e in state.active_power_ups
            if get_effect(e.type).strike_interval_ms > 0
        ]
        if not intervals or ctx.now_ms - self._last_strike_time < min(intervals):
            return 0

        self._last_strike_time = ctx.now_ms
        ahead = [o for o in state.obstacles if o.bottom <= state.vehicle.y]
        if not ahead:
            return 0
        target = max(ahead, key=lambda o: o.y)
        state.obstacles = [o for o in state.obstacles if o is not target]
        reward_destroyed_obstacles(state, 1)
        return 1

    def _clear(self, state: GameState) -> int:
        effects = [get_effect(e.type) for e in state.active_power_ups]
        ahead = any(effect.clears_ahead for effect in effects)
        behind = any(effect.clears_behind for effect in effects)
        if not (ahead or behind):
            return 0

        vehicle = state.vehicle
        kept = []
        for obstacle in state.obstacles:
            if ahead and obstacle.bottom <= vehicle.y:
                continue
            if behind and obstacle.y >= vehicle.bottom:
                continue
            kept.append(obstacle)
        cleared = len(state.obstacles) - len(kept)
        state.obstacles = kept
        reward_destroyed_obstacles(state, cleared)
        return cleared

    def _pull_power_ups(self, state: GameState) -> None:
        effects = [get_effect(e.type) for e in state.active_power_ups]
        radius = max((effect.magnet_radius for effect in effects), default=0.0)
        if radius <= 0:
            return
        all_types = any(effect.magnet_all_types for effect in effects)
        vx, vy = state.vehicle.center

        for power_up in state.power_ups:
            if not all_types and power_up.type != PowerUpType.COIN:
                continue
            px, py = power_up.center
            dx, dy = vx - px, vy - py
            distance = (dx**2 + dy**2) ** 0.5
            if distance == 0 or distance > radius:
                continue
            step = min(MAGNET_PULL_SPEED, distance)
            power_up.x += dx / distance * step
            power_up.y += dy / distance * step

    def _on_expired(self, entry: ActivePowerUp, ctx: TickContext) -> None:
        state = self.engine.state
        if entry.type == PowerUpType.GOLDEN_BELL:
            if not state.golden_bell_breached and state.golden_bell_coin_value > 0:
                self._credit(state.golden_bell_coin_value * 2)
                logger.info(f"Golden bell paid out {state.golden_bell_coin_value * 2} coins")
            state.golden_bell_coin_value = 0
            state.golden_bell_breached = False
        if get_effect(entry.type).recovery_on_expire:
            start_recovery(state, ctx.now_ms)

    def get_debug_info(self):
        info = super().get_debug_info()
        info["combos_crafted"] = self._combos_crafted
        return info
