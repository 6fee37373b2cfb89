"""Lane Rush simulation engine - the orchestrator.

The engine owns the single ``GameState`` of a session and coordinates the
systems that mutate it. It does not contain gameplay rules itself; those
live in ``racecore.systems``.

Design Decisions:
-----------------
1. No process-wide instance. Callers construct an engine and hold it.

2. All gameplay timers run on simulation time (``frame_count * step_ms``)
   and every random draw goes through ``self.rng``, so a seed reproduces a
   session exactly.

3. The host calls ``advance()`` once per host frame. The fixed-step loop
   turns elapsed wall time into ticks; after the ticks one snapshot (a
   deep copy) is handed to every subscribed listener.

4. Domain events (game over, boss defeated, slot settled...) go through
   an engine-owned ``EventBus``; nothing is global.
"""

import logging
import random
import time
from typing import Any, Callable, Dict, List, Optional

from racecore.config.difficulty import DIFFICULTY_LEVELS
from racecore.config.game_config import GameConfig
from racecore.config.powerups import PowerUpType
from racecore.config.vehicles import INITIAL_SPEED, VehicleConfig
from racecore.entities import Vehicle
from racecore.events import EventBus, GameOverEvent
from racecore.exceptions import ConfigurationError
from racecore.persistence import SaveData
from racecore.result import Err, Result
from racecore.simulation.loop import FixedStepLoop
from racecore.simulation.scheduler import DeferredScheduler
from racecore.simulation.state import GameSnapshot, GameState, to_plain
from racecore.simulation.system_registry import SystemRegistry
from racecore.state_machine import GameStatus, create_game_status_machine
from racecore.systems import (
    BaseSystem,
    BossBattleSystem,
    CollisionSystem,
    MovementSystem,
    PowerUpSystem,
    ProgressSystem,
    RecoverySystem,
    SlotMachineSystem,
    SpawnSystem,
)
from racecore.update_phases import TickContext, UpdatePhase

logger = logging.getLogger(__name__)

SnapshotListener = Callable[[GameSnapshot], None]


def _wall_clock_ms() -> float:
    return time.perf_counter() * 1000.0


class SimulationEngine:
    """A headless simulation engine for one player's racing session.

    Architecture:
        SimulationEngine (coordinator)
        ├── FixedStepLoop (host frames -> ticks)
        ├── SystemRegistry (systems in phase order)
        ├── DeferredScheduler (slot machine settlement)
        ├── EventBus (domain events)
        └── SaveData (durable counters)

    Attributes:
        config: Runtime configuration
        rng: Random generator used by every system
        state: The live game state
        frame_count: Ticks executed this session
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        *,
        rng: Optional[random.Random] = None,
        seed: Optional[int] = None,
        save_data: Optional[SaveData] = None,
        clock: Optional[Callable[[], float]] = None,
    ) -> None:
        """Initialize the engine.

        Args:
            config: Runtime configuration (defaults to ``GameConfig()``)
            rng: Random generator for deterministic runs
            seed: Seed used when ``rng`` is not provided
            save_data: Durable counters (defaults to an in-memory store)
            clock: Wall clock in ms used by ``advance()`` without an argument
        """
        self.config = config or GameConfig()
        self.config.validate()

        # Prefer an explicit rng, then a seed, then a fresh generator
        if rng is not None:
            self.rng: random.Random = rng
            self.seed = None
        elif seed is not None:
            self.rng = random.Random(seed)
            self.seed = seed
        else:
            self.rng = random.Random()
            self.seed = None

        self.save_data = save_data or SaveData()
        self.events = EventBus()
        self.scheduler = DeferredScheduler()
        self._clock = clock or _wall_clock_ms
        self._status = create_game_status_machine(track_history=True)
        self._loop = FixedStepLoop(self.tick, self.config.step_ms, self.config.max_frame_ms)
        self._listeners: List[SnapshotListener] = []
        self._vehicle_config: Optional[VehicleConfig] = None
        self._difficulty_level = self.config.difficulty_level
        self._saved_coins: Optional[int] = None

        self.frame_count = 0
        self.state = self._new_state()

        self.progress = ProgressSystem(self)
        self.movement = MovementSystem(self)
        self.spawning = SpawnSystem(self)
        self.boss_battle = BossBattleSystem(self)
        self.collision = CollisionSystem(self)
        self.power_ups = PowerUpSystem(self)
        self.recovery = RecoverySystem(self)
        self.slot_machine = SlotMachineSystem(self)

        self._system_registry = SystemRegistry()
        for system in (
            self.progress,
            self.movement,
            self.spawning,
            self.boss_battle,
            self.collision,
            self.power_ups,
            self.recovery,
            self.slot_machine,
        ):
            self._system_registry.register(system)

    # =========================================================================
    # Properties
    # =========================================================================

    @property
    def status(self) -> GameStatus:
        return self._status.state

    @property
    def is_game_over(self) -> bool:
        return self._status.state == GameStatus.GAME_OVER

    @property
    def now_ms(self) -> float:
        """Simulation time of the session."""
        return self.frame_count * self.config.step_ms

    @property
    def vehicle_config(self) -> Optional[VehicleConfig]:
        return self._vehicle_config

    def get_systems(self) -> List[BaseSystem]:
        return self._system_registry.get_all()

    def get_system(self, name: str) -> Optional[BaseSystem]:
        return self._system_registry.get(name)

    def set_system_enabled(self, name: str, enabled: bool) -> bool:
        return self._system_registry.set_enabled(name, enabled)

    def get_systems_debug_info(self) -> Dict[str, Any]:
        info = self._system_registry.get_debug_info()
        info["loop"] = self._loop.get_debug_info()
        return info

    # =========================================================================
    # Setup
    # =========================================================================

    def _new_state(self, with_vehicle: bool = True) -> GameState:
        state = GameState(
            difficulty_level=self._difficulty_level,
            high_score=self.save_data.high_score,
            coins=self.save_data.coins,
        )
        state.slot_machine.failure_streak = self.save_data.failure_streak
        if with_vehicle and self._vehicle_config is not None:
            state.vehicle = Vehicle.create(self._vehicle_config)
            state.max_speed = state.vehicle.stats.max_speed
        return state

    def load_vehicle(self, config: VehicleConfig) -> Vehicle:
        """Select a vehicle configuration and place the vehicle on the road."""
        self._vehicle_config = config
        vehicle = Vehicle.create(config)
        self.state.vehicle = vehicle
        self.state.max_speed = vehicle.stats.max_speed
        self.save_data.set_selected_vehicle(config.to_dict())
        logger.info(f"Loaded vehicle {config.id!r}: {vehicle.stats}")
        return vehicle

    def set_difficulty_level(self, level: str) -> None:
        """Select easy, medium or hard. Takes effect immediately."""
        if level not in DIFFICULTY_LEVELS:
            raise ConfigurationError(
                f"Unknown difficulty level {level!r}. Valid levels: {sorted(DIFFICULTY_LEVELS)}"
            )
        self._difficulty_level = level
        self.state.difficulty_level = level

    # =========================================================================
    # Observers
    # =========================================================================

    def subscribe(self, listener: SnapshotListener) -> Callable[[], None]:
        """Register a snapshot listener.

        Returns:
            A callable that removes the listener again
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def get_state(self) -> GameSnapshot:
        return GameSnapshot.capture(self.state, self.frame_count, self.now_ms)

    def _publish(self) -> None:
        if not self._listeners:
            return
        snapshot = self.get_state()
        for listener in list(self._listeners):
            listener(snapshot)

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def _transition(self, target: GameStatus, reason: str) -> None:
        self._status.transition(target, frame=self.frame_count, reason=reason)
        self.state.status = target
        logger.info(f"Game status -> {target.value} ({reason})")

    def _begin_session(self) -> None:
        self.scheduler.invalidate()
        self.frame_count = 0
        self.state = self._new_state()
        self.state.current_speed = INITIAL_SPEED
        self._saved_coins = self.state.coins
        self._system_registry.reset_all()

    def start(self, now_ms: Optional[float] = None) -> bool:
        """Start a fresh session. Requires a loaded vehicle.

        Returns:
            True if the session started
        """
        if self._vehicle_config is None:
            logger.warning("start() ignored: no vehicle loaded")
            return False
        if self.status in (GameStatus.PLAYING, GameStatus.PAUSED):
            logger.warning(f"start() ignored: session already {self.status.value}")
            return False

        self._begin_session()
        self._status.force_state(GameStatus.IDLE, frame=0, reason="new session")
        self._transition(GameStatus.PLAYING, "start")
        self._loop.start(self._now(now_ms))
        self._publish()
        return True

    def pause(self) -> bool:
        if self.status != GameStatus.PLAYING:
            return False
        self._transition(GameStatus.PAUSED, "pause")
        self._loop.pause()
        self._publish()
        return True

    def resume(self, now_ms: Optional[float] = None) -> bool:
        if self.status != GameStatus.PAUSED:
            return False
        self._transition(GameStatus.PLAYING, "resume")
        self._loop.resume(self._now(now_ms))
        self._publish()
        return True

    def reset(self) -> None:
        """Discard the session, keeping only the vehicle configuration and difficulty.

        The vehicle entity is rebuilt by the next ``start()``. Pending
        deferred work (slot settlement) is invalidated.
        """
        self._loop.stop()
        self.scheduler.invalidate()
        self.frame_count = 0
        self._status.force_state(GameStatus.IDLE, frame=0, reason="reset")
        self.state = self._new_state(with_vehicle=False)
        self._system_registry.reset_all()
        logger.info("Game reset")
        self._publish()

    def end_game(self, ctx: Optional[TickContext] = None) -> None:
        """Move to GAME_OVER; called when hearts reach zero."""
        if self.status != GameStatus.PLAYING:
            return
        self.boss_battle.abandon()
        self._transition(GameStatus.GAME_OVER, "out of hearts")
        self._loop.pause()
        # A spin still settling counts toward the payout and the pity streak
        self.scheduler.flush()

        state = self.state
        final_score = int(state.score)
        if self.save_data.update_high_score(final_score):
            logger.info(f"New high score: {final_score}")
        state.high_score = max(state.high_score, final_score)
        self.save_data.record_game(state.distance)
        self._save_coins()

        summary = self.build_summary()
        vehicle = self._vehicle_config.to_dict() if self._vehicle_config else None
        frame = ctx.frame if ctx is not None else self.frame_count
        self.events.emit(GameOverEvent(summary=summary, vehicle=vehicle, frame=frame))

    def build_summary(self) -> Dict[str, Any]:
        """Plain-data summary of the session, as persisted on game over."""
        state = self.state
        return {
            "username": self.config.username,
            "distance": state.distance,
            "score": int(state.score),
            "coins": state.coins,
            "hearts": state.hearts,
            "max_speed": state.top_speed_reached,
            "obstacles_destroyed": state.destroyed_obstacle_count,
            "duration_ms": state.elapsed_time,
            "difficulty": state.difficulty_level,
            "boss_defeated": any(r.defeated for r in state.statistics.boss_records),
            "statistics": to_plain(state.statistics),
        }

    # =========================================================================
    # Frame / tick
    # =========================================================================

    def _now(self, now_ms: Optional[float]) -> float:
        return self._clock() if now_ms is None else now_ms

    def advance(self, now_ms: Optional[float] = None) -> int:
        """Process one host frame.

        Runs as many fixed ticks as the elapsed time allows, then publishes
        one snapshot.

        Returns:
            Number of ticks executed
        """
        ticks = self._loop.advance(self._now(now_ms))
        if ticks:
            self._save_coins()
        self._publish()
        return ticks

    def tick(self, dt_ms: Optional[float] = None) -> None:
        """Execute one fixed simulation step.

        Systems run phase by phase; the tick stops early once the session
        leaves PLAYING (game over happens within the tick that caused it).
        """
        if self.status != GameStatus.PLAYING:
            return
        dt = self.config.step_ms if dt_ms is None else dt_ms
        ctx = TickContext(frame=self.frame_count, dt_ms=dt, now_ms=self.now_ms)

        for phase in UpdatePhase:
            ctx.phase = phase
            for system in self._system_registry.for_phase(phase):
                system.update(ctx)
                if self.status != GameStatus.PLAYING:
                    break
            if self.status != GameStatus.PLAYING:
                break

        self.frame_count += 1
        self.state.elapsed_time += dt
        self.scheduler.pump(self.now_ms)

    def run_ticks(self, count: int) -> int:
        """Run up to ``count`` ticks directly, bypassing the wall-clock loop.

        Returns:
            Number of ticks executed before the session stopped playing
        """
        executed = 0
        for _ in range(count):
            if self.status != GameStatus.PLAYING:
                break
            self.tick()
            executed += 1
        return executed

    def _save_coins(self) -> None:
        if self.state.coins != self._saved_coins:
            self.save_data.set_coins(self.state.coins)
            self._saved_coins = self.state.coins

    # =========================================================================
    # Input
    # =========================================================================

    def set_input(self, left: Optional[bool] = None, right: Optional[bool] = None) -> None:
        controls = self.state.controls
        if left is not None:
            controls.left = left
        if right is not None:
            controls.right = right

    def set_drag(self, target_x: Optional[float], dragging: bool) -> None:
        controls = self.state.controls
        controls.drag_target_x = target_x
        controls.dragging = dragging

    def purchase_power_up(self, power_up_type: PowerUpType) -> Result[int, str]:
        """Buy a shop item during a session.

        Returns:
            Ok(remaining coins) or Err(reason)
        """
        if self.status not in (GameStatus.PLAYING, GameStatus.PAUSED):
            return Err(f"cannot purchase while {self.status.value}")
        result = self.power_ups.purchase(power_up_type, self.now_ms, self.frame_count)
        if result.is_ok():
            self._save_coins()
            logger.info(f"Purchased {power_up_type.value}, {result.unwrap()} coins left")
        else:
            logger.info(f"Purchase of {power_up_type.value} refused: {result.error}")
        return result

    def trigger_slot_machine(self) -> bool:
        """Spin the slot machine if all three cards are filled."""
        if self.status != GameStatus.PLAYING:
            return False
        return self.slot_machine.trigger(self.now_ms)

    def __repr__(self) -> str:
        return f"SimulationEngine(status={self.status.value}, frame={self.frame_count})"
