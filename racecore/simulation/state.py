"""Mutable game state owned by a ``SimulationEngine``, and its snapshot.

There is exactly one live ``GameState`` per engine. Systems mutate it
during a tick; listeners only ever see ``GameSnapshot`` copies.
"""

from __future__ import annotations

import copy
import dataclasses
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from racecore.config.difficulty import DEFAULT_DIFFICULTY_LEVEL
from racecore.config.economy import clamp_coins
from racecore.config.powerups import PowerUpType
from racecore.config.slot_machine import CARD_COUNT, SlotSymbol
from racecore.config.vehicles import DEFAULT_MAX_SPEED, INITIAL_SPEED
from racecore.entities import Boss, BossAttack, Bullet, Obstacle, PowerUp, Vehicle
from racecore.state_machine import BossBattleStatus, GameStatus

MAX_HEARTS = 3


def add_coins(state: "GameState", amount: float) -> int:
    """Apply ``amount`` (may be negative) to the session balance.

    Returns:
        The change actually applied after clamping
    """
    before = state.coins
    state.coins = clamp_coins(before + amount)
    return state.coins - before


@dataclass
class ActivePowerUp:
    """A timed modifier in the active queue.

    Attributes:
        type: Power-up type
        remaining_time: Simulation ms left; never increases except by banking
        total_duration: Full duration including banked extensions
        start_time: Simulation ms when the entry was pushed
    """

    type: PowerUpType
    remaining_time: float
    total_duration: float
    start_time: float


@dataclass
class ControlState:
    """Latest steering intent received from the host."""

    left: bool = False
    right: bool = False
    drag_target_x: Optional[float] = None
    dragging: bool = False


class SlotMachinePhase(str, Enum):
    IDLE = "idle"
    LOADED = "loaded"
    READY = "ready"
    SPINNING = "spinning"


@dataclass
class SlotMachineState:
    """Three card slots filled by forwarded coins.

    Attributes:
        cards: Coin value per card slot, None while empty
        is_active: All cards are filled and the machine can spin
        is_spinning: A spin is waiting for settlement
        results: Symbols shown by the latest spin
        pool_amount: Sum of the card values
        failure_streak: Consecutive losing spins (persisted between sessions)
    """

    cards: List[Optional[int]] = field(default_factory=lambda: [None] * CARD_COUNT)
    is_active: bool = False
    is_spinning: bool = False
    results: List[SlotSymbol] = field(default_factory=list)
    pool_amount: int = 0
    failure_streak: int = 0

    @property
    def phase(self) -> SlotMachinePhase:
        if self.is_spinning:
            return SlotMachinePhase.SPINNING
        if self.is_active:
            return SlotMachinePhase.READY
        if any(card is not None for card in self.cards):
            return SlotMachinePhase.LOADED
        return SlotMachinePhase.IDLE


@dataclass
class BossRecord:
    """Outcome of one boss encounter."""

    boss_number: int
    boss_name: str
    start_distance: float
    start_time: float
    defeated: bool = False
    elapsed_time: float = 0.0
    power_ups_used: int = 0


@dataclass
class BossBattleState:
    """Boss battle data. The lifecycle itself is driven by BossBattleSystem.

    Attributes:
        status: Coarse lifecycle state
        active: A boss is on the road
        boss: The current boss, if any
        attacks: Live attack objects
        start_time: Simulation ms when the battle began
        elapsed_time: Simulation ms since the battle began
        power_up_spawn_timer: Simulation ms of the latest reward refresh
        boss_defeated: The latest battle ended with a defeat
        last_milestone: Distance of the latest milestone that triggered a battle
        power_ups_used: Power-ups collected during the current battle
    """

    status: BossBattleStatus = BossBattleStatus.INACTIVE
    active: bool = False
    boss: Optional[Boss] = None
    attacks: List[BossAttack] = field(default_factory=list)
    start_time: float = 0.0
    elapsed_time: float = 0.0
    power_up_spawn_timer: float = 0.0
    boss_defeated: bool = False
    last_milestone: float = 0.0
    power_ups_used: int = 0


@dataclass
class PowerUpStat:
    collected: int = 0
    combo_crafted: int = 0


@dataclass
class GameStatistics:
    """Per-session accumulators, read once at game over."""

    power_up_stats: Dict[str, PowerUpStat] = field(default_factory=dict)
    total_coins_collected: int = 0
    total_distance_traveled: float = 0.0
    total_obstacles_destroyed: int = 0
    boss_records: List[BossRecord] = field(default_factory=list)

    def stat_for(self, power_up_type: PowerUpType) -> PowerUpStat:
        key = power_up_type.value
        if key not in self.power_up_stats:
            self.power_up_stats[key] = PowerUpStat()
        return self.power_up_stats[key]


@dataclass
class GameState:
    """The whole simulation state of one session."""

    status: GameStatus = GameStatus.IDLE
    distance: float = 0.0
    score: float = 0.0
    current_speed: float = 0.0
    max_speed: float = DEFAULT_MAX_SPEED
    base_speed: float = INITIAL_SPEED
    top_speed_reached: float = 0.0
    elapsed_time: float = 0.0

    vehicle: Optional[Vehicle] = None
    controls: ControlState = field(default_factory=ControlState)
    obstacles: List[Obstacle] = field(default_factory=list)
    power_ups: List[PowerUp] = field(default_factory=list)
    bullets: List[Bullet] = field(default_factory=list)
    active_power_ups: List[ActivePowerUp] = field(default_factory=list)

    hearts: int = MAX_HEARTS
    is_recovering: bool = False
    recovery_end_time: float = 0.0

    coins: int = 0
    high_score: int = 0
    difficulty: int = 1
    difficulty_level: str = DEFAULT_DIFFICULTY_LEVEL
    destroyed_obstacle_count: int = 0

    golden_bell_coin_value: int = 0
    golden_bell_breached: bool = False

    slot_machine: SlotMachineState = field(default_factory=SlotMachineState)
    boss_battle: BossBattleState = field(default_factory=BossBattleState)
    statistics: GameStatistics = field(default_factory=GameStatistics)

    def find_active(self, power_up_type: PowerUpType) -> Optional[ActivePowerUp]:
        for entry in self.active_power_ups:
            if entry.type == power_up_type:
                return entry
        return None

    def has_active(self, power_up_type: PowerUpType) -> bool:
        return self.find_active(power_up_type) is not None

    def active_types(self) -> List[PowerUpType]:
        return [entry.type for entry in self.active_power_ups]


def to_plain(value: Any) -> Any:
    """Recursively convert dataclasses and enums to JSON-friendly values."""
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {f.name: to_plain(getattr(value, f.name)) for f in dataclasses.fields(value)}
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, dict):
        return {str(to_plain(k)): to_plain(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_plain(v) for v in value]
    return value


@dataclass(frozen=True)
class GameSnapshot:
    """Immutable view of the state after a host frame.

    ``state`` is a deep copy, so a listener that mutates it never touches
    the engine's live state.
    """

    frame: int
    time_ms: float
    state: GameState

    @classmethod
    def capture(cls, state: GameState, frame: int, time_ms: float) -> "GameSnapshot":
        return cls(frame=frame, time_ms=time_ms, state=copy.deepcopy(state))

    @property
    def status(self) -> GameStatus:
        return self.state.status

    def to_dict(self) -> Dict[str, Any]:
        data = to_plain(self.state)
        data["slot_machine"]["phase"] = self.state.slot_machine.phase.value
        return {"frame": self.frame, "time_ms": self.time_ms, "state": data}
