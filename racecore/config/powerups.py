"""Power-up, combo and shop configuration.

Every power-up type is described by a ``PowerUpEffect`` row. The engine
never branches on a type name for gameplay modifiers; it reads these rows.

Combo recipes are keyed by an unordered pair of source types. A recipe may
pair a type with itself (``speed_boost`` + ``speed_boost``).
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, FrozenSet, List, Optional


class PowerUpType(str, Enum):
    """Every power-up that can be picked up, bought or crafted."""

    # Basic pickups
    SPEED_BOOST = "speed_boost"
    INVINCIBILITY = "invincibility"
    MAGNET = "magnet"
    SCORE_MULTIPLIER = "score_multiplier"
    COIN = "coin"
    HEART = "heart"

    # Shop items
    MACHINE_GUN = "machine_gun"
    ROCKET_FUEL = "rocket_fuel"
    NITRO_BOOST = "nitro_boost"
    FULL_RECOVERY = "full_recovery"

    # Combos
    HYPER_SPEED = "hyper_speed"
    ROTATING_SHIELD_GUN = "rotating_shield_gun"
    QUAD_MACHINE_GUN = "quad_machine_gun"
    DEATH_STAR_BEAM = "death_star_beam"
    STORM_LIGHTNING = "storm_lightning"
    IRON_BODY = "iron_body"
    INVINCIBLE_FIRE_WHEEL = "invincible_fire_wheel"
    GOLDEN_BELL = "golden_bell"
    TIME_DILATION = "time_dilation"
    TURBO_OVERLOAD = "turbo_overload"
    SUPERNOVA_BURST = "supernova_burst"
    SUPER_MAGNET = "super_magnet"
    DOUBLE_COIN = "double_coin"
    DOUBLE_HEART = "double_heart"


class ShieldKind(str, Enum):
    """How an active power-up changes vehicle/obstacle contact."""

    NONE = "none"
    IMMUNE = "immune"  # No damage, obstacle untouched
    DESTRUCTIVE = "destructive"  # Obstacle destroyed for a coin bonus
    TRACKED = "tracked"  # No damage, contact recorded as a breach


@dataclass(frozen=True)
class PowerUpEffect:
    """Gameplay modifiers of one power-up type.

    Attributes:
        duration_ms: Base duration; 0 for instant pickups
        speed_multiplier: Multiplies the base speed (stacks multiplicatively)
        speed_override: If set, speed becomes max_speed * this (highest wins)
        score_multiplier: Multiplies per-tick score gain
        coin_multiplier: Multiplies picked-up coin value
        shield: Contact behaviour against obstacles and boss attacks
        extend_on_destroy_ms: Duration bonus per obstacle destroyed on contact
        magnet_radius: Pull radius for power-ups (0 = no magnet)
        magnet_all_types: Whether the magnet pulls every type or only coins
        bullet_count: Bullets per volley (0 = no gun)
        strike_interval_ms: Lightning strike cadence (0 = none)
        clears_ahead: Destroys every obstacle in front of the vehicle each tick
        clears_behind: Destroys every obstacle behind the vehicle each tick
        obstacle_time_scale: Scales obstacle scrolling
        recovery_on_expire: Starts a recovery window when the effect ends
    """

    duration_ms: float = 0.0
    speed_multiplier: float = 1.0
    speed_override: Optional[float] = None
    score_multiplier: float = 1.0
    coin_multiplier: float = 1.0
    shield: ShieldKind = ShieldKind.NONE
    extend_on_destroy_ms: float = 0.0
    magnet_radius: float = 0.0
    magnet_all_types: bool = False
    bullet_count: int = 0
    strike_interval_ms: float = 0.0
    clears_ahead: bool = False
    clears_behind: bool = False
    obstacle_time_scale: float = 1.0
    recovery_on_expire: bool = False


POWER_UP_EFFECTS: Dict[PowerUpType, PowerUpEffect] = {
    PowerUpType.SPEED_BOOST: PowerUpEffect(duration_ms=3000, speed_multiplier=1.5),
    PowerUpType.INVINCIBILITY: PowerUpEffect(duration_ms=5000, shield=ShieldKind.IMMUNE),
    PowerUpType.MAGNET: PowerUpEffect(duration_ms=4000, magnet_radius=150),
    PowerUpType.SCORE_MULTIPLIER: PowerUpEffect(duration_ms=5000, score_multiplier=2.0),
    PowerUpType.COIN: PowerUpEffect(),
    PowerUpType.HEART: PowerUpEffect(),
    PowerUpType.MACHINE_GUN: PowerUpEffect(
        duration_ms=10000, bullet_count=1, recovery_on_expire=True
    ),
    PowerUpType.ROCKET_FUEL: PowerUpEffect(
        duration_ms=6000, speed_override=2.0, recovery_on_expire=True
    ),
    PowerUpType.NITRO_BOOST: PowerUpEffect(
        duration_ms=3000, speed_override=1.0, recovery_on_expire=True
    ),
    PowerUpType.FULL_RECOVERY: PowerUpEffect(),
    PowerUpType.HYPER_SPEED: PowerUpEffect(duration_ms=5000, speed_multiplier=3.0),
    PowerUpType.ROTATING_SHIELD_GUN: PowerUpEffect(
        duration_ms=8000, shield=ShieldKind.IMMUNE, bullet_count=1, recovery_on_expire=True
    ),
    PowerUpType.QUAD_MACHINE_GUN: PowerUpEffect(
        duration_ms=10000, bullet_count=4, recovery_on_expire=True
    ),
    PowerUpType.DEATH_STAR_BEAM: PowerUpEffect(
        duration_ms=5000, clears_ahead=True, recovery_on_expire=True
    ),
    PowerUpType.STORM_LIGHTNING: PowerUpEffect(
        duration_ms=8000, strike_interval_ms=1000, recovery_on_expire=True
    ),
    PowerUpType.IRON_BODY: PowerUpEffect(duration_ms=8000, shield=ShieldKind.DESTRUCTIVE),
    PowerUpType.INVINCIBLE_FIRE_WHEEL: PowerUpEffect(
        duration_ms=6000,
        shield=ShieldKind.DESTRUCTIVE,
        extend_on_destroy_ms=250,
        recovery_on_expire=True,
    ),
    PowerUpType.GOLDEN_BELL: PowerUpEffect(duration_ms=10000, shield=ShieldKind.TRACKED),
    PowerUpType.TIME_DILATION: PowerUpEffect(
        duration_ms=6000, shield=ShieldKind.IMMUNE, obstacle_time_scale=0.5
    ),
    PowerUpType.TURBO_OVERLOAD: PowerUpEffect(
        duration_ms=5000, speed_override=3.0, shield=ShieldKind.IMMUNE, recovery_on_expire=True
    ),
    PowerUpType.SUPERNOVA_BURST: PowerUpEffect(
        duration_ms=4000,
        speed_override=4.0,
        shield=ShieldKind.IMMUNE,
        clears_behind=True,
        recovery_on_expire=True,
    ),
    PowerUpType.SUPER_MAGNET: PowerUpEffect(
        duration_ms=8000, magnet_radius=300, magnet_all_types=True
    ),
    PowerUpType.DOUBLE_COIN: PowerUpEffect(duration_ms=10000, coin_multiplier=2.0),
    PowerUpType.DOUBLE_HEART: PowerUpEffect(duration_ms=3000),
}

# Pickups applied immediately; they never occupy the active queue
INSTANT_TYPES: FrozenSet[PowerUpType] = frozenset(
    {PowerUpType.COIN, PowerUpType.HEART, PowerUpType.FULL_RECOVERY}
)


def _pair(a: PowerUpType, b: PowerUpType) -> FrozenSet[PowerUpType]:
    return frozenset((a, b))


# Unordered source pair -> combo. A same-type recipe is a one-element frozenset.
COMBO_RECIPES: Dict[FrozenSet[PowerUpType], PowerUpType] = {
    _pair(PowerUpType.SPEED_BOOST, PowerUpType.SPEED_BOOST): PowerUpType.HYPER_SPEED,
    _pair(PowerUpType.INVINCIBILITY, PowerUpType.MACHINE_GUN): PowerUpType.ROTATING_SHIELD_GUN,
    _pair(PowerUpType.MACHINE_GUN, PowerUpType.MACHINE_GUN): PowerUpType.QUAD_MACHINE_GUN,
    _pair(PowerUpType.QUAD_MACHINE_GUN, PowerUpType.MACHINE_GUN): PowerUpType.DEATH_STAR_BEAM,
    _pair(PowerUpType.MACHINE_GUN, PowerUpType.SPEED_BOOST): PowerUpType.STORM_LIGHTNING,
    _pair(PowerUpType.INVINCIBILITY, PowerUpType.INVINCIBILITY): PowerUpType.IRON_BODY,
    _pair(PowerUpType.IRON_BODY, PowerUpType.NITRO_BOOST): PowerUpType.INVINCIBLE_FIRE_WHEEL,
    _pair(PowerUpType.INVINCIBILITY, PowerUpType.MAGNET): PowerUpType.GOLDEN_BELL,
    _pair(PowerUpType.INVINCIBILITY, PowerUpType.SCORE_MULTIPLIER): PowerUpType.TIME_DILATION,
    _pair(PowerUpType.NITRO_BOOST, PowerUpType.ROCKET_FUEL): PowerUpType.TURBO_OVERLOAD,
    _pair(PowerUpType.TURBO_OVERLOAD, PowerUpType.ROCKET_FUEL): PowerUpType.SUPERNOVA_BURST,
    _pair(PowerUpType.MAGNET, PowerUpType.MAGNET): PowerUpType.SUPER_MAGNET,
    _pair(PowerUpType.SCORE_MULTIPLIER, PowerUpType.COIN): PowerUpType.DOUBLE_COIN,
    _pair(PowerUpType.SCORE_MULTIPLIER, PowerUpType.HEART): PowerUpType.DOUBLE_HEART,
}

# Combos that count as shields when deciding shop spawns and purchases
SHIELD_COMBO_TYPES: FrozenSet[PowerUpType] = frozenset(
    {
        PowerUpType.ROTATING_SHIELD_GUN,
        PowerUpType.IRON_BODY,
        PowerUpType.GOLDEN_BELL,
        PowerUpType.INVINCIBLE_FIRE_WHEEL,
    }
)

# Hearts restored immediately when a combo is crafted
COMBO_HEAL: Dict[PowerUpType, int] = {PowerUpType.DOUBLE_HEART: 2}

# Types dropped at random on the road
BASIC_SPAWN_TYPES: List[PowerUpType] = [
    PowerUpType.SPEED_BOOST,
    PowerUpType.INVINCIBILITY,
    PowerUpType.MAGNET,
    PowerUpType.SCORE_MULTIPLIER,
    PowerUpType.COIN,
]

SHOP_SPAWN_TYPES: List[PowerUpType] = [
    PowerUpType.INVINCIBILITY,
    PowerUpType.MACHINE_GUN,
    PowerUpType.ROCKET_FUEL,
    PowerUpType.NITRO_BOOST,
]

# Shop prices in coins
SHOP_PRICES: Dict[PowerUpType, int] = {
    PowerUpType.INVINCIBILITY: 500,
    PowerUpType.MACHINE_GUN: 800,
    PowerUpType.ROCKET_FUEL: 1000,
    PowerUpType.NITRO_BOOST: 600,
    PowerUpType.FULL_RECOVERY: 9999,
}

POWER_UP_SIZE = 50

# Spawn gates (simulation ms)
BASIC_POWER_UP_INTERVAL_MS = 2000.0
SHOP_POWER_UP_INTERVAL_MS = 30000.0
HEART_POWER_UP_INTERVAL_MS = 30000.0

# A spawn candidate this close to an obstacle is dropped
POWER_UP_MIN_VERTICAL_GAP = 250.0
POWER_UP_MIN_HORIZONTAL_GAP = 60.0

# Weapons
BULLET_WIDTH = 4
BULLET_HEIGHT = 10
BULLET_SPEED = 15.0
BULLET_FIRE_INTERVAL_MS = 200.0
BULLET_SPREAD = 12.0  # Horizontal gap between bullets of one volley
BULLET_BOSS_DAMAGE = 20

# Magnet pull per tick
MAGNET_PULL_SPEED = 5.0


def get_effect(power_up_type: PowerUpType) -> PowerUpEffect:
    """Return the effect row of a type."""
    return POWER_UP_EFFECTS[power_up_type]


def find_recipe(first: PowerUpType, second: PowerUpType) -> Optional[PowerUpType]:
    """Return the combo produced by pairing two types, if any."""
    return COMBO_RECIPES.get(_pair(first, second))
