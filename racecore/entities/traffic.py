"""Road traffic: obstacles, collectible power-ups and the vehicle's bullets."""

from dataclasses import dataclass

from racecore.config.powerups import PowerUpType
from racecore.entities.base import Entity


@dataclass
class Obstacle(Entity):
    """A car, truck or bus driving in a lane."""

    type: str = "car"
    speed: float = 0.0
    lane: int = 0
    color: str = "#6b7280"


@dataclass
class PowerUp(Entity):
    """A collectible lying on the road.

    Attributes:
        type: What the pickup grants
        value: Coin value for coin pickups
        active: Cleared once collected
    """

    type: PowerUpType = PowerUpType.COIN
    value: int = 0
    active: bool = True


@dataclass
class Bullet(Entity):
    """A projectile fired upwards by a gun power-up."""

    speed: float = 0.0
    active: bool = True
