"""Vehicle presets, dimensions and handling constants."""

from dataclasses import dataclass
from typing import Any, Dict, List

VEHICLE_WIDTH = 50
VEHICLE_HEIGHT = 90

# Gap kept between the vehicle and the bottom edge of the play-field
VEHICLE_BOTTOM_MARGIN = 50

# Speed curve (units per tick)
INITIAL_SPEED = 3.0
DEFAULT_MAX_SPEED = 12.0

# Collision response
COLLISION_RECOVERY_TIME_MS = 1500.0  # Grace window after a hit
COLLISION_KNOCKBACK = 30.0  # Units the vehicle is pushed down on a hit
COLLISION_PADDING = 5.0  # Inward padding for vehicle/obstacle tests

# Drag steering moves at most this many handling-steps per tick
DRAG_SPEED_FACTOR = 2.0


@dataclass(frozen=True)
class VehicleConfig:
    """A selectable vehicle configuration.

    Attributes:
        id: Stable identifier of the preset
        name: Display name
        color: Body colour (hex string, used by renderers only)
        engine_level: 1-3, drives acceleration
        tire_level: 1-3, drives top speed and handling
    """

    id: str
    name: str
    color: str
    engine_level: int
    tire_level: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "color": self.color,
            "engine_level": self.engine_level,
            "tire_level": self.tire_level,
        }


@dataclass(frozen=True)
class VehicleStats:
    """Derived handling numbers for a vehicle configuration."""

    acceleration: float
    max_speed: float
    handling: float


VEHICLE_PRESETS: List[VehicleConfig] = [
    VehicleConfig("sporty", "Sports Car", "#ef4444", engine_level=3, tire_level=2),
    VehicleConfig("sedan", "Sedan", "#3b82f6", engine_level=2, tire_level=2),
    VehicleConfig("suv", "SUV", "#22c55e", engine_level=2, tire_level=3),
    VehicleConfig("truck", "Pickup", "#f59e0b", engine_level=1, tire_level=3),
]


def get_preset(preset_id: str) -> VehicleConfig:
    """Look up a preset by id, raising KeyError for unknown ids."""
    for preset in VEHICLE_PRESETS:
        if preset.id == preset_id:
            return preset
    raise KeyError(f"Unknown vehicle preset: {preset_id!r}")


def calculate_vehicle_stats(config: VehicleConfig) -> VehicleStats:
    """Derive acceleration, top speed and handling from engine/tire levels."""
    return VehicleStats(
        acceleration=0.5 + config.engine_level * 0.3,  # 0.8 - 1.4
        max_speed=8.0 + config.tire_level * 2.0,  # 10 - 14
        handling=3.0 + config.tire_level * 1.5,  # 4.5 - 7.5 units per tick
    )
