"""The player's vehicle."""

from dataclasses import dataclass

from racecore.config.display import CANVAS_HEIGHT, get_lane_positions
from racecore.config.vehicles import (
    VEHICLE_BOTTOM_MARGIN,
    VEHICLE_HEIGHT,
    VEHICLE_WIDTH,
    VehicleConfig,
    VehicleStats,
    calculate_vehicle_stats,
)
from racecore.entities.base import Entity


@dataclass
class Vehicle(Entity):
    """The player's car.

    Attributes:
        config: Selected preset
        stats: Stats derived from the preset
        lane: Index of the lane whose centre is nearest to the vehicle
    """

    config: VehicleConfig = None
    stats: VehicleStats = None
    lane: int = 0

    @classmethod
    def create(cls, config: VehicleConfig) -> "Vehicle":
        """Place a new vehicle in the middle lane at its resting height."""
        lanes = get_lane_positions()
        middle = len(lanes) // 2
        return cls(
            x=lanes[middle] - VEHICLE_WIDTH / 2,
            y=resting_y(),
            width=VEHICLE_WIDTH,
            height=VEHICLE_HEIGHT,
            config=config,
            stats=calculate_vehicle_stats(config),
            lane=middle,
        )

    def update_lane(self) -> None:
        """Recompute ``lane`` from the current x position."""
        lanes = get_lane_positions()
        center_x = self.x + self.width / 2
        self.lane = min(range(len(lanes)), key=lambda i: abs(lanes[i] - center_x))


def resting_y() -> float:
    """The lowest y the vehicle may occupy (also its starting height)."""
    return CANVAS_HEIGHT - VEHICLE_HEIGHT - VEHICLE_BOTTOM_MARGIN
