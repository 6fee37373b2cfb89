"""Play-field geometry and timing constants."""

from typing import List

# Play-field dimensions in game units (one unit per pixel on the reference canvas)
CANVAS_WIDTH = 400
CANVAS_HEIGHT = 600

# Road layout
LANE_COUNT = 3
LANE_WIDTH = 80
ROAD_WIDTH = 280
ROAD_OFFSET = 60  # Distance from the left edge of the canvas to the road

# Fixed simulation step (60 logical ticks per second)
FPS = 60
FRAME_TIME_MS = 1000.0 / FPS

# Largest wall-clock gap accepted per host frame before clamping
MAX_FRAME_TIME_MS = 250.0


def get_lane_positions() -> List[float]:
    """Return the centre x coordinate of every lane, left to right."""
    return [ROAD_OFFSET + LANE_WIDTH / 2 + i * LANE_WIDTH for i in range(LANE_COUNT)]


def road_bounds(entity_width: float) -> tuple:
    """Return the (min_x, max_x) an entity of ``entity_width`` may occupy."""
    return ROAD_OFFSET, ROAD_OFFSET + ROAD_WIDTH - entity_width
