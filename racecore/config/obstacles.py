"""Obstacle traffic constants."""

from typing import Dict, List, Tuple

OBSTACLE_DIMENSIONS: Dict[str, Tuple[float, float]] = {
    "car": (45, 80),
    "truck": (50, 120),
    "bus": (55, 140),
}

# Own forward speed of each obstacle type; they scroll at (game speed - own speed)
OBSTACLE_SPEEDS: Dict[str, float] = {
    "car": 2.0,
    "truck": 1.5,
    "bus": 1.0,
}

# Weighted type table, biased towards plain cars
OBSTACLE_TYPE_WEIGHTS: List[Tuple[str, int]] = [
    ("car", 3),
    ("truck", 1),
    ("bus", 1),
]

OBSTACLE_COLORS: Dict[str, List[str]] = {
    "car": ["#6b7280", "#1f2937", "#dc2626", "#2563eb", "#16a34a"],
    "truck": ["#78716c", "#44403c", "#854d0e"],
    "bus": ["#fbbf24", "#f97316"],
}

# Coins awarded when an obstacle is destroyed by a bullet or a destructive shield
OBSTACLE_DESTROY_REWARD = 10
