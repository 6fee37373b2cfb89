"""Configuration package for the Lane Rush simulation.

Gameplay constants are grouped by concern (display, vehicles, power-ups,
boss battles, slot machine, difficulty, economy). Runtime toggles live in
``GameConfig``.
"""

from racecore.config.game_config import GameConfig

__all__ = ["GameConfig"]
