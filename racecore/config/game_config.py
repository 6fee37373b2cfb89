"""Runtime configuration for a simulation engine."""

import dataclasses
from dataclasses import dataclass
from typing import Any

from racecore.config.difficulty import DEFAULT_DIFFICULTY_LEVEL, DIFFICULTY_LEVELS
from racecore.config.display import FRAME_TIME_MS, MAX_FRAME_TIME_MS
from racecore.config.slot_machine import SPIN_SETTLE_DELAY_MS
from racecore.exceptions import ConfigurationError


@dataclass
class GameConfig:
    """Configuration toggles for one engine.

    Attributes:
        difficulty_level: "easy", "medium" or "hard"
        step_ms: Fixed logical tick length
        max_frame_ms: Largest host-frame gap accepted before clamping
        auto_spin_slot_machine: Spin as soon as all three cards are filled
        slot_settle_delay_ms: Delay between a spin and its settlement
        username: Player identity attached to finished-game records
    """

    difficulty_level: str = DEFAULT_DIFFICULTY_LEVEL
    step_ms: float = FRAME_TIME_MS
    max_frame_ms: float = MAX_FRAME_TIME_MS
    auto_spin_slot_machine: bool = True
    slot_settle_delay_ms: float = SPIN_SETTLE_DELAY_MS
    username: str = "player"

    def validate(self) -> None:
        """Raise ConfigurationError for values the engine cannot run with."""
        if self.difficulty_level not in DIFFICULTY_LEVELS:
            raise ConfigurationError(
                f"Unknown difficulty level {self.difficulty_level!r}. "
                f"Valid levels: {sorted(DIFFICULTY_LEVELS)}"
            )
        if self.step_ms <= 0:
            raise ConfigurationError(f"step_ms must be positive, got {self.step_ms}")
        if self.max_frame_ms < self.step_ms:
            raise ConfigurationError(
                f"max_frame_ms ({self.max_frame_ms}) must be at least step_ms ({self.step_ms})"
            )
        if self.slot_settle_delay_ms < 0:
            raise ConfigurationError("slot_settle_delay_ms cannot be negative")

    def with_overrides(self, **overrides: Any) -> "GameConfig":
        """Return a copy with the given fields replaced."""
        return dataclasses.replace(self, **overrides)
