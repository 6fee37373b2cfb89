"""Typed access to the durable counters.

Storage faults are logged and swallowed here: save data is written
opportunistically during play and must never interrupt a session.
"""

import logging
from typing import Any, Dict, List, Optional

from racecore.config.economy import clamp_coins
from racecore.exceptions import PersistenceError
from racecore.persistence.store import KeyValueStore, MemoryStore

logger = logging.getLogger(__name__)

LEADERBOARD_MAX_ENTRIES = 10

KEY_HIGH_SCORE = "high_score"
KEY_COINS = "coins"
KEY_SELECTED_VEHICLE = "selected_vehicle"
KEY_FAILURE_STREAK = "slot_failure_streak"
KEY_GAMES_PLAYED = "games_played"
KEY_TOTAL_DISTANCE = "total_distance"
KEY_LEADERBOARD = "leaderboard"


class SaveData:
    """Durable counters over a ``KeyValueStore``."""

    def __init__(self, store: Optional[KeyValueStore] = None) -> None:
        self._store = store if store is not None else MemoryStore()

    @property
    def store(self) -> KeyValueStore:
        return self._store

    def _get(self, key: str, default: Any) -> Any:
        try:
            return self._store.get(key, default)
        except PersistenceError as e:
            logger.warning(f"Failed to read {key!r} from save data: {e}")
            return default

    def _set(self, key: str, value: Any) -> None:
        try:
            self._store.set(key, value)
        except PersistenceError as e:
            logger.warning(f"Failed to write {key!r} to save data: {e}")

    def _get_int(self, key: str) -> int:
        value = self._get(key, 0)
        try:
            return int(value)
        except (TypeError, ValueError):
            logger.warning(f"Ignoring malformed save value {key!r}={value!r}")
            return 0

    # High score

    @property
    def high_score(self) -> int:
        return self._get_int(KEY_HIGH_SCORE)

    def update_high_score(self, score: int) -> bool:
        """Store ``score`` if it beats the current high score."""
        if score > self.high_score:
            self._set(KEY_HIGH_SCORE, int(score))
            return True
        return False

    # Coins

    @property
    def coins(self) -> int:
        return clamp_coins(self._get_int(KEY_COINS))

    def set_coins(self, coins: int) -> None:
        self._set(KEY_COINS, clamp_coins(coins))

    # Vehicle

    @property
    def selected_vehicle(self) -> Optional[Dict[str, Any]]:
        return self._get(KEY_SELECTED_VEHICLE, None)

    def set_selected_vehicle(self, vehicle: Dict[str, Any]) -> None:
        self._set(KEY_SELECTED_VEHICLE, vehicle)

    # Slot machine

    @property
    def failure_streak(self) -> int:
        return max(0, self._get_int(KEY_FAILURE_STREAK))

    def set_failure_streak(self, streak: int) -> None:
        self._set(KEY_FAILURE_STREAK, max(0, int(streak)))

    # Lifetime totals

    @property
    def games_played(self) -> int:
        return self._get_int(KEY_GAMES_PLAYED)

    @property
    def total_distance(self) -> float:
        value = self._get(KEY_TOTAL_DISTANCE, 0.0)
        return float(value) if isinstance(value, (int, float)) else 0.0

    def record_game(self, distance: float) -> None:
        self._set(KEY_GAMES_PLAYED, self.games_played + 1)
        self._set(KEY_TOTAL_DISTANCE, self.total_distance + distance)

    # Leaderboard

    @property
    def leaderboard(self) -> List[Dict[str, Any]]:
        entries = self._get(KEY_LEADERBOARD, [])
        return list(entries) if isinstance(entries, list) else []

    def add_leaderboard_entry(self, entry: Dict[str, Any]) -> List[Dict[str, Any]]:
        """Insert an entry, keep the best ``LEADERBOARD_MAX_ENTRIES`` by distance."""
        entries = self.leaderboard
        entries.append(entry)
        entries.sort(key=lambda e: e.get("distance", 0), reverse=True)
        entries = entries[:LEADERBOARD_MAX_ENTRIES]
        self._set(KEY_LEADERBOARD, entries)
        return entries
