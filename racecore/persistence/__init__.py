"""Durable save data for Lane Rush.

The engine reads and writes a handful of counters (high score, coin
balance, selected vehicle, slot machine failure streak, ...) through
``SaveData``, which sits on top of any ``KeyValueStore``.
"""

from racecore.persistence.save_data import LEADERBOARD_MAX_ENTRIES, SaveData
from racecore.persistence.store import JsonFileStore, KeyValueStore, MemoryStore

__all__ = [
    "JsonFileStore",
    "KeyValueStore",
    "LEADERBOARD_MAX_ENTRIES",
    "MemoryStore",
    "SaveData",
]
