"""Outward-facing collaborators of the Lane Rush core.

- models: pydantic records sent to the record service
- client: httpx client for the record/leaderboard service
- recorder: turns game-over events into records and leaderboard entries
- state_publisher: serializes snapshots for out-of-process renderers
- logging_config: process-wide logging setup
"""

from raceservices.client import RecordServiceClient
from raceservices.logging_config import configure_logging
from raceservices.models import GameRecord, LeaderboardEntry
from raceservices.recorder import GameRecorder
from raceservices.state_publisher import StatePublisher

__all__ = [
    "GameRecord",
    "GameRecorder",
    "LeaderboardEntry",
    "RecordServiceClient",
    "StatePublisher",
    "configure_logging",
]
