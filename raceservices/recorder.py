"""Game-over persistence.

``GameRecorder`` subscribes to an engine's ``GameOverEvent`` and turns the
finished-game summary into a ``GameRecord``: the record is posted to the
remote service (if one is configured) and a ``LeaderboardEntry`` is added
to the local leaderboard kept in save data.
"""

import logging
from datetime import datetime, timezone
from typing import TYPE_CHECKING, List, Optional

from pydantic import ValidationError

from racecore.events import GameOverEvent
from racecore.persistence import SaveData
from raceservices.client import RecordServiceClient
from raceservices.models import GameRecord, LeaderboardEntry

if TYPE_CHECKING:
    from racecore.simulation import SimulationEngine

logger = logging.getLogger(__name__)


class GameRecorder:
    """Persists finished games. Failures are logged, never raised into the engine."""

    def __init__(
        self,
        save_data: SaveData,
        client: Optional[RecordServiceClient] = None,
    ) -> None:
        self._save_data = save_data
        self._client = client
        self.records: List[GameRecord] = []

    def attach(self, engine: "SimulationEngine") -> None:
        engine.events.subscribe(GameOverEvent, self.on_game_over)

    def detach(self, engine: "SimulationEngine") -> None:
        engine.events.unsubscribe(GameOverEvent, self.on_game_over)

    def on_game_over(self, event: GameOverEvent) -> Optional[GameRecord]:
        try:
            record = GameRecord.from_summary(event.summary, event.vehicle)
        except ValidationError as e:
            logger.error(f"Discarding invalid game record: {e}")
            return None

        self.records.append(record)
        entry = LeaderboardEntry.from_record(
            record, timestamp=datetime.now(timezone.utc).isoformat()
        )
        self._save_data.add_leaderboard_entry(entry.model_dump(mode="json"))

        if self._client is not None:
            self._client.submit(record)
        logger.info(
            f"Recorded game: {record.username} distance={record.distance:.0f} score={record.score}"
        )
        return record

    def leaderboard(self) -> List[LeaderboardEntry]:
        return [LeaderboardEntry.model_validate(e) for e in self._save_data.leaderboard]
