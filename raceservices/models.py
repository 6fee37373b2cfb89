"""Records exchanged with the record/leaderboard service."""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class VehicleModel(BaseModel):
    """Vehicle configuration attached to a record."""

    id: str
    name: str
    color: str = "#ffffff"
    engine_level: int
    tire_level: int


class PowerUpStatModel(BaseModel):
    collected: int = 0
    combo_crafted: int = 0


class BossRecordModel(BaseModel):
    """Outcome of one boss encounter."""

    boss_number: int
    boss_name: str
    start_distance: float
    start_time: float
    defeated: bool = False
    elapsed_time: float = Field(0.0, ge=0)
    power_ups_used: int = 0


class GameStatisticsModel(BaseModel):
    power_up_stats: Dict[str, PowerUpStatModel] = Field(default_factory=dict)
    total_coins_collected: int = 0
    total_distance_traveled: float = 0.0
    total_obstacles_destroyed: int = 0
    boss_records: List[BossRecordModel] = Field(default_factory=list)


class GameRecord(BaseModel):
    """A finished game, as appended to the record service."""

    username: str
    vehicle: Optional[VehicleModel] = None
    distance: float
    score: int
    coins: int
    hearts: int = Field(ge=0, le=3)
    max_speed: float
    obstacles_destroyed: int = 0
    duration_ms: float = 0.0
    difficulty: str
    boss_defeated: bool = False
    statistics: GameStatisticsModel = Field(default_factory=GameStatisticsModel)

    @classmethod
    def from_summary(
        cls, summary: Dict[str, Any], vehicle: Optional[Dict[str, Any]] = None
    ) -> "GameRecord":
        return cls(vehicle=vehicle, **summary)


class LeaderboardEntry(BaseModel):
    """A single entry in the leaderboard."""

    username: str
    vehicle_id: Optional[str] = None
    distance: float
    score: int
    difficulty: str = "medium"
    timestamp: Optional[str] = None

    @classmethod
    def from_record(cls, record: GameRecord, timestamp: Optional[str] = None) -> "LeaderboardEntry":
        return cls(
            username=record.username,
            vehicle_id=record.vehicle.id if record.vehicle else None,
            distance=record.distance,
            score=record.score,
            difficulty=record.difficulty,
            timestamp=timestamp,
        )
