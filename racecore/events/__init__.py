"""Events module for domain event dispatch.

Each engine owns one ``EventBus``; collaborators (records, leaderboards,
telemetry) subscribe to the typed events below.
"""

from racecore.events.domain_events import (
    BossDefeatedEvent,
    BossEncounterStartedEvent,
    ComboCraftedEvent,
    GameOverEvent,
    SlotSettledEvent,
    VehicleHitEvent,
)
from racecore.events.event_bus import EventBus

__all__ = [
    "BossDefeatedEvent",
    "BossEncounterStartedEvent",
    "ComboCraftedEvent",
    "EventBus",
    "GameOverEvent",
    "SlotSettledEvent",
    "VehicleHitEvent",
]
