"""Snapshot serialization for out-of-process renderers."""

import logging
import time
from typing import TYPE_CHECKING, Callable, Optional

import orjson

from racecore.simulation.state import GameSnapshot

if TYPE_CHECKING:
    from racecore.simulation import SimulationEngine

logger = logging.getLogger(__name__)

SLOW_SERIALIZE_MS = 50.0


class StatePublisher:
    """Caches, throttles and serializes engine snapshots.

    Attributes:
        update_interval: Serialize every N-th snapshot (1 = every snapshot)
    """

    def __init__(
        self,
        sink: Optional[Callable[[bytes], None]] = None,
        update_interval: int = 1,
    ) -> None:
        if update_interval < 1:
            raise ValueError("update_interval must be at least 1")
        self.update_interval = update_interval
        self._sink = sink
        self._snapshots_seen = 0
        self._last_payload: Optional[bytes] = None
        self._unsubscribe: Optional[Callable[[], None]] = None

    @property
    def last_payload(self) -> Optional[bytes]:
        return self._last_payload

    def attach(self, engine: "SimulationEngine") -> None:
        self.detach()
        self._unsubscribe = engine.subscribe(self.on_snapshot)

    def detach(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    def on_snapshot(self, snapshot: GameSnapshot) -> None:
        self._snapshots_seen += 1
        if (self._snapshots_seen - 1) % self.update_interval != 0:
            return
        payload = self.serialize(snapshot)
        self._last_payload = payload
        if self._sink is not None:
            self._sink(payload)

    def serialize(self, snapshot: GameSnapshot) -> bytes:
        """Serialize a snapshot to JSON bytes."""
        start = time.perf_counter()
        serialized = orjson.dumps(snapshot.to_dict(), option=orjson.OPT_NON_STR_KEYS)
        duration_ms = (time.perf_counter() - start) * 1000

        if duration_ms > SLOW_SERIALIZE_MS:
            logger.warning(
                "serialize: Frame %s slow serialization: %.2f ms, Size: %d bytes",
                snapshot.frame,
                duration_ms,
                len(serialized),
            )
        return serialized
