"""Fixed-timestep accumulator loop.

Converts variable host frame times into a whole number of fixed logical
ticks. A host frame longer than ``max_frame_ms`` is clamped, so a stalled
host never triggers a burst of catch-up ticks.
"""

import logging
from typing import Callable, Optional

logger = logging.getLogger(__name__)

# Absorbs float drift so that, e.g., 15 steps of 1000/60 ms fit in 250 ms
_STEP_EPSILON = 1e-9


class FixedStepLoop:
    """Accumulates elapsed time and runs ``tick`` once per full step.

    Attributes:
        step_ms: Length of one logical tick
        max_frame_ms: Largest elapsed time accepted per ``advance`` call
    """

    def __init__(
        self,
        tick: Callable[[float], None],
        step_ms: float,
        max_frame_ms: float,
    ) -> None:
        self._tick = tick
        self.step_ms = step_ms
        self.max_frame_ms = max_frame_ms
        self._running = False
        self._baseline: Optional[float] = None
        self._accumulator = 0.0
        self._clamped_frames = 0

    @property
    def running(self) -> bool:
        return self._running

    @property
    def accumulator(self) -> float:
        return self._accumulator

    def start(self, now_ms: float) -> None:
        self._running = True
        self._baseline = now_ms
        self._accumulator = 0.0

    def resume(self, now_ms: float) -> None:
        """Continue ticking from a fresh baseline (time spent paused is dropped)."""
        self.start(now_ms)

    def pause(self) -> None:
        self._running = False

    def stop(self) -> None:
        self._running = False
        self._baseline = None
        self._accumulator = 0.0

    def advance(self, now_ms: float) -> int:
        """Run every tick that fits in the time since the previous call.

        Returns:
            Number of ticks executed
        """
        if not self._running:
            return 0
        if self._baseline is None:
            self._baseline = now_ms
            return 0

        elapsed = now_ms - self._baseline
        self._baseline = now_ms
        if elapsed > self.max_frame_ms:
            self._clamped_frames += 1
            logger.debug(f"Clamped frame of {elapsed:.1f} ms to {self.max_frame_ms:.1f} ms")
            elapsed = self.max_frame_ms
        self._accumulator += max(0.0, elapsed)

        ticks = 0
        while self._running and self._accumulator + _STEP_EPSILON >= self.step_ms:
            self._accumulator = max(0.0, self._accumulator - self.step_ms)
            self._tick(self.step_ms)
            ticks += 1
        return ticks

    def get_debug_info(self):
        return {
            "running": self._running,
            "accumulator_ms": self._accumulator,
            "clamped_frames": self._clamped_frames,
        }
