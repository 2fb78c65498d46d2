"""
Session accumulation

This module collects the windows of one recording session and keeps running
statistics for live display. It is fed by a single stream and is not safe for
concurrent writers: push(), start() and stop() must be called from one thread.
"""

import logging
import math
import time
from enum import Enum
from typing import Callable, Dict, List, Optional, Tuple

from ..core.config import SCORE_BUCKET_EDGES
from ..core.data_types import Band, LiveStats, WindowSample
from ..core.errors import SessionStateError

logger = logging.getLogger(__name__)

# Classification labels counted towards the session's dominant tremor type
TREMOR_TYPES = ("Parkinsonian", "Essential", "Physiological")


class SessionState(Enum):
    IDLE = "idle"
    RECORDING = "recording"
    STOPPED = "stopped"


def _wall_clock_ms() -> int:
    return int(time.time() * 1000)


class SessionAggregator:
    """
    Accumulate WindowSamples for the active recording

    State machine: IDLE -> RECORDING -> STOPPED -> (reset or start) -> ...
    Starting while RECORDING is refused so a session is never discarded by
    accident; call stop() first.
    """

    def __init__(self, clock: Callable[[], int] = _wall_clock_ms):
        self._clock = clock
        self.state = SessionState.IDLE
        self._samples: List[WindowSample] = []
        self._start_ms: Optional[int] = None
        self._stop_ms: Optional[int] = None
        self._reset_running()

    def _reset_running(self):
        self._mean = 0.0
        self._m2 = 0.0
        self._peak = 0.0
        self._band_totals = [0.0, 0.0, 0.0]
        self._bucket_counts = [0, 0, 0, 0]
        self._type_counts: Dict[str, int] = {name: 0 for name in TREMOR_TYPES}

    @property
    def is_recording(self) -> bool:
        return self.state is SessionState.RECORDING

    @property
    def count(self) -> int:
        return len(self._samples)

    def start(self):
        """Begin a new recording, discarding any stopped session"""
        if self.state is SessionState.RECORDING:
            raise SessionStateError("Session already recording; stop() it before starting a new one")

        self._samples = []
        self._reset_running()
        self._start_ms = self._clock()
        self._stop_ms = None
        self.state = SessionState.RECORDING
        logger.info("Session started")

    def push(self, sample: WindowSample) -> bool:
        """
        Append a window to the active recording

        Args:
            sample: Validated window reading

        Returns:
            bool: True if recorded, False if no recording is active
        """
        if self.state is not SessionState.RECORDING:
            logger.debug("Window ignored: not recording")
            return False

        self._samples.append(sample)
        n = len(self._samples)

        # Welford update
        delta = sample.score - self._mean
        self._mean += delta / n
        self._m2 += delta * (sample.score - self._mean)
        self._peak = sample.score if n == 1 else max(self._peak, sample.score)

        self._band_totals[0] += sample.b1
        self._band_totals[1] += sample.b2
        self._band_totals[2] += sample.b3
        self._bucket_counts[self._bucket(sample.score)] += 1
        if sample.type in self._type_counts:
            self._type_counts[sample.type] += 1

        logger.debug(f"Window {n}: score={sample.score:.2f} dominant={sample.dominant_band.value}")
        return True

    @staticmethod
    def _bucket(score: float) -> int:
        for idx, edge in enumerate(SCORE_BUCKET_EDGES):
            if score < edge:
                return idx
        return len(SCORE_BUCKET_EDGES)

    def stop(self) -> Tuple[WindowSample, ...]:
        """Stop recording and freeze the window sequence (idempotent)"""
        if self.state is SessionState.RECORDING:
            self._stop_ms = self._clock()
            self.state = SessionState.STOPPED
            logger.info(f"Session stopped: {len(self._samples)} windows captured")
        return self.snapshot()

    def reset(self):
        """Return a stopped session to IDLE, dropping its windows"""
        if self.state is SessionState.RECORDING:
            raise SessionStateError("Cannot reset while recording; stop() first")
        self._samples = []
        self._reset_running()
        self._start_ms = None
        self._stop_ms = None
        self.state = SessionState.IDLE

    def snapshot(self) -> Tuple[WindowSample, ...]:
        """Immutable copy of the windows recorded so far"""
        return tuple(self._samples)

    def live_stats(self) -> LiveStats:
        """Running view of the current session, O(1)"""
        n = len(self._samples)
        if n == 0:
            return LiveStats(duration_ms=self._duration_ms())

        distribution = dict(zip(
            ("low", "moderate", "high", "very_high"),
            (count / n for count in self._bucket_counts),
        ))

        return LiveStats(
            count=n,
            mean=self._mean,
            std=math.sqrt(self._m2 / n),
            peak=self._peak,
            dominant_band=Band.dominant(*self._band_totals),
            dominant_type=self._dominant_type(),
            duration_ms=self._duration_ms(),
            distribution=distribution,
        )

    def _dominant_type(self) -> str:
        # Strict majority only; ties report "None" as the device does
        counts = self._type_counts
        for name in TREMOR_TYPES:
            others = [counts[other] for other in TREMOR_TYPES if other != name]
            if all(counts[name] > c for c in others):
                return name
        return "None"

    def _duration_ms(self) -> int:
        if self._start_ms is None:
            return 0
        end = self._stop_ms if self._stop_ms is not None else self._clock()
        return max(0, end - self._start_ms)
