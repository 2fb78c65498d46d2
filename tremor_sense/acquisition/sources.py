"""
Window data sources

This module provides the window streams that feed a recording session: replay
of a recorded device event log and synthetic data generation for testing.
Both yield the same event types the live device emits.
"""

import json
import logging
from pathlib import Path
from typing import Any, Iterator, Mapping, Optional, Union
import numpy as np

from ..core.config import SAMPLING_RATE_HZ, WINDOW_SIZE, FREQ_BANDS
from ..core.data_types import Band, CalibrationEvent, WindowSample
from ..core.errors import InvalidInput
from ..detection.classifier import TremorClassifier

logger = logging.getLogger(__name__)

WINDOW_MS = int(WINDOW_SIZE / SAMPLING_RATE_HZ * 1000)

SourceEvent = Union[WindowSample, CalibrationEvent]


def parse_event(line: str, default_timestamp: int = 0) -> SourceEvent:
    """
    Parse one recorded device event

    Accepts either an envelope {"event": "bands"|"calibrated", "data": {...},
    "ts": ms} or a bare payload. A bare payload carrying "baseline" is a
    calibration event; anything else is a bands event.

    Args:
        line: One JSON document
        default_timestamp: Timestamp (ms) used when the line carries none

    Returns:
        WindowSample or CalibrationEvent
    """
    try:
        doc = json.loads(line)
    except json.JSONDecodeError as e:
        raise InvalidInput(f"Malformed event JSON: {e}") from e
    if not isinstance(doc, dict):
        raise InvalidInput(f"Event must be a JSON object, got {type(doc).__name__}")

    if "data" in doc:
        name = doc.get("event", "bands")
        payload = doc["data"]
        timestamp = doc.get("ts", default_timestamp)
    else:
        name = "calibrated" if "baseline" in doc else "bands"
        payload = doc
        timestamp = doc.get("ts", default_timestamp)

    if not isinstance(payload, Mapping):
        raise InvalidInput("Event data must be a JSON object")

    if name == "calibrated":
        return _parse_calibration(payload)
    if name == "bands":
        try:
            timestamp = int(timestamp)
        except (TypeError, ValueError):
            raise InvalidInput(f"Invalid event timestamp: {timestamp!r}") from None
        return WindowSample.from_event(payload, timestamp)
    raise InvalidInput(f"Unknown event type: {name}")


def _parse_calibration(payload: Mapping[str, Any]) -> CalibrationEvent:
    try:
        return CalibrationEvent(
            baseline=float(payload["baseline"]),
            noise_floor=float(payload.get("noiseFloor", 0.0)),
            base_for_score=float(payload.get("baseForScore", 0.0)),
        )
    except (KeyError, TypeError, ValueError) as e:
        raise InvalidInput(f"Invalid calibration event: {dict(payload)!r}") from e


class ReplaySource:
    """
    Replay a JSON-lines recording of device events

    Lines without a timestamp are spaced one window apart, starting at
    start_ms.
    """

    def __init__(self, path: Union[str, Path], start_ms: int = 0):
        self.path = Path(path)
        self.start_ms = start_ms

    def __iter__(self) -> Iterator[SourceEvent]:
        logger.info(f"Replaying events from {self.path}")
        window_idx = 0
        with open(self.path, 'r', encoding='utf-8') as f:
            for lineno, line in enumerate(f, start=1):
                line = line.strip()
                if not line or line.startswith("#"):
                    continue
                try:
                    event = parse_event(line, self.start_ms + window_idx * WINDOW_MS)
                except InvalidInput as e:
                    raise InvalidInput(f"{self.path}:{lineno}: {e}") from e
                if isinstance(event, WindowSample):
                    window_idx += 1
                yield event


class FakeTremorSource:
    """
    Generate synthetic tremor windows for testing

    Produces band powers with a slowly modulated tremor in one band on top of
    log-normal background power, then labels and scores each window through
    the firmware-compatible classifier.
    """

    def __init__(self, tremor_band: Union[Band, str] = Band.HZ_4_6, seed: Optional[int] = None,
                 start_ms: int = 0, amplitude: float = 2.0, cycle_windows: int = 40,
                 classifier: Optional[TremorClassifier] = None):
        self.tremor_band = Band(tremor_band)
        self.rng = np.random.default_rng(seed)
        self.amplitude = amplitude
        self.cycle_windows = cycle_windows
        self.classifier = classifier if classifier else TremorClassifier()
        self.time_ms = start_ms
        self.window_idx = 0
        self._band_idx = list(FREQ_BANDS).index(self.tremor_band.value)

    def generate_window(self) -> WindowSample:
        """
        Generate one synthetic window

        Returns:
            WindowSample: Classified window at the next timestamp
        """
        # Background power in every band
        powers = self.rng.lognormal(mean=-2.5, sigma=0.6, size=3)

        # Tremor waxes and wanes over the cycle
        phase = 2 * np.pi * self.window_idx / self.cycle_windows
        envelope = self.amplitude * (1.0 + 0.5 * np.sin(phase))
        powers[self._band_idx] += envelope * self.rng.uniform(0.6, 1.4)

        mean_norm = float(self.rng.uniform(0.05, 0.4))
        p1, p2, p3 = (float(p) for p in powers)
        result = self.classifier.classify(p1, p2, p3, mean_norm)

        sample = WindowSample(
            b1=p1, b2=p2, b3=p3,
            score=result.score,
            timestamp=self.time_ms,
            type=result.type,
            confidence=result.confidence,
            mean_norm=mean_norm,
        )

        self.time_ms += WINDOW_MS
        self.window_idx += 1
        return sample

    def stream(self, n_windows: int) -> Iterator[WindowSample]:
        for _ in range(n_windows):
            yield self.generate_window()
