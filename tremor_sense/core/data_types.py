"""
Core data types for TremorSense

This module defines the fundamental data structures used throughout the system
for representing window readings, session history and analysis results.
"""

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Mapping, Optional

from .config import BAND_LABELS
from .errors import InvalidInput


class Band(Enum):
    """Tremor frequency band, declared in tie-break order"""
    HZ_4_6 = "hz_4_6"
    HZ_6_8 = "hz_6_8"
    HZ_8_12 = "hz_8_12"

    @property
    def label(self) -> str:
        return BAND_LABELS[self.value]

    @classmethod
    def dominant(cls, p1: float, p2: float, p3: float) -> "Band":
        """
        Rank three band powers and return the strongest band

        Ties go to the lower band: 4-6 Hz beats 6-8 Hz beats 8-12 Hz.
        Used for both session means and individual windows.
        """
        if p1 >= p2 and p1 >= p3:
            return cls.HZ_4_6
        if p2 >= p3:
            return cls.HZ_6_8
        return cls.HZ_8_12


def _require_number(name: str, value: Any) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise InvalidInput(f"{name} must be a number, got {value!r}") from None
    if not math.isfinite(number):
        raise InvalidInput(f"{name} must be finite, got {value!r}")
    return number


@dataclass(frozen=True)
class WindowSample:
    """One analysis window as reported by the sensor"""
    b1: float                 # 4-6 Hz band power
    b2: float                 # 6-8 Hz band power
    b3: float                 # 8-12 Hz band power
    score: float              # Log-scaled tremor score, nominally 0-10
    timestamp: int = 0        # Capture time (ms)
    type: str = ""            # Classification label, empty if unclassified
    confidence: float = 0.0   # Classifier confidence [0, 1]
    mean_norm: float = 0.0    # Normalised RMS-like amplitude

    def __post_init__(self):
        for name in ("b1", "b2", "b3"):
            if _require_number(name, getattr(self, name)) < 0:
                raise InvalidInput(f"{name} band power must be non-negative, got {getattr(self, name)}")
        _require_number("score", self.score)
        confidence = _require_number("confidence", self.confidence)
        if not 0.0 <= confidence <= 1.0:
            raise InvalidInput(f"confidence must be within [0, 1], got {confidence}")
        if _require_number("mean_norm", self.mean_norm) < 0:
            raise InvalidInput(f"mean_norm must be non-negative, got {self.mean_norm}")

    @property
    def dominant_band(self) -> Band:
        return Band.dominant(self.b1, self.b2, self.b3)

    @classmethod
    def from_event(cls, payload: Mapping[str, Any], timestamp: int) -> "WindowSample":
        """
        Build a sample from a device "bands" event payload

        Args:
            payload: Decoded event JSON (b1, b2, b3, score, type, confidence, meanNorm)
            timestamp: Arrival time in milliseconds

        Returns:
            WindowSample: Validated sample
        """
        missing = [key for key in ("b1", "b2", "b3", "score") if key not in payload]
        if missing:
            raise InvalidInput(f"bands event missing fields: {', '.join(missing)}")

        return cls(
            b1=_require_number("b1", payload["b1"]),
            b2=_require_number("b2", payload["b2"]),
            b3=_require_number("b3", payload["b3"]),
            score=_require_number("score", payload["score"]),
            timestamp=int(timestamp),
            type=str(payload.get("type") or ""),
            confidence=_require_number("confidence", payload.get("confidence") or 0.0),
            mean_norm=_require_number("meanNorm", payload.get("meanNorm") or 0.0),
        )


@dataclass(frozen=True)
class CalibrationEvent:
    """Rest baseline reported by the device after calibration"""
    baseline: float
    noise_floor: float = 0.0
    base_for_score: float = 0.0


@dataclass(frozen=True)
class SessionHistoryEntry:
    """Condensed record of a past session"""
    dominant_band: Band
    mean_score: float
    timestamp: int            # Session end time (ms)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "dominant_band": self.dominant_band.value,
            "mean_score": self.mean_score,
            "timestamp": self.timestamp,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "SessionHistoryEntry":
        try:
            band = Band(data["dominant_band"])
        except (KeyError, ValueError):
            raise InvalidInput(f"Invalid history entry: {dict(data)!r}") from None
        return cls(
            dominant_band=band,
            mean_score=_require_number("mean_score", data.get("mean_score")),
            timestamp=int(_require_number("timestamp", data.get("timestamp"))),
        )


@dataclass
class LiveStats:
    """Running statistics for live display while recording"""
    count: int = 0
    mean: float = 0.0
    std: float = 0.0
    peak: float = 0.0
    dominant_band: Optional[Band] = None
    dominant_type: str = "None"
    duration_ms: int = 0
    distribution: Dict[str, float] = field(default_factory=dict)


@dataclass(frozen=True)
class AnalysisReport:
    """Prose report returned by the analysis backend"""
    clinical_summary: str
    confidence_level: str
    advisory_note: str
