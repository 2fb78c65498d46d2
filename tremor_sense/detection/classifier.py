"""
Per-window tremor classification

This module labels a window from its three band powers and maps the total
tremor power to the 0-10 log score, using the same thresholds as the sensor
firmware. Calibration from a rest baseline adjusts the noise floor and score
reference for the individual wearer.
"""

import logging
import math
from dataclasses import dataclass

from ..core.config import (NOISE_FLOOR, BASE_FOR_SCORE, SCORE_SCALE, MAX_SCORE,
                           VOLUNTARY_MEAN_NORM, VOLUNTARY_MAX_POWER, MIN_DOMINANT_POWER,
                           CALIB_NOISE_FLOOR_FACTOR, CALIB_BASE_SCORE_FACTOR, CALIB_MIN_VALUE)
from ..core.errors import InvalidInput

logger = logging.getLogger(__name__)

TYPE_LABELS = ("Parkinsonian", "Essential", "Physiological")


@dataclass(frozen=True)
class Classification:
    """Label, confidence and score for one window"""
    type: str
    confidence: float
    score: float


class TremorClassifier:
    """
    Classify tremor windows with noise gating

    Band powers at or below the noise floor are ignored. A window dominated by
    large, smooth motion is reported as voluntary movement rather than tremor.
    """

    def __init__(self, noise_floor: float = NOISE_FLOOR, base_for_score: float = BASE_FOR_SCORE):
        self.noise_floor = noise_floor
        self.base_for_score = base_for_score
        self.baseline = None

    def calibrate(self, baseline: float):
        """Derive thresholds from the mean absolute rest signal"""
        if not math.isfinite(baseline) or baseline < 0:
            raise InvalidInput(f"Calibration baseline must be a non-negative number, got {baseline}")
        self.baseline = baseline
        self.noise_floor = max(CALIB_MIN_VALUE, baseline * CALIB_NOISE_FLOOR_FACTOR)
        self.base_for_score = max(CALIB_MIN_VALUE, baseline * CALIB_BASE_SCORE_FACTOR)
        logger.info(f"Calibrated: baseline={baseline:.6f} noise_floor={self.noise_floor:.6f} "
                    f"base_for_score={self.base_for_score:.6f}")

    def score(self, total_power: float) -> float:
        """Log-scaled tremor score clamped to [0, MAX_SCORE]"""
        if total_power < self.noise_floor:
            return 0.0
        scaled = math.log10(total_power / self.base_for_score + 1.0) * SCORE_SCALE
        if not math.isfinite(scaled):
            return 0.0
        return min(max(scaled, 0.0), MAX_SCORE)

    def classify(self, p1: float, p2: float, p3: float, mean_norm: float = 0.0) -> Classification:
        """
        Classify one window

        Args:
            p1, p2, p3: Band powers for 4-6, 6-8 and 8-12 Hz
            mean_norm: Smoothed motion amplitude for the window

        Returns:
            Classification: Label, confidence and score
        """
        gated = [p if p > self.noise_floor else 0.0 for p in (p1, p2, p3)]
        total = sum(gated)
        score = self.score(total)

        if total < self.noise_floor:
            return Classification("No Tremor", 1.0, score)

        if mean_norm > VOLUNTARY_MEAN_NORM and total < VOLUNTARY_MAX_POWER:
            return Classification("Voluntary Movement", 0.6, score)

        for idx, label in enumerate(TYPE_LABELS):
            power = gated[idx]
            others = gated[:idx] + gated[idx + 1:]
            # Strictly greater than both other bands
            if all(power > other for other in others) and power > MIN_DOMINANT_POWER:
                return Classification(label, power / (total + 1e-12), score)

        return Classification("Mixed/Weak", min(0.5, total / (total + self.noise_floor)), score)
