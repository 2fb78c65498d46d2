"""
Session summary construction

This module turns the ordered windows of a finished recording, together with
the condensed history of earlier sessions, into the structured summary the
analysis backend consumes. All values are computed at full precision; rounding
happens only in Summary.to_dict().
"""

import json
import logging
import math
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Sequence, Tuple
import numpy as np

from . import statistics as st
from ..core import config
from ..core.data_types import Band, SessionHistoryEntry, WindowSample
from ..core.errors import InsufficientData

logger = logging.getLogger(__name__)

BAND_ORDER = (Band.HZ_4_6, Band.HZ_6_8, Band.HZ_8_12)


def _r(value: float, places: int) -> float:
    # Adding 0.0 folds -0.0 into 0.0
    return round(float(value), places) + 0.0


def _signed(value: float, places: int) -> str:
    if value >= 0:
        return f"+{abs(value):.{places}f}"
    return f"{value:.{places}f}"


@dataclass(frozen=True)
class Metadata:
    session_id: str
    timestamp: str
    duration_minutes: float
    sampling_rate_hz: int


@dataclass(frozen=True)
class FrequencyProfile:
    band_mean: Tuple[float, float, float]
    band_std: Tuple[float, float, float]
    dominant_band: Band
    dominance_ratio: float
    dominant_band_percentage: float
    band_switch_count: int


@dataclass(frozen=True)
class IntensityProfile:
    mean: float
    std: float
    min: float
    max: float
    p25: float
    p50: float
    p75: float
    p90: float
    rms_mean: float
    noise_floor_adjusted_intensity: float


@dataclass(frozen=True)
class IntensityDistribution:
    low_fraction: float
    moderate_fraction: float
    high_fraction: float
    very_high_fraction: float


@dataclass(frozen=True)
class VariabilityProfile:
    coefficient_of_variation: float
    stability_index: float
    spectral_entropy: float
    window_to_window_variance: float


@dataclass(frozen=True)
class WithinSessionTrend:
    slope_per_minute: float
    early_vs_late_change_percent: float
    fatigue_pattern_detected: bool


@dataclass(frozen=True)
class MultiSessionTrend:
    dominant_band: Band
    consistency_count: int
    session_count: int
    weekly_slope: Optional[float]             # None until two sessions exist
    severity_change_percent: Optional[float]  # None for a first session
    band_shift_detected: bool


@dataclass(frozen=True)
class Summary:
    """Complete, unrounded analysis of one recording session"""
    metadata: Metadata
    frequency_profile: FrequencyProfile
    intensity_profile: IntensityProfile
    intensity_distribution: IntensityDistribution
    variability_profile: VariabilityProfile
    within_session_trend: WithinSessionTrend
    multi_session_trend: MultiSessionTrend
    end_timestamp: int

    def history_entry(self) -> SessionHistoryEntry:
        """Condensed record of this session for the history store"""
        return SessionHistoryEntry(
            dominant_band=self.frequency_profile.dominant_band,
            mean_score=self.intensity_profile.mean,
            timestamp=self.end_timestamp,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Render the summary record sent to the analysis backend"""
        meta = self.metadata
        freq = self.frequency_profile
        inten = self.intensity_profile
        dist = self.intensity_distribution
        var = self.variability_profile
        trend = self.within_session_trend
        multi = self.multi_session_trend

        if multi.weekly_slope is None:
            weekly_slope = config.NEUTRAL_WEEKLY_SLOPE
        else:
            weekly_slope = _signed(multi.weekly_slope, 2)

        if multi.severity_change_percent is None:
            severity = config.FIRST_SESSION_MARKER
        else:
            severity = _signed(multi.severity_change_percent, 1) + "%"

        return {
            "metadata": {
                "session_id": meta.session_id,
                "timestamp": meta.timestamp,
                "duration_minutes": _r(meta.duration_minutes, 2),
                "sampling_rate_hz": meta.sampling_rate_hz,
                "condition": config.CONDITION,
                "medication_status": config.MEDICATION_STATUS,
                "tremor_score_scale": config.TREMOR_SCORE_SCALE,
            },
            "frequency_profile": {
                "band_power_mean": {band.value: _r(v, 3) for band, v in zip(BAND_ORDER, freq.band_mean)},
                "band_power_std": {band.value: _r(v, 3) for band, v in zip(BAND_ORDER, freq.band_std)},
                "dominant_band": freq.dominant_band.value,
                "dominance_ratio": _r(freq.dominance_ratio, 2),
                "dominant_band_percentage": _r(freq.dominant_band_percentage, 3),
                "band_switch_count": freq.band_switch_count,
            },
            "intensity_profile": {
                "tremor_score": {
                    "mean": _r(inten.mean, 2),
                    "std": _r(inten.std, 2),
                    "min": _r(inten.min, 2),
                    "max": _r(inten.max, 2),
                    "p25": _r(inten.p25, 2),
                    "p50": _r(inten.p50, 2),
                    "p75": _r(inten.p75, 2),
                    "p90": _r(inten.p90, 2),
                },
                "rms_mean": _r(inten.rms_mean, 3),
                "noise_floor_adjusted_intensity": _r(inten.noise_floor_adjusted_intensity, 3),
            },
            "intensity_distribution": {
                "low_fraction": _r(dist.low_fraction, 3),
                "moderate_fraction": _r(dist.moderate_fraction, 3),
                "high_fraction": _r(dist.high_fraction, 3),
                "very_high_fraction": _r(dist.very_high_fraction, 3),
            },
            "variability_profile": {
                "coefficient_of_variation": _r(var.coefficient_of_variation, 3),
                "stability_index": _r(var.stability_index, 3),
                "spectral_entropy": _r(var.spectral_entropy, 4),
                "window_to_window_variance": _r(var.window_to_window_variance, 3),
            },
            "within_session_trend": {
                "linear_slope_per_minute_score_units": _r(trend.slope_per_minute, 4),
                "early_vs_late_change_percent": _r(trend.early_vs_late_change_percent, 1),
                "fatigue_pattern_detected": trend.fatigue_pattern_detected,
            },
            "multi_session_trend": {
                "dominant_band_consistency_last_3":
                    f"{multi.dominant_band.label} in {multi.consistency_count}/{multi.session_count} sessions",
                "tremor_score_weekly_slope": weekly_slope,
                "severity_change_percent": severity,
                "band_shift_detected": multi.band_shift_detected,
            },
        }

    def to_json(self, indent: Optional[int] = None) -> str:
        return json.dumps(self.to_dict(), indent=indent)


class SessionSummaryBuilder:
    """
    Build session summaries from recorded windows

    The builder holds no mutable state; build() is a pure function of its
    arguments and can be called from any thread.
    """

    def __init__(self, sampling_rate_hz: int = config.SAMPLING_RATE_HZ,
                 lookback: int = config.MULTI_SESSION_LOOKBACK):
        self.sampling_rate_hz = sampling_rate_hz
        self.lookback = lookback

    def build(self, samples: Sequence[WindowSample],
              history: Sequence[SessionHistoryEntry] = (),
              calibrated_noise_floor: Optional[float] = None,
              session_id: Optional[str] = None) -> Summary:
        """
        Compute the full summary of a session

        Args:
            samples: Windows in arrival order, at least MIN_SESSION_WINDOWS
            history: Prior sessions, oldest first
            calibrated_noise_floor: Device rest baseline, if calibrated
            session_id: Override for the generated session id

        Returns:
            Summary: Immutable, unrounded summary
        """
        samples = tuple(samples)
        if len(samples) < config.MIN_SESSION_WINDOWS:
            raise InsufficientData(len(samples), config.MIN_SESSION_WINDOWS)

        scores = np.array([s.score for s in samples], dtype=float)
        end_ts = samples[-1].timestamp
        duration_min = (end_ts - samples[0].timestamp) / 60000.0

        frequency = self._frequency_profile(samples)
        intensity = self._intensity_profile(samples, scores, calibrated_noise_floor)
        distribution = self._intensity_distribution(scores)
        variability = self._variability_profile(scores, intensity, frequency)
        trend = self._within_session_trend(scores, duration_min)
        multi = self._multi_session_trend(history, frequency.dominant_band, intensity.mean, end_ts)

        metadata = Metadata(
            session_id=session_id or f"S{str(end_ts)[-4:]}",
            timestamp=datetime.fromtimestamp(end_ts / 1000.0, tz=timezone.utc)
                .isoformat(timespec="milliseconds").replace("+00:00", "Z"),
            duration_minutes=duration_min,
            sampling_rate_hz=self.sampling_rate_hz,
        )

        logger.debug(f"Summary built: {len(samples)} windows, dominant {frequency.dominant_band.value}, "
                     f"mean score {intensity.mean:.2f}")

        return Summary(
            metadata=metadata,
            frequency_profile=frequency,
            intensity_profile=intensity,
            intensity_distribution=distribution,
            variability_profile=variability,
            within_session_trend=trend,
            multi_session_trend=multi,
            end_timestamp=end_ts,
        )

    def _frequency_profile(self, samples: Tuple[WindowSample, ...]) -> FrequencyProfile:
        powers = np.array([[s.b1, s.b2, s.b3] for s in samples], dtype=float)
        means = tuple(st.mean(powers[:, i]) for i in range(3))
        stds = tuple(st.population_std(powers[:, i]) for i in range(3))

        dominant = Band.dominant(*means)
        total = sum(means)
        strongest = max(means)
        weakest = min(means)

        per_window = [s.dominant_band for s in samples]
        switches = sum(1 for prev, cur in zip(per_window, per_window[1:]) if prev != cur)

        return FrequencyProfile(
            band_mean=means,
            band_std=stds,
            dominant_band=dominant,
            dominance_ratio=strongest / (weakest or 0.001),
            dominant_band_percentage=strongest / (total or 1.0),
            band_switch_count=switches,
        )

    def _intensity_profile(self, samples: Tuple[WindowSample, ...], scores: np.ndarray,
                           noise_floor: Optional[float]) -> IntensityProfile:
        rms_mean = st.mean([s.mean_norm for s in samples])
        if noise_floor is not None:
            adjusted = max(0.0, rms_mean - noise_floor)
        else:
            adjusted = rms_mean * config.NOISE_FLOOR_FALLBACK_FACTOR

        return IntensityProfile(
            mean=st.mean(scores),
            std=st.population_std(scores),
            min=float(scores.min()),
            max=float(scores.max()),
            p25=st.percentile(scores, 25),
            p50=st.percentile(scores, 50),
            p75=st.percentile(scores, 75),
            p90=st.percentile(scores, 90),
            rms_mean=rms_mean,
            noise_floor_adjusted_intensity=adjusted,
        )

    def _intensity_distribution(self, scores: np.ndarray) -> IntensityDistribution:
        low, moderate, high = config.SCORE_BUCKET_EDGES
        return IntensityDistribution(
            low_fraction=st.fraction_in_range(scores, -math.inf, low),
            moderate_fraction=st.fraction_in_range(scores, low, moderate),
            high_fraction=st.fraction_in_range(scores, moderate, high),
            very_high_fraction=st.fraction_in_range(scores, high, math.inf),
        )

    def _variability_profile(self, scores: np.ndarray, intensity: IntensityProfile,
                             frequency: FrequencyProfile) -> VariabilityProfile:
        cv = intensity.std / (intensity.mean or 1.0)

        total = sum(frequency.band_mean) or 1.0
        entropy = 0.0
        for band_mean in frequency.band_mean:
            p = band_mean / total
            if p > 0:
                entropy -= p * math.log2(p)

        return VariabilityProfile(
            coefficient_of_variation=cv,
            stability_index=max(0.0, 1.0 - cv),
            spectral_entropy=entropy / math.log2(3),
            window_to_window_variance=st.mean(np.diff(scores) ** 2),
        )

    def _within_session_trend(self, scores: np.ndarray, duration_min: float) -> WithinSessionTrend:
        n = scores.size
        slope_per_window = st.linear_regression_slope(scores)
        slope_per_minute = slope_per_window * n / duration_min if duration_min > 0 else 0.0

        half = n // 2
        early = st.mean(scores[:half])
        late = st.mean(scores[half:])
        change = (late - early) / early * 100.0 if early else 0.0

        return WithinSessionTrend(
            slope_per_minute=slope_per_minute,
            early_vs_late_change_percent=change,
            fatigue_pattern_detected=change > config.FATIGUE_THRESHOLD_PERCENT,
        )

    def _multi_session_trend(self, history: Sequence[SessionHistoryEntry], dominant: Band,
                             mean_score: float, end_ts: int) -> MultiSessionTrend:
        recent = list(history)[-self.lookback:] if self.lookback > 0 else []
        bands = [entry.dominant_band for entry in recent] + [dominant]
        means = [entry.mean_score for entry in recent] + [mean_score]
        stamps = [entry.timestamp for entry in recent] + [end_ts]

        weekly_slope = None
        if len(means) >= 2:
            weekly_slope = st.ols_slope(stamps, means) * config.MS_PER_WEEK

        severity = None
        if recent:
            baseline = recent[0].mean_score
            severity = (mean_score - baseline) / baseline * 100.0 if baseline > 0 else 0.0

        return MultiSessionTrend(
            dominant_band=dominant,
            consistency_count=sum(1 for band in bands if band == dominant),
            session_count=len(bands),
            weekly_slope=weekly_slope,
            severity_change_percent=severity,
            band_shift_detected=bool(recent) and recent[-1].dominant_band != dominant,
        )
