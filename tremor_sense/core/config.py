"""
Configuration constants for TremorSense

This module contains all configuration parameters that users may need to customize
for their device, analysis backend and report generation.
"""

from typing import Dict, Tuple

# ============================================================================
# DEVICE CONFIGURATION - must match the firmware running on the sensor
# ============================================================================

SAMPLING_RATE_HZ = 50             # MPU6050 sampling rate on the device (Hz)
WINDOW_SIZE = 128                 # Samples per analysis window (~2.56 s at 50 Hz)

# Tremor frequency bands (Hz), in tie-break order
FREQ_BANDS: Dict[str, Tuple[float, float]] = {
    "hz_4_6": (4.0, 6.0),         # Parkinsonian rest tremor
    "hz_6_8": (6.0, 8.0),         # Essential tremor
    "hz_8_12": (8.0, 12.0),       # Physiological tremor
}

BAND_LABELS: Dict[str, str] = {
    "hz_4_6": "4–6 Hz",
    "hz_6_8": "6–8 Hz",
    "hz_8_12": "8–12 Hz",
}

# ============================================================================
# SESSION SUMMARY CONFIGURATION
# ============================================================================

MIN_SESSION_WINDOWS = 3           # Fewer windows than this cannot be summarised
MULTI_SESSION_LOOKBACK = 2        # Prior sessions compared against the current one
SCORE_BUCKET_EDGES = (2.5, 5.0, 7.5)  # low | moderate | high | very high
NOISE_FLOOR_FALLBACK_FACTOR = 0.93    # Used when no calibration baseline exists
FATIGUE_THRESHOLD_PERCENT = 5.0   # Late-vs-early increase flagged as fatigue
MS_PER_WEEK = 604_800_000

# Fixed metadata sent with every summary
CONDITION = "rest"
MEDICATION_STATUS = "unknown"
TREMOR_SCORE_SCALE = "0_to_10_log_scaled"

# Placeholder markers; downstream report generation matches on these strings
FIRST_SESSION_MARKER = "first session, no comparison available"
NEUTRAL_WEEKLY_SLOPE = "+0.0"

# ============================================================================
# SESSION HISTORY
# ============================================================================

MAX_HISTORY_ENTRIES = 10
HISTORY_PATH = "history/tremor_session_history.json"

# ============================================================================
# ANALYSIS BACKEND
# ============================================================================

BACKEND_URL = "http://127.0.0.1:8000"
ANALYZE_ENDPOINT = "/analyze"
ANALYSIS_TIMEOUT_SEC = 60.0       # Report generation on the backend is slow
ANALYSIS_MAX_RETRIES = 2          # Transient gateway errors only

# ============================================================================
# CLASSIFIER (mirrors the device firmware)
# ============================================================================

NOISE_FLOOR = 0.01                # Band power below this is treated as noise
BASE_FOR_SCORE = 0.01             # Reference power for the log score
SCORE_SCALE = 3.0
MAX_SCORE = 10.0
VOLUNTARY_MEAN_NORM = 0.7         # Large smooth motion => voluntary movement
VOLUNTARY_MAX_POWER = 5.0
MIN_DOMINANT_POWER = 0.3          # Weaker dominant bands are "Mixed/Weak"

# Calibration: rest baseline -> thresholds
CALIB_NOISE_FLOOR_FACTOR = 1.8
CALIB_BASE_SCORE_FACTOR = 1.4
CALIB_MIN_VALUE = 0.001
