"""
Core data types, errors and configuration for TremorSense

This module contains the fundamental data classes used throughout the system.
"""

from .data_types import (Band, WindowSample, CalibrationEvent, SessionHistoryEntry,
                         LiveStats, AnalysisReport)
from .errors import (TremorSenseError, InvalidInput, InsufficientData,
                     AnalysisUnavailable, SessionStateError)
from .config import *

__all__ = [
    'Band', 'WindowSample', 'CalibrationEvent', 'SessionHistoryEntry',
    'LiveStats', 'AnalysisReport',
    'TremorSenseError', 'InvalidInput', 'InsufficientData',
    'AnalysisUnavailable', 'SessionStateError',
]
