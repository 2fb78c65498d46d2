"""
TremorSense - Tremor session analytics for wearable sensor streams

A modular Python package that records windowed tremor band-power readings,
derives a statistical session summary and requests a clinical-style report
from an analysis backend.

Python: 3.10+
"""

__version__ = "1.0.0"

# Main package imports for easy access
from .core.data_types import Band, WindowSample, SessionHistoryEntry, AnalysisReport
from .core.errors import InsufficientData, InvalidInput, AnalysisUnavailable, SessionStateError
from .acquisition.aggregator import SessionAggregator, SessionState
from .acquisition.sources import FakeTremorSource, ReplaySource
from .processing.summary import SessionSummaryBuilder, Summary
from .history.store import SessionHistoryStore, JsonFilePersistence
from .communication.analysis_client import AnalysisClient
from .communication.report_generator import ReportGenerator

__all__ = [
    'Band', 'WindowSample', 'SessionHistoryEntry', 'AnalysisReport',
    'InsufficientData', 'InvalidInput', 'AnalysisUnavailable', 'SessionStateError',
    'SessionAggregator', 'SessionState', 'FakeTremorSource', 'ReplaySource',
    'SessionSummaryBuilder', 'Summary',
    'SessionHistoryStore', 'JsonFilePersistence',
    'AnalysisClient', 'ReportGenerator',
]
