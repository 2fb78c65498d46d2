"""
Session acquisition

This module contains the session aggregator and the window sources that feed it.
"""

from .aggregator import SessionAggregator, SessionState
from .sources import FakeTremorSource, ReplaySource, parse_event

__all__ = ['SessionAggregator', 'SessionState', 'FakeTremorSource', 'ReplaySource', 'parse_event']
