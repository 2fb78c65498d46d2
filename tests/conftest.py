"""Shared fixtures for TremorSense tests"""

import pytest

from tremor_sense.core.data_types import Band, SessionHistoryEntry, WindowSample


def make_sample(score, b1=1.0, b2=0.5, b3=0.25, timestamp=0, **kwargs):
    return WindowSample(b1=b1, b2=b2, b3=b3, score=score, timestamp=timestamp, **kwargs)


def make_session(scores, start_ms=0, step_ms=2560, **kwargs):
    return [make_sample(s, timestamp=start_ms + i * step_ms, **kwargs) for i, s in enumerate(scores)]


@pytest.fixture
def example_samples():
    """Three windows: b1, b1, then b2 dominant"""
    return [
        WindowSample(b1=1, b2=0, b3=0, score=1, timestamp=0),
        WindowSample(b1=1, b2=0, b3=0, score=9, timestamp=60_000),
        WindowSample(b1=0, b2=1, b3=0, score=5, timestamp=120_000),
    ]


@pytest.fixture
def prior_history():
    week = 604_800_000
    return [
        SessionHistoryEntry(Band.HZ_6_8, 6.0, 1_700_000_000_000 - 2 * week),
        SessionHistoryEntry(Band.HZ_4_6, 4.0, 1_700_000_000_000 - week),
    ]
