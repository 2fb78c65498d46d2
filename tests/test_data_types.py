"""Tests for WindowSample validation, band ranking and history records"""

import math

import pytest

from tremor_sense.core.data_types import Band, SessionHistoryEntry, WindowSample
from tremor_sense.core.errors import InvalidInput


def test_dominant_band_ties_go_to_lowest_band():
    assert Band.dominant(1, 1, 1) is Band.HZ_4_6
    assert Band.dominant(0, 2, 2) is Band.HZ_6_8
    assert Band.dominant(0, 1, 2) is Band.HZ_8_12
    assert Band.dominant(3, 1, 2) is Band.HZ_4_6


def test_band_labels():
    assert Band.HZ_4_6.label == "4–6 Hz"
    assert Band("hz_8_12") is Band.HZ_8_12


@pytest.mark.parametrize("kwargs", [
    {"b1": -0.1},
    {"b3": math.nan},
    {"score": math.inf},
    {"confidence": 1.5},
    {"mean_norm": -1.0},
    {"b2": "high"},
])
def test_invalid_samples_are_rejected(kwargs):
    fields = {"b1": 1.0, "b2": 0.5, "b3": 0.2, "score": 3.0}
    fields.update(kwargs)
    with pytest.raises(InvalidInput):
        WindowSample(**fields)


def test_from_event_applies_defaults():
    sample = WindowSample.from_event({"b1": 0.4, "b2": 0.1, "b3": 0.0, "score": 4.2}, 1234)
    assert sample.timestamp == 1234
    assert sample.type == ""
    assert sample.confidence == 0.0
    assert sample.mean_norm == 0.0
    assert sample.dominant_band is Band.HZ_4_6


def test_from_event_reads_optional_fields():
    payload = {"b1": 0.1, "b2": 0.9, "b3": 0.2, "score": 6.0,
               "type": "Essential", "confidence": 0.75, "meanNorm": 0.3}
    sample = WindowSample.from_event(payload, 0)
    assert (sample.type, sample.confidence, sample.mean_norm) == ("Essential", 0.75, 0.3)


def test_from_event_missing_fields():
    with pytest.raises(InvalidInput, match="b3, score"):
        WindowSample.from_event({"b1": 1, "b2": 1}, 0)


def test_history_entry_dict_roundtrip():
    entry = SessionHistoryEntry(Band.HZ_6_8, 4.5, 1_700_000_000_000)
    assert entry.to_dict() == {"dominant_band": "hz_6_8", "mean_score": 4.5,
                               "timestamp": 1_700_000_000_000}
    assert SessionHistoryEntry.from_dict(entry.to_dict()) == entry


def test_history_entry_rejects_unknown_band():
    with pytest.raises(InvalidInput):
        SessionHistoryEntry.from_dict({"dominant_band": "4_6_hz", "mean_score": 1, "timestamp": 0})
