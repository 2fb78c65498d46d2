"""Tests for event parsing, replay and synthetic window sources"""

import json

import pytest

from tremor_sense.acquisition.sources import WINDOW_MS, FakeTremorSource, ReplaySource, parse_event
from tremor_sense.core.data_types import Band, CalibrationEvent, WindowSample
from tremor_sense.core.errors import InvalidInput
from tremor_sense.processing.summary import SessionSummaryBuilder

BANDS = {"b1": 0.4, "b2": 0.1, "b3": 0.05, "score": 4.2, "type": "Parkinsonian",
         "confidence": 0.7, "meanNorm": 0.12}


def test_parse_bands_envelope():
    event = parse_event(json.dumps({"event": "bands", "data": BANDS, "ts": 5000}))
    assert isinstance(event, WindowSample)
    assert event.timestamp == 5000
    assert event.type == "Parkinsonian"


def test_parse_bare_bands_uses_default_timestamp():
    event = parse_event(json.dumps(BANDS), default_timestamp=777)
    assert event.timestamp == 777
    assert event.mean_norm == 0.12


def test_parse_calibration():
    bare = parse_event('{"baseline": 0.02, "noiseFloor": 0.036, "baseForScore": 0.028}')
    assert bare == CalibrationEvent(0.02, 0.036, 0.028)
    wrapped = parse_event('{"event": "calibrated", "data": {"baseline": 0.05}}')
    assert wrapped.baseline == 0.05


@pytest.mark.parametrize("line", [
    "{not json",
    "[1, 2, 3]",
    '{"event": "sample", "data": {"ax": 1}}',
    '{"event": "bands", "data": {"b1": -1, "b2": 0, "b3": 0, "score": 1}}',
    '{"event": "calibrated", "data": {"noiseFloor": 0.1}}',
    '{"event": "bands", "data": 5}',
])
def test_parse_rejects_bad_events(line):
    with pytest.raises(InvalidInput):
        parse_event(line)


def test_replay_source(tmp_path):
    path = tmp_path / "session.jsonl"
    lines = [
        "# recorded session",
        '{"baseline": 0.02}',
        json.dumps(BANDS),
        "",
        json.dumps(BANDS),
        json.dumps({"event": "bands", "data": BANDS, "ts": 99_999}),
    ]
    path.write_text("\n".join(lines) + "\n")

    events = list(ReplaySource(path, start_ms=1000))
    assert isinstance(events[0], CalibrationEvent)
    assert [e.timestamp for e in events[1:]] == [1000, 1000 + WINDOW_MS, 99_999]


def test_replay_reports_line_number(tmp_path):
    path = tmp_path / "bad.jsonl"
    path.write_text(json.dumps(BANDS) + "\n{broken\n")
    with pytest.raises(InvalidInput, match=":2:"):
        list(ReplaySource(path))


def test_fake_source_is_reproducible():
    first = list(FakeTremorSource(seed=3).stream(5))
    second = list(FakeTremorSource(seed=3).stream(5))
    assert first == second
    assert [s.timestamp for s in first] == [i * WINDOW_MS for i in range(5)]


@pytest.mark.parametrize("band", list(Band))
def test_fake_source_tremor_band_dominates(band):
    samples = list(FakeTremorSource(band, seed=11).stream(40))
    summary = SessionSummaryBuilder().build(samples)
    assert summary.frequency_profile.dominant_band is band
    assert all(0.0 <= s.score <= 10.0 for s in samples)
    assert all(s.type for s in samples)
