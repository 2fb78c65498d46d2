"""Tests for the report generation workflow"""

import pytest

from conftest import make_sample
from tremor_sense.acquisition.aggregator import SessionAggregator
from tremor_sense.core.data_types import AnalysisReport, Band, SessionHistoryEntry
from tremor_sense.core.errors import AnalysisUnavailable, InsufficientData
from tremor_sense.communication.report_generator import ReportGenerator
from tremor_sense.history.store import MemoryPersistence, SessionHistoryStore

REPORT = AnalysisReport("summary", "High", "advisory")


class StubClient:
    def __init__(self, outcomes):
        self.outcomes = list(outcomes)
        self.sent = []

    def analyze(self, summary):
        self.sent.append(summary)
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


def recorded(scores):
    aggregator = SessionAggregator(clock=lambda: 0)
    aggregator.start()
    for i, score in enumerate(scores):
        aggregator.push(make_sample(score, timestamp=1_000 * i))
    aggregator.stop()
    return aggregator


def test_success_appends_history():
    persistence = MemoryPersistence()
    history = SessionHistoryStore(persistence)
    reporter = ReportGenerator(recorded([2, 4, 6]), history, StubClient([REPORT]))

    summary, report = reporter.generate()

    assert report == REPORT
    assert history.entries() == [SessionHistoryEntry(Band.HZ_4_6, 4.0, 2_000)]
    assert len(persistence.entries) == 1
    assert summary.multi_session_trend.severity_change_percent is None


def test_failure_leaves_history_untouched_and_summary_reusable():
    history = SessionHistoryStore()
    client = StubClient([AnalysisUnavailable("timed out"), REPORT])
    reporter = ReportGenerator(recorded([2, 4, 6]), history, client)

    summary = reporter.build_summary()
    with pytest.raises(AnalysisUnavailable):
        reporter.retry(summary)
    assert len(history) == 0

    assert reporter.retry(summary) == REPORT
    assert len(history) == 1
    assert client.sent[0] == client.sent[1]


def test_insufficient_data_sends_nothing():
    client = StubClient([REPORT])
    reporter = ReportGenerator(recorded([2, 4]), SessionHistoryStore(), client)
    with pytest.raises(InsufficientData):
        reporter.generate()
    assert client.sent == []


def test_noise_floor_and_history_feed_the_summary():
    history = SessionHistoryStore()
    history.append(SessionHistoryEntry(Band.HZ_8_12, 2.0, 0))
    reporter = ReportGenerator(recorded([2, 4, 6]), history, StubClient([REPORT]))
    reporter.noise_floor = 0.0

    summary = reporter.build_summary()

    assert summary.multi_session_trend.band_shift_detected is True
    assert summary.multi_session_trend.severity_change_percent == pytest.approx(100.0)
    assert summary.intensity_profile.noise_floor_adjusted_intensity == 0.0
