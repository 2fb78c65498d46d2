"""
Report generation workflow

Builds a summary from the recorded session, sends it for analysis and, only
when the analysis succeeds, records the session in history.
"""

import logging
from typing import Optional, Tuple

from ..acquisition.aggregator import SessionAggregator
from ..core.config import MAX_HISTORY_ENTRIES
from ..core.data_types import AnalysisReport
from ..history.store import SessionHistoryStore
from ..processing.summary import SessionSummaryBuilder, Summary
from .analysis_client import AnalysisClient

logger = logging.getLogger(__name__)


class ReportGenerator:
    """Glue between the aggregator, the summary builder, the backend and history"""

    def __init__(self, aggregator: SessionAggregator, history: SessionHistoryStore,
                 client: AnalysisClient, builder: Optional[SessionSummaryBuilder] = None):
        self.aggregator = aggregator
        self.history = history
        self.client = client
        self.builder = builder if builder else SessionSummaryBuilder()
        self.noise_floor: Optional[float] = None

    def build_summary(self) -> Summary:
        """Summarise the aggregator's current windows (raises InsufficientData)"""
        samples = self.aggregator.snapshot()
        return self.builder.build(samples, self.history.recent_suffix(MAX_HISTORY_ENTRIES),
                                  calibrated_noise_floor=self.noise_floor)

    def generate(self) -> Tuple[Summary, AnalysisReport]:
        """
        Build, analyse and record the current session

        Returns:
            Tuple[summary, report]

        Raises:
            InsufficientData: fewer than three windows, nothing was sent
            AnalysisUnavailable: backend failed, history unchanged
        """
        summary = self.build_summary()
        report = self.retry(summary)
        return summary, report

    def retry(self, summary: Summary) -> AnalysisReport:
        """Send an already built summary; history is updated only on success"""
        report = self.client.analyze(summary.to_dict())
        self.history.append(summary.history_entry())
        logger.info(f"Report generated for session {summary.metadata.session_id}")
        return report
