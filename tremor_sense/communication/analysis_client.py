"""
Analysis backend interface

This module sends a session summary to the report-generation backend and
returns its prose report. Every failure mode surfaces as AnalysisUnavailable.
"""

import logging
from typing import Any, Dict, Optional

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from ..core.config import BACKEND_URL, ANALYZE_ENDPOINT, ANALYSIS_TIMEOUT_SEC, ANALYSIS_MAX_RETRIES
from ..core.data_types import AnalysisReport
from ..core.errors import AnalysisUnavailable

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("clinical_summary", "confidence_level", "advisory_note")


class AnalysisClient:
    """
    Request a clinical-style report for a session summary

    Transient gateway errors (502/503/504) are retried with backoff; the
    request itself is bounded by timeout seconds.
    """

    def __init__(self, base_url: str = BACKEND_URL, timeout: float = ANALYSIS_TIMEOUT_SEC,
                 max_retries: int = ANALYSIS_MAX_RETRIES, session: Optional[requests.Session] = None):
        self.url = base_url.rstrip("/") + ANALYZE_ENDPOINT
        self.timeout = timeout
        self.session = session if session else self._create_session(max_retries)

    @staticmethod
    def _create_session(max_retries: int) -> requests.Session:
        # Only gateway statuses are retried; a timed-out or broken POST is not resent
        retry = Retry(
            total=max_retries,
            connect=0,
            read=False,
            other=0,
            status=max_retries,
            backoff_factor=0.5,
            status_forcelist=(502, 503, 504),
            allowed_methods=frozenset(["POST"]),
            raise_on_status=False,
        )
        session = requests.Session()
        adapter = HTTPAdapter(max_retries=retry)
        session.mount("http://", adapter)
        session.mount("https://", adapter)
        return session

    def analyze(self, summary: Dict[str, Any]) -> AnalysisReport:
        """
        Send a summary record and wait for the report

        Args:
            summary: Output of Summary.to_dict()

        Returns:
            AnalysisReport: Parsed backend response
        """
        logger.info(f"Requesting analysis from {self.url}")
        try:
            response = self.session.post(self.url, json=summary, timeout=self.timeout)
        except requests.exceptions.Timeout as e:
            raise AnalysisUnavailable(f"timed out after {self.timeout}s") from e
        except requests.exceptions.RequestException as e:
            raise AnalysisUnavailable(f"request failed: {e}") from e

        if not response.ok:
            raise AnalysisUnavailable(f"HTTP {response.status_code}")

        try:
            data = response.json()
        except ValueError as e:
            raise AnalysisUnavailable("response is not valid JSON") from e

        if not isinstance(data, dict):
            raise AnalysisUnavailable("response is not a JSON object")
        missing = [name for name in REQUIRED_FIELDS if not isinstance(data.get(name), str)]
        if missing:
            raise AnalysisUnavailable(f"response missing fields: {', '.join(missing)}")

        logger.info(f"Analysis received (confidence: {data['confidence_level']})")
        return AnalysisReport(
            clinical_summary=data["clinical_summary"],
            confidence_level=data["confidence_level"],
            advisory_note=data["advisory_note"],
        )

    def close(self):
        self.session.close()
