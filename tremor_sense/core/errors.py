"""
Error types for TremorSense

Every failure the system reports to a caller is one of these. The CLI maps
each category to its own log message.
"""


class TremorSenseError(Exception):
    """Base class for all TremorSense errors"""


class InvalidInput(TremorSenseError, ValueError):
    """Malformed sample or numeric input, rejected at ingestion"""


class InsufficientData(TremorSenseError):
    """Too few windows to build a session summary"""

    def __init__(self, count: int, required: int = 3):
        self.count = count
        self.required = required
        super().__init__(f"Need at least {required} windows, got {count}")


class AnalysisUnavailable(TremorSenseError):
    """External analysis call failed or timed out"""

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"Analysis unavailable: {reason}")


class SessionStateError(TremorSenseError):
    """Illegal recording state transition"""
