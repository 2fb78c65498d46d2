"""
Analysis backend communication

This module handles sending session summaries for report generation.
"""

from .analysis_client import AnalysisClient
from .report_generator import ReportGenerator

__all__ = ['AnalysisClient', 'ReportGenerator']
