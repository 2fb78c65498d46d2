"""
Session analysis components

This module contains the statistics helpers and the summary builder that
turn a recorded session into the structured report record.
"""

from .summary import SessionSummaryBuilder, Summary
from . import statistics

__all__ = ['SessionSummaryBuilder', 'Summary', 'statistics']
