"""
Tremor window classification

This module contains the firmware-compatible classifier used to label
synthetic and replayed windows.
"""

from .classifier import TremorClassifier, Classification

__all__ = ['TremorClassifier', 'Classification']
