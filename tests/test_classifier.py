"""Tests for the firmware-compatible tremor classifier"""

import math

import pytest

from tremor_sense.core.errors import InvalidInput
from tremor_sense.detection.classifier import TremorClassifier


@pytest.fixture
def classifier():
    return TremorClassifier()


def test_no_tremor_below_noise_floor(classifier):
    result = classifier.classify(0.005, 0.001, 0.0)
    assert (result.type, result.confidence, result.score) == ("No Tremor", 1.0, 0.0)


def test_dominant_band_labels(classifier):
    result = classifier.classify(2.0, 0.1, 0.05, mean_norm=0.1)
    assert result.type == "Parkinsonian"
    assert result.confidence == pytest.approx(2.0 / 2.15)
    assert result.score == pytest.approx(math.log10(2.15 / 0.01 + 1) * 3.0)

    assert classifier.classify(0.1, 1.5, 0.2).type == "Essential"
    assert classifier.classify(0.1, 0.2, 1.5).type == "Physiological"


def test_voluntary_movement(classifier):
    result = classifier.classify(1.0, 0.5, 0.5, mean_norm=0.8)
    assert (result.type, result.confidence) == ("Voluntary Movement", 0.6)


def test_mixed_or_weak(classifier):
    # tie between bands
    tied = classifier.classify(0.2, 0.2, 0.1)
    assert tied.type == "Mixed/Weak"
    assert tied.confidence == 0.5
    # dominant but below the minimum dominant power
    assert classifier.classify(0.25, 0.1, 0.05).type == "Mixed/Weak"


def test_score_is_clamped(classifier):
    assert classifier.classify(1e12, 0, 0).score == 10.0


def test_calibration_sets_thresholds(classifier):
    classifier.calibrate(0.1)
    assert classifier.noise_floor == pytest.approx(0.18)
    assert classifier.base_for_score == pytest.approx(0.14)
    assert classifier.classify(0.15, 0.0, 0.0).type == "No Tremor"

    classifier.calibrate(0.0)
    assert classifier.noise_floor == 0.001
    assert classifier.base_for_score == 0.001


def test_calibration_rejects_negative_baseline(classifier):
    with pytest.raises(InvalidInput):
        classifier.calibrate(-0.5)
