"""Tests for the command line interface"""

import json

import pytest

from tremor_sense.cli.main import create_parser, main
from tremor_sense.communication.analysis_client import AnalysisClient
from tremor_sense.core.data_types import AnalysisReport
from tremor_sense.core.errors import AnalysisUnavailable

BANDS = {"b1": 0.9, "b2": 0.2, "b3": 0.1, "score": 5.5, "type": "Parkinsonian",
         "confidence": 0.75, "meanNorm": 0.2}


def write_replay(path, n_windows, baseline=None):
    lines = []
    if baseline is not None:
        lines.append(json.dumps({"baseline": baseline}))
    for i in range(n_windows):
        lines.append(json.dumps({"event": "bands", "data": dict(BANDS, score=2.0 + i), "ts": 60_000 * i}))
    path.write_text("\n".join(lines) + "\n")
    return str(path)


def test_mode_is_required():
    with pytest.raises(SystemExit):
        create_parser().parse_args([])


def test_simulate_without_analysis(tmp_path):
    out = tmp_path / "summary.json"
    code = main(["--simulate", "--windows", "25", "--seed", "4", "--band", "hz_6_8",
                 "--no-analysis", "--no-persist", "--output", str(out)])
    assert code == 0
    summary = json.loads(out.read_text())
    assert summary["frequency_profile"]["dominant_band"] == "hz_6_8"
    assert summary["multi_session_trend"]["tremor_score_weekly_slope"] == "+0.0"


def test_replay_applies_calibration(tmp_path):
    replay = write_replay(tmp_path / "rec.jsonl", 4, baseline=0.05)
    out = tmp_path / "summary.json"
    assert main(["--replay", replay, "--no-analysis", "--no-persist", "--output", str(out)]) == 0
    intensity = json.loads(out.read_text())["intensity_profile"]
    assert intensity["noise_floor_adjusted_intensity"] == 0.15
    assert json.loads(out.read_text())["metadata"]["duration_minutes"] == 3.0


def test_replay_with_too_few_windows_fails(tmp_path):
    replay = write_replay(tmp_path / "short.jsonl", 2)
    assert main(["--replay", replay, "--no-analysis", "--no-persist"]) == 1


def test_missing_replay_file_fails(tmp_path):
    assert main(["--replay", str(tmp_path / "missing.jsonl"), "--no-persist"]) == 1


def test_successful_report_updates_history(tmp_path, monkeypatch, capsys):
    monkeypatch.setattr(AnalysisClient, "analyze",
                        lambda self, summary: AnalysisReport("Mild rest tremor.", "High", "See a clinician."))
    history = tmp_path / "history.json"
    replay = write_replay(tmp_path / "rec.jsonl", 5)

    assert main(["--replay", replay, "--history", str(history)]) == 0
    assert "Mild rest tremor." in capsys.readouterr().out
    saved = json.loads(history.read_text())
    assert saved == [{"dominant_band": "hz_4_6", "mean_score": 4.0, "timestamp": 240_000}]

    assert main(["--show-history", "--history", str(history)]) == 0
    assert "mean score 4.00" in capsys.readouterr().out


def test_failed_report_leaves_history_untouched(tmp_path, monkeypatch):
    def unavailable(self, summary):
        raise AnalysisUnavailable("HTTP 503")
    monkeypatch.setattr(AnalysisClient, "analyze", unavailable)
    history = tmp_path / "history.json"
    replay = write_replay(tmp_path / "rec.jsonl", 5)

    assert main(["--replay", replay, "--history", str(history)]) == 1
    assert not history.exists()
