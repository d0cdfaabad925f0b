"""Tests for the ringlab command line."""

import json
import logging

from click.testing import CliRunner

from ringlab.cli import main


def _run(*args):
    return CliRunner().invoke(main, list(args))


class TestDashboardsCommand:
    def test_json(self, export_file):
        result = _run("dashboards", str(export_file))
        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["summary"]["days"] == 14
        assert len(data["cards"]) == 6

    def test_options(self, export_file):
        result = _run("dashboards", str(export_file), "--method", "pearson", "--max-lag", "1")
        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["correlation"]["method"] == "pearson"
        assert len(data["lag_analyses"][0]["lags"]) == 3

    def test_markdown_to_file(self, export_file, tmp_path):
        out = tmp_path / "dash.md"
        result = _run("dashboards", str(export_file), "--format", "markdown", "--output", str(out))
        assert result.exit_code == 0, result.output
        assert out.read_text(encoding="utf-8").startswith("# Dashboards")

    def test_negative_lag_rejected(self, export_file):
        result = _run("dashboards", str(export_file), "--max-lag", "-1")
        assert result.exit_code == 2
        assert "max_lag_days" in result.output

    def test_unknown_method_rejected(self, export_file):
        result = _run("dashboards", str(export_file), "--method", "kendall")
        assert result.exit_code == 2

    def test_invalid_json(self, tmp_path):
        bad = tmp_path / "bad.json"
        bad.write_text("{not json", encoding="utf-8")
        result = _run("dashboards", str(bad))
        assert result.exit_code == 1
        assert "not valid JSON" in result.output

    def test_missing_file(self, tmp_path):
        result = _run("dashboards", str(tmp_path / "missing.json"))
        assert result.exit_code == 2


class TestInsightsCommand:
    def test_markdown_default(self, export_file):
        result = _run("insights", str(export_file))
        assert result.exit_code == 0, result.output
        assert "## 😴 SLEEP" in result.output

    def test_json(self, export_file):
        result = _run("insights", str(export_file), "--format", "json")
        assert result.exit_code == 0, result.output
        assert json.loads(result.output)["summary"]["overall_health_score"] == 72


class TestDecodeCommand:
    def test_sleep_stages(self):
        result = _run("decode", "4221", "--start", "2024-01-01T23:00:00Z")
        assert result.exit_code == 0, result.output
        lines = result.output.splitlines()
        assert lines[0] == "2024-01-01T23:00:00.000Z  4  awake"
        assert lines[3] == "2024-01-01T23:15:00.000Z  1  deep"
        assert "4 samples @ 300s" in result.output

    def test_movement_interval(self):
        result = _run("decode", "09", "--start", "2024-01-01T00:00:00Z", "--interval", "30", "--labels", "movement")
        assert result.exit_code == 0, result.output
        lines = result.output.splitlines()
        assert lines[1] == "2024-01-01T00:00:30.000Z  9  unknown(9)  ?"

    def test_bad_start(self):
        result = _run("decode", "1", "--start", "yesterday")
        assert result.exit_code == 2

    def test_empty(self):
        result = _run("decode", "   ", "--start", "2024-01-01T00:00:00Z")
        assert result.exit_code == 0
        assert "No samples." in result.output

    def test_verbose_configures_debug_logging(self, monkeypatch):
        calls = []
        monkeypatch.setattr(logging, "basicConfig", lambda **kwargs: calls.append(kwargs))
        result = _run("-v", "decode", "1", "--start", "2024-01-01T00:00:00Z")
        assert result.exit_code == 0, result.output
        assert calls[0]["level"] == logging.DEBUG


class TestSeriesCommand:
    def test_markdown_table(self, export_file):
        result = _run("series", str(export_file))
        assert result.exit_code == 0, result.output
        lines = result.output.splitlines()
        assert lines[0].startswith("| Day | Sleep score | Activity score |")
        assert lines[2] == "| 2024-01-01 | 70 | 60 | 65 | 5000 | 60 | 30 |"
        assert len(lines) == 2 + 14

    def test_json(self, export_file):
        result = _run("series", str(export_file), "--format", "json")
        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert len(data["Steps"]) == 14
        assert data["Sleep score"][0] == {"x": "2024-01-01", "y": 70.0}
