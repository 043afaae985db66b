"""Tests for the yarrow command line."""

import yaml
from typer.testing import CliRunner

from yarrow_cli.cli import app

runner = CliRunner()


def write_run(tmp_path, include_tier3=True):
    (tmp_path / "tier1.yaml").write_text(yaml.safe_dump({
        "frameworks": [{"name": "React", "confidence": 0.8, "evidence_count": 5}],
    }), encoding="utf-8")
    (tmp_path / "tier2.yaml").write_text(yaml.safe_dump({
        "context_awareness_score": 0.6,
        "segments": [
            {"segment_id": "seg-1", "fused_confidence": 0.7, "architectural_patterns": ["React Component"]},
            {"segment_id": "seg-2", "fused_confidence": 0.5, "architectural_patterns": ["Service Layer"]},
        ],
    }), encoding="utf-8")
    if include_tier3:
        (tmp_path / "tier3.yaml").write_text(yaml.safe_dump({
            "domains": [{"name": "RealEstate", "confidence": 0.9}],
        }), encoding="utf-8")
    return tmp_path


class TestFuseCommand:

    def test_prints_primary_conclusions(self, tmp_path):
        result = runner.invoke(app, ["fuse", str(write_run(tmp_path))])

        assert result.exit_code == 0
        assert "React" in result.output
        assert "RealEstate" in result.output
        assert "tiers_processed" in result.output

    def test_skip_business(self, tmp_path):
        result = runner.invoke(app, ["fuse", str(write_run(tmp_path)), "--skip-business"])

        assert result.exit_code == 0
        assert "RealEstate" not in result.output

    def test_no_conclusion(self, tmp_path):
        result = runner.invoke(app, ["fuse", str(tmp_path)])

        assert result.exit_code == 0
        assert "No confident conclusion." in result.output

    def test_invalid_config_exits_with_two(self, tmp_path):
        config = tmp_path / "bad.yaml"
        config.write_text(yaml.safe_dump({"evidence_normalizer": 0}), encoding="utf-8")

        result = runner.invoke(app, ["fuse", str(write_run(tmp_path)), "--config", str(config)])

        assert result.exit_code == 2
        assert "Invalid configuration" in result.output


class TestThresholdsCommand:

    def test_defaults(self):
        result = runner.invoke(app, ["thresholds"])

        assert result.exit_code == 0
        assert "min_framework_confidence" in result.output
        assert "0.4, 0.4, 0.2" in result.output
