"""Tests for loading tier dumps and configuration from YAML."""

import pytest
import yaml

from yarrow_cli import HierarchicalFusionEngine, TierOutputLoader, load_config
from yarrow_cli.core.fusion import ImplementationStatus, UsageExtent


def write_yaml(path, data):
    path.write_text(yaml.safe_dump(data), encoding="utf-8")


@pytest.fixture
def run_dir(tmp_path):
    write_yaml(tmp_path / "tier1.yaml", {
        "primary_ecosystem": "TypeScript",
        "frameworks": [
            {"name": "React", "confidence": 0.8, "evidence_count": 5,
             "usage_extent": "Core", "evidence": ["package.json: react"]},
            {"confidence": 0.4},
        ],
    })
    write_yaml(tmp_path / "tier2.yaml", {
        "context_awareness_score": 0.6,
        "segments": [
            {"segment_id": "seg-1", "fused_confidence": 0.7, "layer": "Presentation",
             "architectural_patterns": ["React Component"]},
            {"segment_id": "seg-2", "fused_confidence": "high"},
        ],
    })
    write_yaml(tmp_path / "tier3.yaml", {
        "capabilities": ["Payment Processing"],
        "domains": [
            {"name": "RealEstate", "confidence": 0.9, "implementation_status": "InProgress",
             "capabilities": ["Property Listings"]},
        ],
        "roadmap": [{"domain_focus": "RealEstate", "business_value": 0.8}],
    })
    return tmp_path


class TestTierOutputLoader:

    def test_traditional(self, run_dir):
        detection = TierOutputLoader(str(run_dir)).load_traditional()

        assert [f.name for f in detection.frameworks] == ["React"]
        assert detection.frameworks[0].usage_extent is UsageExtent.CORE
        assert detection.primary_ecosystem == "TypeScript"

    def test_malformed_segment_skipped(self, run_dir):
        analysis = TierOutputLoader(str(run_dir)).load_segments()

        assert [s.segment_id for s in analysis.segments] == ["seg-1"]
        assert analysis.segments[0].architectural_patterns == ("React Component",)
        assert analysis.context_awareness_score == 0.6

    def test_mixed_layer_labels_become_strings(self, run_dir):
        write_yaml(run_dir / "tier2.yaml", {
            "segments": [
                {"segment_id": "seg-1", "fused_confidence": 0.7, "layer": 1},
                {"segment_id": "seg-2", "fused_confidence": 0.6, "layer": "Data"},
                {"segment_id": "seg-3", "fused_confidence": 0.5, "layer": ""},
            ],
        })
        loader = TierOutputLoader(str(run_dir))
        analysis = loader.load_segments()

        assert [s.layer for s in analysis.segments] == ["1", "Data", None]

        result = HierarchicalFusionEngine().fuse(loader.load_traditional(), analysis)
        assert result.consolidated_results.architecture_assessment.architectural_patterns == [
            "Component-Based Architecture",
            "1 Layer Implementation",
            "Data Layer Implementation",
        ]

    def test_business(self, run_dir):
        grounding = TierOutputLoader(str(run_dir)).load_business()

        assert grounding.domains[0].implementation_status is ImplementationStatus.IN_PROGRESS
        assert grounding.capabilities == ["Payment Processing"]
        assert grounding.roadmap[0].step_number == 1

    def test_missing_tier3_is_none(self, run_dir):
        (run_dir / "tier3.yaml").unlink()

        assert TierOutputLoader(str(run_dir)).load_business() is None

    def test_empty_tier3_is_present(self, run_dir):
        (run_dir / "tier3.yaml").write_text("", encoding="utf-8")
        grounding = TierOutputLoader(str(run_dir)).load_business()

        assert grounding is not None
        assert grounding.domains == []

    def test_load_all_can_skip_business(self, run_dir):
        traditional, segments, grounding = TierOutputLoader(str(run_dir)).load_all(include_business=False)

        assert grounding is None
        assert len(traditional.frameworks) == 1
        assert len(segments.segments) == 1

    def test_missing_run_dir(self, tmp_path):
        traditional, segments, grounding = TierOutputLoader(str(tmp_path / "nope")).load_all()

        assert traditional.frameworks == []
        assert segments.segments == []
        assert grounding is None

    def test_non_mapping_file_ignored(self, tmp_path):
        (tmp_path / "tier1.yaml").write_text("- just\n- a list\n", encoding="utf-8")

        assert TierOutputLoader(str(tmp_path)).load_traditional().frameworks == []


class TestLoadConfig:

    def test_defaults_without_path(self):
        assert load_config(None).thresholds.min_framework_confidence == 0.6

    def test_missing_file_falls_back(self, tmp_path):
        assert load_config(str(tmp_path / "missing.yaml")).thresholds.min_tier_agreement == 0.4

    def test_overrides(self, tmp_path):
        path = tmp_path / "fusion.yaml"
        write_yaml(path, {
            "thresholds": {"min_framework_confidence": 0.7},
            "fusion_weights": {"tier1_traditional": 0.5, "tier2_context_aware": 0.3,
                               "tier3_business_grounding": 0.2},
            "unknown_key": True,
        })
        config = load_config(str(path))

        assert config.thresholds.min_framework_confidence == 0.7
        assert config.thresholds.min_domain_confidence == 0.5
        assert config.fusion_weights.tier1_traditional == 0.5

    def test_invalid_values_raise(self, tmp_path):
        path = tmp_path / "fusion.yaml"
        write_yaml(path, {"thresholds": {"min_tier_agreement": 1.5}})

        with pytest.raises(ValueError):
            load_config(str(path))
