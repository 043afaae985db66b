"""Tests for tier insight extraction and segment corroboration."""

import pytest

from conftest import make_segment
from yarrow_cli.core.fusion import (
    FusionConfig, FrameworkHypothesis, TraditionalDetection, SegmentAnalysis, BusinessGrounding, Tier,
)
from yarrow_cli.core.fusion.insights import (
    extract_tier1_insights,
    extract_tier2_insights,
    extract_tier3_insights,
    architecture_corroboration,
    business_corroboration,
)


# =============================================================================
# TIER CONFIDENCE
# =============================================================================

class TestTierConfidence:

    def test_empty_tier_defaults_to_half(self, config):
        insights = extract_tier1_insights(TraditionalDetection(), config)

        assert insights.tier is Tier.TRADITIONAL
        assert insights.tier_confidence == 0.5
        assert insights.subject_confidence == {}

    def test_mean_of_subject_confidences(self, config):
        traditional = TraditionalDetection(frameworks=[
            FrameworkHypothesis(name="React", confidence=0.8),
            FrameworkHypothesis(name="Express", confidence=0.4),
        ])
        insights = extract_tier1_insights(traditional, config)

        assert insights.tier_confidence == pytest.approx(0.6)

    def test_empty_segments_default_to_half(self, config):
        insights = extract_tier2_insights(SegmentAnalysis(), config)

        assert insights.tier_confidence == 0.5
        assert insights.total_segments_processed == 0

    def test_configured_empty_default(self):
        config = FusionConfig(empty_tier_confidence=0.3)

        assert extract_tier1_insights(TraditionalDetection(), config).tier_confidence == 0.3


# =============================================================================
# TIER-1 STRUCTURE
# =============================================================================

class TestTier1Insights:

    def test_evidence_strength_normalised(self, config, react_traditional):
        insights = extract_tier1_insights(react_traditional, config)

        assert insights.evidence_strength["React"] == pytest.approx(0.5)
        assert insights.evidence_quality == pytest.approx(0.5)

    def test_evidence_strength_capped(self, config):
        traditional = TraditionalDetection(frameworks=[
            FrameworkHypothesis(name="Django", confidence=0.9, evidence_count=40),
        ])
        insights = extract_tier1_insights(traditional, config)

        assert insights.evidence_strength["Django"] == 1.0

    def test_architecture_patterns_deduplicated(self, config):
        traditional = TraditionalDetection(frameworks=[
            FrameworkHypothesis(name="React", confidence=0.8),
            FrameworkHypothesis(name="Gin", confidence=0.5),
            FrameworkHypothesis(name="Fiber", confidence=0.5),
        ])
        insights = extract_tier1_insights(traditional, config)

        assert insights.architecture_patterns == [
            "Component-Based Architecture",
            "Framework-Specific Pattern",
        ]

    def test_duplicate_framework_keeps_strongest(self, config):
        traditional = TraditionalDetection(frameworks=[
            FrameworkHypothesis(name="Flask", confidence=0.4),
            FrameworkHypothesis(name="Flask", confidence=0.7),
        ])
        insights = extract_tier1_insights(traditional, config)

        assert insights.subject_confidence == {"Flask": 0.7}

    def test_hypothesis_confidence_clamped(self):
        hypothesis = FrameworkHypothesis(name="React", confidence=1.7)

        assert hypothesis.confidence == 1.0


# =============================================================================
# TIER-2 STRUCTURE
# =============================================================================

class TestTier2Insights:

    def test_layers_and_coverage(self, config):
        analysis = SegmentAnalysis(
            segments=[
                make_segment("a", patterns=["MVC"], domains=["Billing"], layer="Presentation"),
                make_segment("b", patterns=["Repository"], layer="Data"),
                make_segment("c", domains=["Billing"], layer="Data"),
            ],
            context_awareness_score=0.8,
        )
        insights = extract_tier2_insights(analysis, config)

        assert insights.architectural_layers == {"Presentation": 1, "Data": 2}
        assert insights.context_coverage == {"business_context": 2, "architecture_context": 2}
        assert insights.total_segments_processed == 3
        assert insights.context_awareness_score == 0.8

    def test_reported_segment_total_wins(self, config):
        analysis = SegmentAnalysis(segments=[make_segment("a")], total_segments_processed=250)

        assert extract_tier2_insights(analysis, config).total_segments_processed == 250


# =============================================================================
# TIER-3 STRUCTURE
# =============================================================================

class TestTier3Insights:

    def test_absent_grounding_is_none(self, config):
        assert extract_tier3_insights(None, config) is None

    def test_present_but_empty_grounding(self, config):
        insights = extract_tier3_insights(BusinessGrounding(), config)

        assert insights is not None
        assert insights.tier_confidence == 0.5
        assert insights.subject_confidence == {}

    def test_capabilities_merged_and_roadmap_ordered(self, config, real_estate_grounding):
        insights = extract_tier3_insights(real_estate_grounding, config)

        assert insights.business_capabilities == [
            "Payment Processing", "Reporting", "Property Listings", "User Accounts",
        ]
        assert [s.step_number for s in insights.implementation_roadmap] == [1, 2]
        assert insights.tier_confidence == pytest.approx(0.9)


# =============================================================================
# CORROBORATION
# =============================================================================

class TestCorroboration:

    def test_fraction_of_segments(self):
        segments = [
            make_segment("a", patterns=["React Component"]),
            make_segment("b", patterns=["Service Layer"]),
        ]

        assert architecture_corroboration(segments, "React") == 0.5

    def test_case_insensitive(self):
        segments = [make_segment("a", patterns=["react hooks"])]

        assert architecture_corroboration(segments, "REACT") == 1.0

    def test_substring_match_counts_unrelated_tags(self):
        """Substring matching: a ReactiveX tag corroborates React."""
        segments = [
            make_segment("a", patterns=["ReactiveX streams"]),
            make_segment("b", patterns=["Observer"]),
        ]

        assert architecture_corroboration(segments, "React") == 0.5

    def test_business_tags_only_for_domains(self):
        segments = [make_segment("a", patterns=["Billing Adapter"], domains=["Payments"])]

        assert business_corroboration(segments, "Billing") == 0.0
        assert business_corroboration(segments, "payments") == 1.0

    def test_no_segments_no_corroboration(self):
        assert architecture_corroboration([], "React") == 0.0
        assert business_corroboration([], "Payments") == 0.0
