"""Shared builders for fusion tests."""

import pytest

from yarrow_cli.core.fusion import (
    FusionConfig,
    FrameworkHypothesis,
    SegmentInsight,
    DomainHypothesis,
    RoadmapStep,
    TraditionalDetection,
    SegmentAnalysis,
    BusinessGrounding,
)


def make_segment(segment_id, patterns=(), domains=(), confidence=0.6, layer=None, quality=0.5):
    return SegmentInsight(
        segment_id=segment_id,
        fused_confidence=confidence,
        quality_score=quality,
        business_domains=tuple(domains),
        architectural_patterns=tuple(patterns),
        layer=layer,
    )


@pytest.fixture
def config():
    return FusionConfig()


@pytest.fixture
def react_traditional():
    """Tier-1 sees React at 0.8 with five evidence items."""
    return TraditionalDetection(
        frameworks=[
            FrameworkHypothesis(
                name="React",
                confidence=0.8,
                evidence_count=5,
                evidence=("package.json: react", "src/App.tsx: import React"),
            ),
        ],
        primary_ecosystem="TypeScript",
    )


@pytest.fixture
def react_segments():
    """Half of the segments mention React in their architecture tags."""
    return SegmentAnalysis(
        segments=[
            make_segment("seg-1", patterns=["React Component"], confidence=0.7, layer="Presentation"),
            make_segment("seg-2", patterns=["Service Layer"], confidence=0.5, layer="Service"),
        ],
        context_awareness_score=0.6,
    )


@pytest.fixture
def real_estate_grounding():
    return BusinessGrounding(
        domains=[
            DomainHypothesis(
                name="RealEstate",
                confidence=0.9,
                capabilities=("Property Listings", "User Accounts"),
                implementation_status="In Progress",
            ),
        ],
        capabilities=["Payment Processing", "Reporting"],
        roadmap=[
            RoadmapStep(step_number=2, domain_focus="RealEstate", business_value=0.4),
            RoadmapStep(step_number=1, domain_focus="RealEstate", business_value=0.8),
        ],
    )
