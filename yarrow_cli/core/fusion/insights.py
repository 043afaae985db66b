"""
Tier insight extraction.

Each function is a pure transform of one tier's raw output into its
TierInsights summary. Tier-3 stays optional: extract_tier3_insights returns
None when the business grounding is absent.
"""

import logging
from collections import Counter
from typing import Dict, List, Optional, Iterable

from .config import FusionConfig
from .types import (
    Tier, clamp_unit,
    TraditionalDetection, SegmentAnalysis, BusinessGrounding, SegmentInsight,
    Tier1Insights, Tier2Insights, Tier3Insights,
)
from .weighting import mean_confidence, architecture_pattern_for

logger = logging.getLogger(__name__)


def extract_tier1_insights(traditional: TraditionalDetection,
                           config: FusionConfig) -> Tier1Insights:
    """Summarise the traditional detector's framework hypotheses"""
    framework_confidence: Dict[str, float] = {}
    evidence_strength: Dict[str, float] = {}
    patterns: List[str] = []

    for hypothesis in traditional.frameworks:
        # A framework reported twice keeps its strongest claim
        if hypothesis.confidence >= framework_confidence.get(hypothesis.name, 0.0):
            framework_confidence[hypothesis.name] = hypothesis.confidence
            evidence_strength[hypothesis.name] = clamp_unit(
                hypothesis.evidence_count / config.evidence_normalizer
            )
        pattern = architecture_pattern_for(hypothesis.name)
        if pattern not in patterns:
            patterns.append(pattern)

    evidence_quality = 0.0
    if traditional.frameworks:
        total_evidence = sum(h.evidence_count for h in traditional.frameworks)
        evidence_quality = clamp_unit(
            total_evidence / len(traditional.frameworks) / config.evidence_normalizer
        )

    insights = Tier1Insights(
        tier=Tier.TRADITIONAL,
        subject_confidence=framework_confidence,
        tier_confidence=mean_confidence(framework_confidence.values(), config.empty_tier_confidence),
        detected_frameworks=list(traditional.frameworks),
        evidence_strength=evidence_strength,
        architecture_patterns=patterns,
        evidence_quality=evidence_quality,
        primary_ecosystem=traditional.primary_ecosystem,
    )
    logger.debug(f"Tier-1: {len(framework_confidence)} frameworks, "
                 f"tier confidence {insights.tier_confidence:.3f}")
    return insights


def extract_tier2_insights(analysis: SegmentAnalysis, config: FusionConfig) -> Tier2Insights:
    """Summarise the context-aware segment analyzer's output"""
    segment_qualities: Dict[str, float] = {}
    segment_confidence: Dict[str, float] = {}
    layers: Counter = Counter()
    coverage: Counter = Counter()

    for segment in analysis.segments:
        segment_qualities[segment.segment_id] = segment.quality_score
        segment_confidence[segment.segment_id] = segment.fused_confidence
        if segment.layer:
            layers[segment.layer] += 1
        if segment.business_domains:
            coverage["business_context"] += 1
        if segment.architectural_patterns:
            coverage["architecture_context"] += 1

    total = analysis.total_segments_processed
    if total is None:
        total = len(analysis.segments)

    insights = Tier2Insights(
        tier=Tier.CONTEXT_AWARE,
        subject_confidence=segment_confidence,
        tier_confidence=mean_confidence(segment_confidence.values(), config.empty_tier_confidence),
        segments=list(analysis.segments),
        total_segments_processed=total,
        context_awareness_score=analysis.context_awareness_score,
        segment_qualities=segment_qualities,
        architectural_layers=dict(layers),
        context_coverage=dict(coverage),
    )
    logger.debug(f"Tier-2: {len(analysis.segments)} segments across "
                 f"{len(layers)} layers, tier confidence {insights.tier_confidence:.3f}")
    return insights


def extract_tier3_insights(grounding: Optional[BusinessGrounding],
                           config: FusionConfig) -> Optional[Tier3Insights]:
    """Summarise the business grounding, or None when the tier did not report"""
    if grounding is None:
        logger.debug("Tier-3: absent")
        return None

    domain_confidence: Dict[str, float] = {}
    capabilities: List[str] = list(grounding.capabilities)
    for domain in grounding.domains:
        if domain.confidence >= domain_confidence.get(domain.name, 0.0):
            domain_confidence[domain.name] = domain.confidence
        for capability in domain.capabilities:
            if capability not in capabilities:
                capabilities.append(capability)

    insights = Tier3Insights(
        tier=Tier.BUSINESS_GROUNDING,
        subject_confidence=domain_confidence,
        tier_confidence=mean_confidence(domain_confidence.values(), config.empty_tier_confidence),
        grounded_domains=list(grounding.domains),
        business_capabilities=capabilities,
        implementation_roadmap=sorted(grounding.roadmap, key=lambda step: step.step_number),
    )
    logger.debug(f"Tier-3: {len(domain_confidence)} domains, "
                 f"tier confidence {insights.tier_confidence:.3f}")
    return insights


def _tags_mention(tags: Iterable[str], subject: str) -> bool:
    # Substring match, not token match: "React" also matches "ReactiveStreams"
    needle = subject.lower()
    return any(needle in tag.lower() for tag in tags)


def corroborating_segments(segments: List[SegmentInsight], subject: str,
                           business: bool) -> List[SegmentInsight]:
    """Segments whose business (or architecture) tags mention the subject"""
    if not subject:
        return []
    if business:
        return [seg for seg in segments if _tags_mention(seg.business_domains, subject)]
    return [seg for seg in segments if _tags_mention(seg.architectural_patterns, subject)]


def architecture_corroboration(segments: List[SegmentInsight], subject: str) -> float:
    """Fraction of segments whose architecture tags mention the subject"""
    if not segments:
        return 0.0
    return len(corroborating_segments(segments, subject, business=False)) / len(segments)


def business_corroboration(segments: List[SegmentInsight], subject: str) -> float:
    """Fraction of segments whose business tags mention the subject"""
    if not segments:
        return 0.0
    return len(corroborating_segments(segments, subject, business=True)) / len(segments)
