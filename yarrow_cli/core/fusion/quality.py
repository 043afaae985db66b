"""
Quality metrics for the fusion process itself.

These score how well the tiers lined up and how complete the consolidated
result is. improvement_over_baseline is reported only and never gates anything.
"""

import logging
from typing import Optional

import networkx as nx
import numpy as np

from .config import FusionConfig
from .fusion import segment_node, subject_node
from .types import (
    clamp_unit, SubjectKind, ConsolidatedResult, FusionQualityMetrics, WeightedFusionAnalysis,
    Tier1Insights, Tier2Insights, Tier3Insights,
)

logger = logging.getLogger(__name__)


def framework_context_alignment(tier1: Tier1Insights, tier2: Tier2Insights) -> float:
    """Geometric mean of framework strength and context awareness"""
    return float(np.sqrt(tier1.tier_confidence * tier2.context_awareness_score))


def business_context_alignment(tier2: Tier2Insights, tier3: Tier3Insights,
                               graph: nx.DiGraph) -> float:
    """Fraction of tier-2 segments that corroborate at least one grounded domain"""
    if not tier2.segments:
        return 0.5
    domain_nodes = {subject_node(SubjectKind.BUSINESS_DOMAIN, d.name) for d in tier3.grounded_domains}
    aligned = 0
    for segment in tier2.segments:
        node = segment_node(segment.segment_id)
        if graph.has_node(node) and any(s in domain_nodes for s in graph.successors(node)):
            aligned += 1
    return aligned / len(tier2.segments)


def tier_alignment_score(tier1: Tier1Insights, tier2: Tier2Insights,
                         tier3: Optional[Tier3Insights], graph: nx.DiGraph) -> float:
    scores = [framework_context_alignment(tier1, tier2)]
    if tier3 is not None:
        scores.append(business_context_alignment(tier2, tier3, graph))
    return clamp_unit(float(np.mean(scores)))


def confidence_distribution(tier1: Tier1Insights, tier2: Tier2Insights,
                            tier3: Optional[Tier3Insights]) -> float:
    """High mean and low spread of tier confidences scores well"""
    confidences = [tier1.tier_confidence, tier2.tier_confidence]
    if tier3 is not None:
        confidences.append(tier3.tier_confidence)
    values = np.asarray(confidences, dtype=float)
    return clamp_unit(float(values.mean() * (1.0 - values.std())))


def result_completeness(result: ConsolidatedResult) -> float:
    score = 0.0
    if result.primary_framework is not None:
        score += 0.3
    if result.secondary_frameworks:
        score += 0.1
    if result.primary_business_domain is not None:
        score += 0.3
    if result.secondary_business_domains:
        score += 0.1
    if result.architecture_assessment.architectural_patterns:
        score += 0.1
    if result.implementation_readiness.overall_readiness > 0.5:
        score += 0.1
    return min(score, 1.0)


def improvement_over_baseline(result: ConsolidatedResult, tier1: Tier1Insights) -> float:
    baseline = tier1.tier_confidence
    consolidated = result.confidence_summary.overall_confidence
    if baseline > 0.0:
        return max(0.0, (consolidated - baseline) / baseline)
    return consolidated


class FusionQualityAssessor:
    """Scores a completed fusion run"""

    def __init__(self, config: FusionConfig):
        self.config = config

    def assess(self, result: ConsolidatedResult, analysis: WeightedFusionAnalysis,
               tier1: Tier1Insights, tier2: Tier2Insights,
               tier3: Optional[Tier3Insights]) -> FusionQualityMetrics:
        alignment = tier_alignment_score(tier1, tier2, tier3, analysis.corroboration_graph)
        distribution = confidence_distribution(tier1, tier2, tier3)
        consensus = result.confidence_summary.overall_confidence
        completeness = result_completeness(result)

        w_alignment, w_distribution, w_consensus, w_completeness = self.config.quality_weights
        overall = (alignment * w_alignment
                   + distribution * w_distribution
                   + consensus * w_consensus
                   + completeness * w_completeness)

        metrics = FusionQualityMetrics(
            overall_fusion_quality=clamp_unit(overall),
            tier_alignment_score=alignment,
            confidence_distribution=distribution,
            consensus_strength=consensus,
            result_completeness=completeness,
            improvement_over_baseline=improvement_over_baseline(result, tier1),
        )
        logger.info(f"Fusion quality {metrics.overall_fusion_quality:.3f} "
                    f"(alignment {alignment:.3f}, completeness {completeness:.2f})")
        return metrics

