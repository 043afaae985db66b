"""
Consolidation of validated consensus into the final result.
"""

import logging
from typing import List, Optional, Tuple

from .config import FusionConfig
from .types import (
    clamp_unit, ValidatedEntry, ConsensusValidatedResults, ConsolidatedResult,
    ArchitectureAssessment, ImplementationReadiness, BusinessValueAssessment,
    QualityAssurance, ConfidenceSummary, Tier1Insights, Tier2Insights, Tier3Insights,
)
from .weighting import (
    mean_confidence, scalability_indicator_for, is_high_value_capability,
)

logger = logging.getLogger(__name__)


def rank_entries(entries: List[ValidatedEntry]) -> List[ValidatedEntry]:
    """Order by confidence descending, then subject name ascending"""
    return sorted(entries, key=lambda e: (-e.weighted_confidence, e.subject))


def split_primary(entries: List[ValidatedEntry]) -> Tuple[Optional[ValidatedEntry], List[ValidatedEntry]]:
    ranked = rank_entries(entries)
    if not ranked:
        return None, []
    return ranked[0], ranked[1:]


def pairwise_consistency(conf1: float, conf2: float) -> float:
    return 1.0 - abs(conf1 - conf2)


def readiness_next_steps(readiness: float) -> List[str]:
    if readiness >= 0.8:
        return ["Project is ready for implementation"]
    if readiness >= 0.6:
        return [
            "Address remaining framework configuration",
            "Finalize business requirements",
        ]
    return [
        "Improve framework detection confidence",
        "Enhance business context understanding",
        "Validate architectural decisions",
    ]


class Consolidator:
    """Selects primary/secondary conclusions and derives the assessments"""

    def __init__(self, config: FusionConfig):
        self.config = config

    def consolidate(self,
                    validated: ConsensusValidatedResults,
                    tier1: Tier1Insights,
                    tier2: Tier2Insights,
                    tier3: Optional[Tier3Insights]) -> ConsolidatedResult:
        primary_framework, secondary_frameworks = split_primary(validated.validated_frameworks)
        primary_domain, secondary_domains = split_primary(validated.validated_domains)

        if tier3 is not None:
            business_value = self.assess_business_value(tier3)
        else:
            business_value = None

        result = ConsolidatedResult(
            primary_framework=primary_framework.subject if primary_framework else None,
            secondary_frameworks=[e.subject for e in secondary_frameworks],
            primary_business_domain=primary_domain.subject if primary_domain else None,
            secondary_business_domains=[e.subject for e in secondary_domains],
            architecture_assessment=self.assess_architecture(tier1, tier2),
            implementation_readiness=self.assess_readiness(validated, tier2, tier3),
            business_value_assessment=business_value,
            quality_assurance=self.assess_quality(validated, tier1, tier2, tier3),
            confidence_summary=ConfidenceSummary(
                overall_confidence=validated.consensus_strength,
                framework_confidence=primary_framework.weighted_confidence if primary_framework else 0.0,
                business_domain_confidence=primary_domain.weighted_confidence if primary_domain else 0.0,
                tier_coverage_completeness=self.tier_coverage_completeness(tier1, tier2, tier3),
            ),
        )
        logger.info(f"Primary framework: {result.primary_framework}, "
                    f"primary business domain: {result.primary_business_domain}")
        return result

    def assess_architecture(self, tier1: Tier1Insights, tier2: Tier2Insights) -> ArchitectureAssessment:
        patterns = list(tier1.architecture_patterns)
        for layer in sorted(tier2.architectural_layers):
            if tier2.architectural_layers[layer] > 0:
                patterns.append(f"{layer} Layer Implementation")

        layer_diversity = clamp_unit(len(tier2.architectural_layers) / self.config.layer_diversity_divisor)
        segment_complexity = clamp_unit(tier2.total_segments_processed / self.config.segment_count_divisor)

        pattern_clarity = 0.8 if tier1.architecture_patterns else 0.4

        indicators: List[str] = []
        for hypothesis in tier1.detected_frameworks:
            indicator = scalability_indicator_for(hypothesis.name)
            if indicator and indicator not in indicators:
                indicators.append(indicator)
        if len(tier2.architectural_layers) >= 3:
            indicators.append("Multi-layer architecture supports horizontal scaling")
        if not indicators:
            indicators.append("Standard scalability patterns detected")

        return ArchitectureAssessment(
            architectural_patterns=patterns,
            complexity_score=(layer_diversity + segment_complexity) / 2.0,
            maintainability_score=(pattern_clarity + tier2.context_awareness_score) / 2.0,
            scalability_indicators=indicators,
        )

    def assess_readiness(self, validated: ConsensusValidatedResults, tier2: Tier2Insights,
                         tier3: Optional[Tier3Insights]) -> ImplementationReadiness:
        framework_readiness = mean_confidence(
            (e.weighted_confidence for e in validated.validated_frameworks), default=0.0
        )
        context_completeness = tier2.context_awareness_score
        if tier3 is not None:
            business_alignment = tier3.tier_confidence
        else:
            business_alignment = self.config.absent_business_alignment

        w_framework, w_context, w_business = self.config.readiness_weights
        overall = clamp_unit(
            framework_readiness * w_framework
            + context_completeness * w_context
            + business_alignment * w_business
        )
        return ImplementationReadiness(
            overall_readiness=overall,
            framework_readiness=framework_readiness,
            context_completeness=context_completeness,
            business_alignment=business_alignment,
            recommended_next_steps=readiness_next_steps(overall),
        )

    def assess_business_value(self, tier3: Tier3Insights) -> BusinessValueAssessment:
        roadmap = tier3.implementation_roadmap
        overall_value = sum(step.business_value for step in roadmap) / max(len(roadmap), 1)
        priority = overall_value

        high_value = [
            capability for capability in tier3.business_capabilities
            if is_high_value_capability(capability, self.config.high_value_keywords)
        ]
        return BusinessValueAssessment(
            overall_business_value=overall_value,
            high_value_capabilities=high_value,
            implementation_priority_score=priority,
        )

    def assess_quality(self, validated: ConsensusValidatedResults, tier1: Tier1Insights,
                       tier2: Tier2Insights, tier3: Optional[Tier3Insights]) -> QualityAssurance:
        consistency = [pairwise_consistency(tier1.tier_confidence, tier2.tier_confidence)]
        if tier3 is not None:
            consistency.append(pairwise_consistency(tier1.tier_confidence, tier3.tier_confidence))
            consistency.append(pairwise_consistency(tier2.tier_confidence, tier3.tier_confidence))

        return QualityAssurance(
            framework_confidence_proxy=mean_confidence(
                (e.weighted_confidence for e in validated.validated_frameworks), default=0.0
            ),
            domain_confidence_proxy=mean_confidence(
                (e.weighted_confidence for e in validated.validated_domains), default=0.0
            ),
            cross_tier_consistency=sum(consistency) / len(consistency),
            overall_analysis_reliability=validated.validation_quality,
        )

    def tier_coverage_completeness(self, tier1: Tier1Insights, tier2: Tier2Insights,
                                   tier3: Optional[Tier3Insights]) -> float:
        coverage = 0.0
        if tier1.tier_confidence > 0.5:
            coverage += 0.33
        if tier2.context_awareness_score > 0.5:
            coverage += 0.33

        if tier3 is not None:
            if tier3.tier_confidence > 0.5:
                coverage += 0.34
        else:
            # Two-tier run: rescale to the full range
            coverage *= 1.5

        return min(coverage, 1.0)
