"""
Consensus-based validation.

A record is validated when its weighted confidence clears the kind-specific
floor and its tier agreement clears min_tier_agreement. Rejections are kept as
readable issue strings and as REJECTED entries. Nothing here raises; an empty
validated set means no confident conclusion.
"""

import logging
from typing import List, Tuple

from .config import FusionConfig
from .fusion import corroborating_tiers
from .types import (
    SubjectKind, ValidationStatus, ConsensusRecord, ValidatedEntry,
    ConsensusValidatedResults, WeightedFusionAnalysis,
)
from .weighting import mean_confidence

logger = logging.getLogger(__name__)

_KIND_LABELS = {
    SubjectKind.FRAMEWORK: "Framework",
    SubjectKind.BUSINESS_DOMAIN: "Business domain",
}


def passes_thresholds(record: ConsensusRecord, min_confidence: float,
                      min_agreement: float) -> bool:
    return (record.weighted_confidence >= min_confidence
            and record.tier_agreement_score >= min_agreement)


class ConsensusValidator:
    """Filters consensus records into validated entries"""

    def __init__(self, config: FusionConfig):
        self.config = config

    def validate(self, analysis: WeightedFusionAnalysis) -> ConsensusValidatedResults:
        thresholds = self.config.thresholds
        issues: List[str] = []
        rejected: List[ValidatedEntry] = []

        validated_frameworks, framework_issues = self._validate_records(
            analysis, list(analysis.framework_consensus.values()),
            thresholds.min_framework_confidence, rejected,
        )
        issues.extend(framework_issues)

        validated_domains, domain_issues = self._validate_records(
            analysis, list(analysis.business_domain_consensus.values()),
            thresholds.min_domain_confidence, rejected,
        )
        issues.extend(domain_issues)

        framework_quality = mean_confidence(
            (e.weighted_confidence for e in validated_frameworks), default=0.0
        )
        domain_quality = mean_confidence(
            (e.weighted_confidence for e in validated_domains), default=0.0
        )

        results = ConsensusValidatedResults(
            validated_frameworks=validated_frameworks,
            validated_domains=validated_domains,
            rejected_entries=rejected,
            validation_issues=issues,
            validation_quality=(framework_quality + domain_quality) / 2.0,
            consensus_strength=analysis.fusion_confidence,
        )
        logger.info(f"Validated {len(validated_frameworks)} frameworks and "
                    f"{len(validated_domains)} business domains; {len(issues)} rejected")
        return results

    def _validate_records(self, analysis: WeightedFusionAnalysis,
                          records: List[ConsensusRecord],
                          min_confidence: float,
                          rejected: List[ValidatedEntry]) -> Tuple[List[ValidatedEntry], List[str]]:
        min_agreement = self.config.thresholds.min_tier_agreement
        validated: List[ValidatedEntry] = []
        issues: List[str] = []

        for record in sorted(records, key=lambda r: r.subject):
            if passes_thresholds(record, min_confidence, min_agreement):
                validated.append(ValidatedEntry(
                    record=record,
                    validation_status=ValidationStatus.VALIDATED,
                    supporting_evidence=self._gather_evidence(analysis, record),
                ))
                continue

            label = _KIND_LABELS[record.kind]
            if record.weighted_confidence < min_confidence:
                issue = (f"{label} {record.subject} below confidence threshold "
                         f"(confidence: {record.weighted_confidence:.3f})")
            else:
                issue = (f"{label} {record.subject} has insufficient tier agreement "
                         f"(score: {record.tier_agreement_score:.3f})")
            issues.append(issue)
            rejected.append(ValidatedEntry(
                record=record,
                validation_status=ValidationStatus.REJECTED,
                supporting_evidence=(issue,) + self._gather_evidence(analysis, record),
            ))

        return validated, issues

    def _gather_evidence(self, analysis: WeightedFusionAnalysis,
                         record: ConsensusRecord) -> Tuple[str, ...]:
        evidence: List[str] = []
        if record.kind is SubjectKind.FRAMEWORK:
            if record.tier1_confidence > 0.5:
                evidence.append(f"Traditional detection confidence: {record.tier1_confidence:.2f}")
            if record.tier2_support > 0.3:
                evidence.append(f"Context-aware segment support: {record.tier2_support:.2f}")
            if record.tier3_signal > 0.3:
                evidence.append(f"Business domain alignment: {record.tier3_signal:.2f}")
        else:
            if record.tier3_signal > 0.5:
                evidence.append(f"Business grounding confidence: {record.tier3_signal:.2f}")
            if record.tier2_corroboration > 0.3:
                evidence.append(f"Segment corroboration: {record.tier2_corroboration:.2f}")

        tiers = corroborating_tiers(analysis.corroboration_graph, record.kind, record.subject)
        if tiers:
            evidence.append("Corroborated by: " + ", ".join(t.value for t in tiers))
        evidence.extend(record.evidence)
        return tuple(evidence)
