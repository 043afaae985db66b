"""
Type definitions for hierarchical result fusion.
Separated to avoid circular imports.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Any, Optional, Tuple

import networkx as nx


def clamp_unit(value: float) -> float:
    """Clamp a confidence-like number to [0, 1]"""
    if value != value:  # NaN
        return 0.0
    return max(0.0, min(1.0, float(value)))


def normalize_label(label: Any) -> Optional[str]:
    """Coerce a free-form label to a stripped string, or None when blank"""
    if label is None:
        return None
    text = str(label).strip()
    return text or None


class Tier(Enum):
    """The three independent detection strategies"""
    TRADITIONAL = "tier1_traditional"
    CONTEXT_AWARE = "tier2_context_aware"
    BUSINESS_GROUNDING = "tier3_business_grounding"


TIER_ORDER = (Tier.TRADITIONAL, Tier.CONTEXT_AWARE, Tier.BUSINESS_GROUNDING)


class UsageExtent(Enum):
    """How widely a framework is used across the codebase"""
    CORE = "Core"
    EXTENSIVE = "Extensive"
    MODERATE = "Moderate"
    LIMITED = "Limited"

    @classmethod
    def parse(cls, label: Any) -> 'UsageExtent':
        if isinstance(label, cls):
            return label
        text = str(label or "").strip().lower()
        for member in cls:
            if member.value.lower() == text:
                return member
        return cls.MODERATE


class ImplementationStatus(Enum):
    """Implementation status of a grounded business domain"""
    COMPLETE = "Complete"
    IN_PROGRESS = "In Progress"
    PARTIAL = "Partial"
    PLANNED = "Planned"

    @classmethod
    def parse(cls, label: Any) -> 'ImplementationStatus':
        if isinstance(label, cls):
            return label
        text = str(label or "").strip().lower().replace("_", "").replace(" ", "")
        for member in cls:
            if member.value.lower().replace(" ", "") == text:
                return member
        return cls.PLANNED


class SubjectKind(Enum):
    FRAMEWORK = "framework"
    BUSINESS_DOMAIN = "business_domain"


class ValidationStatus(Enum):
    VALIDATED = "validated"
    REJECTED = "rejected"


# ---------------------------------------------------------------------------
# Upstream hypotheses (immutable once produced)
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class FrameworkHypothesis:
    """A framework claim from the traditional (signature matching) detector"""
    name: str
    confidence: float
    evidence_count: int = 0
    usage_extent: UsageExtent = UsageExtent.MODERATE
    evidence: Tuple[str, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "confidence", clamp_unit(self.confidence))
        object.__setattr__(self, "evidence", tuple(self.evidence))
        object.__setattr__(self, "usage_extent", UsageExtent.parse(self.usage_extent))
        if not self.evidence_count and self.evidence:
            object.__setattr__(self, "evidence_count", len(self.evidence))


@dataclass(frozen=True)
class SegmentInsight:
    """A typed code segment with business and architecture tags"""
    segment_id: str
    fused_confidence: float
    quality_score: float = 0.0
    business_domains: Tuple[str, ...] = ()
    architectural_patterns: Tuple[str, ...] = ()
    layer: Optional[str] = None

    def __post_init__(self):
        object.__setattr__(self, "fused_confidence", clamp_unit(self.fused_confidence))
        object.__setattr__(self, "quality_score", clamp_unit(self.quality_score))
        object.__setattr__(self, "business_domains", tuple(self.business_domains))
        object.__setattr__(self, "architectural_patterns", tuple(self.architectural_patterns))
        object.__setattr__(self, "layer", normalize_label(self.layer))


@dataclass(frozen=True)
class DomainHypothesis:
    """A grounded business domain from the business-context tier"""
    name: str
    confidence: float
    capabilities: Tuple[str, ...] = ()
    implementation_status: ImplementationStatus = ImplementationStatus.PLANNED
    evidence: Tuple[str, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "confidence", clamp_unit(self.confidence))
        object.__setattr__(self, "capabilities", tuple(self.capabilities))
        object.__setattr__(self, "evidence", tuple(self.evidence))
        object.__setattr__(
            self, "implementation_status", ImplementationStatus.parse(self.implementation_status)
        )


@dataclass(frozen=True)
class RoadmapStep:
    step_number: int
    domain_focus: str
    business_value: float
    estimated_effort: str = ""

    def __post_init__(self):
        object.__setattr__(self, "business_value", clamp_unit(self.business_value))


# ---------------------------------------------------------------------------
# Raw tier outputs
# ---------------------------------------------------------------------------

@dataclass
class TraditionalDetection:
    """Raw output of the tier-1 detector"""
    frameworks: List[FrameworkHypothesis] = field(default_factory=list)
    primary_ecosystem: Optional[str] = None


@dataclass
class SegmentAnalysis:
    """Raw output of the tier-2 segment analyzer"""
    segments: List[SegmentInsight] = field(default_factory=list)
    context_awareness_score: float = 0.0
    total_segments_processed: Optional[int] = None

    def __post_init__(self):
        self.context_awareness_score = clamp_unit(self.context_awareness_score)


@dataclass
class BusinessGrounding:
    """Raw output of the tier-3 business-context grounding"""
    domains: List[DomainHypothesis] = field(default_factory=list)
    capabilities: List[str] = field(default_factory=list)
    roadmap: List[RoadmapStep] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Tier insights
# ---------------------------------------------------------------------------

@dataclass
class TierInsights:
    """Per-tier aggregate: subject confidences plus the tier's mean confidence"""
    tier: Tier = Tier.TRADITIONAL
    subject_confidence: Dict[str, float] = field(default_factory=dict)
    tier_confidence: float = 0.5


@dataclass
class Tier1Insights(TierInsights):
    detected_frameworks: List[FrameworkHypothesis] = field(default_factory=list)
    evidence_strength: Dict[str, float] = field(default_factory=dict)
    architecture_patterns: List[str] = field(default_factory=list)
    evidence_quality: float = 0.0
    primary_ecosystem: Optional[str] = None


@dataclass
class Tier2Insights(TierInsights):
    segments: List[SegmentInsight] = field(default_factory=list)
    total_segments_processed: int = 0
    context_awareness_score: float = 0.0
    segment_qualities: Dict[str, float] = field(default_factory=dict)
    architectural_layers: Dict[str, int] = field(default_factory=dict)
    context_coverage: Dict[str, int] = field(default_factory=dict)


@dataclass
class Tier3Insights(TierInsights):
    grounded_domains: List[DomainHypothesis] = field(default_factory=list)
    business_capabilities: List[str] = field(default_factory=list)
    implementation_roadmap: List[RoadmapStep] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Fusion and validation records
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ConsensusRecord:
    """Blended confidence for one subject, with every tier's contributing score"""
    subject: str
    kind: SubjectKind
    tier_signals: Tuple[Tuple[Tier, float], ...]
    weighted_confidence: float
    tier_agreement_score: float
    evidence_strength: float = 0.0
    evidence: Tuple[str, ...] = ()
    implementation_status: Optional[ImplementationStatus] = None

    def signal(self, tier: Tier) -> float:
        for t, value in self.tier_signals:
            if t is tier:
                return value
        return 0.0

    @property
    def tier1_confidence(self) -> float:
        return self.signal(Tier.TRADITIONAL)

    @property
    def tier2_support(self) -> float:
        return self.signal(Tier.CONTEXT_AWARE)

    # Domains call the tier-2 signal corroboration
    tier2_corroboration = tier2_support

    @property
    def tier3_signal(self) -> float:
        return self.signal(Tier.BUSINESS_GROUNDING)

    @property
    def active_tiers(self) -> List[Tier]:
        return [t for t, value in self.tier_signals if value > 0.0]


@dataclass
class TierContributions:
    tier1_weight: float
    tier2_weight: float
    tier3_weight: float
    total_active_tiers: int


@dataclass
class WeightedFusionAnalysis:
    framework_consensus: Dict[str, ConsensusRecord] = field(default_factory=dict)
    business_domain_consensus: Dict[str, ConsensusRecord] = field(default_factory=dict)
    corroboration_graph: nx.DiGraph = field(default_factory=nx.DiGraph)
    fusion_confidence: float = 0.0
    tier_contributions: Optional[TierContributions] = None


@dataclass(frozen=True)
class ValidatedEntry:
    """A consensus record with its validation outcome and the evidence behind it"""
    record: ConsensusRecord
    validation_status: ValidationStatus = ValidationStatus.VALIDATED
    supporting_evidence: Tuple[str, ...] = ()

    @property
    def subject(self) -> str:
        return self.record.subject

    @property
    def weighted_confidence(self) -> float:
        return self.record.weighted_confidence

    @property
    def tier_agreement_score(self) -> float:
        return self.record.tier_agreement_score


@dataclass
class ConsensusValidatedResults:
    validated_frameworks: List[ValidatedEntry] = field(default_factory=list)
    validated_domains: List[ValidatedEntry] = field(default_factory=list)
    rejected_entries: List[ValidatedEntry] = field(default_factory=list)
    validation_issues: List[str] = field(default_factory=list)
    validation_quality: float = 0.0
    consensus_strength: float = 0.0


# ---------------------------------------------------------------------------
# Consolidated output
# ---------------------------------------------------------------------------

@dataclass
class ArchitectureAssessment:
    architectural_patterns: List[str] = field(default_factory=list)
    complexity_score: float = 0.0
    maintainability_score: float = 0.0
    scalability_indicators: List[str] = field(default_factory=list)


@dataclass
class ImplementationReadiness:
    overall_readiness: float = 0.0
    framework_readiness: float = 0.0
    context_completeness: float = 0.0
    business_alignment: float = 0.0
    recommended_next_steps: List[str] = field(default_factory=list)


@dataclass
class BusinessValueAssessment:
    overall_business_value: float = 0.0
    high_value_capabilities: List[str] = field(default_factory=list)
    implementation_priority_score: float = 0.0


@dataclass
class QualityAssurance:
    """Confidence-derived quality scores.

    The *_confidence_proxy values are means of validated consensus
    confidences. There is no ground truth behind them, so they are not
    accuracy measurements.
    """
    framework_confidence_proxy: float = 0.0
    domain_confidence_proxy: float = 0.0
    cross_tier_consistency: float = 0.0
    overall_analysis_reliability: float = 0.0


@dataclass
class ConfidenceSummary:
    overall_confidence: float = 0.0
    framework_confidence: float = 0.0
    business_domain_confidence: float = 0.0
    tier_coverage_completeness: float = 0.0


@dataclass
class ConsolidatedResult:
    """Terminal artifact of a fusion run"""
    primary_framework: Optional[str] = None
    secondary_frameworks: List[str] = field(default_factory=list)
    primary_business_domain: Optional[str] = None
    secondary_business_domains: List[str] = field(default_factory=list)
    architecture_assessment: ArchitectureAssessment = field(default_factory=ArchitectureAssessment)
    implementation_readiness: ImplementationReadiness = field(default_factory=ImplementationReadiness)
    business_value_assessment: Optional[BusinessValueAssessment] = None
    quality_assurance: QualityAssurance = field(default_factory=QualityAssurance)
    confidence_summary: ConfidenceSummary = field(default_factory=ConfidenceSummary)


@dataclass
class FusionQualityMetrics:
    overall_fusion_quality: float = 0.0
    tier_alignment_score: float = 0.0
    confidence_distribution: float = 0.0
    consensus_strength: float = 0.0
    result_completeness: float = 0.0
    improvement_over_baseline: float = 0.0


@dataclass
class FusionMetadata:
    total_fusion_time_ms: float
    fusion_weights: Dict[str, float]
    tiers_processed: int


@dataclass
class HierarchicalFusionResult:
    consolidated_results: ConsolidatedResult
    tier1_insights: Tier1Insights
    tier2_insights: Tier2Insights
    tier3_insights: Optional[Tier3Insights]
    fusion_analysis: WeightedFusionAnalysis
    validated_results: ConsensusValidatedResults
    quality_metrics: FusionQualityMetrics
    fusion_metadata: FusionMetadata
