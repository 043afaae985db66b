"""
Hierarchical result fusion.

Reconciles the outputs of three independently run detectors:
1. Traditional detection: signature/string matching (framework hypotheses)
2. Context-aware segment analysis: typed code segments with business/architecture tags
3. Business-context grounding: domain hypotheses with capabilities (optional)

Main Components:
- HierarchicalFusionEngine: runs extraction, fusion, validation, consolidation and quality scoring
- WeightedFusion: per-subject consensus confidence and tier agreement
- ConsensusValidator: threshold-based filtering into validated entries
- Consolidator: primary/secondary selection and derived assessments
- FusionQualityAssessor: scores the fusion run itself
"""

from .config import FusionConfig, ConfidenceWeights, QualityThresholds
from .consolidation import Consolidator
from .engine import HierarchicalFusionEngine
from .fusion import WeightedFusion
from .quality import FusionQualityAssessor
from .types import (
    Tier, UsageExtent, ImplementationStatus, SubjectKind, ValidationStatus,
    FrameworkHypothesis, SegmentInsight, DomainHypothesis, RoadmapStep,
    TraditionalDetection, SegmentAnalysis, BusinessGrounding,
    ConsensusRecord, ValidatedEntry, ConsolidatedResult, FusionQualityMetrics,
    HierarchicalFusionResult,
)
from .validation import ConsensusValidator

__all__ = [
    # Main classes
    'HierarchicalFusionEngine',
    'WeightedFusion',
    'ConsensusValidator',
    'Consolidator',
    'FusionQualityAssessor',

    # Configuration
    'FusionConfig',
    'ConfidenceWeights',
    'QualityThresholds',

    # Inputs
    'FrameworkHypothesis',
    'SegmentInsight',
    'DomainHypothesis',
    'RoadmapStep',
    'TraditionalDetection',
    'SegmentAnalysis',
    'BusinessGrounding',

    # Results
    'ConsensusRecord',
    'ValidatedEntry',
    'ConsolidatedResult',
    'FusionQualityMetrics',
    'HierarchicalFusionResult',

    # Enums
    'Tier',
    'UsageExtent',
    'ImplementationStatus',
    'SubjectKind',
    'ValidationStatus',
]
