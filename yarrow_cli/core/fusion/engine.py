"""
Hierarchical result fusion engine.

Reconciles the three detector tiers into one validated conclusion:

1. Extract tier-specific insights
2. Confidence-weighted fusion per framework and business domain
3. Consensus-based validation
4. Consolidation into primary/secondary conclusions and assessments
5. Fusion quality metrics

The engine is synchronous and holds no state between runs. A missing or
failed business-grounding tier is passed as None and every stage handles
that case explicitly.
"""

import logging
import time
from typing import Optional

from .config import FusionConfig
from .consolidation import Consolidator
from .fusion import WeightedFusion
from .insights import extract_tier1_insights, extract_tier2_insights, extract_tier3_insights
from .quality import FusionQualityAssessor
from .validation import ConsensusValidator
from .types import (
    TraditionalDetection, SegmentAnalysis, BusinessGrounding,
    FusionMetadata, HierarchicalFusionResult,
)

logger = logging.getLogger(__name__)


class HierarchicalFusionEngine:
    """
    Main fusion class that orchestrates the five fusion stages.

    Usage:
        engine = HierarchicalFusionEngine(FusionConfig())
        result = engine.fuse(traditional, segments, grounding)
        result.consolidated_results.primary_framework
    """

    def __init__(self, config: Optional[FusionConfig] = None):
        self.config = config or FusionConfig()
        self.weighted_fusion = WeightedFusion(self.config)
        self.validator = ConsensusValidator(self.config)
        self.consolidator = Consolidator(self.config)
        self.quality_assessor = FusionQualityAssessor(self.config)

    def fuse(self,
             traditional: TraditionalDetection,
             segments: SegmentAnalysis,
             grounding: Optional[BusinessGrounding] = None) -> HierarchicalFusionResult:
        start = time.perf_counter()
        logger.info("Starting hierarchical result fusion "
                    f"({'3' if grounding is not None else '2'} tiers)")

        tier1 = extract_tier1_insights(traditional, self.config)
        tier2 = extract_tier2_insights(segments, self.config)
        tier3 = extract_tier3_insights(grounding, self.config)

        analysis = self.weighted_fusion.fuse(tier1, tier2, tier3)
        validated = self.validator.validate(analysis)
        consolidated = self.consolidator.consolidate(validated, tier1, tier2, tier3)
        quality = self.quality_assessor.assess(consolidated, analysis, tier1, tier2, tier3)

        elapsed_ms = (time.perf_counter() - start) * 1000.0
        logger.info(f"Fusion complete in {elapsed_ms:.2f} ms")

        return HierarchicalFusionResult(
            consolidated_results=consolidated,
            tier1_insights=tier1,
            tier2_insights=tier2,
            tier3_insights=tier3,
            fusion_analysis=analysis,
            validated_results=validated,
            quality_metrics=quality,
            fusion_metadata=FusionMetadata(
                total_fusion_time_ms=elapsed_ms,
                fusion_weights={
                    "tier1_traditional": self.config.fusion_weights.tier1_traditional,
                    "tier2_context_aware": self.config.fusion_weights.tier2_context_aware,
                    "tier3_business_grounding": self.config.fusion_weights.tier3_business_grounding,
                },
                tiers_processed=3 if tier3 is not None else 2,
            ),
        )
