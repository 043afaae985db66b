"""
Yarrow: multi-tier evidence fusion for requirement inference.

Combines framework detection, segment analysis and business-context grounding
results into one validated conclusion about a codebase.

Usage:
    from yarrow_cli import HierarchicalFusionEngine, FusionConfig

    engine = HierarchicalFusionEngine(FusionConfig())
    result = engine.fuse(traditional, segments, grounding)
"""

from .core.fusion import (
    HierarchicalFusionEngine,
    FusionConfig,
    FrameworkHypothesis,
    SegmentInsight,
    DomainHypothesis,
    RoadmapStep,
    TraditionalDetection,
    SegmentAnalysis,
    BusinessGrounding,
    ConsolidatedResult,
)
from .core.loader import TierOutputLoader, load_config

__version__ = "0.1.0"

__all__ = [
    "HierarchicalFusionEngine",
    "FusionConfig",
    "FrameworkHypothesis",
    "SegmentInsight",
    "DomainHypothesis",
    "RoadmapStep",
    "TraditionalDetection",
    "SegmentAnalysis",
    "BusinessGrounding",
    "ConsolidatedResult",
    "TierOutputLoader",
    "load_config",
]
