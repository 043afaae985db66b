"""
Configuration for the hierarchical fusion engine.

Weights and thresholds are held on an explicit FusionConfig value that is
passed into the engine, so different runs can use different settings side by side.
"""

from dataclasses import dataclass, field, asdict
from typing import Dict, Any, List, Tuple

from .types import Tier


@dataclass
class ConfidenceWeights:
    """Per-tier weights used by one of the weighting formulas"""

    tier1_traditional: float = 0.3
    tier2_context_aware: float = 0.4
    tier3_business_grounding: float = 0.3

    def for_tier(self, tier: Tier) -> float:
        if tier is Tier.TRADITIONAL:
            return self.tier1_traditional
        if tier is Tier.CONTEXT_AWARE:
            return self.tier2_context_aware
        return self.tier3_business_grounding

    def as_tuple(self) -> Tuple[float, float, float]:
        return (self.tier1_traditional, self.tier2_context_aware, self.tier3_business_grounding)


@dataclass
class QualityThresholds:
    """Thresholds a consensus record must clear to be validated"""

    min_framework_confidence: float = 0.6
    min_domain_confidence: float = 0.5
    min_tier_agreement: float = 0.4


def _default_agreement_weights() -> ConfidenceWeights:
    return ConfidenceWeights(
        tier1_traditional=0.4,
        tier2_context_aware=0.4,
        tier3_business_grounding=0.2,
    )


def _default_high_value_keywords() -> List[str]:
    return ["payment", "user", "auth", "api", "data", "analytics", "security"]


def _default_known_frameworks() -> List[str]:
    return [
        "React", "Next.js", "NestJS", "Express", "Vue.js", "Angular",
        "Flask", "FastAPI", "Django", "Spring Boot", "Quarkus", "Danet",
        "Axum", "Warp", "Actix Web", "Gin", "Fiber",
    ]


@dataclass
class FusionConfig:
    """Configuration class for hierarchical result fusion"""

    # Weighted fusion (consensus confidence per subject)
    fusion_weights: ConfidenceWeights = field(default_factory=ConfidenceWeights)
    # Tier agreement ("do the tiers agree"), deliberately separate from fusion_weights
    agreement_weights: ConfidenceWeights = field(default_factory=_default_agreement_weights)
    # Averaging of whole-tier confidences into the consensus strength
    tier_confidence_weights: ConfidenceWeights = field(default_factory=ConfidenceWeights)

    thresholds: QualityThresholds = field(default_factory=QualityThresholds)

    # Insight extraction
    empty_tier_confidence: float = 0.5  # tier_confidence of a tier that produced nothing
    evidence_normalizer: float = 10.0

    # Architecture assessment normalisation
    layer_diversity_divisor: float = 5.0
    segment_count_divisor: float = 100.0

    # Implementation readiness: framework, context, business alignment
    readiness_weights: Tuple[float, float, float] = (0.4, 0.3, 0.3)
    absent_business_alignment: float = 0.5

    # Overall fusion quality: alignment, distribution, consensus, completeness
    quality_weights: Tuple[float, float, float, float] = (0.3, 0.25, 0.25, 0.2)

    high_value_keywords: List[str] = field(default_factory=_default_high_value_keywords)
    known_frameworks: List[str] = field(default_factory=_default_known_frameworks)

    # Logging
    log_level: str = "INFO"
    enable_detailed_logging: bool = False

    def __post_init__(self):
        """Validate configuration after initialization"""
        for name in ("fusion_weights", "agreement_weights", "tier_confidence_weights"):
            weights = getattr(self, name)
            if isinstance(weights, dict):
                weights = ConfidenceWeights(**weights)
                setattr(self, name, weights)
            if any(w < 0.0 for w in weights.as_tuple()):
                raise ValueError(f"{name} must be non-negative")

        if isinstance(self.thresholds, dict):
            self.thresholds = QualityThresholds(**self.thresholds)
        for name, value in asdict(self.thresholds).items():
            if not (0.0 <= value <= 1.0):
                raise ValueError(f"{name} must be between 0.0 and 1.0")

        if not (0.0 <= self.empty_tier_confidence <= 1.0):
            raise ValueError("empty_tier_confidence must be between 0.0 and 1.0")

        if not (0.0 <= self.absent_business_alignment <= 1.0):
            raise ValueError("absent_business_alignment must be between 0.0 and 1.0")

        if self.evidence_normalizer <= 0.0:
            raise ValueError("evidence_normalizer must be positive")

        if self.layer_diversity_divisor <= 0.0 or self.segment_count_divisor <= 0.0:
            raise ValueError("architecture divisors must be positive")

        self.readiness_weights = tuple(self.readiness_weights)
        if len(self.readiness_weights) != 3 or any(w < 0.0 for w in self.readiness_weights):
            raise ValueError("readiness_weights must be three non-negative numbers")

        self.quality_weights = tuple(self.quality_weights)
        if len(self.quality_weights) != 4 or any(w < 0.0 for w in self.quality_weights):
            raise ValueError("quality_weights must be four non-negative numbers")

    @classmethod
    def create_strict_config(cls) -> 'FusionConfig':
        """Raise the validation bar for runs where false positives are costly"""
        return cls(
            thresholds=QualityThresholds(
                min_framework_confidence=0.75,
                min_domain_confidence=0.65,
                min_tier_agreement=0.55,
            ),
        )

    @classmethod
    def create_lenient_config(cls) -> 'FusionConfig':
        """Lower the validation bar for exploratory runs over small codebases"""
        return cls(
            thresholds=QualityThresholds(
                min_framework_confidence=0.45,
                min_domain_confidence=0.4,
                min_tier_agreement=0.3,
            ),
            enable_detailed_logging=True,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary"""
        return asdict(self)

    @classmethod
    def from_dict(cls, config_dict: Dict[str, Any]) -> 'FusionConfig':
        """Create configuration from dictionary, ignoring unknown keys"""
        known = {f for f in cls.__dataclass_fields__}
        return cls(**{k: v for k, v in config_dict.items() if k in known})
