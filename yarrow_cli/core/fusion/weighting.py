"""
Weighting formulas and framework/domain heuristics used by fusion.

Three weighting formulas live here and are kept apart on purpose:

- fusion_weighted_confidence: how much to trust a subject, blending the
  signals of the tiers that actually reported it (FusionConfig.fusion_weights).
- tier_agreement_score: whether the tiers agree about a subject
  (FusionConfig.agreement_weights, 0.4/0.4/0.2 by default).
- tier_confidence_average: how confident the run is as a whole, blending
  each tier's mean confidence (FusionConfig.tier_confidence_weights).

Merging them would change validation outcomes.
"""

from typing import Iterable, Mapping, Optional, Sequence, Tuple

from .config import ConfidenceWeights
from .types import Tier, TIER_ORDER, DomainHypothesis, clamp_unit


def mean_confidence(values: Iterable[float], default: float = 0.5) -> float:
    """Mean of confidences, or default when there are none"""
    values = list(values)
    if not values:
        return default
    return clamp_unit(sum(values) / len(values))


def fusion_weighted_confidence(signals: Mapping[Tier, float], weights: ConfidenceWeights) -> float:
    """Weighted mean over the tiers with a non-zero signal.

    A silent tier is dropped from numerator and denominator alike, so it
    neither adds nor subtracts confidence.
    """
    weighted_sum = 0.0
    total_weight = 0.0
    for tier in TIER_ORDER:
        signal = signals.get(tier, 0.0)
        if signal > 0.0:
            weight = weights.for_tier(tier)
            weighted_sum += weight * signal
            total_weight += weight
    if total_weight <= 0.0:
        return 0.0
    return clamp_unit(weighted_sum / total_weight)


def business_domain_confidence(tier3_confidence: Optional[float], corroboration: float,
                               weights: ConfidenceWeights) -> float:
    """Consensus confidence for a business domain.

    With a tier-3 hypothesis the tier-3 weight always sits in the
    denominator and the tier-2 weight joins it only when segments
    corroborate the domain. Without one, the domain rests on tier-2 alone.
    """
    w2 = weights.tier2_context_aware
    if tier3_confidence is None:
        return clamp_unit(corroboration) if w2 > 0.0 else 0.0

    w3 = weights.tier3_business_grounding
    denominator = w3 + (w2 if corroboration > 0.0 else 0.0)
    if denominator <= 0.0:
        return clamp_unit(tier3_confidence)
    return clamp_unit((tier3_confidence * w3 + corroboration * w2) / denominator)


def tier_agreement_score(signals: Mapping[Tier, float], weights: ConfidenceWeights) -> float:
    """Agreement across the tiers that reported a subject"""
    weighted_sum = 0.0
    total_weight = 0.0
    for tier in TIER_ORDER:
        score = signals.get(tier, 0.0)
        if score > 0.0:
            weighted_sum += score * weights.for_tier(tier)
            total_weight += weights.for_tier(tier)
    if total_weight > 0.0:
        return clamp_unit(weighted_sum / total_weight)
    return 0.0


def tier_confidence_average(tier_confidences: Mapping[Tier, Optional[float]],
                            weights: ConfidenceWeights) -> float:
    """Weighted average of whole-tier confidences; absent tiers (None) are skipped"""
    weighted_sum = 0.0
    total_weight = 0.0
    for tier in TIER_ORDER:
        confidence = tier_confidences.get(tier)
        if confidence is None:
            continue
        weighted_sum += confidence * weights.for_tier(tier)
        total_weight += weights.for_tier(tier)
    if total_weight <= 0.0:
        return 0.0
    return clamp_unit(weighted_sum / total_weight)


# ---------------------------------------------------------------------------
# Framework catalogue heuristics
# ---------------------------------------------------------------------------

# (name fragments, typical layer); first match wins
FRAMEWORK_LAYERS: Tuple[Tuple[Tuple[str, ...], str], ...] = (
    (("react", "next"), "frontend"),
    (("spring", "nest"), "backend"),
    (("django", "flask", "fastapi"), "fullstack"),
)

LAYER_DOMAIN_KEYWORDS = {
    "frontend": ("web", "frontend", "ui"),
    "backend": ("api", "service", "backend"),
    "fullstack": ("web", "api", "service"),
}

LAYER_MATCH_SCORE = 0.3

ARCHITECTURE_PATTERNS = {
    "React": "Component-Based Architecture",
    "NestJS": "Decorator-Based Architecture",
    "Spring Boot": "Dependency Injection",
    "Django": "MTV Pattern",
    "FastAPI": "ASGI Architecture",
}
DEFAULT_ARCHITECTURE_PATTERN = "Framework-Specific Pattern"

SCALABILITY_INDICATORS = {
    "React": "Client-side scalability with component architecture",
    "Next.js": "Client-side scalability with component architecture",
    "NestJS": "Server-side scalability with microservices support",
    "Spring Boot": "Server-side scalability with microservices support",
    "FastAPI": "High-performance async API scalability",
}


def framework_layer(framework: str) -> Optional[str]:
    """Typical layer of a framework, or None when it is not catalogued"""
    name = framework.lower()
    for fragments, layer in FRAMEWORK_LAYERS:
        if any(fragment in name for fragment in fragments):
            return layer
    return None


def framework_business_alignment(framework: str, domains: Sequence[DomainHypothesis]) -> float:
    """Overlap between a framework's typical layer and the grounded domain names"""
    layer = framework_layer(framework)
    if layer is None:
        # No catalogued layer, nothing to overlap with
        return 0.0
    score = 0.0
    for domain in domains:
        domain_lower = domain.name.lower()
        if any(keyword in domain_lower for keyword in LAYER_DOMAIN_KEYWORDS[layer]):
            score += LAYER_MATCH_SCORE
    return min(score, 1.0)


def architecture_pattern_for(framework: str) -> str:
    return ARCHITECTURE_PATTERNS.get(framework, DEFAULT_ARCHITECTURE_PATTERN)


def scalability_indicator_for(framework: str) -> Optional[str]:
    return SCALABILITY_INDICATORS.get(framework)


def is_high_value_capability(capability: str, keywords: Iterable[str]) -> bool:
    capability_lower = capability.lower()
    return any(keyword in capability_lower for keyword in keywords)
