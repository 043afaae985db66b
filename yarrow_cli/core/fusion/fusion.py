"""
Confidence-weighted fusion of the three tiers.

Produces one ConsensusRecord per framework and business domain and a
corroboration graph recording which tier (or which tier-2 segment)
backed which subject.
"""

import logging
from typing import Dict, List, Optional

import networkx as nx

from .config import FusionConfig
from .insights import architecture_corroboration, business_corroboration, corroborating_segments
from .types import (
    Tier, TIER_ORDER, SubjectKind, ConsensusRecord, TierContributions, WeightedFusionAnalysis,
    Tier1Insights, Tier2Insights, Tier3Insights,
)
from .weighting import (
    fusion_weighted_confidence, business_domain_confidence, tier_agreement_score,
    tier_confidence_average, framework_business_alignment,
)

logger = logging.getLogger(__name__)


def tier_node(tier: Tier) -> str:
    return f"tier:{tier.value}"


def segment_node(segment_id: str) -> str:
    return f"segment:{segment_id}"


def subject_node(kind: SubjectKind, name: str) -> str:
    return f"{kind.value}:{name}"


class WeightedFusion:
    """Blends tier signals into per-subject consensus records"""

    def __init__(self, config: FusionConfig):
        self.config = config

    def fuse(self,
             tier1: Tier1Insights,
             tier2: Tier2Insights,
             tier3: Optional[Tier3Insights]) -> WeightedFusionAnalysis:
        graph = self._init_graph(tier2, tier3)

        framework_consensus = {}
        for name in self._framework_candidates(tier1, tier2):
            framework_consensus[name] = self._fuse_framework(name, tier1, tier2, tier3, graph)

        domain_consensus = {}
        for name in self._domain_candidates(tier2, tier3):
            domain_consensus[name] = self._fuse_domain(name, tier2, tier3, graph)

        fusion_confidence = tier_confidence_average(
            {
                Tier.TRADITIONAL: tier1.tier_confidence,
                Tier.CONTEXT_AWARE: tier2.tier_confidence,
                Tier.BUSINESS_GROUNDING: tier3.tier_confidence if tier3 is not None else None,
            },
            self.config.tier_confidence_weights,
        )

        weights = self.config.fusion_weights
        analysis = WeightedFusionAnalysis(
            framework_consensus=framework_consensus,
            business_domain_consensus=domain_consensus,
            corroboration_graph=graph,
            fusion_confidence=fusion_confidence,
            tier_contributions=TierContributions(
                tier1_weight=weights.tier1_traditional,
                tier2_weight=weights.tier2_context_aware,
                tier3_weight=weights.tier3_business_grounding,
                total_active_tiers=3 if tier3 is not None else 2,
            ),
        )
        logger.info(f"Fused {len(framework_consensus)} frameworks and "
                    f"{len(domain_consensus)} business domains "
                    f"(fusion confidence {fusion_confidence:.3f})")
        return analysis

    def _init_graph(self, tier2: Tier2Insights, tier3: Optional[Tier3Insights]) -> nx.DiGraph:
        graph = nx.DiGraph()
        for tier in TIER_ORDER:
            if tier is Tier.BUSINESS_GROUNDING and tier3 is None:
                continue
            graph.add_node(tier_node(tier), kind="tier", tier=tier)
        for segment in tier2.segments:
            node = segment_node(segment.segment_id)
            graph.add_node(node, kind="segment", confidence=segment.fused_confidence)
            graph.add_edge(tier_node(Tier.CONTEXT_AWARE), node, tier=Tier.CONTEXT_AWARE)
        return graph

    def _framework_candidates(self, tier1: Tier1Insights, tier2: Tier2Insights) -> List[str]:
        candidates = list(tier1.subject_confidence)
        seen = {name.lower() for name in candidates}
        for known in self.config.known_frameworks:
            if known.lower() in seen:
                continue
            if architecture_corroboration(tier2.segments, known) > 0.0:
                candidates.append(known)
                seen.add(known.lower())
        return sorted(candidates)

    def _domain_candidates(self, tier2: Tier2Insights, tier3: Optional[Tier3Insights]) -> List[str]:
        candidates: Dict[str, str] = {}
        if tier3 is not None:
            for name in tier3.subject_confidence:
                candidates.setdefault(name.lower(), name)
        # Tier-2 tags that no grounded domain already names
        for segment in tier2.segments:
            for tag in segment.business_domains:
                candidates.setdefault(tag.lower(), tag)
        return sorted(candidates.values())

    def _fuse_framework(self, name: str, tier1: Tier1Insights, tier2: Tier2Insights,
                        tier3: Optional[Tier3Insights], graph: nx.DiGraph) -> ConsensusRecord:
        tier1_confidence = tier1.subject_confidence.get(name, 0.0)
        tier2_support = architecture_corroboration(tier2.segments, name)
        if tier3 is not None:
            tier3_alignment = framework_business_alignment(name, tier3.grounded_domains)
        else:
            tier3_alignment = 0.0

        signals = {
            Tier.TRADITIONAL: tier1_confidence,
            Tier.CONTEXT_AWARE: tier2_support,
            Tier.BUSINESS_GROUNDING: tier3_alignment,
        }
        evidence = tuple(
            item
            for hypothesis in tier1.detected_frameworks if hypothesis.name == name
            for item in hypothesis.evidence
        )
        record = ConsensusRecord(
            subject=name,
            kind=SubjectKind.FRAMEWORK,
            tier_signals=tuple((tier, signals[tier]) for tier in TIER_ORDER),
            weighted_confidence=fusion_weighted_confidence(signals, self.config.fusion_weights),
            tier_agreement_score=tier_agreement_score(signals, self.config.agreement_weights),
            evidence_strength=tier1.evidence_strength.get(name, 0.0),
            evidence=evidence,
        )
        self._record_corroboration(graph, record, tier2, business=False)
        if self.config.enable_detailed_logging:
            logger.debug(f"Framework {name}: t1={tier1_confidence:.3f} t2={tier2_support:.3f} "
                         f"t3={tier3_alignment:.3f} -> {record.weighted_confidence:.3f}")
        return record

    def _fuse_domain(self, name: str, tier2: Tier2Insights,
                     tier3: Optional[Tier3Insights], graph: nx.DiGraph) -> ConsensusRecord:
        corroboration = business_corroboration(tier2.segments, name)
        hypothesis = None
        if tier3 is not None:
            matches = [d for d in tier3.grounded_domains if d.name == name]
            if matches:
                hypothesis = max(matches, key=lambda d: d.confidence)
        tier3_confidence = hypothesis.confidence if hypothesis is not None else None

        signals = {
            Tier.TRADITIONAL: 0.0,
            Tier.CONTEXT_AWARE: corroboration,
            Tier.BUSINESS_GROUNDING: tier3_confidence or 0.0,
        }
        record = ConsensusRecord(
            subject=name,
            kind=SubjectKind.BUSINESS_DOMAIN,
            tier_signals=tuple((tier, signals[tier]) for tier in TIER_ORDER),
            weighted_confidence=business_domain_confidence(
                tier3_confidence, corroboration, self.config.fusion_weights
            ),
            tier_agreement_score=tier_agreement_score(signals, self.config.agreement_weights),
            evidence=hypothesis.evidence if hypothesis is not None else (),
            implementation_status=(
                hypothesis.implementation_status if hypothesis is not None else None
            ),
        )
        self._record_corroboration(graph, record, tier2, business=True)
        if self.config.enable_detailed_logging:
            logger.debug(f"Domain {name}: t2={corroboration:.3f} t3={tier3_confidence} "
                         f"-> {record.weighted_confidence:.3f}")
        return record

    def _record_corroboration(self, graph: nx.DiGraph, record: ConsensusRecord,
                              tier2: Tier2Insights, business: bool) -> None:
        node = subject_node(record.kind, record.subject)
        graph.add_node(node, kind=record.kind.value,
                       weighted_confidence=record.weighted_confidence)
        for tier in (Tier.TRADITIONAL, Tier.BUSINESS_GROUNDING):
            signal = record.signal(tier)
            if signal > 0.0 and graph.has_node(tier_node(tier)):
                graph.add_edge(tier_node(tier), node, tier=tier, signal=signal)
        for segment in corroborating_segments(tier2.segments, record.subject, business):
            graph.add_edge(segment_node(segment.segment_id), node,
                           tier=Tier.CONTEXT_AWARE, signal=segment.fused_confidence)


def corroborating_tiers(graph: nx.DiGraph, kind: SubjectKind, name: str) -> List[Tier]:
    """Tiers with at least one path into the subject's node"""
    node = subject_node(kind, name)
    if not graph.has_node(node):
        return []
    tiers = set()
    for predecessor in graph.predecessors(node):
        tiers.add(graph.edges[predecessor, node]["tier"])
    return [tier for tier in TIER_ORDER if tier in tiers]
