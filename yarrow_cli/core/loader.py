"""Tier output loading module"""

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import yaml

from .fusion.config import FusionConfig
from .fusion.types import (
    FrameworkHypothesis, SegmentInsight, DomainHypothesis, RoadmapStep,
    TraditionalDetection, SegmentAnalysis, BusinessGrounding, normalize_label,
)

logger = logging.getLogger(__name__)

TIER1_FILE = "tier1.yaml"
TIER2_FILE = "tier2.yaml"
TIER3_FILE = "tier3.yaml"


def _read_yaml(path: Path) -> Optional[Dict[str, Any]]:
    """Read a YAML mapping, or None when the file is missing or unreadable"""
    if not path.exists():
        return None
    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        logger.warning(f"Failed to load {path}: {e}")
        return None
    if data is None:
        return {}
    if not isinstance(data, dict):
        logger.warning(f"Ignoring {path}: expected a mapping, got {type(data).__name__}")
        return None
    return data


def _as_list(value: Any) -> List[Any]:
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return list(value)
    return [value]


def _as_strings(value: Any) -> Tuple[str, ...]:
    return tuple(str(item).strip() for item in _as_list(value) if str(item).strip())


class TierOutputLoader:
    """Loads the three tiers' dumps from a run directory"""

    def __init__(self, run_dir: str = "."):
        self.run_dir = Path(run_dir)
        self.tier1_file = self.run_dir / TIER1_FILE
        self.tier2_file = self.run_dir / TIER2_FILE
        self.tier3_file = self.run_dir / TIER3_FILE

    def load_traditional(self) -> TraditionalDetection:
        """Load framework hypotheses; an absent dump yields an empty detection"""
        data = _read_yaml(self.tier1_file)
        if data is None:
            logger.warning(f"No tier-1 output at {self.tier1_file}")
            return TraditionalDetection()

        frameworks = []
        for entry in _as_list(data.get('frameworks')):
            try:
                frameworks.append(FrameworkHypothesis(
                    name=str(entry['name']).strip(),
                    confidence=float(entry.get('confidence', 0.0)),
                    evidence_count=int(entry.get('evidence_count', 0)),
                    usage_extent=entry.get('usage_extent'),
                    evidence=_as_strings(entry.get('evidence')),
                ))
            except (KeyError, TypeError, ValueError, AttributeError) as e:
                logger.warning(f"Skipping malformed framework entry {entry!r}: {e}")
                continue

        return TraditionalDetection(
            frameworks=frameworks,
            primary_ecosystem=data.get('primary_ecosystem'),
        )

    def load_segments(self) -> SegmentAnalysis:
        """Load segment insights; an absent dump yields an empty analysis"""
        data = _read_yaml(self.tier2_file)
        if data is None:
            logger.warning(f"No tier-2 output at {self.tier2_file}")
            return SegmentAnalysis()

        segments = []
        for entry in _as_list(data.get('segments')):
            try:
                segments.append(SegmentInsight(
                    segment_id=str(entry['segment_id']),
                    fused_confidence=float(entry.get('fused_confidence', 0.0)),
                    quality_score=float(entry.get('quality_score', 0.0)),
                    business_domains=_as_strings(entry.get('business_domains')),
                    architectural_patterns=_as_strings(entry.get('architectural_patterns')),
                    layer=normalize_label(entry.get('layer')),
                ))
            except (KeyError, TypeError, ValueError, AttributeError) as e:
                logger.warning(f"Skipping malformed segment entry {entry!r}: {e}")
                continue

        total = data.get('total_segments_processed')
        try:
            context_score = float(data.get('context_awareness_score', 0.0))
        except (TypeError, ValueError):
            logger.warning(f"Invalid context_awareness_score in {self.tier2_file}")
            context_score = 0.0

        return SegmentAnalysis(
            segments=segments,
            context_awareness_score=context_score,
            total_segments_processed=int(total) if isinstance(total, (int, float)) else None,
        )

    def load_business(self) -> Optional[BusinessGrounding]:
        """Load business grounding, or None when tier-3 did not report"""
        data = _read_yaml(self.tier3_file)
        if data is None:
            logger.info(f"No tier-3 output at {self.tier3_file}; fusing two tiers")
            return None

        domains = []
        for entry in _as_list(data.get('domains')):
            try:
                domains.append(DomainHypothesis(
                    name=str(entry['name']).strip(),
                    confidence=float(entry.get('confidence', 0.0)),
                    capabilities=_as_strings(entry.get('capabilities')),
                    implementation_status=entry.get('implementation_status'),
                    evidence=_as_strings(entry.get('evidence')),
                ))
            except (KeyError, TypeError, ValueError, AttributeError) as e:
                logger.warning(f"Skipping malformed domain entry {entry!r}: {e}")
                continue

        roadmap = []
        for index, entry in enumerate(_as_list(data.get('roadmap')), start=1):
            try:
                roadmap.append(RoadmapStep(
                    step_number=int(entry.get('step_number', index)),
                    domain_focus=str(entry.get('domain_focus', '')).strip(),
                    business_value=float(entry.get('business_value', 0.0)),
                    estimated_effort=str(entry.get('estimated_effort', '')).strip(),
                ))
            except (TypeError, ValueError, AttributeError) as e:
                logger.warning(f"Skipping malformed roadmap entry {entry!r}: {e}")
                continue

        return BusinessGrounding(
            domains=domains,
            capabilities=list(_as_strings(data.get('capabilities'))),
            roadmap=roadmap,
        )

    def load_all(self, include_business: bool = True) -> Tuple[TraditionalDetection, SegmentAnalysis,
                                                             Optional[BusinessGrounding]]:
        business = self.load_business() if include_business else None
        return self.load_traditional(), self.load_segments(), business


def load_config(path: Optional[str] = None) -> FusionConfig:
    """Load a FusionConfig from YAML; defaults when no file is given or found"""
    if not path:
        return FusionConfig()
    data = _read_yaml(Path(path))
    if data is None:
        logger.warning(f"Config file {path} not usable, falling back to defaults")
        return FusionConfig()
    return FusionConfig.from_dict(data)
