"""Tests for FusionConfig validation and construction."""

import pytest

from yarrow_cli.core.fusion import FusionConfig, ConfidenceWeights, QualityThresholds, Tier


class TestDefaults:

    def test_default_weights_and_thresholds(self):
        config = FusionConfig()

        assert config.fusion_weights.as_tuple() == (0.3, 0.4, 0.3)
        assert config.agreement_weights.as_tuple() == (0.4, 0.4, 0.2)
        assert config.tier_confidence_weights.as_tuple() == (0.3, 0.4, 0.3)
        assert config.thresholds.min_framework_confidence == 0.6
        assert config.thresholds.min_domain_confidence == 0.5
        assert config.thresholds.min_tier_agreement == 0.4

    def test_weight_sets_are_independent(self):
        """Changing one weighting formula's weights leaves the others alone."""
        config = FusionConfig()
        config.fusion_weights.tier1_traditional = 0.9

        assert config.tier_confidence_weights.tier1_traditional == 0.3
        assert FusionConfig().fusion_weights.tier1_traditional == 0.3

    def test_for_tier(self):
        weights = ConfidenceWeights(0.1, 0.2, 0.7)

        assert weights.for_tier(Tier.TRADITIONAL) == 0.1
        assert weights.for_tier(Tier.CONTEXT_AWARE) == 0.2
        assert weights.for_tier(Tier.BUSINESS_GROUNDING) == 0.7


class TestValidation:

    def test_threshold_out_of_range_rejected(self):
        with pytest.raises(ValueError, match="min_tier_agreement"):
            FusionConfig(thresholds=QualityThresholds(min_tier_agreement=1.5))

    def test_negative_weight_rejected(self):
        with pytest.raises(ValueError, match="fusion_weights"):
            FusionConfig(fusion_weights=ConfidenceWeights(-0.1, 0.4, 0.3))

    def test_zero_divisor_rejected(self):
        with pytest.raises(ValueError):
            FusionConfig(layer_diversity_divisor=0.0)

    def test_readiness_weights_shape(self):
        with pytest.raises(ValueError):
            FusionConfig(readiness_weights=(0.5, 0.5))


class TestFactories:

    def test_strict_raises_the_bar(self):
        strict = FusionConfig.create_strict_config()
        default = FusionConfig()

        assert strict.thresholds.min_framework_confidence > default.thresholds.min_framework_confidence
        assert strict.thresholds.min_tier_agreement > default.thresholds.min_tier_agreement

    def test_lenient_lowers_the_bar(self):
        lenient = FusionConfig.create_lenient_config()

        assert lenient.thresholds.min_framework_confidence < 0.6
        assert lenient.enable_detailed_logging is True

    def test_from_dict_accepts_nested_mappings(self):
        config = FusionConfig.from_dict({
            "fusion_weights": {"tier1_traditional": 0.5, "tier2_context_aware": 0.3,
                               "tier3_business_grounding": 0.2},
            "thresholds": {"min_framework_confidence": 0.7},
            "readiness_weights": [0.5, 0.25, 0.25],
            "unknown_key": "ignored",
        })

        assert config.fusion_weights.tier1_traditional == 0.5
        assert config.thresholds.min_framework_confidence == 0.7
        assert config.thresholds.min_domain_confidence == 0.5
        assert config.readiness_weights == (0.5, 0.25, 0.25)

    def test_dict_conversion_preserves_values(self):
        config = FusionConfig.create_strict_config()

        assert FusionConfig.from_dict(config.to_dict()) == config
