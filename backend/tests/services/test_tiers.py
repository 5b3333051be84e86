import pytest
from app.services.tiers import SecurityTier, TierConfig, config_for, tier_for_prefix, TIER_CONFIGS


class TestConfigFor:
    def test_standard(self):
        assert config_for(SecurityTier.STANDARD) == TierConfig(prefix="sk_", total_length=32)

    def test_high(self):
        assert config_for(SecurityTier.HIGH) == TierConfig(prefix="sk_live_", total_length=64)

    def test_accepts_string_value(self):
        assert config_for("high").prefix == "sk_live_"

    def test_unknown_tier_raises(self):
        with pytest.raises(ValueError):
            config_for("ultra")

    def test_exactly_two_tiers(self):
        assert set(TIER_CONFIGS) == {SecurityTier.STANDARD, SecurityTier.HIGH}

    def test_every_tier_leaves_room_for_suffix(self):
        for config in TIER_CONFIGS.values():
            assert config.total_length > len(config.prefix) + 8 + 1

    def test_config_is_immutable(self):
        config = config_for("standard")
        with pytest.raises(AttributeError):
            config.total_length = 8


class TestTierForPrefix:
    def test_known_prefixes(self):
        assert tier_for_prefix("sk_") == SecurityTier.STANDARD
        assert tier_for_prefix("sk_live_") == SecurityTier.HIGH

    def test_unknown_prefix_raises(self):
        with pytest.raises(ValueError):
            tier_for_prefix("pk_")
