"""Security tier policy: maps a tier to its key prefix and total length."""

from dataclasses import dataclass
from enum import Enum


class SecurityTier(str, Enum):
    STANDARD = "standard"
    HIGH = "high"


@dataclass(frozen=True)
class TierConfig:
    prefix: str
    total_length: int


TIER_CONFIGS: dict[SecurityTier, TierConfig] = {
    SecurityTier.STANDARD: TierConfig(prefix="sk_", total_length=32),
    SecurityTier.HIGH: TierConfig(prefix="sk_live_", total_length=64),
}


def config_for(tier: SecurityTier | str) -> TierConfig:
    """Return the prefix/length configuration for a tier.

    Accepts the enum member or its string value ("standard", "high").

    Raises:
        ValueError: If the tier is unknown.
    """
    return TIER_CONFIGS[SecurityTier(tier)]


def tier_for_prefix(prefix: str) -> SecurityTier:
    """Return the tier that issues keys with `prefix`.

    Raises:
        ValueError: If no tier uses the prefix.
    """
    for tier, config in TIER_CONFIGS.items():
        if config.prefix == prefix:
            return tier
    raise ValueError(f"No tier uses prefix '{prefix}'")
