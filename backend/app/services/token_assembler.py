"""Token assembly: prefix + fingerprint + "_" + random suffix."""

import logging
import re
from dataclasses import dataclass

from app.services.fingerprint import FINGERPRINT_LENGTH, derive_fingerprint
from app.services.randomness import RandomSource, random_string
from app.services.tiers import TIER_CONFIGS, TierConfig

logger = logging.getLogger(__name__)

SEPARATOR = "_"

TOKEN_PATTERN = re.compile(
    r"^(?P<prefix>sk_live_|sk_)"
    r"(?P<fingerprint>[A-Za-z0-9_-]{8})_"
    r"(?P<suffix>[A-Za-z0-9._~-]+)$"
)

FINGERPRINT_REGEX = re.compile(r"^[A-Za-z0-9_-]{8}$")
SUFFIX_REGEX = re.compile(r"^[A-Za-z0-9._~-]+$")


class TierConfigurationError(ValueError):
    """Raised when a tier's total length leaves no room for a random suffix."""
    pass


class InvalidTokenError(ValueError):
    """Raised when a string does not follow the token grammar."""
    pass


@dataclass(frozen=True)
class Token:
    prefix: str
    fingerprint: str
    random_suffix: str

    @property
    def full_string(self) -> str:
        return f"{self.prefix}{self.fingerprint}{SEPARATOR}{self.random_suffix}"

    def __str__(self) -> str:
        return self.full_string


def suffix_length(tier_config: TierConfig, fingerprint_length: int = FINGERPRINT_LENGTH) -> int:
    """Number of random characters a tier leaves after prefix, fingerprint and separator."""
    return tier_config.total_length - len(tier_config.prefix) - fingerprint_length - len(SEPARATOR)


def assemble_token(
    tier_config: TierConfig,
    domain: str,
    issued_at_ms: int,
    source: RandomSource | None = None,
) -> Token:
    """
    Build a token for a normalized domain under a tier configuration.

    Raises:
        TierConfigurationError: If the tier leaves no room for a random suffix.
            Such a tier is rejected instead of producing a short token.
        RandomnessUnavailableError: If the secure random source fails
    """
    fingerprint = derive_fingerprint(domain, issued_at_ms)
    random_len = suffix_length(tier_config, len(fingerprint))

    if random_len <= 0:
        logger.error(
            "Tier %r with total length %d leaves %d characters for the random suffix",
            tier_config.prefix, tier_config.total_length, random_len,
        )
        raise TierConfigurationError(
            f"Tier with prefix '{tier_config.prefix}' and total length "
            f"{tier_config.total_length} leaves no room for a random suffix"
        )

    suffix = random_string(random_len, source)
    return Token(prefix=tier_config.prefix, fingerprint=fingerprint, random_suffix=suffix)


def parse_token(value: str) -> Token:
    """
    Split a token string into prefix, fingerprint and random suffix.

    The total length must match the tier its prefix belongs to.

    Raises:
        InvalidTokenError: If the value does not follow the token grammar
    """
    value = value.strip()
    if not TOKEN_PATTERN.match(value):
        raise InvalidTokenError("Value does not follow the token grammar")

    # A standard fingerprint may itself start with "live_", so try the longest prefix first
    for config in sorted(TIER_CONFIGS.values(), key=lambda c: len(c.prefix), reverse=True):
        if not value.startswith(config.prefix) or len(value) != config.total_length:
            continue
        body = value[len(config.prefix):]
        fingerprint = body[:FINGERPRINT_LENGTH]
        separator = body[FINGERPRINT_LENGTH:FINGERPRINT_LENGTH + 1]
        suffix = body[FINGERPRINT_LENGTH + 1:]
        if (
            FINGERPRINT_REGEX.match(fingerprint)
            and separator == SEPARATOR
            and SUFFIX_REGEX.match(suffix)
        ):
            return Token(prefix=config.prefix, fingerprint=fingerprint, random_suffix=suffix)

    raise InvalidTokenError(
        f"Token length {len(value)} does not match the tier its prefix belongs to"
    )
