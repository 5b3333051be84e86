import logging
import time
from typing import Callable

from app.services.domain import InvalidDomainError, normalize_domain
from app.services.history import DEFAULT_HISTORY_LIMIT, HistoryCache, HistoryEntry
from app.services.randomness import RandomSource, RandomnessUnavailableError
from app.services.tiers import SecurityTier, config_for
from app.services.token_assembler import Token, assemble_token

logger = logging.getLogger(__name__)


class GenerationNotAllowedError(RuntimeError):
    """Raised when a key is requested while no valid domain is set."""
    pass


def current_millis() -> int:
    return time.time_ns() // 1_000_000


class GeneratorSession:
    """State of one user's key generator.

    Holds the current domain input and its validation result, the active
    tier, the key on display and the session's own history. Callers must call
    set_domain_input after every input change; nothing is recomputed
    implicitly.
    """

    def __init__(
        self,
        tier: SecurityTier | str = SecurityTier.STANDARD,
        history_limit: int = DEFAULT_HISTORY_LIMIT,
        random_source: RandomSource | None = None,
        clock: Callable[[], int] = current_millis,
    ):
        self.tier = SecurityTier(tier)
        self.domain_input = ""
        self.domain = ""
        self.domain_error: str | None = None
        self.current_token: str | None = None
        self._history = HistoryCache(history_limit)
        self._random_source = random_source
        self._clock = clock

    @property
    def is_valid(self) -> bool:
        """Whether the current input is acceptable, including the empty input."""
        return self.domain_error is None

    def set_domain_input(self, value: str) -> bool:
        """Store new domain input and revalidate it.

        Returns:
            Whether a key can now be generated.
        """
        self.domain_input = value
        try:
            self.domain = normalize_domain(value)
            self.domain_error = None
        except InvalidDomainError as e:
            self.domain = ""
            self.domain_error = str(e)
        return self.is_generateable()

    def is_generateable(self) -> bool:
        return self.is_valid and bool(self.domain)

    def set_tier(self, tier: SecurityTier | str) -> None:
        """Switch the tier used by the next generation. Issued keys are unchanged."""
        self.tier = SecurityTier(tier)

    def generate(self, tier: SecurityTier | str | None = None) -> Token:
        """
        Issue a new key for the current domain and record it in history.

        Raises:
            GenerationNotAllowedError: If no valid, non-empty domain is set
            RandomnessUnavailableError: If the secure random source fails
            TierConfigurationError: If the tier leaves no room for a random suffix
            ValueError: If the clock returns a negative timestamp, or one too short
                to fingerprint. The clock must return real milliseconds since the epoch.
        """
        if not self.is_generateable():
            raise GenerationNotAllowedError(
                self.domain_error or "A domain is required before generating a key"
            )

        active_tier = SecurityTier(tier) if tier is not None else self.tier
        try:
            token = assemble_token(
                config_for(active_tier),
                self.domain,
                self._clock(),
                self._random_source,
            )
        except RandomnessUnavailableError:
            logger.error("Key generation aborted for %s: secure randomness unavailable", self.domain)
            raise

        self.current_token = token.full_string
        self._history.record(HistoryEntry(domain=self.domain, token=token.full_string))
        logger.info(
            "Issued %s key for %s (fingerprint %s)",
            active_tier.value, self.domain, token.fingerprint,
        )
        return token

    def history(self) -> tuple[HistoryEntry, ...]:
        return self._history.entries()

    def history_entry(self, index: int) -> HistoryEntry:
        return self._history.get(index)

    def reuse(self, entry: HistoryEntry) -> tuple[str, str]:
        """Restore a history entry as the displayed domain and key, without regenerating."""
        domain, token = self._history.reuse(entry)
        self.domain_input = domain
        self.domain = domain
        self.domain_error = None
        self.current_token = token
        return domain, token
