import logging

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    history_limit: int = 5
    default_tier: str = "standard"
    max_sessions: int = 1000  # per process, least recently used evicted first
    log_level: str = "INFO"

    # Requests per client IP per minute
    api_rate_limit: int = 100
    generate_rate_limit: int = 30
    # Read X-Forwarded-For / X-Real-IP only when a trusted proxy sets them
    trust_proxy_headers: bool = False

    class Config:
        env_file = ".env"


def validate_settings(settings: Settings) -> None:
    """Validate settings at startup. Raises ValueError if invalid."""
    errors = []

    if settings.history_limit < 1:
        errors.append("HISTORY_LIMIT must be at least 1")

    if settings.max_sessions < 1:
        errors.append("MAX_SESSIONS must be at least 1")

    from app.services.tiers import SecurityTier

    try:
        SecurityTier(settings.default_tier.lower())
    except ValueError:
        allowed = ", ".join(t.value for t in SecurityTier)
        errors.append(f"DEFAULT_TIER must be one of: {allowed}")

    if not isinstance(logging.getLevelName(settings.log_level.upper()), int):
        errors.append(f"LOG_LEVEL '{settings.log_level}' is not a valid logging level")

    if settings.api_rate_limit < 1:
        errors.append("API_RATE_LIMIT must be at least 1")
    if settings.generate_rate_limit < 1:
        errors.append("GENERATE_RATE_LIMIT must be at least 1")

    if errors:
        raise ValueError("Configuration errors:\n  - " + "\n  - ".join(errors))


def configure_logging(level: str) -> None:
    """Configure root logging once for the process."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


settings = Settings()
