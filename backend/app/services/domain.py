import ipaddress
import re
from urllib.parse import urlsplit


class InvalidDomainError(ValueError):
    """Raised when a domain or URL cannot be normalized to a hostname."""
    pass


SCHEME_REGEX = re.compile(r"^https?://", re.IGNORECASE)

# Host labels as a URL parser accepts them for http(s); an optional trailing dot is kept
HOSTNAME_REGEX = re.compile(r"^[a-z0-9_-]+(\.[a-z0-9_-]+)*\.?$")

DEFAULT_SCHEME = "https://"


def normalize_domain(value: str) -> str:
    """
    Normalize a domain or URL to its bare hostname.

    Scheme-less input is parsed as if it started with https://. Scheme, port,
    credentials, path, query and fragment are discarded.

    Returns:
        The lowercase hostname, or "" when the input is empty (no domain yet).

    Raises:
        InvalidDomainError: If the input does not parse to a usable hostname
    """
    value = value.strip()

    if not value:
        return ""

    if not SCHEME_REGEX.match(value):
        value = DEFAULT_SCHEME + value

    try:
        parts = urlsplit(value)
        # Accessing .port validates it
        parts.port
    except ValueError as e:
        raise InvalidDomainError(f"'{value}' is not a valid URL: {e}")

    hostname = parts.hostname
    if not hostname:
        raise InvalidDomainError(f"'{value}' has no hostname")

    # Bracketed IPv6 literal
    if ":" in hostname:
        try:
            return str(ipaddress.IPv6Address(hostname))
        except ValueError:
            raise InvalidDomainError(f"'{hostname}' is not a valid IPv6 address")

    if not HOSTNAME_REGEX.match(hostname):
        raise InvalidDomainError(f"'{hostname}' is not a valid hostname")

    return hostname


def is_generateable(value: str) -> bool:
    """Check if the input normalizes to a non-empty hostname."""
    try:
        return bool(normalize_domain(value))
    except InvalidDomainError:
        return False
