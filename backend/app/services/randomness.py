"""Secure random suffix generation.

Suffix characters are drawn from a fixed URL-safe alphabet (A-Z, a-z, 0-9 and
"-._~", 66 symbols) by reducing each random byte modulo the alphabet size.
Since 256 is not a multiple of 66, the first 58 symbols are very slightly more
likely than the rest. The bias is accepted so that generated suffixes keep the
existing character set and length.
"""

import secrets
import string
from typing import Protocol, runtime_checkable

SUFFIX_ALPHABET = string.ascii_uppercase + string.ascii_lowercase + string.digits + "-._~"


class RandomnessUnavailableError(RuntimeError):
    """Raised when no cryptographically secure random source can be used."""
    pass


@runtime_checkable
class RandomSource(Protocol):
    """Source of uniformly random bytes.

    Production code must use a cryptographically secure implementation.
    Tests may inject a deterministic one.
    """

    def token_bytes(self, nbytes: int) -> bytes:
        ...


class SystemRandomSource:
    """Random bytes from the operating system CSPRNG via the secrets module."""

    def token_bytes(self, nbytes: int) -> bytes:
        return secrets.token_bytes(nbytes)


_system_source = SystemRandomSource()


def random_string(length: int, source: RandomSource | None = None) -> str:
    """Generate a random string of `length` characters from SUFFIX_ALPHABET.

    A non-positive length yields "" without drawing any bytes.

    Raises:
        RandomnessUnavailableError: If the source fails or returns short output.
            There is no fallback to a non-cryptographic generator.
    """
    if length <= 0:
        return ""

    source = source or _system_source
    try:
        data = source.token_bytes(length)
    except (OSError, NotImplementedError) as e:
        raise RandomnessUnavailableError(f"Secure random source unavailable: {e}") from e

    if len(data) != length:
        raise RandomnessUnavailableError(
            f"Secure random source returned {len(data)} bytes, expected {length}"
        )

    size = len(SUFFIX_ALPHABET)
    return "".join(SUFFIX_ALPHABET[b % size] for b in data)
