"""Domain fingerprint derivation.

The fingerprint is a short tag that lets a person see which domain a key was
issued for. It is derived from public data (hostname and issue time) and is
not a secret; two keys may share a fingerprint.
"""

import base64

FINGERPRINT_LENGTH = 8


def derive_fingerprint(domain: str, issued_at_ms: int) -> str:
    """Derive the URL-safe fingerprint for a domain at an issue time.

    Base64 of "<domain>-<issued_at_ms>" in the URL-safe alphabet, padding
    stripped, cut to the first 8 characters.

    Raises:
        ValueError: If issued_at_ms is negative, or the input is under 6 bytes.
    """
    if issued_at_ms < 0:
        raise ValueError("issued_at_ms must not be negative")

    raw = f"{domain}-{issued_at_ms}".encode("utf-8")
    encoded = base64.urlsafe_b64encode(raw).decode("ascii").rstrip("=")

    # Exactly the first 6 input bytes map to the 8 output characters
    if len(encoded) < FINGERPRINT_LENGTH:
        raise ValueError(f"'{domain}-{issued_at_ms}' is too short to fingerprint")
    return encoded[:FINGERPRINT_LENGTH]
