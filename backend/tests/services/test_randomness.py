"""Tests for the secure random suffix generator."""

import re

import pytest

from app.services.randomness import (
    RandomSource,
    RandomnessUnavailableError,
    SUFFIX_ALPHABET,
    SystemRandomSource,
    random_string,
)

SUFFIX_REGEX = re.compile(r"^[A-Za-z0-9._~-]*$")


class SequenceSource:
    """Deterministic source returning 0, 1, 2, ... as bytes."""

    def __init__(self):
        self.calls = 0

    def token_bytes(self, nbytes: int) -> bytes:
        self.calls += 1
        return bytes(i % 256 for i in range(nbytes))


class FailingSource:
    def token_bytes(self, nbytes: int) -> bytes:
        raise OSError("getrandom() unavailable")


class ShortSource:
    def token_bytes(self, nbytes: int) -> bytes:
        return b"\x00" * (nbytes - 1)


class TestAlphabet:
    def test_alphabet_is_url_safe(self):
        assert SUFFIX_REGEX.match(SUFFIX_ALPHABET)

    def test_alphabet_has_no_duplicates(self):
        assert len(set(SUFFIX_ALPHABET)) == len(SUFFIX_ALPHABET)

    def test_alphabet_contents(self):
        assert SUFFIX_ALPHABET.startswith("ABC")
        assert SUFFIX_ALPHABET.endswith("-._~")
        assert len(SUFFIX_ALPHABET) == 66


class TestRandomString:
    def test_length_matches_request(self):
        for n in [1, 19, 20, 47, 100]:
            assert len(random_string(n)) == n

    def test_uses_only_alphabet(self):
        value = random_string(500)
        assert SUFFIX_REGEX.match(value)

    def test_zero_length_returns_empty(self):
        assert random_string(0) == ""

    def test_negative_length_returns_empty(self):
        assert random_string(-5) == ""

    def test_non_positive_length_does_not_draw(self):
        source = SequenceSource()
        random_string(0, source)
        random_string(-1, source)
        assert source.calls == 0

    def test_maps_bytes_by_modulo(self):
        """Each byte selects SUFFIX_ALPHABET[byte % len(SUFFIX_ALPHABET)]."""
        assert random_string(5, SequenceSource()) == "ABCDE"

        class EdgeSource:
            def token_bytes(self, nbytes):
                return bytes([65, 66, 255])

        assert random_string(3, EdgeSource()) == "~A5"

    def test_no_duplicates_in_1000_strings(self):
        values = {random_string(32) for _ in range(1000)}
        assert len(values) == 1000

    def test_failing_source_raises(self):
        with pytest.raises(RandomnessUnavailableError):
            random_string(10, FailingSource())

    def test_short_output_raises(self):
        with pytest.raises(RandomnessUnavailableError):
            random_string(10, ShortSource())


class TestSystemRandomSource:
    def test_satisfies_protocol(self):
        assert isinstance(SystemRandomSource(), RandomSource)

    def test_returns_requested_bytes(self):
        assert len(SystemRandomSource().token_bytes(16)) == 16
