"""Tests for token assembly and parsing."""

import re

import pytest

from app.services.randomness import RandomnessUnavailableError
from app.services.tiers import TierConfig, config_for
from app.services.token_assembler import (
    InvalidTokenError,
    TOKEN_PATTERN,
    TierConfigurationError,
    Token,
    assemble_token,
    parse_token,
    suffix_length,
)

ISSUED_AT = 1700000000000


class SequenceSource:
    def token_bytes(self, nbytes: int) -> bytes:
        return bytes(range(nbytes))


class FailingSource:
    def token_bytes(self, nbytes: int) -> bytes:
        raise NotImplementedError("no secure source on this platform")


class TestAssembleToken:
    def test_standard_token_exact_value(self):
        token = assemble_token(config_for("standard"), "example.com", ISSUED_AT, SequenceSource())
        assert token.full_string == "sk_ZXhhbXBs_ABCDEFGHIJKLMNOPQRST"
        assert token.prefix == "sk_"
        assert token.fingerprint == "ZXhhbXBs"
        assert token.random_suffix == "ABCDEFGHIJKLMNOPQRST"

    def test_standard_token_shape(self):
        token = assemble_token(config_for("standard"), "example.com", ISSUED_AT)
        assert len(token.full_string) == 32
        assert re.match(r"^sk_[A-Za-z0-9_-]{8}_[A-Za-z0-9._~-]{20}$", token.full_string)

    def test_high_token_shape(self):
        token = assemble_token(config_for("high"), "shop.example.com", ISSUED_AT)
        assert len(token.full_string) == 64
        assert token.full_string.startswith("sk_live_c2hvcC5l_")
        assert re.match(r"^sk_live_[A-Za-z0-9_-]{8}_[A-Za-z0-9._~-]{47}$", token.full_string)

    def test_full_string_is_concatenation(self):
        token = assemble_token(config_for("high"), "example.com", ISSUED_AT)
        assert token.full_string == token.prefix + token.fingerprint + "_" + token.random_suffix
        assert str(token) == token.full_string

    def test_matches_grammar(self):
        for tier in ["standard", "high"]:
            token = assemble_token(config_for(tier), "example.com", ISSUED_AT)
            assert TOKEN_PATTERN.match(token.full_string)

    def test_custom_tier_length_respected(self):
        token = assemble_token(TierConfig(prefix="sk_", total_length=13), "example.com", ISSUED_AT)
        assert len(token.full_string) == 13
        assert len(token.random_suffix) == 1

    def test_zero_suffix_length_rejected(self):
        with pytest.raises(TierConfigurationError):
            assemble_token(TierConfig(prefix="sk_", total_length=12), "example.com", ISSUED_AT)

    def test_negative_suffix_length_rejected(self):
        with pytest.raises(TierConfigurationError):
            assemble_token(TierConfig(prefix="sk_live_", total_length=10), "example.com", ISSUED_AT)

    def test_randomness_failure_propagates(self):
        with pytest.raises(RandomnessUnavailableError):
            assemble_token(config_for("standard"), "example.com", ISSUED_AT, FailingSource())

    def test_token_is_immutable(self):
        token = assemble_token(config_for("standard"), "example.com", ISSUED_AT)
        with pytest.raises(AttributeError):
            token.prefix = "sk_live_"


class TestSuffixLength:
    def test_standard(self):
        assert suffix_length(config_for("standard")) == 20

    def test_high(self):
        assert suffix_length(config_for("high")) == 47


class TestParseToken:
    def test_parses_generated_standard_token(self):
        token = assemble_token(config_for("standard"), "example.com", ISSUED_AT)
        assert parse_token(token.full_string) == token

    def test_parses_generated_high_token(self):
        token = assemble_token(config_for("high"), "example.com", ISSUED_AT)
        assert parse_token(token.full_string) == token

    def test_standard_fingerprint_starting_with_live(self):
        """A standard key whose fingerprint begins with 'live_' is not read as a high key."""
        value = "sk_live_abc_" + "A" * 20
        token = parse_token(value)
        assert token == Token(prefix="sk_", fingerprint="live_abc", random_suffix="A" * 20)

    def test_unknown_prefix_raises(self):
        with pytest.raises(InvalidTokenError):
            parse_token("pk_ZXhhbXBs_" + "A" * 20)

    def test_wrong_length_raises(self):
        with pytest.raises(InvalidTokenError):
            parse_token("sk_ZXhhbXBs_" + "A" * 19)

    def test_bad_suffix_character_raises(self):
        with pytest.raises(InvalidTokenError):
            parse_token("sk_ZXhhbXBs_" + "A" * 19 + "!")
