"""Tests for the algorithm enumeration."""

from __future__ import annotations

import pytest

from jwtpool import Algorithm, Family, is_supported


def test_twelve_algorithms():
    """Four families times three hash sizes."""
    assert len(Algorithm) == 12
    assert {a.family for a in Algorithm} == set(Family)


@pytest.mark.parametrize("code", ["HS256", "hs256", "Rs384", "ps512", "es384"])
def test_lookup_is_case_insensitive(code):
    assert Algorithm.lookup(code) is Algorithm(code.upper())


@pytest.mark.parametrize("code", ["XX999", "HS128", "none", "", None, 256])
def test_lookup_unknown_returns_none(code):
    assert Algorithm.lookup(code) is None


def test_coerce_rejects_unknown_code():
    """Passing an unknown code at a call site fails fast."""
    with pytest.raises(ValueError, match="unsupported algorithm"):
        Algorithm.coerce("XX999")


def test_coerce_returns_canonical_member():
    assert Algorithm.coerce("es512") is Algorithm.ES512
    assert Algorithm.coerce(Algorithm.PS256) is Algorithm.PS256


def test_is_supported():
    assert is_supported("HS512")
    assert not is_supported("EdDSA")


class TestMetadata:
    """Per-algorithm hash, curve and signature width."""

    @pytest.mark.parametrize(
        "alg, digest_size",
        [(Algorithm.HS256, 32), (Algorithm.RS384, 48), (Algorithm.ES512, 64)],
    )
    def test_hash_algorithm(self, alg, digest_size):
        assert alg.hash_algorithm().digest_size == digest_size

    @pytest.mark.parametrize(
        "alg, curve, width",
        [
            (Algorithm.ES256, "secp256r1", 32),
            (Algorithm.ES384, "secp384r1", 48),
            (Algorithm.ES512, "secp521r1", 66),
        ],
    )
    def test_es_curve_and_width(self, alg, curve, width):
        assert alg.curve().name == curve
        assert alg.signature_width == width

    def test_non_es_has_no_curve(self):
        with pytest.raises(ValueError):
            Algorithm.RS256.curve()
        with pytest.raises(ValueError):
            Algorithm.HS256.signature_width
