"""Tests for the fixed-width ECDSA signature codec."""

from __future__ import annotations

import pytest
from cryptography.hazmat.primitives.asymmetric import ec

from jwtpool import bigint

# Group orders of the supported curves
P256_ORDER = 0xFFFFFFFF00000000FFFFFFFFFFFFFFFFBCE6FAADA7179E84F3B9CAC2FC632551
P521_ORDER = int(
    "01FFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFF"
    "FA51868783BF2F966B7FCC0148F709A5D03BB5C9B8899C47AEBB6FB71E91386409",
    16,
)


class TestCurveWidth:
    """Half widths follow the curve order byte length."""

    @pytest.mark.parametrize(
        "curve, width",
        [(ec.SECP256R1(), 32), (ec.SECP384R1(), 48), (ec.SECP521R1(), 66)],
    )
    def test_curve_width(self, curve, width):
        """P-256, P-384 and P-521 use 32, 48 and 66 byte halves."""
        assert bigint.curve_width(curve) == width


class TestEncode:
    """Encoding writes two zero-padded big-endian halves."""

    def test_encode_pads_each_half(self):
        """Small values are left-padded to the full width."""
        buf = bigint.encode(1, 2, 32)

        assert len(buf) == 64
        assert buf[:32] == b"\x00" * 31 + b"\x01"
        assert buf[32:] == b"\x00" * 31 + b"\x02"

    def test_encode_asymmetric_magnitudes(self):
        """A tiny r next to a full-width s keeps both halves equal width."""
        s = P256_ORDER - 1
        buf = bigint.encode(7, s, 32)

        assert len(buf) == 64
        assert bigint.decode(buf) == (7, s)

    def test_encode_rejects_oversized_value(self):
        """A value wider than the curve width is rejected."""
        with pytest.raises(ValueError):
            bigint.encode(1 << 256, 1, 32)

    def test_encode_rejects_negative_value(self):
        """Signature values are non-negative."""
        with pytest.raises(ValueError):
            bigint.encode(-1, 1, 32)


class TestDecode:
    """Decoding splits the buffer at its midpoint."""

    @pytest.mark.parametrize(
        "r, s, width",
        [
            (0, 0, 32),
            (1, P256_ORDER - 1, 32),
            (0x00FF << 200, 0x01, 32),
            (0x0100, 0x00FFFFFF, 48),
            (P521_ORDER - 1, 1, 66),
            (1 << 512, (1 << 520) + 5, 66),
        ],
    )
    def test_round_trip_with_leading_zero_bytes(self, r, s, width):
        """decode(encode(r, s)) returns the original pair."""
        assert bigint.decode(bigint.encode(r, s, width)) == (r, s)

    def test_decode_rejects_odd_length(self):
        """An odd-length buffer cannot hold two equal halves."""
        with pytest.raises(ValueError):
            bigint.decode(b"\x01\x02\x03")

    def test_decode_rejects_empty(self):
        with pytest.raises(ValueError):
            bigint.decode(b"")
