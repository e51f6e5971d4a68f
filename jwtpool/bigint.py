"""Fixed-width codec for ECDSA (r, s) signature pairs.

JWS carries ECDSA signatures as ``r || s`` where each integer is written
big-endian and left-padded with zeros to the byte length of the curve
order, so both halves always have the same width.
"""

from __future__ import annotations

from cryptography.hazmat.primitives.asymmetric import ec


def curve_width(curve: ec.EllipticCurve) -> int:
    """Return the byte width of one signature half for ``curve``."""
    return (curve.key_size + 7) // 8


def encode(r: int, s: int, width: int) -> bytes:
    """Encode ``(r, s)`` as two zero-padded big-endian blocks of ``width`` bytes.

    Raises:
        ValueError: If either value is negative or needs more than ``width`` bytes
    """
    if r < 0 or s < 0:
        raise ValueError("signature values must be non-negative")
    try:
        return r.to_bytes(width, "big") + s.to_bytes(width, "big")
    except OverflowError as exc:
        raise ValueError(f"signature value does not fit in {width} bytes") from exc


def decode(buf: bytes) -> tuple[int, int]:
    """Split ``buf`` at its midpoint and return ``(r, s)``.

    Raises:
        ValueError: If ``buf`` is empty or has odd length
    """
    if not buf or len(buf) % 2:
        raise ValueError("signature must contain two equal-width halves")
    n = len(buf) // 2
    return int.from_bytes(buf[:n], "big"), int.from_bytes(buf[n:], "big")
