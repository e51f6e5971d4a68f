"""Closed set of supported signature algorithms."""

from __future__ import annotations

from enum import Enum

from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import ec


class Family(str, Enum):
    """Cryptographic family an algorithm belongs to."""

    HS = "HS"  # HMAC
    RS = "RS"  # RSASSA-PKCS1-v1_5
    PS = "PS"  # RSASSA-PSS
    ES = "ES"  # ECDSA


_HASHES: dict[int, type[hashes.HashAlgorithm]] = {
    256: hashes.SHA256,
    384: hashes.SHA384,
    512: hashes.SHA512,
}

_CURVES: dict[int, type[ec.EllipticCurve]] = {
    256: ec.SECP256R1,
    384: ec.SECP384R1,
    512: ec.SECP521R1,
}

# Bytes per half of an ECDSA (r, s) signature
_ES_WIDTHS = {256: 32, 384: 48, 512: 66}


class Algorithm(str, Enum):
    """Supported JWS algorithm codes."""

    HS256 = "HS256"
    HS384 = "HS384"
    HS512 = "HS512"
    RS256 = "RS256"
    RS384 = "RS384"
    RS512 = "RS512"
    PS256 = "PS256"
    PS384 = "PS384"
    PS512 = "PS512"
    ES256 = "ES256"
    ES384 = "ES384"
    ES512 = "ES512"

    @property
    def family(self) -> Family:
        return Family(self.value[:2])

    @property
    def bits(self) -> int:
        return int(self.value[2:])

    def hash_algorithm(self) -> hashes.HashAlgorithm:
        """Return a fresh hash instance (SHA-256/384/512) for this algorithm."""
        return _HASHES[self.bits]()

    def curve(self) -> ec.EllipticCurve:
        """Return the elliptic curve for an ES algorithm.

        Raises:
            ValueError: If the algorithm is not in the ES family
        """
        if self.family is not Family.ES:
            raise ValueError(f"{self.value} is not an ECDSA algorithm")
        return _CURVES[self.bits]()

    @property
    def signature_width(self) -> int:
        """Fixed width in bytes of each half of an ES signature."""
        if self.family is not Family.ES:
            raise ValueError(f"{self.value} is not an ECDSA algorithm")
        return _ES_WIDTHS[self.bits]

    @classmethod
    def lookup(cls, code: str) -> Algorithm | None:
        """Match ``code`` case-insensitively, returning None when unknown.

        Used on untrusted input (the ``alg`` header of a received token).
        """
        try:
            return cls(code.upper())
        except (AttributeError, ValueError):
            return None

    @classmethod
    def coerce(cls, value: Algorithm | str) -> Algorithm:
        """Resolve an algorithm passed by a caller.

        Raises:
            ValueError: If ``value`` is not one of the supported codes
        """
        if isinstance(value, cls):
            return value
        alg = cls.lookup(value)
        if alg is None:
            raise ValueError(f"unsupported algorithm <{value}>")
        return alg


def is_supported(code: str) -> bool:
    """Return True if ``code`` names a supported algorithm (case-insensitive)."""
    return Algorithm.lookup(code) is not None
