"""Token parsing and signature verification.

Verification runs as a short-circuiting pipeline: split the wire token,
decode the header, dispatch on its ``alg``, check the signature over the
literal ``header.payload`` text, then decode the payload. Any failure
raises before claims are returned, and the raised error never says which
step failed.
"""

from __future__ import annotations

import hmac
import logging
from collections.abc import Callable
from typing import NamedTuple

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives.asymmetric import ec, padding
from cryptography.hazmat.primitives.asymmetric.utils import (
    Prehashed,
    encode_dss_signature,
)

from . import bigint
from .algorithms import Algorithm, Family
from .claims import Claims, Header
from .encoding import b64url_decode, b64url_encode, load_claims
from .errors import InvalidTokenError, UnsupportedAlgorithmError
from .keys import PublicKey
from .provider import Provider, SecretProvider

logger = logging.getLogger(__name__)


class VerifiedToken(NamedTuple):
    """Claims of a token whose signature checked out."""

    header: Header
    payload: Claims


def _invalid(reason: str) -> InvalidTokenError:
    logger.debug(f"Token rejected: {reason}")
    return InvalidTokenError()


def _digest(provider: Provider, alg: Algorithm, data: bytes) -> bytes:
    with provider.digest(alg) as d:
        d.update(data)
        return d.finalize()


def _require_public_key(provider: Provider, alg: Algorithm) -> PublicKey:
    key = provider.public_key(alg)
    if key is None:
        logger.debug(f"Token rejected: no verification key for {alg.value}")
        raise UnsupportedAlgorithmError()
    return key


def _decode_signature(segment: str) -> bytes:
    try:
        return b64url_decode(segment)
    except ValueError:
        raise _invalid("signature is not base64url") from None


def _verify_hs(provider: Provider, alg: Algorithm, data: bytes, signature: str) -> None:
    try:
        expected = b64url_encode(_digest(provider, alg, data))
    except UnsupportedAlgorithmError:
        logger.debug(f"Token rejected: no secret for {alg.value}")
        raise UnsupportedAlgorithmError() from None
    if not hmac.compare_digest(expected.encode("ascii"), signature.encode("ascii")):
        raise _invalid("HMAC mismatch")


def _verify_rs(provider: Provider, alg: Algorithm, data: bytes, signature: str) -> None:
    key = _require_public_key(provider, alg)
    digest = _digest(provider, alg, data)
    sig = _decode_signature(signature)
    try:
        key.verify(sig, digest, padding.PKCS1v15(), Prehashed(alg.hash_algorithm()))
    except (InvalidSignature, ValueError):
        raise _invalid("RSA PKCS#1 v1.5 signature mismatch") from None


def _verify_ps(provider: Provider, alg: Algorithm, data: bytes, signature: str) -> None:
    key = _require_public_key(provider, alg)
    options = provider.pss_options(alg)
    if options is None:
        logger.debug(f"Token rejected: no PSS options for {alg.value}")
        raise UnsupportedAlgorithmError()
    digest = _digest(provider, alg, data)
    sig = _decode_signature(signature)
    pss = options.to_padding(alg)
    try:
        key.verify(sig, digest, pss, Prehashed(alg.hash_algorithm()))
    except (InvalidSignature, ValueError):
        raise _invalid("RSA-PSS signature mismatch") from None


def _verify_es(provider: Provider, alg: Algorithm, data: bytes, signature: str) -> None:
    key = _require_public_key(provider, alg)
    digest = _digest(provider, alg, data)
    sig = _decode_signature(signature)
    if len(sig) != 2 * alg.signature_width:
        raise _invalid(f"ECDSA signature is {len(sig)} bytes")
    r, s = bigint.decode(sig)
    algorithm = ec.ECDSA(Prehashed(alg.hash_algorithm()))
    try:
        key.verify(encode_dss_signature(r, s), digest, algorithm)
    except (InvalidSignature, ValueError):
        raise _invalid("ECDSA signature mismatch") from None


_VERIFIERS: dict[Family, Callable[[Provider, Algorithm, bytes, str], None]] = {
    Family.HS: _verify_hs,
    Family.RS: _verify_rs,
    Family.PS: _verify_ps,
    Family.ES: _verify_es,
}


def _split(token: str) -> tuple[str, str, str]:
    if not isinstance(token, str) or not token.isascii():
        raise _invalid("token is not an ASCII string")
    parts = token.split(".")
    if len(parts) != 3:
        raise _invalid(f"expected 3 segments, got {len(parts)}")
    return parts[0], parts[1], parts[2]


def verify(token: str, provider: Provider) -> VerifiedToken:
    """Verify a compact token and return its claims.

    Args:
        token: ``header.payload.signature`` in unpadded base64url
        provider: Source of digests and verification keys

    Returns:
        The decoded header and payload

    Raises:
        InvalidTokenError: Malformed token, bad signature or undecodable claims
        UnsupportedAlgorithmError: Unknown ``alg`` or no key/secret for it
    """
    header_segment, payload_segment, signature_segment = _split(token)

    try:
        header = load_claims(b64url_decode(header_segment), Header)
    except ValueError:
        raise _invalid("header is not a base64url JSON object") from None

    code = header.get("alg")
    if not isinstance(code, str):
        raise _invalid("header has no string alg")
    alg = Algorithm.lookup(code)
    if alg is None:
        logger.debug("Token rejected: unknown alg")
        raise UnsupportedAlgorithmError()

    # Sign over the received text, never a re-serialization of the claims
    end = len(header_segment) + 1 + len(payload_segment)
    signing_input = token[:end].encode("ascii")
    _VERIFIERS[alg.family](provider, alg, signing_input, signature_segment)

    try:
        payload = load_claims(b64url_decode(payload_segment))
    except ValueError:
        raise _invalid("payload is not a base64url JSON object") from None

    logger.debug(f"Verified {alg.value} token")
    return VerifiedToken(header, payload)


def verify_with_secret(token: str, secret: str | bytes) -> VerifiedToken:
    """Verify an HS token against ``secret`` without configuring a provider.

    Raises:
        InvalidTokenError: Malformed token or signature mismatch
        UnsupportedAlgorithmError: If the token is not signed with an HS algorithm
    """
    return verify(token, SecretProvider(secret))
