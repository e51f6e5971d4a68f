"""Token encoding and signing.

Every algorithm family signs the same input, the base64url header and
payload joined by a dot; only the signature computation differs.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any, Protocol

from cryptography.hazmat.primitives.asymmetric import ec, padding
from cryptography.hazmat.primitives.asymmetric.utils import (
    Prehashed,
    decode_dss_signature,
)

from . import bigint
from .algorithms import Algorithm, Family
from .claims import Claims, Header
from .encoding import b64url_encode, dump_claims
from .errors import SigningError, UnsupportedAlgorithmError
from .keys import PrivateKey
from .provider import Provider, SecretProvider

logger = logging.getLogger(__name__)

TOKEN_TYPE = "JWT"


class _Writable(Protocol):
    def write(self, s: str, /) -> Any: ...


def encode_signing_input(
    alg: Algorithm | str, header: dict[str, Any], payload: dict[str, Any]
) -> str:
    """Build the ``b64(header).b64(payload)`` signing input.

    ``alg`` and ``typ`` are written into ``header`` in place before it is
    serialized. Attribute order follows the mappings' own iteration order.

    Raises:
        ValueError: If ``alg`` is not a supported algorithm code
        SigningError: If the claims cannot be serialized as JSON
    """
    alg = Algorithm.coerce(alg)
    header["alg"] = alg.value
    header["typ"] = TOKEN_TYPE
    try:
        header_json = dump_claims(header)
        payload_json = dump_claims(payload)
    except (TypeError, ValueError) as exc:
        raise SigningError(f"claims are not JSON serializable: {exc}") from exc
    return f"{b64url_encode(header_json)}.{b64url_encode(payload_json)}"


def _digest(provider: Provider, alg: Algorithm, data: bytes) -> bytes:
    with provider.digest(alg) as d:
        d.update(data)
        return d.finalize()


def _require_key(provider: Provider, alg: Algorithm) -> PrivateKey:
    key = provider.key(alg)
    if key is None:
        raise UnsupportedAlgorithmError(f"no signing key configured for {alg.value}")
    return key


def _sign_hs(provider: Provider, alg: Algorithm, data: bytes) -> bytes:
    # The HMAC itself is the signature
    return _digest(provider, alg, data)


def _sign_rs(provider: Provider, alg: Algorithm, data: bytes) -> bytes:
    key = _require_key(provider, alg)
    digest = _digest(provider, alg, data)
    return key.sign(digest, padding.PKCS1v15(), Prehashed(alg.hash_algorithm()))


def _sign_ps(provider: Provider, alg: Algorithm, data: bytes) -> bytes:
    key = _require_key(provider, alg)
    options = provider.pss_options(alg)
    if options is None:
        raise UnsupportedAlgorithmError(f"no PSS options configured for {alg.value}")
    digest = _digest(provider, alg, data)
    pss = options.to_padding(alg)
    return key.sign(digest, pss, Prehashed(alg.hash_algorithm()))


def _sign_es(provider: Provider, alg: Algorithm, data: bytes) -> bytes:
    key = _require_key(provider, alg)
    digest = _digest(provider, alg, data)
    der = key.sign(digest, ec.ECDSA(Prehashed(alg.hash_algorithm())))
    r, s = decode_dss_signature(der)
    return bigint.encode(r, s, alg.signature_width)


_SIGNERS: dict[Family, Callable[[Provider, Algorithm, bytes], bytes]] = {
    Family.HS: _sign_hs,
    Family.RS: _sign_rs,
    Family.PS: _sign_ps,
    Family.ES: _sign_es,
}


def sign(
    alg: Algorithm | str,
    header: dict[str, Any] | None,
    payload: dict[str, Any] | None,
    provider: Provider,
) -> str:
    """Sign ``header`` and ``payload`` and return the compact token.

    Args:
        alg: Algorithm code; matched case-insensitively, emitted upper-case
        header: Header claims, updated in place with ``alg`` and ``typ``
        payload: Payload claims, passed through unchanged
        provider: Source of digests and keys

    Returns:
        ``header.payload.signature`` in unpadded base64url

    Raises:
        ValueError: If ``alg`` is not one of the twelve supported codes
        UnsupportedAlgorithmError: If the provider has no key/secret for ``alg``
        SigningError: If serialization or the signature primitive fails
    """
    alg = Algorithm.coerce(alg)
    if header is None:
        header = Header()
    if payload is None:
        payload = Claims()

    signing_input = encode_signing_input(alg, header, payload)
    try:
        signature = _SIGNERS[alg.family](provider, alg, signing_input.encode("ascii"))
    except (TypeError, ValueError) as exc:
        raise SigningError(f"{alg.value} signing failed: {exc}") from exc

    logger.debug(f"Signed {alg.value} token")
    return f"{signing_input}.{b64url_encode(signature)}"


def sign_to(
    stream: _Writable,
    alg: Algorithm | str,
    header: dict[str, Any] | None,
    payload: dict[str, Any] | None,
    provider: Provider,
) -> None:
    """Sign and write the token to ``stream``; nothing is written on failure."""
    stream.write(sign(alg, header, payload, provider))


def sign_with_secret(
    alg: Algorithm | str,
    header: dict[str, Any] | None,
    payload: dict[str, Any] | None,
    secret: str | bytes,
) -> str:
    """Sign an HS token with ``secret`` without configuring a provider.

    Raises:
        UnsupportedAlgorithmError: If ``alg`` is not an HS algorithm
    """
    return sign(alg, header, payload, SecretProvider(secret))
