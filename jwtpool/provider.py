"""Digest pools and key material for signing and verification.

A provider is the only long-lived, shared component: it hands out reusable
digest objects (HMAC-keyed for HS, plain SHA-2 for RS/PS/ES) and holds the
asymmetric key for each algorithm. Signing and verification borrow a digest
for the duration of one call and return it afterwards.
"""

from __future__ import annotations

import logging
import threading
from abc import ABC, abstractmethod
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import TYPE_CHECKING, Literal, Union

from cryptography.hazmat.primitives import hashes, hmac
from cryptography.hazmat.primitives.asymmetric import padding
from pydantic import BaseModel, Field

from .algorithms import Algorithm, Family
from .errors import UnsupportedAlgorithmError
from .keys import (
    PrivateKey,
    PublicKey,
    check_key,
    generate_private_key,
    load_private_key,
)

if TYPE_CHECKING:
    from .settings import JWTSettings

logger = logging.getLogger(__name__)

HashContext = Union[hashes.Hash, hmac.HMAC]

_HASH_BY_NAME: dict[str, type[hashes.HashAlgorithm]] = {
    "SHA256": hashes.SHA256,
    "SHA384": hashes.SHA384,
    "SHA512": hashes.SHA512,
}


class PSSOptions(BaseModel):
    """RSASSA-PSS parameters for a PS algorithm."""

    # MGF1 hash; defaults to the algorithm's own hash
    hash: Literal["SHA256", "SHA384", "SHA512"] | None = None
    # Defaults to the digest length (RFC 7518 section 3.5)
    salt_length: int | None = Field(default=None, ge=0)

    def to_padding(self, alg: Algorithm) -> padding.PSS:
        """Build the PSS padding used for both signing and verification."""
        digest = alg.hash_algorithm()
        mgf_hash = _HASH_BY_NAME[self.hash]() if self.hash else digest
        salt_length = (
            self.salt_length if self.salt_length is not None else digest.digest_size
        )
        return padding.PSS(mgf=padding.MGF1(mgf_hash), salt_length=salt_length)


class PooledDigest:
    """A digest object that can be reset and reused.

    Each instance keeps a private, never-finalized template and resets by
    copying it, so a keyed HMAC does not have to be re-keyed per call.
    """

    __slots__ = ("_pool", "_template", "_ctx")

    def __init__(self, pool: DigestPool, template: HashContext):
        self._pool = pool
        self._template = template
        self._ctx = template.copy()

    @property
    def pool(self) -> DigestPool:
        return self._pool

    def update(self, data: bytes) -> None:
        self._ctx.update(data)

    def finalize(self) -> bytes:
        return self._ctx.finalize()

    def reset(self) -> None:
        self._ctx = self._template.copy()


class DigestPool:
    """Thread-safe pool of :class:`PooledDigest` objects.

    A digest is exclusively owned by one caller between :meth:`acquire` and
    :meth:`release`. At most ``max_idle`` released digests are retained.
    """

    def __init__(self, factory: Callable[[], HashContext], max_idle: int = 64):
        self._factory = factory
        self._max_idle = max_idle
        self._idle: list[PooledDigest] = []
        self._lock = threading.Lock()

    def acquire(self) -> PooledDigest:
        with self._lock:
            if self._idle:
                return self._idle.pop()
        return PooledDigest(self, self._factory())

    def release(self, digest: PooledDigest) -> None:
        # Digests from a retired pool (rotated secret) are dropped
        if digest.pool is not self:
            return
        digest.reset()
        with self._lock:
            if len(self._idle) < self._max_idle:
                self._idle.append(digest)

    @property
    def idle(self) -> int:
        """Number of digests currently waiting in the pool."""
        with self._lock:
            return len(self._idle)


class Provider(ABC):
    """Supplies digests and keys to the signer and verifier."""

    @abstractmethod
    def acquire_digest(self, alg: Algorithm) -> PooledDigest:
        """Borrow a digest for ``alg``.

        Raises:
            UnsupportedAlgorithmError: If no HMAC secret is configured for an
                HS algorithm
        """

    @abstractmethod
    def release_digest(self, alg: Algorithm, digest: PooledDigest) -> None:
        """Return a borrowed digest; it must not be used afterwards."""

    @abstractmethod
    def key(self, alg: Algorithm) -> PrivateKey | None:
        """Return the private key for an asymmetric algorithm, if configured."""

    @abstractmethod
    def pss_options(self, alg: Algorithm) -> PSSOptions | None:
        """Return PSS parameters for a PS algorithm, if configured."""

    def public_key(self, alg: Algorithm) -> PublicKey | None:
        """Return the verification key for ``alg``, if any."""
        key = self.key(alg)
        return key.public_key() if key is not None else None

    @contextmanager
    def digest(self, alg: Algorithm) -> Iterator[PooledDigest]:
        """Borrow a digest for the duration of a ``with`` block.

        Usage:
            with provider.digest(Algorithm.HS256) as d:
                d.update(signing_input)
                mac = d.finalize()
        """
        d = self.acquire_digest(alg)
        try:
            yield d
        finally:
            self.release_digest(alg, d)


class DefaultProvider(Provider):
    """In-memory provider with per-hash digest pools and per-algorithm keys.

    Keys are read-mostly: the ``set_*`` and ``generate_key`` calls rotate
    material, and callers must not rotate a key while it is in use.
    """

    def __init__(
        self,
        hs256_secret: str | bytes | None = None,
        hs384_secret: str | bytes | None = None,
        hs512_secret: str | bytes | None = None,
        *,
        generate_keys: bool = False,
        rsa_key_size: int = 2048,
        pool_size: int = 64,
    ):
        """Initialize the provider.

        Args:
            hs256_secret: HMAC secret for HS256
            hs384_secret: HMAC secret for HS384
            hs512_secret: HMAC secret for HS512
            generate_keys: Generate keys for all RS, PS and ES algorithms
            rsa_key_size: Modulus size in bits for generated RSA keys
            pool_size: Maximum idle digests kept per pool
        """
        self.rsa_key_size = rsa_key_size
        self.pool_size = pool_size

        self._sha: dict[int, DigestPool] = {
            bits: DigestPool(self._hash_factory(Algorithm(f"RS{bits}")), pool_size)
            for bits in (256, 384, 512)
        }
        self._hmac: dict[Algorithm, DigestPool] = {}
        self._keys: dict[Algorithm, PrivateKey] = {}
        self._public_keys: dict[Algorithm, PublicKey] = {}
        self._pss_options: dict[Algorithm, PSSOptions] = {}

        for alg, secret in (
            (Algorithm.HS256, hs256_secret),
            (Algorithm.HS384, hs384_secret),
            (Algorithm.HS512, hs512_secret),
        ):
            if secret is not None:
                self.set_hs_secret(alg, secret)

        if generate_keys:
            for alg in Algorithm:
                if alg.family is not Family.HS:
                    self.generate_key(alg)

    @classmethod
    def from_settings(cls, settings: JWTSettings) -> DefaultProvider:
        """Build a provider from :class:`~jwtpool.settings.JWTSettings`.

        Raises:
            ValueError: If a configured PEM cannot be parsed
            TypeError: If a configured key does not suit its algorithm
        """
        provider = cls(
            settings.hs256_secret,
            settings.hs384_secret,
            settings.hs512_secret,
            rsa_key_size=settings.rsa_key_size,
            pool_size=settings.digest_pool_size,
        )
        options = PSSOptions(salt_length=settings.pss_salt_length)
        for alg in Algorithm:
            if alg.family is Family.HS:
                continue
            pem = settings.private_key_pem(alg)
            if pem:
                provider.set_key(alg, load_private_key(pem), options)
            elif settings.generate_missing_keys:
                provider.generate_key(alg, options)
        configured = ", ".join(a.value for a in provider.available_algorithms())
        logger.info(f"Provider configured for: {configured or 'nothing'}")
        return provider

    @staticmethod
    def _hash_factory(alg: Algorithm) -> Callable[[], HashContext]:
        algorithm = alg.hash_algorithm()
        return lambda: hashes.Hash(algorithm)

    def _pool_for(self, alg: Algorithm) -> DigestPool:
        if alg.family is Family.HS:
            pool = self._hmac.get(alg)
            if pool is None:
                raise UnsupportedAlgorithmError(f"no secret configured for {alg.value}")
            return pool
        return self._sha[alg.bits]

    def acquire_digest(self, alg: Algorithm) -> PooledDigest:
        return self._pool_for(Algorithm.coerce(alg)).acquire()

    def release_digest(self, alg: Algorithm, digest: PooledDigest) -> None:
        self._pool_for(Algorithm.coerce(alg)).release(digest)

    def key(self, alg: Algorithm) -> PrivateKey | None:
        return self._keys.get(Algorithm.coerce(alg))

    def public_key(self, alg: Algorithm) -> PublicKey | None:
        return self._public_keys.get(Algorithm.coerce(alg))

    def pss_options(self, alg: Algorithm) -> PSSOptions | None:
        return self._pss_options.get(Algorithm.coerce(alg))

    def available_algorithms(self) -> list[Algorithm]:
        """Algorithms that currently have a secret or a verification key."""
        return [
            alg
            for alg in Algorithm
            if (
                alg in self._hmac
                if alg.family is Family.HS
                else alg in self._public_keys
            )
        ]

    def set_hs_secret(self, alg: Algorithm | str, secret: str | bytes) -> None:
        """Set (or rotate) the HMAC secret for an HS algorithm."""
        alg = self._require_family(alg, Family.HS)
        key = secret.encode("utf-8") if isinstance(secret, str) else bytes(secret)
        algorithm = alg.hash_algorithm()
        if len(key) < algorithm.digest_size:
            logger.warning(
                f"{alg.value} secret is {len(key)} bytes, shorter than the "
                f"{algorithm.digest_size}-byte digest"
            )
        self._hmac[alg] = DigestPool(lambda: hmac.HMAC(key, algorithm), self.pool_size)
        logger.debug(f"{alg.value} secret configured")

    def set_rsa_key(self, alg: Algorithm | str, key: PrivateKey) -> None:
        """Set (or rotate) the private key for an RS algorithm."""
        alg = self._require_family(alg, Family.RS)
        self._store_private_key(alg, key)

    def set_pss_key(
        self, alg: Algorithm | str, key: PrivateKey, options: PSSOptions | None = None
    ) -> None:
        """Set (or rotate) the private key and PSS parameters for a PS algorithm."""
        alg = self._require_family(alg, Family.PS)
        self._store_private_key(alg, key)
        self._pss_options[alg] = options or PSSOptions()

    def set_ec_key(self, alg: Algorithm | str, key: PrivateKey) -> None:
        """Set (or rotate) the private key for an ES algorithm."""
        alg = self._require_family(alg, Family.ES)
        self._store_private_key(alg, key)

    def set_key(
        self, alg: Algorithm | str, key: PrivateKey, options: PSSOptions | None = None
    ) -> None:
        """Set the private key for any asymmetric algorithm."""
        alg = Algorithm.coerce(alg)
        if alg.family is Family.RS:
            self.set_rsa_key(alg, key)
        elif alg.family is Family.PS:
            self.set_pss_key(alg, key, options)
        elif alg.family is Family.ES:
            self.set_ec_key(alg, key)
        else:
            raise ValueError(f"{alg.value} uses a shared secret, use set_hs_secret")

    def set_public_key(
        self, alg: Algorithm | str, key: PublicKey, options: PSSOptions | None = None
    ) -> None:
        """Configure a verification-only key, dropping any private key for ``alg``."""
        alg = Algorithm.coerce(alg)
        check_key(alg, key)
        self._keys.pop(alg, None)
        self._public_keys[alg] = key
        if alg.family is Family.PS:
            current = self._pss_options.get(alg)
            self._pss_options[alg] = options or current or PSSOptions()
        logger.debug(f"{alg.value} verification key configured")

    def generate_key(
        self, alg: Algorithm | str, options: PSSOptions | None = None
    ) -> PrivateKey:
        """Generate and install a fresh private key for an asymmetric algorithm."""
        alg = Algorithm.coerce(alg)
        key = generate_private_key(alg, self.rsa_key_size)
        self.set_key(alg, key, options or self._pss_options.get(alg))
        logger.info(f"Generated {alg.value} signing key")
        return key

    def _store_private_key(self, alg: Algorithm, key: PrivateKey) -> None:
        check_key(alg, key)
        if not hasattr(key, "sign"):
            raise TypeError(f"{alg.value} requires a private key")
        self._keys[alg] = key
        self._public_keys[alg] = key.public_key()
        logger.debug(f"{alg.value} signing key configured")

    @staticmethod
    def _require_family(alg: Algorithm | str, family: Family) -> Algorithm:
        alg = Algorithm.coerce(alg)
        if alg.family is not family:
            raise ValueError(f"{alg.value} is not a {family.value} algorithm")
        return alg


class SecretProvider(Provider):
    """Provider serving a single HMAC secret for every HS algorithm.

    Backs :func:`~jwtpool.signer.sign_with_secret` and
    :func:`~jwtpool.verifier.verify_with_secret`; asymmetric algorithms are
    reported as unsupported.
    """

    def __init__(self, secret: str | bytes):
        key = secret.encode("utf-8") if isinstance(secret, str) else bytes(secret)
        self._pools = {
            alg: DigestPool(self._hmac_factory(key, alg), max_idle=1)
            for alg in (Algorithm.HS256, Algorithm.HS384, Algorithm.HS512)
        }

    @staticmethod
    def _hmac_factory(key: bytes, alg: Algorithm) -> Callable[[], HashContext]:
        algorithm = alg.hash_algorithm()
        return lambda: hmac.HMAC(key, algorithm)

    def acquire_digest(self, alg: Algorithm) -> PooledDigest:
        pool = self._pools.get(alg)
        if pool is None:
            raise UnsupportedAlgorithmError(f"{alg.value} requires a key pair")
        return pool.acquire()

    def release_digest(self, alg: Algorithm, digest: PooledDigest) -> None:
        self._pools[alg].release(digest)

    def key(self, alg: Algorithm) -> PrivateKey | None:
        return None

    def public_key(self, alg: Algorithm) -> PublicKey | None:
        return None

    def pss_options(self, alg: Algorithm) -> PSSOptions | None:
        return None
