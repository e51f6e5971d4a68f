"""Key generation, PEM serialization and per-algorithm key checks."""

from __future__ import annotations

from typing import Union

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec, rsa

from .algorithms import Algorithm, Family

PrivateKey = Union[rsa.RSAPrivateKey, ec.EllipticCurvePrivateKey]
PublicKey = Union[rsa.RSAPublicKey, ec.EllipticCurvePublicKey]


def generate_private_key(alg: Algorithm, rsa_key_size: int = 2048) -> PrivateKey:
    """
    Generate a fresh private key suitable for ``alg``.

    Args:
        alg: An RS, PS or ES algorithm
        rsa_key_size: Modulus size in bits for RS/PS keys

    Returns:
        RSA private key for RS/PS, EC private key on the matching curve for ES

    Raises:
        ValueError: If ``alg`` is an HS algorithm (HMAC uses shared secrets)
    """
    if alg.family in (Family.RS, Family.PS):
        return rsa.generate_private_key(public_exponent=65537, key_size=rsa_key_size)
    if alg.family is Family.ES:
        return ec.generate_private_key(alg.curve())
    raise ValueError(f"{alg.value} uses a shared secret, not a key pair")


def private_key_to_pem(private_key: PrivateKey) -> str:
    """Serialize a private key as unencrypted PKCS#8 PEM."""
    return private_key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    ).decode("utf-8")


def public_key_to_pem(public_key: PublicKey) -> str:
    """Serialize a public key as SubjectPublicKeyInfo PEM."""
    return public_key.public_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PublicFormat.SubjectPublicKeyInfo,
    ).decode("utf-8")


def generate_rsa_key_pair(key_size: int = 2048) -> tuple[str, str]:
    """
    Generate RSA key pair for RS/PS signing.

    Args:
        key_size: Size of the RSA key in bits (default 2048, recommended minimum)

    Returns:
        Tuple of (private_key_pem, public_key_pem)
    """
    private_key = rsa.generate_private_key(public_exponent=65537, key_size=key_size)
    return private_key_to_pem(private_key), public_key_to_pem(private_key.public_key())


def generate_ec_key_pair(alg: Algorithm | str = Algorithm.ES256) -> tuple[str, str]:
    """
    Generate EC key pair on the curve used by an ES algorithm.

    Args:
        alg: ES256 (P-256), ES384 (P-384) or ES512 (P-521)

    Returns:
        Tuple of (private_key_pem, public_key_pem)
    """
    private_key = ec.generate_private_key(Algorithm.coerce(alg).curve())
    return private_key_to_pem(private_key), public_key_to_pem(private_key.public_key())


def load_private_key(pem: str | bytes, password: bytes | None = None) -> PrivateKey:
    """
    Load an RSA or EC private key from PEM.

    Raises:
        ValueError: If the PEM cannot be parsed
        TypeError: If the key is neither RSA nor EC
    """
    data = pem.encode("utf-8") if isinstance(pem, str) else pem
    key = serialization.load_pem_private_key(data, password=password)
    if not isinstance(key, (rsa.RSAPrivateKey, ec.EllipticCurvePrivateKey)):
        raise TypeError(f"unsupported private key type: {type(key).__name__}")
    return key


def load_public_key(pem: str | bytes) -> PublicKey:
    """
    Load an RSA or EC public key from PEM.

    Raises:
        ValueError: If the PEM cannot be parsed
        TypeError: If the key is neither RSA nor EC
    """
    data = pem.encode("utf-8") if isinstance(pem, str) else pem
    key = serialization.load_pem_public_key(data)
    if not isinstance(key, (rsa.RSAPublicKey, ec.EllipticCurvePublicKey)):
        raise TypeError(f"unsupported public key type: {type(key).__name__}")
    return key


def check_key(alg: Algorithm, key: PrivateKey | PublicKey) -> None:
    """
    Check that ``key`` can be used with ``alg``.

    Raises:
        TypeError: If the key type does not match the algorithm family
        ValueError: If an EC key is on the wrong curve for the algorithm
    """
    if alg.family in (Family.RS, Family.PS):
        if not isinstance(key, (rsa.RSAPrivateKey, rsa.RSAPublicKey)):
            raise TypeError(f"{alg.value} requires an RSA key")
    elif alg.family is Family.ES:
        if not isinstance(key, (ec.EllipticCurvePrivateKey, ec.EllipticCurvePublicKey)):
            raise TypeError(f"{alg.value} requires an EC key")
        expected = alg.curve()
        if key.curve.name != expected.name:
            raise ValueError(
                f"{alg.value} requires curve {expected.name}, got {key.curve.name}"
            )
    else:
        raise ValueError(f"{alg.value} uses a shared secret, not a key pair")
