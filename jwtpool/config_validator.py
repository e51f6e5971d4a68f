"""Configuration validation for production deployments.

Validates key material and pool settings at startup to fail fast with
clear error messages if misconfigured.
"""

import logging

from cryptography.hazmat.primitives.asymmetric import rsa

from jwtpool.algorithms import Algorithm, Family
from jwtpool.keys import check_key, load_private_key
from jwtpool.settings import JWTSettings

logger = logging.getLogger(__name__)

MIN_RSA_KEY_SIZE = 2048


class ConfigurationError(Exception):
    """Raised when configuration validation fails."""

    pass


def validate_settings(settings: JWTSettings) -> None:
    """Validate all key and pool settings.

    Args:
        settings: Settings instance to validate

    Raises:
        ConfigurationError: If any validation check fails
    """
    errors: list[str] = []

    # Validate HMAC secrets
    for alg in (Algorithm.HS256, Algorithm.HS384, Algorithm.HS512):
        secret = settings.hs_secret(alg)
        if secret is None:
            continue
        if not secret:
            errors.append(f"{alg.value}_SECRET must not be empty")
        elif len(secret.encode("utf-8")) < alg.hash_algorithm().digest_size:
            logger.warning(
                f"{alg.value}_SECRET is shorter than "
                f"{alg.hash_algorithm().digest_size} bytes"
            )

    # Validate private keys
    for alg in Algorithm:
        if alg.family is Family.HS:
            continue
        pem = settings.private_key_pem(alg)
        if not pem:
            continue
        try:
            key = load_private_key(pem)
            check_key(alg, key)
        except (TypeError, ValueError) as e:
            errors.append(f"{alg.value}_PRIVATE_KEY is not usable: {e}")
            continue
        if isinstance(key, rsa.RSAPrivateKey) and key.key_size < MIN_RSA_KEY_SIZE:
            errors.append(
                f"{alg.value}_PRIVATE_KEY is {key.key_size} bits, "
                f"must be >= {MIN_RSA_KEY_SIZE}"
            )

    # Validate generation and pooling
    if settings.rsa_key_size < MIN_RSA_KEY_SIZE:
        errors.append(
            f"RSA_KEY_SIZE must be >= {MIN_RSA_KEY_SIZE}, got {settings.rsa_key_size}"
        )

    if settings.pss_salt_length is not None and settings.pss_salt_length < 0:
        errors.append(f"PSS_SALT_LENGTH must be >= 0, got {settings.pss_salt_length}")

    if settings.digest_pool_size <= 0:
        errors.append(
            f"DIGEST_POOL_SIZE must be > 0, got {settings.digest_pool_size}"
        )

    # Raise error if any validations failed
    if errors:
        error_msg = "Configuration validation failed:\n" + "\n".join(
            f"  - {error}" for error in errors
        )
        raise ConfigurationError(error_msg)

    logger.info("Configuration validation passed")
