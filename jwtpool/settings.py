from __future__ import annotations

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

from .algorithms import Algorithm, Family


class JWTSettings(BaseSettings):
    """Provider configuration."""

    # HMAC secrets
    hs256_secret: str | None = None
    hs384_secret: str | None = None
    hs512_secret: str | None = None

    # Private keys, as PEM text or a path to a PEM file
    rs256_private_key: str | None = None
    rs384_private_key: str | None = None
    rs512_private_key: str | None = None
    ps256_private_key: str | None = None
    ps384_private_key: str | None = None
    ps512_private_key: str | None = None
    es256_private_key: str | None = None
    es384_private_key: str | None = None
    es512_private_key: str | None = None

    pss_salt_length: int | None = None  # None = digest length
    generate_missing_keys: bool = False
    rsa_key_size: int = 2048
    digest_pool_size: int = 64

    model_config = SettingsConfigDict(
        env_prefix="JWTPOOL_",
        env_parse_none_str="none",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    def model_post_init(self, __context) -> None:
        """Load keys from files if they appear to be file paths."""
        for alg in Algorithm:
            if alg.family is Family.HS:
                continue
            field = f"{alg.value.lower()}_private_key"
            value = getattr(self, field)
            if value and (value.startswith("/") or value.startswith("./")):
                key_path = Path(value)
                if key_path.exists():
                    setattr(self, field, key_path.read_text())

    def private_key_pem(self, alg: Algorithm) -> str | None:
        """Return the configured PEM for an asymmetric algorithm."""
        if alg.family is Family.HS:
            return None
        return getattr(self, f"{alg.value.lower()}_private_key")

    def hs_secret(self, alg: Algorithm) -> str | None:
        """Return the configured secret for an HS algorithm."""
        if alg.family is not Family.HS:
            return None
        return getattr(self, f"{alg.value.lower()}_secret")
