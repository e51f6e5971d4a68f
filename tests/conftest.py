"""Shared fixtures for jwtpool tests."""

from __future__ import annotations

import pytest

from jwtpool import DefaultProvider

HS256_SECRET = "hs256-test-secret-0123456789abcdef"
HS384_SECRET = "hs384-test-secret-0123456789abcdef0123456789abcdef"
HS512_SECRET = "hs512-test-secret-0123456789abcdef0123456789abcdef0123456789abcd"


@pytest.fixture(scope="session")
def provider() -> DefaultProvider:
    """Provider with secrets for HS and generated keys for RS, PS and ES."""
    return DefaultProvider(
        HS256_SECRET, HS384_SECRET, HS512_SECRET, generate_keys=True
    )


@pytest.fixture(scope="session")
def hs_secrets() -> dict[str, str]:
    """Secrets configured on the session provider, by algorithm code."""
    return {"HS256": HS256_SECRET, "HS384": HS384_SECRET, "HS512": HS512_SECRET}
