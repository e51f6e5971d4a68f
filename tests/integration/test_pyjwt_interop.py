"""Wire compatibility with PyJWT in both directions."""

from __future__ import annotations

import jwt
import pytest

from jwtpool import Algorithm, InvalidTokenError, sign, verify


@pytest.mark.parametrize("alg", list(Algorithm))
def test_pyjwt_decodes_our_tokens(provider, hs_secrets, alg):
    """Tokens we sign are accepted by PyJWT."""
    payload = {"sub": "user123", "roles": ["admin"], "scopes": ["read", "write"]}
    token = sign(alg, {"kid": "key-1"}, payload, provider)
    key = hs_secrets.get(alg.value) or provider.public_key(alg)

    decoded = jwt.decode(token, key, algorithms=[alg.value])
    header = jwt.get_unverified_header(token)

    assert decoded == payload
    assert header == {"alg": alg.value, "typ": "JWT", "kid": "key-1"}


@pytest.mark.parametrize("alg", list(Algorithm))
def test_we_verify_pyjwt_tokens(provider, hs_secrets, alg):
    """Tokens PyJWT signs pass our verification."""
    payload = {"sub": "user123", "n": 7}
    key = hs_secrets.get(alg.value) or provider.key(alg)
    token = jwt.encode(payload, key, algorithm=alg.value, headers={"kid": "k"})

    header, decoded = verify(token, provider)

    assert decoded == payload
    assert header["alg"] == alg.value
    assert header["kid"] == "k"


def test_pyjwt_token_with_wrong_secret_rejected(provider):
    token = jwt.encode({"sub": "u"}, "other" * 8, algorithm="HS256")

    with pytest.raises(InvalidTokenError):
        verify(token, provider)
