"""Header and payload claim containers."""

from __future__ import annotations

from typing import Any


class Claims(dict):
    """String-keyed mapping of JSON values.

    Values are never validated; what survives a round trip is decided by
    JSON alone (for example ``1`` stays an int, ``1.0`` stays a float).
    """

    def __repr__(self) -> str:
        return f"{type(self).__name__}({dict.__repr__(self)})"


class Header(Claims):
    """Token header with setters for the reserved attributes."""

    def set_alg(self, alg: str) -> None:
        self["alg"] = getattr(alg, "value", alg)

    def set_typ(self, typ: str = "JWT") -> None:
        self["typ"] = typ

    def set_iss(self, iss: Any) -> None:
        self["iss"] = iss

    def set_sub(self, sub: Any) -> None:
        self["sub"] = sub

    def set_aud(self, aud: Any) -> None:
        self["aud"] = aud

    def set_exp(self, exp: Any) -> None:
        self["exp"] = exp

    def set_nbf(self, nbf: Any) -> None:
        self["nbf"] = nbf

    def set_iat(self, iat: Any) -> None:
        self["iat"] = iat

    def set_jti(self, jti: Any) -> None:
        self["jti"] = jti
