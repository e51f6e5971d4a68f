"""Exception taxonomy for token signing and verification."""

from __future__ import annotations


class JWTError(Exception):
    """Base class for all jwtpool errors."""

    pass


class InvalidTokenError(JWTError):
    """Raised when a token is malformed or its signature does not match.

    The message is deliberately generic: callers learn that verification
    failed, not which step rejected the token.
    """

    def __init__(self, message: str = "invalid token"):
        super().__init__(message)


class UnsupportedAlgorithmError(JWTError):
    """Raised for an unknown algorithm code or a missing key/secret."""

    def __init__(self, message: str = "unsupported algorithm"):
        super().__init__(message)


class SigningError(JWTError):
    """Raised when the signature primitive rejects the operation."""

    pass
