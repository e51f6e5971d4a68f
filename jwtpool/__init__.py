"""jwtpool: compact signed tokens over pooled digests and per-algorithm keys."""

from .algorithms import Algorithm, Family, is_supported
from .claims import Claims, Header
from .errors import InvalidTokenError, JWTError, SigningError, UnsupportedAlgorithmError
from .provider import DefaultProvider, Provider, PSSOptions
from .settings import JWTSettings
from .signer import encode_signing_input, sign, sign_to, sign_with_secret
from .verifier import VerifiedToken, verify, verify_with_secret

__version__ = "0.1.0"
__all__ = [
    "Algorithm",
    "Claims",
    "DefaultProvider",
    "Family",
    "Header",
    "InvalidTokenError",
    "JWTError",
    "JWTSettings",
    "PSSOptions",
    "Provider",
    "SigningError",
    "UnsupportedAlgorithmError",
    "VerifiedToken",
    "encode_signing_input",
    "is_supported",
    "sign",
    "sign_to",
    "sign_with_secret",
    "verify",
    "verify_with_secret",
]
