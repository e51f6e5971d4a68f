"""Wire codec: unpadded base64url segments and JSON claim bodies."""

from __future__ import annotations

import base64
import json
from typing import Any

from .claims import Claims


def b64url_encode(data: bytes) -> str:
    """Encode ``data`` as base64url without padding."""
    return base64.urlsafe_b64encode(data).decode("ascii").rstrip("=")


def b64url_decode(segment: str) -> bytes:
    """Strictly decode an unpadded base64url segment.

    Only the canonical encoding of a byte string is accepted: characters
    outside the URL-safe alphabet, padding, and non-zero trailing bits all
    raise, so two different segments never decode to the same bytes.

    Raises:
        ValueError: If ``segment`` is not canonical unpadded base64url
    """
    if len(segment) % 4 == 1:
        raise ValueError("invalid base64url length")
    raw = segment.encode("ascii")
    data = base64.b64decode(raw + b"=" * (-len(raw) % 4), altchars=b"-_", validate=True)
    if b64url_encode(data) != segment:
        raise ValueError("non-canonical base64url segment")
    return data


def dump_claims(claims: dict[str, Any]) -> bytes:
    """Serialize claims to compact UTF-8 JSON.

    Raises:
        TypeError: If a value is not JSON serializable
        ValueError: If a float is NaN or infinite, or nesting is too deep
    """
    try:
        text = json.dumps(
            claims, separators=(",", ":"), ensure_ascii=False, allow_nan=False
        )
    except RecursionError as exc:
        raise ValueError("claims nested too deeply") from exc
    return text.encode("utf-8")


def load_claims(data: bytes, factory: type[Claims] = Claims) -> Claims:
    """Parse a JSON object into a claims container.

    Raises:
        ValueError: If ``data`` is not UTF-8 JSON encoding an object
    """
    try:
        value = json.loads(data)
    except RecursionError as exc:
        raise ValueError("claims nested too deeply") from exc
    if not isinstance(value, dict):
        raise ValueError("claims must be a JSON object")
    return factory(value)
