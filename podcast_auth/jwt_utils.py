"""
JWT claim decoding for Cognito tokens

Note: only the payload is decoded, the signature is NOT verified. Tokens
handled here come straight from the Cognito token endpoint over HTTPS, which
is the only integrity guarantee. Do not use these helpers on tokens of
unknown origin.
"""
import base64
import binascii
import json
import math
from typing import Any, Dict

from .constants import APPROVED_CLAIM
from .exceptions import TokenDecodeError


_APPROVED_STRINGS = ("true", "1")


def _decode_segment(segment: str) -> bytes:
    """Decode a base64url segment, restoring stripped padding"""
    padding = -len(segment) % 4
    try:
        return base64.urlsafe_b64decode(segment + "=" * padding)
    except (binascii.Error, ValueError) as e:
        raise TokenDecodeError(f"Invalid JWT payload encoding: {e}") from e


def decode_token_payload(token: str) -> Dict[str, Any]:
    """
    Decode JWT payload without verification.

    Args:
        token: JWT (header.payload.signature)

    Returns:
        Decoded claims

    Raises:
        TokenDecodeError: If the token is not a three-part JWT or the payload
            is not base64url encoded JSON object
    """
    if not isinstance(token, str):
        raise TokenDecodeError("Invalid JWT format.")

    parts = token.split(".")
    if len(parts) != 3 or not parts[1]:
        raise TokenDecodeError("Invalid JWT format.")

    raw = _decode_segment(parts[1])
    try:
        payload = json.loads(raw.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise TokenDecodeError(f"Invalid JWT payload: {e}") from e

    if not isinstance(payload, dict):
        raise TokenDecodeError("Invalid JWT payload: expected a JSON object.")

    return payload


def get_expiry(token: str) -> int:
    """
    Get token expiry in epoch milliseconds.

    Args:
        token: JWT carrying an ``exp`` claim (seconds)

    Returns:
        ``exp * 1000``

    Raises:
        TokenDecodeError: If ``exp`` is absent or not a finite number
    """
    exp = decode_token_payload(token).get("exp")
    if isinstance(exp, bool) or not isinstance(exp, (int, float)) or not math.isfinite(exp):
        raise TokenDecodeError("JWT does not include a valid exp claim.")
    return int(exp * 1000)


def is_approved(token: str) -> bool:
    """
    Check the ``custom:approved`` claim.

    Accepted encodings are exactly ``True``, ``"true"``, ``1`` and ``"1"``.
    """
    approved = decode_token_payload(token).get(APPROVED_CLAIM)
    if approved is True:
        return True
    # bool is an int subclass and 1.0 is not an accepted encoding
    if type(approved) is int:
        return approved == 1
    return isinstance(approved, str) and approved in _APPROVED_STRINGS
