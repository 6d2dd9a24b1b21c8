"""
PKCE (Proof Key for Code Exchange) material for the Cognito sign-in flow
"""
import base64
import hashlib
import secrets
from typing import NamedTuple


MAX_VERIFIER_LENGTH = 128


class PKCEMaterial(NamedTuple):
    """PKCE verifier, challenge and CSRF state for one login attempt"""
    verifier: str
    challenge: str
    state: str


def _b64url(raw: bytes) -> str:
    """Base64url encode without padding"""
    return base64.urlsafe_b64encode(raw).decode("ascii").rstrip("=")


def create_verifier(length: int = 96) -> str:
    """
    Generate a PKCE code verifier.

    RFC 7636 requires 43-128 characters from the unreserved URL-safe
    alphabet. 96 random bytes encode to 128 characters.

    Args:
        length: Number of random bytes to draw (at least 32)

    Returns:
        str: Verifier of 43-128 characters
    """
    if length < 32:
        raise ValueError("PKCE verifier needs at least 32 random bytes")
    return _b64url(secrets.token_bytes(length))[:MAX_VERIFIER_LENGTH]


def create_challenge(verifier: str) -> str:
    """
    Derive the S256 code challenge for a verifier.

    Args:
        verifier: PKCE code verifier

    Returns:
        str: base64url(SHA-256(verifier)) without padding
    """
    digest = hashlib.sha256(verifier.encode("ascii")).digest()
    return _b64url(digest)


def create_state() -> str:
    """
    Generate random state parameter for CSRF protection.

    Returns:
        str: 24 random bytes, base64url encoded
    """
    return _b64url(secrets.token_bytes(24))


def generate_pkce() -> PKCEMaterial:
    """Create fresh verifier, challenge and state for a login attempt"""
    verifier = create_verifier()
    return PKCEMaterial(
        verifier=verifier,
        challenge=create_challenge(verifier),
        state=create_state(),
    )
