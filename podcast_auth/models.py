"""Data models for Podcast Tracker authentication"""

from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass
class OAuthTokens:
    """Token endpoint response, mapped and validated

    Attributes:
        access_token: Bearer token for the API
        id_token: JWT ID token (carries identity and approval claims)
        refresh_token: Token for renewing expired tokens, when issued
        token_type: Token type, usually "Bearer"
        expires_in: Access token lifetime in seconds
    """
    access_token: str
    id_token: str
    refresh_token: Optional[str]
    token_type: str
    expires_in: int


@dataclass
class SessionRecord:
    """Current token set of a signed-in user

    All timestamps are epoch milliseconds. A record is only usable when
    access_token, id_token and expires_at are present.
    """
    access_token: str
    id_token: str
    refresh_token: Optional[str]
    token_type: str
    expires_at: int
    id_token_expires_at: int
    issued_at: int

    def is_expiring(self, now_ms: int, skew_ms: int) -> bool:
        """True if either token expires within skew_ms of now_ms"""
        deadline = now_ms + skew_ms
        return self.expires_at <= deadline or self.id_token_expires_at <= deadline

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the on-disk (camelCase) representation"""
        data: Dict[str, Any] = {
            "accessToken": self.access_token,
            "idToken": self.id_token,
            "tokenType": self.token_type,
            "expiresAt": self.expires_at,
            "idTokenExpiresAt": self.id_token_expires_at,
            "issuedAt": self.issued_at,
        }
        if self.refresh_token:
            data["refreshToken"] = self.refresh_token
        return data

    @classmethod
    def from_dict(cls, data: Any) -> Optional["SessionRecord"]:
        """Load from the on-disk representation

        Returns None for partial or mistyped records: tokens must be
        non-empty strings and timestamps must be numbers.
        """
        if not isinstance(data, dict):
            return None

        access_token = data.get("accessToken")
        id_token = data.get("idToken")
        if not _is_token(access_token) or not _is_token(id_token):
            return None

        expires_at = data.get("expiresAt")
        if not _is_timestamp(expires_at) or not expires_at:
            return None
        id_token_expires_at = data.get("idTokenExpiresAt", expires_at)
        issued_at = data.get("issuedAt", 0)
        if not _is_timestamp(id_token_expires_at) or not _is_timestamp(issued_at):
            return None

        refresh_token = data.get("refreshToken")
        token_type = data.get("tokenType")
        return cls(
            access_token=access_token,
            id_token=id_token,
            refresh_token=refresh_token if _is_token(refresh_token) else None,
            token_type=token_type if _is_token(token_type) else "Bearer",
            expires_at=expires_at,
            id_token_expires_at=id_token_expires_at,
            issued_at=issued_at,
        )


def _is_token(value: Any) -> bool:
    return isinstance(value, str) and bool(value)


def _is_timestamp(value: Any) -> bool:
    # bool is an int subclass
    return isinstance(value, (int, float)) and not isinstance(value, bool)
