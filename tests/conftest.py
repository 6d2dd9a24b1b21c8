"""Shared fixtures for the podcast_auth test suite."""

# pylint: disable=redefined-outer-name

from __future__ import annotations

import base64
import json
import time

from typing import Any

import pytest

from config.loader import CliConfig
from podcast_auth.models import SessionRecord


def make_jwt(claims: dict[str, Any]) -> str:
    """Build an unsigned JWT carrying the given claims."""

    def _segment(data: dict[str, Any]) -> str:
        raw = json.dumps(data).encode("utf-8")
        return base64.urlsafe_b64encode(raw).decode("ascii").rstrip("=")

    return f"{_segment({'alg': 'none', 'typ': 'JWT'})}.{_segment(claims)}.sig"


def now_ms() -> int:
    return int(time.time() * 1000)


def make_session(
    expires_in_ms: int = 3_600_000,
    refresh_token: str | None = "rt_stored",
    approved: Any = True,
    email: str = "listener@example.com",
) -> SessionRecord:
    """Build a SessionRecord whose tokens expire expires_in_ms from now."""
    issued = now_ms()
    expires_at = issued + expires_in_ms
    id_token = make_jwt(
        {
            "sub": "user-123",
            "email": email,
            "exp": expires_at // 1000,
            "custom:approved": approved,
        }
    )
    return SessionRecord(
        access_token="at_stored",
        id_token=id_token,
        refresh_token=refresh_token,
        token_type="Bearer",
        expires_at=expires_at,
        id_token_expires_at=(expires_at // 1000) * 1000,
        issued_at=issued,
    )


@pytest.fixture()
def cli_config(tmp_path) -> CliConfig:
    """Configuration pointing at a fake Cognito domain and a temp session file."""
    return CliConfig(
        cognito_domain="https://auth.example.com",
        cognito_client_id="client-abc",
        cognito_redirect_uri="http://127.0.0.1:0/auth/callback",
        cognito_logout_uri="http://127.0.0.1:4321/",
        oauth_scopes="openid email profile",
        identity_provider="Google",
        session_file=str(tmp_path / "state" / "session.json"),
        callback_timeout=5.0,
        http_timeout=5.0,
        api_url="https://api.example.com/graphql",
    )


@pytest.fixture()
def valid_session() -> SessionRecord:
    """A session valid for an hour."""
    return make_session()


@pytest.fixture()
def expiring_session() -> SessionRecord:
    """A session inside the refresh window."""
    return make_session(expires_in_ms=10_000)
