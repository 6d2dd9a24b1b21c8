"""
Cognito hosted-UI exchanges: sign-in, token refresh and sign-out
"""
import logging
import math
import time
from typing import TYPE_CHECKING, Any, Callable, Dict, Optional
from urllib.parse import urlencode

import httpx

from utils.browser import open_url as default_open_url

from .callback_server import start_callback_server
from .constants import (
    AUTHORIZE_PATH,
    DEFAULT_EXPIRES_IN,
    DEFAULT_TOKEN_TYPE,
    LOGOUT_PATH,
    TOKEN_PATH,
)
from .exceptions import ApprovalPendingError, AuthError, ConfigurationError
from .jwt_utils import get_expiry, is_approved
from .models import OAuthTokens, SessionRecord
from .pkce import generate_pkce

if TYPE_CHECKING:
    from config.loader import CliConfig


logger = logging.getLogger(__name__)

APPROVAL_PENDING_MESSAGE = "Your account is pending approval. Ask an admin to approve your access."


def _now_ms() -> int:
    return int(time.time() * 1000)


def map_token_response(payload: Dict[str, Any]) -> OAuthTokens:
    """
    Validate a token endpoint response.

    Args:
        payload: Parsed JSON body

    Returns:
        OAuthTokens

    Raises:
        AuthError: If the provider reported an error or tokens are missing
    """
    if payload.get("error"):
        raise AuthError(payload.get("error_description") or payload["error"])

    access_token = payload.get("access_token")
    id_token = payload.get("id_token")
    if not access_token or not id_token:
        raise AuthError("Token endpoint did not return expected tokens.")

    expires_in = payload.get("expires_in")
    if (
        isinstance(expires_in, (int, float))
        and not isinstance(expires_in, bool)
        and math.isfinite(expires_in)
    ):
        expires_in = max(1, int(expires_in))
    else:
        expires_in = DEFAULT_EXPIRES_IN

    return OAuthTokens(
        access_token=access_token,
        id_token=id_token,
        refresh_token=payload.get("refresh_token") or None,
        token_type=payload.get("token_type") or DEFAULT_TOKEN_TYPE,
        expires_in=expires_in,
    )


def to_session(tokens: OAuthTokens, now_ms: int) -> SessionRecord:
    """Build a SessionRecord from freshly issued tokens"""
    return SessionRecord(
        access_token=tokens.access_token,
        id_token=tokens.id_token,
        refresh_token=tokens.refresh_token,
        token_type=tokens.token_type,
        expires_at=now_ms + tokens.expires_in * 1000,
        id_token_expires_at=get_expiry(tokens.id_token),
        issued_at=now_ms,
    )


class AuthService:
    """Talks to the Cognito hosted UI on behalf of the session manager

    Args:
        config: CLI configuration
        http_client_factory: Callable returning an ``httpx.AsyncClient``
        open_url: Callable opening a URL in the user's browser
        clock: Callable returning epoch milliseconds
    """

    def __init__(
        self,
        config: "CliConfig",
        http_client_factory: Callable[..., httpx.AsyncClient] = httpx.AsyncClient,
        open_url: Callable[[str], None] = default_open_url,
        clock: Callable[[], int] = _now_ms,
    ):
        self.config = config
        self._http_client_factory = http_client_factory
        self._open_url = open_url
        self._clock = clock

        self.token_url = f"{config.cognito_domain}{TOKEN_PATH}"
        self.authorize_url = f"{config.cognito_domain}{AUTHORIZE_PATH}"
        self.logout_url = f"{config.cognito_domain}{LOGOUT_PATH}"

    def _ensure_cognito_configured(self) -> None:
        if not self.config.cognito_configured:
            raise ConfigurationError(
                "Cognito auth is not configured. Set PODCAST_TRACKER_COGNITO_DOMAIN "
                "and PODCAST_TRACKER_COGNITO_CLIENT_ID."
            )

    def build_authorize_url(self, state: str, challenge: str) -> str:
        """Construct the hosted-UI authorize URL with PKCE"""
        params = {
            "response_type": "code",
            "client_id": self.config.cognito_client_id,
            "redirect_uri": self.config.cognito_redirect_uri,
            "scope": self.config.oauth_scopes,
            "state": state,
            "code_challenge_method": "S256",
            "code_challenge": challenge,
            "identity_provider": self.config.identity_provider,
        }
        return f"{self.authorize_url}?{urlencode(params)}"

    def build_logout_url(self) -> str:
        params = {
            "client_id": self.config.cognito_client_id,
            "logout_uri": self.config.cognito_logout_uri,
        }
        return f"{self.logout_url}?{urlencode(params)}"

    async def login(self) -> SessionRecord:
        """
        Run the browser sign-in flow.

        Returns:
            SessionRecord for the signed-in user

        Raises:
            AuthError: On state mismatch, exchange failure or pending approval
            CallbackParseError, CallbackTimeoutError, ListenerBindError:
                From the callback listener
        """
        self._ensure_cognito_configured()

        pkce = generate_pkce()
        authorize_url = self.build_authorize_url(pkce.state, pkce.challenge)

        logger.info("Opening browser for sign-in...")
        callback_server = await start_callback_server(
            self.config.cognito_redirect_uri,
            timeout=self.config.callback_timeout,
        )
        try:
            try:
                self._open_url(authorize_url)
            except OSError as e:
                logger.warning(f"Could not open browser automatically: {e}")
                logger.warning(f"Please open this URL manually: {authorize_url}")
            callback = await callback_server.wait_for_callback()
        finally:
            await callback_server.stop()

        if callback.state != pkce.state:
            raise AuthError("OAuth state mismatch. Please retry sign-in.")

        tokens = await self._exchange_code(callback.code, pkce.verifier)
        if not is_approved(tokens.id_token):
            raise ApprovalPendingError(APPROVAL_PENDING_MESSAGE)

        logger.info("Successfully exchanged authorization code for tokens")
        return to_session(tokens, self._clock())

    async def refresh(self, refresh_token: str) -> SessionRecord:
        """
        Redeem a refresh token for a new session.

        Cognito does not rotate refresh tokens, so the old one is kept when the
        response omits it.
        """
        self._ensure_cognito_configured()

        payload = await self._post_token_form(
            {
                "grant_type": "refresh_token",
                "client_id": self.config.cognito_client_id,
                "refresh_token": refresh_token,
            },
            failure_prefix="Refresh token request failed",
        )
        if not payload.get("refresh_token"):
            payload["refresh_token"] = refresh_token

        tokens = map_token_response(payload)
        if not is_approved(tokens.id_token):
            raise ApprovalPendingError(APPROVAL_PENDING_MESSAGE)

        logger.info("Successfully refreshed OAuth tokens")
        return to_session(tokens, self._clock())

    async def logout(self, id_token: Optional[str]) -> None:
        """End the hosted-UI session in the browser; no-op without a token"""
        if not id_token:
            return
        self._ensure_cognito_configured()

        try:
            self._open_url(self.build_logout_url())
        except OSError as e:
            logger.debug(f"Failed to open logout URL: {e}")

    async def _exchange_code(self, code: str, verifier: str) -> OAuthTokens:
        payload = await self._post_token_form(
            {
                "grant_type": "authorization_code",
                "client_id": self.config.cognito_client_id,
                "code": code,
                "redirect_uri": self.config.cognito_redirect_uri,
                "code_verifier": verifier,
            },
            failure_prefix="Token exchange failed",
        )
        return map_token_response(payload)

    async def _post_token_form(self, data: Dict[str, str], failure_prefix: str) -> Dict[str, Any]:
        logger.debug(f"POST {self.token_url} grant_type={data['grant_type']}")
        try:
            async with self._http_client_factory(timeout=self.config.http_timeout) as client:
                response = await client.post(
                    self.token_url,
                    data=data,
                    headers={"Content-Type": "application/x-www-form-urlencoded"},
                )
        except httpx.HTTPError as e:
            raise AuthError(f"{failure_prefix}: {e}") from e

        if not response.is_success:
            raise AuthError(f"{failure_prefix} ({response.status_code}): {response.text}")

        try:
            payload = response.json()
        except ValueError as e:
            raise AuthError(f"{failure_prefix}: invalid JSON response") from e

        if not isinstance(payload, dict):
            raise AuthError(f"{failure_prefix}: unexpected response body")
        return payload
