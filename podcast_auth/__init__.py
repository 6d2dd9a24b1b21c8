"""
Podcast Tracker OAuth (Authorization Code + PKCE) authentication module
"""
from .constants import (
    CALLBACK_TIMEOUT_SECONDS,
    DEFAULT_COGNITO_REDIRECT_URI,
    LOGIN_HINT,
    REFRESH_SKEW_MS,
)
from .exceptions import (
    ApiError,
    ApprovalPendingError,
    AuthError,
    CallbackParseError,
    CallbackTimeoutError,
    ConfigurationError,
    ListenerBindError,
    NotAuthenticatedError,
    PodcastAuthError,
    SessionExpiredError,
    StorageError,
    TokenDecodeError,
)
from .pkce import (
    PKCEMaterial,
    create_challenge,
    create_state,
    create_verifier,
    generate_pkce,
)
from .jwt_utils import (
    decode_token_payload,
    get_expiry,
    is_approved,
)
from .callback_server import (
    CallbackParse,
    CallbackResult,
    OAuthCallbackServer,
    parse_callback_url,
    start_callback_server,
    wait_for_oauth_callback,
)
from .models import OAuthTokens, SessionRecord
from .storage import SessionStore
from .auth_service import AuthService
from .session_manager import SessionManager

__all__ = [
    # Constants
    "CALLBACK_TIMEOUT_SECONDS",
    "DEFAULT_COGNITO_REDIRECT_URI",
    "LOGIN_HINT",
    "REFRESH_SKEW_MS",
    # Errors
    "ApiError",
    "ApprovalPendingError",
    "AuthError",
    "CallbackParseError",
    "CallbackTimeoutError",
    "ConfigurationError",
    "ListenerBindError",
    "NotAuthenticatedError",
    "PodcastAuthError",
    "SessionExpiredError",
    "StorageError",
    "TokenDecodeError",
    # PKCE
    "PKCEMaterial",
    "create_challenge",
    "create_state",
    "create_verifier",
    "generate_pkce",
    # JWT Utilities
    "decode_token_payload",
    "get_expiry",
    "is_approved",
    # Callback Server
    "CallbackParse",
    "CallbackResult",
    "OAuthCallbackServer",
    "parse_callback_url",
    "start_callback_server",
    "wait_for_oauth_callback",
    # Models
    "OAuthTokens",
    "SessionRecord",
    # Session
    "SessionStore",
    "AuthService",
    "SessionManager",
]
