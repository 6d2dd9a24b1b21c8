"""Error kinds raised by the authentication layer"""


class PodcastAuthError(Exception):
    """Base class for every authentication/session failure"""


class ConfigurationError(PodcastAuthError):
    """Malformed or missing configuration (bad URL, bad scheme, missing client)"""


class CallbackParseError(PodcastAuthError):
    """The OAuth redirect was rejected (wrong path, missing params, provider error)"""


class ListenerBindError(PodcastAuthError):
    """The local callback listener could not bind its host/port"""


class CallbackTimeoutError(PodcastAuthError):
    """No OAuth redirect arrived before the deadline"""


class TokenDecodeError(PodcastAuthError):
    """A bearer token does not have the expected JWT shape or claims"""


class StorageError(PodcastAuthError):
    """Session file I/O failed for a reason other than not-found"""


class NotAuthenticatedError(PodcastAuthError):
    """No session exists"""


class SessionExpiredError(PodcastAuthError):
    """The session could not be refreshed; the user must sign in again"""


class AuthError(PodcastAuthError):
    """Token endpoint exchange or sign-in flow failure"""


class ApprovalPendingError(AuthError):
    """The account exists but has not been approved by an admin yet"""


class ApiError(PodcastAuthError):
    """An authenticated GraphQL request failed"""
