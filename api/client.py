"""
GraphQL over HTTP with the session's ID token as the Authorization header
"""
import logging
from typing import TYPE_CHECKING, Any, Callable, Dict, Iterable, Optional

import httpx

from podcast_auth.constants import LOGIN_HINT
from podcast_auth.exceptions import ApiError

if TYPE_CHECKING:
    from podcast_auth.session_manager import SessionManager


logger = logging.getLogger(__name__)

UNAUTHORIZED_MESSAGE = f"Session expired or unauthorized. {LOGIN_HINT}"
RATE_LIMIT_MESSAGE = "Spotify rate limit reached. Please wait a minute and retry."
UNKNOWN_ERROR_MESSAGE = "Unknown API error."


def normalize_api_error(messages: Iterable[Any]) -> str:
    """
    Turn GraphQL error messages into one line for the user.

    Authorization and rate-limit failures get a fixed hint; anything else
    is the messages joined with "; ".
    """
    joined = "; ".join(m for m in messages if isinstance(m, str) and m)
    lowered = joined.lower()

    if "unauthorized" in lowered:
        return UNAUTHORIZED_MESSAGE
    if "rate limit" in lowered:
        return RATE_LIMIT_MESSAGE
    return joined or UNKNOWN_ERROR_MESSAGE


class GraphQLClient:
    """Posts GraphQL operations to the API

    Every request asks the session manager for a valid ID token first, so
    concurrent requests share a single refresh.

    Args:
        url: GraphQL endpoint
        session_manager: Source of the ID token
        http_client_factory: Callable returning an ``httpx.AsyncClient``
        timeout: Request timeout in seconds
    """

    def __init__(
        self,
        url: str,
        session_manager: "SessionManager",
        http_client_factory: Callable[..., httpx.AsyncClient] = httpx.AsyncClient,
        timeout: float = 30.0,
    ):
        self.url = url
        self.session_manager = session_manager
        self._http_client_factory = http_client_factory
        self._timeout = timeout

    async def execute(self, query: str, variables: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """
        Run one query or mutation.

        Returns:
            The response's ``data`` object

        Raises:
            NotAuthenticatedError, SessionExpiredError: If no usable session exists
            ApiError: On network failures, HTTP errors or GraphQL errors
        """
        id_token = await self.session_manager.get_valid_id_token()

        logger.debug(f"POST {self.url}")
        try:
            async with self._http_client_factory(timeout=self._timeout) as client:
                response = await client.post(
                    self.url,
                    json={"query": query, "variables": variables or {}},
                    headers={"Authorization": id_token},
                )
        except httpx.HTTPError as e:
            raise ApiError(f"Network error: {e}") from e

        if response.status_code in (401, 403):
            logger.debug(f"API rejected the token ({response.status_code})")
            raise ApiError(UNAUTHORIZED_MESSAGE)

        try:
            payload = response.json()
        except ValueError as e:
            raise ApiError(f"API request failed ({response.status_code}): invalid JSON response") from e

        errors = payload.get("errors") if isinstance(payload, dict) else None
        if errors:
            messages = [item.get("message") for item in errors if isinstance(item, dict)]
            raise ApiError(normalize_api_error(messages))

        if not response.is_success:
            raise ApiError(f"API request failed ({response.status_code})")

        data = payload.get("data") if isinstance(payload, dict) else None
        if not isinstance(data, dict):
            raise ApiError("API response contained no data.")
        return data
