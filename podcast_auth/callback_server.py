"""
Local OAuth callback listener

Binds the host/port of the configured redirect URI, settles on the first
request that reaches it (or on the timeout, whichever comes first), answers
with a small HTML page and releases the port.
"""
import asyncio
import html
import logging
from typing import NamedTuple, Optional, Tuple
from urllib.parse import parse_qs, urlparse

from aiohttp import web

from .constants import CALLBACK_TIMEOUT_SECONDS
from .exceptions import (
    CallbackParseError,
    CallbackTimeoutError,
    ConfigurationError,
    ListenerBindError,
)


logger = logging.getLogger(__name__)

UNEXPECTED_PATH_ERROR = "Unexpected callback path."
MISSING_PARAMS_ERROR = "Missing code or state in callback."
UNKNOWN_OAUTH_ERROR = "Unknown OAuth error."
TIMEOUT_ERROR = "Timed out waiting for OAuth callback."

_PAGE = (
    "<!doctype html><html><head><title>{title}</title></head>"
    "<body><h1>{title}</h1><p>{body}</p></body></html>"
)

_NO_CACHE_HEADERS = {
    "Cache-Control": "no-store",
    "Pragma": "no-cache",
}


class CallbackResult(NamedTuple):
    """Authorization code and state delivered by the provider redirect"""
    code: str
    state: str


class CallbackParse(NamedTuple):
    """Outcome of parsing a redirect: exactly one of result/error is set"""
    result: Optional[CallbackResult] = None
    error: Optional[str] = None


def parse_callback_url(url: str, expected_path: str) -> CallbackParse:
    """
    Parse an OAuth redirect URL.

    Args:
        url: Full URL or path+query of the incoming request
        expected_path: Path component of the configured redirect URI

    Returns:
        CallbackParse with either the code/state or an error message
    """
    parsed = urlparse(url)
    if (parsed.path or "/") != expected_path:
        return CallbackParse(error=UNEXPECTED_PATH_ERROR)

    params = parse_qs(parsed.query, keep_blank_values=True)

    error = params.get("error", [""])[0]
    if error:
        description = params.get("error_description", [UNKNOWN_OAUTH_ERROR])[0]
        return CallbackParse(error=f"{error}: {description}")

    code = params.get("code", [""])[0]
    state = params.get("state", [""])[0]
    if not code or not state:
        return CallbackParse(error=MISSING_PARAMS_ERROR)

    return CallbackParse(result=CallbackResult(code=code, state=state))


def parse_redirect_uri(redirect_uri: str) -> Tuple[str, int, str]:
    """
    Split a redirect URI into the (host, port, path) to listen on.

    Raises:
        ConfigurationError: If the URI is not http(s) or has no host/valid port
    """
    parsed = urlparse(redirect_uri)
    if parsed.scheme not in ("http", "https"):
        raise ConfigurationError(f"Redirect URI must start with http:// or https://: {redirect_uri}")
    if not parsed.hostname:
        raise ConfigurationError(f"Redirect URI has no host: {redirect_uri}")
    try:
        port = parsed.port
    except ValueError as e:
        raise ConfigurationError(f"Redirect URI has an invalid port: {redirect_uri}") from e

    return parsed.hostname, 80 if port is None else port, parsed.path or "/"


def _html_response(status: int, title: str, body: str) -> web.Response:
    return web.Response(
        text=_PAGE.format(title=html.escape(title), body=html.escape(body)),
        status=status,
        content_type="text/html",
        charset="utf-8",
        headers=_NO_CACHE_HEADERS,
    )


class OAuthCallbackServer:
    """Short-lived local HTTP listener for the OAuth redirect

    Lifecycle: Listening -> Resolved | Rejected. The first request (or the
    timeout) settles the outcome; anything after that is answered without
    touching it.
    """

    def __init__(self, redirect_uri: str, timeout: float = CALLBACK_TIMEOUT_SECONDS):
        self.host, self._requested_port, self.path = parse_redirect_uri(redirect_uri)
        self.timeout = timeout
        self.app = web.Application()
        self.runner: Optional[web.AppRunner] = None
        self._outcome: Optional[asyncio.Future] = None
        self._timer: Optional[asyncio.TimerHandle] = None
        self._port: Optional[int] = None

        # Method-agnostic catch-all; path checking is part of the parse contract
        self.app.router.add_route("*", "/{tail:.*}", self._handle_request)

    @property
    def port(self) -> int:
        """Port actually bound (differs from the URI when it asks for 0)"""
        return self._port if self._port is not None else self._requested_port

    @property
    def settled(self) -> bool:
        return self._outcome is not None and self._outcome.done()

    def _settle(
        self,
        result: Optional[CallbackResult] = None,
        error: Optional[Exception] = None,
    ) -> bool:
        """Settle the outcome once; returns False if already settled"""
        if self._outcome is None or self._outcome.done():
            return False

        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

        if error is not None:
            self._outcome.set_exception(error)
        else:
            self._outcome.set_result(result)
        return True

    def _on_timeout(self) -> None:
        self._timer = None
        if self._settle(error=CallbackTimeoutError(TIMEOUT_ERROR)):
            logger.warning(f"OAuth callback timeout after {self.timeout} seconds")

    async def _handle_request(self, request: web.Request) -> web.Response:
        """Handle the provider redirect"""
        if self.settled:
            logger.debug(f"Ignoring late request to callback listener: {request.path}")
            return _html_response(409, "Sign-in already handled", "You can close this tab.")

        parsed = parse_callback_url(request.path_qs, self.path)

        if parsed.error is not None:
            logger.warning(f"OAuth callback rejected: {parsed.error}")
            self._settle(error=CallbackParseError(parsed.error))
            return _html_response(400, "Sign-in failed", parsed.error)

        self._settle(result=parsed.result)
        logger.debug("OAuth callback received")
        return _html_response(
            200,
            "You are signed in",
            "You can close this tab and return to the terminal.",
        )

    async def start(self) -> None:
        """Bind the listener and arm the timeout

        Raises:
            ListenerBindError: If the host/port cannot be bound
        """
        loop = asyncio.get_running_loop()
        self._outcome = loop.create_future()

        self.runner = web.AppRunner(self.app, access_log=None)
        await self.runner.setup()

        site = web.TCPSite(self.runner, host=self.host, port=self._requested_port)
        try:
            await site.start()
        except OSError as e:
            await self.stop()
            raise ListenerBindError(
                f"Could not listen on {self.host}:{self._requested_port}: {e}"
            ) from e

        addresses = self.runner.addresses
        if addresses:
            self._port = addresses[0][1]

        self._timer = loop.call_later(self.timeout, self._on_timeout)
        logger.debug(f"OAuth callback server listening on {self.host}:{self.port}{self.path}")

    async def wait_for_callback(self) -> CallbackResult:
        """
        Wait for the first of: redirect received, timeout elapsed.

        Returns:
            CallbackResult with the authorization code and state

        Raises:
            CallbackParseError: If the redirect carried an error or was malformed
            CallbackTimeoutError: If no redirect arrived in time
        """
        if self._outcome is None:
            raise RuntimeError("Callback server has not been started")
        return await self._outcome

    async def stop(self) -> None:
        """Release the port and disarm the timer"""
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        if self.runner is not None:
            runner, self.runner = self.runner, None
            await runner.cleanup()
            logger.debug("OAuth callback server stopped")


async def start_callback_server(
    redirect_uri: str,
    timeout: float = CALLBACK_TIMEOUT_SECONDS,
) -> OAuthCallbackServer:
    """
    Start OAuth callback server.

    Args:
        redirect_uri: Configured redirect URI (host, port and path to serve)
        timeout: Seconds to wait for the redirect

    Returns:
        Listening OAuthCallbackServer instance
    """
    server = OAuthCallbackServer(redirect_uri, timeout=timeout)
    await server.start()
    return server


async def wait_for_oauth_callback(
    redirect_uri: str,
    timeout: float = CALLBACK_TIMEOUT_SECONDS,
) -> CallbackResult:
    """Listen for a single OAuth redirect; the port is released before returning"""
    server = await start_callback_server(redirect_uri, timeout=timeout)
    try:
        return await server.wait_for_callback()
    finally:
        await server.stop()
