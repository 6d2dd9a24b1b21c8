"""Session lifecycle: cached reads, login/logout and coalesced refresh"""

import asyncio
import logging
import time
from typing import Callable, Optional

from .auth_service import AuthService
from .constants import LOGIN_HINT, REFRESH_SKEW_MS
from .exceptions import NotAuthenticatedError, SessionExpiredError
from .models import SessionRecord
from .storage import SessionStore


logger = logging.getLogger(__name__)


def _now_ms() -> int:
    return int(time.time() * 1000)


class SessionManager:
    """Owns the in-memory session and the single in-flight refresh

    States: unauthenticated, cached (valid or expiring), refreshing. A failed
    refresh always ends in unauthenticated: both the cache and the session
    file are cleared.
    """

    def __init__(
        self,
        auth: AuthService,
        store: SessionStore,
        clock: Callable[[], int] = _now_ms,
        refresh_skew_ms: int = REFRESH_SKEW_MS,
    ):
        self.auth = auth
        self.store = store
        self._clock = clock
        self.refresh_skew_ms = refresh_skew_ms

        self._cached_session: Optional[SessionRecord] = None
        # True once the store has been read; None then means "signed out"
        self._session_loaded = False
        self._refresh_task: Optional[asyncio.Task] = None

    async def get_session(self) -> Optional[SessionRecord]:
        """Return the cached session, loading it from disk on first use"""
        if self._session_loaded:
            return self._cached_session

        self._cached_session = self.store.load()
        self._session_loaded = True
        return self._cached_session

    async def require_session(self) -> SessionRecord:
        """Like get_session, but raises NotAuthenticatedError when signed out"""
        session = await self.get_session()
        if session is None:
            raise NotAuthenticatedError(f"Not authenticated. {LOGIN_HINT}")
        return session

    async def login(self) -> SessionRecord:
        """Sign in through the browser and persist the new session"""
        session = await self.auth.login()
        self.store.save(session)
        self._cache(session)
        logger.info("Signed in, session saved")
        return session

    async def logout(self) -> None:
        """Best-effort remote sign-out, then always clear local state"""
        try:
            session = await self.get_session()
            await self.auth.logout(session.id_token if session else None)
        except Exception as e:
            logger.warning(f"Remote sign-out failed: {e}")
        finally:
            self._cache(None)
            self.store.clear()

    async def get_valid_id_token(self) -> str:
        session = await self.get_valid_session()
        return session.id_token

    async def get_valid_session(self) -> SessionRecord:
        """
        Return a session that will not expire within the refresh skew.

        Concurrent callers share one refresh: whoever finds the session
        expiring first starts it, everyone else awaits the same task.

        Raises:
            NotAuthenticatedError: If there is no session at all
            SessionExpiredError: If the session could not be refreshed or saved
            StorageError: If the expired session could not be cleared
        """
        session = await self.require_session()

        if not session.is_expiring(self._clock(), self.refresh_skew_ms):
            return session

        if self._refresh_task is None:
            logger.info("Session expiring, refreshing tokens...")
            self._refresh_task = asyncio.ensure_future(self._run_refresh())

        # Shield so one cancelled caller does not cancel the shared refresh
        return await asyncio.shield(self._refresh_task)

    async def _run_refresh(self) -> SessionRecord:
        try:
            return await self._refresh_session()
        finally:
            self._refresh_task = None

    async def _refresh_session(self) -> SessionRecord:
        session = await self.get_session()
        refresh_token = session.refresh_token if session else None
        if not refresh_token:
            logger.warning("No refresh token available. Clearing local session.")
            self._clear_local()
            raise SessionExpiredError(f"Session expired. {LOGIN_HINT}")

        try:
            refreshed = await self.auth.refresh(refresh_token)
            self.store.save(refreshed)
        except Exception as e:
            logger.warning(f"Refresh failed: {e}")
            self._clear_local()
            raise SessionExpiredError(f"Session expired. {LOGIN_HINT}") from e

        self._cache(refreshed)
        logger.info("Session refreshed")
        return refreshed

    def _cache(self, session: Optional[SessionRecord]) -> None:
        self._cached_session = session
        self._session_loaded = True

    def _clear_local(self) -> None:
        self._cache(None)
        self.store.clear()
