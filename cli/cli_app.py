"""Main CLI application class for the Podcast Tracker commands"""

import asyncio
import logging
from typing import Optional

from rich.console import Console

from cli.runtime import CliRuntime, create_runtime
from cli.status_display import build_status_table
from podcast_auth import LOGIN_HINT
from utils.format import format_expiry, time_until


logger = logging.getLogger(__name__)


class PodcastTrackerCLI:
    """Runs `podcast-tracker auth ...` commands against one session manager"""

    def __init__(
        self,
        console: Optional[Console] = None,
        runtime: Optional[CliRuntime] = None,
        verbose: bool = False,
    ):
        self.console = console or Console()
        self.runtime = runtime or create_runtime()
        self.session_manager = self.runtime.session_manager
        self.verbose = verbose

        # Create event loop
        self.loop = asyncio.new_event_loop()
        asyncio.set_event_loop(self.loop)

    def close(self):
        """Close the event loop"""
        if not self.loop.is_closed():
            self.loop.close()

    def run_auth_login(self) -> int:
        """Run the browser sign-in flow and persist the session"""
        self.console.print("\n[bold cyan]Podcast Tracker Sign-in[/bold cyan]\n")
        self.console.print("Opening browser for sign-in...")
        self.console.print(f"[dim]Waiting up to {int(self.runtime.config.callback_timeout)}s for the callback[/dim]")

        session = self.loop.run_until_complete(self.session_manager.login())

        self.console.print("[bold green]Signed in successfully.[/bold green]")
        self.console.print(
            f"[dim]Session valid until {format_expiry(session.expires_at)} "
            f"({time_until(session.expires_at)})[/dim]"
        )
        return 0

    def run_auth_status(self) -> int:
        """Show the stored session, if any"""
        session = self.loop.run_until_complete(self.session_manager.get_session())

        if session is None:
            self.console.print("[red]Not authenticated.[/red]")
            self.console.print(f"[dim]{LOGIN_HINT}[/dim]")
            return 1

        self.console.print(build_status_table(session))
        return 0

    def run_auth_logout(self) -> int:
        """Sign out remotely (best effort) and clear the local session"""
        self.loop.run_until_complete(self.session_manager.logout())
        self.console.print("[green]Signed out and local session cleared.[/green]")
        return 0

    def run_auth_token(self) -> int:
        """Print a valid ID token, refreshing it first when needed"""
        id_token = self.loop.run_until_complete(self.session_manager.get_valid_id_token())
        # Plain output so the token can be piped
        self.console.print(id_token, markup=False, highlight=False, soft_wrap=True)
        return 0

    def run_smoke(self) -> int:
        """Call the API with the current session to check that everything is wired up"""
        api = self.runtime.api
        self.console.print(f"[dim]API: {self.runtime.config.api_url}[/dim]")

        health = self.loop.run_until_complete(api.health())
        self.console.print(f"Health: {health or '-'}")

        shows = self.loop.run_until_complete(api.search_shows("podcast", limit=3))
        self.console.print(f"Search loaded: {len(shows)} items.")
        return 0

    def run(self, action: str) -> int:
        """Dispatch one auth action"""
        handlers = {
            "login": self.run_auth_login,
            "status": self.run_auth_status,
            "logout": self.run_auth_logout,
            "token": self.run_auth_token,
        }
        handler = handlers.get(action)
        if handler is None:
            raise ValueError(f"Unknown auth action: {action}")

        logger.debug(f"Running auth action: {action}")
        return handler()
