"""Tests for the `podcast-tracker auth` command line interface."""

# pylint: disable=redefined-outer-name

from __future__ import annotations

import importlib
import io

from unittest.mock import AsyncMock, MagicMock

import pytest

from rich.console import Console

from cli.cli_app import PodcastTrackerCLI
from cli.runtime import CliRuntime, create_runtime
from conftest import make_session
from config.loader import CliConfig
from podcast_auth.models import SessionRecord

# `cli/__init__.py` re-exports the `main` function, which shadows the
# `cli.main` submodule on attribute access; fetch the module itself.
cli_main = importlib.import_module("cli.main")


@pytest.fixture()
def output() -> io.StringIO:
    return io.StringIO()


@pytest.fixture()
def console(output: io.StringIO) -> Console:
    return Console(file=output, width=200, force_terminal=False, color_system=None)


@pytest.fixture()
def runtime(cli_config: CliConfig) -> CliRuntime:
    """Runtime wired to a temp session file and a mocked auth service."""
    runtime = create_runtime(cli_config)
    auth = MagicMock()
    auth.login = AsyncMock(return_value=make_session(email="new@example.com"))
    auth.refresh = AsyncMock(return_value=make_session())
    auth.logout = AsyncMock()
    runtime.session_manager.auth = auth
    runtime.auth = auth
    return runtime


@pytest.fixture()
def app(console: Console, runtime: CliRuntime):
    cli_app = PodcastTrackerCLI(console=console, runtime=runtime)
    yield cli_app
    cli_app.close()


class TestRuntime:
    """Tests for create_runtime wiring."""

    def test_components_share_config(self, cli_config: CliConfig) -> None:
        runtime = create_runtime(cli_config)
        assert runtime.config is cli_config
        assert runtime.session_manager.auth is runtime.auth
        assert runtime.session_manager.store is runtime.store
        assert str(runtime.store.session_file) == cli_config.session_file
        assert runtime.api.client.session_manager is runtime.session_manager
        assert runtime.api.client.url == cli_config.api_url


class TestAuthCommands:
    """Tests for PodcastTrackerCLI actions."""

    def test_status_not_authenticated(self, app: PodcastTrackerCLI, output: io.StringIO) -> None:
        assert app.run("status") == 1
        text = output.getvalue()
        assert "Not authenticated." in text
        assert "podcast-tracker auth login" in text

    def test_status_authenticated(
        self,
        app: PodcastTrackerCLI,
        runtime: CliRuntime,
        valid_session: SessionRecord,
        output: io.StringIO,
    ) -> None:
        runtime.store.save(valid_session)

        assert app.run("status") == 0

        text = output.getvalue()
        assert "listener@example.com" in text
        assert "user-123" in text
        assert "Approved:" in text
        assert "Access token expiry:" in text
        assert "ID token expiry:" in text

    def test_status_pending_approval(
        self, app: PodcastTrackerCLI, runtime: CliRuntime, output: io.StringIO
    ) -> None:
        runtime.store.save(make_session(approved="false"))
        assert app.run("status") == 0
        assert "pending" in output.getvalue()

    def test_login(self, app: PodcastTrackerCLI, runtime: CliRuntime, output: io.StringIO) -> None:
        assert app.run("login") == 0
        assert "Signed in successfully." in output.getvalue()
        assert runtime.store.load() is not None

    def test_logout(
        self,
        app: PodcastTrackerCLI,
        runtime: CliRuntime,
        valid_session: SessionRecord,
        output: io.StringIO,
    ) -> None:
        runtime.store.save(valid_session)

        assert app.run("logout") == 0

        assert "Signed out and local session cleared." in output.getvalue()
        assert runtime.store.load() is None
        runtime.auth.logout.assert_awaited_once_with(valid_session.id_token)

    def test_token(
        self,
        app: PodcastTrackerCLI,
        runtime: CliRuntime,
        valid_session: SessionRecord,
        output: io.StringIO,
    ) -> None:
        runtime.store.save(valid_session)
        assert app.run("token") == 0
        assert output.getvalue().strip() == valid_session.id_token

    def test_smoke(self, app: PodcastTrackerCLI, runtime: CliRuntime, output: io.StringIO) -> None:
        api = MagicMock()
        api.health = AsyncMock(return_value="ok")
        api.search_shows = AsyncMock(return_value=[{"id": "a"}, {"id": "b"}])
        runtime.api = api

        assert app.run_smoke() == 0

        text = output.getvalue()
        assert "Health: ok" in text
        assert "Search loaded: 2 items." in text
        api.search_shows.assert_awaited_once_with("podcast", limit=3)

    def test_unknown_action(self, app: PodcastTrackerCLI) -> None:
        with pytest.raises(ValueError):
            app.run("whoami")


class TestRunCli:
    """Tests for argument parsing and exit codes."""

    @pytest.fixture(autouse=True)
    def _quiet_console(self, monkeypatch, console: Console) -> None:
        monkeypatch.setattr(cli_main, "setup_debug_console", lambda *args, **kwargs: console)

    def test_auth_defaults_to_status(self, app: PodcastTrackerCLI, output: io.StringIO) -> None:
        assert cli_main.run_cli(["auth"], cli=app) == 1
        assert "Not authenticated." in output.getvalue()

    def test_auth_error_exit_code(self, app: PodcastTrackerCLI, output: io.StringIO) -> None:
        """Authentication errors are reported and exit with 1."""
        assert cli_main.run_cli(["auth", "token"], cli=app) == 1
        assert "ERROR:" in output.getvalue()
        assert "Not authenticated" in output.getvalue()

    def test_smoke_without_session(self, app: PodcastTrackerCLI, output: io.StringIO) -> None:
        """The smoke command needs a session and says how to get one."""
        assert cli_main.run_cli(["smoke"], cli=app) == 1
        assert "Not authenticated" in output.getvalue()

    def test_verbose_flag(self, app: PodcastTrackerCLI) -> None:
        assert cli_main.run_cli(["-v", "auth", "status"], cli=app) == 1

    def test_no_command_prints_help(self, capsys) -> None:
        assert cli_main.run_cli([]) == 2
        assert "auth" in capsys.readouterr().out

    def test_invalid_action(self) -> None:
        with pytest.raises(SystemExit):
            cli_main.run_cli(["auth", "whoami"])

    def test_main_exits_with_code(self, monkeypatch) -> None:
        monkeypatch.setattr(cli_main, "run_cli", lambda: 0)
        with pytest.raises(SystemExit) as exc_info:
            cli_main.main()
        assert exc_info.value.code == 0
