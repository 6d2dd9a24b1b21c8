"""Wiring of the authentication and API components for one CLI run"""

from dataclasses import dataclass
from typing import Optional

from api import GraphQLClient, PodcastApi
from config.loader import CliConfig, load_cli_config
from podcast_auth import AuthService, SessionManager, SessionStore


@dataclass
class CliRuntime:
    """Everything a CLI command needs"""
    config: CliConfig
    auth: AuthService
    store: SessionStore
    session_manager: SessionManager
    api: PodcastApi


def create_runtime(config: Optional[CliConfig] = None) -> CliRuntime:
    """Build config -> AuthService -> SessionStore -> SessionManager -> PodcastApi"""
    config = config or load_cli_config()
    auth = AuthService(config)
    store = SessionStore(config.session_file)
    session_manager = SessionManager(auth, store)
    client = GraphQLClient(config.api_url, session_manager, timeout=config.http_timeout)
    return CliRuntime(
        config=config,
        auth=auth,
        store=store,
        session_manager=session_manager,
        api=PodcastApi(client),
    )
