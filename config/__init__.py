"""Configuration module for the Podcast Tracker CLI"""

from .loader import (
    CliConfig,
    ConfigLoader,
    get_config_loader,
    load_cli_config,
    reset_config_loader,
)

__all__ = [
    "CliConfig",
    "ConfigLoader",
    "get_config_loader",
    "load_cli_config",
    "reset_config_loader",
]
