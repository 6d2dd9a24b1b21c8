"""CLI package for the Podcast Tracker client

This package provides the `podcast-tracker auth` command-line interface
on top of the podcast_auth session lifecycle.
"""

from cli.cli_app import PodcastTrackerCLI
from cli.main import main, run_cli

__all__ = [
    "PodcastTrackerCLI",
    "main",
    "run_cli",
]
