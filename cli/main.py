"""CLI entry point and argument parsing"""

import argparse
import sys
from typing import List, Optional

from rich.console import Console

import settings
from cli.cli_app import PodcastTrackerCLI
from cli.debug_setup import setup_debug_console
from podcast_auth import PodcastAuthError


AUTH_ACTIONS = ("login", "status", "logout", "token")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=settings.PROGRAM_NAME,
        description="Podcast Tracker command line client",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose (DEBUG) logging")
    parser.add_argument(
        "--debug-log",
        default=None,
        metavar="FILE",
        help="Append debug logs and console output to FILE",
    )

    subparsers = parser.add_subparsers(dest="command")
    auth_parser = subparsers.add_parser("auth", help="Manage the local sign-in session")
    auth_parser.add_argument(
        "action",
        nargs="?",
        default="status",
        choices=AUTH_ACTIONS,
        help="Auth action (default: status)",
    )
    subparsers.add_parser("smoke", help="Call the API with the current session")
    return parser


def run_cli(argv: Optional[List[str]] = None, cli: Optional[PodcastTrackerCLI] = None) -> int:
    """Parse arguments, run the command and return the process exit code"""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command not in ("auth", "smoke"):
        parser.print_help()
        return 2

    verbose = args.verbose or settings.VERBOSE
    log_file = args.debug_log or settings.DEBUG_LOG_FILE or None
    console = setup_debug_console(verbose, log_file, settings.LOG_LEVEL)

    try:
        if cli is None:
            cli = PodcastTrackerCLI(console=console, verbose=verbose)
        try:
            if args.command == "smoke":
                return cli.run_smoke()
            return cli.run(args.action)
        finally:
            cli.close()

    except PodcastAuthError as e:
        console.print(f"[red]ERROR:[/red] {e}")
        return 1
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted by user[/yellow]")
        return 130
    except Exception as e:
        console.print(f"\n[red]Fatal error:[/red] {e}")
        if verbose:
            import traceback
            traceback.print_exc()
        return 1


def main():
    """Entry point for the CLI"""
    sys.exit(run_cli())


if __name__ == "__main__":
    main()
