"""Status display functionality for CLI"""

from rich.table import Table

from podcast_auth import SessionRecord, decode_token_payload, is_approved
from utils.format import format_expiry, time_until


def _claim(payload: dict, name: str) -> str:
    value = payload.get(name)
    return value if isinstance(value, str) and value else "-"


def build_status_table(session: SessionRecord) -> Table:
    """
    Build the session status table

    Args:
        session: Current session

    Returns:
        Rich table with identity claims and token expiries
    """
    payload = decode_token_payload(session.id_token)

    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column(style="cyan", width=22)
    table.add_column()

    table.add_row("Authenticated:", "[green]yes[/green]")
    table.add_row("User:", _claim(payload, "email"))
    table.add_row("Subject:", _claim(payload, "sub"))
    table.add_row(
        "Approved:",
        "[green]yes[/green]" if is_approved(session.id_token) else "[yellow]pending[/yellow]",
    )
    table.add_row(
        "Access token expiry:",
        f"{format_expiry(session.expires_at)} [dim]({time_until(session.expires_at)})[/dim]",
    )
    table.add_row(
        "ID token expiry:",
        f"{format_expiry(session.id_token_expires_at)} [dim]({time_until(session.id_token_expires_at)})[/dim]",
    )
    table.add_row("Refresh token:", "yes" if session.refresh_token else "[dim]no[/dim]")

    return table
