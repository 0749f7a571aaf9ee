"""Status display functionality for CLI"""

from typing import Any, Dict, List

from rich.table import Table

from poster import PostResult
from storage.models import Credential


def show_users(credentials: List[Credential], console):
    """
    Display stored users with masked tokens

    Args:
        credentials: Stored credentials
        console: Rich console for output
    """
    table = Table(title=f"Authorized users ({len(credentials)})")
    table.add_column("User ID", style="cyan")
    table.add_column("User Name")
    table.add_column("Access Token", style="dim")
    table.add_column("Refresh Token", style="dim")

    for credential in credentials:
        summary = credential.summary()
        table.add_row(summary["user_id"], summary["user_name"],
                      summary["access_token"], summary["refresh_token"])

    console.print(table)


def show_content(channel: str, contents: List[str], console):
    """Display the content pool of a channel"""
    table = Table(title=f"Sheet '{channel}' ({len(contents)} posts)")
    table.add_column("#", justify="right", style="cyan")
    table.add_column("Post")

    for index, text in enumerate(contents, start=1):
        table.add_row(str(index), text)

    console.print(table)


def show_token_results(results: Dict[str, bool], credentials: List[Credential], console):
    """Display per-user token validity"""
    names = {c.user_id: c.user_name for c in credentials}
    table = Table(title="Token Status")
    table.add_column("User ID", style="cyan")
    table.add_column("User Name")
    table.add_column("Status")

    for user_id, valid in results.items():
        status = "[green]VALID[/green]" if valid else "[red]INVALID / REFRESH FAILED[/red]"
        table.add_row(user_id, names.get(user_id, ""), status)

    console.print(table)


def show_post_result(result: PostResult, console):
    """Display the outcome of a post"""
    if result.success:
        console.print(f"[green][OK][/green] {result.message} (id: {result.post_id})")
        if result.new_tokens:
            console.print("[dim]Tokens were refreshed and saved[/dim]")
    else:
        console.print(f"[red][ERROR][/red] {result.message}")
        if result.needs_reauthorization:
            console.print("[yellow]The user must authorize again (run: x-sheet-poster authorize)[/yellow]")


def show_diagnostics(report: Dict[str, Any], console):
    """Display the diagnostics report"""
    table = Table(title="Diagnostics")
    table.add_column("Check", style="cyan")
    table.add_column("Result")

    table.add_row("CLIENT_ID configured", "Yes" if report["client_id_configured"] else "No")
    table.add_row("Store backend", report["store_backend"])
    table.add_row("Authorized users", str(report["users"]))
    if report.get("credentials_error"):
        table.add_row("Credentials", f"[red]{report['credentials_error']}[/red]")

    for channel, count in report["channels"].items():
        table.add_row(f"Sheet '{channel}'", "[red]unreadable[/red]" if count is None else f"{count} posts")

    for user_id, valid in report["tokens"].items():
        table.add_row(f"Token {user_id}", "[green]valid[/green]" if valid else "[red]invalid[/red]")

    console.print(table)
