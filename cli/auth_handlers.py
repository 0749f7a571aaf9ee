"""Authentication handlers for CLI"""

import logging
import webbrowser
from typing import Optional, Tuple
from urllib.parse import parse_qs, urlparse

from rich.prompt import Confirm

import settings
from errors import MissingVerifier, StateMismatch, XPosterError
from jobs import Services, complete_authentication, validate_and_refresh_all_tokens
from cli.status_display import show_token_results, show_users

logger = logging.getLogger(__name__)


def parse_callback_url(callback_url: str) -> Tuple[Optional[str], Optional[str]]:
    """
    Extract code and state from a pasted redirect URL

    Args:
        callback_url: Full URL the browser was redirected to

    Returns:
        Tuple of (code, state); either is None when absent
    """
    query = parse_qs(urlparse(callback_url.strip()).query)
    code = query.get("code", [None])[0]
    state = query.get("state", [None])[0]
    return code, state


def authorize(services: Services, console, open_browser: bool = True) -> bool:
    """
    Run the authorization flow from the terminal

    The user approves access in the browser, then pastes the URL X
    redirected to. Code and state are completed in this process, so no
    callback server needs to be running.

    Args:
        services: Wired services
        console: Rich console for output
        open_browser: Try to open the authorization URL automatically

    Returns:
        True if the user's credentials were saved
    """
    console.print("\n[bold]Step 1:[/bold] Authorize the application on X")
    auth_url = services.oauth.begin_authorization()

    if open_browser and webbrowser.open(auth_url):
        console.print("[green][OK][/green] Browser opened successfully")
    else:
        console.print(f"Please open this URL manually:\n{auth_url}")

    console.print("\n[bold]Step 2:[/bold] Paste the URL your browser was redirected to")
    console.print(f"[dim]It starts with {settings.REDIRECT_URI}?state=...&code=...[/dim]\n")

    try:
        callback_url = input("Redirect URL: ")
    except (KeyboardInterrupt, EOFError):
        console.print("\n[yellow]Authorization cancelled by user[/yellow]")
        return False

    code, state = parse_callback_url(callback_url)
    if not code or not state:
        console.print("[red]The URL has no code and state. Paste the complete redirect URL.[/red]")
        return False

    console.print("\n[bold]Step 3:[/bold] Exchanging code for tokens...")
    try:
        result = complete_authentication(code, state, services)
    except (StateMismatch, MissingVerifier) as e:
        console.print(f"[red][ERROR][/red] {e}. Start the authorization again.")
        return False
    except XPosterError as e:
        console.print(f"[red][ERROR][/red] Authorization failed: {e}")
        return False

    console.print(f"[green][OK][/green] Authorized {result.user_name} ({result.user_id})")
    return True


def list_users(services: Services, console) -> bool:
    """Show the stored users"""
    try:
        credentials = services.credentials.get_credentials()
    except XPosterError as e:
        console.print(f"[red][ERROR][/red] {e}")
        return False
    if not credentials:
        console.print("[yellow]No authorized users. Run: x-sheet-poster authorize[/yellow]")
        return True
    show_users(credentials, console)
    return True


def verify_tokens(services: Services, console) -> bool:
    """
    Verify and refresh every stored token

    Returns:
        True if every token is valid after the check
    """
    try:
        credentials = services.credentials.get_credentials()
    except XPosterError as e:
        console.print(f"[red][ERROR][/red] {e}")
        return False

    results = validate_and_refresh_all_tokens(services)
    if not results:
        console.print("[yellow]No authorized users to verify[/yellow]")
        return True
    show_token_results(results, credentials, console)
    return all(results.values())


def remove_user(services: Services, user_id: str, console, assume_yes: bool = False) -> bool:
    """
    Delete a user's credentials

    Args:
        services: Wired services
        user_id: X user ID to delete
        console: Rich console for output
        assume_yes: Skip the confirmation prompt

    Returns:
        True if the user was removed
    """
    if not assume_yes and not Confirm.ask(f"Remove credentials for user {user_id}?", default=False):
        console.print("[dim]Nothing removed[/dim]")
        return False

    try:
        removed = services.credentials.delete_credentials(user_id)
    except XPosterError as e:
        console.print(f"[red][ERROR][/red] {e}")
        return False

    if removed:
        console.print(f"[green][OK][/green] Removed user {user_id}")
    else:
        console.print(f"[yellow]No credentials stored for user {user_id}[/yellow]")
    return removed
