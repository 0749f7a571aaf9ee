"""Posting and content handlers for CLI"""

from typing import Optional

from errors import XPosterError
from jobs import Services, post_for_specific_user, run_diagnostics, scheduled_post
from cli.status_display import show_content, show_diagnostics, show_post_result


def post_scheduled(services: Services, channel: str, console) -> bool:
    """Run the scheduled-post job once for ``channel``"""
    result = scheduled_post(channel, services)
    if result is None:
        console.print(f"[red][ERROR][/red] Scheduled post for '{channel}' failed, see the log")
        return False
    show_post_result(result, console)
    return result.success


def post_user(services: Services, user_id: str, text: Optional[str], channel: str, console) -> bool:
    """Post as one user, either ``text`` or a random pick from ``channel``"""
    result = post_for_specific_user(user_id, text, channel, services)
    show_post_result(result, console)
    return result.success


def list_channel(services: Services, channel: str, console) -> bool:
    """Show the content pool of ``channel``, creating the sheet if missing"""
    try:
        contents = services.content.list_content(channel)
    except XPosterError as e:
        console.print(f"[red][ERROR][/red] {e}")
        return False
    show_content(channel, contents, console)
    return True


def diagnose(services: Services, console) -> bool:
    """Run diagnostics; fails when credentials or any sheet are unreadable"""
    report = run_diagnostics(services)
    show_diagnostics(report, console)
    unreadable = [channel for channel, count in report["channels"].items() if count is None]
    return "credentials_error" not in report and not unreadable
