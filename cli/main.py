"""CLI entry point and argument parsing"""

import argparse
import logging
import sys

from rich.console import Console

import settings
from errors import XPosterError
from jobs import build_services, set_services
from cli.auth_handlers import authorize, list_users, remove_user, verify_tokens
from cli.debug_setup import setup_logging
from cli.post_handlers import diagnose, list_channel, post_scheduled, post_user
from cli.server_handlers import serve

logger = logging.getLogger(__name__)

console = Console()


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with one subcommand per operation"""
    parser = argparse.ArgumentParser(
        prog="x-sheet-poster",
        description="Post content from a spreadsheet to X on behalf of authorized users",
    )
    parser.add_argument("--debug", "-d", action="store_true", help="Enable debug logging")
    commands = parser.add_subparsers(dest="command", required=True)

    serve_parser = commands.add_parser("serve", help="Run the OAuth callback server")
    serve_parser.add_argument("--bind", "-b", default=None, help="Override bind address (default: from config)")
    serve_parser.add_argument("--port", "-p", type=int, default=None, help="Override port (default: from config)")

    authorize_parser = commands.add_parser("authorize", help="Authorize an X account from the terminal")
    authorize_parser.add_argument("--no-browser", action="store_true", help="Print the URL instead of opening it")

    post_parser = commands.add_parser("post", help="Post a random text as the first stored user")
    post_parser.add_argument("--channel", "-c", default=settings.DEFAULT_CHANNEL, help="Content sheet to draw from")

    post_user_parser = commands.add_parser("post-user", help="Post as a specific user")
    post_user_parser.add_argument("user_id", help="X user ID")
    post_user_parser.add_argument("--text", "-t", default=None, help="Text to post instead of a random pick")
    post_user_parser.add_argument("--channel", "-c", default=settings.DEFAULT_CHANNEL, help="Content sheet to draw from")

    commands.add_parser("users", help="List authorized users")

    content_parser = commands.add_parser("content", help="List the posts of a content sheet")
    content_parser.add_argument("--channel", "-c", default=settings.DEFAULT_CHANNEL, help="Content sheet to list")

    commands.add_parser("verify-tokens", help="Verify every stored token, refreshing rejected ones")

    remove_parser = commands.add_parser("remove-user", help="Delete a user's stored credentials")
    remove_parser.add_argument("user_id", help="X user ID")
    remove_parser.add_argument("--yes", "-y", action="store_true", help="Do not ask for confirmation")

    commands.add_parser("diagnose", help="Check configuration, store, content sheets and tokens")

    return parser


def run_command(args: argparse.Namespace, services) -> bool:
    """Dispatch a parsed command; returns True on success"""
    if args.command == "serve":
        return serve(services, console, bind_address=args.bind, port=args.port)
    if args.command == "authorize":
        return authorize(services, console, open_browser=not args.no_browser)
    if args.command == "post":
        return post_scheduled(services, args.channel, console)
    if args.command == "post-user":
        return post_user(services, args.user_id, args.text, args.channel, console)
    if args.command == "users":
        return list_users(services, console)
    if args.command == "content":
        return list_channel(services, args.channel, console)
    if args.command == "verify-tokens":
        return verify_tokens(services, console)
    if args.command == "remove-user":
        return remove_user(services, args.user_id, console, assume_yes=args.yes)
    if args.command == "diagnose":
        return diagnose(services, console)
    raise ValueError(f"Unknown command {args.command!r}")


def main(argv=None):
    """Entry point for the CLI"""
    args = build_parser().parse_args(argv)
    setup_logging(debug=args.debug)

    try:
        services = build_services()
    except (XPosterError, ValueError) as e:
        console.print(f"[red]ERROR:[/red] {e}")
        sys.exit(2)

    set_services(services)
    try:
        ok = run_command(args, services)
    finally:
        services.oauth.close()
        set_services(None)

    sys.exit(0 if ok else 1)


if __name__ == "__main__":
    main()
