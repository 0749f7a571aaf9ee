"""CLI package for X Sheet Poster

Subcommands to authorize accounts, post, inspect the store and run the
callback server.
"""

from cli.main import main

__all__ = [
    "main",
]
