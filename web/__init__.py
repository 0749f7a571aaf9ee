"""
X Sheet Poster web service: OAuth callback, health and credential status routes.
"""
from .server import CallbackServer
from .app import app

__version__ = "1.0.0"

__all__ = [
    'CallbackServer',
    'app',
]
