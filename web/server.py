"""
CallbackServer class for CLI control of the FastAPI application.
"""
import logging
from typing import Optional

import uvicorn

from settings import PORT, LOG_LEVEL, BIND_ADDRESS, CALLBACK_PATH, REDIRECT_URI
from .app import app

logger = logging.getLogger(__name__)


class CallbackServer:
    """Web server wrapper for CLI control"""

    def __init__(self, bind_address: Optional[str] = None, port: Optional[int] = None):
        self.server = None
        self.config = None
        self.bind_address = bind_address or BIND_ADDRESS
        self.port = port or PORT

    def run(self):
        """Run the callback server (blocking)"""
        logger.info(f"Starting X Sheet Poster on http://{self.bind_address}:{self.port}")
        logger.info(f"OAuth callback route: {CALLBACK_PATH} (registered redirect URI: {REDIRECT_URI})")
        self.config = uvicorn.Config(
            app,
            host=self.bind_address,
            port=self.port,
            log_level=LOG_LEVEL,
            access_log=False  # Request logging is done by our middleware
        )
        self.server = uvicorn.Server(self.config)
        self.server.run()

    def stop(self):
        """Stop the callback server"""
        if self.server:
            self.server.should_exit = True
