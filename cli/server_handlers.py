"""Server handlers for CLI"""

import logging
from typing import Optional

import settings
from jobs import Services
from web import CallbackServer

logger = logging.getLogger(__name__)


def serve(services: Services, console, bind_address: Optional[str] = None, port: Optional[int] = None) -> bool:
    """
    Run the callback server in the foreground until interrupted

    Args:
        services: Wired services, built before the server starts so
            configuration errors surface immediately
        console: Rich console for output
        bind_address: Override BIND_ADDRESS
        port: Override PORT

    Returns:
        True once the server has shut down
    """
    server = CallbackServer(bind_address=bind_address, port=port)
    console.print(f"[green]Callback server on http://{server.bind_address}:{server.port}[/green]")
    console.print(f"Start an authorization at {settings.REDIRECT_URI}")
    logger.debug(f"Serving with {type(services.credentials.backend).__name__}")
    try:
        server.run()
    except KeyboardInterrupt:
        server.stop()
    console.print("[dim]Server stopped[/dim]")
    return True
