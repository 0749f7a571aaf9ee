"""OAuth authorization URL construction"""

import logging
from urllib.parse import urlencode

from settings import AUTHORIZE_URL, SCOPES
from .models import PkceSession
from .pkce import PKCESessionStore, generate_pkce, generate_state

logger = logging.getLogger(__name__)


class AuthorizationURLBuilder:
    """Builds OAuth authorization URLs with PKCE"""

    def __init__(
        self,
        session_store: PKCESessionStore,
        client_id: str,
        redirect_uri: str,
        scopes: str = SCOPES,
        authorize_url: str = AUTHORIZE_URL,
    ):
        self.sessions = session_store
        self.client_id = client_id
        self.redirect_uri = redirect_uri
        self.scopes = scopes
        self.authorize_url = authorize_url

    def get_authorize_url(self) -> str:
        """Start a fresh PKCE session and construct the authorize URL

        Any previously stored session is overwritten.

        Returns:
            Full authorization URL
        """
        code_verifier, code_challenge = generate_pkce()
        state = generate_state()

        # Save PKCE values for the callback
        self.sessions.save(PkceSession(code_verifier=code_verifier, state=state))

        params = {
            "response_type": "code",
            "client_id": self.client_id,
            "redirect_uri": self.redirect_uri,
            "scope": self.scopes,
            "state": state,
            "code_challenge": code_challenge,
            "code_challenge_method": "S256",
        }

        url = f"{self.authorize_url}?{urlencode(params)}"
        logger.info("Generated X authorization URL")
        logger.debug(f"Authorization URL: {url[:80]}...")
        return url
