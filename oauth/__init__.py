"""OAuth 2.0 (PKCE) authentication package for the X API"""

import logging
import secrets
from typing import Optional

import httpx

from errors import MissingVerifier, StateMismatch
from settings import HTTP_TIMEOUT, SCOPES, TOKEN_URL, USER_INFO_URL, AUTHORIZE_URL
from .authorization import AuthorizationURLBuilder
from .models import AuthorizationResult, PkceSession, TokenPair, UserInfo
from .pkce import PKCESessionStore, code_challenge_for, generate_pkce
from .request_builder import build_basic_auth_header, build_bearer_headers, build_token_request
from .token_exchange import exchange_code
from .token_refresh import refresh_tokens
from .user_info import fetch_user_info

logger = logging.getLogger(__name__)


class OAuthClient:
    """OAuth PKCE flow implementation

    This class orchestrates the OAuth authentication flow including:
    - PKCE generation and single-slot session management
    - Authorization URL construction
    - Token exchange and identity lookup
    - Token refresh
    - Access token verification
    """

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        redirect_uri: str,
        http_client: Optional[httpx.Client] = None,
        session_store: Optional[PKCESessionStore] = None,
        scopes: str = SCOPES,
        authorize_url: str = AUTHORIZE_URL,
        token_url: str = TOKEN_URL,
        user_info_url: str = USER_INFO_URL,
    ):
        self.client_id = client_id
        self.client_secret = client_secret
        self.redirect_uri = redirect_uri
        self.http = http_client or httpx.Client(timeout=HTTP_TIMEOUT)
        self.sessions = session_store or PKCESessionStore()
        self.token_url = token_url
        self.user_info_url = user_info_url
        self.auth_builder = AuthorizationURLBuilder(
            self.sessions, client_id, redirect_uri, scopes=scopes, authorize_url=authorize_url
        )

    # Authorization
    def begin_authorization(self) -> str:
        """Generate a fresh PKCE session and return the authorization URL

        Returns:
            Full authorization URL
        """
        return self.auth_builder.get_authorize_url()

    def complete_authorization(self, code: str, state: str) -> AuthorizationResult:
        """Finish the flow started by ``begin_authorization``

        The stored session is cleared whatever the outcome, so a code/state
        pair can never be replayed.

        Args:
            code: Authorization code from the callback
            state: State echoed back by X

        Returns:
            AuthorizationResult with tokens and identity

        Raises:
            MissingVerifier: If no authorization is in flight
            StateMismatch: If ``state`` differs from the stored one
            TokenExchangeFailed: If X rejects the code
            UserInfoFailed: If the identity lookup fails
        """
        try:
            session = self.sessions.load()
            if session is None:
                raise MissingVerifier()
            if not state or not secrets.compare_digest(session.state.encode("utf-8"), state.encode("utf-8")):
                logger.warning("OAuth callback state mismatch, aborting authorization")
                raise StateMismatch()

            tokens = exchange_code(
                self.http,
                self.token_url,
                self.client_id,
                self.client_secret,
                code,
                session.code_verifier,
                self.redirect_uri,
            )
            user = self.get_user_info(tokens.access_token)
        finally:
            self.sessions.clear()

        logger.info(f"Authorization complete for {user.username} ({user.id})")
        return AuthorizationResult(
            access_token=tokens.access_token,
            refresh_token=tokens.refresh_token,
            user_id=user.id,
            user_name=user.username,
        )

    # Token refresh
    def refresh(self, refresh_token: str) -> TokenPair:
        """Refresh an access token

        Raises:
            RefreshFailed: If X rejects the refresh token
        """
        return refresh_tokens(
            self.http, self.token_url, self.client_id, self.client_secret, refresh_token
        )

    # Identity
    def get_user_info(self, access_token: str) -> UserInfo:
        """Look up the user owning ``access_token``

        Raises:
            UserInfoFailed: If the lookup does not succeed
        """
        return fetch_user_info(self.http, self.user_info_url, access_token)

    def verify_access_token(self, access_token: str) -> bool:
        """Check whether ``access_token`` is accepted by X

        Returns:
            True if the identity lookup succeeds, False on any failure
        """
        try:
            self.get_user_info(access_token)
            return True
        except Exception as e:
            logger.info(f"Access token verification failed: {e}")
            return False

    def close(self) -> None:
        """Close the underlying HTTP client"""
        self.http.close()


__all__ = [
    "OAuthClient",
    "AuthorizationResult",
    "PkceSession",
    "PKCESessionStore",
    "TokenPair",
    "UserInfo",
    "build_basic_auth_header",
    "build_bearer_headers",
    "build_token_request",
    "code_challenge_for",
    "generate_pkce",
]
