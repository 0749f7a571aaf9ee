"""Data models for X OAuth 2.0 authentication"""

from dataclasses import dataclass


@dataclass
class TokenPair:
    """Access/refresh token pair returned by exchange and refresh

    Attributes:
        access_token: Bearer token for API calls
        refresh_token: Token for obtaining a new access token
    """
    access_token: str
    refresh_token: str


@dataclass
class UserInfo:
    """Identity returned by GET /2/users/me"""
    id: str
    username: str
    name: str = ""


@dataclass
class AuthorizationResult:
    """Outcome of a completed authorization

    Attributes:
        access_token: Bearer token for the newly authorized user
        refresh_token: Refresh token for the newly authorized user
        user_id: X user id
        user_name: X username (handle without @)
    """
    access_token: str
    refresh_token: str
    user_id: str
    user_name: str


@dataclass
class PkceSession:
    """In-flight authorization: PKCE verifier plus anti-CSRF state"""
    code_verifier: str
    state: str
