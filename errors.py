"""Exception hierarchy shared by the OAuth client, the stores and the poster"""

from typing import Optional


class XPosterError(Exception):
    """Base class for every error raised by this project"""


class ConfigMissing(XPosterError):
    """A required configuration value is absent"""

    def __init__(self, key: str):
        self.key = key
        super().__init__(f"Required setting {key} is not configured")


class StateMismatch(XPosterError):
    """The callback state does not match the stored PKCE session (possible CSRF)"""

    def __init__(self):
        super().__init__("State parameter mismatch - potential CSRF attack")


class MissingVerifier(XPosterError):
    """No PKCE session is stored; authorization was never started or already consumed"""

    def __init__(self):
        super().__init__("No PKCE code verifier found. Start the authorization flow first.")


class UpstreamError(XPosterError):
    """X rejected a call; carries the HTTP status and response body

    A status code of 0 means the request never got a response
    (connection error, timeout).
    """

    action = "Request"

    def __init__(self, status_code: int, body: str, detail: Optional[str] = None):
        self.status_code = status_code
        self.body = body
        message = detail or f"{self.action} failed: {status_code} - {body}"
        super().__init__(message)


class TokenExchangeFailed(UpstreamError):
    action = "Token exchange"


class RefreshFailed(UpstreamError):
    action = "Token refresh"


class UserInfoFailed(UpstreamError):
    action = "User info lookup"


class EmptyContentPool(XPosterError):
    """The channel has no usable (non-blank) content"""

    def __init__(self, channel: str):
        self.channel = channel
        super().__init__(f"No post content found in sheet '{channel}'")


class StoreUnavailable(XPosterError):
    """The backing sheet or workbook is missing"""

    def __init__(self, sheet: str, reason: Optional[str] = None):
        self.sheet = sheet
        super().__init__(reason or f"Sheet '{sheet}' not found in the backing store")
