"""Builders for token endpoint requests

The X token endpoint takes a form-encoded body and the app credentials in a
Basic ``Authorization`` header. These helpers only assemble the request
pieces; sending them is up to the caller.
"""

import base64
from typing import Dict, Tuple
from urllib.parse import urlencode


def build_basic_auth_header(client_id: str, client_secret: str) -> str:
    """Return the ``Authorization`` value for ``client_id:client_secret``"""
    credentials = f"{client_id}:{client_secret}".encode("utf-8")
    return f"Basic {base64.b64encode(credentials).decode('ascii')}"


def build_token_request(
    client_id: str,
    client_secret: str,
    params: Dict[str, str],
) -> Tuple[Dict[str, str], str]:
    """Build headers and form body for a token endpoint call

    Args:
        client_id: OAuth client id (also sent in the body, as X expects)
        client_secret: OAuth client secret
        params: Grant-specific parameters (grant_type, code, ...)

    Returns:
        Tuple of (headers, urlencoded body)
    """
    body = {"client_id": client_id, **params}
    headers = {
        "Authorization": build_basic_auth_header(client_id, client_secret),
        "Content-Type": "application/x-www-form-urlencoded",
    }
    return headers, urlencode(body)


def build_bearer_headers(access_token: str, json_body: bool = False) -> Dict[str, str]:
    """Headers for a bearer-authenticated API call"""
    headers = {"Authorization": f"Bearer {access_token}"}
    if json_body:
        headers["Content-Type"] = "application/json"
    return headers
