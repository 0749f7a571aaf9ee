"""OAuth token refresh functionality"""

import logging

import httpx

from errors import RefreshFailed
from .models import TokenPair
from .request_builder import build_token_request

logger = logging.getLogger(__name__)


def refresh_tokens(
    http: httpx.Client,
    token_url: str,
    client_id: str,
    client_secret: str,
    refresh_token: str,
) -> TokenPair:
    """Refresh an access token

    X does not always rotate the refresh token; when the response omits
    one the input token is kept.

    Args:
        http: HTTP client used for the call
        token_url: Token endpoint
        client_id: OAuth client id
        client_secret: OAuth client secret
        refresh_token: Current refresh token

    Returns:
        New TokenPair

    Raises:
        RefreshFailed: If the endpoint does not return 200
    """
    if not refresh_token:
        raise RefreshFailed(0, "", "No refresh token available for refresh")

    headers, body = build_token_request(client_id, client_secret, {
        "grant_type": "refresh_token",
        "refresh_token": refresh_token,
    })

    logger.info("Attempting to refresh OAuth tokens...")
    try:
        response = http.post(token_url, content=body, headers=headers)
    except httpx.HTTPError as e:
        logger.error(f"Token refresh request failed: {e}")
        raise RefreshFailed(0, str(e)) from e

    if response.status_code != 200:
        logger.error(f"Token refresh failed with status {response.status_code}: {response.text}")
        raise RefreshFailed(response.status_code, response.text)

    try:
        token_data = response.json()
        access_token = token_data["access_token"]
    except (ValueError, KeyError) as e:
        raise RefreshFailed(response.status_code, response.text,
                            f"Token refresh returned an unusable response: {e}") from e

    logger.info("Successfully refreshed OAuth tokens")
    return TokenPair(
        access_token=access_token,
        refresh_token=token_data.get("refresh_token") or refresh_token,
    )
