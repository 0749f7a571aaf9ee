"""OAuth token exchange functionality"""

import logging

import httpx

from errors import TokenExchangeFailed
from .models import TokenPair
from .request_builder import build_token_request

logger = logging.getLogger(__name__)


def exchange_code(
    http: httpx.Client,
    token_url: str,
    client_id: str,
    client_secret: str,
    code: str,
    code_verifier: str,
    redirect_uri: str,
) -> TokenPair:
    """Exchange authorization code for tokens

    Args:
        http: HTTP client used for the call
        token_url: Token endpoint
        client_id: OAuth client id
        client_secret: OAuth client secret
        code: Authorization code from the callback
        code_verifier: PKCE verifier of the in-flight session
        redirect_uri: Redirect URI used when authorizing

    Returns:
        TokenPair for the newly authorized user

    Raises:
        TokenExchangeFailed: If the endpoint does not return 200
    """
    headers, body = build_token_request(client_id, client_secret, {
        "grant_type": "authorization_code",
        "code": code,
        "redirect_uri": redirect_uri,
        "code_verifier": code_verifier,
    })

    logger.info(f"Exchanging authorization code for tokens at {token_url}")
    try:
        response = http.post(token_url, content=body, headers=headers)
    except httpx.HTTPError as e:
        logger.error(f"Token exchange request failed: {e}")
        raise TokenExchangeFailed(0, str(e)) from e

    if response.status_code != 200:
        logger.error(f"Token exchange failed with status {response.status_code}: {response.text}")
        raise TokenExchangeFailed(response.status_code, response.text)

    try:
        token_data = response.json()
        access_token = token_data["access_token"]
    except (ValueError, KeyError) as e:
        raise TokenExchangeFailed(response.status_code, response.text,
                                  f"Token exchange returned an unusable response: {e}") from e

    logger.info("OAuth tokens obtained")
    return TokenPair(
        access_token=access_token,
        refresh_token=token_data.get("refresh_token", ""),
    )
