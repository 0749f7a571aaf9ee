"""Identity lookup for an access token"""

import logging

import httpx

from errors import UserInfoFailed
from .models import UserInfo
from .request_builder import build_bearer_headers

logger = logging.getLogger(__name__)


def fetch_user_info(http: httpx.Client, user_info_url: str, access_token: str) -> UserInfo:
    """Fetch the user that owns ``access_token``

    Raises:
        UserInfoFailed: If the lookup does not return 200 with user data
    """
    try:
        response = http.get(user_info_url, headers=build_bearer_headers(access_token))
    except httpx.HTTPError as e:
        raise UserInfoFailed(0, str(e)) from e

    if response.status_code != 200:
        raise UserInfoFailed(response.status_code, response.text)

    try:
        data = response.json()["data"]
        return UserInfo(
            id=str(data["id"]),
            username=data.get("username", ""),
            name=data.get("name", ""),
        )
    except (ValueError, KeyError, TypeError) as e:
        raise UserInfoFailed(response.status_code, response.text,
                             f"User info response missing data: {e}") from e
