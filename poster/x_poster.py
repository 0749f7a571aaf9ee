"""Publishing to X with transparent token refresh"""

import json
import logging
from typing import Dict, Optional

import httpx

from errors import RefreshFailed, XPosterError
from oauth import OAuthClient
from oauth.models import TokenPair
from oauth.request_builder import build_bearer_headers
from settings import DEFAULT_CHANNEL, TWEETS_URL
from storage.content import ContentStore
from storage.credentials import CredentialStore
from storage.models import Credential
from .models import PostResult

logger = logging.getLogger(__name__)


class Poster:
    """Publishes posts as stored users

    A 401 from the publish endpoint triggers exactly one refresh, one save
    of the new token pair and one retry.
    """

    def __init__(
        self,
        oauth: OAuthClient,
        credentials: CredentialStore,
        content: ContentStore,
        tweets_url: str = TWEETS_URL,
    ):
        self.oauth = oauth
        self.credentials = credentials
        self.content = content
        self.tweets_url = tweets_url

    def _publish(self, access_token: str, text: str) -> httpx.Response:
        return self.oauth.http.post(
            self.tweets_url,
            content=json.dumps({"text": text}),
            headers=build_bearer_headers(access_token, json_body=True),
        )

    @staticmethod
    def _post_id(response: httpx.Response) -> Optional[str]:
        try:
            return str(response.json()["data"]["id"])
        except (ValueError, KeyError, TypeError):
            return None

    def post(self, access_token: str, refresh_token: str, text: str, user_id: str) -> PostResult:
        """Publish ``text`` as ``user_id``

        Never raises for upstream, transport or store failures; they come
        back as a failed PostResult.

        Args:
            access_token: Current access token of the user
            refresh_token: Current refresh token of the user
            text: Post text
            user_id: User whose stored tokens are replaced after a refresh

        Returns:
            PostResult describing the outcome
        """
        try:
            response = self._publish(access_token, text)
        except httpx.HTTPError as e:
            logger.error(f"Post request failed: {e}")
            return PostResult(success=False, message=f"Post request failed: {e}")

        if response.status_code == 201:
            post_id = self._post_id(response)
            logger.info(f"Post published: {post_id}")
            return PostResult(success=True, message="Post published", post_id=post_id)

        if response.status_code != 401:
            logger.error(f"Post failed: {response.status_code} - {response.text}")
            return PostResult(success=False, message=f"Post failed: {response.status_code} - {response.text}")

        logger.warning(f"Access token for user {user_id} rejected, refreshing")
        try:
            new_tokens = self.oauth.refresh(refresh_token)
        except RefreshFailed as e:
            logger.error(f"User {user_id} needs to authorize again: {e}")
            return PostResult(
                success=False,
                message=f"Token refresh failed: {e}",
                needs_reauthorization=True,
            )

        try:
            self.credentials.update_tokens(user_id, new_tokens)
        except XPosterError as e:
            logger.error(f"Could not save refreshed tokens for user {user_id}: {e}")
            return PostResult(success=False, message=f"Could not save refreshed tokens: {e}",
                              new_tokens=new_tokens)

        try:
            retry = self._publish(new_tokens.access_token, text)
        except httpx.HTTPError as e:
            logger.error(f"Post retry request failed: {e}")
            return PostResult(success=False, message=f"Post retry request failed: {e}",
                              new_tokens=new_tokens)

        if retry.status_code == 201:
            post_id = self._post_id(retry)
            logger.info(f"Post published after token refresh: {post_id}")
            return PostResult(
                success=True,
                message="Post published after token refresh",
                post_id=post_id,
                new_tokens=new_tokens,
            )

        logger.error(f"Post failed after token refresh: {retry.status_code} - {retry.text}")
        return PostResult(
            success=False,
            message=f"Post failed after token refresh: {retry.status_code} - {retry.text}",
            new_tokens=new_tokens,
        )

    def _post_as(self, credential: Credential, text: str, channel: str) -> PostResult:
        logger.info(f"Posting as {credential.user_name} from sheet '{channel}': {text}")
        result = self.post(credential.access_token, credential.refresh_token, text, credential.user_id)
        if result.success:
            logger.info(f"Post complete: {credential.user_name} - {result.post_id}")
            if result.new_tokens:
                logger.info("Tokens were refreshed")
        else:
            logger.error(f"Post failed: {credential.user_name} - {result.message}")
        return result

    def _lookup(self, user_id: str) -> Optional[Credential]:
        credential = self.credentials.get_credential(user_id)
        if credential is None:
            logger.error(f"No credentials found for user {user_id}")
        return credential

    def post_for_user(
        self,
        user_id: str,
        text: Optional[str] = None,
        channel: str = DEFAULT_CHANNEL,
    ) -> PostResult:
        """Post ``text`` (or a random text of ``channel``) as ``user_id``"""
        try:
            credential = self._lookup(user_id)
            if credential is None:
                return PostResult(success=False, message=f"No credentials found for user {user_id}")
            if not text:
                text = self.content.pick_random(channel)
        except XPosterError as e:
            logger.error(f"Post for user {user_id} aborted: {e}")
            return PostResult(success=False, message=str(e))
        return self._post_as(credential, text, channel)

    def post_random_for_user(self, user_id: str, channel: str = DEFAULT_CHANNEL) -> PostResult:
        """Post a random text of ``channel`` as ``user_id``"""
        return self.post_for_user(user_id, None, channel)

    def post_random_for_first_user(self, channel: str = DEFAULT_CHANNEL) -> PostResult:
        """Post a random text of ``channel`` as the first stored user"""
        try:
            users = self.credentials.get_credentials()
            if not users:
                logger.error("No credentials found")
                return PostResult(success=False, message="No credentials found")
            credential = users[0]
            text = self.content.pick_random(channel)
        except XPosterError as e:
            logger.error(f"Random post from sheet '{channel}' aborted: {e}")
            return PostResult(success=False, message=str(e))
        return self._post_as(credential, text, channel)

    def verify_and_refresh_token(self, user_id: str) -> bool:
        """Check a user's access token and refresh it if X rejects it

        Returns:
            True if the stored token was valid or a refresh succeeded
        """
        try:
            credential = self._lookup(user_id)
        except XPosterError as e:
            logger.error(f"Token check for user {user_id} aborted: {e}")
            return False
        if credential is None:
            return False

        if self.oauth.verify_access_token(credential.access_token):
            return True

        logger.info(f"Access token of {credential.user_name} is invalid, attempting refresh")
        try:
            new_tokens: TokenPair = self.oauth.refresh(credential.refresh_token)
            self.credentials.update_tokens(user_id, new_tokens)
        except XPosterError as e:
            logger.error(f"Token refresh failed for {credential.user_name}: {e}")
            return False

        logger.info(f"Tokens of {credential.user_name} were refreshed")
        return True

    def validate_all_tokens(self) -> Dict[str, bool]:
        """Run ``verify_and_refresh_token`` for every stored user

        Returns:
            Mapping of user id to final validity
        """
        results = {}
        for credential in self.credentials.get_credentials():
            logger.info(f"Checking token of {credential.user_name}...")
            results[credential.user_id] = self.verify_and_refresh_token(credential.user_id)
            status = "valid" if results[credential.user_id] else "invalid or refresh failed"
            logger.info(f"{credential.user_name}: token {status}")
        return results
