"""Shared test fixtures."""

import random
from typing import Dict, List, Tuple

import httpx
import pytest

from jobs import Services, set_services
from oauth import OAuthClient
from poster import Poster
from storage import ContentStore, CredentialStore, InMemoryBackend
from storage.models import Credential

REDIRECT_URI = "http://localhost:8080/auth/callback"
TOKEN_PATH = "/2/oauth2/token"
USER_INFO_PATH = "/2/users/me"
TWEETS_PATH = "/2/tweets"


class FakeX:
    """Scripted stand-in for the X API behind an httpx.MockTransport

    Responses are queued per (method, path). Each request consumes the head
    of its queue; the last entry is reused once the queue is down to one.
    """

    def __init__(self):
        self.routes: Dict[Tuple[str, str], List] = {}
        self.requests: List[httpx.Request] = []

    def add(self, method: str, path: str, status_code: int, json=None, text: str = ""):
        self.routes.setdefault((method, path), []).append((status_code, json, text))
        return self

    def fail(self, method: str, path: str, exc: Exception):
        self.routes.setdefault((method, path), []).append(exc)
        return self

    def calls(self, method: str, path: str) -> List[httpx.Request]:
        return [r for r in self.requests if r.method == method and r.url.path == path]

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        queue = self.routes.get((request.method, request.url.path))
        if not queue:
            return httpx.Response(404, json={"title": "Not Found"})
        entry = queue.pop(0) if len(queue) > 1 else queue[0]
        if isinstance(entry, Exception):
            raise entry
        status_code, json, text = entry
        if json is not None:
            return httpx.Response(status_code, json=json)
        return httpx.Response(status_code, text=text)


@pytest.fixture
def fake_x() -> FakeX:
    return FakeX()


@pytest.fixture
def oauth(fake_x: FakeX) -> OAuthClient:
    client = OAuthClient(
        client_id="client-id",
        client_secret="client-secret",
        redirect_uri=REDIRECT_URI,
        http_client=httpx.Client(transport=httpx.MockTransport(fake_x.handler)),
    )
    yield client
    client.close()


@pytest.fixture
def backend() -> InMemoryBackend:
    return InMemoryBackend()


@pytest.fixture
def credentials(backend: InMemoryBackend) -> CredentialStore:
    return CredentialStore(backend, "credentials")


@pytest.fixture
def content(backend: InMemoryBackend) -> ContentStore:
    return ContentStore(backend, "auto", rng=random.Random(1234))


@pytest.fixture
def poster(oauth: OAuthClient, credentials: CredentialStore, content: ContentStore) -> Poster:
    return Poster(oauth, credentials, content)


@pytest.fixture
def services(oauth, credentials, content, poster) -> Services:
    wired = Services(oauth=oauth, credentials=credentials, content=content, poster=poster)
    set_services(wired)
    yield wired
    set_services(None)


@pytest.fixture
def alice(credentials: CredentialStore) -> Credential:
    """A stored user with an access/refresh token pair"""
    credential = Credential(
        user_id="42",
        user_name="alice",
        access_token="old-access",
        refresh_token="old-refresh",
    )
    credentials.upsert_credentials(credential)
    return credential


def user_payload(user_id: str = "42", username: str = "alice") -> dict:
    return {"data": {"id": user_id, "username": username, "name": username.title()}}
