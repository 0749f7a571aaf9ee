"""Wires settings into the OAuth client, the stores and the poster"""

import logging
from dataclasses import dataclass
from typing import Optional

import settings
from errors import ConfigMissing
from oauth import OAuthClient, PKCESessionStore
from poster import Poster
from storage import ContentStore, CredentialStore, InMemoryBackend, JsonFileBackend, TabularBackend

logger = logging.getLogger(__name__)


@dataclass
class Services:
    """Everything an entry point needs"""
    oauth: OAuthClient
    credentials: CredentialStore
    content: ContentStore
    poster: Poster


def build_backend() -> TabularBackend:
    """Create the tabular backend selected by STORE_BACKEND

    Raises:
        ConfigMissing: If the selected backend lacks its identifier
        ValueError: If STORE_BACKEND is unknown
    """
    backend = settings.STORE_BACKEND.lower()
    if backend == "memory":
        return InMemoryBackend()
    if backend == "json":
        if not settings.WORKBOOK_FILE:
            raise ConfigMissing("WORKBOOK_FILE")
        return JsonFileBackend(settings.WORKBOOK_FILE)
    if backend == "gsheets":
        if not settings.SPREADSHEET_ID:
            raise ConfigMissing("SPREADSHEET_ID")
        # gspread is only imported when the Google Sheets backend is selected
        from storage.gsheets import GoogleSheetsBackend
        return GoogleSheetsBackend(settings.SPREADSHEET_ID, settings.GOOGLE_SERVICE_ACCOUNT_FILE or None)
    raise ValueError(f"Unknown STORE_BACKEND {settings.STORE_BACKEND!r} (expected json, memory or gsheets)")


def build_services(backend: Optional[TabularBackend] = None) -> Services:
    """Build the service graph from settings

    Raises:
        ConfigMissing: If CLIENT_ID, CLIENT_SECRET or the store identifier is absent
    """
    if not settings.CLIENT_ID:
        raise ConfigMissing("CLIENT_ID")
    if not settings.CLIENT_SECRET:
        raise ConfigMissing("CLIENT_SECRET")

    backend = backend or build_backend()
    oauth = OAuthClient(
        client_id=settings.CLIENT_ID,
        client_secret=settings.CLIENT_SECRET,
        redirect_uri=settings.REDIRECT_URI,
        session_store=PKCESessionStore(settings.PKCE_SESSION_FILE or None),
    )
    credentials = CredentialStore(backend, settings.CREDENTIALS_SHEET)
    content = ContentStore(backend, settings.CONTENT_HEADER_MODE)
    logger.debug(f"Services built with {type(backend).__name__}")
    return Services(
        oauth=oauth,
        credentials=credentials,
        content=content,
        poster=Poster(oauth, credentials, content),
    )


_services: Optional[Services] = None


def get_services() -> Services:
    """Get or create the process-wide Services instance"""
    global _services
    if _services is None:
        _services = build_services()
    return _services


def set_services(services: Optional[Services]) -> None:
    """Replace the process-wide Services instance (None resets it)"""
    global _services
    _services = services
