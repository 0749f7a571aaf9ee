"""Tabular storage: credential vault and content pools"""

from .backends import InMemoryBackend, JsonFileBackend, TabularBackend
from .content import ContentStore
from .credentials import CredentialStore
from .models import Credential, mask_token

__all__ = [
    "ContentStore",
    "Credential",
    "CredentialStore",
    "InMemoryBackend",
    "JsonFileBackend",
    "TabularBackend",
    "mask_token",
]
