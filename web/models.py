"""
Pydantic response models.
"""
from typing import List, Optional

from pydantic import BaseModel


class CredentialSummary(BaseModel):
    """Stored user with masked tokens"""
    user_id: str
    user_name: str
    access_token: str
    refresh_token: str


class AuthStatus(BaseModel):
    """Credential store status"""
    store_backend: str
    users: List[CredentialSummary] = []
    error: Optional[str] = None
