"""
Authentication status endpoint.
"""
from fastapi import APIRouter

import settings
from errors import XPosterError
from jobs import get_services
from ..models import AuthStatus, CredentialSummary

router = APIRouter()


@router.get("/auth/status", response_model=AuthStatus)
def auth_status():
    """List stored users without exposing secrets"""
    try:
        credentials = get_services().credentials.get_credentials()
    except XPosterError as e:
        return AuthStatus(store_backend=settings.STORE_BACKEND, error=str(e))
    return AuthStatus(
        store_backend=settings.STORE_BACKEND,
        users=[CredentialSummary(**credential.summary()) for credential in credentials],
    )
