"""Entry points for cron-style triggers and manual diagnostics

Scheduled jobs never raise: a failing trigger is logged so the scheduler
keeps running.
"""

import logging
from typing import Any, Dict, Optional

import settings
from errors import XPosterError
from oauth.models import AuthorizationResult
from poster import PostResult
from storage.models import Credential
from .services import Services, get_services

logger = logging.getLogger(__name__)


def complete_authentication(code: str, state: str, services: Optional[Services] = None) -> AuthorizationResult:
    """Finish an authorization and save the user's credentials

    Raises:
        XPosterError: Protocol and upstream errors propagate to the caller
    """
    services = services or get_services()
    result = services.oauth.complete_authorization(code, state)
    services.credentials.upsert_credentials(Credential(
        user_id=result.user_id,
        user_name=result.user_name,
        access_token=result.access_token,
        refresh_token=result.refresh_token,
    ))
    logger.info(f"Authentication complete: {result.user_name} ({result.user_id})")
    return result


def scheduled_post(channel: str, services: Optional[Services] = None) -> Optional[PostResult]:
    """Post a random text of ``channel`` as the first stored user"""
    try:
        services = services or get_services()
        result = services.poster.post_random_for_first_user(channel)
    except XPosterError as e:
        logger.error(f"Scheduled post failed ({channel}): {e}")
        return None
    if result.success:
        logger.info(f"Scheduled post complete ({channel})")
    else:
        logger.error(f"Scheduled post failed ({channel}): {result.message}")
    return result


def post_for_specific_user(
    user_id: str,
    text: Optional[str] = None,
    channel: str = settings.DEFAULT_CHANNEL,
    services: Optional[Services] = None,
) -> PostResult:
    """Post as ``user_id``; ``text`` overrides the random pick from ``channel``"""
    services = services or get_services()
    return services.poster.post_for_user(user_id, text, channel)


def validate_and_refresh_all_tokens(services: Optional[Services] = None) -> Dict[str, bool]:
    """Verify every stored token, refreshing the rejected ones"""
    services = services or get_services()
    return services.poster.validate_all_tokens()


def run_diagnostics(services: Optional[Services] = None) -> Dict[str, Any]:
    """Report configuration, stored users and content pool sizes

    Nothing is posted. Token checks run only when users exist.
    """
    report: Dict[str, Any] = {
        "client_id_configured": bool(settings.CLIENT_ID),
        "store_backend": settings.STORE_BACKEND,
        "users": 0,
        "channels": {},
        "tokens": {},
    }
    services = services or get_services()

    try:
        report["users"] = len(services.credentials.get_credentials())
    except XPosterError as e:
        logger.error(f"Could not read credentials: {e}")
        report["credentials_error"] = str(e)

    for channel in [settings.DEFAULT_CHANNEL, *settings.SCHEDULED_CHANNELS]:
        try:
            contents = services.content.list_content(channel)
            report["channels"][channel] = len(contents)
            if contents:
                logger.info(f"Sample post from '{channel}': {contents[0]}")
        except XPosterError as e:
            logger.error(f"Could not read sheet '{channel}': {e}")
            report["channels"][channel] = None

    if report["users"]:
        report["tokens"] = services.poster.validate_all_tokens()
    return report
