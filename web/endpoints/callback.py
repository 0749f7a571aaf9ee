"""
OAuth callback endpoint.
"""
import logging
from typing import Optional

from fastapi import APIRouter
from fastapi.responses import HTMLResponse

import settings
from errors import MissingVerifier, StateMismatch, UpstreamError, XPosterError
from jobs import complete_authentication, get_services
from ..pages import render_error_page, render_failure_page, render_start_page, render_success_page

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get(settings.CALLBACK_PATH, response_class=HTMLResponse)
def oauth_callback(
    code: Optional[str] = None,
    state: Optional[str] = None,
    error: Optional[str] = None,
    error_description: Optional[str] = None,
):
    """Complete an authorization, show an X error, or start a new authorization"""
    if error:
        logger.warning(f"OAuth error from X: {error}")
        return HTMLResponse(render_error_page(error, error_description), status_code=400)

    if code and state:
        try:
            result = complete_authentication(code, state)
        except (StateMismatch, MissingVerifier) as e:
            logger.warning(f"Authorization rejected: {e}")
            return HTMLResponse(render_failure_page(str(e), settings.REDIRECT_URI), status_code=400)
        except UpstreamError as e:
            logger.error(f"Authorization failed upstream: {e}")
            return HTMLResponse(render_failure_page(str(e), settings.REDIRECT_URI), status_code=502)
        except XPosterError as e:
            logger.error(f"Authorization failed: {e}")
            return HTMLResponse(render_failure_page(str(e), settings.REDIRECT_URI), status_code=500)
        return HTMLResponse(render_success_page(result.user_name, result.user_id))

    try:
        authorization_url = get_services().oauth.begin_authorization()
    except XPosterError as e:
        logger.error(f"Could not create authorization URL: {e}")
        return HTMLResponse(render_start_page(settings.REDIRECT_URI, None, str(e)), status_code=500)
    return HTMLResponse(render_start_page(settings.REDIRECT_URI, authorization_url))
