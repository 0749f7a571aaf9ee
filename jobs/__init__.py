"""Service wiring and job entry points"""

from .services import Services, build_services, get_services, set_services
from .tasks import (
    complete_authentication,
    post_for_specific_user,
    run_diagnostics,
    scheduled_post,
    validate_and_refresh_all_tokens,
)

__all__ = [
    "Services",
    "build_services",
    "get_services",
    "set_services",
    "complete_authentication",
    "post_for_specific_user",
    "run_diagnostics",
    "scheduled_post",
    "validate_and_refresh_all_tokens",
]
