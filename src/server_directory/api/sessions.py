"""Session cookie helpers."""

import logging

from starlette.requests import Request

from server_directory.domain.models import Principal

logger = logging.getLogger(__name__)

_USER_KEY = "user"
OAUTH_STATE_KEY = "oauth_state"


def attach_principal(request: Request, principal: Principal) -> None:
    """Bind the principal to the caller's session."""
    request.session.pop(OAUTH_STATE_KEY, None)
    request.session[_USER_KEY] = principal.to_dict()


def read_principal(request: Request) -> Principal | None:
    """Return the session principal, if any."""
    payload = request.session.get(_USER_KEY)
    if payload is None:
        return None
    try:
        return Principal.from_profile(payload)
    except (AttributeError, ValueError):
        logger.warning("Dropping malformed session principal")
        request.session.pop(_USER_KEY, None)
        return None


def destroy_session(request: Request) -> None:
    """Forget everything stored in the caller's session."""
    request.session.clear()
