"""Discord login, logout and current-user endpoints."""

from __future__ import annotations

import logging
import secrets

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import RedirectResponse

from server_directory.api.guards import current_principal, get_container
from server_directory.api.sessions import (
    OAUTH_STATE_KEY,
    attach_principal,
    destroy_session,
)
from server_directory.containers import AppContainer
from server_directory.domain.models import Principal

logger = logging.getLogger(__name__)

router = APIRouter(tags=["auth"])


@router.get("/auth/discord")
async def discord_login(
    request: Request, container: AppContainer = Depends(get_container)
) -> RedirectResponse:
    """Redirect to Discord's authorize page."""
    state = secrets.token_urlsafe(16)
    request.session[OAUTH_STATE_KEY] = state
    return RedirectResponse(container.auth_service.authorization_url(state))


@router.get("/auth/discord/callback")
async def discord_callback(
    request: Request,
    code: str | None = None,
    state: str | None = None,
    container: AppContainer = Depends(get_container),
) -> RedirectResponse:
    """Complete the OAuth exchange and attach the user to the session."""
    if not code:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="No code received from Discord.",
        )
    expected_state = request.session.pop(OAUTH_STATE_KEY, None)
    if not state or not expected_state or not secrets.compare_digest(
        state, expected_state
    ):
        logger.warning("OAuth state mismatch on Discord callback")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid OAuth state."
        )
    principal = await container.auth_service.complete_login(code)
    attach_principal(request, principal)
    return RedirectResponse("/", status_code=status.HTTP_303_SEE_OTHER)


@router.get("/api/user")
async def current_user(
    principal: Principal | None = Depends(current_principal),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Return the logged-in user."""
    if principal is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED, detail="Not logged in"
        )
    return {
        **principal.to_dict(),
        "isAdmin": container.access_policy.is_admin(principal),
    }


@router.get("/logout")
async def logout(
    request: Request, principal: Principal | None = Depends(current_principal)
) -> RedirectResponse:
    """Destroy the session and return to the landing page."""
    destroy_session(request)
    if principal is not None:
        logger.info("User logged out", extra={"user_id": principal.id})
    return RedirectResponse("/", status_code=status.HTTP_303_SEE_OTHER)
