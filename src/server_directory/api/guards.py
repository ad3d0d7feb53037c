"""FastAPI dependencies that gate routes on the session principal."""

from __future__ import annotations

from fastapi import Depends, Request

from server_directory.api.sessions import read_principal
from server_directory.containers import AppContainer
from server_directory.domain.models import Principal


def get_container(request: Request) -> AppContainer:
    return request.app.state.container


async def current_principal(request: Request) -> Principal | None:
    """Return the session principal without requiring one."""
    return read_principal(request)


async def require_session(
    principal: Principal | None = Depends(current_principal),
    container: AppContainer = Depends(get_container),
) -> Principal:
    """Ensure the request carries a logged-in session."""
    return container.access_policy.require_session(principal)


async def require_admin(
    principal: Principal | None = Depends(current_principal),
    container: AppContainer = Depends(get_container),
) -> Principal:
    """Ensure the session principal is the administrator."""
    return container.access_policy.require_admin(principal)
