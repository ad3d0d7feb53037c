"""Listing submission, visibility and moderation endpoints."""

from __future__ import annotations

import asyncio

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import HTMLResponse
from pydantic import ValidationError
from starlette.datastructures import UploadFile

from server_directory.api.guards import (
    current_principal,
    get_container,
    require_admin,
    require_session,
)
from server_directory.api.pages import ADD_SERVER_HTML, ADMIN_HTML
from server_directory.api.schemas import ModerationActionRequest
from server_directory.containers import AppContainer
from server_directory.domain.errors import InvalidActionError
from server_directory.domain.listings import ListingDraft
from server_directory.domain.models import Principal

router = APIRouter(tags=["listings"])

_REQUIRED_FIELDS = ("serverName", "inviteLink", "description")


@router.get("/api/servers")
async def list_servers(
    principal: Principal | None = Depends(current_principal),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Return the listings visible to the caller."""
    listings = await container.moderation_service.list_listings(principal)
    return {"servers": [listing.to_record() for listing in listings]}


@router.post("/api/servers", status_code=status.HTTP_201_CREATED)
async def submit_server(
    request: Request,
    principal: Principal = Depends(require_session),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Submit a listing for moderation."""
    form = await request.form()
    missing = [name for name in _REQUIRED_FIELDS if name not in form]
    if missing:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"Missing form fields: {', '.join(missing)}",
        )
    image_url = None
    image = form.get("image")
    if isinstance(image, UploadFile):
        content = await image.read()
        image_url = await asyncio.to_thread(
            container.upload_service.store_image,
            image.filename,
            content,
            image.content_type,
        )
    draft = ListingDraft(
        server_name=str(form["serverName"]),
        invite_link=str(form["inviteLink"]),
        description=str(form["description"]),
        image_url=image_url,
    )
    listing = await container.moderation_service.submit(principal, draft)
    return listing.to_record()


@router.post("/api/servers/{listing_id}/action")
async def moderate_server(
    listing_id: str,
    request: Request,
    admin: Principal = Depends(require_admin),
    container: AppContainer = Depends(get_container),
) -> dict[str, str]:
    """Approve, decline or delete a listing."""
    body = await request.body()
    try:
        payload = ModerationActionRequest.model_validate_json(body)
    except ValidationError as exc:
        raise InvalidActionError(body.decode("utf-8", errors="replace")) from exc
    await container.moderation_service.apply_action(admin, listing_id, payload.action)
    return {"status": "ok"}


@router.get(
    "/add-server",
    response_class=HTMLResponse,
    dependencies=[Depends(require_session)],
)
async def add_server_page() -> HTMLResponse:
    """Submission form for logged-in users."""
    return HTMLResponse(ADD_SERVER_HTML)


@router.get(
    "/admin", response_class=HTMLResponse, dependencies=[Depends(require_admin)]
)
async def admin_page() -> HTMLResponse:
    """Moderation queue for the administrator."""
    return HTMLResponse(ADMIN_HTML)
