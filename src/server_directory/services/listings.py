"""Moderation workflow for submitted server listings."""

import asyncio
import logging
from contextlib import AbstractAsyncContextManager, nullcontext
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Protocol
from uuid import uuid4

from server_directory.domain.errors import InvalidActionError, ListingNotFoundError
from server_directory.domain.listings import (
    Listing,
    ListingDraft,
    ListingStatus,
    ModerationAction,
    Submitter,
)
from server_directory.domain.models import Principal
from server_directory.services.access import AccessPolicy

logger = logging.getLogger(__name__)


class ListingRepository(Protocol):
    """Whole-collection persistence for listings."""

    async def load_all(self) -> list[Listing]:
        """Return every stored listing, bootstrapping an empty store."""

    async def replace_all(self, listings: list[Listing]) -> None:
        """Persist the given listings as the entire collection."""


def parse_action(raw: str | ModerationAction) -> ModerationAction:
    """Return the moderation action for a raw value."""
    try:
        return ModerationAction(raw)
    except ValueError as exc:
        raise InvalidActionError(raw) from exc


@dataclass
class ModerationService:
    """Submission, visibility and admin actions over the listing store.

    Callers are expected to have passed the matching access check before
    reaching ``submit`` or ``apply_action``; this service does not re-check.
    Mutations load the whole collection, change it in memory and replace it.
    With ``serialize_writes`` disabled, concurrent mutations race and the
    last ``replace_all`` wins.
    """

    repository: ListingRepository
    access_policy: AccessPolicy
    serialize_writes: bool = True
    _write_lock: asyncio.Lock = field(
        default_factory=asyncio.Lock, init=False, repr=False
    )

    def _writer(self) -> AbstractAsyncContextManager[object]:
        if self.serialize_writes:
            return self._write_lock
        return nullcontext()

    async def submit(self, principal: Principal, draft: ListingDraft) -> Listing:
        """Create a pending listing owned by the submitting principal."""
        async with self._writer():
            listings = await self.repository.load_all()
            existing_ids = {listing.id for listing in listings}
            listing_id = str(uuid4())
            while listing_id in existing_ids:
                listing_id = str(uuid4())
            listing = Listing(
                id=listing_id,
                invite_link=draft.invite_link,
                server_name=draft.server_name,
                description=draft.description,
                image_url=draft.image_url,
                status=ListingStatus.PENDING,
                submitted_by=Submitter.from_principal(principal),
                submitted_at=datetime.now(tz=UTC),
            )
            await self.repository.replace_all([*listings, listing])
        logger.info(
            "Listing submitted",
            extra={"listing_id": listing.id, "submitter_id": principal.id},
        )
        return listing

    async def list_listings(self, principal: Principal | None) -> list[Listing]:
        """Return the listings visible to the caller, in collection order."""
        listings = await self.repository.load_all()
        if self.access_policy.is_admin(principal):
            return listings
        return [
            listing for listing in listings if listing.status == ListingStatus.APPROVED
        ]

    async def apply_action(
        self,
        admin: Principal,
        listing_id: str,
        action: str | ModerationAction,
    ) -> None:
        """Approve, decline or delete a listing by id."""
        resolved = parse_action(action)
        async with self._writer():
            listings = await self.repository.load_all()
            index = _find_index(listings, listing_id)
            if index is None:
                raise ListingNotFoundError(listing_id)
            updated = list(listings)
            if resolved is ModerationAction.APPROVE:
                updated[index] = listings[index].approved()
            else:
                del updated[index]
            await self.repository.replace_all(updated)
        logger.info(
            "Moderation action applied",
            extra={
                "listing_id": listing_id,
                "action": resolved.value,
                "admin_id": admin.id,
            },
        )


def _find_index(listings: list[Listing], listing_id: str) -> int | None:
    for index, listing in enumerate(listings):
        if listing.id == listing_id:
            return index
    return None
