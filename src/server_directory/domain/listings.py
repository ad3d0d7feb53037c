"""Listing domain models."""

from dataclasses import dataclass, replace
from datetime import datetime
from enum import StrEnum

from server_directory.domain.models import Principal


class ListingStatus(StrEnum):
    """Persisted listing states. Declined listings are removed, not stored."""

    PENDING = "pending"
    APPROVED = "approved"


class ModerationAction(StrEnum):
    """Administrator actions on a listing."""

    APPROVE = "approve"
    DECLINE = "decline"
    DELETE = "delete"


@dataclass(frozen=True)
class Submitter:
    """Snapshot of the principal that submitted a listing."""

    id: str
    username: str

    @classmethod
    def from_principal(cls, principal: Principal) -> "Submitter":
        return cls(id=principal.id, username=principal.username)


@dataclass(frozen=True)
class ListingDraft:
    """Submitted listing content before it is stored."""

    server_name: str
    invite_link: str
    description: str
    image_url: str | None = None


@dataclass(frozen=True)
class Listing:
    """A server listing under moderation."""

    id: str
    invite_link: str
    server_name: str
    description: str
    image_url: str | None
    status: ListingStatus
    submitted_by: Submitter
    submitted_at: datetime | None = None

    def approved(self) -> "Listing":
        """Return a copy of the listing with approved status."""
        return replace(self, status=ListingStatus.APPROVED)

    def to_record(self) -> dict[str, object]:
        """Serialize to the persisted record shape."""
        return {
            "id": self.id,
            "inviteLink": self.invite_link,
            "serverName": self.server_name,
            "description": self.description,
            "imageUrl": self.image_url,
            "status": self.status.value,
            "submittedBy": {
                "id": self.submitted_by.id,
                "username": self.submitted_by.username,
            },
            "submittedAt": self.submitted_at.isoformat()
            if self.submitted_at
            else None,
        }

    @classmethod
    def from_record(cls, row: dict[str, object]) -> "Listing":
        """Parse a persisted record, raising ValueError on malformed rows."""
        if not isinstance(row, dict):
            raise ValueError("Listing record must be an object")
        submitted_by = row.get("submittedBy")
        if not isinstance(submitted_by, dict):
            raise ValueError("Listing record is missing submittedBy")
        try:
            status = ListingStatus(row["status"])
            listing_id = row["id"]
        except KeyError as exc:
            raise ValueError(f"Listing record is missing {exc.args[0]}") from exc
        if not isinstance(listing_id, str) or not listing_id:
            raise ValueError("Listing record has an invalid id")
        submitted_at = row.get("submittedAt")
        return cls(
            id=listing_id,
            invite_link=str(row.get("inviteLink", "")),
            server_name=str(row.get("serverName", "")),
            description=str(row.get("description", "")),
            image_url=row.get("imageUrl") or None,
            status=status,
            submitted_by=Submitter(
                id=str(submitted_by.get("id", "")),
                username=str(submitted_by.get("username", "")),
            ),
            submitted_at=datetime.fromisoformat(submitted_at)
            if isinstance(submitted_at, str) and submitted_at
            else None,
        )
