"""Request payload models."""

from pydantic import BaseModel


class ModerationActionRequest(BaseModel):
    """Body of an admin moderation request."""

    action: str
