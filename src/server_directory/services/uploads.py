"""Image upload handling for listings."""

import logging
from dataclasses import dataclass
from typing import Protocol

logger = logging.getLogger(__name__)


class UploadStorage(Protocol):
    """Storage backend for uploaded listing images."""

    def save(self, filename: str, content: bytes, content_type: str) -> str:
        """Store the file and return a stable reference for it."""


@dataclass
class UploadService:
    """Stores listing images without ever producing a dangling reference."""

    storage: UploadStorage

    def store_image(
        self, filename: str | None, content: bytes, content_type: str | None
    ) -> str | None:
        """Store an uploaded image and return its URL, or None to omit it."""
        if not filename or not content:
            return None
        if not content_type or not content_type.startswith("image/"):
            logger.warning(
                "Ignoring non-image upload",
                extra={"upload_filename": filename, "content_type": content_type},
            )
            return None
        try:
            return self.storage.save(filename, content, content_type)
        except Exception:
            logger.warning(
                "Image upload failed; listing stored without image",
                exc_info=True,
                extra={"upload_filename": filename},
            )
            return None
