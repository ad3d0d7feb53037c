"""Local filesystem storage for uploaded images."""

from dataclasses import dataclass
from pathlib import Path
from uuid import uuid4

from server_directory.services.uploads import UploadStorage


@dataclass
class LocalUploadStorage(UploadStorage):
    """Writes uploads to a directory served under ``url_prefix``."""

    directory: Path
    url_prefix: str = "/uploads"

    def save(self, filename: str, content: bytes, content_type: str) -> str:
        """Write the file under a unique name and return its URL path."""
        self.directory.mkdir(parents=True, exist_ok=True)
        stored_name = f"{uuid4().hex}{Path(filename).suffix.lower()}"
        (self.directory / stored_name).write_bytes(content)
        return f"{self.url_prefix}/{stored_name}"
