"""Supabase Storage backend for uploaded images."""

from dataclasses import dataclass
from pathlib import PurePosixPath
from uuid import uuid4

from supabase import Client

from server_directory.services.uploads import UploadStorage


@dataclass
class SupabaseUploadStorage(UploadStorage):
    """Uploads images to a public storage bucket."""

    client: Client
    bucket: str
    prefix: str = "uploads"

    def save(self, filename: str, content: bytes, content_type: str) -> str:
        """Upload the image and return its public URL."""
        suffix = PurePosixPath(filename).suffix.lower()
        object_path = f"{self.prefix}/{uuid4().hex}{suffix}"
        bucket = self.client.storage.from_(self.bucket)
        bucket.upload(object_path, content, {"content-type": content_type})
        return bucket.get_public_url(object_path)
