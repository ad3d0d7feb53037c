"""Supabase Storage listing repository."""

import asyncio
from dataclasses import dataclass
from posixpath import basename, dirname

from supabase import Client

from server_directory.adapters.json_listing_repository import (
    decode_listings,
    encode_listings,
)
from server_directory.domain.errors import StorageError
from server_directory.domain.listings import Listing
from server_directory.services.listings import ListingRepository

_REPLACE_OPTIONS = {"content-type": "application/json", "upsert": "true"}
_CREATE_OPTIONS = {"content-type": "application/json", "upsert": "false"}


@dataclass
class SupabaseListingRepository(ListingRepository):
    """Stores the listing collection as one JSON object in a storage bucket."""

    client: Client
    bucket: str
    object_path: str = "servers.json"

    async def load_all(self) -> list[Listing]:
        """Download the collection, uploading an empty one if absent."""
        return await asyncio.to_thread(self._load_all)

    async def replace_all(self, listings: list[Listing]) -> None:
        """Upload the given listings over the stored object."""
        await asyncio.to_thread(self._upload, encode_listings(listings))

    def _load_all(self) -> list[Listing]:
        if not self._exists() and self._create_empty():
            return []
        try:
            raw = self.client.storage.from_(self.bucket).download(self.object_path)
        except Exception as exc:
            raise StorageError(
                f"Cannot download {self.bucket}/{self.object_path}"
            ) from exc
        return decode_listings(raw)

    def _exists(self) -> bool:
        folder = dirname(self.object_path)
        name = basename(self.object_path)
        try:
            entries = self.client.storage.from_(self.bucket).list(folder or None)
        except Exception as exc:
            raise StorageError(f"Cannot list bucket {self.bucket}") from exc
        return any(entry.get("name") == name for entry in entries or [])

    def _create_empty(self) -> bool:
        try:
            self.client.storage.from_(self.bucket).upload(
                self.object_path, b"[]", _CREATE_OPTIONS
            )
        except Exception:
            # Usually a concurrent bootstrap created it first; an outage is
            # reported by the download that follows.
            return False
        return True

    def _upload(self, payload: bytes) -> None:
        try:
            self.client.storage.from_(self.bucket).upload(
                self.object_path, payload, _REPLACE_OPTIONS
            )
        except Exception as exc:
            raise StorageError(
                f"Cannot upload {self.bucket}/{self.object_path}"
            ) from exc
