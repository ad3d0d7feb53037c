"""JSON file listing repository."""

import asyncio
import json
import os
import tempfile
from dataclasses import dataclass
from pathlib import Path

from server_directory.domain.errors import StorageError
from server_directory.domain.listings import Listing
from server_directory.services.listings import ListingRepository


def decode_listings(raw: bytes | str) -> list[Listing]:
    """Parse a serialized listing collection."""
    try:
        data = json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise StorageError("Listing store contains invalid JSON") from exc
    if not isinstance(data, list):
        raise StorageError("Listing store must contain a JSON array")
    try:
        listings = [Listing.from_record(row) for row in data]
    except ValueError as exc:
        raise StorageError(f"Listing store contains a malformed record: {exc}") from exc
    seen: set[str] = set()
    for listing in listings:
        if listing.id in seen:
            raise StorageError(f"Listing store contains duplicate id {listing.id}")
        seen.add(listing.id)
    return listings


def encode_listings(listings: list[Listing]) -> bytes:
    """Serialize a listing collection."""
    return json.dumps(
        [listing.to_record() for listing in listings], indent=2, ensure_ascii=False
    ).encode("utf-8")


@dataclass
class JsonFileListingRepository(ListingRepository):
    """Stores the whole listing collection in one local JSON file."""

    path: Path

    async def load_all(self) -> list[Listing]:
        """Read every listing, creating an empty store if the file is absent."""
        return await asyncio.to_thread(self._load_all)

    async def replace_all(self, listings: list[Listing]) -> None:
        """Atomically replace the file with the given listings."""
        await asyncio.to_thread(self._write, encode_listings(listings))

    def _load_all(self) -> list[Listing]:
        if not self.path.exists():
            self._bootstrap()
        try:
            raw = self.path.read_bytes()
        except OSError as exc:
            raise StorageError(f"Cannot read listing store {self.path}") from exc
        return decode_listings(raw)

    def _bootstrap(self) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            # "x" mode refuses to clobber a file created by a concurrent bootstrap
            with self.path.open("xb") as handle:
                handle.write(b"[]")
        except FileExistsError:
            return
        except OSError as exc:
            raise StorageError(f"Cannot create listing store {self.path}") from exc

    def _write(self, payload: bytes) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp"
            )
            try:
                with os.fdopen(fd, "wb") as handle:
                    handle.write(payload)
                    handle.flush()
                    os.fsync(handle.fileno())
                os.replace(tmp_name, self.path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as exc:
            raise StorageError(f"Cannot write listing store {self.path}") from exc
