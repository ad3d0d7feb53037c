"""Tests for Supabase adapter implementations."""

import asyncio
import json
from dataclasses import dataclass, field

import pytest

from server_directory.adapters.supabase_listing_repository import (
    SupabaseListingRepository,
)
from server_directory.adapters.supabase_upload_storage import SupabaseUploadStorage
from server_directory.domain.errors import StorageError
from server_directory.domain.listings import ListingStatus
from server_directory.services.access import AccessPolicy
from server_directory.services.listings import ModerationService
from tests.conftest import ADMIN, USER, make_draft


@dataclass
class FakeBucket:
    name: str
    objects: dict[str, bytes] = field(default_factory=dict)
    options: dict[str, dict[str, str]] = field(default_factory=dict)
    fail: bool = False
    arrives_after_list: dict[str, bytes] = field(default_factory=dict)

    def list(self, path: str | None = None) -> list[dict[str, object]]:
        if self.fail:
            raise RuntimeError("storage unavailable")
        prefix = f"{path}/" if path else ""
        entries = [
            {"name": key[len(prefix) :]}
            for key in self.objects
            if key.startswith(prefix) and "/" not in key[len(prefix) :]
        ]
        self.objects.update(self.arrives_after_list)
        self.arrives_after_list.clear()
        return entries

    def download(self, path: str) -> bytes:
        if self.fail:
            raise RuntimeError("storage unavailable")
        return self.objects[path]

    def upload(self, path: str, file: bytes, file_options: dict[str, str]) -> None:
        if self.fail:
            raise RuntimeError("storage unavailable")
        if file_options.get("upsert") == "false" and path in self.objects:
            raise RuntimeError("The resource already exists")
        self.objects[path] = file
        self.options[path] = file_options

    def get_public_url(self, path: str) -> str:
        return f"https://example.supabase.co/storage/v1/object/public/{self.name}/{path}"


@dataclass
class FakeStorage:
    buckets: dict[str, FakeBucket] = field(default_factory=dict)

    def from_(self, name: str) -> FakeBucket:
        if name not in self.buckets:
            self.buckets[name] = FakeBucket(name=name)
        return self.buckets[name]


@dataclass
class FakeSupabaseClient:
    storage: FakeStorage = field(default_factory=FakeStorage)


def test_listing_repository_bootstraps_missing_object() -> None:
    client = FakeSupabaseClient()
    repository = SupabaseListingRepository(client, bucket="directory")

    assert asyncio.run(repository.load_all()) == []
    bucket = client.storage.from_("directory")
    assert bucket.objects["servers.json"] == b"[]"
    assert bucket.options["servers.json"]["upsert"] == "false"


def test_listing_repository_bootstrap_keeps_concurrently_created_object() -> None:
    client = FakeSupabaseClient()
    bucket = client.storage.from_("directory")
    populated = json.dumps(
        [
            {
                "id": "one",
                "inviteLink": "x",
                "serverName": "Foo",
                "description": "y",
                "imageUrl": None,
                "status": "pending",
                "submittedBy": {"id": "1", "username": "a"},
            }
        ]
    ).encode()
    bucket.arrives_after_list["servers.json"] = populated
    repository = SupabaseListingRepository(client, bucket="directory")

    listings = asyncio.run(repository.load_all())

    assert [listing.id for listing in listings] == ["one"]
    assert bucket.objects["servers.json"] == populated


def test_listing_repository_replace_overwrites_object() -> None:
    client = FakeSupabaseClient()
    repository = SupabaseListingRepository(client, bucket="directory")
    asyncio.run(repository.load_all())

    asyncio.run(repository.replace_all([]))

    assert client.storage.from_("directory").options["servers.json"]["upsert"] == (
        "true"
    )


def test_listing_repository_roundtrip_in_nested_folder() -> None:
    client = FakeSupabaseClient()
    repository = SupabaseListingRepository(
        client, bucket="directory", object_path="data/servers.json"
    )
    service = ModerationService(
        repository=repository, access_policy=AccessPolicy(frozenset({ADMIN.id}))
    )

    listing = asyncio.run(service.submit(USER, make_draft()))
    asyncio.run(service.apply_action(ADMIN, listing.id, "approve"))

    rows = json.loads(client.storage.from_("directory").objects["data/servers.json"])
    assert [row["id"] for row in rows] == [listing.id]
    assert asyncio.run(repository.load_all())[0].status == ListingStatus.APPROVED


def test_listing_repository_does_not_reset_existing_object() -> None:
    client = FakeSupabaseClient()
    bucket = client.storage.from_("directory")
    bucket.objects["servers.json"] = json.dumps(
        [
            {
                "id": "one",
                "inviteLink": "x",
                "serverName": "Foo",
                "description": "y",
                "imageUrl": None,
                "status": "approved",
                "submittedBy": {"id": "1", "username": "a"},
            }
        ]
    ).encode()
    repository = SupabaseListingRepository(client, bucket="directory")

    listings = asyncio.run(repository.load_all())

    assert [listing.id for listing in listings] == ["one"]


def test_listing_repository_wraps_client_failures() -> None:
    client = FakeSupabaseClient()
    client.storage.from_("directory").fail = True
    repository = SupabaseListingRepository(client, bucket="directory")

    with pytest.raises(StorageError):
        asyncio.run(repository.load_all())
    with pytest.raises(StorageError):
        asyncio.run(repository.replace_all([]))


def test_listing_repository_rejects_malformed_object() -> None:
    client = FakeSupabaseClient()
    client.storage.from_("directory").objects["servers.json"] = b"not json"
    repository = SupabaseListingRepository(client, bucket="directory")

    with pytest.raises(StorageError):
        asyncio.run(repository.load_all())


def test_upload_storage_returns_public_url() -> None:
    client = FakeSupabaseClient()
    storage = SupabaseUploadStorage(client, bucket="directory")

    url = storage.save("Logo.PNG", b"png-bytes", "image/png")

    bucket = client.storage.from_("directory")
    (object_path,) = bucket.objects
    assert object_path.startswith("uploads/")
    assert object_path.endswith(".png")
    assert bucket.options[object_path]["content-type"] == "image/png"
    assert url.endswith(f"/directory/{object_path}")
