"""Shared test fixtures."""

import asyncio
from dataclasses import dataclass, field
from urllib.parse import parse_qs, urlparse

import httpx
import pytest
from fastapi.testclient import TestClient

from server_directory.adapters.discord_client import DiscordOAuthClient
from server_directory.config import Settings, parse_admin_user_ids
from server_directory.containers import AppContainer
from server_directory.domain.errors import StorageError
from server_directory.domain.listings import Listing, ListingDraft
from server_directory.domain.models import Principal
from server_directory.services.access import AccessPolicy
from server_directory.services.auth import AuthService
from server_directory.services.listings import ListingRepository, ModerationService
from server_directory.services.uploads import UploadService, UploadStorage

ADMIN = Principal(id="admin-1", username="admin")
USER = Principal(id="user-1", username="alice")
OTHER_USER = Principal(id="user-2", username="bob")

PROFILES: dict[str, dict[str, object]] = {
    "admin-code": {"id": ADMIN.id, "username": ADMIN.username},
    "user-code": {"id": USER.id, "username": USER.username, "global_name": "Alice"},
}


def make_draft(name: str = "Foo") -> ListingDraft:
    return ListingDraft(server_name=name, invite_link="x", description="y")


@dataclass
class InMemoryListingRepository(ListingRepository):
    """In-memory listing store that yields to the loop around each access."""

    listings: list[Listing] = field(default_factory=list)
    fail_on_load: bool = False
    fail_on_replace: bool = False
    replace_calls: int = 0

    async def load_all(self) -> list[Listing]:
        if self.fail_on_load:
            raise StorageError("store unreadable")
        snapshot = list(self.listings)
        await asyncio.sleep(0)
        return snapshot

    async def replace_all(self, listings: list[Listing]) -> None:
        await asyncio.sleep(0)
        if self.fail_on_replace:
            raise StorageError("store unwritable")
        self.replace_calls += 1
        self.listings = list(listings)


@dataclass
class FakeUploadStorage(UploadStorage):
    """Upload storage that records saved files."""

    saved: list[tuple[str, bytes, str]] = field(default_factory=list)
    fail: bool = False

    def save(self, filename: str, content: bytes, content_type: str) -> str:
        if self.fail:
            raise OSError("disk full")
        self.saved.append((filename, content, content_type))
        return f"/uploads/{len(self.saved)}-{filename}"


@dataclass
class FakeDiscordOAuthClient(DiscordOAuthClient):
    """Discord client that treats each code as its own access token."""

    profiles: dict[str, dict[str, object]] = field(
        default_factory=lambda: dict(PROFILES)
    )
    exchanged: list[tuple[str, str]] = field(default_factory=list)

    async def exchange_code(self, code: str, redirect_uri: str) -> str:
        self.exchanged.append((code, redirect_uri))
        if code not in self.profiles:
            request = httpx.Request("POST", "https://discord.com/api/oauth2/token")
            raise httpx.HTTPStatusError(
                "invalid_grant",
                request=request,
                response=httpx.Response(400, request=request),
            )
        return code

    async def fetch_user(self, access_token: str) -> dict[str, object]:
        return self.profiles[access_token]


def login(client: TestClient, code: str) -> httpx.Response:
    """Run the OAuth redirect dance against the fake Discord client."""
    response = client.get("/auth/discord", follow_redirects=False)
    state = parse_qs(urlparse(response.headers["location"]).query)["state"][0]
    return client.get(
        "/auth/discord/callback",
        params={"code": code, "state": state},
        follow_redirects=False,
    )


@pytest.fixture
def settings() -> Settings:
    return Settings(
        discord_client_id="client-id",
        discord_client_secret="client-secret",
        session_secret="session-secret",
        admin_user_ids=ADMIN.id,
        environment="test",
    )


@pytest.fixture
def access_policy(settings: Settings) -> AccessPolicy:
    return AccessPolicy(parse_admin_user_ids(settings.admin_user_ids))


@pytest.fixture
def listing_repository() -> InMemoryListingRepository:
    return InMemoryListingRepository()


@pytest.fixture
def upload_storage() -> FakeUploadStorage:
    return FakeUploadStorage()


@pytest.fixture
def discord_client() -> FakeDiscordOAuthClient:
    return FakeDiscordOAuthClient()


@pytest.fixture
def moderation_service(
    listing_repository: InMemoryListingRepository, access_policy: AccessPolicy
) -> ModerationService:
    return ModerationService(repository=listing_repository, access_policy=access_policy)


@pytest.fixture
def container(
    settings: Settings,
    access_policy: AccessPolicy,
    moderation_service: ModerationService,
    upload_storage: FakeUploadStorage,
    discord_client: FakeDiscordOAuthClient,
) -> AppContainer:
    auth_service = AuthService(
        client=discord_client,
        client_id=settings.discord_client_id,
        redirect_uri=settings.redirect_uri,
    )

    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        access_policy=access_policy,
        moderation_service=moderation_service,
        auth_service=auth_service,
        upload_service=UploadService(upload_storage),
        close_resources=close_resources,
    )
