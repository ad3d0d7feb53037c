"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from pathlib import Path

from supabase import create_client

from server_directory.adapters.discord_client import HttpxDiscordOAuthClient
from server_directory.adapters.json_listing_repository import (
    JsonFileListingRepository,
)
from server_directory.adapters.local_upload_storage import LocalUploadStorage
from server_directory.adapters.supabase_listing_repository import (
    SupabaseListingRepository,
)
from server_directory.adapters.supabase_upload_storage import SupabaseUploadStorage
from server_directory.config import Settings, parse_admin_user_ids
from server_directory.services.access import AccessPolicy
from server_directory.services.auth import AuthService
from server_directory.services.listings import ListingRepository, ModerationService
from server_directory.services.uploads import UploadService, UploadStorage


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    access_policy: AccessPolicy
    moderation_service: ModerationService
    auth_service: AuthService
    upload_service: UploadService
    close_resources: Callable[[], Awaitable[None]]
    uploads_dir: Path | None = None


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    access_policy = AccessPolicy(parse_admin_user_ids(resolved_settings.admin_user_ids))

    repository: ListingRepository
    upload_storage: UploadStorage
    uploads_dir: Path | None = None
    if resolved_settings.storage_backend == "supabase":
        if not (
            resolved_settings.supabase_url and resolved_settings.supabase_service_key
        ):
            raise ValueError(
                "SUPABASE_URL and SUPABASE_SERVICE_KEY are required "
                "for the supabase storage backend"
            )
        supabase_client = create_client(
            resolved_settings.supabase_url, resolved_settings.supabase_service_key
        )
        repository = SupabaseListingRepository(
            client=supabase_client,
            bucket=resolved_settings.supabase_bucket,
            object_path=resolved_settings.listings_object_path,
        )
        upload_storage = SupabaseUploadStorage(
            client=supabase_client, bucket=resolved_settings.supabase_bucket
        )
    elif resolved_settings.storage_backend == "local":
        repository = JsonFileListingRepository(Path(resolved_settings.listings_path))
        uploads_dir = Path(resolved_settings.uploads_dir)
        upload_storage = LocalUploadStorage(uploads_dir)
    else:
        raise ValueError(
            f"Unknown storage backend: {resolved_settings.storage_backend!r}"
        )

    moderation_service = ModerationService(
        repository=repository,
        access_policy=access_policy,
        serialize_writes=resolved_settings.serialize_writes,
    )
    discord_client = HttpxDiscordOAuthClient.create(
        client_id=resolved_settings.discord_client_id,
        client_secret=resolved_settings.discord_client_secret,
    )
    auth_service = AuthService(
        client=discord_client,
        client_id=resolved_settings.discord_client_id,
        redirect_uri=resolved_settings.redirect_uri,
    )

    async def close_resources() -> None:
        await discord_client.close()

    return AppContainer(
        settings=resolved_settings,
        access_policy=access_policy,
        moderation_service=moderation_service,
        auth_service=auth_service,
        upload_service=UploadService(upload_storage),
        close_resources=close_resources,
        uploads_dir=uploads_dir,
    )
