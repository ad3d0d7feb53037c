"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    discord_client_id: str
    discord_client_secret: str
    session_secret: str
    admin_user_ids: str | None = None
    vercel_url: str | None = None
    port: int = 3000
    storage_backend: str = "local"
    listings_path: str = "data/servers.json"
    uploads_dir: str = "uploads"
    supabase_url: str | None = None
    supabase_service_key: str | None = None
    supabase_bucket: str = "server-directory"
    listings_object_path: str = "servers.json"
    serialize_writes: bool = True
    log_level: str = "INFO"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )

    @property
    def base_url(self) -> str:
        """Public base URL; Vercel deployments set VERCEL_URL."""
        if self.vercel_url:
            return f"https://{self.vercel_url}"
        return f"http://localhost:{self.port}"

    @property
    def redirect_uri(self) -> str:
        """OAuth callback URL registered with Discord."""
        return f"{self.base_url}/auth/discord/callback"


def parse_admin_user_ids(raw: str | None) -> frozenset[str]:
    """Parse administrator Discord user IDs from env."""
    if raw is None:
        return frozenset()
    return frozenset(chunk.strip() for chunk in raw.split(",") if chunk.strip())
