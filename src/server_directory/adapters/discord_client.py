"""Discord OAuth2 API client."""

from dataclasses import dataclass
from typing import Protocol

import httpx

DISCORD_API_BASE_URL = "https://discord.com/api"


class DiscordOAuthClient(Protocol):
    """Interface for the Discord OAuth2 exchange."""

    async def exchange_code(self, code: str, redirect_uri: str) -> str:
        """Exchange an authorization code for an access token."""

    async def fetch_user(self, access_token: str) -> dict[str, object]:
        """Return the profile of the token's user."""


@dataclass
class HttpxDiscordOAuthClient(DiscordOAuthClient):
    """Discord OAuth2 client implemented with httpx."""

    client_id: str
    client_secret: str
    http_client: httpx.AsyncClient
    base_url: str = DISCORD_API_BASE_URL

    @classmethod
    def create(cls, client_id: str, client_secret: str) -> "HttpxDiscordOAuthClient":
        """Create a Discord client with a managed httpx session."""
        return cls(
            client_id=client_id,
            client_secret=client_secret,
            http_client=httpx.AsyncClient(),
        )

    async def exchange_code(self, code: str, redirect_uri: str) -> str:
        """Exchange a code using the authorization_code grant."""
        response = await self.http_client.post(
            f"{self.base_url}/oauth2/token",
            data={
                "client_id": self.client_id,
                "client_secret": self.client_secret,
                "grant_type": "authorization_code",
                "code": code,
                "redirect_uri": redirect_uri,
            },
            headers={"Content-Type": "application/x-www-form-urlencoded"},
            timeout=10,
        )
        response.raise_for_status()
        access_token = response.json().get("access_token")
        if not access_token:
            raise ValueError("Discord token response has no access_token")
        return access_token

    async def fetch_user(self, access_token: str) -> dict[str, object]:
        """Fetch the current user via /users/@me."""
        response = await self.http_client.get(
            f"{self.base_url}/users/@me",
            headers={"Authorization": f"Bearer {access_token}"},
            timeout=10,
        )
        response.raise_for_status()
        return response.json()

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
