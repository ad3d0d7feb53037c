"""Discord login flow."""

import logging
from dataclasses import dataclass
from urllib.parse import urlencode

import httpx

from server_directory.adapters.discord_client import DiscordOAuthClient
from server_directory.domain.errors import UpstreamAuthError
from server_directory.domain.models import Principal

logger = logging.getLogger(__name__)

DISCORD_AUTHORIZE_URL = "https://discord.com/api/oauth2/authorize"


@dataclass
class AuthService:
    """Builds the authorize redirect and turns a callback code into a principal."""

    client: DiscordOAuthClient
    client_id: str
    redirect_uri: str

    def authorization_url(self, state: str) -> str:
        """Return the Discord authorize URL for the given state."""
        query = urlencode(
            {
                "client_id": self.client_id,
                "redirect_uri": self.redirect_uri,
                "response_type": "code",
                "scope": "identify",
                "state": state,
            }
        )
        return f"{DISCORD_AUTHORIZE_URL}?{query}"

    async def complete_login(self, code: str) -> Principal:
        """Exchange an authorization code and fetch the user's profile."""
        try:
            access_token = await self.client.exchange_code(code, self.redirect_uri)
            profile = await self.client.fetch_user(access_token)
            principal = Principal.from_profile(profile)
        except (httpx.HTTPError, KeyError, ValueError) as exc:
            logger.exception("Discord authentication failed")
            raise UpstreamAuthError("Discord authentication failed") from exc
        logger.info("User logged in", extra={"user_id": principal.id})
        return principal
