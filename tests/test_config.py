"""Tests for configuration helpers."""

from server_directory.config import Settings, parse_admin_user_ids


def test_parse_admin_user_ids() -> None:
    assert parse_admin_user_ids(None) == frozenset()
    assert parse_admin_user_ids("") == frozenset()
    assert parse_admin_user_ids("123, 456 ,,") == frozenset({"123", "456"})


def test_base_url_defaults_to_localhost(settings: Settings) -> None:
    assert settings.base_url == "http://localhost:3000"
    assert settings.redirect_uri == "http://localhost:3000/auth/discord/callback"


def test_base_url_uses_vercel_url(settings: Settings) -> None:
    deployed = settings.model_copy(update={"vercel_url": "directory.vercel.app"})

    assert deployed.redirect_uri == (
        "https://directory.vercel.app/auth/discord/callback"
    )


def test_log_level_read_from_environment(monkeypatch) -> None:
    monkeypatch.setenv("LOG_LEVEL", "DEBUG")
    required = {
        "discord_client_id": "client",
        "discord_client_secret": "secret",
        "session_secret": "session",
    }

    assert Settings(_env_file=None, **required).log_level == "DEBUG"
