"""Domain models for the server directory."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Principal:
    """Authenticated identity as reported by the identity provider."""

    id: str
    username: str
    global_name: str | None = None
    avatar: str | None = None

    @classmethod
    def from_profile(cls, payload: dict[str, object]) -> "Principal":
        """Build a principal from a Discord ``/users/@me`` payload."""
        raw_id = payload.get("id")
        username = payload.get("username")
        if raw_id in (None, "") or not isinstance(username, str):
            raise ValueError("Profile payload is missing id or username")
        global_name = payload.get("global_name")
        avatar = payload.get("avatar")
        return cls(
            id=str(raw_id),
            username=username,
            global_name=global_name if isinstance(global_name, str) else None,
            avatar=avatar if isinstance(avatar, str) else None,
        )

    def to_dict(self) -> dict[str, object]:
        return {
            "id": self.id,
            "username": self.username,
            "global_name": self.global_name,
            "avatar": self.avatar,
        }
