"""Domain exceptions."""


class ServerDirectoryError(Exception):
    """Base class for server directory errors."""


class AuthenticationRequiredError(ServerDirectoryError):
    """Raised when an operation needs a session and none is present."""


class AuthorizationDeniedError(ServerDirectoryError):
    """Raised when the session principal is not an administrator."""


class InvalidActionError(ServerDirectoryError):
    """Raised for moderation actions outside the supported set."""

    def __init__(self, action: object) -> None:
        super().__init__(f"Unsupported action: {action!r}")
        self.action = action


class ListingNotFoundError(ServerDirectoryError):
    """Raised when a listing id does not exist in the store."""

    def __init__(self, listing_id: str) -> None:
        super().__init__(f"Listing not found: {listing_id}")
        self.listing_id = listing_id


class StorageError(ServerDirectoryError):
    """Raised when the record store cannot be read or written."""


class UpstreamAuthError(ServerDirectoryError):
    """Raised when the identity provider exchange or profile fetch fails."""
