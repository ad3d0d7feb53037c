"""Authorization predicates for the server directory."""

from dataclasses import dataclass

from server_directory.domain.errors import (
    AuthenticationRequiredError,
    AuthorizationDeniedError,
)
from server_directory.domain.models import Principal


@dataclass(frozen=True)
class AccessPolicy:
    """Decides whether a session principal may reach an operation.

    Administrators are matched by exact id. The policy holds no other state,
    so every check is a pure function of the principal passed in.
    """

    admin_user_ids: frozenset[str]

    def has_session(self, principal: Principal | None) -> bool:
        """Return true when a principal is attached to the session."""
        return principal is not None

    def is_admin(self, principal: Principal | None) -> bool:
        """Return true when the principal is a configured administrator."""
        return self.has_session(principal) and principal.id in self.admin_user_ids

    def require_session(self, principal: Principal | None) -> Principal:
        """Return the principal or raise when no session is present."""
        if principal is None:
            raise AuthenticationRequiredError("Login required")
        return principal

    def require_admin(self, principal: Principal | None) -> Principal:
        """Return the principal or raise when it is not an administrator."""
        principal = self.require_session(principal)
        if principal.id not in self.admin_user_ids:
            raise AuthorizationDeniedError("Only the administrator can do this.")
        return principal
