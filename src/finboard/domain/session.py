"""Session provider interface.

The dashboard only needs to know who is logged in. Authentication itself is
handled elsewhere; a provider returns the current user or None.
"""

from abc import ABC, abstractmethod
from typing import Optional

from finboard.domain.entities import User


class SessionProvider(ABC):
    """Supplies the current authenticated user."""

    @abstractmethod
    def current_user(self) -> Optional[User]:
        """Return the logged-in user, or None when unauthenticated."""
        pass


class StaticSessionProvider(SessionProvider):
    """Session provider holding a fixed user, set from the command line."""

    def __init__(self, user: Optional[User] = None):
        self.user = user

    def current_user(self) -> Optional[User]:
        return self.user

    def sign_in(self, user: User) -> None:
        self.user = user

    def sign_out(self) -> None:
        self.user = None
