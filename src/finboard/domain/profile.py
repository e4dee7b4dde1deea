"""Profile domain service."""

import logging
from typing import Optional

from finboard.domain.entities import Profile, User
from finboard.domain.errors import FetchFailed
from finboard.domain.records import profile_from_row
from finboard.gateway.base import Gateway

logger = logging.getLogger(__name__)


def initials(name: Optional[str]) -> str:
    """First letter of each word, upper-cased, at most two letters."""
    if not name:
        return ""
    return "".join(part[0] for part in name.split()).upper()[:2]


class ProfileService:
    """Service for reading and updating user profiles."""

    def __init__(self, gateway: Gateway):
        """Initialize profile service.

        Args:
            gateway: Gateway instance
        """
        self.gateway = gateway

    async def get_profile(self, user: Optional[User]) -> Optional[Profile]:
        """Get the profile of user.

        Args:
            user: Current user, or None when unauthenticated

        Returns:
            Profile, or None if there is no user or no profile row

        Raises:
            FetchFailed: If the gateway returns an error
        """
        if user is None:
            return None
        result = await self.gateway.query("profiles").eq("id", user.id).limit(1).execute()
        if not result.ok:
            logger.error("Error loading profile: %s", result.error)
            raise FetchFailed(result.error, collection="profiles")
        if not result.rows:
            return None
        return profile_from_row(result.rows[0])

    async def save_profile(
        self,
        user: User,
        name: str,
        phone: Optional[str] = None,
        avatar_url: Optional[str] = None,
    ) -> Profile:
        """Create the profile of user. Returns the stored profile.

        Raises:
            FetchFailed: If the gateway rejects the write
        """
        result = await self.gateway.insert(
            "profiles",
            {"id": user.id, "name": name, "phone": phone, "avatar_url": avatar_url},
        )
        if not result.ok:
            raise FetchFailed(result.error, collection="profiles")
        return profile_from_row(result.rows[0])
