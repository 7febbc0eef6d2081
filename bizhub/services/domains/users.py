"""User domain service wrapping UserRepository."""
from bizhub.logging import get_logger, sanitize_id_for_logging
from bizhub.services.models import Session
from bizhub.services.repositories import UserRepository

logger = get_logger(__name__)

DEFAULT_DISPLAY_NAME = "User"


class UsersDomain:
    """User profile operations."""

    def __init__(self, repo: UserRepository):
        self.repo = repo

    async def display_name(self, session: Session) -> str:
        """Name for the navbar greeting; falls back to "User" on any failure."""
        try:
            user = await self.repo.get_by_id(session.user_id)
        except Exception as e:
            logger.error(f"Error loading navbar user {sanitize_id_for_logging(session.user_id)}: {e}")
            return DEFAULT_DISPLAY_NAME
        if user and user.name:
            return user.name
        return DEFAULT_DISPLAY_NAME
