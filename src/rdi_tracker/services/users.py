"""User context lookup."""

import logging
from dataclasses import dataclass
from typing import Protocol

from rdi_tracker.domain.models import UserRecord
from rdi_tracker.domain.rdi import Sex, UserContext

DEFAULT_AGE = 30
DEFAULT_SEX = Sex.FEMALE
DEFAULT_TIMEZONE = "Asia/Taipei"

_logger = logging.getLogger(__name__)


class UserRepository(Protocol):
    """Persistence interface for user profiles."""

    async def get_user(self, user_id: int) -> UserRecord | None:
        """Return the user with the given id, if present."""

    async def get_first_user(self) -> UserRecord | None:
        """Return the user with the lowest id, if any."""


@dataclass
class UserContextService:
    """Resolves the user context used for RDI and day range lookups."""

    repository: UserRepository
    default_age: int = DEFAULT_AGE
    default_sex: Sex = DEFAULT_SEX
    default_timezone: str = DEFAULT_TIMEZONE

    async def resolve(self, user_id: int | None = None) -> UserContext:
        """Return the user's context, or defaults when no user is available."""
        try:
            user = (
                await self.repository.get_user(user_id)
                if user_id is not None
                else await self.repository.get_first_user()
            )
        except Exception:
            _logger.warning("User lookup failed, using defaults", exc_info=True)
            user = None

        if user is None:
            return UserContext(
                user_id=None,
                age=self.default_age,
                sex=self.default_sex,
                timezone=self.default_timezone,
            )
        return UserContext(
            user_id=user.id,
            age=user.age or self.default_age,
            sex=user.sex or self.default_sex,
            timezone=user.timezone or self.default_timezone,
        )
