"""Supabase repository for user profiles."""

from dataclasses import dataclass

from supabase import AsyncClient

from rdi_tracker.domain.models import UserRecord
from rdi_tracker.domain.rdi import Sex
from rdi_tracker.services.users import UserRepository


@dataclass
class SupabaseUserRepository(UserRepository):
    """Supabase implementation for user profiles."""

    client: AsyncClient

    async def get_user(self, user_id: int) -> UserRecord | None:
        """Return the user with the given id, if present."""
        response = (
            await self.client.table("users")
            .select("id, age, sex, timezone")
            .eq("id", user_id)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_user(response.data[0])

    async def get_first_user(self) -> UserRecord | None:
        """Return the user with the lowest id, if any."""
        response = (
            await self.client.table("users")
            .select("id, age, sex, timezone")
            .order("id", desc=False)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_user(response.data[0])


def _parse_user(row: dict[str, object]) -> UserRecord:
    raw_sex = row.get("sex")
    sex = None
    if isinstance(raw_sex, str) and raw_sex.upper() in {Sex.MALE, Sex.FEMALE}:
        sex = Sex(raw_sex.upper())
    age = row.get("age")
    return UserRecord(
        id=int(row["id"]),
        age=int(age) if isinstance(age, int | float) and age > 0 else None,
        sex=sex,
        timezone=row.get("timezone") or None,
    )
