"""Supabase repository for the recipe totals cache."""

from dataclasses import dataclass
from datetime import UTC, datetime

from supabase import AsyncClient

from rdi_tracker.services.recipe_totals import RecipeTotalsRepository


@dataclass
class SupabaseRecipeTotalsRepository(RecipeTotalsRepository):
    """Stores computed recipe totals keyed by recipe id."""

    client: AsyncClient

    async def get_totals(self, recipe_id: int) -> object | None:
        """Return the raw cached payload for a recipe, if any."""
        response = (
            await self.client.table("recipe_totals")
            .select("recipe_id, totals")
            .eq("recipe_id", recipe_id)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return response.data[0].get("totals")

    async def upsert_totals(self, recipe_id: int, payload: dict[str, object]) -> None:
        """Create or overwrite the cached payload for a recipe."""
        response = (
            await self.client.table("recipe_totals")
            .upsert(
                {
                    "recipe_id": recipe_id,
                    "totals": payload,
                    "updated_at": datetime.now(tz=UTC).isoformat(),
                },
                on_conflict="recipe_id",
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError(f"Failed to store totals for recipe {recipe_id}")

    async def delete_totals(self, recipe_id: int) -> None:
        """Delete the cached payload; absent rows are ignored."""
        await (
            self.client.table("recipe_totals")
            .delete()
            .eq("recipe_id", recipe_id)
            .execute()
        )
