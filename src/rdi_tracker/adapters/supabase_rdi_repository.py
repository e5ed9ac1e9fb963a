"""Supabase repository for RDI standards."""

from dataclasses import dataclass

from supabase import AsyncClient

from rdi_tracker.adapters.supabase_catalog_repository import optional_float
from rdi_tracker.domain.rdi import RdiStandardRecord
from rdi_tracker.services.rdi import RdiStandardRepository


@dataclass
class SupabaseRdiStandardRepository(RdiStandardRepository):
    """Reads the dynamic RDI standards table."""

    client: AsyncClient

    async def list_standards(self) -> list[RdiStandardRecord]:
        """Return all standard rows."""
        response = await self.client.table("rdi_standards").select("*").execute()
        return [
            RdiStandardRecord(
                nutrient=str(row.get("nutrient", "")).strip(),
                unit=str(row.get("unit", "")),
                male_value=optional_float(row.get("male_value")),
                female_value=optional_float(row.get("female_value")),
                source=row.get("source"),
                region=row.get("region"),
            )
            for row in response.data or []
        ]
