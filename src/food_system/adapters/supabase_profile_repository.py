"""Supabase repository for consumption profiles."""

from dataclasses import dataclass
from datetime import UTC, datetime

from supabase import Client

from food_system.adapters.documents import profile_from_document, profile_to_document
from food_system.domain.consumption import ConsumptionProfile
from food_system.services.consumption import ConsumptionProfileRepository


@dataclass
class SupabaseConsumptionProfileRepository(ConsumptionProfileRepository):
    """Supabase implementation storing one JSON document per user."""

    client: Client

    def add(self, profile: ConsumptionProfile) -> None:
        """Insert a profile row."""
        response = (
            self.client.table("consumption_profiles")
            .insert(
                {
                    "user_id": profile.user_id,
                    "household_id": profile.household_id,
                    "document": profile_to_document(profile),
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create consumption profile")

    def get(self, user_id: str) -> ConsumptionProfile | None:
        """Return the profile for a user, if present."""
        response = (
            self.client.table("consumption_profiles")
            .select("document")
            .eq("user_id", user_id)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return profile_from_document(response.data[0]["document"])

    def save(self, profile: ConsumptionProfile) -> None:
        """Replace the stored profile document."""
        self.client.table("consumption_profiles").update(
            {
                "document": profile_to_document(profile),
                "updated_at": datetime.now(tz=UTC).isoformat(),
            }
        ).eq("user_id", profile.user_id).execute()

    def list_profiles(self, limit: int) -> list[ConsumptionProfile]:
        """Return stored profiles."""
        response = (
            self.client.table("consumption_profiles")
            .select("document")
            .limit(limit)
            .execute()
        )
        return [profile_from_document(row["document"]) for row in response.data or []]
