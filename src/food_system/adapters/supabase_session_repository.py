"""Supabase-backed cooking session repository."""

from dataclasses import dataclass
from datetime import UTC, datetime
from uuid import UUID

from supabase import Client

from food_system.adapters.documents import session_from_document, session_to_document
from food_system.domain.cooking import CookingSession
from food_system.services.cooking import CookingSessionRepository


@dataclass
class SupabaseCookingSessionRepository(CookingSessionRepository):
    """Supabase implementation storing one JSON document per session."""

    client: Client

    def add(self, session: CookingSession) -> None:
        """Insert a session row."""
        response = (
            self.client.table("cooking_sessions")
            .insert(
                {
                    "id": str(session.id),
                    "recipe_id": session.recipe_id,
                    "status": session.status.value,
                    "document": session_to_document(session),
                    "created_at": session.created_at.isoformat(),
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create cooking session")

    def get(self, session_id: UUID) -> CookingSession | None:
        """Return a session by id, if present."""
        response = (
            self.client.table("cooking_sessions")
            .select("document")
            .eq("id", str(session_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return session_from_document(response.data[0]["document"])

    def save(self, session: CookingSession) -> None:
        """Update a session's status and document."""
        self.client.table("cooking_sessions").update(
            {
                "status": session.status.value,
                "document": session_to_document(session),
                "updated_at": datetime.now(tz=UTC).isoformat(),
            }
        ).eq("id", str(session.id)).execute()

    def list_sessions(self, limit: int) -> list[CookingSession]:
        """Return recent sessions."""
        response = (
            self.client.table("cooking_sessions")
            .select("document")
            .order("created_at", desc=True)
            .limit(limit)
            .execute()
        )
        return [session_from_document(row["document"]) for row in response.data or []]
