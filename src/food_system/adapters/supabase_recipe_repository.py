"""Supabase repository for recipes."""

from dataclasses import dataclass

from supabase import Client

from food_system.adapters.documents import recipe_from_document, recipe_to_document
from food_system.domain.recipes import Recipe
from food_system.services.recipes import RecipeRepository


@dataclass
class SupabaseRecipeRepository(RecipeRepository):
    """Supabase implementation for the recipe catalog."""

    client: Client

    def add(self, recipe: Recipe) -> None:
        """Insert a recipe row."""
        response = (
            self.client.table("recipes")
            .insert(
                {
                    "id": recipe.id,
                    "name": recipe.name,
                    "document": recipe_to_document(recipe),
                    "created_at": recipe.created_at.isoformat(),
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create recipe")

    def get(self, recipe_id: str) -> Recipe | None:
        """Return a recipe by id, if present."""
        response = (
            self.client.table("recipes")
            .select("document")
            .eq("id", recipe_id)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return recipe_from_document(response.data[0]["document"])

    def list_recipes(self, limit: int) -> list[Recipe]:
        """Return the newest recipes."""
        response = (
            self.client.table("recipes")
            .select("document")
            .order("created_at", desc=True)
            .limit(limit)
            .execute()
        )
        return [recipe_from_document(row["document"]) for row in response.data or []]
