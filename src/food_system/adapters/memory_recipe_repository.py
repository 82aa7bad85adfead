"""In-memory recipe repository."""

from dataclasses import dataclass, field

from food_system.domain.recipes import Recipe
from food_system.services.recipes import RecipeRepository


@dataclass
class InMemoryRecipeRepository(RecipeRepository):
    """Process-local recipe catalog."""

    _recipes: dict[str, Recipe] = field(default_factory=dict, init=False)

    def add(self, recipe: Recipe) -> None:
        self._recipes[recipe.id] = recipe

    def get(self, recipe_id: str) -> Recipe | None:
        return self._recipes.get(recipe_id)

    def list_recipes(self, limit: int) -> list[Recipe]:
        ordered = sorted(
            self._recipes.values(), key=lambda recipe: recipe.created_at, reverse=True
        )
        return ordered[:limit]
