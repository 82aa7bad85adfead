"""Recipe catalog service."""

from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Protocol
from uuid import uuid4

from food_system.domain.errors import ConflictError, NotFoundError, ValidationError
from food_system.domain.recipes import Instruction, Recipe


def _utcnow() -> datetime:
    return datetime.now(tz=UTC)


class RecipeRepository(Protocol):
    """Persistence interface for recipes."""

    def add(self, recipe: Recipe) -> None:
        """Store a new recipe."""

    def get(self, recipe_id: str) -> Recipe | None:
        """Return a recipe by id, if present."""

    def list_recipes(self, limit: int) -> list[Recipe]:
        """Return recipes, newest first."""


@dataclass
class RecipeService:
    """Application service for the recipe catalog."""

    repository: RecipeRepository
    clock: Callable[[], datetime] = _utcnow

    def create_recipe(
        self,
        name: str,
        instructions: list[Instruction],
        servings: int = 4,
        description: str = "",
        recipe_id: str | None = None,
    ) -> Recipe:
        """Validate and store a recipe."""
        if not name.strip():
            raise ValidationError("Recipe name is required")
        if not instructions:
            raise ValidationError("At least one instruction is required")
        if servings < 1:
            raise ValidationError("servings must be at least 1")
        if any(item.timing is not None and item.timing < 0 for item in instructions):
            raise ValidationError("Instruction timing must not be negative")
        if recipe_id and self.repository.get(recipe_id) is not None:
            raise ConflictError(f"Recipe {recipe_id} already exists")
        recipe = Recipe(
            id=recipe_id or f"recipe_{uuid4().hex[:12]}",
            name=name.strip(),
            servings=servings,
            instructions=tuple(instructions),
            created_at=self.clock(),
            description=description,
        )
        self.repository.add(recipe)
        return recipe

    def get_recipe(self, recipe_id: str) -> Recipe:
        recipe = self.repository.get(recipe_id)
        if recipe is None:
            raise NotFoundError("Recipe", recipe_id)
        return recipe

    def list_recipes(self, limit: int = 50) -> list[Recipe]:
        return self.repository.list_recipes(limit)
