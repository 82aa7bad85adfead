"""Recipe catalog endpoints."""

from fastapi import APIRouter, Request, status

from food_system.api.dependencies import get_container
from food_system.api.schemas import RecipeCreate, RecipeListOut, RecipeOut
from food_system.domain.recipes import Instruction

router = APIRouter(prefix="/recipes", tags=["recipes"])


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_recipe(payload: RecipeCreate, request: Request) -> RecipeOut:
    """Add a recipe to the catalog."""
    recipe = get_container(request).recipe_service.create_recipe(
        name=payload.name,
        instructions=[
            Instruction(step=item.step, timing=item.timing)
            for item in payload.instructions
        ],
        servings=payload.servings,
        description=payload.description,
        recipe_id=payload.id,
    )
    return RecipeOut.model_validate(recipe)


@router.get("")
async def list_recipes(request: Request, limit: int = 50) -> RecipeListOut:
    """Return the newest recipes."""
    recipes = get_container(request).recipe_service.list_recipes(limit)
    return RecipeListOut(recipes=recipes)


@router.get("/{recipe_id}")
async def get_recipe(recipe_id: str, request: Request) -> RecipeOut:
    return RecipeOut.model_validate(
        get_container(request).recipe_service.get_recipe(recipe_id)
    )
