"""JSON document codec for persisted domain objects."""

from pydantic import TypeAdapter

from food_system.domain.consumption import ConsumptionProfile
from food_system.domain.cooking import CookingSession
from food_system.domain.recipes import Recipe

_SESSION_ADAPTER = TypeAdapter(CookingSession)
_PROFILE_ADAPTER = TypeAdapter(ConsumptionProfile)
_RECIPE_ADAPTER = TypeAdapter(Recipe)


def session_to_document(session: CookingSession) -> dict[str, object]:
    return _SESSION_ADAPTER.dump_python(session, mode="json")


def session_from_document(document: dict[str, object]) -> CookingSession:
    return _SESSION_ADAPTER.validate_python(document)


def profile_to_document(profile: ConsumptionProfile) -> dict[str, object]:
    return _PROFILE_ADAPTER.dump_python(profile, mode="json")


def profile_from_document(document: dict[str, object]) -> ConsumptionProfile:
    return _PROFILE_ADAPTER.validate_python(document)


def recipe_to_document(recipe: Recipe) -> dict[str, object]:
    return _RECIPE_ADAPTER.dump_python(recipe, mode="json")


def recipe_from_document(document: dict[str, object]) -> Recipe:
    return _RECIPE_ADAPTER.validate_python(document)
