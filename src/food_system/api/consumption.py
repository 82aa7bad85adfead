"""Consumption tracking and portion adjustment endpoints."""

from fastapi import APIRouter, Query, Request, status

from food_system.api.dependencies import get_container
from food_system.api.schemas import (
    AdjustmentOut,
    AdjustRequest,
    ConsumptionRecordRequest,
    PortionOut,
    PredictionOut,
    ProfileCreate,
    ProfileListOut,
    ProfileOut,
    RecordResultOut,
    SuggestionResultOut,
)
from food_system.domain.consumption import ConsumptionProfile

router = APIRouter(prefix="/consumption", tags=["consumption"])

_INGREDIENT_PATH = "/profiles/{user_id}/ingredients/{ingredient}"


@router.post("/profiles", status_code=status.HTTP_201_CREATED)
async def create_profile(payload: ProfileCreate, request: Request) -> ProfileOut:
    """Create a consumption profile for a user."""
    settings = (
        payload.adjustment_settings.to_domain()
        if payload.adjustment_settings
        else None
    )
    profile = await get_container(request).consumption_service.create_profile(
        payload.user_id, payload.household_id, settings
    )
    return _profile_out(profile)


@router.get("/profiles")
async def list_profiles(request: Request, limit: int = 100) -> ProfileListOut:
    profiles = get_container(request).consumption_service.list_profiles(limit)
    return ProfileListOut(profiles=[_profile_out(profile) for profile in profiles])


@router.get("/profiles/{user_id}")
async def get_profile(user_id: str, request: Request) -> ProfileOut:
    return _profile_out(get_container(request).consumption_service.get_profile(user_id))


@router.post("/records", status_code=status.HTTP_201_CREATED)
async def record_consumption(
    payload: ConsumptionRecordRequest, request: Request
) -> RecordResultOut:
    """Record a served/consumed pair; the response carries any new suggestion."""
    consumption_service = get_container(request).consumption_service
    record, suggestion = await consumption_service.record_consumption(
        user_id=payload.user_id,
        ingredient=payload.ingredient,
        portion_served=payload.portion_served,
        portion_consumed=payload.portion_consumed,
        timestamp=payload.timestamp,
    )
    return RecordResultOut(record=record, suggestion=suggestion)


@router.get(f"{_INGREDIENT_PATH}/suggestion")
async def get_suggestion(
    user_id: str, ingredient: str, request: Request
) -> SuggestionResultOut:
    suggestion = get_container(request).consumption_service.check_for_adjustment(
        user_id, ingredient
    )
    return SuggestionResultOut(suggestion=suggestion)


@router.post(f"{_INGREDIENT_PATH}/adjust")
async def apply_adjustment(
    user_id: str, ingredient: str, payload: AdjustRequest, request: Request
) -> AdjustmentOut:
    """Apply a portion change; needs ``userApproved`` when consultation is on."""
    adjustment = await get_container(request).consumption_service.apply_adjustment(
        user_id, ingredient, payload.new_portion, payload.user_approved
    )
    return AdjustmentOut.model_validate(adjustment)


@router.get(f"{_INGREDIENT_PATH}/prediction")
async def predict_demand(
    user_id: str,
    ingredient: str,
    request: Request,
    days: int = Query(default=7, ge=1, le=365),
) -> PredictionOut:
    prediction = get_container(request).consumption_service.predict_demand(
        user_id, ingredient, days
    )
    return PredictionOut.model_validate(prediction)


@router.get(f"{_INGREDIENT_PATH}/portion")
async def optimal_portion(
    user_id: str, ingredient: str, request: Request
) -> PortionOut:
    portion = get_container(request).consumption_service.optimal_portion(
        user_id, ingredient
    )
    return PortionOut(user_id=user_id, ingredient=ingredient, portion=portion)


def _profile_out(profile: ConsumptionProfile) -> ProfileOut:
    return ProfileOut(
        user_id=profile.user_id,
        household_id=profile.household_id,
        adjustment_settings=profile.adjustment_settings,
        current_portions=profile.current_portions,
        pending_suggestions=profile.pending_suggestions,
        efficiency=profile.efficiency_metrics(),
        created_at=profile.created_at,
        updated_at=profile.updated_at,
    )
