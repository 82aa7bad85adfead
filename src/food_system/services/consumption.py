"""Consumption tracking and portion adjustment service."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Protocol

from food_system.domain.consumption import (
    AdjustmentSettings,
    ConsumptionProfile,
    ConsumptionRecord,
    DemandPrediction,
    EfficiencyMetrics,
    PortionAdjustment,
    PortionAdjustmentSuggestion,
)
from food_system.domain.errors import (
    ConflictError,
    ConsultationRequiredError,
    NotFoundError,
    ValidationError,
)
from food_system.services.forecasting import DemandForecaster, MovingAverageForecaster
from food_system.services.locks import KeyedLocks

_logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(tz=UTC)


class ConsumptionProfileRepository(Protocol):
    """Persistence interface for consumption profiles."""

    def add(self, profile: ConsumptionProfile) -> None:
        """Store a new profile."""

    def get(self, user_id: str) -> ConsumptionProfile | None:
        """Return the profile for a user, if present."""

    def save(self, profile: ConsumptionProfile) -> None:
        """Persist changes to an existing profile."""

    def list_profiles(self, limit: int) -> list[ConsumptionProfile]:
        """Return stored profiles."""


@dataclass
class ConsumptionService:
    """Records consumption and manages portion adjustments per user."""

    repository: ConsumptionProfileRepository
    default_settings: AdjustmentSettings = field(default_factory=AdjustmentSettings)
    forecaster: DemandForecaster = field(default_factory=MovingAverageForecaster)
    clock: Callable[[], datetime] = _utcnow
    locks: KeyedLocks = field(default_factory=KeyedLocks)

    async def create_profile(
        self,
        user_id: str,
        household_id: str | None = None,
        adjustment_settings: AdjustmentSettings | None = None,
    ) -> ConsumptionProfile:
        """Create a profile for a user that doesn't have one yet."""
        if not user_id.strip():
            raise ValidationError("user_id is required")
        async with self.locks.hold(user_id):
            if self.repository.get(user_id) is not None:
                raise ConflictError(f"Consumption profile for user {user_id} exists")
            now = self.clock()
            profile = ConsumptionProfile(
                user_id=user_id,
                created_at=now,
                household_id=household_id,
                adjustment_settings=adjustment_settings or self.default_settings,
                updated_at=now,
            )
            self.repository.add(profile)
        _logger.info("Created consumption profile", extra={"user_id": user_id})
        return profile

    def get_profile(self, user_id: str) -> ConsumptionProfile:
        profile = self.repository.get(user_id)
        if profile is None:
            raise NotFoundError("Consumption profile for user", user_id)
        return profile

    def list_profiles(self, limit: int = 100) -> list[ConsumptionProfile]:
        return self.repository.list_profiles(limit)

    async def record_consumption(  # noqa: PLR0913
        self,
        user_id: str,
        ingredient: str,
        portion_served: float,
        portion_consumed: float,
        timestamp: datetime | None = None,
    ) -> tuple[ConsumptionRecord, PortionAdjustmentSuggestion | None]:
        """Record a served/consumed pair and return any new suggestion."""
        if not ingredient.strip():
            raise ValidationError("ingredient is required")
        resolved_timestamp = _as_utc(timestamp) if timestamp else self.clock()
        async with self.locks.hold(user_id):
            profile = self.get_profile(user_id)
            record, suggestion = profile.record_consumption(
                ingredient, portion_served, portion_consumed, resolved_timestamp
            )
            self.repository.save(profile)
        if record.waste_percentage < 0:
            _logger.warning(
                "Consumed more than served",
                extra={
                    "user_id": user_id,
                    "ingredient": ingredient,
                    "waste_percentage": record.waste_percentage,
                },
            )
        if suggestion is not None:
            _logger.info(
                "Portion adjustment suggested",
                extra={
                    "user_id": user_id,
                    "ingredient": ingredient,
                    "current_portion": suggestion.current_portion,
                    "suggested_portion": suggestion.suggested_portion,
                    "average_waste": suggestion.average_waste,
                },
            )
        return record, suggestion

    def check_for_adjustment(
        self, user_id: str, ingredient: str
    ) -> PortionAdjustmentSuggestion | None:
        """Evaluate the rolling window without changing anything."""
        return self.get_profile(user_id).check_for_adjustment(ingredient, self.clock())

    async def apply_adjustment(
        self,
        user_id: str,
        ingredient: str,
        new_portion: float,
        user_approved: bool = False,
    ) -> PortionAdjustment:
        """Apply a portion change; requires approval when consultation is on."""
        async with self.locks.hold(user_id):
            profile = self.get_profile(user_id)
            try:
                adjustment = profile.apply_adjustment(
                    ingredient, new_portion, user_approved, self.clock()
                )
            except ConsultationRequiredError:
                _logger.info(
                    "Portion adjustment awaiting consultation",
                    extra={"user_id": user_id, "ingredient": ingredient},
                )
                raise
            self.repository.save(profile)
        _logger.info(
            "Portion adjustment applied",
            extra={
                "user_id": user_id,
                "ingredient": ingredient,
                "old_portion": adjustment.old_portion,
                "new_portion": adjustment.new_portion,
                "user_approved": user_approved,
            },
        )
        return adjustment

    def predict_demand(
        self, user_id: str, ingredient: str, days_ahead: int = 7
    ) -> DemandPrediction:
        if days_ahead < 1:
            raise ValidationError("days_ahead must be at least 1")
        profile = self.get_profile(user_id)
        return self.forecaster.predict(profile, ingredient, days_ahead, self.clock())

    def optimal_portion(self, user_id: str, ingredient: str) -> float:
        return self.get_profile(user_id).optimal_portion(ingredient, self.clock())

    def efficiency_metrics(self, user_id: str) -> EfficiencyMetrics:
        return self.get_profile(user_id).efficiency_metrics()


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)
