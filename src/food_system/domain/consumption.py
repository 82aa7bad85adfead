"""Consumption profiles and waste tracking."""

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from statistics import fmean

from food_system.domain.errors import ConsultationRequiredError, ValidationError

ROLLING_WINDOW_SIZE = 30
MIN_SAMPLES_FOR_ADJUSTMENT = 5
MAX_REDUCTION_RATIO = 0.5
OPTIMAL_PORTION_BUFFER = 1.05
OPTIMAL_PORTION_LOOKBACK_DAYS = 14

DEFAULT_PORTIONS_G = {
    "lettuce": 80.0,
    "tomato": 120.0,
    "herbs": 15.0,
    "spinach": 100.0,
    "cucumber": 150.0,
    "carrot": 100.0,
    "onion": 80.0,
    "garlic": 10.0,
}
FALLBACK_PORTION_G = 100.0

_SEASONS_BY_MONTH = {
    3: "spring",
    4: "spring",
    5: "spring",
    6: "summer",
    7: "summer",
    8: "summer",
    9: "fall",
    10: "fall",
    11: "fall",
}


def ingredient_key(ingredient: str) -> str:
    """Return the key an ingredient is tracked under."""
    return ingredient.strip().lower()


def default_portion(ingredient: str) -> float:
    """Return the default portion in grams for an ingredient."""
    return DEFAULT_PORTIONS_G.get(ingredient_key(ingredient), FALLBACK_PORTION_G)


def season_for(timestamp: datetime) -> str:
    """Return the northern-hemisphere season bucket for a timestamp."""
    return _SEASONS_BY_MONTH.get(timestamp.month, "winter")


@dataclass(frozen=True)
class AdjustmentSettings:
    """Tuning knobs for portion adjustment suggestions."""

    adjustment_threshold: float = 0.15
    consultation_required: bool = True
    max_adjustment_per_cycle: float = 0.20
    learning_rate: float = 0.1


@dataclass(frozen=True)
class ConsumptionRecord:
    """One served-versus-consumed observation."""

    ingredient: str
    portion_served: float
    portion_consumed: float
    waste_amount: float
    waste_percentage: float
    timestamp: datetime
    day_of_week: int
    hour_of_day: int
    season: str

    @classmethod
    def create(
        cls,
        ingredient: str,
        portion_served: float,
        portion_consumed: float,
        timestamp: datetime,
    ) -> "ConsumptionRecord":
        """Build a record, deriving waste and calendar fields."""
        if portion_served <= 0:
            raise ValidationError(
                "portion_served must be positive",
                details={"portion_served": portion_served},
            )
        if portion_consumed < 0:
            raise ValidationError(
                "portion_consumed must not be negative",
                details={"portion_consumed": portion_consumed},
            )
        waste_amount = portion_served - portion_consumed
        return cls(
            ingredient=ingredient_key(ingredient),
            portion_served=portion_served,
            portion_consumed=portion_consumed,
            waste_amount=waste_amount,
            waste_percentage=waste_amount / portion_served * 100,
            timestamp=timestamp,
            day_of_week=timestamp.weekday(),
            hour_of_day=timestamp.hour,
            season=season_for(timestamp),
        )


@dataclass(frozen=True)
class PortionAdjustmentSuggestion:
    """Proposed portion change; never applied on its own."""

    ingredient: str
    current_portion: float
    suggested_portion: float
    reduction: float
    reduction_percentage: float
    average_waste: float
    reason: str
    requires_consultation: bool
    created_at: datetime


@dataclass(frozen=True)
class PortionAdjustment:
    """Applied portion change."""

    ingredient: str
    old_portion: float
    new_portion: float
    change: float
    change_percentage: float
    applied_at: datetime
    user_approved: bool


@dataclass(frozen=True)
class DemandPrediction:
    """Projected consumption for an ingredient."""

    ingredient: str
    days_ahead: int
    predicted_daily_consumption: float
    total_predicted_demand: float
    confidence: float
    historical_average: float
    seasonal_factor: float
    trend_factor: float
    sample_count: int


@dataclass(frozen=True)
class EfficiencyMetrics:
    """Aggregate waste metrics for a profile."""

    overall_waste_rate: float
    total_portions_tracked: int
    ingredients_tracked: int
    adjustments_applied: int
    last_update: datetime | None


@dataclass
class ConsumptionProfile:
    """Per-user consumption history and portion settings."""

    user_id: str
    created_at: datetime
    household_id: str | None = None
    adjustment_settings: AdjustmentSettings = field(
        default_factory=AdjustmentSettings
    )
    portion_history: list[ConsumptionRecord] = field(default_factory=list)
    waste_windows: dict[str, list[float]] = field(default_factory=dict)
    current_portions: dict[str, float] = field(default_factory=dict)
    adjustment_log: list[PortionAdjustment] = field(default_factory=list)
    pending_suggestions: dict[str, PortionAdjustmentSuggestion] = field(
        default_factory=dict
    )
    overall_waste_rate: float = 0.0
    updated_at: datetime | None = None
    last_consumption_at: datetime | None = None

    def record_consumption(
        self,
        ingredient: str,
        portion_served: float,
        portion_consumed: float,
        timestamp: datetime,
    ) -> tuple[ConsumptionRecord, PortionAdjustmentSuggestion | None]:
        """Record an observation and return it with any new suggestion."""
        record = ConsumptionRecord.create(
            ingredient, portion_served, portion_consumed, timestamp
        )
        self.portion_history.append(record)
        window = self.waste_windows.setdefault(record.ingredient, [])
        window.append(record.waste_percentage)
        if len(window) > ROLLING_WINDOW_SIZE:
            del window[: len(window) - ROLLING_WINDOW_SIZE]
        self.overall_waste_rate = self.calculate_overall_waste_rate()
        suggestion = self.check_for_adjustment(record.ingredient, timestamp)
        if suggestion is not None:
            self.pending_suggestions[record.ingredient] = suggestion
        self.last_consumption_at = timestamp
        self.updated_at = timestamp
        return record, suggestion

    def calculate_overall_waste_rate(self) -> float:
        """Mean over every rolling-window entry across all ingredients."""
        values = [value for window in self.waste_windows.values() for value in window]
        return fmean(values) if values else 0.0

    def check_for_adjustment(
        self, ingredient: str, now: datetime
    ) -> PortionAdjustmentSuggestion | None:
        """Suggest a smaller portion when recent waste exceeds the threshold."""
        ingredient = ingredient_key(ingredient)
        window = self.waste_windows.get(ingredient, [])
        if len(window) < MIN_SAMPLES_FOR_ADJUSTMENT:
            return None
        average_waste = fmean(window[-MIN_SAMPLES_FOR_ADJUSTMENT:])
        settings = self.adjustment_settings
        if average_waste <= settings.adjustment_threshold * 100:
            return None

        current = self.portion_for(ingredient)
        factor = max(
            1 - (average_waste / 100) * settings.learning_rate,
            1 - settings.max_adjustment_per_cycle,
        )
        suggested = max(current * factor, current * MAX_REDUCTION_RATIO)
        return PortionAdjustmentSuggestion(
            ingredient=ingredient,
            current_portion=current,
            suggested_portion=suggested,
            reduction=current - suggested,
            reduction_percentage=(current - suggested) / current * 100,
            average_waste=average_waste,
            reason=f"Average waste of {average_waste:.1f}% detected",
            requires_consultation=settings.consultation_required,
            created_at=now,
        )

    def apply_adjustment(
        self,
        ingredient: str,
        new_portion: float,
        user_approved: bool,
        now: datetime,
    ) -> PortionAdjustment:
        """Overwrite the current portion, honouring consultation settings."""
        ingredient = ingredient_key(ingredient)
        if self.adjustment_settings.consultation_required and not user_approved:
            raise ConsultationRequiredError(self.user_id, ingredient)
        if new_portion <= 0:
            raise ValidationError(
                "new_portion must be positive", details={"new_portion": new_portion}
            )
        old_portion = self.portion_for(ingredient)
        self.current_portions[ingredient] = new_portion
        adjustment = PortionAdjustment(
            ingredient=ingredient,
            old_portion=old_portion,
            new_portion=new_portion,
            change=new_portion - old_portion,
            change_percentage=(new_portion - old_portion) / old_portion * 100,
            applied_at=now,
            user_approved=user_approved,
        )
        self.adjustment_log.append(adjustment)
        self.pending_suggestions.pop(ingredient, None)
        self.updated_at = now
        return adjustment

    def portion_for(self, ingredient: str) -> float:
        key = ingredient_key(ingredient)
        return self.current_portions.get(key, default_portion(key))

    def records_for(
        self,
        ingredient: str,
        since: datetime | None = None,
        until: datetime | None = None,
    ) -> list[ConsumptionRecord]:
        """Return records for an ingredient in ``[since, until)``."""
        key = ingredient_key(ingredient)
        return [
            record
            for record in self.portion_history
            if record.ingredient == key
            and (since is None or record.timestamp >= since)
            and (until is None or record.timestamp < until)
        ]

    def optimal_portion(self, ingredient: str, now: datetime) -> float:
        """Return the portion to serve next time."""
        ingredient = ingredient_key(ingredient)
        if ingredient in self.current_portions:
            return self.current_portions[ingredient]
        recent = self.records_for(
            ingredient, since=now - timedelta(days=OPTIMAL_PORTION_LOOKBACK_DAYS)
        )
        if recent:
            average = fmean(record.portion_consumed for record in recent)
            if average > 0:
                return float(round(average * OPTIMAL_PORTION_BUFFER))
        return default_portion(ingredient)

    def efficiency_metrics(self) -> EfficiencyMetrics:
        return EfficiencyMetrics(
            overall_waste_rate=self.overall_waste_rate,
            total_portions_tracked=len(self.portion_history),
            ingredients_tracked=len(self.waste_windows),
            adjustments_applied=len(self.adjustment_log),
            last_update=self.last_consumption_at,
        )
