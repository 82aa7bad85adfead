"""Pydantic request and response models for the HTTP API.

Bodies are camelCase on the wire; snake_case is accepted on input too.
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from food_system.domain.consumption import AdjustmentSettings
from food_system.domain.cooking import (
    AutomationLevel,
    QualityMetricKind,
    SessionStatus,
)


class ApiModel(BaseModel):
    """Base model with camelCase aliases."""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, from_attributes=True
    )


class InstructionIn(ApiModel):
    """Recipe step payload; ``timing`` is in minutes."""

    step: str = Field(min_length=1, max_length=500)
    timing: float | None = Field(default=None, ge=0)


class RecipeCreate(ApiModel):
    """Recipe creation payload."""

    name: str = Field(min_length=1, max_length=100)
    instructions: list[InstructionIn] = Field(min_length=1)
    servings: int = Field(default=4, ge=1, le=50)
    description: str = Field(default="", max_length=500)
    id: str | None = None


class StartSessionRequest(ApiModel):
    """Cooking session start payload."""

    recipe_id: str = Field(min_length=1)
    servings: int | None = Field(default=None, ge=1, le=50)
    modifications: dict[str, object] = Field(default_factory=dict)
    automation_level: AutomationLevel = AutomationLevel.MANUAL
    notes: str = Field(default="", max_length=1000)


class AbortRequest(ApiModel):
    reason: str | None = Field(default=None, max_length=500)


class SensorReadingRequest(ApiModel):
    sensor_type: str = Field(min_length=1)
    value: float
    timestamp: datetime | None = None


class QualityMetricRequest(ApiModel):
    name: str = Field(min_length=1, max_length=100)
    value: bool | float | str


class AdjustmentSettingsIn(ApiModel):
    """Per-profile adjustment tuning."""

    adjustment_threshold: float = Field(default=0.15, ge=0, le=1)
    consultation_required: bool = True
    max_adjustment_per_cycle: float = Field(default=0.20, gt=0, le=1)
    learning_rate: float = Field(default=0.1, gt=0, le=1)

    def to_domain(self) -> AdjustmentSettings:
        return AdjustmentSettings(
            adjustment_threshold=self.adjustment_threshold,
            consultation_required=self.consultation_required,
            max_adjustment_per_cycle=self.max_adjustment_per_cycle,
            learning_rate=self.learning_rate,
        )


class ProfileCreate(ApiModel):
    user_id: str = Field(min_length=1, max_length=100)
    household_id: str | None = None
    adjustment_settings: AdjustmentSettingsIn | None = None


class ConsumptionRecordRequest(ApiModel):
    """Served-versus-consumed observation in grams."""

    user_id: str = Field(min_length=1)
    ingredient: str = Field(min_length=1, max_length=100)
    portion_served: float
    portion_consumed: float
    timestamp: datetime | None = None


class AdjustRequest(ApiModel):
    new_portion: float
    user_approved: bool = False


class PollingRequest(ApiModel):
    sensor_types: list[str] = Field(min_length=1)
    session_id: UUID | None = None


class ActuatorRequest(ApiModel):
    command: str = Field(min_length=1)
    params: dict[str, object] = Field(default_factory=dict)


class InstructionOut(ApiModel):
    step: str
    timing: float | None


class RecipeOut(ApiModel):
    id: str
    name: str
    description: str
    servings: int
    instructions: list[InstructionOut]
    created_at: datetime


class StepInfoOut(ApiModel):
    current_step: int
    total_steps: int
    current_instruction: InstructionOut | None
    next_instruction: InstructionOut | None
    progress: float
    estimated_time_remaining: float
    message: str | None


class StepTimingOut(ApiModel):
    step_index: int
    started_at: datetime
    ended_at: datetime | None
    expected_duration_seconds: float | None
    actual_duration_seconds: float | None


class SensorReadingOut(ApiModel):
    sensor_type: str
    value: float
    recorded_at: datetime
    step_index: int


class QualityMetricOut(ApiModel):
    name: str
    kind: QualityMetricKind
    value: bool | float | str
    recorded_at: datetime
    step_index: int


class SessionLogEntryOut(ApiModel):
    type: str
    message: str
    timestamp: datetime


class CompletionSummaryOut(ApiModel):
    status: SessionStatus
    total_duration_seconds: float
    paused_seconds: float
    step_timings: list[StepTimingOut]
    quality_metrics: dict[str, QualityMetricOut]


class SessionStartedOut(ApiModel):
    session_id: UUID
    status: SessionStatus
    current_step: StepInfoOut
    message: str = "Cooking session started successfully"


class SessionStateOut(ApiModel):
    """Result of a lifecycle operation."""

    session_id: UUID
    status: SessionStatus
    current_step: StepInfoOut
    completion: CompletionSummaryOut | None = None
    message: str | None = None


class SessionSummaryOut(ApiModel):
    id: UUID
    recipe_id: str
    recipe_name: str
    status: SessionStatus
    current_step: int
    total_steps: int
    progress: float
    started_at: datetime | None
    created_at: datetime


class SessionDetailOut(ApiModel):
    """Full session view with the most recent sensor readings."""

    session_id: UUID
    recipe_id: str
    recipe_name: str
    status: SessionStatus
    servings: int
    automation_level: AutomationLevel
    notes: str
    modifications: dict[str, object]
    current_step: StepInfoOut
    started_at: datetime | None
    ended_at: datetime | None
    paused_seconds: float
    step_timings: list[StepTimingOut]
    quality_metrics: dict[str, QualityMetricOut]
    sensor_readings: list[SensorReadingOut]
    errors: list[SessionLogEntryOut]
    warnings: list[SessionLogEntryOut]


class AdjustmentSettingsOut(ApiModel):
    adjustment_threshold: float
    consultation_required: bool
    max_adjustment_per_cycle: float
    learning_rate: float


class ConsumptionRecordOut(ApiModel):
    ingredient: str
    portion_served: float
    portion_consumed: float
    waste_amount: float
    waste_percentage: float
    timestamp: datetime
    day_of_week: int
    hour_of_day: int
    season: str


class SuggestionOut(ApiModel):
    ingredient: str
    current_portion: float
    suggested_portion: float
    reduction: float
    reduction_percentage: float
    average_waste: float
    reason: str
    requires_consultation: bool
    created_at: datetime


class EfficiencyOut(ApiModel):
    overall_waste_rate: float
    total_portions_tracked: int
    ingredients_tracked: int
    adjustments_applied: int
    last_update: datetime | None


class ProfileOut(ApiModel):
    user_id: str
    household_id: str | None
    adjustment_settings: AdjustmentSettingsOut
    current_portions: dict[str, float]
    pending_suggestions: dict[str, SuggestionOut]
    efficiency: EfficiencyOut
    created_at: datetime
    updated_at: datetime | None


class RecordResultOut(ApiModel):
    record: ConsumptionRecordOut
    suggestion: SuggestionOut | None


class SuggestionResultOut(ApiModel):
    suggestion: SuggestionOut | None


class AdjustmentOut(ApiModel):
    ingredient: str
    old_portion: float
    new_portion: float
    change: float
    change_percentage: float
    applied_at: datetime
    user_approved: bool


class PredictionOut(ApiModel):
    ingredient: str
    days_ahead: int
    predicted_daily_consumption: float
    total_predicted_demand: float
    confidence: float
    historical_average: float
    seasonal_factor: float
    trend_factor: float
    sample_count: int


class PortionOut(ApiModel):
    user_id: str
    ingredient: str
    portion: float


class SensorSampleOut(ApiModel):
    module_id: str
    sensor_type: str
    value: float
    recorded_at: datetime


class PollingOut(ApiModel):
    module_id: str
    polling: bool
    samples: list[SensorSampleOut] = Field(default_factory=list)


class ActuatorCommandOut(ApiModel):
    module_id: str
    actuator_id: str
    command: str
    params: dict[str, object]
    issued_at: datetime


class RecipeListOut(ApiModel):
    recipes: list[RecipeOut]


class SessionListOut(ApiModel):
    sessions: list[SessionSummaryOut]


class ProfileListOut(ApiModel):
    profiles: list[ProfileOut]


class ReadingsOut(ApiModel):
    module_id: str
    polling: bool
    readings: list[SensorSampleOut]
