"""Cooking session state machine.

A session walks an immutable snapshot of a recipe's instructions. The step
index counts the steps begun so far: each advance closes the timing of the
step in hand and opens the next one. A recipe with K steps therefore
completes on advance K + 1 with exactly K timing records. Completed and
aborted sessions are terminal.
"""

from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import StrEnum
from uuid import UUID, uuid4

from food_system.domain.errors import InvalidTransitionError
from food_system.domain.recipes import Instruction


class SessionStatus(StrEnum):
    """Lifecycle states of a cooking session."""

    INITIALIZED = "initialized"
    IN_PROGRESS = "in_progress"
    PAUSED = "paused"
    COMPLETED = "completed"
    ABORTED = "aborted"


TERMINAL_STATUSES = frozenset({SessionStatus.COMPLETED, SessionStatus.ABORTED})


class AutomationLevel(StrEnum):
    """How much of a session is delegated to automation hooks."""

    MANUAL = "manual"
    ASSISTED = "assisted"
    SEMI_AUTOMATED = "semi_automated"
    FULLY_AUTOMATED = "fully_automated"


class QualityMetricKind(StrEnum):
    """Known quality metric kinds; anything else is ``custom``."""

    TEMPERATURE = "temperature"
    DONENESS = "doneness"
    TEXTURE = "texture"
    COLOR = "color"
    MOISTURE = "moisture"
    TASTE = "taste"
    CUSTOM = "custom"

    @classmethod
    def for_name(cls, name: str) -> "QualityMetricKind":
        """Return the known kind for a metric name, or ``custom``."""
        try:
            return cls(name.strip().lower())
        except ValueError:
            return cls.CUSTOM


@dataclass
class StepTiming:
    """Timing record for one instruction step."""

    step_index: int
    started_at: datetime
    expected_duration_seconds: float | None
    ended_at: datetime | None = None
    actual_duration_seconds: float | None = None


@dataclass(frozen=True)
class SensorReading:
    """Sensor value captured during a session."""

    sensor_type: str
    value: float
    recorded_at: datetime
    step_index: int


@dataclass(frozen=True)
class QualityMetric:
    """Latest value of a named quality metric."""

    name: str
    kind: QualityMetricKind
    value: float | bool | str
    recorded_at: datetime
    step_index: int


@dataclass(frozen=True)
class SessionLogEntry:
    """Error or warning attached to a session."""

    type: str
    message: str
    timestamp: datetime


@dataclass(frozen=True)
class StepInfo:
    """Progress snapshot returned while a session is running."""

    current_step: int
    total_steps: int
    current_instruction: Instruction | None
    next_instruction: Instruction | None
    progress: float
    estimated_time_remaining: float
    message: str | None = None


@dataclass(frozen=True)
class CompletionSummary:
    """Final timing and quality summary of a completed session."""

    status: SessionStatus
    total_duration_seconds: float
    paused_seconds: float
    step_timings: list[StepTiming]
    quality_metrics: dict[str, QualityMetric]


@dataclass(frozen=True)
class SessionSummary:
    """Compact view of a session for listings."""

    id: UUID
    recipe_id: str
    recipe_name: str
    status: SessionStatus
    current_step: int
    total_steps: int
    progress: float
    started_at: datetime | None
    created_at: datetime


@dataclass
class CookingSession:
    """Mutable cooking session enforcing legal lifecycle transitions."""

    recipe_id: str
    recipe_name: str
    instructions: tuple[Instruction, ...]
    servings: int
    created_at: datetime
    id: UUID = field(default_factory=uuid4)
    modifications: dict[str, object] = field(default_factory=dict)
    automation_level: AutomationLevel = AutomationLevel.MANUAL
    notes: str = ""
    status: SessionStatus = SessionStatus.INITIALIZED
    current_step: int = 0
    started_at: datetime | None = None
    ended_at: datetime | None = None
    paused_at: datetime | None = None
    paused_seconds: float = 0.0
    step_timings: list[StepTiming] = field(default_factory=list)
    sensor_readings: list[SensorReading] = field(default_factory=list)
    quality_metrics: dict[str, QualityMetric] = field(default_factory=dict)
    errors: list[SessionLogEntry] = field(default_factory=list)
    warnings: list[SessionLogEntry] = field(default_factory=list)
    updated_at: datetime | None = None

    @property
    def total_steps(self) -> int:
        return len(self.instructions)

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES

    def start(self, now: datetime) -> StepInfo:
        """Begin cooking; only legal from ``initialized``."""
        self._require("start", SessionStatus.INITIALIZED)
        self.status = SessionStatus.IN_PROGRESS
        self.started_at = now
        self.updated_at = now
        return self.step_info()

    def pause(self, now: datetime) -> None:
        """Pause a running session."""
        self._require("pause", SessionStatus.IN_PROGRESS)
        self.status = SessionStatus.PAUSED
        self.paused_at = now
        self.updated_at = now

    def resume(self, now: datetime) -> StepInfo:
        """Resume a paused session."""
        self._require("resume", SessionStatus.PAUSED)
        self._accumulate_pause(now)
        self.status = SessionStatus.IN_PROGRESS
        self.updated_at = now
        return self.step_info()

    def advance_step(self, now: datetime) -> StepInfo | CompletionSummary:
        """Close the step in hand and begin the next one.

        Returns the completion summary instead of step info once every step
        has been begun and the last one is closed.
        """
        self._require("advance", SessionStatus.IN_PROGRESS)
        if self.current_step > 0:
            self._close_step(self.current_step - 1, now)
        self.updated_at = now
        if self.current_step >= self.total_steps:
            return self._complete(now)
        self._open_step(self.current_step, now)
        self.current_step += 1
        return self.step_info()

    def abort(self, reason: str, now: datetime) -> None:
        """Abort from any non-terminal state."""
        if self.is_terminal:
            raise InvalidTransitionError("abort", self.status.value)
        if self.status is SessionStatus.PAUSED:
            self._accumulate_pause(now)
        self.status = SessionStatus.ABORTED
        self.ended_at = now
        self.updated_at = now
        self.errors.append(
            SessionLogEntry(type="session_aborted", message=reason, timestamp=now)
        )

    def record_sensor_reading(
        self, sensor_type: str, value: float, recorded_at: datetime
    ) -> SensorReading:
        """Append a sensor reading tagged with the current step; any state."""
        reading = SensorReading(
            sensor_type=sensor_type,
            value=value,
            recorded_at=recorded_at,
            step_index=self.current_step,
        )
        self.sensor_readings.append(reading)
        self.updated_at = recorded_at
        return reading

    def record_quality_metric(
        self, name: str, value: float | bool | str, now: datetime
    ) -> QualityMetric:
        """Store a metric value, replacing any previous value for the name."""
        metric = QualityMetric(
            name=name,
            kind=QualityMetricKind.for_name(name),
            value=value,
            recorded_at=now,
            step_index=self.current_step,
        )
        self.quality_metrics[name] = metric
        self.updated_at = now
        return metric

    def add_warning(self, warning_type: str, message: str, now: datetime) -> None:
        self.warnings.append(
            SessionLogEntry(type=warning_type, message=message, timestamp=now)
        )

    def step_info(self) -> StepInfo:
        """Return the current progress snapshot."""
        total = self.total_steps
        message = None
        if self.status is SessionStatus.INITIALIZED:
            message = "Session initialized. Ready to start cooking."
        elif self.current_step == 0 and self.status is SessionStatus.IN_PROGRESS:
            message = "Session started. Advance to begin the first step."
        elif self.status is SessionStatus.COMPLETED:
            message = "All steps completed!"
        current = (
            self.instructions[self.current_step - 1]
            if 0 < self.current_step <= total
            else None
        )
        upcoming = (
            self.instructions[self.current_step]
            if self.current_step < total
            else None
        )
        return StepInfo(
            current_step=self.current_step,
            total_steps=total,
            current_instruction=current,
            next_instruction=upcoming,
            progress=self.progress,
            estimated_time_remaining=self.remaining_minutes(),
            message=message,
        )

    @property
    def progress(self) -> float:
        if not self.instructions:
            return 100.0 if self.status is SessionStatus.COMPLETED else 0.0
        return self.current_step / self.total_steps * 100

    def remaining_minutes(self) -> float:
        """Sum the expected minutes of the steps not yet begun."""
        return float(
            sum(
                instruction.timing
                for instruction in self.instructions[self.current_step :]
                if instruction.timing
            )
        )

    def summary(self) -> SessionSummary:
        return SessionSummary(
            id=self.id,
            recipe_id=self.recipe_id,
            recipe_name=self.recipe_name,
            status=self.status,
            current_step=self.current_step,
            total_steps=self.total_steps,
            progress=self.progress,
            started_at=self.started_at,
            created_at=self.created_at,
        )

    def _require(self, operation: str, expected: SessionStatus) -> None:
        if self.status is not expected:
            raise InvalidTransitionError(operation, self.status.value)

    def _open_step(self, index: int, now: datetime) -> None:
        timing = self.instructions[index].timing
        self.step_timings.append(
            StepTiming(
                step_index=index,
                started_at=now,
                expected_duration_seconds=timing * 60 if timing else None,
            )
        )

    def _close_step(self, index: int, now: datetime) -> None:
        timing = self.step_timings[index]
        timing.ended_at = now
        timing.actual_duration_seconds = (now - timing.started_at).total_seconds()

    def _accumulate_pause(self, now: datetime) -> None:
        if self.paused_at is not None:
            self.paused_seconds += (now - self.paused_at).total_seconds()
        self.paused_at = None

    def _complete(self, now: datetime) -> CompletionSummary:
        self.status = SessionStatus.COMPLETED
        self.ended_at = now
        started = self.started_at or now
        return CompletionSummary(
            status=self.status,
            total_duration_seconds=(now - started).total_seconds(),
            paused_seconds=self.paused_seconds,
            step_timings=[replace(timing) for timing in self.step_timings],
            quality_metrics=dict(self.quality_metrics),
        )
