"""Domain error hierarchy.

Every error raised by the core is recoverable and scoped to a single request.
The HTTP layer maps ``status_code`` onto the response envelope.
"""


class FoodSystemError(Exception):
    """Base class for typed, recoverable errors raised by the core."""

    status_code = 500

    def __init__(self, message: str, details: dict[str, object] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ValidationError(FoodSystemError):
    """Input failed validation."""

    status_code = 400


class NotFoundError(FoodSystemError):
    """A session, profile or recipe id is unknown."""

    status_code = 404

    def __init__(self, entity: str, entity_id: object):
        super().__init__(
            f"{entity} {entity_id} not found",
            details={"entity": entity, "id": str(entity_id)},
        )
        self.entity = entity
        self.entity_id = entity_id


class ConflictError(FoodSystemError):
    """The request conflicts with existing state."""

    status_code = 409


class CookingProcessError(FoodSystemError):
    """A cooking session could not perform the requested operation."""

    status_code = 409


class InvalidTransitionError(CookingProcessError):
    """The session state machine rejected a transition."""

    def __init__(self, operation: str, current_state: str):
        super().__init__(
            f"Cannot {operation} session in state {current_state}",
            details={"operation": operation, "current_state": current_state},
        )
        self.operation = operation
        self.current_state = current_state


class ConsultationRequiredError(FoodSystemError):
    """A portion adjustment needs explicit user approval."""

    status_code = 409

    def __init__(self, user_id: str, ingredient: str):
        super().__init__(
            "User consultation required for portion adjustment",
            details={"user_id": user_id, "ingredient": ingredient},
        )


class AutomationError(FoodSystemError):
    """An automation hook could not process a reading."""

    status_code = 422


class RateLimitExceededError(FoodSystemError):
    """Too many requests for a rate-limit bucket."""

    status_code = 429

    def __init__(self, message: str, retry_after_seconds: int):
        super().__init__(message, details={"retry_after": retry_after_seconds})
        self.retry_after_seconds = retry_after_seconds


class HardwareNotImplementedError(FoodSystemError):
    """Physical hardware access is not available in this deployment."""

    status_code = 501


class CapacityExceededError(FoodSystemError):
    """In-memory storage is full of active entities."""

    status_code = 503


class HardwareError(FoodSystemError):
    """A hardware module or gateway could not be reached."""

    status_code = 503
