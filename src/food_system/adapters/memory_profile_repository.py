"""In-memory consumption profile repository."""

from dataclasses import dataclass, field

from food_system.domain.consumption import ConsumptionProfile
from food_system.services.consumption import ConsumptionProfileRepository


@dataclass
class InMemoryConsumptionProfileRepository(ConsumptionProfileRepository):
    """Process-local profile store keyed by user id."""

    _profiles: dict[str, ConsumptionProfile] = field(default_factory=dict, init=False)

    def add(self, profile: ConsumptionProfile) -> None:
        self._profiles[profile.user_id] = profile

    def get(self, user_id: str) -> ConsumptionProfile | None:
        return self._profiles.get(user_id)

    def save(self, profile: ConsumptionProfile) -> None:
        self._profiles[profile.user_id] = profile

    def list_profiles(self, limit: int) -> list[ConsumptionProfile]:
        return list(self._profiles.values())[:limit]
