"""Domain models for recipes."""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class Instruction:
    """Single recipe step with an optional expected duration in minutes."""

    step: str
    timing: float | None = None


@dataclass(frozen=True)
class Recipe:
    """Recipe with an ordered instruction list."""

    id: str
    name: str
    servings: int
    instructions: tuple[Instruction, ...]
    created_at: datetime
    description: str = ""
