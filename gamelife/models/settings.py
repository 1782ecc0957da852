"""Engine settings model."""

from pydantic import BaseModel, ConfigDict, Field

from gamelife.config import (
    DEFAULT_CRITICAL_SUCCESS_CHANCE,
    DEFAULT_DEATH_PENALTIES_ENABLED,
    DEFAULT_STREAK_SHIELD_COST,
)


class EngineSettings(BaseModel):
    """Per-player rule settings."""

    model_config = ConfigDict(frozen=True)  # Immutable model

    death_penalties_enabled: bool = Field(
        default=DEFAULT_DEATH_PENALTIES_ENABLED,
        description="Whether reaching 0 HP costs rank, stats and gold",
    )
    critical_success_chance: float = Field(
        default=DEFAULT_CRITICAL_SUCCESS_CHANCE,
        ge=0.0,
        le=1.0,
        description="Probability that a quest completion doubles its rewards",
    )
    streak_shield_cost: int = Field(
        default=DEFAULT_STREAK_SHIELD_COST, ge=0, description="Gold cost of one streak shield charge"
    )
