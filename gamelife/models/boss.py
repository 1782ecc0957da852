"""Boss fight models."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field, model_validator


class MetricKind(str, Enum):
    """External metric feeding a dynamic boss."""

    STEPS = "steps"
    DISTANCE = "distance"
    SLEEP_HOURS = "sleep_hours"
    BODY_WEIGHT = "body_weight"
    SCREEN_TIME_MINUTES = "screen_time_minutes"
    LOCATION_VISITS = "location_visits"
    CUSTOM = "custom"


class BossMetric(BaseModel):
    """Metric definition for a dynamic boss. Target may be below baseline."""

    model_config = ConfigDict(frozen=True)  # Immutable model

    kind: MetricKind = Field(description="Metric kind")
    baseline: float = Field(description="Metric value at which the boss has full HP")
    target: float = Field(description="Metric value at which the boss is defeated")
    current_value: Optional[float] = Field(default=None, description="Latest snapshot value")

    @computed_field
    @property
    def progress(self) -> float:
        """Fraction of the way from baseline to target, clamped to [0, 1]."""
        if self.current_value is None:
            return 0.0
        span = self.target - self.baseline
        if span == 0:
            return 1.0 if self.current_value == self.target else 0.0
        return min(1.0, max(0.0, (self.current_value - self.baseline) / span))


class Boss(BaseModel):
    """A long-running goal represented as an HP pool."""

    model_config = ConfigDict(frozen=True)  # Immutable model

    boss_id: str = Field(description="Unique boss identifier")
    title: str = Field(description="Boss title")
    max_hp: int = Field(ge=1, description="Maximum HP")
    current_hp: int = Field(ge=0, description="Remaining HP")
    is_defeated: bool = Field(default=False, description="Whether the boss has been defeated")
    metric: Optional[BossMetric] = Field(
        default=None, description="Metric source; bosses with a metric derive HP from snapshots"
    )

    @model_validator(mode="before")
    @classmethod
    def default_current_hp(cls, data):
        """New bosses start at full HP."""
        if isinstance(data, dict) and data.get("current_hp") is None and "max_hp" in data:
            data = {**data, "current_hp": data["max_hp"]}
        return data

    @model_validator(mode="after")
    def check_hp_bounds(self) -> "Boss":
        if self.current_hp > self.max_hp:
            raise ValueError("current_hp cannot exceed max_hp")
        return self

    @property
    def is_dynamic(self) -> bool:
        return self.metric is not None

    @computed_field
    @property
    def hp_progress(self) -> float:
        return self.current_hp / self.max_hp
