"""Quest models."""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field

from gamelife.models.stats import StatType


class QuestDifficulty(str, Enum):
    """Quest difficulty tiers, ordered from easiest to hardest."""

    TRIVIAL = "trivial"
    EASY = "easy"
    NORMAL = "normal"
    HARD = "hard"
    EXTREME = "extreme"
    LEGENDARY = "legendary"


class TrackingType(str, Enum):
    """How quest progress is tracked."""

    MANUAL = "manual"
    STEPS = "steps"
    WORKOUT = "workout"
    SLEEP = "sleep"
    WATER = "water"
    LOCATION = "location"
    SCREEN_TIME = "screen_time"

    @property
    def is_automatic(self) -> bool:
        return self != TrackingType.MANUAL


class QuestFrequency(str, Enum):
    """How often a quest resets."""

    DAILY = "daily"
    ONE_TIME = "one_time"


class QuestStatus(str, Enum):
    """Quest lifecycle status."""

    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class Quest(BaseModel):
    """A trackable unit of real-world behaviour."""

    model_config = ConfigDict(frozen=True)  # Immutable model

    quest_id: str = Field(description="Unique quest identifier")
    title: str = Field(description="Quest title")
    difficulty: QuestDifficulty = Field(default=QuestDifficulty.NORMAL, description="Difficulty tier")
    is_optional: bool = Field(
        default=False, description="Optional quests grant no gold and never cost HP when missed"
    )

    # Tracking
    tracking_type: TrackingType = Field(default=TrackingType.MANUAL, description="Tracking type")
    frequency: QuestFrequency = Field(default=QuestFrequency.DAILY, description="Reset frequency")
    target_stats: list[StatType] = Field(
        default_factory=list, description="Stats that receive stat XP on completion"
    )
    target_value: float = Field(default=1.0, gt=0, description="Metric value that completes the quest")
    current_progress: float = Field(default=0.0, ge=0, description="Latest metric value")

    # Status
    status: QuestStatus = Field(default=QuestStatus.PENDING, description="Quest status")
    completed_at: Optional[datetime] = Field(default=None, description="When the quest was completed")

    # Weak reference to a boss; a lookup key, not ownership
    linked_boss_id: Optional[str] = Field(default=None, description="Boss damaged by this quest")

    @computed_field
    @property
    def normalized_progress(self) -> float:
        """Progress fraction clamped to [0, 1]."""
        if self.status == QuestStatus.COMPLETED:
            return 1.0
        return min(1.0, max(0.0, self.current_progress / self.target_value))

    @property
    def is_completed(self) -> bool:
        return self.status == QuestStatus.COMPLETED

    @property
    def counts_toward_penalty(self) -> bool:
        """Whether missing this quest costs HP."""
        return not self.is_optional
