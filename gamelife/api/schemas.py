"""Request bodies accepted by the HTTP API."""

from datetime import date
from typing import Optional

from pydantic import BaseModel, Field

from gamelife.models.quest import QuestDifficulty
from gamelife.models.settings import EngineSettings
from gamelife.models.stats import StatType


class CreatePlayerRequest(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=64, description="Player name")
    origin_story: str = Field(default="", max_length=2000, description="Free-form origin story")
    settings: Optional[EngineSettings] = Field(default=None, description="Overrides the default settings")


class CompleteQuestRequest(BaseModel):
    critical: Optional[bool] = Field(default=None, description="Force the critical roll; rolled when omitted")


class ValueRequest(BaseModel):
    """A metric snapshot for a quest or boss."""

    value: float = Field(ge=0, description="Latest metric value")


class DamageRequest(BaseModel):
    amount: int = Field(description="HP to remove")


class MissedQuestsRequest(BaseModel):
    count: int = Field(description="Number of missed required quests")


class EndCycleRequest(BaseModel):
    day: Optional[date] = Field(default=None, description="Day being closed; today when omitted")


class PurchaseRequest(BaseModel):
    cost: int = Field(description="Gold to spend")


class TrainingRequest(BaseModel):
    stat_type: StatType = Field(description="Stat being trained")
    difficulty: QuestDifficulty = Field(default=QuestDifficulty.NORMAL, description="Session difficulty")
