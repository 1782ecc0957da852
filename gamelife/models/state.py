"""Progression state model."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from gamelife.models.boss import Boss
from gamelife.models.outcomes import UndoToken
from gamelife.models.player import Player
from gamelife.models.quest import Quest
from gamelife.models.settings import EngineSettings


class ProgressionState(BaseModel):
    """Immutable, self-contained snapshot of one player's progression."""

    model_config = ConfigDict(frozen=True)  # Immutable model

    state_id: str = Field(description="Unique state identifier (one per player)")
    state_version: int = Field(ge=0, default=0, description="Increments with each applied operation")
    created_at: datetime = Field(default_factory=datetime.now, description="State creation timestamp")
    updated_at: datetime = Field(default_factory=datetime.now, description="Last applied operation")

    player: Player = Field(description="The player")
    quests: list[Quest] = Field(default_factory=list, description="All quests")
    bosses: list[Boss] = Field(default_factory=list, description="All boss fights")
    settings: EngineSettings = Field(default_factory=EngineSettings, description="Rule settings")

    # Only the single most recent completion is undoable
    last_completion: Optional[UndoToken] = Field(
        default=None, description="Undo token for the most recent quest completion"
    )

    def get_quest(self, quest_id: str) -> Optional[Quest]:
        return next((q for q in self.quests if q.quest_id == quest_id), None)

    def get_boss(self, boss_id: Optional[str]) -> Optional[Boss]:
        if boss_id is None:
            return None
        return next((b for b in self.bosses if b.boss_id == boss_id), None)

    def replace_quest(self, quest: Quest) -> list[Quest]:
        return [quest if q.quest_id == quest.quest_id else q for q in self.quests]

    def replace_boss(self, boss: Boss) -> list[Boss]:
        return [boss if b.boss_id == boss.boss_id else b for b in self.bosses]
