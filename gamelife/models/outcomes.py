"""Reward, penalty and undo models returned by the engine."""

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from gamelife.models.boss import Boss
from gamelife.models.player import Player
from gamelife.models.quest import Quest
from gamelife.models.rank import PlayerRank
from gamelife.models.stats import StatType


class DeclineReason(str, Enum):
    """Why an operation was declined. Declines are never fatal."""

    ALREADY_COMPLETED = "already_completed"
    NOTHING_TO_UNDO = "nothing_to_undo"
    QUEST_NOT_FOUND = "quest_not_found"
    BOSS_NOT_FOUND = "boss_not_found"
    INSUFFICIENT_GOLD = "insufficient_gold"
    INVALID_AMOUNT = "invalid_amount"
    NOT_DYNAMIC = "not_dynamic"
    NOT_AUTOMATIC = "not_automatic"
    CYCLE_ALREADY_CLOSED = "cycle_already_closed"


class RewardBreakdown(BaseModel):
    """Everything a quest completion granted."""

    model_config = ConfigDict(frozen=True)  # Immutable model

    quest_id: str = Field(description="Completed quest")
    xp_awarded: int = Field(ge=0, description="XP granted")
    gold_awarded: int = Field(ge=0, description="Gold granted (0 for optional quests)")
    stat_xp_awarded: dict[StatType, int] = Field(default_factory=dict, description="Stat XP per stat")
    was_critical: bool = Field(default=False, description="Whether the critical roll doubled rewards")
    streak_multiplier: float = Field(default=1.0, description="Multiplier applied from the streak")
    boss_id: Optional[str] = Field(default=None, description="Linked boss, if damaged")
    boss_damage: int = Field(default=0, ge=0, description="HP removed from the linked boss")
    boss_defeated: bool = Field(default=False, description="Whether this completion defeated the boss")
    levels_gained: int = Field(default=0, ge=0, description="Levels gained from this reward")
    new_level: int = Field(ge=1, description="Level after the grant")
    new_rank: PlayerRank = Field(description="Rank after the grant")


class UndoToken(BaseModel):
    """Snapshot sufficient to reverse the most recent quest completion."""

    model_config = ConfigDict(frozen=True)  # Immutable model

    quest_id: str = Field(description="Quest whose completion can be undone")
    quest_title: str = Field(description="Title shown to the user")
    player_before: Player = Field(description="Player before the grant")
    quest_before: Quest = Field(description="Quest before the grant")
    boss_before: Optional[Boss] = Field(default=None, description="Linked boss before the grant")
    reward: RewardBreakdown = Field(description="Reward that was granted")


class CompletionOutcome(BaseModel):
    """New snapshots produced by a quest completion."""

    model_config = ConfigDict(frozen=True)  # Immutable model

    player: Player
    quest: Quest
    boss: Optional[Boss] = None
    reward: RewardBreakdown
    undo_token: UndoToken


class DeathPenaltyReport(BaseModel):
    """What the death transition did."""

    model_config = ConfigDict(frozen=True)  # Immutable model

    penalties_applied: bool = Field(description="False when death penalties are disabled")
    previous_level: int = Field(ge=1)
    new_level: int = Field(ge=1)
    previous_rank: PlayerRank
    new_rank: PlayerRank
    gold_lost: int = Field(default=0, ge=0)
    stat_base_lost: dict[StatType, int] = Field(default_factory=dict)
    hp_restored_to: int = Field(ge=1)


class OperationResult(BaseModel):
    """Result of an engine operation, accepted or declined."""

    model_config = ConfigDict(frozen=True)  # Immutable model

    success: bool = Field(description="Whether the operation was applied")
    reason: Optional[DeclineReason] = Field(default=None, description="Decline reason code")
    message: str = Field(default="", description="Human-readable summary")
    reward: Optional[RewardBreakdown] = Field(default=None)
    penalty: Optional[DeathPenaltyReport] = Field(default=None)
    details: dict[str, Any] = Field(default_factory=dict, description="Operation-specific extras")

    @classmethod
    def declined(cls, reason: DeclineReason, message: str) -> "OperationResult":
        return cls(success=False, reason=reason, message=message)
