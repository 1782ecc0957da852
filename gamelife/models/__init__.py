"""Data models module for GameLife."""

# Stats
from gamelife.models.stats import Stat, StatType, default_stats

# Rank
from gamelife.models.rank import PlayerRank

# Quests
from gamelife.models.quest import (
    Quest,
    QuestDifficulty,
    QuestFrequency,
    QuestStatus,
    TrackingType,
)

# Bosses
from gamelife.models.boss import Boss, BossMetric, MetricKind

# Player
from gamelife.models.player import Player, UnlockedAchievement

# Outcomes
from gamelife.models.outcomes import (
    CompletionOutcome,
    DeathPenaltyReport,
    DeclineReason,
    OperationResult,
    RewardBreakdown,
    UndoToken,
)

# Settings
from gamelife.models.settings import EngineSettings

# State
from gamelife.models.state import ProgressionState

__all__ = [
    # Stats
    "Stat",
    "StatType",
    "default_stats",
    # Rank
    "PlayerRank",
    # Quests
    "Quest",
    "QuestDifficulty",
    "QuestFrequency",
    "QuestStatus",
    "TrackingType",
    # Bosses
    "Boss",
    "BossMetric",
    "MetricKind",
    # Player
    "Player",
    "UnlockedAchievement",
    # Outcomes
    "CompletionOutcome",
    "DeathPenaltyReport",
    "DeclineReason",
    "OperationResult",
    "RewardBreakdown",
    "UndoToken",
    # Settings
    "EngineSettings",
    # State
    "ProgressionState",
]
