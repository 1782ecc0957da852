"""Progression rules engine package."""

from gamelife.engine.achievements import ACHIEVEMENT_CATALOG, AchievementTracker
from gamelife.engine.bosses import BossSystem
from gamelife.engine.economy import EconomySystem, TrainingSystem
from gamelife.engine.formulas import GameFormulas
from gamelife.engine.game_engine import ProgressionEngine
from gamelife.engine.history import StateHistory, StateSnapshot
from gamelife.engine.leveling import LevelCalculator
from gamelife.engine.penalty import DeathPenaltySystem
from gamelife.engine.quest_manager import QuestManager
from gamelife.engine.stat_calculator import StatCalculator
from gamelife.engine.streaks import StreakTracker

__all__ = [
    "ACHIEVEMENT_CATALOG",
    "AchievementTracker",
    "BossSystem",
    "DeathPenaltySystem",
    "EconomySystem",
    "GameFormulas",
    "LevelCalculator",
    "ProgressionEngine",
    "QuestManager",
    "StatCalculator",
    "StateHistory",
    "StateSnapshot",
    "StreakTracker",
    "TrainingSystem",
]
