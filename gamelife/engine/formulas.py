"""The mathematical foundation of the progression system."""

import math

from gamelife.config import (
    BOSS_LEVEL_BONUS_DIVISOR,
    DEFAULT_CRITICAL_SUCCESS_CHANCE,
    PENALTY_DAMAGE_PER_MISSED_QUEST,
    STREAK_BONUS_PER_DAY,
    STREAK_MULTIPLIER_CAP,
    XP_BASE_PER_LEVEL,
    XP_GROWTH_BASE,
    XP_GROWTH_DIVISOR,
)
from gamelife.models.quest import QuestDifficulty
from gamelife.models.rank import PlayerRank

_QUEST_XP = {
    QuestDifficulty.TRIVIAL: 5,
    QuestDifficulty.EASY: 15,
    QuestDifficulty.NORMAL: 30,
    QuestDifficulty.HARD: 60,
    QuestDifficulty.EXTREME: 100,
    QuestDifficulty.LEGENDARY: 200,
}

_QUEST_GOLD = {
    QuestDifficulty.TRIVIAL: 1,
    QuestDifficulty.EASY: 3,
    QuestDifficulty.NORMAL: 5,
    QuestDifficulty.HARD: 10,
    QuestDifficulty.EXTREME: 20,
    QuestDifficulty.LEGENDARY: 50,
}

_STAT_XP = {
    QuestDifficulty.TRIVIAL: 2,
    QuestDifficulty.EASY: 5,
    QuestDifficulty.NORMAL: 10,
    QuestDifficulty.HARD: 20,
    QuestDifficulty.EXTREME: 35,
    QuestDifficulty.LEGENDARY: 60,
}


class GameFormulas:
    """Closed-form reward and progression formulas. All methods are pure."""

    CRITICAL_SUCCESS_CHANCE = DEFAULT_CRITICAL_SUCCESS_CHANCE

    @staticmethod
    def xp_required_for_level(level: int) -> int:
        """
        XP required to reach a level.

        Formula: XP = Level * 100 * 1.5^(Level/10), floored.
        """
        base = level * float(XP_BASE_PER_LEVEL)
        multiplier = math.pow(XP_GROWTH_BASE, level / XP_GROWTH_DIVISOR)
        return math.floor(base * multiplier)

    @staticmethod
    def quest_xp(difficulty: QuestDifficulty, bonus_multiplier: float = 1.0) -> int:
        """XP awarded for completing a quest of the given difficulty."""
        return math.floor(_QUEST_XP[difficulty] * bonus_multiplier)

    @staticmethod
    def quest_gold(difficulty: QuestDifficulty) -> int:
        """Gold awarded for completing a non-optional quest."""
        return _QUEST_GOLD[difficulty]

    @staticmethod
    def stat_xp(difficulty: QuestDifficulty) -> int:
        return _STAT_XP[difficulty]

    @staticmethod
    def streak_multiplier(streak_days: int) -> float:
        # +5% per day, capped at 100% bonus
        return min(1.0 + streak_days * STREAK_BONUS_PER_DAY, STREAK_MULTIPLIER_CAP)

    @staticmethod
    def boss_damage(difficulty: QuestDifficulty, player_level: int) -> int:
        base_damage = GameFormulas.quest_xp(difficulty)
        level_bonus = 1.0 + player_level / BOSS_LEVEL_BONUS_DIVISOR
        return math.floor(base_damage * level_bonus)

    @staticmethod
    def penalty_damage(missed_quest_count: int) -> int:
        """HP lost for missed required quests."""
        return missed_quest_count * PENALTY_DAMAGE_PER_MISSED_QUEST

    @staticmethod
    def rank_for_level(level: int) -> PlayerRank:
        return PlayerRank.for_level(level)
