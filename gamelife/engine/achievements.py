"""Achievement catalog and unlock tracking."""

import logging
from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from gamelife.engine.leveling import LevelCalculator
from gamelife.engine.stat_calculator import StatCalculator
from gamelife.models.player import Player, UnlockedAchievement

logger = logging.getLogger(__name__)


class AchievementRarity(str, Enum):
    COMMON = "common"
    RARE = "rare"
    EPIC = "epic"
    LEGENDARY = "legendary"


class AchievementCategory(str, Enum):
    GRIND = "grind"
    ARENA = "arena"
    SCHOLAR = "scholar"
    VAULT = "vault"


class AchievementMetric(str, Enum):
    """Player counter an achievement is measured against."""

    LONGEST_STREAK = "longest_streak"
    BOSSES_DEFEATED = "bosses_defeated"
    TRAINING_SESSIONS = "training_sessions"
    SHOP_PURCHASES = "shop_purchases"
    GOLD_SPENT = "gold_spent"
    QUESTS_COMPLETED = "quests_completed"
    HIGHEST_STAT = "highest_stat"


class AchievementReward(BaseModel):
    model_config = ConfigDict(frozen=True)  # Immutable model

    xp: int = Field(ge=0)
    gold: int = Field(ge=0)
    title: Optional[str] = None


class AchievementDefinition(BaseModel):
    """A catalog entry."""

    model_config = ConfigDict(frozen=True)  # Immutable model

    achievement_id: str
    title: str
    description: str
    requirement_text: str
    category: AchievementCategory
    rarity: AchievementRarity
    metric: AchievementMetric
    target_value: int = Field(ge=1)
    reward: AchievementReward


class AchievementProgress(BaseModel):
    model_config = ConfigDict(frozen=True)  # Immutable model

    current: int
    target: int

    @property
    def fraction(self) -> float:
        if self.target <= 0:
            return 0.0
        return min(1.0, max(0.0, self.current / self.target))

    @property
    def is_complete(self) -> bool:
        return self.current >= self.target


def _achievement(
    achievement_id: str,
    title: str,
    description: str,
    requirement_text: str,
    category: AchievementCategory,
    rarity: AchievementRarity,
    metric: AchievementMetric,
    target_value: int,
    xp: int,
    gold: int,
    reward_title: Optional[str] = None,
) -> AchievementDefinition:
    return AchievementDefinition(
        achievement_id=achievement_id,
        title=title,
        description=description,
        requirement_text=requirement_text,
        category=category,
        rarity=rarity,
        metric=metric,
        target_value=target_value,
        reward=AchievementReward(xp=xp, gold=gold, title=reward_title),
    )


ACHIEVEMENT_CATALOG: list[AchievementDefinition] = [
    _achievement(
        "grind_streak_3", "Momentum Initiated", "Start the consistency engine.",
        "Reach a 3-day streak.", AchievementCategory.GRIND, AchievementRarity.COMMON,
        AchievementMetric.LONGEST_STREAK, 3, xp=20, gold=5,
    ),
    _achievement(
        "grind_streak_14", "The Unbroken", "Two weeks without breaking stride.",
        "Reach a 14-day streak.", AchievementCategory.GRIND, AchievementRarity.RARE,
        AchievementMetric.LONGEST_STREAK, 14, xp=120, gold=25, reward_title="The Unbroken",
    ),
    _achievement(
        "grind_streak_30", "Discipline Engine", "One full month of execution.",
        "Reach a 30-day streak.", AchievementCategory.GRIND, AchievementRarity.EPIC,
        AchievementMetric.LONGEST_STREAK, 30, xp=250, gold=60,
    ),
    _achievement(
        "arena_first_boss", "First Blood", "Your first boss has fallen.",
        "Defeat 1 boss.", AchievementCategory.ARENA, AchievementRarity.COMMON,
        AchievementMetric.BOSSES_DEFEATED, 1, xp=60, gold=15,
    ),
    _achievement(
        "arena_boss_10", "Giant Slayer", "Battle-tested against major goals.",
        "Defeat 10 bosses.", AchievementCategory.ARENA, AchievementRarity.EPIC,
        AchievementMetric.BOSSES_DEFEATED, 10, xp=300, gold=80, reward_title="Giant Slayer",
    ),
    _achievement(
        "scholar_training_5", "Focus Cadet", "You entered deep work mode repeatedly.",
        "Complete 5 training sessions.", AchievementCategory.SCHOLAR, AchievementRarity.COMMON,
        AchievementMetric.TRAINING_SESSIONS, 5, xp=70, gold=15,
    ),
    _achievement(
        "scholar_training_25", "Deep Work Adept", "Sustained concentration forged.",
        "Complete 25 training sessions.", AchievementCategory.SCHOLAR, AchievementRarity.RARE,
        AchievementMetric.TRAINING_SESSIONS, 25, xp=180, gold=40,
    ),
    _achievement(
        "vault_purchase_1", "First Loot", "You converted effort into reward.",
        "Purchase 1 shop reward.", AchievementCategory.VAULT, AchievementRarity.COMMON,
        AchievementMetric.SHOP_PURCHASES, 1, xp=40, gold=0,
    ),
    _achievement(
        "vault_purchase_10", "Quartermaster", "You consistently reinvest your grind.",
        "Purchase 10 shop rewards.", AchievementCategory.VAULT, AchievementRarity.RARE,
        AchievementMetric.SHOP_PURCHASES, 10, xp=120, gold=30,
    ),
    _achievement(
        "vault_spend_1000", "Golden Circuit", "Serious economy throughput.",
        "Spend 1000 Gold in the shop.", AchievementCategory.VAULT, AchievementRarity.EPIC,
        AchievementMetric.GOLD_SPENT, 1000, xp=220, gold=50,
    ),
    _achievement(
        "quests_complete_25", "Questline Initiated", "First major milestone reached.",
        "Complete 25 quests.", AchievementCategory.GRIND, AchievementRarity.COMMON,
        AchievementMetric.QUESTS_COMPLETED, 25, xp=80, gold=20,
    ),
    _achievement(
        "quests_complete_100", "System Veteran", "Relentless completion pressure applied.",
        "Complete 100 quests.", AchievementCategory.GRIND, AchievementRarity.LEGENDARY,
        AchievementMetric.QUESTS_COMPLETED, 100, xp=500, gold=120, reward_title="System Veteran",
    ),
    _achievement(
        "legend_max_stat_100", "Apex Build", "A stat crossed elite threshold.",
        "Reach 100 in any one stat.", AchievementCategory.ARENA, AchievementRarity.LEGENDARY,
        AchievementMetric.HIGHEST_STAT, 100, xp=600, gold=150, reward_title="Apex Hunter",
    ),
]


class AchievementTracker:
    """Measures achievement progress and unlocks earned achievements."""

    @staticmethod
    def get_definition(achievement_id: str) -> Optional[AchievementDefinition]:
        return next((a for a in ACHIEVEMENT_CATALOG if a.achievement_id == achievement_id), None)

    @staticmethod
    def metric_value(player: Player, metric: AchievementMetric) -> int:
        if metric == AchievementMetric.LONGEST_STREAK:
            return max(player.longest_streak, player.current_streak)
        elif metric == AchievementMetric.BOSSES_DEFEATED:
            return player.defeated_boss_count
        elif metric == AchievementMetric.TRAINING_SESSIONS:
            return player.training_session_count
        elif metric == AchievementMetric.SHOP_PURCHASES:
            return player.shop_purchase_count
        elif metric == AchievementMetric.GOLD_SPENT:
            return player.gold_spent
        elif metric == AchievementMetric.QUESTS_COMPLETED:
            return player.completed_quest_count
        elif metric == AchievementMetric.HIGHEST_STAT:
            return StatCalculator.highest_stat_value(player)
        return 0

    @staticmethod
    def progress(player: Player, achievement_id: str) -> Optional[AchievementProgress]:
        """Progress toward one achievement, or None for an unknown id."""
        definition = AchievementTracker.get_definition(achievement_id)
        if definition is None:
            return None
        current = AchievementTracker.metric_value(player, definition.metric)
        return AchievementProgress(current=current, target=definition.target_value)

    @staticmethod
    def is_unlocked(player: Player, achievement_id: str) -> bool:
        return any(u.achievement_id == achievement_id for u in player.unlocked_achievements)

    @staticmethod
    def claim(player: Player, now: Optional[datetime] = None) -> tuple[Player, list[AchievementDefinition]]:
        """
        Unlock every newly satisfied achievement and grant its rewards.

        Reward XP goes through the normal level-up transition; reward titles
        are added to the player's unlocked titles.

        Returns:
            Tuple of (new player, achievements unlocked by this call)
        """
        now = now or datetime.now()
        unlocked: list[AchievementDefinition] = []
        updated = player

        for definition in ACHIEVEMENT_CATALOG:
            if AchievementTracker.is_unlocked(updated, definition.achievement_id):
                continue
            progress = AchievementTracker.progress(updated, definition.achievement_id)
            if not progress.is_complete:
                continue

            updated, _ = LevelCalculator.add_xp(updated, definition.reward.xp)
            titles = list(updated.unlocked_titles)
            if definition.reward.title and definition.reward.title not in titles:
                titles.append(definition.reward.title)
            updated = updated.model_copy(
                update={
                    "gold": updated.gold + definition.reward.gold,
                    "unlocked_titles": titles,
                    "unlocked_achievements": updated.unlocked_achievements
                    + [UnlockedAchievement(achievement_id=definition.achievement_id, unlocked_at=now)],
                }
            )
            unlocked.append(definition)
            logger.info(f"Player {player.player_id} unlocked achievement {definition.achievement_id}")

        return updated, unlocked
