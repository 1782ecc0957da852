"""Quest completion, undo and reset."""

import logging
import math
import random
from datetime import date, datetime
from typing import Optional

from gamelife.config import CRITICAL_REWARD_MULTIPLIER
from gamelife.engine.bosses import BossSystem
from gamelife.engine.formulas import GameFormulas
from gamelife.engine.leveling import LevelCalculator
from gamelife.engine.stat_calculator import StatCalculator
from gamelife.models.boss import Boss
from gamelife.models.outcomes import CompletionOutcome, DeclineReason, RewardBreakdown, UndoToken
from gamelife.models.player import Player
from gamelife.models.quest import Quest, QuestFrequency, QuestStatus
from gamelife.models.stats import StatType

logger = logging.getLogger(__name__)


class QuestManager:
    """Grants quest rewards and reverses the most recent grant."""

    @staticmethod
    def roll_critical(rng: random.Random, chance: float) -> bool:
        """Roll for a critical success."""
        return rng.random() < chance

    @staticmethod
    def calculate_reward(
        quest: Quest, player: Player, was_critical: bool
    ) -> tuple[int, int, dict[StatType, int], float]:
        """
        Calculate XP, gold and stat XP for a quest without applying them.

        Returns:
            Tuple of (xp, gold, stat_xp per stat, streak multiplier)
        """
        multiplier = GameFormulas.streak_multiplier(player.current_streak)
        xp = GameFormulas.quest_xp(quest.difficulty, multiplier)
        gold = 0 if quest.is_optional else math.floor(GameFormulas.quest_gold(quest.difficulty) * multiplier)
        stat_amount = math.floor(GameFormulas.stat_xp(quest.difficulty) * multiplier)

        if was_critical:
            xp *= CRITICAL_REWARD_MULTIPLIER
            gold *= CRITICAL_REWARD_MULTIPLIER
            stat_amount *= CRITICAL_REWARD_MULTIPLIER

        stat_xp = {stat_type: stat_amount for stat_type in dict.fromkeys(quest.target_stats)}
        return xp, gold, stat_xp, multiplier

    @staticmethod
    def complete_quest(
        player: Player,
        quest: Quest,
        boss: Optional[Boss],
        was_critical: bool,
        now: Optional[datetime] = None,
    ) -> tuple[Optional[CompletionOutcome], Optional[DeclineReason]]:
        """
        Complete a quest and grant its rewards.

        Args:
            player: Player completing the quest
            quest: Quest being completed
            boss: Boss referenced by quest.linked_boss_id, if it exists
            was_critical: Result of the critical roll
            now: Completion timestamp

        Returns:
            Tuple of (outcome, decline reason); exactly one is None
        """
        if quest.is_completed:
            logger.warning(f"Quest {quest.quest_id} is already completed")
            return None, DeclineReason.ALREADY_COMPLETED

        xp, gold, stat_xp, multiplier = QuestManager.calculate_reward(quest, player, was_critical)

        # Boss damage uses the level held when the quest was finished
        new_boss = boss
        boss_damage = 0
        boss_defeated = False
        if boss is not None and BossSystem.takes_quest_damage(boss):
            requested = GameFormulas.boss_damage(quest.difficulty, player.level)
            new_boss, boss_damage = BossSystem.apply_damage(boss, requested)
            boss_defeated = new_boss.is_defeated

        updated_player, levels_gained = LevelCalculator.add_xp(player, xp)
        updated_player = StatCalculator.add_stat_xp(updated_player, stat_xp)
        updated_player = updated_player.model_copy(
            update={
                "gold": updated_player.gold + gold,
                "completed_quest_count": updated_player.completed_quest_count + 1,
                "defeated_boss_count": updated_player.defeated_boss_count + (1 if boss_defeated else 0),
            }
        )

        completed_quest = quest.model_copy(
            update={"status": QuestStatus.COMPLETED, "completed_at": now or datetime.now()}
        )

        reward = RewardBreakdown(
            quest_id=quest.quest_id,
            xp_awarded=xp,
            gold_awarded=gold,
            stat_xp_awarded=stat_xp,
            was_critical=was_critical,
            streak_multiplier=multiplier,
            boss_id=boss.boss_id if boss_damage else None,
            boss_damage=boss_damage,
            boss_defeated=boss_defeated,
            levels_gained=levels_gained,
            new_level=updated_player.level,
            new_rank=updated_player.rank,
        )
        logger.debug(f"Quest {quest.quest_id} reward: {reward.model_dump(mode='json')}")

        token = UndoToken(
            quest_id=quest.quest_id,
            quest_title=quest.title,
            player_before=player,
            quest_before=quest,
            boss_before=boss if boss_damage else None,
            reward=reward,
        )
        return (
            CompletionOutcome(
                player=updated_player,
                quest=completed_quest,
                boss=new_boss,
                reward=reward,
                undo_token=token,
            ),
            None,
        )

    @staticmethod
    def undo_completion(token: UndoToken) -> tuple[Player, Quest, Optional[Boss]]:
        """
        Reverse a completion exactly.

        The token holds the pre-completion snapshots; the caller guarantees it
        is the most recent completion and that nothing else has been applied
        since.
        """
        logger.info(f"Undoing completion of quest {token.quest_id}")
        return token.player_before, token.quest_before, token.boss_before

    @staticmethod
    def update_progress(quest: Quest, value: float) -> Quest:
        """Record a metric snapshot for a quest. Does not complete it."""
        if quest.is_completed:
            return quest
        value = max(0.0, value)
        status = QuestStatus.IN_PROGRESS if value > 0 else QuestStatus.PENDING
        return quest.model_copy(update={"current_progress": value, "status": status})

    @staticmethod
    def reached_target(quest: Quest) -> bool:
        return quest.current_progress >= quest.target_value

    @staticmethod
    def reset_for_new_cycle(quest: Quest) -> Quest:
        """Daily quests return to pending; one-time quests keep their state."""
        if quest.frequency != QuestFrequency.DAILY:
            return quest
        return quest.model_copy(
            update={"status": QuestStatus.PENDING, "current_progress": 0.0, "completed_at": None}
        )

    @staticmethod
    def completed_in_cycle(quest: Quest, last_closed: Optional[date]) -> bool:
        """
        Whether a completion belongs to the cycle being closed.

        Daily quests are reset at every close, so any completed daily quest
        is from this cycle. Other quests count only when completed after the
        last closed day.
        """
        if not quest.is_completed:
            return False
        if quest.frequency == QuestFrequency.DAILY or last_closed is None:
            return True
        return quest.completed_at is not None and quest.completed_at.date() > last_closed

    @staticmethod
    def count_missed(quests: list[Quest]) -> int:
        """Required daily quests left incomplete. Optional quests never count."""
        return sum(
            1
            for q in quests
            if q.frequency == QuestFrequency.DAILY and q.counts_toward_penalty and not q.is_completed
        )

    @staticmethod
    def estimated_boss_damage(quest: Quest, boss: Optional[Boss], player_level: int) -> int:
        """Damage a completion would deal right now, for previews."""
        if boss is None or not BossSystem.takes_quest_damage(boss):
            return 0
        return min(GameFormulas.boss_damage(quest.difficulty, player_level), boss.current_hp)
