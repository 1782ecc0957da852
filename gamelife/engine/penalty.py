"""Death mechanic and HP damage."""

import logging
from typing import Optional

from gamelife.config import DEATH_GOLD_LOSS_PERCENT
from gamelife.engine.formulas import GameFormulas
from gamelife.engine.leveling import LevelCalculator
from gamelife.engine.stat_calculator import StatCalculator
from gamelife.models.outcomes import DeathPenaltyReport
from gamelife.models.player import Player

logger = logging.getLogger(__name__)


class DeathPenaltySystem:
    """Applies HP loss and the death transition when HP reaches 0."""

    @staticmethod
    def apply_damage(
        player: Player, amount: int, penalties_enabled: bool
    ) -> tuple[Player, Optional[DeathPenaltyReport]]:
        """
        Lower HP, clamped at 0, and run the death transition on depletion.

        Args:
            player: Player taking damage
            amount: HP to remove
            penalties_enabled: Whether death costs rank, stats and gold

        Returns:
            Tuple of (new player, death report if the player died)
        """
        if amount <= 0:
            return player, None

        new_hp = max(0, player.current_hp - amount)
        damaged = player.model_copy(update={"current_hp": new_hp})
        logger.debug(f"Player {player.player_id} took {amount} damage ({player.current_hp} -> {new_hp})")
        if not damaged.is_dead:
            return damaged, None
        return DeathPenaltySystem.apply_death(damaged, penalties_enabled)

    @staticmethod
    def apply_missed_quests(
        player: Player, missed_quest_count: int, penalties_enabled: bool
    ) -> tuple[Player, Optional[DeathPenaltyReport]]:
        """Apply HP damage for missed required quests."""
        damage = GameFormulas.penalty_damage(missed_quest_count)
        return DeathPenaltySystem.apply_damage(player, damage, penalties_enabled)

    @staticmethod
    def apply_death(player: Player, penalties_enabled: bool) -> tuple[Player, DeathPenaltyReport]:
        """
        Death transition.

        Both branches end with HP restored to max. With penalties enabled the
        player also drops one rank tier, loses a rank-scaled share of every
        stat's base value and loses 20% of their gold.
        """
        previous_rank = player.rank
        previous_level = player.level

        if not penalties_enabled:
            restored = player.model_copy(update={"current_hp": player.max_hp})
            logger.info(f"Player {player.player_id} died; penalties disabled, HP restored")
            return restored, DeathPenaltyReport(
                penalties_applied=False,
                previous_level=previous_level,
                new_level=previous_level,
                previous_rank=previous_rank,
                new_rank=previous_rank,
                hp_restored_to=player.max_hp,
            )

        # Demote one tier; rank E has nowhere to go
        lower_rank = previous_rank.previous()
        if lower_rank is None:
            new_level = previous_level
            new_current_xp = player.current_xp
        else:
            new_level = max(1, lower_rank.min_level)
            new_current_xp = LevelCalculator.xp_floor_for_level(new_level)

        # Stats are reduced by the rank held at death
        penalized, stat_losses = StatCalculator.reduce_base_values(player, previous_rank.stat_penalty_percent)

        gold_lost = player.gold * DEATH_GOLD_LOSS_PERCENT // 100

        updated = penalized.model_copy(
            update={
                "level": new_level,
                "current_xp": new_current_xp,
                "gold": player.gold - gold_lost,
                "current_hp": player.max_hp,
                "penalty_count": player.penalty_count + 1,
            }
        )
        logger.info(
            f"Player {player.player_id} died; rank {previous_rank.value} -> {updated.rank.value}, "
            f"level {previous_level} -> {new_level}, lost {gold_lost} gold"
        )
        return updated, DeathPenaltyReport(
            penalties_applied=True,
            previous_level=previous_level,
            new_level=new_level,
            previous_rank=previous_rank,
            new_rank=updated.rank,
            gold_lost=gold_lost,
            stat_base_lost=stat_losses,
            hp_restored_to=player.max_hp,
        )
