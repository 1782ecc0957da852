"""Gold spending and training sessions."""

import logging
from typing import Optional

from gamelife.engine.formulas import GameFormulas
from gamelife.engine.stat_calculator import StatCalculator
from gamelife.models.outcomes import DeclineReason
from gamelife.models.player import Player
from gamelife.models.quest import QuestDifficulty
from gamelife.models.stats import StatType

logger = logging.getLogger(__name__)


class EconomySystem:
    """Spends gold on shop rewards. Gold never goes negative."""

    @staticmethod
    def purchase(player: Player, cost: int) -> tuple[Player, Optional[DeclineReason]]:
        """
        Spend gold on a shop reward.

        Returns:
            Tuple of (player, decline reason); the player is unchanged when declined
        """
        if cost < 0:
            return player, DeclineReason.INVALID_AMOUNT
        if player.gold < cost:
            logger.warning(f"Player {player.player_id} cannot afford {cost} gold (has {player.gold})")
            return player, DeclineReason.INSUFFICIENT_GOLD

        updated = player.model_copy(
            update={
                "gold": player.gold - cost,
                "shop_purchase_count": player.shop_purchase_count + 1,
                "gold_spent": player.gold_spent + cost,
            }
        )
        return updated, None


class TrainingSystem:
    """Focus training sessions that feed a single stat."""

    @staticmethod
    def record_session(player: Player, stat_type: StatType, difficulty: QuestDifficulty) -> tuple[Player, int]:
        """Grant stat XP for one training session. Returns (player, stat XP granted)."""
        amount = GameFormulas.stat_xp(difficulty)
        updated = StatCalculator.add_stat_xp(player, {stat_type: amount})
        updated = updated.model_copy(update={"training_session_count": player.training_session_count + 1})
        return updated, amount
