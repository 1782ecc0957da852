"""Level-up transition."""

import logging

from gamelife.engine.formulas import GameFormulas
from gamelife.models.player import Player

logger = logging.getLogger(__name__)


class LevelCalculator:
    """Applies XP to a player and resolves level-ups."""

    @staticmethod
    def add_xp(player: Player, amount: int) -> tuple[Player, int]:
        """
        Add XP and level up as many times as the new total allows.

        A single large reward may jump several levels. Rank is derived from
        the new level and is never stored.

        Args:
            player: Player receiving XP
            amount: XP to add (non-negative)

        Returns:
            Tuple of (new player, levels gained)
        """
        if amount <= 0:
            return player, 0

        current_xp = player.current_xp + amount
        level = player.level
        while current_xp >= GameFormulas.xp_required_for_level(level + 1):
            level += 1

        levels_gained = level - player.level
        if levels_gained:
            logger.info(
                f"Player {player.player_id} leveled up {player.level} -> {level} "
                f"(rank {GameFormulas.rank_for_level(player.level).value} -> {GameFormulas.rank_for_level(level).value})"
            )

        updated = player.model_copy(
            update={
                "current_xp": current_xp,
                "total_xp": player.total_xp + amount,
                "level": level,
            }
        )
        return updated, levels_gained

    @staticmethod
    def xp_floor_for_level(level: int) -> int:
        """current_xp a player holds on entering a level without overflow."""
        if level <= 1:
            return 0
        return GameFormulas.xp_required_for_level(level)
