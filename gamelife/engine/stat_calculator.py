"""Stat calculation system."""

from gamelife.config import STAT_VALUE_CAP, STAT_XP_PER_POINT
from gamelife.models.player import Player
from gamelife.models.stats import Stat, StatType


class StatCalculator:
    """Applies stat experience and stat losses to a player's six stats."""

    @staticmethod
    def add_stat_xp(player: Player, stat_xp: dict[StatType, int]) -> Player:
        """
        Add stat experience to a player.

        Each full 100 experience crossed raises the stat's base value by one
        point; base values never exceed the stat cap.

        Args:
            player: Player to update
            stat_xp: Experience to add per stat

        Returns:
            New Player with updated stats
        """
        if not stat_xp:
            return player

        new_stats = dict(player.stats)
        for stat_type, amount in stat_xp.items():
            if amount <= 0:
                continue
            stat = player.get_stat(stat_type)
            new_experience = stat.experience + amount
            points_gained = new_experience // STAT_XP_PER_POINT - stat.experience // STAT_XP_PER_POINT
            new_stats[stat_type] = stat.model_copy(
                update={
                    "experience": new_experience,
                    "base_value": min(stat.base_value + points_gained, STAT_VALUE_CAP),
                }
            )

        return player.model_copy(update={"stats": new_stats})

    @staticmethod
    def reduce_base_values(player: Player, percent: int) -> tuple[Player, dict[StatType, int]]:
        """
        Reduce every stat's base value by a percentage (loss is floored).

        Returns:
            Tuple of (new player, base points lost per stat)
        """
        new_stats: dict[StatType, Stat] = {}
        losses: dict[StatType, int] = {}
        for stat_type, stat in player.stats.items():
            loss = stat.base_value * percent // 100
            losses[stat_type] = loss
            new_stats[stat_type] = stat.model_copy(update={"base_value": max(0, stat.base_value - loss)})

        return player.model_copy(update={"stats": new_stats}), losses

    @staticmethod
    def highest_stat_value(player: Player) -> int:
        """Highest total value across all stats."""
        return max((stat.total_value for stat in player.stats.values()), default=0)
