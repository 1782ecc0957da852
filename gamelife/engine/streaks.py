"""Streak tracking across daily cycles."""

import logging
from datetime import date

from gamelife.models.player import Player

logger = logging.getLogger(__name__)


class StreakTracker:
    """Advances, shields or breaks a player's streak at the end of each cycle."""

    @staticmethod
    def close_cycle(player: Player, day: date, qualified: bool) -> tuple[Player, str]:
        """
        Update the streak for a finished cycle.

        Args:
            player: Player whose streak is updated
            day: The day the cycle covered
            qualified: Whether the cycle counts as a qualifying day

        Returns:
            Tuple of (new player, outcome) where outcome is one of
            "extended", "shielded" or "broken"
        """
        if qualified:
            new_streak = player.current_streak + 1
            updated = player.model_copy(
                update={
                    "current_streak": new_streak,
                    "longest_streak": max(player.longest_streak, new_streak),
                    "last_active_date": day,
                    "last_cycle_date": day,
                }
            )
            return updated, "extended"

        if player.streak_shield_charges > 0:
            logger.info(f"Streak shield absorbed a missed day for player {player.player_id}")
            return (
                player.model_copy(
                    update={"streak_shield_charges": player.streak_shield_charges - 1, "last_cycle_date": day}
                ),
                "shielded",
            )

        if player.current_streak:
            logger.info(f"Player {player.player_id} lost a {player.current_streak}-day streak")
        return player.model_copy(update={"current_streak": 0, "last_cycle_date": day}), "broken"

    @staticmethod
    def add_shield_charges(player: Player, charges: int = 1) -> Player:
        return player.model_copy(update={"streak_shield_charges": player.streak_shield_charges + charges})
