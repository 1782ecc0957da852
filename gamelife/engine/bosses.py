"""Boss fight system."""

import logging
import math

from gamelife.models.boss import Boss

logger = logging.getLogger(__name__)


class BossSystem:
    """Handles boss HP depletion from quests and metric snapshots."""

    @staticmethod
    def apply_damage(boss: Boss, amount: int) -> tuple[Boss, int]:
        """
        Damage a boss, clamping HP at 0.

        Args:
            boss: Boss to damage
            amount: Requested damage

        Returns:
            Tuple of (new boss, damage actually dealt)
        """
        if boss.is_defeated or amount <= 0:
            return boss, 0

        dealt = min(amount, boss.current_hp)
        new_hp = boss.current_hp - dealt
        defeated = new_hp == 0
        if defeated:
            logger.info(f"Boss {boss.boss_id} ({boss.title}) defeated")
        return boss.model_copy(update={"current_hp": new_hp, "is_defeated": defeated}), dealt

    @staticmethod
    def apply_metric_snapshot(boss: Boss, value: float) -> Boss:
        """
        Recompute a dynamic boss's HP from an external metric value.

        HP = max_hp * (1 - progress), floored, where progress is how far the
        value has moved from baseline toward target. A defeated boss stays
        defeated.
        """
        if boss.metric is None:
            raise ValueError(f"Boss {boss.boss_id} has no metric")

        metric = boss.metric.model_copy(update={"current_value": value})
        if boss.is_defeated:
            return boss.model_copy(update={"metric": metric})

        new_hp = math.floor(boss.max_hp * (1.0 - metric.progress))
        new_hp = min(boss.max_hp, max(0, new_hp))
        defeated = new_hp == 0
        if defeated:
            logger.info(f"Dynamic boss {boss.boss_id} ({boss.title}) defeated by metric {value}")
        return boss.model_copy(update={"metric": metric, "current_hp": new_hp, "is_defeated": defeated})

    @staticmethod
    def takes_quest_damage(boss: Boss) -> bool:
        """Only fixed-HP bosses are damaged by linked quest completions."""
        return not boss.is_dynamic and not boss.is_defeated
