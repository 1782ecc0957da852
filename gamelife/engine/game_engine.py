"""Progression engine: stateful facade over the rules."""

import logging
import random
import uuid
from datetime import date, datetime
from typing import Any, Optional

from gamelife.engine.achievements import AchievementTracker
from gamelife.engine.bosses import BossSystem
from gamelife.engine.economy import EconomySystem, TrainingSystem
from gamelife.engine.formulas import GameFormulas
from gamelife.engine.history import StateHistory
from gamelife.engine.penalty import DeathPenaltySystem
from gamelife.engine.quest_manager import QuestManager
from gamelife.engine.streaks import StreakTracker
from gamelife.models.boss import Boss
from gamelife.models.outcomes import DeathPenaltyReport, DeclineReason, OperationResult
from gamelife.models.player import Player
from gamelife.models.quest import Quest, QuestDifficulty
from gamelife.models.settings import EngineSettings
from gamelife.models.state import ProgressionState
from gamelife.models.stats import StatType

logger = logging.getLogger(__name__)


class ProgressionEngine:
    """
    Holds one player's ProgressionState and applies operations to it.

    Every operation builds a new immutable state and either commits it whole
    or leaves the current state untouched. The engine is not thread-safe;
    callers serialise access so that one mutation is in flight at a time.
    """

    def __init__(
        self,
        initial_state: Optional[ProgressionState] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        """
        Initialize progression engine.

        Args:
            initial_state: Optional existing state; a fresh player is created otherwise
            rng: Random source for critical rolls
        """
        self._state = initial_state or self.create_initial_state()
        self._rng = rng or random.Random()
        self._history = StateHistory()
        self._history.create_snapshot(self._state, {"reason": "initial_state"})

    @staticmethod
    def create_initial_state(
        name: Optional[str] = None,
        origin_story: str = "",
        settings: Optional[EngineSettings] = None,
    ) -> ProgressionState:
        """Create a brand-new player with an empty quest log."""
        player_id = str(uuid.uuid4())
        player_kwargs: dict[str, Any] = {"player_id": player_id, "origin_story": origin_story}
        if name:
            player_kwargs["name"] = name
        return ProgressionState(
            state_id=player_id,
            player=Player(**player_kwargs),
            settings=settings or EngineSettings(),
        )

    @property
    def state(self) -> ProgressionState:
        return self._state

    @property
    def history(self) -> StateHistory:
        return self._history

    @property
    def can_undo(self) -> bool:
        return self._state.last_completion is not None

    @property
    def last_undo_quest_title(self) -> Optional[str]:
        token = self._state.last_completion
        return token.quest_title if token else None

    def _commit(self, reason: str, clear_undo: bool = True, **updates: Any) -> ProgressionState:
        """Apply updates as a new state version and log a snapshot."""
        if clear_undo and "last_completion" not in updates:
            updates["last_completion"] = None
        new_state = self._state.model_copy(
            update={
                **updates,
                "state_version": self._state.state_version + 1,
                "updated_at": datetime.now(),
            }
        )
        self._history.create_snapshot(new_state, {"reason": reason})
        self._state = new_state
        return new_state

    # Quest and boss management

    def add_quest(self, quest: Quest) -> OperationResult:
        """Add a quest, or replace the quest with the same id."""
        if self._state.get_quest(quest.quest_id):
            quests = self._state.replace_quest(quest)
        else:
            quests = self._state.quests + [quest]
        self._commit("add_quest", clear_undo=self._touches_undo(quest.quest_id), quests=quests)
        return OperationResult(success=True, message=f"Quest '{quest.title}' saved")

    def remove_quest(self, quest_id: str) -> OperationResult:
        if not self._state.get_quest(quest_id):
            return OperationResult.declined(DeclineReason.QUEST_NOT_FOUND, f"Quest {quest_id} not found")
        quests = [q for q in self._state.quests if q.quest_id != quest_id]
        self._commit("remove_quest", clear_undo=self._touches_undo(quest_id), quests=quests)
        return OperationResult(success=True, message=f"Quest {quest_id} removed")

    def add_boss(self, boss: Boss) -> OperationResult:
        """Add a boss, or replace the boss with the same id."""
        if self._state.get_boss(boss.boss_id):
            bosses = self._state.replace_boss(boss)
        else:
            bosses = self._state.bosses + [boss]
        self._commit("add_boss", clear_undo=self._touches_undo_boss(boss.boss_id), bosses=bosses)
        return OperationResult(success=True, message=f"Boss '{boss.title}' saved")

    def remove_boss(self, boss_id: str) -> OperationResult:
        """Remove a boss. Quests keep their now-dangling link and deal no damage."""
        if not self._state.get_boss(boss_id):
            return OperationResult.declined(DeclineReason.BOSS_NOT_FOUND, f"Boss {boss_id} not found")
        bosses = [b for b in self._state.bosses if b.boss_id != boss_id]
        self._commit("remove_boss", clear_undo=self._touches_undo_boss(boss_id), bosses=bosses)
        return OperationResult(success=True, message=f"Boss {boss_id} removed")

    def _touches_undo(self, quest_id: str) -> bool:
        token = self._state.last_completion
        return token is not None and token.quest_id == quest_id

    def _touches_undo_boss(self, boss_id: str) -> bool:
        token = self._state.last_completion
        return token is not None and token.boss_before is not None and token.boss_before.boss_id == boss_id

    # Completion and undo

    def complete_quest(
        self, quest_id: str, critical: Optional[bool] = None, now: Optional[datetime] = None
    ) -> OperationResult:
        """
        Complete a quest and grant its rewards.

        Args:
            quest_id: Quest to complete
            critical: Force the critical roll outcome; rolled from the engine RNG when None
            now: Completion timestamp

        Returns:
            OperationResult carrying the reward breakdown
        """
        quest = self._state.get_quest(quest_id)
        if quest is None:
            return OperationResult.declined(DeclineReason.QUEST_NOT_FOUND, f"Quest {quest_id} not found")
        if quest.is_completed:
            return OperationResult.declined(
                DeclineReason.ALREADY_COMPLETED, f"Quest '{quest.title}' is already completed"
            )

        if critical is None:
            critical = QuestManager.roll_critical(self._rng, self._state.settings.critical_success_chance)

        boss = self._state.get_boss(quest.linked_boss_id)
        outcome, reason = QuestManager.complete_quest(self._state.player, quest, boss, critical, now)
        if outcome is None:
            return OperationResult.declined(reason, f"Quest '{quest.title}' cannot be completed")

        updates: dict[str, Any] = {
            "player": outcome.player,
            "quests": self._state.replace_quest(outcome.quest),
            "last_completion": outcome.undo_token,
        }
        if outcome.boss is not None:
            updates["bosses"] = self._state.replace_boss(outcome.boss)
        self._commit("complete_quest", clear_undo=False, **updates)

        reward = outcome.reward
        message = f"+{reward.xp_awarded} XP"
        if not quest.is_optional:
            message += f", +{reward.gold_awarded} Gold"
        if reward.was_critical:
            message = "CRITICAL! " + message
        return OperationResult(success=True, message=message, reward=reward)

    def undo_last_completion(self) -> OperationResult:
        """Reverse the most recent quest completion exactly."""
        token = self._state.last_completion
        if token is None:
            logger.warning("Undo requested with no undoable completion")
            return OperationResult.declined(DeclineReason.NOTHING_TO_UNDO, "No quest completion to undo")

        player, quest, boss = QuestManager.undo_completion(token)
        updates: dict[str, Any] = {
            "player": player,
            "quests": self._state.replace_quest(quest),
        }
        if boss is not None:
            updates["bosses"] = self._state.replace_boss(boss)
        self._commit("undo_completion", **updates)
        return OperationResult(
            success=True, message=f"Undid '{token.quest_title}'", details={"quest_id": token.quest_id}
        )

    def update_quest_progress(self, quest_id: str, value: float) -> OperationResult:
        """Record a metric snapshot; completes the quest when the target is reached."""
        quest = self._state.get_quest(quest_id)
        if quest is None:
            return OperationResult.declined(DeclineReason.QUEST_NOT_FOUND, f"Quest {quest_id} not found")
        if quest.is_completed:
            return OperationResult.declined(
                DeclineReason.ALREADY_COMPLETED, f"Quest '{quest.title}' is already completed"
            )
        if not quest.tracking_type.is_automatic:
            return OperationResult.declined(
                DeclineReason.NOT_AUTOMATIC, f"Quest '{quest.title}' is tracked manually"
            )

        updated = QuestManager.update_progress(quest, value)
        self._commit(
            "update_progress",
            clear_undo=self._touches_undo(quest_id),
            quests=self._state.replace_quest(updated),
        )
        if QuestManager.reached_target(updated):
            return self.complete_quest(quest_id)
        return OperationResult(
            success=True,
            message=f"Progress {updated.normalized_progress:.0%}",
            details={"normalized_progress": updated.normalized_progress},
        )

    def apply_boss_metric(self, boss_id: str, value: float) -> OperationResult:
        """Recompute a dynamic boss's HP from a metric snapshot."""
        boss = self._state.get_boss(boss_id)
        if boss is None:
            return OperationResult.declined(DeclineReason.BOSS_NOT_FOUND, f"Boss {boss_id} not found")
        if not boss.is_dynamic:
            return OperationResult.declined(DeclineReason.NOT_DYNAMIC, f"Boss {boss_id} has no metric")

        was_defeated = boss.is_defeated
        updated = BossSystem.apply_metric_snapshot(boss, value)
        newly_defeated = updated.is_defeated and not was_defeated
        player = self._state.player
        if newly_defeated:
            player = player.model_copy(update={"defeated_boss_count": player.defeated_boss_count + 1})
        self._commit("boss_metric", bosses=self._state.replace_boss(updated), player=player)
        return OperationResult(
            success=True,
            message=f"{updated.title}: {updated.current_hp}/{updated.max_hp} HP",
            details={"current_hp": updated.current_hp, "is_defeated": updated.is_defeated},
        )

    # Health, cycles and streaks

    def apply_damage(self, amount: int) -> OperationResult:
        """Remove HP; triggers the death transition at 0."""
        if amount < 0:
            return OperationResult.declined(DeclineReason.INVALID_AMOUNT, "Damage cannot be negative")
        player, report = DeathPenaltySystem.apply_damage(
            self._state.player, amount, self._state.settings.death_penalties_enabled
        )
        self._commit("damage", player=player)
        return self._health_result(player, report)

    def apply_missed_quests(self, missed_quest_count: int) -> OperationResult:
        if missed_quest_count < 0:
            return OperationResult.declined(DeclineReason.INVALID_AMOUNT, "Missed count cannot be negative")
        player, report = DeathPenaltySystem.apply_missed_quests(
            self._state.player, missed_quest_count, self._state.settings.death_penalties_enabled
        )
        self._commit("missed_quests", player=player)
        return self._health_result(player, report)

    def _health_result(self, player: Player, report: Optional[DeathPenaltyReport]) -> OperationResult:
        if report is None:
            return OperationResult(success=True, message=f"HP {player.current_hp}/{player.max_hp}")
        return OperationResult(success=True, message="You died. HP restored.", penalty=report)

    def end_cycle(self, day: Optional[date] = None) -> OperationResult:
        """
        Close the current daily cycle.

        Missed required quests cost HP, the streak advances or breaks, and
        daily quests reset for the next cycle. Each day closes at most once,
        in order; a day at or before the last closed one is declined.
        """
        day = day or date.today()
        last_closed = self._state.player.last_cycle_date
        if last_closed is not None and day <= last_closed:
            return OperationResult.declined(
                DeclineReason.CYCLE_ALREADY_CLOSED,
                f"Cycle {day.isoformat()} is not after the last closed cycle {last_closed.isoformat()}",
            )

        quests = self._state.quests
        missed = QuestManager.count_missed(quests)
        qualified = missed == 0 and any(QuestManager.completed_in_cycle(q, last_closed) for q in quests)

        player, report = DeathPenaltySystem.apply_missed_quests(
            self._state.player, missed, self._state.settings.death_penalties_enabled
        )
        player, streak_outcome = StreakTracker.close_cycle(player, day, qualified)
        reset_quests = [QuestManager.reset_for_new_cycle(q) for q in quests]

        self._commit("end_cycle", player=player, quests=reset_quests)
        logger.info(f"Cycle {day.isoformat()} closed: missed={missed}, streak {streak_outcome}")
        return OperationResult(
            success=True,
            message=f"Cycle closed: {missed} missed, streak {streak_outcome}",
            penalty=report,
            details={
                "missed_quests": missed,
                "hp_damage": GameFormulas.penalty_damage(missed),
                "streak": streak_outcome,
                "current_streak": player.current_streak,
            },
        )

    def reset_quest_progress(self) -> OperationResult:
        """Reset daily quest progress without damage or streak change."""
        reset_quests = [QuestManager.reset_for_new_cycle(q) for q in self._state.quests]
        self._commit("reset_quests", quests=reset_quests)
        return OperationResult(success=True, message="Quest progress has been reset for the current cycle")

    # Economy and training

    def purchase(self, cost: int) -> OperationResult:
        player, reason = EconomySystem.purchase(self._state.player, cost)
        if reason is not None:
            return OperationResult.declined(reason, f"Cannot spend {cost} gold")
        self._commit("purchase", player=player)
        return OperationResult(success=True, message=f"Spent {cost} gold", details={"gold": player.gold})

    def buy_streak_shield(self) -> OperationResult:
        cost = self._state.settings.streak_shield_cost
        player, reason = EconomySystem.purchase(self._state.player, cost)
        if reason is not None:
            return OperationResult.declined(reason, f"A streak shield costs {cost} gold")
        player = StreakTracker.add_shield_charges(player)
        self._commit("buy_streak_shield", player=player)
        return OperationResult(
            success=True,
            message="Streak shield acquired",
            details={"streak_shield_charges": player.streak_shield_charges},
        )

    def record_training_session(self, stat_type: StatType, difficulty: QuestDifficulty) -> OperationResult:
        player, amount = TrainingSystem.record_session(self._state.player, stat_type, difficulty)
        self._commit("training", player=player)
        return OperationResult(
            success=True,
            message=f"+{amount} {stat_type.value} XP",
            details={"stat_xp": {stat_type.value: amount}},
        )

    def claim_achievements(self, now: Optional[datetime] = None) -> OperationResult:
        player, unlocked = AchievementTracker.claim(self._state.player, now)
        if not unlocked:
            return OperationResult(success=True, message="No new achievements", details={"unlocked": []})
        self._commit("claim_achievements", player=player)
        return OperationResult(
            success=True,
            message=f"Unlocked {len(unlocked)} achievement(s)",
            details={"unlocked": [a.achievement_id for a in unlocked]},
        )

    def update_settings(self, settings: EngineSettings) -> OperationResult:
        self._commit("update_settings", clear_undo=False, settings=settings)
        return OperationResult(success=True, message="Settings updated")
