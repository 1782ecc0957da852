"""Tests for ProgressionEngine."""

from datetime import date, datetime, timedelta

import pytest

from gamelife.engine.game_engine import ProgressionEngine
from gamelife.models.boss import Boss, BossMetric, MetricKind
from gamelife.models.outcomes import DeclineReason
from gamelife.models.player import Player
from gamelife.models.quest import Quest, QuestDifficulty, QuestStatus
from gamelife.models.settings import EngineSettings
from gamelife.models.state import ProgressionState
from gamelife.models.stats import StatType


class TestEngineBasics:
    """Test suite for engine construction and commits."""

    def test_create_initial_state(self):
        """Test a fresh engine holds a new player keyed by the state id."""
        state = ProgressionEngine.create_initial_state(name="Jin", origin_story="Weakest hunter")
        assert state.state_id == state.player.player_id
        assert state.player.name == "Jin"
        assert state.player.origin_story == "Weakest hunter"
        assert state.quests == []

    def test_default_engine(self):
        """Test an engine without a state creates one."""
        engine = ProgressionEngine()
        assert engine.state.player.level == 1
        assert engine.history.get_latest().metadata == {"reason": "initial_state"}

    def test_commit_bumps_version_and_logs(self, engine):
        """Test every applied operation bumps the version and adds a snapshot."""
        engine.apply_damage(5)
        assert engine.state.state_version == 1
        assert engine.history.get_latest().metadata["reason"] == "damage"
        assert len(engine.history.list_snapshots()) == 2

    def test_declined_operation_leaves_state(self, engine):
        """Test declines do not touch the state."""
        before = engine.state
        result = engine.purchase(1000)
        assert result.success is False
        assert result.reason == DeclineReason.INSUFFICIENT_GOLD
        assert engine.state is before


class TestEngineQuests:
    """Test suite for quest and boss management."""

    def test_add_and_replace_quest(self, engine):
        """Test adding a new quest and replacing an existing one."""
        engine.add_quest(Quest(quest_id="read", title="Read 20 pages"))
        assert engine.state.get_quest("read") is not None
        engine.add_quest(Quest(quest_id="read", title="Read 30 pages"))
        assert engine.state.get_quest("read").title == "Read 30 pages"
        assert len(engine.state.quests) == 4

    def test_remove_missing_quest(self, engine):
        """Test removing an unknown quest is declined."""
        result = engine.remove_quest("missing")
        assert result.reason == DeclineReason.QUEST_NOT_FOUND

    def test_remove_boss(self, engine):
        """Test removing a boss."""
        assert engine.remove_boss("procrastination").success is True
        assert engine.state.bosses == []
        assert engine.remove_boss("procrastination").reason == DeclineReason.BOSS_NOT_FOUND


class TestEngineCompletion:
    """Test suite for completion and undo through the engine."""

    def test_complete_quest(self, engine):
        """Test completion applies the reward to the state."""
        result = engine.complete_quest("pushups")
        assert result.success is True
        assert result.reward.xp_awarded == 30
        assert result.reward.gold_awarded == 5
        assert engine.state.player.gold == 5
        assert engine.state.get_quest("pushups").status == QuestStatus.COMPLETED
        assert engine.can_undo is True
        assert engine.last_undo_quest_title == "100 Push-ups"

    def test_complete_twice_declined(self, engine):
        """Test completing a completed quest is declined."""
        engine.complete_quest("pushups")
        result = engine.complete_quest("pushups")
        assert result.success is False
        assert result.reason == DeclineReason.ALREADY_COMPLETED

    def test_complete_unknown_quest(self, engine):
        """Test completing a missing quest is declined."""
        assert engine.complete_quest("missing").reason == DeclineReason.QUEST_NOT_FOUND

    def test_forced_critical(self, engine):
        """Test forcing the critical roll."""
        result = engine.complete_quest("pushups", critical=True)
        assert result.reward.was_critical is True
        assert result.reward.xp_awarded == 60
        assert result.message.startswith("CRITICAL!")

    def test_rolled_critical_uses_settings(self, player, normal_quest, seeded_rng):
        """Test a certain critical chance always doubles."""
        state = ProgressionState(
            state_id="p",
            player=player,
            quests=[normal_quest],
            settings=EngineSettings(critical_success_chance=1.0),
        )
        engine = ProgressionEngine(initial_state=state, rng=seeded_rng)
        assert engine.complete_quest("pushups").reward.was_critical is True

    def test_linked_boss_damage(self, engine):
        """Test completion damages the linked boss."""
        engine.add_quest(Quest(quest_id="deep-work", title="Deep work", linked_boss_id="procrastination"))
        result = engine.complete_quest("deep-work")
        assert result.reward.boss_damage == 30
        assert engine.state.get_boss("procrastination").current_hp == 20

    def test_undo_round_trip(self, engine):
        """Test complete then undo restores player, quest and boss exactly."""
        engine.add_quest(
            Quest(
                quest_id="deep-work",
                title="Deep work",
                difficulty=QuestDifficulty.HARD,
                linked_boss_id="procrastination",
                target_stats=[StatType.INTELLIGENCE],
            )
        )
        before = engine.state

        engine.complete_quest("deep-work", critical=True)
        result = engine.undo_last_completion()

        assert result.success is True
        assert engine.state.player == before.player
        assert engine.state.quests == before.quests
        assert engine.state.bosses == before.bosses
        assert engine.can_undo is False

    def test_undo_without_completion(self, engine):
        """Test undo with nothing to undo is declined."""
        result = engine.undo_last_completion()
        assert result.success is False
        assert result.reason == DeclineReason.NOTHING_TO_UNDO

    def test_only_latest_completion_undoable(self, engine):
        """Test only one completion can be undone."""
        engine.complete_quest("pushups")
        engine.complete_quest("marathon")
        assert engine.undo_last_completion().success is True
        assert engine.state.get_quest("pushups").is_completed is True
        assert engine.undo_last_completion().reason == DeclineReason.NOTHING_TO_UNDO

    def test_other_operations_clear_undo(self, engine):
        """Test any other state change invalidates the undo token."""
        engine.complete_quest("pushups")
        engine.apply_damage(1)
        assert engine.can_undo is False

    def test_settings_update_keeps_undo(self, engine):
        """Test changing settings keeps the undo token."""
        engine.complete_quest("pushups")
        engine.update_settings(EngineSettings(death_penalties_enabled=False))
        assert engine.can_undo is True
        assert engine.state.settings.death_penalties_enabled is False


class TestEngineProgress:
    """Test suite for automatic progress and dynamic bosses."""

    def test_partial_progress(self, engine):
        """Test a snapshot below the target records progress only."""
        result = engine.update_quest_progress("steps", 5000)
        assert result.success is True
        assert result.details["normalized_progress"] == pytest.approx(0.5)
        assert engine.state.get_quest("steps").status == QuestStatus.IN_PROGRESS
        assert engine.state.player.current_xp == 0

    def test_progress_completes_quest(self, engine):
        """Test reaching the target completes the quest."""
        result = engine.update_quest_progress("steps", 12000)
        assert result.reward is not None
        assert result.reward.xp_awarded == 15
        assert engine.state.get_quest("steps").is_completed is True

    def test_boss_metric(self, engine):
        """Test a metric snapshot recomputes a dynamic boss."""
        engine.add_boss(
            Boss(
                boss_id="weight",
                title="The Heavy One",
                max_hp=100,
                metric=BossMetric(kind=MetricKind.BODY_WEIGHT, baseline=90, target=80),
            )
        )
        result = engine.apply_boss_metric("weight", 85)
        assert result.details["current_hp"] == 50
        engine.apply_boss_metric("weight", 80)
        assert engine.state.get_boss("weight").is_defeated is True
        assert engine.state.player.defeated_boss_count == 1

    def test_boss_metric_requires_metric(self, engine):
        """Test fixed-HP bosses reject snapshots."""
        assert engine.apply_boss_metric("procrastination", 1).reason == DeclineReason.NOT_DYNAMIC
        assert engine.apply_boss_metric("missing", 1).reason == DeclineReason.BOSS_NOT_FOUND

    def test_manual_quest_rejects_progress(self, engine):
        """Test manually tracked quests cannot be completed by snapshots."""
        version = engine.state.state_version
        result = engine.update_quest_progress("pushups", 1)
        assert result.reason == DeclineReason.NOT_AUTOMATIC
        assert engine.state.state_version == version
        assert engine.state.get_quest("pushups").is_completed is False

    def test_progress_on_other_quest_keeps_undo(self, engine):
        """Test a snapshot for an unrelated quest leaves the last completion undoable."""
        engine.complete_quest("pushups")
        engine.update_quest_progress("steps", 2000)
        assert engine.can_undo is True
        assert engine.undo_last_completion().success is True
        assert engine.state.get_quest("pushups").status == QuestStatus.PENDING
        assert engine.state.get_quest("steps").current_progress == 2000


class TestEngineCycles:
    """Test suite for health, cycles and streaks."""

    def test_negative_damage_declined(self, engine):
        """Test negative damage is declined."""
        assert engine.apply_damage(-1).reason == DeclineReason.INVALID_AMOUNT
        assert engine.apply_missed_quests(-1).reason == DeclineReason.INVALID_AMOUNT

    def test_lethal_damage_reports_penalty(self, engine):
        """Test lethal damage runs the death transition."""
        result = engine.apply_damage(100)
        assert result.penalty is not None
        assert engine.state.player.current_hp == 100
        assert engine.state.player.penalty_count == 1

    def test_end_cycle_extends_streak(self, engine):
        """Test a cycle with every required quest done extends the streak."""
        engine.complete_quest("pushups")
        engine.complete_quest("steps")
        result = engine.end_cycle(date(2026, 3, 1))
        assert result.details["missed_quests"] == 0
        assert result.details["streak"] == "extended"
        assert engine.state.player.current_streak == 1
        assert engine.state.get_quest("pushups").status == QuestStatus.PENDING

    def test_end_cycle_with_misses(self, engine):
        """Test missed required quests cost HP and break the streak."""
        result = engine.end_cycle(date(2026, 3, 1))
        assert result.details["missed_quests"] == 2
        assert result.details["hp_damage"] == 10
        assert result.details["streak"] == "broken"
        assert engine.state.player.current_hp == 90

    def test_end_cycle_with_shield(self, player, normal_quest):
        """Test a purchased shield absorbs a missed cycle."""
        state = ProgressionState(
            state_id="p",
            player=player.model_copy(update={"gold": 60, "current_streak": 5, "longest_streak": 5}),
            quests=[normal_quest],
        )
        engine = ProgressionEngine(initial_state=state)
        assert engine.buy_streak_shield().success is True
        assert engine.state.player.gold == 10
        result = engine.end_cycle(date(2026, 3, 1))
        assert result.details["streak"] == "shielded"
        assert engine.state.player.current_streak == 5
        assert engine.state.player.streak_shield_charges == 0

    def test_shield_needs_gold(self, engine):
        """Test a shield cannot be bought without gold."""
        assert engine.buy_streak_shield().reason == DeclineReason.INSUFFICIENT_GOLD

    def test_old_one_time_completion_does_not_qualify_idle_days(self, player, optional_quest):
        """Test a one-time quest finished on an earlier day cannot carry later idle cycles."""
        state = ProgressionState(state_id="p", player=player, quests=[optional_quest])
        engine = ProgressionEngine(initial_state=state)
        engine.complete_quest("marathon", critical=False, now=datetime(2026, 3, 1, 9))
        assert engine.end_cycle(date(2026, 3, 1)).details["streak"] == "extended"

        for offset in range(1, 11):
            result = engine.end_cycle(date(2026, 3, 1) + timedelta(days=offset))
            assert result.details["streak"] == "broken"
        assert engine.state.player.current_streak == 0
        assert engine.state.player.longest_streak == 1
        assert engine.state.player.last_cycle_date == date(2026, 3, 11)

    def test_one_time_completion_counts_in_its_own_cycle(self, player, optional_quest):
        """Test a one-time quest finished after the last close qualifies the next cycle."""
        state = ProgressionState(
            state_id="p",
            player=player.model_copy(update={"last_cycle_date": date(2026, 3, 1)}),
            quests=[optional_quest],
        )
        engine = ProgressionEngine(initial_state=state)
        engine.complete_quest("marathon", critical=False, now=datetime(2026, 3, 2, 18))
        assert engine.end_cycle(date(2026, 3, 2)).details["streak"] == "extended"
        assert engine.state.player.current_streak == 1

    def test_optional_only_idle_cycle_breaks_streak(self, player, optional_quest):
        """Test a cycle with nothing completed never extends the streak."""
        state = ProgressionState(
            state_id="p",
            player=player.model_copy(update={"current_streak": 3, "longest_streak": 3}),
            quests=[optional_quest],
        )
        engine = ProgressionEngine(initial_state=state)
        result = engine.end_cycle(date(2026, 3, 1))
        assert result.details["missed_quests"] == 0
        assert result.details["streak"] == "broken"
        assert engine.state.player.current_hp == 100

    def test_same_day_closed_once(self, engine):
        """Test closing the same day twice is declined and changes nothing."""
        engine.complete_quest("pushups")
        engine.complete_quest("steps")
        assert engine.end_cycle(date(2026, 3, 1)).success is True
        before = engine.state

        result = engine.end_cycle(date(2026, 3, 1))
        assert result.success is False
        assert result.reason == DeclineReason.CYCLE_ALREADY_CLOSED
        assert engine.state is before
        assert engine.state.player.current_streak == 1
        assert engine.state.player.current_hp == 100

    def test_earlier_day_declined(self, engine):
        """Test a day before the last closed one is declined."""
        engine.end_cycle(date(2026, 3, 5))
        version = engine.state.state_version
        assert engine.end_cycle(date(2026, 3, 4)).reason == DeclineReason.CYCLE_ALREADY_CLOSED
        assert engine.state.state_version == version
        assert engine.end_cycle(date(2026, 3, 6)).success is True

    def test_reset_quest_progress(self, engine):
        """Test resetting daily quests without damage."""
        engine.complete_quest("pushups")
        engine.reset_quest_progress()
        assert engine.state.get_quest("pushups").status == QuestStatus.PENDING
        assert engine.state.player.current_hp == 100


class TestEngineEconomy:
    """Test suite for purchases, training and achievements."""

    def test_training_session(self, engine):
        """Test a training session through the engine."""
        result = engine.record_training_session(StatType.WILLPOWER, QuestDifficulty.EXTREME)
        assert result.details["stat_xp"] == {"WIL": 35}
        assert engine.state.player.get_stat(StatType.WILLPOWER).experience == 35

    def test_claim_achievements(self):
        """Test claiming achievements through the engine."""
        state = ProgressionState(state_id="p", player=Player(player_id="p", longest_streak=3))
        engine = ProgressionEngine(initial_state=state)
        result = engine.claim_achievements()
        assert result.details["unlocked"] == ["grind_streak_3"]
        assert engine.state.player.gold == 5
        assert engine.claim_achievements().details["unlocked"] == []
