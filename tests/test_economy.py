"""Tests for EconomySystem and TrainingSystem."""

from gamelife.engine.economy import EconomySystem, TrainingSystem
from gamelife.models.outcomes import DeclineReason
from gamelife.models.player import Player
from gamelife.models.quest import QuestDifficulty
from gamelife.models.stats import StatType


class TestEconomySystem:
    """Test suite for gold spending."""

    def test_purchase(self):
        """Test a purchase spends gold and updates counters."""
        player = Player(player_id="p", gold=100)
        updated, reason = EconomySystem.purchase(player, 30)
        assert reason is None
        assert updated.gold == 70
        assert updated.shop_purchase_count == 1
        assert updated.gold_spent == 30

    def test_insufficient_gold(self):
        """Test gold can never go negative."""
        player = Player(player_id="p", gold=10)
        updated, reason = EconomySystem.purchase(player, 11)
        assert reason == DeclineReason.INSUFFICIENT_GOLD
        assert updated is player

    def test_negative_cost(self):
        """Test a negative cost is declined."""
        player = Player(player_id="p", gold=10)
        updated, reason = EconomySystem.purchase(player, -5)
        assert reason == DeclineReason.INVALID_AMOUNT
        assert updated.gold == 10


class TestTrainingSystem:
    """Test suite for training sessions."""

    def test_session_grants_stat_xp(self, player):
        """Test one session grants the difficulty's stat XP to one stat."""
        updated, amount = TrainingSystem.record_session(player, StatType.INTELLIGENCE, QuestDifficulty.NORMAL)
        assert amount == 10
        assert updated.get_stat(StatType.INTELLIGENCE).experience == 10
        assert updated.training_session_count == 1
        assert updated.current_xp == 0
        assert updated.gold == 0

    def test_sessions_raise_base_value(self, player):
        """Test repeated sessions add base points."""
        updated = player
        for _ in range(5):
            updated, _ = TrainingSystem.record_session(updated, StatType.SPIRIT, QuestDifficulty.HARD)
        stat = updated.get_stat(StatType.SPIRIT)
        assert stat.experience == 100
        assert stat.base_value == 1
        assert updated.training_session_count == 5
