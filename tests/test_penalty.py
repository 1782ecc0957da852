"""Tests for DeathPenaltySystem."""

import pytest

from gamelife.engine.penalty import DeathPenaltySystem
from gamelife.models.player import Player
from gamelife.models.rank import PlayerRank
from gamelife.models.stats import StatType


@pytest.fixture
def rank_c_player():
    """Rank C player one hit from death."""
    return Player(
        player_id="c-rank",
        level=25,
        current_xp=12000,
        total_xp=12000,
        gold=100,
        current_hp=3,
        stats={
            "STR": {"stat_type": "STR", "base_value": 50},
            "INT": {"stat_type": "INT", "base_value": 20},
        },
    )


class TestApplyDamage:
    """Test suite for HP damage."""

    def test_damage_without_death(self, player):
        """Test non-lethal damage only lowers HP."""
        updated, report = DeathPenaltySystem.apply_damage(player, 30, True)
        assert updated.current_hp == 70
        assert report is None

    def test_zero_damage_is_noop(self, player):
        """Test zero damage returns the same player."""
        updated, report = DeathPenaltySystem.apply_damage(player, 0, True)
        assert updated is player
        assert report is None

    def test_missed_quests_damage(self, player):
        """Test 5 HP per missed quest."""
        updated, report = DeathPenaltySystem.apply_missed_quests(player, 4, True)
        assert updated.current_hp == 80
        assert report is None


class TestDeathPenalty:
    """Test suite for the death transition."""

    def test_penalties_enabled_rank_c(self, rank_c_player):
        """Test rank C death: 20% gold loss, one rank down, HP restored."""
        updated, report = DeathPenaltySystem.apply_damage(rank_c_player, 10, True)
        assert updated.gold == 80
        assert updated.current_hp == updated.max_hp
        assert updated.rank == PlayerRank.D
        assert updated.level == 10
        assert updated.current_xp == 1500
        assert updated.total_xp == 12000
        assert updated.penalty_count == 1

        assert report.penalties_applied is True
        assert report.previous_rank == PlayerRank.C
        assert report.new_rank == PlayerRank.D
        assert report.gold_lost == 20
        assert report.hp_restored_to == 100

    def test_stat_loss_scaled_by_rank(self, rank_c_player):
        """Test stats lose the percentage of the rank held at death."""
        updated, report = DeathPenaltySystem.apply_death(rank_c_player, True)
        assert updated.get_stat(StatType.STRENGTH).base_value == 45
        assert updated.get_stat(StatType.INTELLIGENCE).base_value == 18
        assert report.stat_base_lost[StatType.STRENGTH] == 5

    def test_penalties_disabled(self, rank_c_player):
        """Test a death with penalties disabled only restores HP."""
        updated, report = DeathPenaltySystem.apply_damage(rank_c_player, 10, False)
        assert updated.current_hp == updated.max_hp
        assert updated.gold == rank_c_player.gold
        assert updated.level == rank_c_player.level
        assert updated.rank == PlayerRank.C
        assert updated.stats == rank_c_player.stats
        assert updated.penalty_count == 0
        assert report.penalties_applied is False
        assert report.gold_lost == 0

    def test_rank_e_keeps_level(self):
        """Test the lowest rank cannot be demoted but still loses gold and stats."""
        player = Player(
            player_id="e-rank",
            level=5,
            current_xp=700,
            gold=10,
            current_hp=1,
            stats={"VIT": {"stat_type": "VIT", "base_value": 20}},
        )
        updated, report = DeathPenaltySystem.apply_damage(player, 5, True)
        assert updated.level == 5
        assert updated.current_xp == 700
        assert updated.rank == PlayerRank.E
        assert updated.gold == 8
        assert updated.get_stat(StatType.VITALITY).base_value == 19
        assert report.new_rank == PlayerRank.E

    def test_demotion_from_d_lands_on_level_one(self):
        """Test demoting to rank E resets to level 1 with no XP."""
        player = Player(player_id="d-rank", level=12, current_xp=2000, current_hp=1)
        updated, _ = DeathPenaltySystem.apply_damage(player, 1, True)
        assert updated.level == 1
        assert updated.current_xp == 0
        assert updated.rank == PlayerRank.E

    def test_overkill_clamps_before_death(self, rank_c_player):
        """Test massive damage still ends with HP at max."""
        updated, report = DeathPenaltySystem.apply_damage(rank_c_player, 10_000, True)
        assert updated.current_hp == 100
        assert report is not None
