"""Pytest configuration and fixtures."""

import os
import random
import tempfile

import pytest

# The API module creates its state dumper on import
os.environ.setdefault("GAMELIFE_DUMP_DIR", tempfile.mkdtemp(prefix="gamelife-tests-"))

from gamelife.api.settings_config import EngineSettingsManager  # noqa: E402
from gamelife.engine.game_engine import ProgressionEngine  # noqa: E402
from gamelife.models.boss import Boss, BossMetric, MetricKind  # noqa: E402
from gamelife.models.player import Player  # noqa: E402
from gamelife.models.quest import Quest, QuestDifficulty, QuestFrequency, TrackingType  # noqa: E402
from gamelife.models.settings import EngineSettings  # noqa: E402
from gamelife.models.state import ProgressionState  # noqa: E402
from gamelife.models.stats import StatType  # noqa: E402
from gamelife.persistence.state_dumper import StateDumper  # noqa: E402


@pytest.fixture
def player():
    """Fresh level 1 player."""
    return Player(player_id="player-1", name="Jin")


@pytest.fixture
def normal_quest():
    """Required daily normal quest feeding STR."""
    return Quest(
        quest_id="pushups",
        title="100 Push-ups",
        difficulty=QuestDifficulty.NORMAL,
        target_stats=[StatType.STRENGTH],
    )


@pytest.fixture
def optional_quest():
    """Optional legendary quest."""
    return Quest(
        quest_id="marathon",
        title="Run a marathon",
        difficulty=QuestDifficulty.LEGENDARY,
        is_optional=True,
        frequency=QuestFrequency.ONE_TIME,
        target_stats=[StatType.AGILITY, StatType.VITALITY],
    )


@pytest.fixture
def steps_quest():
    """Automatic quest completed at 10000 steps."""
    return Quest(
        quest_id="steps",
        title="Walk 10k steps",
        difficulty=QuestDifficulty.EASY,
        tracking_type=TrackingType.STEPS,
        target_value=10000,
        target_stats=[StatType.VITALITY],
    )


@pytest.fixture
def boss():
    """Fixed-HP boss."""
    return Boss(boss_id="procrastination", title="The Procrastinator", max_hp=50)


@pytest.fixture
def weight_boss():
    """Dynamic boss where lower metric values are better."""
    return Boss(
        boss_id="weight",
        title="The Heavy One",
        max_hp=100,
        metric=BossMetric(kind=MetricKind.BODY_WEIGHT, baseline=90.0, target=80.0),
    )


@pytest.fixture
def seeded_rng():
    """Deterministic random source."""
    return random.Random(1234)


@pytest.fixture
def no_crit_settings():
    """Settings with critical rolls disabled."""
    return EngineSettings(critical_success_chance=0.0)


@pytest.fixture
def engine(player, normal_quest, optional_quest, steps_quest, boss, no_crit_settings, seeded_rng):
    """Engine holding a player with three quests and one boss."""
    state = ProgressionState(
        state_id=player.player_id,
        player=player,
        quests=[normal_quest, optional_quest, steps_quest],
        bosses=[boss],
        settings=no_crit_settings,
    )
    return ProgressionEngine(initial_state=state, rng=seeded_rng)


@pytest.fixture
def state_dumper(tmp_path):
    """State dumper writing to a temporary directory."""
    return StateDumper(dump_directory=str(tmp_path / "states"))


@pytest.fixture
def api_client(tmp_path, monkeypatch):
    """Flask test client with isolated player storage and dump directory."""
    import gamelife.api.app as app_module

    monkeypatch.setattr(app_module, "_state_dumper", StateDumper(dump_directory=str(tmp_path / "dumps")))
    monkeypatch.setattr(app_module, "_players", {})
    monkeypatch.setattr(app_module, "_player_locks", {})
    monkeypatch.setattr(
        app_module, "_settings_manager", EngineSettingsManager(EngineSettings(critical_success_chance=0.0))
    )
    app_module.app.config["TESTING"] = True
    with app_module.app.test_client() as client:
        yield client
