"""Player model."""

from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field, model_validator

from gamelife.config import DEFAULT_MAX_HP, DEFAULT_PLAYER_NAME, DEFAULT_PLAYER_TITLE
from gamelife.models.rank import PlayerRank
from gamelife.models.stats import Stat, StatType, default_stats


class UnlockedAchievement(BaseModel):
    """Record of an unlocked achievement."""

    model_config = ConfigDict(frozen=True)  # Immutable model

    achievement_id: str = Field(description="Achievement catalog identifier")
    unlocked_at: datetime = Field(description="When the achievement was unlocked")


class Player(BaseModel):
    """Complete player information."""

    model_config = ConfigDict(frozen=True)  # Immutable model

    player_id: str = Field(description="Unique player identifier")
    name: str = Field(default=DEFAULT_PLAYER_NAME, description="Player name")
    title: str = Field(default=DEFAULT_PLAYER_TITLE, description="Displayed title")
    origin_story: str = Field(default="", description="Free-form origin story")
    created_at: datetime = Field(default_factory=datetime.now, description="Creation timestamp")

    # Core progression
    level: int = Field(ge=1, default=1, description="Player level")
    current_xp: int = Field(ge=0, default=0, description="XP counted against level thresholds")
    total_xp: int = Field(ge=0, default=0, description="Lifetime XP earned")
    gold: int = Field(ge=0, default=0, description="Gold balance")

    stats: dict[StatType, Stat] = Field(default_factory=default_stats, description="The six stats")

    # Streak tracking
    current_streak: int = Field(ge=0, default=0, description="Consecutive qualifying days")
    longest_streak: int = Field(ge=0, default=0, description="Best streak ever reached")
    last_active_date: Optional[date] = Field(default=None, description="Last qualifying day")
    last_cycle_date: Optional[date] = Field(default=None, description="Last day whose cycle was closed")
    streak_shield_charges: int = Field(ge=0, default=0, description="Missed days the streak survives")

    # Achievements and counters
    unlocked_achievements: list[UnlockedAchievement] = Field(default_factory=list)
    unlocked_titles: list[str] = Field(default_factory=lambda: [DEFAULT_PLAYER_TITLE])
    completed_quest_count: int = Field(ge=0, default=0)
    defeated_boss_count: int = Field(ge=0, default=0)
    training_session_count: int = Field(ge=0, default=0)
    shop_purchase_count: int = Field(ge=0, default=0)
    gold_spent: int = Field(ge=0, default=0)

    # Health
    max_hp: int = Field(ge=1, default=DEFAULT_MAX_HP, description="Maximum HP")
    current_hp: int = Field(ge=0, default=DEFAULT_MAX_HP, description="Current HP")

    # Penalty system
    penalty_count: int = Field(ge=0, default=0, description="Death penalties applied")

    @model_validator(mode="before")
    @classmethod
    def clamp_health(cls, data):
        """Keep current HP within [0, max_hp] and fill in missing stats."""
        if not isinstance(data, dict):
            return data
        data = dict(data)
        max_hp = data.get("max_hp")
        max_hp = DEFAULT_MAX_HP if max_hp is None else max(1, int(max_hp))
        current_hp = data.get("current_hp")
        current_hp = max_hp if current_hp is None else int(current_hp)
        data["max_hp"] = max_hp
        data["current_hp"] = min(max_hp, max(0, current_hp))

        stats = data.get("stats")
        if stats is not None:
            merged = default_stats()
            merged.update({StatType(key): value for key, value in stats.items()})
            data["stats"] = merged
        return data

    @computed_field
    @property
    def rank(self) -> PlayerRank:
        """Rank is always derived from level, never stored."""
        return PlayerRank.for_level(self.level)

    @computed_field
    @property
    def xp_required_for_next_level(self) -> int:
        from gamelife.engine.formulas import GameFormulas

        return GameFormulas.xp_required_for_level(self.level + 1)

    @computed_field
    @property
    def xp_progress(self) -> float:
        """Fraction of the way through the current level."""
        from gamelife.engine.formulas import GameFormulas

        current_level_xp = GameFormulas.xp_required_for_level(self.level) if self.level > 1 else 0
        next_level_xp = GameFormulas.xp_required_for_level(self.level + 1)
        xp_in_level = max(0, self.current_xp - current_level_xp)
        xp_needed = max(1, next_level_xp - current_level_xp)
        return min(1.0, max(0.0, xp_in_level / xp_needed))

    @computed_field
    @property
    def total_stat_points(self) -> int:
        return sum(stat.total_value for stat in self.stats.values())

    @computed_field
    @property
    def power_level(self) -> int:
        """Power Level = (Total Stats * Level) / 10"""
        return (self.total_stat_points * self.level) // 10

    @computed_field
    @property
    def hp_progress(self) -> float:
        return min(1.0, max(0.0, self.current_hp / self.max_hp))

    @property
    def is_dead(self) -> bool:
        return self.current_hp == 0

    def get_stat(self, stat_type: StatType) -> Stat:
        return self.stats.get(stat_type) or Stat(stat_type=stat_type)
