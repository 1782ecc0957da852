"""Player statistics models."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, computed_field

from gamelife.config import STAT_VALUE_CAP, STAT_XP_PER_POINT


class StatType(str, Enum):
    """The six fundamental attributes of a player."""

    STRENGTH = "STR"  # Physical exercise
    INTELLIGENCE = "INT"  # Reading, studying, coding
    AGILITY = "AGI"  # Stretching, yoga, promptness
    VITALITY = "VIT"  # Sleep, water, nutrition
    WILLPOWER = "WIL"  # Resisting bad habits
    SPIRIT = "SPI"  # Meditation, mindfulness, gratitude

    @property
    def full_name(self) -> str:
        return _STAT_NAMES[self]

    @property
    def description(self) -> str:
        return _STAT_DESCRIPTIONS[self]


_STAT_NAMES = {
    StatType.STRENGTH: "Strength",
    StatType.INTELLIGENCE: "Intelligence",
    StatType.AGILITY: "Agility",
    StatType.VITALITY: "Vitality",
    StatType.WILLPOWER: "Willpower",
    StatType.SPIRIT: "Spirit",
}

_STAT_DESCRIPTIONS = {
    StatType.STRENGTH: "Physical power. Train your vessel.",
    StatType.INTELLIGENCE: "Mental acuity. Sharpen your mind.",
    StatType.AGILITY: "Swift action. Move with purpose.",
    StatType.VITALITY: "Life force. Maintain your foundation.",
    StatType.WILLPOWER: "Inner resolve. Resist the shadows.",
    StatType.SPIRIT: "Soul strength. Find your center.",
}


class Stat(BaseModel):
    """A single stat with base value, bonus value and accumulated experience."""

    model_config = ConfigDict(frozen=True)  # Immutable model

    stat_type: StatType = Field(description="Which of the six stats this is")
    base_value: int = Field(default=0, ge=0, le=STAT_VALUE_CAP, description="Points earned through training")
    bonus_value: int = Field(default=0, ge=0, description="Points from titles, items and other bonuses")
    experience: int = Field(default=0, ge=0, description="Accumulated stat experience")

    @computed_field
    @property
    def total_value(self) -> int:
        """Base plus bonus, capped."""
        return min(self.base_value + self.bonus_value, STAT_VALUE_CAP)

    @computed_field
    @property
    def level(self) -> int:
        return self.experience // STAT_XP_PER_POINT

    @property
    def progress_to_next_point(self) -> float:
        return (self.experience % STAT_XP_PER_POINT) / STAT_XP_PER_POINT


def default_stats() -> dict[StatType, Stat]:
    """All six stats at zero, for clean progression from nothing."""
    return {stat_type: Stat(stat_type=stat_type) for stat_type in StatType}
