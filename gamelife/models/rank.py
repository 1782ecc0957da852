"""Player rank model."""

from enum import Enum
from typing import Optional


class PlayerRank(str, Enum):
    """Hunter ranks, ordered from lowest to highest."""

    E = "E"
    D = "D"
    C = "C"
    B = "B"
    A = "A"
    S = "S"
    SS = "SS"
    SSS = "SSS"
    MONARCH = "MONARCH"

    @property
    def min_level(self) -> int:
        return _RANK_TABLE[self][0]

    @property
    def title(self) -> str:
        return _RANK_TABLE[self][1]

    @property
    def stat_penalty_percent(self) -> int:
        """Share of each stat's base value lost on death at this rank."""
        return _RANK_TABLE[self][2]

    @property
    def tier(self) -> int:
        return _RANK_ORDER.index(self)

    def previous(self) -> Optional["PlayerRank"]:
        """Next-lower rank, or None at the bottom."""
        if self.tier == 0:
            return None
        return _RANK_ORDER[self.tier - 1]

    @classmethod
    def for_level(cls, level: int) -> "PlayerRank":
        """
        Derive a rank from a level.

        Scans thresholds from the highest rank down and returns the first
        whose minimum level is reached.
        """
        for rank in reversed(_RANK_ORDER):
            if level >= rank.min_level:
                return rank
        return cls.E


# rank: (min_level, title, stat_penalty_percent)
_RANK_TABLE = {
    PlayerRank.E: (1, "Awakened", 5),
    PlayerRank.D: (10, "Novice Hunter", 7),
    PlayerRank.C: (25, "Hunter", 10),
    PlayerRank.B: (50, "Elite Hunter", 12),
    PlayerRank.A: (75, "Veteran Hunter", 15),
    PlayerRank.S: (100, "National Level Hunter", 18),
    PlayerRank.SS: (150, "Transcendent", 20),
    PlayerRank.SSS: (200, "Apex Predator", 22),
    PlayerRank.MONARCH: (300, "Shadow Monarch", 25),
}

_RANK_ORDER = list(PlayerRank)
