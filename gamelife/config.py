"""Central configuration defaults and constants for GameLife."""

import os

# Progression Curve
XP_BASE_PER_LEVEL = 100  # XP = Level * 100 * 1.5^(Level/10)
XP_GROWTH_BASE = float(os.getenv("GAMELIFE_XP_GROWTH_BASE", "1.5"))
XP_GROWTH_DIVISOR = 10.0

# Stats
STAT_VALUE_CAP = 999
STAT_XP_PER_POINT = 100  # Every 100 XP in a stat = 1 stat point

# Streak Bonus
STREAK_BONUS_PER_DAY = 0.05
STREAK_MULTIPLIER_CAP = 2.0  # Capped at +100%

# Rewards
DEFAULT_CRITICAL_SUCCESS_CHANCE = float(os.getenv("GAMELIFE_CRITICAL_SUCCESS_CHANCE", "0.10"))
CRITICAL_REWARD_MULTIPLIER = 2
BOSS_LEVEL_BONUS_DIVISOR = 100.0
PENALTY_DAMAGE_PER_MISSED_QUEST = 5

# Health and Death Mechanic
DEFAULT_MAX_HP = int(os.getenv("GAMELIFE_DEFAULT_MAX_HP", "100"))
DEFAULT_DEATH_PENALTIES_ENABLED = os.getenv("GAMELIFE_DEATH_PENALTIES_ENABLED", "true").lower() in ("true", "1", "yes", "on")
DEATH_GOLD_LOSS_PERCENT = int(os.getenv("GAMELIFE_DEATH_GOLD_LOSS_PERCENT", "20"))

# Economy
DEFAULT_STREAK_SHIELD_COST = int(os.getenv("GAMELIFE_STREAK_SHIELD_COST", "50"))

# Player Defaults
DEFAULT_PLAYER_NAME = os.getenv("GAMELIFE_DEFAULT_PLAYER_NAME", "Hunter")
DEFAULT_PLAYER_TITLE = "Awakened"

# Persistence
DEFAULT_DUMP_DIRECTORY = os.getenv("GAMELIFE_DUMP_DIR", "/var/gamelife")

# Logging
DEFAULT_LOG_LEVEL = os.getenv("GAMELIFE_LOG_LEVEL", "DEBUG").upper()
