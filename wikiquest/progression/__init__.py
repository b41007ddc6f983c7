"""XP, level and streak calculations."""

from flask import current_app

from wikiquest.progression.levels import (
    DEFAULT_LEVEL_THRESHOLDS,
    LevelEngine,
    LevelInfo,
    LevelThresholdTable,
    XPAward,
)
from wikiquest.progression.streaks import (
    CHECK_IN_BASE_XP,
    STREAK_MILESTONES,
    StreakEngine,
    StreakUpdate,
)
from wikiquest.progression.values import (
    MAX_PROGRESSION_VALUE,
    InvalidProgressionValue,
    StreakCount,
    XPAmount,
)


def get_level_engine() -> LevelEngine:
    """Level engine built from the app's configured threshold table."""
    thresholds = current_app.config.get("LEVEL_THRESHOLDS", DEFAULT_LEVEL_THRESHOLDS)
    return LevelEngine(LevelThresholdTable(thresholds))


def get_streak_engine() -> StreakEngine:
    """Streak engine for the app's configured timezone and clock."""
    kwargs = {}
    clock = current_app.config.get("PROGRESSION_CLOCK")
    if clock is not None:
        kwargs["clock"] = clock
    return StreakEngine(current_app.config.get("STREAK_TIMEZONE", "UTC"), **kwargs)


__all__ = [
    "CHECK_IN_BASE_XP",
    "DEFAULT_LEVEL_THRESHOLDS",
    "MAX_PROGRESSION_VALUE",
    "STREAK_MILESTONES",
    "InvalidProgressionValue",
    "LevelEngine",
    "LevelInfo",
    "LevelThresholdTable",
    "StreakCount",
    "StreakEngine",
    "StreakUpdate",
    "XPAmount",
    "XPAward",
    "get_level_engine",
    "get_streak_engine",
]
