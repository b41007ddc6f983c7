"""Level progression: XP totals to levels and progress figures."""

from bisect import bisect_right
from dataclasses import dataclass
from typing import Iterable

from wikiquest.progression.values import MAX_PROGRESSION_VALUE, InvalidProgressionValue

# XP needed to reach each level; index 0 is level 1
DEFAULT_LEVEL_THRESHOLDS = (0, 300, 800, 1500, 2500, 4000, 6000, 9000, 13000, 18000)


class LevelThresholdTable:
    """Immutable, strictly increasing list of level thresholds."""

    def __init__(self, thresholds: Iterable[int] = DEFAULT_LEVEL_THRESHOLDS):
        values = tuple(int(t) for t in thresholds)

        if not values:
            raise ValueError("Level threshold table must not be empty")
        if values[0] != 0:
            raise ValueError("Level 1 threshold must be 0")
        for lower, upper in zip(values, values[1:]):
            if upper <= lower:
                raise ValueError(
                    f"Level thresholds must be strictly increasing ({lower} >= {upper})"
                )

        self._thresholds = values

    @property
    def max_level(self) -> int:
        return len(self._thresholds)

    def threshold_for(self, level: int) -> int:
        """XP at which ``level`` starts."""
        return self._thresholds[level - 1]

    def __iter__(self):
        return iter(self._thresholds)

    def __len__(self) -> int:
        return len(self._thresholds)

    def __eq__(self, other) -> bool:
        if not isinstance(other, LevelThresholdTable):
            return NotImplemented
        return self._thresholds == other._thresholds

    def __hash__(self) -> int:
        return hash(self._thresholds)

    def __repr__(self) -> str:
        return f"LevelThresholdTable({list(self._thresholds)})"


@dataclass(frozen=True)
class LevelInfo:
    """Progress view derived from an XP total. Never stored."""

    total_xp: int
    current_level: int
    current_level_xp: int
    next_level: int
    next_level_xp: int
    xp_progress: int
    xp_required: int
    progress_percent: int
    max_level: bool

    def to_dict(self) -> dict:
        return {
            "currentLevel": self.current_level,
            "currentLevelXP": self.current_level_xp,
            "nextLevel": self.next_level,
            "nextLevelXP": self.next_level_xp,
            "xpForNextLevel": self.next_level_xp,
            "xpRequired": self.xp_required,
            "xpProgress": self.xp_progress,
            "progressPercent": self.progress_percent,
            "totalXP": self.total_xp,
            "maxLevel": self.max_level,
        }


@dataclass(frozen=True)
class XPAward:
    """Outcome of adding XP to a total."""

    old_total: int
    new_total: int
    old_level: int
    new_level: int

    @property
    def xp_added(self) -> int:
        return self.new_total - self.old_total

    @property
    def leveled_up(self) -> bool:
        return self.new_level > self.old_level


class LevelEngine:
    """Maps XP totals to levels using a threshold table."""

    def __init__(self, table: LevelThresholdTable | None = None):
        self.table = table or LevelThresholdTable()

    def level_for_xp(self, xp: int) -> int:
        """Largest level whose threshold is <= ``xp``. Level 1 is the floor."""
        return max(1, bisect_right(tuple(self.table), xp))

    def level_info(self, xp: int) -> LevelInfo:
        current_level = self.level_for_xp(xp)
        max_level = self.table.max_level
        next_level = min(current_level + 1, max_level)

        current_level_xp = self.table.threshold_for(current_level)
        next_level_xp = self.table.threshold_for(next_level)

        xp_progress = xp - current_level_xp
        xp_required = next_level_xp - current_level_xp

        if current_level >= max_level:
            progress_percent = 100
        else:
            progress_percent = (100 * xp_progress) // xp_required
            progress_percent = max(0, min(100, progress_percent))

        return LevelInfo(
            total_xp=xp,
            current_level=current_level,
            current_level_xp=current_level_xp,
            next_level=next_level,
            next_level_xp=next_level_xp,
            xp_progress=xp_progress,
            xp_required=xp_required,
            progress_percent=progress_percent,
            max_level=current_level >= max_level,
        )

    def award_xp(self, current_total: int, delta: int) -> XPAward:
        """Add ``delta`` to ``current_total``. Caller validates ``delta >= 0``."""
        new_total = current_total + delta
        if new_total > MAX_PROGRESSION_VALUE:
            raise InvalidProgressionValue(
                "totalXP", f"would exceed {MAX_PROGRESSION_VALUE}"
            )
        return XPAward(
            old_total=current_total,
            new_total=new_total,
            old_level=self.level_for_xp(current_total),
            new_level=self.level_for_xp(new_total),
        )
