"""Validated numeric values accepted at the request boundary."""

from dataclasses import dataclass
from typing import Any

# Largest value the 32-bit INTEGER progression columns can hold
MAX_PROGRESSION_VALUE = 2**31 - 1


class InvalidProgressionValue(ValueError):
    """Raised when an XP or streak value is not a non-negative integer."""

    def __init__(self, field: str, message: str):
        super().__init__(f"{field}: {message}")
        self.field = field
        self.message = message


def parse_non_negative_int(field: str, raw: Any) -> int:
    # bool is an int subclass; JSON true/false must not become 1/0
    if isinstance(raw, bool) or raw is None:
        raise InvalidProgressionValue(field, "must be a non-negative integer")

    if isinstance(raw, float):
        if not raw.is_integer():
            raise InvalidProgressionValue(field, "must be a whole number")
        raw = int(raw)

    if not isinstance(raw, int):
        raise InvalidProgressionValue(field, "must be a non-negative integer")

    if raw < 0:
        raise InvalidProgressionValue(field, "must not be negative")

    if raw > MAX_PROGRESSION_VALUE:
        raise InvalidProgressionValue(
            field, f"must not exceed {MAX_PROGRESSION_VALUE}"
        )

    return raw


@dataclass(frozen=True)
class XPAmount:
    """Non-negative amount of experience points."""

    value: int

    def __post_init__(self):
        parse_non_negative_int("xp", self.value)

    @classmethod
    def parse(cls, raw: Any, field: str = "xp") -> "XPAmount":
        return cls(parse_non_negative_int(field, raw))

    def __int__(self) -> int:
        return self.value


@dataclass(frozen=True)
class StreakCount:
    """Non-negative number of consecutive check-in days."""

    value: int

    def __post_init__(self):
        parse_non_negative_int("streak", self.value)

    @classmethod
    def parse(cls, raw: Any, field: str = "streak") -> "StreakCount":
        return cls(parse_non_negative_int(field, raw))

    def __int__(self) -> int:
        return self.value
