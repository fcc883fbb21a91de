from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping

_WEEKDAY_TIMES = ("09:00", "10:00", "11:00", "14:00", "15:00", "16:00")

AVAILABLE_SLOTS: Mapping[str, tuple[str, ...]] = MappingProxyType(
    {
        "2025-11-18": _WEEKDAY_TIMES,
        "2025-11-19": _WEEKDAY_TIMES,
        "2025-11-20": _WEEKDAY_TIMES,
        "2025-11-21": _WEEKDAY_TIMES,
        "2025-11-22": ("09:00", "10:00", "11:00", "14:00", "15:00"),
    }
)


@dataclass(frozen=True)
class SlotCatalog:
    """Bookable windows by date. Bookings never remove entries."""

    slots: Mapping[str, tuple[str, ...]] = field(default_factory=lambda: AVAILABLE_SLOTS)

    def as_dict(self) -> dict[str, list[str]]:
        return {date: list(times) for date, times in self.slots.items()}

    def has_slot(self, date: str, time: str) -> bool:
        return time in self.slots.get(date, ())
