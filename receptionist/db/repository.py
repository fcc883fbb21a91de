from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol

from ..schemas import Booking


class BookingRepository(Protocol):
    def create(self, booking: Booking) -> Booking:
        ...

    def list_all(self) -> list[Booking]:
        ...


@dataclass
class InMemoryBookingRepository:
    """Append-only booking list; nothing survives a restart."""

    bookings: list[Booking] = field(default_factory=list)

    def create(self, booking: Booking) -> Booking:
        self.bookings.append(booking)
        return booking

    def list_all(self) -> list[Booking]:
        return list(self.bookings)

    def __len__(self) -> int:
        return len(self.bookings)
