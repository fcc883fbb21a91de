from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import timedelta
from typing import Protocol, Sequence

from .agents.receptionist import build_context_snapshot, build_instructions
from .config import Settings
from .db.repository import BookingRepository, InMemoryBookingRepository
from .gateway import AssistantGateway
from .interpreter import interpret
from .schemas import Booking, Reply, Turn
from .store import SessionTable
from .tools.handlers import apply_action
from .tools.slots import SlotCatalog

logger = logging.getLogger(__name__)


class Gateway(Protocol):
    async def generate(
        self,
        system_instructions: str,
        context_snapshot: str,
        turn_history: Sequence[Turn],
    ) -> str:
        ...


@dataclass
class TurnResult:
    raw_text: str
    reply: Reply
    booking: Booking | None = None


class ReceptionistService:
    """All mutable state of one running receptionist.

    Handlers receive an instance instead of reaching for module globals, so
    separate apps (and tests) never share sessions or bookings.
    """

    def __init__(
        self,
        gateway: Gateway,
        sessions: SessionTable | None = None,
        bookings: BookingRepository | None = None,
        catalog: SlotCatalog | None = None,
        practice_name: str = "Bright Smile Dental Surgery",
    ) -> None:
        self.gateway = gateway
        self.sessions = sessions if sessions is not None else SessionTable()
        self.bookings = bookings if bookings is not None else InMemoryBookingRepository()
        self.catalog = catalog or SlotCatalog()
        self.instructions = build_instructions(practice_name)

    @classmethod
    def from_settings(cls, settings: Settings, gateway: Gateway | None = None) -> "ReceptionistService":
        return cls(
            gateway=gateway or AssistantGateway.from_settings(settings),
            sessions=SessionTable(
                timeout=timedelta(seconds=settings.session_timeout_seconds),
                max_sessions=settings.max_sessions,
            ),
            practice_name=settings.practice_name,
        )

    def list_bookings(self) -> list[Booking]:
        return self.bookings.list_all()

    def list_slots(self) -> dict[str, list[str]]:
        return self.catalog.as_dict()

    def context_snapshot(self) -> str:
        return build_context_snapshot(self.catalog.slots, self.bookings.list_all())

    async def handle_turn(self, call_sid: str, speech: str) -> TurnResult:
        """Run one caller utterance through the model; GatewayError propagates."""
        session = self.sessions.get_or_create(call_sid)
        session.turns.append(Turn(role="user", content=speech))

        raw_text = await self.gateway.generate(
            self.instructions, self.context_snapshot(), list(session.turns)
        )
        logger.info("Model response: %s", raw_text)

        reply = interpret(raw_text)
        event, booking = apply_action(reply, call_sid, self.bookings, self.catalog)
        if event is not None:
            session.actions.append(event)
            logger.info("Action %s %s: %s", event.name, event.status, event.detail)

        session.turns.append(Turn(role="assistant", content=raw_text))
        self.sessions.reinstate(session)
        return TurnResult(raw_text=raw_text, reply=reply, booking=booking)
