from __future__ import annotations

import logging
import uuid

from ..db.repository import BookingRepository
from ..schemas import Action, ActionEvent, AppointmentDetails, Booking, Reply, utcnow_iso
from .slots import SlotCatalog

logger = logging.getLogger(__name__)


def build_action_event(name: str, detail: str, status: str = "completed") -> ActionEvent:
    return ActionEvent(id=uuid.uuid4().hex, name=name, status=status, detail=detail)


def action_book_appointment(
    details: AppointmentDetails,
    call_sid: str,
    repository: BookingRepository,
    catalog: SlotCatalog,
) -> tuple[ActionEvent, Booking]:
    # Accepted as-is: no field checks, no conflict checks.
    booking = Booking.model_validate(
        {**details.model_dump(), "call_sid": call_sid, "booked_at": utcnow_iso()}
    )
    repository.create(booking)
    detail = f"Booked {booking.date} {booking.time} for {booking.name}"
    if not catalog.has_slot(booking.date or "", booking.time or ""):
        detail += " (not in slot catalog)"
    logger.info("Appointment booked: %s", details.model_dump())
    return build_action_event(Action.BOOK_APPOINTMENT.value, detail), booking


def action_missing_details() -> ActionEvent:
    detail = "book_appointment requested without appointment_details; nothing booked"
    return build_action_event(Action.BOOK_APPOINTMENT.value, detail, status="failed")


def action_acknowledged(action: Action) -> ActionEvent:
    return build_action_event(action.value, "No server-side handling; spoken reply only")


def apply_action(
    reply: Reply,
    call_sid: str,
    repository: BookingRepository,
    catalog: SlotCatalog,
) -> tuple[ActionEvent | None, Booking | None]:
    if reply.action == Action.NONE:
        return None, None
    if reply.action == Action.BOOK_APPOINTMENT:
        if reply.appointment_details is None:
            return action_missing_details(), None
        return action_book_appointment(reply.appointment_details, call_sid, repository, catalog)
    return action_acknowledged(reply.action), None
