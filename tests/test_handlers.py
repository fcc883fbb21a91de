"""Tests for applying interpreted actions and the slot catalog."""

from receptionist.db.repository import InMemoryBookingRepository
from receptionist.interpreter import interpret
from receptionist.schemas import Action, AppointmentDetails, PlainReply, StructuredReply
from receptionist.tools.handlers import action_book_appointment, apply_action
from receptionist.tools.slots import AVAILABLE_SLOTS, SlotCatalog

from tests.conftest import BOOKING_REPLY


class TestSlotCatalog:
    def test_as_dict_is_a_fresh_copy(self):
        catalog = SlotCatalog()
        copy = catalog.as_dict()
        copy["2025-11-18"].append("23:00")
        assert "23:00" not in catalog.as_dict()["2025-11-18"]
        assert len(catalog.as_dict()) == len(AVAILABLE_SLOTS)

    def test_has_slot(self):
        catalog = SlotCatalog()
        assert catalog.has_slot("2025-11-18", "09:00")
        assert not catalog.has_slot("2025-11-22", "16:00")
        assert not catalog.has_slot("2030-01-01", "09:00")


class TestApplyAction:
    def test_none_action_does_nothing(self):
        repo = InMemoryBookingRepository()
        event, booking = apply_action(PlainReply(speech="hi"), "CA1", repo, SlotCatalog())
        assert event is None
        assert booking is None
        assert len(repo) == 0

    def test_booking_copies_every_field(self):
        repo = InMemoryBookingRepository()
        event, booking = apply_action(interpret(BOOKING_REPLY), "CA1", repo, SlotCatalog())
        assert event.name == "book_appointment"
        assert event.status == "completed"
        assert repo.list_all() == [booking]
        assert booking.model_dump()["call_sid"] == "CA1"

    def test_booking_outside_catalog_is_still_accepted(self):
        repo = InMemoryBookingRepository()
        details = AppointmentDetails(name="Sam", date="2031-01-01", time="07:15")
        event, booking = action_book_appointment(details, "CA2", repo, SlotCatalog())
        assert len(repo) == 1
        assert "not in slot catalog" in event.detail
        assert booking.phone is None

    def test_extra_fields_survive(self):
        repo = InMemoryBookingRepository()
        details = AppointmentDetails.model_validate({"name": "Sam", "dentist": "Dr Lee"})
        _, booking = action_book_appointment(details, "CA3", repo, SlotCatalog())
        assert booking.model_dump()["dentist"] == "Dr Lee"

    def test_check_availability_is_acknowledged(self):
        reply = StructuredReply(response="We have 9am free.", action=Action.CHECK_AVAILABILITY)
        repo = InMemoryBookingRepository()
        event, booking = apply_action(reply, "CA1", repo, SlotCatalog())
        assert event.name == "check_availability"
        assert booking is None
        assert len(repo) == 0

    def test_model_cannot_set_call_sid_or_timestamp(self):
        repo = InMemoryBookingRepository()
        details = AppointmentDetails.model_validate(
            {"name": "Jane", "call_sid": "CA-forged", "booked_at": "yesterday"}
        )
        _, booking = action_book_appointment(details, "CA4", repo, SlotCatalog())
        assert booking.call_sid == "CA4"
        assert booking.booked_at != "yesterday"
        assert booking.booked_at.startswith("20")
