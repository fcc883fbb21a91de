from datetime import datetime, timezone
from enum import Enum
from typing import Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


def utcnow_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class Action(str, Enum):
    NONE = "none"
    BOOK_APPOINTMENT = "book_appointment"
    CHECK_AVAILABILITY = "check_availability"
    TRANSFER_TO_STAFF = "transfer_to_staff"


class Turn(BaseModel):
    role: Literal["user", "assistant"]
    content: str


class AppointmentDetails(BaseModel):
    """Booking fields as the model emitted them; contents are never checked."""

    model_config = ConfigDict(extra="allow", coerce_numbers_to_str=True)

    name: Optional[str] = None
    phone: Optional[str] = None
    date: Optional[str] = None
    time: Optional[str] = None
    reason: Optional[str] = None


class Booking(AppointmentDetails):
    call_sid: str
    booked_at: str = Field(default_factory=utcnow_iso)


class StructuredReply(BaseModel):
    kind: Literal["structured"] = "structured"
    speech: str = Field(alias="response")
    action: Action = Action.NONE
    appointment_details: Optional[AppointmentDetails] = None

    model_config = ConfigDict(populate_by_name=True)

    @field_validator("action", mode="before")
    @classmethod
    def _unknown_action_is_none(cls, value: object) -> object:
        if isinstance(value, str) and value in {action.value for action in Action}:
            return value
        return Action.NONE


class PlainReply(BaseModel):
    kind: Literal["plain"] = "plain"
    speech: str
    action: Literal[Action.NONE] = Action.NONE
    appointment_details: None = None


Reply = Union[StructuredReply, PlainReply]


class ActionEvent(BaseModel):
    id: str
    name: str
    status: str
    detail: str
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
