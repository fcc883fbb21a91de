"""Call SID correlation for log records.

Every record emitted while a webhook is being handled carries the Twilio
call SID, so one caller's turns can be followed through the log:

    set_call_sid("CA123")
    logger.info("Processing speech")  # -> [CA123] Processing speech
"""

import logging
from contextvars import ContextVar

_call_sid: ContextVar[str] = ContextVar("call_sid", default="-")


def set_call_sid(call_sid: str) -> None:
    """Set the correlation ID for the current async context."""
    _call_sid.set(call_sid or "-")


def get_call_sid() -> str:
    return _call_sid.get()


class CallSidFilter(logging.Filter):
    """Injects ``call_sid`` into every log record."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.call_sid = _call_sid.get()  # type: ignore[attr-defined]
        return True
