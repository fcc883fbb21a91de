from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional

from .schemas import ActionEvent, Turn

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class Session:
    call_sid: str
    created_at: datetime = field(default_factory=_utcnow)
    last_activity: datetime = field(default_factory=_utcnow)
    turns: List[Turn] = field(default_factory=list)
    actions: List[ActionEvent] = field(default_factory=list)


class SessionTable:
    """Per-call conversation state keyed by Twilio call SID.

    Entries live until ``sweep`` finds them idle for longer than ``timeout``.
    ``max_sessions`` optionally caps the table by evicting the least recently
    active call when a new one arrives; by default the table is unbounded.
    """

    def __init__(
        self,
        timeout: timedelta = timedelta(hours=1),
        max_sessions: Optional[int] = None,
    ) -> None:
        self.timeout = timeout
        self.max_sessions = max_sessions
        self.sessions: Dict[str, Session] = {}

    def __len__(self) -> int:
        return len(self.sessions)

    def __contains__(self, call_sid: object) -> bool:
        return call_sid in self.sessions

    def get(self, call_sid: str) -> Session | None:
        return self.sessions.get(call_sid)

    def get_or_create(self, call_sid: str, now: datetime | None = None) -> Session:
        now = now or _utcnow()
        session = self.sessions.get(call_sid)
        if session is None:
            self._make_room()
            session = Session(call_sid=call_sid, created_at=now, last_activity=now)
            self.sessions[call_sid] = session
            logger.info("Started conversation for CallSid: %s", call_sid)
        else:
            session.last_activity = now
        return session

    def append_turn(self, call_sid: str, role: str, text: str) -> Turn:
        turn = Turn(role=role, content=text)
        self.get_or_create(call_sid).turns.append(turn)
        return turn

    def reinstate(self, session: Session, now: datetime | None = None) -> None:
        """Put back a session evicted while its turn was in flight."""
        session.last_activity = now or _utcnow()
        if self.sessions.get(session.call_sid) is session:
            return
        if session.call_sid not in self.sessions:
            self._make_room()
        logger.info("Reinstating conversation for CallSid: %s", session.call_sid)
        self.sessions[session.call_sid] = session

    def sweep(
        self, now: datetime | None = None, timeout: timedelta | None = None
    ) -> list[str]:
        now = now or _utcnow()
        cutoff = now - (timeout if timeout is not None else self.timeout)
        stale = [
            call_sid
            for call_sid, session in self.sessions.items()
            if session.last_activity < cutoff
        ]
        for call_sid in stale:
            logger.info("Cleaning up stale conversation for CallSid: %s", call_sid)
            del self.sessions[call_sid]
        return stale

    def _make_room(self) -> None:
        if self.max_sessions is None:
            return
        while len(self.sessions) >= self.max_sessions:
            oldest = min(self.sessions.values(), key=lambda s: s.last_activity)
            logger.warning(
                "Session table full (%d); evicting CallSid: %s",
                self.max_sessions,
                oldest.call_sid,
            )
            del self.sessions[oldest.call_sid]


async def run_sweeper(table: SessionTable, interval: float) -> None:
    """Sweep ``table`` every ``interval`` seconds until cancelled."""
    while True:
        await asyncio.sleep(interval)
        removed = table.sweep()
        if removed:
            logger.debug("Sweep removed %d conversation(s)", len(removed))
