"""Shared test fixtures and helpers."""

import json
from typing import Optional, Sequence

import pytest
from fastapi.testclient import TestClient

from receptionist.config import Settings
from receptionist.main import create_app
from receptionist.schemas import Turn
from receptionist.service import ReceptionistService

DASHBOARD_TOKEN = "test-dashboard-token"

BOOKING_REPLY = json.dumps(
    {
        "response": "Confirmed for Nov 18 at 9am",
        "action": "book_appointment",
        "appointment_details": {
            "name": "Jane",
            "phone": "555-1234",
            "date": "2025-11-18",
            "time": "09:00",
            "reason": "cleaning",
        },
    }
)


class StubGateway:
    """Stands in for the model API; replays canned replies in order."""

    def __init__(self, replies: Optional[list] = None) -> None:
        self.replies = list(replies or [])
        self.calls: list[dict] = []

    async def generate(
        self,
        system_instructions: str,
        context_snapshot: str,
        turn_history: Sequence[Turn],
    ) -> str:
        self.calls.append(
            {
                "system_instructions": system_instructions,
                "context_snapshot": context_snapshot,
                "turn_history": [turn.model_copy() for turn in turn_history],
            }
        )
        reply = self.replies.pop(0) if self.replies else '{"response": "Okay.", "action": "none"}'
        if isinstance(reply, Exception):
            raise reply
        return reply


def make_settings(**overrides) -> Settings:
    values = {
        "anthropic_api_key": "test-api-key",
        "dashboard_token": DASHBOARD_TOKEN,
        "agent_greeting": None,
        "practice_name": "Bright Smile Dental Surgery",
        "max_sessions": None,
        "llm_timeout_seconds": None,
    }
    values.update(overrides)
    return Settings(**values)


@pytest.fixture
def settings():
    return make_settings()


@pytest.fixture
def gateway():
    return StubGateway()


@pytest.fixture
def service(gateway):
    return ReceptionistService(gateway=gateway)


@pytest.fixture
def client(settings, service):
    app = create_app(settings, service=service, start_sweeper=False)
    return TestClient(app)
