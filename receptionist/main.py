from __future__ import annotations

import asyncio
import contextlib
import logging
import secrets
from pathlib import Path
from typing import Optional

from fastapi import Depends, FastAPI, Form, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, Response

from .config import Settings, validate_settings
from .logging_context import set_call_sid
from .service import ReceptionistService
from .store import run_sweeper
from .twiml import PROCESS_PATH, speak_and_end, speak_and_listen

logger = logging.getLogger(__name__)

DASHBOARD_PAGE = Path(__file__).parent / "static" / "dashboard.html"


def _twiml(xml: str) -> Response:
    return Response(content=xml, media_type="application/xml")


def create_app(
    settings: Settings,
    service: Optional[ReceptionistService] = None,
    start_sweeper: bool = True,
) -> FastAPI:
    validate_settings(settings)
    service = service or ReceptionistService.from_settings(settings)

    @contextlib.asynccontextmanager
    async def lifespan(app: FastAPI):
        sweeper = None
        if start_sweeper:
            sweeper = asyncio.create_task(
                run_sweeper(service.sessions, settings.session_sweep_interval_seconds)
            )
        logger.info("%s receptionist is active", settings.practice_name)
        try:
            yield
        finally:
            if sweeper is not None:
                sweeper.cancel()
                with contextlib.suppress(asyncio.CancelledError):
                    await sweeper

    app = FastAPI(title="Dental AI Receptionist", lifespan=lifespan)
    app.state.settings = settings
    app.state.service = service

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    def require_token(token: Optional[str] = None) -> None:
        expected = settings.dashboard_token or ""
        if not token or not secrets.compare_digest(token.encode(), expected.encode()):
            raise HTTPException(status_code=401, detail="Unauthorized")

    @app.post("/voice/welcome")
    async def voice_welcome(request: Request) -> Response:
        form = await request.form()
        set_call_sid(str(form.get("CallSid") or ""))
        logger.info("Incoming call from %s", form.get("From") or "unknown")
        return _twiml(
            speak_and_listen(settings.greeting, settings.tts_voice, settings.tts_language)
        )

    @app.post(PROCESS_PATH)
    async def voice_process(
        CallSid: str = Form(...),  # noqa: N803
        SpeechResult: str = Form(""),  # noqa: N803
    ) -> Response:
        set_call_sid(CallSid)
        logger.info("User said: %s", SpeechResult)
        try:
            result = await service.handle_turn(CallSid, SpeechResult)
        except Exception:
            logger.exception("Error processing call turn")
            return _twiml(
                speak_and_end(settings.apology_message, settings.tts_voice, settings.tts_language)
            )
        return _twiml(
            speak_and_listen(result.reply.speech, settings.tts_voice, settings.tts_language)
        )

    @app.get("/appointments", dependencies=[Depends(require_token)])
    async def list_appointments() -> dict:
        bookings = service.list_bookings()
        return {
            "total": len(bookings),
            "appointments": [booking.model_dump(mode="json") for booking in bookings],
        }

    @app.get("/available-slots")
    async def available_slots() -> dict[str, list[str]]:
        return service.list_slots()

    @app.get("/dashboard", dependencies=[Depends(require_token)])
    async def dashboard() -> FileResponse:
        return FileResponse(DASHBOARD_PAGE, media_type="text/html")

    @app.get("/")
    async def health() -> dict:
        return {
            "status": "running",
            "message": f"{settings.practice_name} AI Receptionist is active",
            "endpoints": {
                "dashboard": "/dashboard",
                "voice_webhook": "/voice/welcome",
                "appointments": "/appointments",
                "available_slots": "/available-slots",
            },
        }

    return app
