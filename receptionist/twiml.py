from __future__ import annotations

from twilio.twiml.voice_response import VoiceResponse

PROCESS_PATH = "/voice/process"


def _say(vr: VoiceResponse, text: str, voice: str, language: str) -> None:
    vr.say(text, voice=voice, language=language)


def _gather(vr: VoiceResponse, language: str, action: str = PROCESS_PATH) -> None:
    vr.gather(input="speech", action=action, speech_timeout="auto", language=language)


def speak_and_listen(text: str, voice: str, language: str, action: str = PROCESS_PATH) -> str:
    """Say ``text`` then hand the caller's next utterance to ``action``."""
    vr = VoiceResponse()
    _say(vr, text, voice, language)
    _gather(vr, language, action)
    return str(vr)


def speak_and_end(text: str, voice: str, language: str) -> str:
    # No Gather follows, so Twilio ends the call once the message is spoken.
    vr = VoiceResponse()
    _say(vr, text, voice, language)
    return str(vr)
