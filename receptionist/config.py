import logging
import os
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel

from .logging_context import CallSidFilter

load_dotenv()

LOG_FORMAT = "%(asctime)s [%(name)s] %(levelname)s [%(call_sid)s]: %(message)s"


class ConfigurationError(RuntimeError):
    """Raised when the process cannot start with the given settings."""


def _optional_int(env_var: str) -> Optional[int]:
    raw = os.getenv(env_var)
    if raw is None or raw == "":
        return None
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"Invalid integer for {env_var}: {raw!r}") from None


def _optional_float(env_var: str) -> Optional[float]:
    raw = os.getenv(env_var)
    if raw is None or raw == "":
        return None
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"Invalid float for {env_var}: {raw!r}") from None


def _safe_int(env_var: str, default: str) -> int:
    raw = os.getenv(env_var, default)
    try:
        return int(raw)
    except (ValueError, TypeError):
        raise ValueError(f"Invalid integer for {env_var}: {raw!r}") from None


class Settings(BaseModel):
    environment: str = os.getenv("ENVIRONMENT", "development")
    host: str = os.getenv("HOST", "0.0.0.0")
    port: int = _safe_int("PORT", "3000")
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    anthropic_api_key: Optional[str] = os.getenv("ANTHROPIC_API_KEY")
    anthropic_model: str = os.getenv("ANTHROPIC_MODEL", "claude-sonnet-4-20250514")
    anthropic_max_tokens: int = _safe_int("ANTHROPIC_MAX_TOKENS", "1000")
    anthropic_api_base: str = os.getenv("ANTHROPIC_API_BASE", "https://api.anthropic.com")
    anthropic_version: str = os.getenv("ANTHROPIC_VERSION", "2023-06-01")
    llm_timeout_seconds: Optional[float] = _optional_float("LLM_TIMEOUT_SECONDS")
    dashboard_token: Optional[str] = os.getenv("DASHBOARD_TOKEN")
    session_timeout_seconds: int = _safe_int("SESSION_TIMEOUT_SECONDS", "3600")
    session_sweep_interval_seconds: int = _safe_int("SESSION_SWEEP_INTERVAL_SECONDS", "300")
    max_sessions: Optional[int] = _optional_int("MAX_SESSIONS")
    practice_name: str = os.getenv("PRACTICE_NAME", "Bright Smile Dental Surgery")
    tts_voice: str = os.getenv("TTS_VOICE", "Polly.Amy-Neural")
    tts_language: str = os.getenv("TTS_LANGUAGE", "en-GB")
    agent_greeting: Optional[str] = os.getenv("AGENT_GREETING")
    apology_message: str = os.getenv(
        "APOLOGY_MESSAGE",
        "I apologize, I am having technical difficulties. Please call back later or hold for a staff member.",
    )

    @property
    def greeting(self) -> str:
        if self.agent_greeting:
            return self.agent_greeting
        return f"Hello, you have reached {self.practice_name}. How may I help you today?"


def validate_settings(config: Settings) -> None:
    """Refuse to run without both secrets or with nonsensical timings."""
    missing = [
        env_var
        for env_var, value in [
            ("ANTHROPIC_API_KEY", config.anthropic_api_key),
            ("DASHBOARD_TOKEN", config.dashboard_token),
        ]
        if not value
    ]
    if missing:
        raise ConfigurationError(f"{', '.join(missing)} is not set.")
    if config.anthropic_max_tokens < 1:
        raise ConfigurationError(
            f"ANTHROPIC_MAX_TOKENS must be >= 1, got {config.anthropic_max_tokens}"
        )
    if config.session_timeout_seconds <= 0:
        raise ConfigurationError(
            f"SESSION_TIMEOUT_SECONDS must be > 0, got {config.session_timeout_seconds}"
        )
    if config.session_sweep_interval_seconds <= 0:
        raise ConfigurationError(
            "SESSION_SWEEP_INTERVAL_SECONDS must be > 0, "
            f"got {config.session_sweep_interval_seconds}"
        )
    if config.max_sessions is not None and config.max_sessions < 1:
        raise ConfigurationError(f"MAX_SESSIONS must be >= 1, got {config.max_sessions}")
    if config.llm_timeout_seconds is not None and config.llm_timeout_seconds <= 0:
        raise ConfigurationError(
            f"LLM_TIMEOUT_SECONDS must be > 0, got {config.llm_timeout_seconds}"
        )


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    for handler in logging.getLogger().handlers:
        if not any(isinstance(f, CallSidFilter) for f in handler.filters):
            handler.addFilter(CallSidFilter())


settings = Settings()
