from __future__ import annotations

import logging
from typing import Optional, Sequence

import httpx

from .schemas import Turn

logger = logging.getLogger(__name__)


class GatewayError(RuntimeError):
    """The model API could not produce a reply for this turn."""


class AssistantGateway:
    """Thin client for the Anthropic Messages API.

    One request per call to :meth:`generate`; failures are never retried.
    """

    def __init__(
        self,
        api_key: str,
        model: str,
        max_tokens: int = 1000,
        api_base: str = "https://api.anthropic.com",
        api_version: str = "2023-06-01",
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.api_key = api_key
        self.model = model
        self.max_tokens = max_tokens
        self.api_base = api_base.rstrip("/")
        self.api_version = api_version
        self.timeout = timeout
        self.transport = transport

    @classmethod
    def from_settings(cls, settings) -> "AssistantGateway":
        return cls(
            api_key=settings.anthropic_api_key or "",
            model=settings.anthropic_model,
            max_tokens=settings.anthropic_max_tokens,
            api_base=settings.anthropic_api_base,
            api_version=settings.anthropic_version,
            timeout=settings.llm_timeout_seconds,
        )

    def build_payload(
        self,
        system_instructions: str,
        context_snapshot: str,
        turn_history: Sequence[Turn],
    ) -> dict:
        return {
            "model": self.model,
            "max_tokens": self.max_tokens,
            "system": f"{system_instructions}\n\n{context_snapshot}",
            "messages": [turn.model_dump() for turn in turn_history],
        }

    async def generate(
        self,
        system_instructions: str,
        context_snapshot: str,
        turn_history: Sequence[Turn],
    ) -> str:
        payload = self.build_payload(system_instructions, context_snapshot, turn_history)
        headers = {
            "x-api-key": self.api_key,
            "anthropic-version": self.api_version,
            "content-type": "application/json",
        }
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.post(
                    f"{self.api_base}/v1/messages", json=payload, headers=headers
                )
                response.raise_for_status()
                body = response.json()
        except httpx.HTTPStatusError as exc:
            raise GatewayError(
                f"Model API returned {exc.response.status_code}: {exc.response.text[:200]}"
            ) from exc
        except httpx.HTTPError as exc:
            raise GatewayError(f"Model API request failed: {exc}") from exc
        except ValueError as exc:
            raise GatewayError("Model API returned a non-JSON body") from exc
        return _first_text(body)


def _first_text(body: object) -> str:
    try:
        block = body["content"][0]  # type: ignore[index]
        text = block["text"]
    except (KeyError, IndexError, TypeError) as exc:
        raise GatewayError("Model API response has no text content") from exc
    if not isinstance(text, str):
        raise GatewayError("Model API response has no text content")
    return text
