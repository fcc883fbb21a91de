from __future__ import annotations

import logging

from pydantic import ValidationError

from .schemas import PlainReply, Reply, StructuredReply

logger = logging.getLogger(__name__)


def interpret(raw_text: str) -> Reply:
    """Decide, in a single parse, whether the model answered in the JSON reply format.

    Anything that is not a JSON object with a string ``response`` (and, when
    present, an object ``appointment_details``) is spoken as-is. An unknown
    ``action`` counts as ``none``. The caller always hears something.
    """
    try:
        return StructuredReply.model_validate_json(raw_text)
    except ValidationError:
        logger.info("Model reply is not structured; speaking raw text")
        return PlainReply(speech=raw_text)
