from __future__ import annotations

import logging
import sys
from typing import NoReturn

import uvicorn

logger = logging.getLogger("receptionist")


def _fatal(exc: Exception) -> NoReturn:
    if not logging.getLogger().handlers:
        logging.basicConfig(format="%(asctime)s [%(name)s] %(levelname)s: %(message)s")
    logger.error("FATAL ERROR: %s", exc)
    sys.exit(1)


def main() -> None:
    # Settings are read from the environment on import, so a malformed value
    # surfaces here as ValueError.
    try:
        from receptionist.config import ConfigurationError, configure_logging, settings
    except ValueError as exc:
        _fatal(exc)
    from receptionist.main import create_app

    configure_logging(settings.log_level)
    try:
        app = create_app(settings)
    except ConfigurationError as exc:
        _fatal(exc)
    logger.info("Receptionist server running on port %d", settings.port)
    logger.info("Set the Twilio voice webhook to: <public-url>/voice/welcome")
    uvicorn.run(app, host=settings.host, port=settings.port, log_config=None)


if __name__ == "__main__":
    main()
