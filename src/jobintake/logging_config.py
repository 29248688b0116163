from __future__ import annotations

import logging

from jobintake.config import get_settings

# Libraries that log every fetch or extraction step at INFO.
_QUIET_LOGGERS = ("trafilatura", "htmldate", "courlan", "urllib3", "httpx", "openai")

_LOG_CONFIGURED = False


def configure_logging(level: str | None = None) -> None:
    global _LOG_CONFIGURED
    if _LOG_CONFIGURED:
        return

    name = (level or get_settings().log_level).upper()
    logging.basicConfig(
        level=getattr(logging, name, logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    for logger_name in _QUIET_LOGGERS:
        logging.getLogger(logger_name).setLevel(logging.WARNING)
    _LOG_CONFIGURED = True
