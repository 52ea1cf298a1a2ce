from __future__ import annotations

import logging
from typing import Optional

from pythonjsonlogger import jsonlogger


TEXT_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
JSON_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def _level(name: str, default: int) -> int:
    return getattr(logging, (name or "").upper(), default)


def configure_logging(
    level: str = "INFO",
    fmt: str = "text",
    sdk_level: str = "WARNING",
    logger: Optional[logging.Logger] = None,
) -> None:
    target = logger if logger is not None else logging.getLogger()
    target.setLevel(_level(level, logging.INFO))

    # Quiet the Azure SDK (request/response dumps at INFO)
    logging.getLogger("azure").setLevel(_level(sdk_level, logging.WARNING))

    # Avoid duplicate handlers; a later call only adjusts levels and format
    handler = next((h for h in target.handlers if getattr(h, "_csm_publish", False)), None)
    if handler is None:
        if target.handlers:
            return
        handler = logging.StreamHandler()
        handler._csm_publish = True
        target.addHandler(handler)

    if (fmt or "").lower() == "json":
        handler.setFormatter(jsonlogger.JsonFormatter(JSON_FORMAT))
    else:
        handler.setFormatter(logging.Formatter(TEXT_FORMAT))
