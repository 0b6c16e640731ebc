from __future__ import annotations

import logging
import logging.handlers
import os

LOG_FORMAT = "%(asctime)s %(levelname)-7s [%(name)s] %(message)s"
DATE_FORMAT = "%Y-%m-%dT%H:%M:%S"

# Statement echo and per-request access lines; the request middleware already logs requests.
NOISY_LOGGERS = ("sqlalchemy.engine", "sqlalchemy.pool", "uvicorn.access")

_HANDLER_PREFIX = "spotrate."


def _parse_level(level: str) -> int:
    value = logging.getLevelName(level.upper())
    return value if isinstance(value, int) else logging.INFO


def configure_logging(*, log_dir: str, level: str = "INFO", filename: str = "spotrate.log") -> logging.Logger:
    """Console plus rotating file output on the root logger.

    Calling it again replaces the handlers it installed earlier and leaves
    any other handlers (pytest's, uvicorn's) alone.
    """

    numeric = _parse_level(level)
    root = logging.getLogger()
    root.setLevel(numeric)

    for handler in [h for h in root.handlers if (h.get_name() or "").startswith(_HANDLER_PREFIX)]:
        root.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    console = logging.StreamHandler()
    console.set_name(_HANDLER_PREFIX + "console")
    console.setFormatter(formatter)
    root.addHandler(console)

    os.makedirs(log_dir, exist_ok=True)
    file_handler = logging.handlers.RotatingFileHandler(
        filename=os.path.join(log_dir, filename),
        maxBytes=10 * 1024 * 1024,
        backupCount=5,
        encoding="utf-8",
    )
    file_handler.set_name(_HANDLER_PREFIX + "file")
    file_handler.setFormatter(formatter)
    root.addHandler(file_handler)

    quiet = numeric if numeric <= logging.DEBUG else logging.WARNING
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(quiet)

    return root
