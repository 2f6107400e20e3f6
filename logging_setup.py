import logging
import sys
from typing import Optional

_APP_LOGGERS = ("main", "routes", "services", "middleware", "utils", "database", "errors", "uvicorn")


class _ThirdPartyNoiseFilter(logging.Filter):
    """Let application logs through; third-party libraries only from WARNING up."""

    def filter(self, record: logging.LogRecord) -> bool:
        name = record.name
        if name == "root" or name.split(".")[0] in _APP_LOGGERS:
            return True
        # SQL echo is opt-in and should reach the console when enabled
        if name.startswith("sqlalchemy.engine"):
            return True
        return record.levelno >= logging.WARNING


def setup_logging(level: str = "INFO", log_file: Optional[str] = None) -> None:
    """
    Configure the root logger with a console handler and an optional file handler

    Safe to call more than once: existing handlers are replaced.
    """
    root = logging.getLogger()
    root.setLevel(level)

    for handler in list(root.handlers):
        root.removeHandler(handler)

    fmt = logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    console = logging.StreamHandler(sys.stderr)
    console.setFormatter(fmt)
    console.addFilter(_ThirdPartyNoiseFilter())
    root.addHandler(console)

    if log_file:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(fmt)
        root.addHandler(file_handler)

    logging.captureWarnings(True)
