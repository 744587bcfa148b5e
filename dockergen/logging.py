"""Logging utilities for dockergen commands."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable

_LOGGER_NAME = "dockergen"
_REDACTED = "***"


class RedactingFilter(logging.Filter):
    """Masks configured secret values (tokens, registry passwords) in log records."""

    def __init__(self, secrets: Iterable[str] = ()) -> None:
        super().__init__()
        self._secrets = [value for value in secrets if value]

    def filter(self, record: logging.LogRecord) -> bool:
        if not self._secrets:
            return True
        message = record.getMessage()
        redacted = redact(message, self._secrets)
        if redacted != message:
            record.msg = redacted
            record.args = None
        return True


def redact(text: str, secrets: Iterable[str]) -> str:
    """Replace every occurrence of each non-empty secret in ``text``."""
    for value in secrets:
        if value:
            text = text.replace(value, _REDACTED)
    return text


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a module-scoped logger under the dockergen hierarchy."""
    full_name = f"{_LOGGER_NAME}.{name}" if name else _LOGGER_NAME
    return logging.getLogger(full_name)


def configure_logging(
    *,
    verbose: bool = False,
    log_file: Path | None = None,
    secrets: Iterable[str] = (),
) -> logging.Logger:
    """Configure the dockergen logger with console output and optional file sink.

    Values passed in ``secrets`` are masked on every handler.
    """
    level = logging.DEBUG if verbose else logging.INFO
    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(level)
    logger.propagate = False

    # Reset handlers to avoid duplicate output when the CLI is invoked multiple times.
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    redactor = RedactingFilter(secrets)

    stream_handler = logging.StreamHandler()
    stream_handler.setLevel(level)
    stream_handler.setFormatter(logging.Formatter("[dockergen] %(levelname)s %(message)s"))
    stream_handler.addFilter(redactor)
    logger.addHandler(stream_handler)

    if log_file is not None:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
        )
        file_handler.addFilter(redactor)
        logger.addHandler(file_handler)

    return logger


__all__ = ["RedactingFilter", "configure_logging", "get_logger", "redact"]
