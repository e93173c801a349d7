"""Logging setup for the admin CLI and embedding hosts."""

from __future__ import annotations

import logging

from rich.logging import RichHandler

_ROOT_LOGGER = "twig_cap"

_STANDARD_ATTRS = frozenset(vars(logging.LogRecord("", logging.INFO, "", 0, "", None, None))) | {
    "message",
    "asctime",
}


class ExtraFieldsFormatter(logging.Formatter):
    """Appends ``extra=`` payload fields to the formatted message as ``key=value`` pairs."""

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        fields = {
            key: value
            for key, value in record.__dict__.items()
            if key not in _STANDARD_ATTRS and not key.startswith("_")
        }
        if not fields:
            return message
        return message + " " + " ".join(f"{key}={value}" for key, value in fields.items())


def configure_logging(level: str = "INFO", *, rich_output: bool = True) -> logging.Logger:
    """Attach a single handler to the ``twig_cap`` logger tree."""
    logger = logging.getLogger(_ROOT_LOGGER)
    logger.setLevel(level.upper())
    for existing in list(logger.handlers):
        logger.removeHandler(existing)

    if rich_output:
        handler: logging.Handler = RichHandler(rich_tracebacks=True, show_path=False)
        handler.setFormatter(ExtraFieldsFormatter("%(message)s"))
    else:
        handler = logging.StreamHandler()
        handler.setFormatter(ExtraFieldsFormatter("%(asctime)s %(levelname)s %(name)s %(message)s"))
    logger.addHandler(handler)
    logger.propagate = False
    return logger
