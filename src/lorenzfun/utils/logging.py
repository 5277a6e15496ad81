from __future__ import annotations

import logging
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Iterator, Optional, Union

LOG_FORMAT = "[%(command)s] %(levelname)s %(name)s: %(message)s"

# Libraries that flood DEBUG output while the viewer animates
NOISY_LOGGERS = ("matplotlib", "PIL")

_command: ContextVar[str] = ContextVar("lorenzfun_command", default="lorenzfun")


class _CommandFilter(logging.Filter):
    """Stamp every record with the subcommand that produced it."""

    def filter(self, record: logging.LogRecord) -> bool:  # noqa: D401
        if not getattr(record, "command", None):
            record.command = _command.get()
        return True


def _handler() -> Optional[logging.Handler]:
    for handler in logging.getLogger().handlers:
        if getattr(handler, "_lorenzfun", False):
            return handler
    return None


def setup_logging(level: Union[str, int] = "WARNING") -> None:
    """
    Route log records to stderr, where they never mix with SVG written to stdout.

    Safe to call once per command: the handler is installed the first time and
    only the level changes afterwards.
    """
    numeric_level = logging.getLevelName(level.upper()) if isinstance(level, str) else int(level)
    if not isinstance(numeric_level, int):
        numeric_level = logging.WARNING

    root = logging.getLogger()
    if _handler() is None and not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler.addFilter(_CommandFilter())
        handler._lorenzfun = True  # type: ignore[attr-defined]
        root.addHandler(handler)
    root.setLevel(numeric_level)
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(numeric_level, logging.INFO))
    logging.captureWarnings(True)


def resolve_log_level(verbose: bool, debug: bool) -> str:
    """--debug beats --verbose; neither means warnings only."""
    if debug:
        return "DEBUG"
    return "INFO" if verbose else "WARNING"


def configure_logging(verbose: bool = False, debug: bool = False) -> str:
    level = resolve_log_level(verbose, debug)
    setup_logging(level)
    return level


def set_command_context(command: str) -> None:
    _command.set(command)


@contextmanager
def command_context(command: str) -> Iterator[None]:
    """Tag records logged inside the block with ``command``."""
    token = _command.set(command)
    try:
        yield
    finally:
        _command.reset(token)


def current_command() -> str:
    return _command.get()


def get_logger(name: Optional[str] = None) -> logging.Logger:
    return logging.getLogger(name or "lorenzfun")
