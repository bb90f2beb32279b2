from __future__ import annotations

"""Small logging helpers to standardize amalgamate logger names and configuration.

This module provides:
    - JsonLogFormatter: JSON log formatter with stable fields and optional context.
    - setup_base_logger: Root logger configuration for the 'amalgamate' logger.
    - get_logger: Namespaced logger factory ('amalgamate.*').
    - level_from_verbosity: Map -v/-q counters to a logging level.
    - debug_file_name: Short file label used in trace messages.
"""

import logging
import os
from pathlib import Path
from typing import Optional, TextIO

# Above CRITICAL: nothing gets through.
SILENT = logging.CRITICAL + 10


class JsonLogFormatter(logging.Formatter):
    """Emit logs as compact JSON with a fixed schema.

    Fields:
        - ts: ISO-8601 timestamp in UTC with millisecond precision.
        - level: Log level name.
        - module: Logger name (e.g., 'amalgamate.resolve').
        - msg: Formatted message string.
        - version: amalgamate.__version__ (fixed per formatter instance).
        - ctx: Optional dictionary attached to the record as 'context'.
    """

    def __init__(self) -> None:
        super().__init__()
        self._version = self._resolve_version()

    @staticmethod
    def _resolve_version() -> str:
        try:
            # Lazy import to reduce the chance of circular imports at import time.
            from amalgamate import __version__ as _v  # type: ignore
            return str(_v)
        except ImportError:
            return os.getenv("AMALGAMATE_VERSION", "unknown")

    def format(self, record: logging.LogRecord) -> str:
        from datetime import datetime, timezone
        import json

        ts = datetime.fromtimestamp(record.created, tz=timezone.utc)
        ts_str = ts.isoformat(timespec="milliseconds").replace("+00:00", "Z")

        payload = {
            "ts": ts_str,
            "level": record.levelname,
            "module": record.name,
            "msg": record.getMessage(),
            "version": self._version,
        }

        ctx = getattr(record, "context", None)
        if isinstance(ctx, dict) and ctx:
            payload["ctx"] = ctx

        return json.dumps(payload, ensure_ascii=False)


def _make_formatter(json_logs: bool) -> logging.Formatter:
    if json_logs:
        return JsonLogFormatter()
    return logging.Formatter("%(levelname)s: %(message)s")


def _retarget(handler: logging.StreamHandler, stream: TextIO) -> None:
    if handler.stream is stream:
        return
    if getattr(handler.stream, "closed", False):
        # setStream flushes the old stream, which fails once it is closed.
        handler.stream = stream
    else:
        handler.setStream(stream)


def setup_base_logger(
    *, json_logs: bool = False, level: int = logging.WARNING, stream: Optional[TextIO] = None
) -> logging.Logger:
    """Configure the base 'amalgamate' logger and return it.

    Args:
        json_logs: If True, configure a JSON formatter, else plain text.
        level: Logging level for the base logger.
        stream: Optional stream (stderr by default).

    Returns:
        The configured base logger.
    """
    import sys as _sys

    base = logging.getLogger("amalgamate")
    if base.handlers:
        # Already configured: refresh level, target and format of our own handler.
        base.setLevel(level)
        for handler in base.handlers:
            if getattr(handler, "_amalgamate_base", False):
                _retarget(handler, stream or _sys.stderr)
                handler.setFormatter(_make_formatter(json_logs))
        return base

    base.setLevel(level)
    base.propagate = False

    handler = logging.StreamHandler(stream or _sys.stderr)
    handler._amalgamate_base = True  # type: ignore[attr-defined]
    handler.setFormatter(_make_formatter(json_logs))
    base.addHandler(handler)

    return base


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a namespaced logger under 'amalgamate'."""
    if not name or name == "amalgamate":
        return logging.getLogger("amalgamate")
    if name.startswith("amalgamate"):
        return logging.getLogger(name)
    return logging.getLogger(f"amalgamate.{name}")


def level_from_verbosity(verbose: int, quiet: int) -> int:
    """Translate counted -v/-q flags into a logging level (WARNING by default)."""
    score = (verbose or 0) - (quiet or 0)
    if score <= -2:
        return SILENT
    if score == -1:
        return logging.ERROR
    if score == 0:
        return logging.WARNING
    if score == 1:
        return logging.INFO
    return logging.DEBUG


def debug_file_name(path: Path) -> str:
    return path.name or "<no file name?>"
