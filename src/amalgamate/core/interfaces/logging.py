from __future__ import annotations

"""Logging seams.

Collaborators receive a ready ``logging.Logger``; the CLI asks a factory for
the project logger so an embedding application can own the configuration.
"""

import logging
from typing import Protocol, runtime_checkable


@runtime_checkable
class LoggerLikeProtocol(Protocol):
    """The part of a logger that error-policy dispatch relies on."""

    def debug(self, msg: str, *args, **kwargs) -> None: ...

    def warning(self, msg: str, *args, **kwargs) -> None: ...


@runtime_checkable
class LoggerFactoryProtocol(Protocol):
    def get_logger(self, name: str) -> logging.Logger:
        """Return the configured logger for *name* (``amalgamate`` or a child)."""
        ...
