from __future__ import annotations

"""Dispatch of policy-controlled errors.

Unresolvable and cyclic includes are reported through :func:`handle`, which
turns the configured :class:`ErrorHandling` into behaviour:

- ``error``  → the error is raised and the run unwinds;
- ``warn``   → the message is logged at WARNING and processing continues;
- ``ignore`` → the message is logged at DEBUG and processing continues.
"""

import logging
from typing import Optional

from amalgamate.core.errors import AmalgamateError
from amalgamate.core.interfaces.logging import LoggerLikeProtocol
from amalgamate.core.models import ErrorHandling

logger = logging.getLogger('amalgamate.policies')


def handle(handling: ErrorHandling, error: AmalgamateError, log: Optional[LoggerLikeProtocol] = None) -> None:
    lg = log or logger
    if handling is ErrorHandling.ERROR:
        raise error
    if handling is ErrorHandling.WARN:
        lg.warning('%s', error)
    elif handling is ErrorHandling.IGNORE:
        lg.debug('Ignoring: %s', error)
    else:
        raise ValueError(f'unknown error handling: {handling!r}')
