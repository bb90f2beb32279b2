from __future__ import annotations

"""Line grammar for the two preprocessor directives the engine understands.

Only literal ``#include "X"``, ``#include <X>`` and ``#pragma once`` lines are
recognized. Macros, conditionals and every other directive pass through as
ordinary text.
"""

import re
from typing import Optional

from amalgamate.core.models import IncludeKind, IncludeReference

_INCLUDE_RE = re.compile(
    r'^\s*#\s*include\s*(?:"(?P<quote>[^"]*)"|<(?P<system>[^<>]*)>)\s*$'
)
_PRAGMA_ONCE_RE = re.compile(r'^\s*#\s*pragma\s+once\s*$')
_BLANK_RE = re.compile(r'^\s*$')


def is_blank(line: str) -> bool:
    return bool(_BLANK_RE.match(line))


def is_pragma_once(line: str) -> bool:
    return bool(_PRAGMA_ONCE_RE.match(line))


def parse_include(line: str) -> Optional[IncludeReference]:
    """Return the include reference on *line*, or None for any other line.

    Include-like lines that use neither delimiter pair (``#include FOO``,
    ``#include "a>``) are not references and yield None.
    """
    match = _INCLUDE_RE.match(line)
    if match is None:
        return None
    quote = match.group('quote')
    if quote is not None:
        return IncludeReference(raw=quote, kind=IncludeKind.QUOTE)
    return IncludeReference(raw=match.group('system'), kind=IncludeKind.SYSTEM)
