"""
Glob dialect of the inclusion filter.

Patterns follow :mod:`fnmatch` (``*``, ``?``, ``[seq]``, ``[!seq]``) with two
additions and a few syntax checks:

- ``{a,b}`` alternation, expanded before translation. Groups cannot nest.
- ``**`` is accepted only as a whole path component (``**/x``, ``a/**``,
  ``a/**/b`` or ``**`` alone). Like ``*`` it matches across ``/``.
- Unclosed ``[`` or ``{`` and a stray ``}`` are errors.

Patterns are matched against the whole candidate path.
"""

from __future__ import annotations

import fnmatch
import itertools
import re
from typing import List, Pattern, Tuple, Union

from amalgamate.core.errors import GlobSyntaxError

_Part = Union[str, List[str]]


def _class_end(pattern: str, start: int) -> int:
    """Index just past the ``]`` closing the class opened at *start*."""
    j = start + 1
    if j < len(pattern) and pattern[j] in '!^':
        j += 1
    # A ']' right after the opening bracket is a member, not the end.
    if j < len(pattern) and pattern[j] == ']':
        j += 1
    close = pattern.find(']', j)
    if close < 0:
        raise GlobSyntaxError(pattern, 'unclosed character class; missing "]"')
    return close + 1


def _alternatives(pattern: str, start: int) -> Tuple[int, List[str]]:
    """Parse the group opened at *start*; return (end index, alternatives)."""
    alternatives: List[str] = []
    current: List[str] = []
    j = start + 1
    while j < len(pattern):
        c = pattern[j]
        if c == '[':
            end = _class_end(pattern, j)
            current.append(pattern[j:end])
            j = end
            continue
        if c == '{':
            raise GlobSyntaxError(pattern, 'nested alternate groups are not allowed')
        if c == ',':
            alternatives.append(''.join(current))
            current = []
        elif c == '}':
            alternatives.append(''.join(current))
            return j + 1, alternatives
        else:
            current.append(c)
        j += 1
    raise GlobSyntaxError(pattern, 'unclosed alternate group; missing "}"')


def _split(pattern: str) -> List[_Part]:
    parts: List[_Part] = []
    literal: List[str] = []
    i = 0
    while i < len(pattern):
        c = pattern[i]
        if c == '[':
            end = _class_end(pattern, i)
            literal.append(pattern[i:end])
            i = end
        elif c == '{':
            if literal:
                parts.append(''.join(literal))
                literal = []
            i, alternatives = _alternatives(pattern, i)
            parts.append(alternatives)
        elif c == '}':
            raise GlobSyntaxError(pattern, 'unopened alternate group; missing "{"')
        else:
            literal.append(c)
            i += 1
    if literal:
        parts.append(''.join(literal))
    return parts


def expand_alternatives(pattern: str) -> List[str]:
    """Every plain pattern *pattern* stands for, in order.

    >>> expand_alternatives('**/{a,b}.{h,hpp}')
    ['**/a.h', '**/a.hpp', '**/b.h', '**/b.hpp']
    """
    choices = [[part] if isinstance(part, str) else part for part in _split(pattern)]
    return [''.join(combo) for combo in itertools.product(*choices)]


def _check_recursive(pattern: str, expanded: str) -> None:
    for component in expanded.split('/'):
        if '**' in component and component != '**':
            raise GlobSyntaxError(pattern, 'recursive wildcards must form a single path component')


def compile_glob(pattern: str) -> Pattern[str]:
    """Validate *pattern* and compile it into one anchored regex."""
    if not pattern:
        raise GlobSyntaxError(pattern, 'empty pattern')
    expanded = expand_alternatives(pattern)
    for alternative in expanded:
        _check_recursive(pattern, alternative)
    return re.compile('|'.join(fnmatch.translate(alternative) for alternative in expanded))

