from __future__ import annotations

"""Inlining filter.

Every header that can be resolved is inlined unless a glob says otherwise.
Quote and system includes each get their own ordered glob list (the shared
``--filter`` globs merged with the kind-specific ones by command-line
position). Among the globs that match a path, the last one decides: a plain
glob keeps the include line, an inverted one (``!glob``) inlines it.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional, Pattern, Sequence

from amalgamate.core.interfaces.filter import InclusionPolicyProtocol
from amalgamate.core.models import IncludeKind, InvertibleGlob
from amalgamate.filtering.globs import compile_glob
from amalgamate.logging.helpers import debug_file_name, get_logger


@dataclass(frozen=True)
class _CompiledGlob:
    glob: InvertibleGlob
    regex: Pattern[str]

    def matches(self, candidate: str) -> bool:
        return self.regex.match(candidate) is not None


def _compile(globs: Iterable[InvertibleGlob]) -> List[_CompiledGlob]:
    return [_CompiledGlob(glob=g, regex=compile_glob(g.pattern)) for g in globs]


class InclusionFilter(InclusionPolicyProtocol):
    """Last-match-wins glob filter, one ordered list per include kind."""

    def __init__(
        self,
        quote_globs: Iterable[InvertibleGlob] = (),
        system_globs: Iterable[InvertibleGlob] = (),
        *,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._log = logger or get_logger('filter')
        self._quote = _compile(quote_globs)
        self._system = _compile(system_globs)
        for kind in IncludeKind:
            self._log.debug('%s ignore globs: %s', kind.value.capitalize(), [str(g) for g in self.globs(kind)])

    def globs(self, kind: IncludeKind) -> Sequence[InvertibleGlob]:
        compiled = self._quote if kind is IncludeKind.QUOTE else self._system
        return tuple(c.glob for c in compiled)

    def deciding_glob(self, path: Path, kind: IncludeKind) -> Optional[InvertibleGlob]:
        """The last glob of *kind*'s list that matches *path*, if any."""
        compiled = self._quote if kind is IncludeKind.QUOTE else self._system
        candidate = path.as_posix()
        for entry in reversed(compiled):
            if entry.matches(candidate):
                return entry.glob
        return None

    def should_inline(self, path: Path, kind: IncludeKind) -> bool:
        name = debug_file_name(path)
        glob = self.deciding_glob(path, kind)
        if glob is None:
            self._log.debug('Inlining %r by default', name)
            return True
        if glob.inverted:
            self._log.debug("Inlining %r (cause: '%s')", name, glob)
            return True
        self._log.debug("Not inlining %r (cause: '%s')", name, glob)
        return False
