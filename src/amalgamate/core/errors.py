from __future__ import annotations

"""Exception taxonomy of the amalgamation run.

Policy-controlled conditions (unresolvable and cyclic includes) only become
exceptions when their handling is ``error``. Everything else derived from
:class:`AmalgamateError` is always fatal.
"""

from pathlib import Path
from typing import Optional, Sequence

from amalgamate.core.models import IncludeKind


class AmalgamateError(RuntimeError):
    """Base class for every error that aborts a run."""


class UnresolvableIncludeError(AmalgamateError):
    def __init__(self, reference: str, kind: IncludeKind, including_file: Optional[Path] = None) -> None:
        self.reference = reference
        self.kind = kind
        self.including_file = including_file
        where = f' (included from "{including_file}")' if including_file else ''
        super().__init__(f'could not resolve {kind.wrap(reference)}{where}')


class CyclicIncludeError(AmalgamateError):
    def __init__(self, cycle: Sequence[Path]) -> None:
        self.cycle = list(cycle)
        lines = ['cyclic include detected:']
        lines.extend(f'\t{path}' for path in self.cycle)
        super().__init__('\n'.join(lines))


class ResolutionError(AmalgamateError):
    """A path exists but cannot be canonicalized (broken link, missing dir)."""


class SourceReadError(AmalgamateError):
    """A file that resolution vouched for cannot be opened or read."""


class OutputWriteError(AmalgamateError):
    """The output sink rejected a write."""


class GlobSyntaxError(AmalgamateError):
    """A filter glob is malformed."""

    def __init__(self, pattern: str, reason: str) -> None:
        self.pattern = pattern
        self.reason = reason
        super().__init__(f'invalid glob "{pattern}": {reason}')
