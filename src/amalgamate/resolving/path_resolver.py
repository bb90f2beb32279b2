from __future__ import annotations
"""
Include path resolution.

Maps the text of an include reference to the canonical, symlink-free path of
the file it names, or reports that nothing matched:

- Quote references are tried against the including file's directory first,
  then against the quote search directories.
- System references are tried against the system search directories only.
- Directory order is the order given on the command line; the first
  directory holding a regular file of that name wins.

Not finding a file is not an error here; the traversal engine applies the
configured handling. Failing to canonicalize something that exists is.
"""

import logging
from pathlib import Path
from typing import Iterable, Iterator, List, Optional, Sequence

from amalgamate.core.errors import ResolutionError
from amalgamate.core.interfaces.fs import PathResolverProtocol
from amalgamate.core.models import IncludeKind
from amalgamate.logging.helpers import get_logger


def canonicalize(path: Path, what: str) -> Path:
    """Absolute path of *path* with every symlink resolved, or ResolutionError."""
    try:
        return path.resolve(strict=True)
    except (OSError, RuntimeError) as exc:
        raise ResolutionError(f'Failed to canonicalize {what}: "{path}" ({exc})') from exc


class IncludePathResolver(PathResolverProtocol):
    """Resolver over two ordered lists of search directories."""

    def __init__(
        self,
        quote_dirs: Iterable[Path],
        system_dirs: Iterable[Path],
        *,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._log = logger or get_logger('resolve')
        self._quote_dirs: List[Path] = [canonicalize(Path(d), 'search path') for d in quote_dirs]
        self._system_dirs: List[Path] = [canonicalize(Path(d), 'search path') for d in system_dirs]
        self._log.debug('Quote search dirs: %s', [str(d) for d in self._quote_dirs])
        self._log.debug('System search dirs: %s', [str(d) for d in self._system_dirs])

    def search_dirs(self, kind: IncludeKind) -> Sequence[Path]:
        return tuple(self._quote_dirs if kind is IncludeKind.QUOTE else self._system_dirs)

    def _candidate_dirs(self, kind: IncludeKind, context_dir: Optional[Path]) -> Iterator[Path]:
        if kind is IncludeKind.QUOTE and context_dir is not None:
            yield canonicalize(context_dir, 'current directory')
        yield from self.search_dirs(kind)

    def resolve(self, reference: str, kind: IncludeKind, context_dir: Optional[Path] = None) -> Optional[Path]:
        """Return the canonical path *reference* names, or None when nothing matches."""
        printable = kind.wrap(reference)
        for include_dir in self._candidate_dirs(kind, context_dir):
            candidate = include_dir / reference
            self._log.debug('Trying to resolve %s to "%s"', printable, candidate)
            if candidate.is_file():
                resolved = canonicalize(candidate, 'path to include')
                self._log.debug('Resolved %s to "%s"', printable, resolved)
                return resolved
        self._log.debug('Failed to resolve %s', printable)
        return None


# Public default
DefaultPathResolver = IncludePathResolver
