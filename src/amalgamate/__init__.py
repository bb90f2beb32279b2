from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, Optional

__version__ = '0.3.0'

from amalgamate.cli import Amalgamate, main
from amalgamate.core.errors import (
    AmalgamateError,
    CyclicIncludeError,
    GlobSyntaxError,
    ResolutionError,
    SourceReadError,
    UnresolvableIncludeError,
)
from amalgamate.core.models import ErrorHandling, ErrorPolicies, IncludeKind, InvertibleGlob
from amalgamate.filtering.inclusion_policy import InclusionFilter
from amalgamate.resolving.path_resolver import DefaultPathResolver, IncludePathResolver
from amalgamate.runtime.container import EngineBuilder, EngineConfig
from amalgamate.traversal.engine import TraversalEngine
from amalgamate.logging.helpers import get_logger


def path_resolver_factory(
    *,
    dirs: Iterable[str | Path] = (),
    quote_dirs: Iterable[str | Path] = (),
    system_dirs: Iterable[str | Path] = (),
    logger: Optional[logging.Logger] = None,
) -> IncludePathResolver:
    """Factory helper that returns an IncludePathResolver.

    Shared *dirs* come before the kind-specific ones.
    """
    shared = [Path(d) for d in dirs]
    return IncludePathResolver(
        shared + [Path(d) for d in quote_dirs],
        shared + [Path(d) for d in system_dirs],
        logger=logger or get_logger('resolve'),
    )


__all__ = [
    'Amalgamate',
    'main',
    'AmalgamateError',
    'CyclicIncludeError',
    'GlobSyntaxError',
    'ResolutionError',
    'SourceReadError',
    'UnresolvableIncludeError',
    'ErrorHandling',
    'ErrorPolicies',
    'IncludeKind',
    'InvertibleGlob',
    'InclusionFilter',
    'DefaultPathResolver',
    'IncludePathResolver',
    'EngineBuilder',
    'EngineConfig',
    'TraversalEngine',
    'path_resolver_factory',
]
