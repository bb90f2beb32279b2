from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Optional, TextIO

from amalgamate.core.models import ErrorPolicies
from amalgamate.parsing.parser import (
    quote_filter_globs,
    quote_search_dirs,
    system_filter_globs,
    system_search_dirs,
)
from amalgamate.runtime.container import EngineBuilder, EngineConfig
from amalgamate.traversal.engine import TraversalEngine


def build_engine_config(
    ns: argparse.Namespace,
    *,
    logger: logging.Logger,
    display_root: Optional[Path] = None,
) -> EngineConfig:
    """Translate a parsed command line into an EngineConfig."""
    policies = ErrorPolicies.from_options(
        unresolvable=ns.unresolvable_include,
        unresolvable_quote=ns.unresolvable_quote_include,
        unresolvable_system=ns.unresolvable_system_include,
        cyclic=ns.cyclic_include,
    )
    return EngineConfig(
        logger=logger,
        quote_dirs=tuple(quote_search_dirs(ns)),
        system_dirs=tuple(system_search_dirs(ns)),
        quote_globs=tuple(quote_filter_globs(ns)),
        system_globs=tuple(system_filter_globs(ns)),
        policies=policies,
        line_directives=bool(ns.line_directives),
        trim_blank_lines=bool(ns.trim_blank_lines),
        comment_begin=ns.comment_begin,
        comment_end=ns.comment_end,
        display_root=display_root,
    )


def build_engine(cfg: EngineConfig, stream: TextIO) -> TraversalEngine:
    return EngineBuilder.from_config(cfg).build(stream)
