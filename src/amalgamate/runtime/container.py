from __future__ import annotations
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Sequence, TextIO

from amalgamate.constants import DEFAULT_ENCODING
from amalgamate.core.interfaces.filter import InclusionPolicyProtocol
from amalgamate.core.interfaces.fs import PathResolverProtocol
from amalgamate.core.interfaces.templating import TemplateEngineProtocol
from amalgamate.core.models import ErrorPolicies, InvertibleGlob
from amalgamate.filtering.inclusion_policy import InclusionFilter
from amalgamate.io.sink import TextSink
from amalgamate.rendering.annotator import CommentAnnotator
from amalgamate.rendering.line_mapper import LineMapper
from amalgamate.resolving.path_resolver import IncludePathResolver
from amalgamate.traversal.engine import TraversalEngine


@dataclass(frozen=True)
class EngineConfig:
    """Immutable configuration blob used to seed the EngineBuilder."""
    logger: logging.Logger
    quote_dirs: Sequence[Path] = ()
    system_dirs: Sequence[Path] = ()
    quote_globs: Sequence[InvertibleGlob] = ()
    system_globs: Sequence[InvertibleGlob] = ()
    policies: ErrorPolicies = field(default_factory=ErrorPolicies)
    line_directives: bool = False
    trim_blank_lines: bool = False
    comment_begin: Optional[str] = None
    comment_end: Optional[str] = None
    display_root: Optional[Path] = None
    encoding: str = DEFAULT_ENCODING

    # Optional overrides (DI hooks for library callers and tests)
    resolver: Optional[PathResolverProtocol] = None
    inclusion_policy: Optional[InclusionPolicyProtocol] = None
    template_engine: Optional[TemplateEngineProtocol] = None


@dataclass
class EngineBuilder:
    """Composable builder that wires the collaborators into a TraversalEngine."""
    config: EngineConfig

    @classmethod
    def from_config(cls, cfg: EngineConfig) -> 'EngineBuilder':
        return cls(config=cfg)

    def _child_logger(self, suffix: str) -> logging.Logger:
        return self.config.logger.getChild(suffix)

    def build_resolver(self) -> PathResolverProtocol:
        cfg = self.config
        if cfg.resolver is not None:
            return cfg.resolver
        return IncludePathResolver(cfg.quote_dirs, cfg.system_dirs, logger=self._child_logger('resolve'))

    def build_filter(self) -> InclusionPolicyProtocol:
        cfg = self.config
        if cfg.inclusion_policy is not None:
            return cfg.inclusion_policy
        return InclusionFilter(cfg.quote_globs, cfg.system_globs, logger=self._child_logger('filter'))

    def build(self, stream: TextIO) -> TraversalEngine:
        """Materialize a TraversalEngine streaming into *stream*.

        Search directories are canonicalized here, so a missing directory
        fails before any output is produced.
        """
        cfg = self.config
        sink = TextSink(stream)
        resolver = self.build_resolver()
        inclusion_policy = self.build_filter()

        line_mapper = LineMapper(sink) if cfg.line_directives else None
        annotator = None
        if cfg.comment_begin is not None or cfg.comment_end is not None:
            annotator = CommentAnnotator(
                sink,
                begin_template=cfg.comment_begin,
                end_template=cfg.comment_end,
                template_engine=cfg.template_engine,
                display_root=cfg.display_root,
                logger=self._child_logger('annotate'),
            )

        return TraversalEngine(
            sink=sink,
            resolver=resolver,
            inclusion_policy=inclusion_policy,
            policies=cfg.policies,
            line_mapper=line_mapper,
            annotator=annotator,
            trim_blank_lines=cfg.trim_blank_lines,
            encoding=cfg.encoding,
            logger=self._child_logger('engine'),
        )
