from __future__ import annotations

"""Begin/end comment lines around the content of inlined headers.

Templates are rendered with ``{path}`` (path relative to the display root,
normally the working directory) and ``{abspath}`` (canonical path). Each
rendered template is written on a line of its own.
"""

import logging
import os
from pathlib import Path
from typing import Dict, Optional

from amalgamate.core.interfaces.render import AnnotatorProtocol, OutputSinkProtocol
from amalgamate.core.interfaces.templating import TemplateEngineProtocol
from amalgamate.logging.helpers import get_logger
from amalgamate.rendering.template_engine import SingleBraceTemplateEngine


class CommentAnnotator(AnnotatorProtocol):
    def __init__(
        self,
        sink: OutputSinkProtocol,
        *,
        begin_template: Optional[str] = None,
        end_template: Optional[str] = None,
        template_engine: Optional[TemplateEngineProtocol] = None,
        display_root: Optional[Path] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._sink = sink
        self._begin = begin_template
        self._end = end_template
        self._log = logger or get_logger('annotate')
        self._engine = template_engine or SingleBraceTemplateEngine(logger=self._log)
        self._root = display_root or Path.cwd()

    @property
    def enabled(self) -> bool:
        return self._begin is not None or self._end is not None

    def variables(self, identity: Path) -> Dict[str, str]:
        try:
            rel = os.path.relpath(identity, self._root)
        except ValueError:
            # Different drive on Windows.
            rel = str(identity)
        return {'path': Path(rel).as_posix(), 'abspath': str(identity)}

    def _emit(self, template: Optional[str], identity: Path) -> None:
        if template is None:
            return
        text = self._engine.render(template, self.variables(identity))
        if not text.endswith('\n'):
            text += '\n'
        self._sink.ensure_line_start()
        self._sink.write(text)

    def begin(self, identity: Path) -> None:
        self._emit(self._begin, identity)

    def end(self, identity: Path) -> None:
        self._emit(self._end, identity)
