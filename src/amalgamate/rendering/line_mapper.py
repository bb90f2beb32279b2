from __future__ import annotations

from pathlib import Path
from typing import Optional, Tuple

from amalgamate.core.interfaces.render import LineMapperProtocol, OutputSinkProtocol

LINE_DIRECTIVE = '#line {line} "{path}"\n'


class LineMapper(LineMapperProtocol):
    """Emits ``#line`` directives whenever output stops following its source.

    The mapper remembers which (file, line) the next literal line would have
    to come from for the output to stay in sync. Any other position, such as
    the first line of a freshly entered file or the line after an inlined
    header, gets a directive first.
    """

    def __init__(self, sink: OutputSinkProtocol) -> None:
        self._sink = sink
        self._expected: Optional[Tuple[Path, int]] = None

    def before_line(self, identity: Path, line_number: int) -> None:
        if self._expected != (identity, line_number):
            self._sink.ensure_line_start()
            self._sink.write(LINE_DIRECTIVE.format(line=line_number, path=identity))
        self._expected = (identity, line_number + 1)
