from __future__ import annotations

from typing import TextIO

from amalgamate.core.errors import OutputWriteError
from amalgamate.core.interfaces.render import OutputSinkProtocol


class TextSink(OutputSinkProtocol):
    """Forward-only writer that remembers whether it sits at a line start."""

    def __init__(self, stream: TextIO) -> None:
        self._stream = stream
        self._at_line_start = True

    @property
    def at_line_start(self) -> bool:
        return self._at_line_start

    def write(self, text: str) -> None:
        if not text:
            return
        try:
            self._stream.write(text)
        except BrokenPipeError:
            raise
        except OSError as exc:
            raise OutputWriteError(f'Failed writing to output: {exc}') from exc
        self._at_line_start = text.endswith('\n')

    def ensure_line_start(self) -> None:
        """Terminate a dangling last line so the next write starts a new one."""
        if not self._at_line_start:
            self.write('\n')

    def flush(self) -> None:
        try:
            self._stream.flush()
        except BrokenPipeError:
            raise
        except OSError as exc:
            raise OutputWriteError(f'Failed flushing output: {exc}') from exc
