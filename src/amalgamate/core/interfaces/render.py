from __future__ import annotations

from pathlib import Path
from typing import Protocol, runtime_checkable


@runtime_checkable
class OutputSinkProtocol(Protocol):
    """Forward-only text writer the engine streams into."""

    def write(self, text: str) -> None:
        ...

    def ensure_line_start(self) -> None:
        ...

    def flush(self) -> None:
        ...


@runtime_checkable
class LineMapperProtocol(Protocol):
    def before_line(self, identity: Path, line_number: int) -> None:
        ...


@runtime_checkable
class AnnotatorProtocol(Protocol):
    def begin(self, identity: Path) -> None:
        ...

    def end(self, identity: Path) -> None:
        ...
