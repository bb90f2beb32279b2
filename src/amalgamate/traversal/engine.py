"""
Depth-first inlining of include graphs.

The graph is discovered while reading: every include line that resolves and
passes the inclusion filter opens the referenced file, whose lines are then
written in place of the include line. Each canonical file identity goes
through ``unseen → in stack → done`` exactly once per engine, so a header is
inlined at most once even across several root files, and meeting a file that
is still in stack means an include cycle. When a root fails, the files it
left open are forgotten, so a later root starts them afresh.

Open files live on an explicit frame stack instead of the Python call stack.
Only the innermost file is kept open: a file is closed with its read offset
saved when a header it includes is entered, and reopened at that offset once
the header is done, so include depth is limited only by memory.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, List, Optional, TextIO, Tuple

from amalgamate.constants import DEFAULT_ENCODING
from amalgamate.core.errors import (
    CyclicIncludeError,
    SourceReadError,
    UnresolvableIncludeError,
)
from amalgamate.core.interfaces.filter import InclusionPolicyProtocol
from amalgamate.core.interfaces.fs import PathResolverProtocol
from amalgamate.core.interfaces.render import (
    AnnotatorProtocol,
    LineMapperProtocol,
    OutputSinkProtocol,
)
from amalgamate.core.models import (
    ErrorPolicies,
    FileRecord,
    FileState,
    IncludeReference,
)
from amalgamate.logging.helpers import debug_file_name, get_logger
from amalgamate.parsing.directives import is_blank, is_pragma_once, parse_include
from amalgamate.resolving.path_resolver import canonicalize
from amalgamate.runtime.policies import handle


@dataclass
class _Frame:
    """An open file being read, plus its pending output state."""

    index: int
    reader: Optional[TextIO]
    context_dir: Path
    nested: bool
    # Blank lines held back while trimming: (line number, text).
    pending_blanks: List[Tuple[int, str]] = field(default_factory=list)
    # Something of this file (or of a header it inlined) reached the output.
    emitted: bool = False
    # Read offset of a suspended frame (opaque text-mode cookie).
    offset: int = 0


class TraversalEngine:
    """Streams the amalgamation of one or more root files into a sink."""

    def __init__(
        self,
        *,
        sink: OutputSinkProtocol,
        resolver: PathResolverProtocol,
        inclusion_policy: InclusionPolicyProtocol,
        policies: Optional[ErrorPolicies] = None,
        line_mapper: Optional[LineMapperProtocol] = None,
        annotator: Optional[AnnotatorProtocol] = None,
        trim_blank_lines: bool = False,
        encoding: str = DEFAULT_ENCODING,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._sink = sink
        self._resolver = resolver
        self._filter = inclusion_policy
        self._policies = policies or ErrorPolicies()
        self._line_mapper = line_mapper
        self._annotator = annotator
        self._trim = trim_blank_lines
        self._encoding = encoding
        self._log = logger or get_logger('engine')

        self._files: List[FileRecord] = []
        self._known: Dict[Path, int] = {}
        self._tail: Optional[int] = None
        self._stack: List[_Frame] = []

    # -------- Introspection --------

    @property
    def records(self) -> Tuple[FileRecord, ...]:
        return tuple(self._files)

    def record_for(self, identity: Path) -> Optional[FileRecord]:
        idx = self._known.get(identity)
        return None if idx is None else self._files[idx]

    # -------- Public entry points --------

    def process(self, source_file: Path) -> None:
        """Amalgamate *source_file* into the sink.

        Files already inlined by an earlier call are skipped, including
        *source_file* itself.
        """
        self._log.info('Processing source file %r', debug_file_name(source_file))
        identity = canonicalize(Path(source_file), 'source file path')
        if identity.is_dir():
            raise SourceReadError(f'Source file "{source_file}" is a directory')

        assert self._tail is None and not self._stack, 'process() is not reentrant'
        if identity in self._known:
            self._log.debug('Skipping %r, already included', debug_file_name(identity))
            return

        try:
            self._enter(identity, nested=False)
            self._drain()
        finally:
            self._close_all()

    def process_all(self, source_files: Iterable[Path]) -> None:
        for source_file in source_files:
            self.process(source_file)
        self._sink.flush()

    # -------- Frame management --------

    def _open(self, identity: Path) -> TextIO:
        try:
            return open(identity, 'r', encoding=self._encoding, newline='')
        except OSError as exc:
            raise SourceReadError(f'Failed to open file "{identity}": {exc}') from exc

    def _enter(self, identity: Path, *, nested: bool) -> None:
        if self._stack:
            self._suspend(self._stack[-1])
        self._log.info('Processing new file %r', debug_file_name(identity))
        reader = self._open(identity)
        idx = len(self._files)
        self._files.append(FileRecord(identity=identity, parent=self._tail))
        self._known[identity] = idx
        self._tail = idx
        self._stack.append(_Frame(index=idx, reader=reader, context_dir=identity.parent, nested=nested))

    def _suspend(self, frame: _Frame) -> None:
        if frame.reader is None:
            return
        identity = self._files[frame.index].identity
        try:
            frame.offset = frame.reader.tell()
        except OSError as exc:
            raise SourceReadError(f'Failed to read from "{identity}": {exc}') from exc
        finally:
            frame.reader.close()
            frame.reader = None

    def _resume(self, frame: _Frame) -> TextIO:
        identity = self._files[frame.index].identity
        reader = self._open(identity)
        try:
            reader.seek(frame.offset)
        except OSError as exc:
            reader.close()
            raise SourceReadError(f'Failed to read from "{identity}": {exc}') from exc
        frame.reader = reader
        return reader

    def _leave(self) -> None:
        frame = self._stack.pop()
        if frame.reader is not None:
            frame.reader.close()
        record = self._files[frame.index]
        if frame.pending_blanks:
            self._log.debug('Dropping %d trailing blank line(s) of %r',
                            len(frame.pending_blanks), debug_file_name(record.identity))
        if frame.nested and frame.emitted and self._annotator is not None:
            self._annotator.end(record.identity)
        record.state = FileState.DONE
        self._tail = record.parent

    def _close_all(self) -> None:
        """Unwind after a failed root; files left unfinished are forgotten."""
        while self._stack:
            frame = self._stack.pop()
            if frame.reader is not None:
                frame.reader.close()
            identity = self._files[frame.index].identity
            if self._known.get(identity) == frame.index:
                del self._known[identity]
                self._log.debug('Forgetting unfinished file %r', debug_file_name(identity))
        self._tail = None

    def _read_line(self, frame: _Frame) -> str:
        reader = frame.reader if frame.reader is not None else self._resume(frame)
        try:
            return reader.readline()
        except (OSError, UnicodeDecodeError) as exc:
            identity = self._files[frame.index].identity
            raise SourceReadError(f'Failed to read from "{identity}": {exc}') from exc

    def _drain(self) -> None:
        while self._stack:
            frame = self._stack[-1]
            line = self._read_line(frame)
            if not line:
                self._leave()
                continue
            record = self._files[frame.index]
            record.line_counter += 1
            self._handle_line(frame, record.line_counter, line)

    # -------- Line handling --------

    def _handle_line(self, frame: _Frame, line_number: int, line: str) -> None:
        if is_blank(line):
            if self._trim:
                frame.pending_blanks.append((line_number, line))
            else:
                self._emit(frame, line_number, line)
            return

        if is_pragma_once(line):
            self._log.debug('Skipping pragma once')
            return

        reference = parse_include(line)
        if reference is None:
            self._emit(frame, line_number, line)
            return

        if not self._include(frame, reference):
            self._emit(frame, line_number, line)

    def _include(self, frame: _Frame, reference: IncludeReference) -> bool:
        """Act on an include line; False means the line is kept verbatim."""
        current = self._files[frame.index].identity
        resolved = self._resolver.resolve(reference.raw, reference.kind, frame.context_dir)
        if resolved is None:
            handle(
                self._policies.for_unresolvable(reference.kind),
                UnresolvableIncludeError(reference.raw, reference.kind, current),
                self._log,
            )
            return False

        if not self._filter.should_inline(resolved, reference.kind):
            return False

        idx = self._known.get(resolved)
        if idx is None:
            self._enter(resolved, nested=True)
            return True

        if self._files[idx].state is FileState.DONE:
            self._log.debug('Skipping %r, already included', debug_file_name(resolved))
            return True

        handle(self._policies.cyclic, CyclicIncludeError(self._cycle_to(idx)), self._log)
        return False

    def _cycle_to(self, idx: int) -> List[Path]:
        """Identities from the current file back to the repeated one, inclusive."""
        assert self._tail is not None, 'cannot get include cycles without an open file'
        cursor = self._tail
        cycle = [self._files[cursor].identity]
        while cursor != idx:
            parent = self._files[cursor].parent
            assert parent is not None, 'in-stack file missing from the ancestor chain'
            cursor = parent
            cycle.append(self._files[cursor].identity)
        return cycle

    # -------- Output --------

    def _emit(self, frame: _Frame, line_number: int, line: str) -> None:
        """Write one literal line of *frame*, settling every open ancestor first.

        Ancestors that have not produced output yet get their begin comment,
        and their held-back blank lines are either dropped (nothing of theirs
        was written before them) or written (they sit between two outputs).
        A frame that has emitted and holds no blanks implies the same for all
        frames below it, so only the unsettled top of the stack is visited.
        """
        start = len(self._stack)
        while start > 0 and not (self._stack[start - 1].emitted and not self._stack[start - 1].pending_blanks):
            start -= 1
        for open_frame in self._stack[start:]:
            identity = self._files[open_frame.index].identity
            if not open_frame.emitted and open_frame.nested and self._annotator is not None:
                self._annotator.begin(identity)
            if open_frame.pending_blanks:
                if open_frame.emitted:
                    for blank_number, blank in open_frame.pending_blanks:
                        self._write(identity, blank_number, blank)
                open_frame.pending_blanks.clear()
            open_frame.emitted = True
        self._write(self._files[frame.index].identity, line_number, line)

    def _write(self, identity: Path, line_number: int, text: str) -> None:
        if self._line_mapper is not None:
            self._line_mapper.before_line(identity, line_number)
        self._sink.write(text)
