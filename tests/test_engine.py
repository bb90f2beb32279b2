"""Unit tests for TraversalEngine, built straight from an EngineConfig."""
from __future__ import annotations

import io
import logging
import tempfile
import unittest
from pathlib import Path
from typing import Optional

from _support import run_engine, write

from amalgamate.core.errors import CyclicIncludeError, SourceReadError, UnresolvableIncludeError
from amalgamate.core.models import ErrorHandling, ErrorPolicies, FileState, IncludeKind
from amalgamate.runtime.container import EngineBuilder, EngineConfig

LOGGER = logging.getLogger("amalgamate.tests")


class EngineTestCase(unittest.TestCase):
    def setUp(self) -> None:
        tmp = tempfile.TemporaryDirectory()
        self.addCleanup(tmp.cleanup)
        self.root = Path(tmp.name).resolve()

    def file(self, name: str, content: str) -> Path:
        return write(self.root / name, content)


class TrimBlankLinesTests(EngineTestCase):
    def test_leading_and_trailing_blanks_are_dropped(self) -> None:
        main = self.file("main.c", "\n\nx\n\n\ny\n\n")
        self.assertEqual(run_engine([main], trim_blank_lines=True), "x\n\n\ny\n")

    def test_inlined_content_counts_as_output(self) -> None:
        main = self.file("main.c", '#include "a.h"\n\nmain\n')
        self.file("a.h", "A\n")
        self.assertEqual(run_engine([main], trim_blank_lines=True), "A\n\nmain\n")

    def test_header_with_only_pragma_and_blanks_leaves_nothing(self) -> None:
        main = self.file("main.c", 'x\n#include "a.h"\n\n')
        self.file("a.h", "#pragma once\n\n\n")
        self.assertEqual(run_engine([main], trim_blank_lines=True), "x\n")

    def test_whitespace_only_lines_are_blank(self) -> None:
        main = self.file("main.c", " \t\nx\n\t\n")
        self.assertEqual(run_engine([main], trim_blank_lines=True), "x\n")

    def test_kept_blanks_keep_line_numbers(self) -> None:
        main = self.file("main.c", "\n\nx\n\n\ny\n\n")
        expected = f'#line 3 "{main}"\nx\n\n\ny\n'
        self.assertEqual(run_engine([main], trim_blank_lines=True, line_directives=True), expected)


class AnnotationTests(EngineTestCase):
    def run_annotated(self, *roots: Path, **kwargs) -> str:
        return run_engine(
            roots,
            comment_begin="// begin {path}",
            comment_end="// end {path}",
            display_root=self.root,
            **kwargs,
        )

    def test_nested_headers_are_wrapped(self) -> None:
        main = self.file("main.c", '#include "a.h"\n')
        self.file("a.h", 'A1\n#include "b.h"\nA2\n')
        self.file("b.h", "B\n")
        expected = "// begin a.h\nA1\n// begin b.h\nB\n// end b.h\nA2\n// end a.h\n"
        self.assertEqual(self.run_annotated(main), expected)

    def test_root_files_are_not_wrapped(self) -> None:
        main = self.file("main.c", "main\n")
        self.assertEqual(self.run_annotated(main), "main\n")

    def test_empty_header_gets_no_comments(self) -> None:
        main = self.file("main.c", '#include "a.h"\nmain\n')
        self.file("a.h", "")
        self.assertEqual(self.run_annotated(main), "main\n")

    def test_header_reduced_to_nothing_gets_no_comments(self) -> None:
        main = self.file("main.c", '#include "b.h"\n#include "a.h"\n')
        self.file("a.h", '#pragma once\n#include "b.h"\n')
        self.file("b.h", "B\n")
        self.assertEqual(self.run_annotated(main), "// begin b.h\nB\n// end b.h\n")

    def test_comment_after_header_without_trailing_newline(self) -> None:
        main = self.file("main.c", '#include "a.h"\n')
        self.file("a.h", "A")
        self.assertEqual(self.run_annotated(main), "// begin a.h\nA\n// end a.h\n")

    def test_abspath_and_escaped_braces(self) -> None:
        main = self.file("main.c", '#include "sub/a.h"\n')
        a_h = self.file("sub/a.h", "A\n")
        out = run_engine([main], comment_begin="/* {{{abspath}}} */", display_root=self.root)
        self.assertEqual(out, f"/* {{{a_h}}} */\nA\n")


class TraversalTests(EngineTestCase):
    def build(self, out: io.StringIO, **kwargs):
        return EngineBuilder.from_config(EngineConfig(logger=LOGGER, **kwargs)).build(out)

    def test_records_track_parents_and_finish_done(self) -> None:
        main = self.file("main.c", '#include "a.h"\n#include "c.h"\n')
        self.file("a.h", '#include "b.h"\n')
        self.file("b.h", "B\n")
        self.file("c.h", "C\n")
        engine = self.build(io.StringIO())
        engine.process(main)

        names = [r.identity.name for r in engine.records]
        self.assertEqual(names, ["main.c", "a.h", "b.h", "c.h"])
        parents = [r.parent for r in engine.records]
        self.assertEqual(parents, [None, 0, 1, 0])
        self.assertTrue(all(r.state is FileState.DONE for r in engine.records))
        self.assertEqual(engine.record_for(self.root / "b.h").line_counter, 1)
        self.assertIsNone(engine.record_for(self.root / "missing.h"))

    def test_cycle_lists_files_from_current_back_to_repeated(self) -> None:
        main = self.file("main.c", '#include "a.h"\n')
        self.file("a.h", '#include "b.h"\n')
        self.file("b.h", '#include "c.h"\n')
        self.file("c.h", '#include "a.h"\n')
        with self.assertRaises(CyclicIncludeError) as ctx:
            run_engine([main])
        self.assertEqual([p.name for p in ctx.exception.cycle], ["c.h", "b.h", "a.h"])

    def test_cycle_warn_keeps_line_and_continues(self) -> None:
        main = self.file("main.c", '#include "a.h"\nend\n')
        self.file("a.h", 'A\n#include "main.c"\n')
        policies = ErrorPolicies(cyclic=ErrorHandling.WARN)
        with self.assertLogs("amalgamate.tests", level="WARNING") as logs:
            out = run_engine([main], policies=policies)
        self.assertEqual(out, 'A\n#include "main.c"\nend\n')
        self.assertIn("cyclic include detected", logs.output[0])

    def test_engine_can_be_reused_after_a_failure(self) -> None:
        bad = self.file("bad.c", '#include "bad.c"\n')
        good = self.file("good.c", "good\n")
        out = io.StringIO()
        engine = self.build(out)
        with self.assertRaises(CyclicIncludeError):
            engine.process(bad)
        engine.process(good)
        self.assertEqual(out.getvalue(), "good\n")

    def test_files_open_during_a_failure_are_inlined_by_later_roots(self) -> None:
        bad = self.file("bad.c", '#include "common.h"\n')
        good = self.file("good.c", '#include "common.h"\ngood\n')
        common = self.file("common.h", "C\n#include <missing.h>\n")
        out = io.StringIO()
        engine = self.build(
            out,
            system_dirs=(self.root,),
            policies=ErrorPolicies(unresolvable_system=ErrorHandling.ERROR),
        )
        with self.assertRaises(UnresolvableIncludeError):
            engine.process(bad)
        self.assertIsNone(engine.record_for(common))

        self.file("missing.h", "M\n")
        engine.process(good)
        self.assertEqual(out.getvalue(), "C\nC\nM\ngood\n")
        self.assertIs(engine.record_for(common).state, FileState.DONE)
        self.assertIsNone(engine.record_for(bad))

    def test_headers_are_shared_across_roots(self) -> None:
        one = self.file("one.c", '#include "common.h"\n1\n')
        two = self.file("two.c", '#include "common.h"\n2\n')
        self.file("common.h", "C\n")
        self.assertEqual(run_engine([one, two, one]), "C\n1\n2\n")

    def test_process_all_flushes_output(self) -> None:
        class CountingStream(io.StringIO):
            flushes = 0

            def flush(self) -> None:
                self.flushes += 1
                super().flush()

        out = CountingStream()
        self.build(out).process_all([self.file("main.c", "x\n")])
        self.assertEqual(out.flushes, 1)
        self.assertEqual(out.getvalue(), "x\n")

    def test_undecodable_file_fails(self) -> None:
        main = self.root / "main.c"
        main.write_bytes(b"ok\n\xff\xfe broken\n")
        with self.assertRaises(SourceReadError):
            run_engine([main])

    def test_crlf_line_endings_pass_through(self) -> None:
        main = self.file("main.c", 'a\r\n#include "h.h"\r\nb\r\n')
        self.file("h.h", "#pragma once\r\nH\r\n")
        self.assertEqual(run_engine([main]), "a\r\nH\r\nb\r\n")

    def test_missing_final_newline_is_preserved(self) -> None:
        main = self.file("main.c", 'x\n#include "a.h"\ny\n')
        self.file("a.h", "A")
        self.assertEqual(run_engine([main]), "x\nAy\n")

    def test_line_directive_starts_on_fresh_line(self) -> None:
        main = self.file("main.c", 'x\n#include "a.h"\ny\n')
        a_h = self.file("a.h", "A")
        expected = f'#line 1 "{main}"\nx\n#line 1 "{a_h}"\nA\n#line 3 "{main}"\ny\n'
        self.assertEqual(run_engine([main], line_directives=True), expected)

    def test_deep_include_chain(self) -> None:
        depth = 1200
        for i in range(depth):
            self.file(f"h{i}.h", f'L{i}\n#include "h{i + 1}.h"\n')
        self.file(f"h{depth}.h", "end\n")
        expected = "".join(f"L{i}\n" for i in range(depth)) + "end\n"
        self.assertEqual(run_engine([self.root / "h0.h"]), expected)

    def test_injected_collaborators_are_used(self) -> None:
        class NeverInline:
            def should_inline(self, path: Path, kind: IncludeKind) -> bool:
                return False

        class FixedResolver:
            def __init__(self, target: Path) -> None:
                self.target = target
                self.calls = []

            def resolve(self, reference: str, kind: IncludeKind, context_dir: Optional[Path] = None):
                self.calls.append((reference, kind, context_dir))
                return self.target

            def search_dirs(self, kind: IncludeKind):
                return ()

        main = self.file("main.c", "#include <anything>\n")
        target = self.file("target.h", "T\n")
        resolver = FixedResolver(target)
        self.assertEqual(run_engine([main], resolver=resolver), "T\n")
        self.assertEqual(resolver.calls, [("anything", IncludeKind.SYSTEM, self.root)])

        out = run_engine([main], resolver=FixedResolver(target), inclusion_policy=NeverInline())
        self.assertEqual(out, "#include <anything>\n")


if __name__ == "__main__":
    unittest.main()
