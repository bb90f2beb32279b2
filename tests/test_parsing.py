"""Unit tests for the directive grammar and the command-line layer."""
from __future__ import annotations

import io
import logging
import unittest
from pathlib import Path
from unittest.mock import patch

from amalgamate.core.models import ErrorHandling, ErrorPolicies, IncludeKind, IncludeReference, InvertibleGlob
from amalgamate.logging.helpers import SILENT, level_from_verbosity
from amalgamate.parsing.directives import is_blank, is_pragma_once, parse_include
from amalgamate.parsing.list_ops import merge_by_position
from amalgamate.parsing.parser import (
    parse_args,
    quote_filter_globs,
    quote_search_dirs,
    system_filter_globs,
    system_search_dirs,
)


class DirectiveGrammarTests(unittest.TestCase):
    def test_include_forms(self) -> None:
        cases = {
            '#include "a.h"\n': IncludeReference("a.h", IncludeKind.QUOTE),
            "#include <a/b.h>\n": IncludeReference("a/b.h", IncludeKind.SYSTEM),
            "  #  include<x.h>  \r\n": IncludeReference("x.h", IncludeKind.SYSTEM),
            '#include""': IncludeReference("", IncludeKind.QUOTE),
            '#include "has space.h"': IncludeReference("has space.h", IncludeKind.QUOTE),
        }
        for line, expected in cases.items():
            with self.subTest(line=line):
                self.assertEqual(parse_include(line), expected)

    def test_non_references(self) -> None:
        for line in (
            "#include MACRO\n",
            '#include "a.h>\n',
            "#include <a.h\"\n",
            '#include "a.h" // trailing comment\n',
            "#include_next <a.h>\n",
            '// #include "a.h"\n',
            "int x;\n",
        ):
            with self.subTest(line=line):
                self.assertIsNone(parse_include(line))

    def test_pragma_once(self) -> None:
        self.assertTrue(is_pragma_once("#pragma once\n"))
        self.assertTrue(is_pragma_once("  #\tpragma \t once \r\n"))
        self.assertFalse(is_pragma_once("#pragma onceish\n"))
        self.assertFalse(is_pragma_once("#pragmaonce\n"))
        self.assertFalse(is_pragma_once("#pragma pack(1)\n"))

    def test_blank(self) -> None:
        self.assertTrue(is_blank("\n"))
        self.assertTrue(is_blank(" \t\r\n"))
        self.assertTrue(is_blank(""))
        self.assertFalse(is_blank(" x\n"))

    def test_reference_rendering(self) -> None:
        self.assertEqual(str(IncludeReference("a.h", IncludeKind.QUOTE)), '"a.h"')
        self.assertEqual(str(IncludeReference("a.h", IncludeKind.SYSTEM)), "<a.h>")


class ListOpsTests(unittest.TestCase):
    def test_merge_by_position(self) -> None:
        self.assertEqual(merge_by_position([(0, "a"), (4, "c")], [(2, "b")]), ["a", "b", "c"])
        self.assertEqual(merge_by_position([], [(1, "x")]), ["x"])
        self.assertEqual(merge_by_position(), [])


class ParseArgsTests(unittest.TestCase):
    def test_directories_keep_command_line_order(self) -> None:
        ns = parse_args(
            ["f.c", "--dir-quote", "q1", "-d", "s", "--dir-system", "y", "--dir-quote", "q2", "--dir", "t"]
        )
        self.assertEqual(quote_search_dirs(ns), [Path("q1"), Path("s"), Path("q2"), Path("t")])
        self.assertEqual(system_search_dirs(ns), [Path("s"), Path("y"), Path("t")])

    def test_filters_keep_command_line_order(self) -> None:
        ns = parse_args(["f.c", "--filter-system", "!a", "-f", "b", "--filter-quote", "c", "-f", "!d"])
        self.assertEqual(
            quote_filter_globs(ns),
            [InvertibleGlob("b"), InvertibleGlob("c"), InvertibleGlob("d", True)],
        )
        self.assertEqual(
            system_filter_globs(ns),
            [InvertibleGlob("a", True), InvertibleGlob("b"), InvertibleGlob("d", True)],
        )

    def test_source_files_may_surround_options(self) -> None:
        ns = parse_args(["a.c", "-d", "inc", "b.c", "--line-directives", "c.c"])
        self.assertEqual(ns.files, [Path("a.c"), Path("b.c"), Path("c.c")])
        self.assertTrue(ns.line_directives)

    def test_defaults(self) -> None:
        ns = parse_args(["a.c"])
        self.assertIsNone(ns.output)
        self.assertEqual(quote_search_dirs(ns), [])
        self.assertEqual(system_filter_globs(ns), [])
        self.assertFalse(ns.trim_blank_lines)
        self.assertIsNone(ns.comment_begin)
        self.assertEqual((ns.verbose, ns.quiet), (0, 0))

    def test_rejected_command_lines(self) -> None:
        for argv in (
            [],
            ["a.c", "--cyclic-include", "loud"],
            ["a.c", "-f", ""],
            ["a.c", "-f", "**/[abc"],
            ["a.c", "--filter-quote", "!**/{a,b"],
            ["a.c", "--filter-system", "src**"],
            ["a.c", "-v", "-q"],
            ["a.c", "--unresolvable-include", "warn", "--unresolvable-system-include", "ignore"],
        ):
            with self.subTest(argv=argv):
                with self.assertRaises(SystemExit) as ctx, patch("sys.stderr", new_callable=io.StringIO):
                    parse_args(argv)
                self.assertEqual(ctx.exception.code, 2)

    def test_handling_values_are_case_insensitive(self) -> None:
        ns = parse_args(["a.c", "--cyclic-include", "WARN", "--unresolvable-quote-include", "Error"])
        self.assertIs(ns.cyclic_include, ErrorHandling.WARN)
        self.assertIs(ns.unresolvable_quote_include, ErrorHandling.ERROR)


class ErrorPoliciesTests(unittest.TestCase):
    def test_defaults(self) -> None:
        policies = ErrorPolicies.from_options()
        self.assertIs(policies.for_unresolvable(IncludeKind.QUOTE), ErrorHandling.IGNORE)
        self.assertIs(policies.for_unresolvable(IncludeKind.SYSTEM), ErrorHandling.IGNORE)
        self.assertIs(policies.cyclic, ErrorHandling.ERROR)

    def test_combined_option_applies_to_both_kinds(self) -> None:
        policies = ErrorPolicies.from_options(unresolvable=ErrorHandling.WARN)
        self.assertIs(policies.unresolvable_quote, ErrorHandling.WARN)
        self.assertIs(policies.unresolvable_system, ErrorHandling.WARN)

    def test_per_kind_options(self) -> None:
        policies = ErrorPolicies.from_options(unresolvable_system=ErrorHandling.ERROR)
        self.assertIs(policies.for_unresolvable(IncludeKind.QUOTE), ErrorHandling.IGNORE)
        self.assertIs(policies.for_unresolvable(IncludeKind.SYSTEM), ErrorHandling.ERROR)

    def test_parse_rejects_unknown_names(self) -> None:
        self.assertIs(ErrorHandling.parse(" Ignore "), ErrorHandling.IGNORE)
        with self.assertRaises(ValueError):
            ErrorHandling.parse("fatal")


class VerbosityTests(unittest.TestCase):
    def test_levels(self) -> None:
        self.assertEqual(level_from_verbosity(0, 0), logging.WARNING)
        self.assertEqual(level_from_verbosity(1, 0), logging.INFO)
        self.assertEqual(level_from_verbosity(3, 0), logging.DEBUG)
        self.assertEqual(level_from_verbosity(0, 1), logging.ERROR)
        self.assertEqual(level_from_verbosity(0, 2), SILENT)


if __name__ == "__main__":
    unittest.main()
