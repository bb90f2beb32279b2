# amalgamate/parsing/parser.py
from __future__ import annotations

import argparse
from pathlib import Path
from typing import List, Optional, Sequence

from amalgamate.core.errors import GlobSyntaxError
from amalgamate.core.models import ErrorHandling, InvertibleGlob
from amalgamate.filtering.globs import compile_glob
from amalgamate.parsing.list_ops import merge_by_position

_ORDER_ATTR = "_option_order"


class OrderedAppend(argparse.Action):
    """``append`` that remembers where on the command line each value appeared.

    Values are stored as ``(position, value)`` pairs; the position counter is
    shared by every OrderedAppend option of one parse, so lists of different
    options can later be merged back into command-line order.
    """

    def __call__(self, parser, namespace, values, option_string=None):
        position = getattr(namespace, _ORDER_ATTR, 0)
        setattr(namespace, _ORDER_ATTR, position + 1)
        items = list(getattr(namespace, self.dest, None) or [])
        items.append((position, values))
        setattr(namespace, self.dest, items)


def _glob_type(raw: str) -> InvertibleGlob:
    glob = InvertibleGlob.parse(raw)
    try:
        compile_glob(glob.pattern)
    except GlobSyntaxError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from exc
    return glob


def _handling_type(raw: str) -> ErrorHandling:
    try:
        return ErrorHandling.parse(raw)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from exc


def _build_parser() -> argparse.ArgumentParser:
    """
    Build the CLI argument parser.

    Notes:
        - Search-directory and filter options are repeatable and are merged
          by their position on the command line (see OrderedAppend).
        - No default is set for the error-handling options so that an explicit
          per-kind value can be told apart from "not given".
    """
    from amalgamate import __version__

    p = argparse.ArgumentParser(
        prog="amalgamate",
        formatter_class=argparse.RawTextHelpFormatter,
        usage="%(prog)s [OPTIONS] FILE [FILE ...]",
        description=(
            "amalgamate – combine one or more C/C++ source files and recursively\n"
            "inline the headers they include. Every header is inlined at most once;\n"
            "which includes are inlined and which are left intact can be controlled\n"
            "with search directories and filters."
        ),
    )

    g_in = p.add_argument_group("Input & output")
    g_dir = p.add_argument_group("Search directories")
    g_flt = p.add_argument_group("Filtering")
    g_err = p.add_argument_group("Error handling")
    g_out = p.add_argument_group("Output decoration")
    g_log = p.add_argument_group("Logging")

    # -----------------------
    # Input & output
    # -----------------------
    g_in.add_argument(
        "files",
        metavar="FILE",
        nargs="+",
        type=Path,
        help=(
            "Source files to process, in order. Headers already inlined while\n"
            "processing an earlier file are skipped for later ones."
        ),
    )
    g_in.add_argument(
        "-o",
        "--output",
        metavar="FILE",
        type=Path,
        dest="output",
        help="Write the amalgamated result to FILE instead of stdout.",
    )

    # -----------------------
    # Search directories
    # -----------------------
    g_dir.add_argument(
        "-d",
        "--dir",
        metavar="DIR",
        type=Path,
        action=OrderedAppend,
        dest="dir",
        help="Add a search directory for both quote and system includes.",
    )
    g_dir.add_argument(
        "--dir-quote",
        metavar="DIR",
        type=Path,
        action=OrderedAppend,
        dest="dir_quote",
        help="Add a search directory for quote includes only.",
    )
    g_dir.add_argument(
        "--dir-system",
        metavar="DIR",
        type=Path,
        action=OrderedAppend,
        dest="dir_system",
        help="Add a search directory for system includes only.",
    )

    # -----------------------
    # Filtering
    # -----------------------
    g_flt.add_argument(
        "-f",
        "--filter",
        metavar="GLOB",
        type=_glob_type,
        action=OrderedAppend,
        dest="filter",
        help=(
            "Exclude headers matching GLOB from being inlined; their include lines\n"
            "are kept as they are. Prefix the glob with '!' to inline previously\n"
            "excluded headers again. Globs given to this option and to\n"
            "--filter-quote/--filter-system are evaluated in command-line order,\n"
            "the last matching glob wins. Globs are matched against the absolute\n"
            "path and use fnmatch syntax plus {a,b} alternation; '**' must be a\n"
            "whole path component."
        ),
    )
    g_flt.add_argument(
        "--filter-quote",
        metavar="GLOB",
        type=_glob_type,
        action=OrderedAppend,
        dest="filter_quote",
        help="Like --filter, but only for quote includes.",
    )
    g_flt.add_argument(
        "--filter-system",
        metavar="GLOB",
        type=_glob_type,
        action=OrderedAppend,
        dest="filter_system",
        help="Like --filter, but only for system includes.",
    )

    # -----------------------
    # Error handling
    # -----------------------
    handling_names = ", ".join(ErrorHandling.names())
    g_err.add_argument(
        "--unresolvable-include",
        metavar="HANDLING",
        type=_handling_type,
        dest="unresolvable_include",
        help=(
            f"How to handle an include that cannot be resolved ({handling_names}).\n"
            "Defaults to ignore, which keeps the include line as it is. Cannot be\n"
            "combined with the quote/system specific variants."
        ),
    )
    g_err.add_argument(
        "--unresolvable-quote-include",
        metavar="HANDLING",
        type=_handling_type,
        dest="unresolvable_quote_include",
        help="Like --unresolvable-include, but only for quote includes.",
    )
    g_err.add_argument(
        "--unresolvable-system-include",
        metavar="HANDLING",
        type=_handling_type,
        dest="unresolvable_system_include",
        help="Like --unresolvable-include, but only for system includes.",
    )
    g_err.add_argument(
        "--cyclic-include",
        metavar="HANDLING",
        type=_handling_type,
        dest="cyclic_include",
        help=f"How to handle a cyclic include ({handling_names}). Defaults to error.",
    )

    # -----------------------
    # Output decoration
    # -----------------------
    g_out.add_argument(
        "--line-directives",
        action="store_true",
        dest="line_directives",
        help=(
            "Emit #line directives so compilers and debuggers can map lines of\n"
            "the result back to their original files."
        ),
    )
    g_out.add_argument(
        "--trim-blank-lines",
        action="store_true",
        dest="trim_blank_lines",
        help="Drop leading and trailing blank lines of every processed file.",
    )
    g_out.add_argument(
        "--comment-begin",
        metavar="TEMPLATE",
        dest="comment_begin",
        help=(
            "Line written before the content of every inlined header.\n"
            "Placeholders: {path} (relative to the working directory) and\n"
            "{abspath}. Use {{ and }} for literal braces."
        ),
    )
    g_out.add_argument(
        "--comment-end",
        metavar="TEMPLATE",
        dest="comment_end",
        help="Line written after the content of every inlined header.",
    )

    # -----------------------
    # Logging
    # -----------------------
    g_verb = g_log.add_mutually_exclusive_group()
    g_verb.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        dest="verbose",
        help="Increase verbosity (-v info, -vv debug).",
    )
    g_verb.add_argument(
        "-q",
        "--quiet",
        action="count",
        default=0,
        dest="quiet",
        help="Report only errors (-q) or nothing at all (-qq).",
    )
    g_log.add_argument(
        "--json-logs",
        action="store_true",
        dest="json_logs",
        help="Emit log records as JSON lines.",
    )
    g_log.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    return p


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """Parse *argv* and reject option combinations argparse cannot express."""
    parser = _build_parser()
    # Roots may be given before, between and after options.
    ns = parser.parse_intermixed_args(argv)
    if ns.unresolvable_include is not None and (
        ns.unresolvable_quote_include is not None or ns.unresolvable_system_include is not None
    ):
        parser.error(
            "--unresolvable-include cannot be combined with "
            "--unresolvable-quote-include/--unresolvable-system-include"
        )
    return ns


def quote_search_dirs(ns: argparse.Namespace) -> List[Path]:
    """Shared and quote-only search directories in command-line order."""
    return merge_by_position(ns.dir or [], ns.dir_quote or [])


def system_search_dirs(ns: argparse.Namespace) -> List[Path]:
    """Shared and system-only search directories in command-line order."""
    return merge_by_position(ns.dir or [], ns.dir_system or [])


def quote_filter_globs(ns: argparse.Namespace) -> List[InvertibleGlob]:
    return merge_by_position(ns.filter or [], ns.filter_quote or [])


def system_filter_globs(ns: argparse.Namespace) -> List[InvertibleGlob]:
    return merge_by_position(ns.filter or [], ns.filter_system or [])

