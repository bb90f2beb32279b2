from __future__ import annotations

import argparse
import logging
import os
import sys
from contextlib import contextmanager
from typing import Iterator, NoReturn, Optional, Sequence, TextIO

from amalgamate.constants import DEFAULT_ENCODING, ENV_DEBUG, ENV_JSON_LOGS
from amalgamate.core.errors import AmalgamateError
from amalgamate.core.interfaces.logging import LoggerFactoryProtocol
from amalgamate.logging.factory import DefaultLoggerFactory
from amalgamate.logging.helpers import get_logger, level_from_verbosity
from amalgamate.parsing.parser import parse_args
from amalgamate.runtime.wiring import build_engine, build_engine_config


logger = get_logger('amalgamate')


def _configure_logging(
    *, json_logs: bool, level: int, factory: Optional[LoggerFactoryProtocol] = None
) -> logging.Logger:
    """Return the project logger, configuring process-wide logging unless *factory* is given."""
    factory = factory or DefaultLoggerFactory(json_logs=json_logs, level=level)
    return factory.get_logger('amalgamate')


@contextmanager
def _open_output(ns: argparse.Namespace, stdout: Optional[TextIO]) -> Iterator[TextIO]:
    """Yield the output stream: the --output file or stdout."""
    if ns.output is None:
        logger.info('Writing to terminal')
        yield stdout if stdout is not None else sys.stdout
        return

    logger.info('Writing to "%s"', ns.output)
    try:
        fh = open(ns.output, 'w', encoding=DEFAULT_ENCODING, newline='')
    except OSError as exc:
        raise AmalgamateError(f'Failed to open output file "{ns.output}": {exc}') from exc
    with fh:
        yield fh


class Amalgamate:
    """Top-level façade for command-style execution."""

    @staticmethod
    def run(
        argv: Sequence[str],
        *,
        stdout: Optional[TextIO] = None,
        logger_factory: Optional[LoggerFactoryProtocol] = None,
    ) -> None:
        """Amalgamate the files named on *argv*.

        Output goes to ``--output`` or to *stdout* (``sys.stdout`` by
        default). Fatal conditions raise :class:`AmalgamateError`; whatever
        was written before stays written. A *logger_factory* replaces the
        logging set up from ``-v``/``-q``/``--json-logs``.
        """
        ns = parse_args(list(argv))
        json_logs = bool(ns.json_logs) or os.getenv(ENV_JSON_LOGS) == '1'
        lg = _configure_logging(
            json_logs=json_logs,
            level=level_from_verbosity(ns.verbose, ns.quiet),
            factory=logger_factory,
        )

        cfg = build_engine_config(ns, logger=lg)
        with _open_output(ns, stdout) as stream:
            engine = build_engine(cfg, stream)
            engine.process_all(ns.files)


def main(argv: Optional[Sequence[str]] = None) -> NoReturn:
    """Entry point for the `amalgamate` console script."""
    try:
        Amalgamate.run(sys.argv[1:] if argv is None else argv)
        raise SystemExit(0)
    except KeyboardInterrupt:
        logger.error('Interrupted by user.')
        raise SystemExit(130)
    except BrokenPipeError:
        # Reader went away (e.g. piped into `head`); silence the final flush.
        devnull = os.open(os.devnull, os.O_WRONLY)
        os.dup2(devnull, sys.stdout.fileno())
        raise SystemExit(0)
    except AmalgamateError as exc:
        logger.error('%s', exc)
        raise SystemExit(1)
    except Exception as exc:
        if os.getenv(ENV_DEBUG) == '1':
            raise
        logger.error('Unexpected error: %s', exc)
        raise SystemExit(1)


if __name__ == '__main__':
    main()
