"""Command line entrypoint: parse media types and print their canonical form."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from collections.abc import Iterable, Sequence
from typing import TextIO

import structlog

from mediatype import metrics
from mediatype.model import ParseResult
from mediatype.parser import analyze
from mediatype.settings import Settings, get_settings

LOGGER = structlog.get_logger(__name__)


def configure_logging(log_level: str) -> None:
    numeric_level = logging.getLevelName(log_level.upper())
    if isinstance(numeric_level, str):
        numeric_level = logging.INFO
    logging.basicConfig(level=numeric_level, format="%(message)s", stream=sys.stderr)
    structlog.configure(
        processors=[
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="media-type",
        description="Validate media type strings and print their canonical form.",
    )
    parser.add_argument("values", nargs="*", help="Media type strings to parse.")
    parser.add_argument(
        "--stdin",
        action="store_true",
        help="Also read one media type per line from standard input.",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print one JSON record per input instead of the canonical string.",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Exit with status 1 when any input is invalid.",
    )
    parser.add_argument("--log-level", default=None, help="Override MEDIA_TYPE_LOG_LEVEL.")
    parser.add_argument(
        "--metrics",
        action="store_true",
        help="Write Prometheus metrics to stderr after processing.",
    )
    return parser


def _iter_inputs(values: Sequence[str], stream: TextIO | None) -> Iterable[str]:
    yield from values
    if stream is not None:
        for line in stream:
            line = line.rstrip("\r\n")
            if line.strip():
                yield line


def _render(result: ParseResult, *, as_json: bool) -> str:
    if as_json:
        return json.dumps(result.asdict(), ensure_ascii=False)
    if result.media_type is None:
        return f"invalid: {result.value}"
    return str(result.media_type)


def main(
    argv: Sequence[str] | None = None,
    *,
    settings: Settings | None = None,
    stdin: TextIO | None = None,
    stdout: TextIO | None = None,
) -> int:
    args = build_parser().parse_args(argv)
    settings = settings or get_settings()
    configure_logging(args.log_level or settings.log_level)
    out = stdout or sys.stdout

    stream = (stdin or sys.stdin) if args.stdin else None
    processed = 0
    invalid = 0
    for value in _iter_inputs(args.values, stream):
        result = analyze(value, settings=settings)
        processed += 1
        if not result.ok:
            invalid += 1
        print(_render(result, as_json=args.json), file=out)

    LOGGER.info("cli.done", processed=processed, invalid=invalid)

    if args.metrics:
        if settings.metrics_enabled:
            payload, _ = metrics.render_metrics()
            sys.stderr.write(payload.decode("utf-8"))
        else:
            LOGGER.warning("cli.metrics_disabled")

    if args.strict and invalid:
        return 1
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
