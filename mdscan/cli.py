"""CLI entrypoints for mdscan commands."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .config import REPORT_FORMATS, load_config
from .errors import MdscanError
from .logging import configure_logging
from .pipeline import CorpusScanner
from .report import error_lines, render_text, to_json

EXIT_OK = 0
EXIT_MALFORMED = 1
EXIT_ERROR = 2


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    kwargs: dict[str, object] = {
        "action": "store_true",
        "help": "Increase log verbosity for troubleshooting.",
    }
    if suppress_default:
        kwargs["default"] = argparse.SUPPRESS
    else:
        kwargs["default"] = False
    parser.add_argument(
        "-v",
        "--verbose",
        **kwargs,
    )


def _add_log_file_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    parser.add_argument(
        "--log-file",
        type=Path,
        default=argparse.SUPPRESS if suppress_default else None,
        help="Also write log records to this file.",
    )


def _positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"expected an integer, got '{value}'") from exc
    if number < 1:
        raise argparse.ArgumentTypeError("must be at least 1")
    return number


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mdscan",
        description="Extract and classify fenced code blocks across a Markdown corpus.",
    )
    _add_verbose_option(parser)
    _add_log_file_option(parser)
    subparsers = parser.add_subparsers(dest="command", required=True)

    scan_parser = subparsers.add_parser(
        "scan",
        help="Scan a directory tree and report code blocks per language and document.",
    )
    _add_verbose_option(scan_parser, suppress_default=True)
    _add_log_file_option(scan_parser, suppress_default=True)
    scan_parser.add_argument(
        "root",
        help="Root directory of the Markdown corpus.",
    )
    scan_parser.add_argument(
        "--format",
        choices=REPORT_FORMATS,
        default=None,
        help="Report format (defaults to json, or report.format in .mdscan.yml).",
    )
    scan_parser.add_argument(
        "--fail-on-malformed",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Exit with status 1 when any unterminated code fence is found (overrides .mdscan.yml).",
    )
    scan_parser.add_argument(
        "--workers",
        type=_positive_int,
        default=None,
        help="Number of worker threads (1 scans sequentially).",
    )
    scan_parser.add_argument(
        "--output",
        "-o",
        default=None,
        help="Write the report to this file instead of standard output.",
    )

    serve_parser = subparsers.add_parser(
        "serve",
        help="Run the HTTP service exposing the scan endpoint.",
    )
    _add_verbose_option(serve_parser, suppress_default=True)
    _add_log_file_option(serve_parser, suppress_default=True)
    serve_parser.add_argument("--host", default="127.0.0.1", help="Interface to bind.")
    serve_parser.add_argument("--port", type=int, default=8000, help="Port to listen on.")

    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entrypoint for mdscan commands; returns the process exit status."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose), log_file=args.log_file)

    if args.command == "scan":
        return _run_scan(parser, args)
    if args.command == "serve":
        from .service import run_service

        run_service(host=args.host, port=args.port)
        return EXIT_OK
    parser.exit(EXIT_ERROR, "Unknown command\n")  # pragma: no cover - argparse enforces choices
    return EXIT_ERROR  # pragma: no cover


def _run_scan(parser: argparse.ArgumentParser, args: argparse.Namespace) -> int:
    try:
        root = Path(args.root)
        config = load_config(root) if root.is_dir() else None
        scanner = CorpusScanner(config=config)
        summary = scanner.scan(root, workers=args.workers)
    except MdscanError as exc:
        parser.exit(EXIT_ERROR, f"mdscan scan failed: {exc}\n")

    report_format = args.format or (config.report.format if config else "json")
    fail_on_malformed = (
        args.fail_on_malformed
        if args.fail_on_malformed is not None
        else bool(config and config.report.fail_on_malformed)
    )

    if report_format == "text":
        rendered = render_text(summary)
        for line in error_lines(summary):
            print(line, file=sys.stderr)
    else:
        rendered = to_json(summary)

    if args.output:
        Path(args.output).write_text(rendered, encoding="utf-8")
    else:
        sys.stdout.write(rendered)

    if fail_on_malformed and summary.malformed:
        return EXIT_MALFORMED
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
