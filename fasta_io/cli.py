"""Command-line interface for fasta_io."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Callable

from . import __version__
from .config import IOSettings, collect_settings
from .errors import FastaError
from .logging_utils import configure_logging, get_logger
from .reader import FastaReader
from .summary import summarize_fasta, write_summary
from .writer import FastaWriter

Handler = Callable[[argparse.Namespace], int]


def build_parser(settings: IOSettings | None = None) -> argparse.ArgumentParser:
    settings = settings or IOSettings()
    parser = argparse.ArgumentParser(
        prog="fastaio",
        description="Stream, validate and rewrite FASTA files (gzip aware).",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--verbose",
        action="store_true",
        default=settings.verbose,
        help="Enable debug logging.",
    )
    parser.add_argument(
        "--buffer-size",
        type=int,
        default=settings.buffer_size,
        help=f"Read chunk size in bytes (default: {settings.buffer_size}).",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    _add_reformat_parser(subparsers, settings)
    _add_count_parser(subparsers)
    _add_summary_parser(subparsers)
    return parser


def _add_reformat_parser(
    subparsers: argparse._SubParsersAction[argparse.ArgumentParser], settings: IOSettings
) -> None:
    parser = subparsers.add_parser("reformat", help="Validate a FASTA file and rewrap it at 80 columns.")
    parser.add_argument(
        "--in-fasta",
        type=Path,
        required=True,
        help="Input FASTA file path (.gz supported).",
    )
    parser.add_argument(
        "--out",
        type=Path,
        default=None,
        help="Output FASTA path; a .gz suffix compresses (default: stdout).",
    )
    parser.add_argument(
        "--compress-level",
        type=int,
        default=settings.compress_level,
        help=f"gzip level for compressed output (default: {settings.compress_level}).",
    )
    parser.set_defaults(handler=_handle_reformat)


def _add_count_parser(subparsers: argparse._SubParsersAction[argparse.ArgumentParser]) -> None:
    parser = subparsers.add_parser("count", help="Print the number of entries in a FASTA file.")
    parser.add_argument(
        "--in-fasta",
        type=Path,
        required=True,
        help="Input FASTA file path (.gz supported).",
    )
    parser.set_defaults(handler=_handle_count)


def _add_summary_parser(subparsers: argparse._SubParsersAction[argparse.ArgumentParser]) -> None:
    parser = subparsers.add_parser("summary", help="Write a per-entry length/GC table as CSV.")
    parser.add_argument(
        "--in-fasta",
        type=Path,
        required=True,
        help="Input FASTA file path (.gz supported).",
    )
    parser.add_argument(
        "--out-csv",
        type=Path,
        required=True,
        help="Destination CSV path.",
    )
    parser.set_defaults(handler=_handle_summary)


def _handle_reformat(args: argparse.Namespace) -> int:
    _require_input(args.in_fasta)
    logger = get_logger()
    with FastaReader(args.in_fasta, buffer_size=args.buffer_size) as reader:
        with FastaWriter(args.out, compress_level=args.compress_level) as writer:
            for description, sequence in reader:
                writer.write_entry(description, sequence)
        logger.info("Rewrote %d entries from %s", reader.num_parsed, args.in_fasta)
    return 0


def _handle_count(args: argparse.Namespace) -> int:
    _require_input(args.in_fasta)
    with FastaReader(args.in_fasta, out_type=bytes, buffer_size=args.buffer_size) as reader:
        for _ in reader:
            pass
        print(reader.num_parsed)
    return 0


def _handle_summary(args: argparse.Namespace) -> int:
    _require_input(args.in_fasta)
    frame = summarize_fasta(args.in_fasta, buffer_size=args.buffer_size)
    write_summary(frame, args.out_csv)
    return 0


def _require_input(path: Path) -> None:
    if not Path(path).exists():
        raise FileNotFoundError(f"Input file not found: {path}")


def main(argv: list[str] | None = None) -> int:
    settings = collect_settings()
    parser = build_parser(settings)
    args = parser.parse_args(argv)
    configure_logging(verbose=args.verbose)
    logger = get_logger()
    handler: Handler = args.handler

    try:
        return handler(args)
    except (FileNotFoundError, FastaError, EOFError) as exc:
        logger.error(str(exc))
        return 1
    except Exception:  # pragma: no cover - safety net
        logger.exception("Unexpected error")
        return 1


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
