"""
Command line entry point converting ACF files to JSON.

Reads from stdin and writes to stdout unless paths are given.
"""

import argparse
import sys
from typing import IO

import acfjson


def _non_negative(value: str) -> int:
    indent = int(value)
    if indent < 0:
        raise argparse.ArgumentTypeError("indent must be non-negative")
    return indent


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="acfjson",
        description="Convert a Valve ACF file to JSON.",
    )
    parser.add_argument(
        "input",
        nargs="?",
        default="-",
        type=argparse.FileType("rb"),
        help="input ACF file (stdin if not specified)",
    )
    parser.add_argument(
        "-o",
        "--output",
        default="-",
        type=argparse.FileType("wb"),
        help="output JSON file (stdout if not specified)",
    )
    parser.add_argument(
        "-c",
        "--compact",
        action="store_true",
        help="emit JSON without any whitespace",
    )
    parser.add_argument(
        "-i",
        "--indent",
        default=2,
        type=_non_negative,
        help="spaces per nesting level (default: 2)",
    )
    parser.add_argument(
        "--lenient",
        action="store_true",
        help="accept objects truncated by end of input",
    )
    parser.add_argument(
        "--ascii",
        action="store_true",
        help="escape all non-ASCII characters",
    )
    return parser


def _close(stream: IO[bytes]) -> None:
    """Closes streams opened for paths, leaving stdio open."""
    if stream not in (sys.stdin.buffer, sys.stdout.buffer):
        stream.close()


def _print_hot_path_stats() -> None:
    stats = acfjson.get_hot_path_stats()
    if not stats:
        return

    print(
        f"{'Function':<20} {'Calls':>10} {'Chars':>10} {'Time (ms)':>12}",
        file=sys.stderr,
    )
    for name, entry in sorted(stats.items()):
        print(
            f"{name:<20} {entry.call_count:>10,} {entry.chars_processed:>10,} "
            f"{entry.total_time_ns / 1_000_000:>12.3f}",
            file=sys.stderr,
        )


def main(argv: list[str] | None = None) -> int:
    """
    Read Valve ACF and write the equivalent JSON
    """
    parser = _build_parser()
    args = parser.parse_args(argv)

    try:
        acfjson.convert(
            args.input,
            args.output,
            compact=args.compact,
            indent=args.indent,
            ensure_ascii=args.ascii,
            strict=not args.lenient,
        )
    except acfjson.ACFError as e:
        print(f"{parser.prog}: error: {e}", file=sys.stderr)
        return 1
    finally:
        _close(args.input)
        _close(args.output)

    _print_hot_path_stats()
    return 0


if __name__ == "__main__":
    sys.exit(main())
