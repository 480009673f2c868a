"""
Command-line interface for keyscan.
"""

import argparse
import logging
import sys
from typing import List, Optional

from rich.console import Console
from rich.logging import RichHandler

from . import __version__
from .errors import KeyNotFoundError, ParseError
from .query import parse_query
from .reader import DEFAULT_EXTENSIONS, KeyScanner
from .report import iter_keys, query_files, query_json

console = Console(stderr=True)


def _setup_logging(verbose: bool):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="keyscan",
        description="Keyscan - Infer the key structure of a directory of JSON documents",
    )
    parser.add_argument(
        "--version",
        action="store_true",
        help="Show version and exit",
    )
    parser.add_argument(
        "-j", "--jobs",
        type=int,
        default=None,
        help="Number of worker processes (default: number of CPUs)",
    )
    parser.add_argument(
        "--ext",
        dest="extensions",
        action="append",
        help="File extension to scan, may be repeated (default: .json)",
    )
    parser.add_argument(
        "--no-progress",
        action="store_true",
        help="Don't show a progress bar",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Log debug output, including skipped documents",
    )
    parser.add_argument("dir", nargs="?", help="Directory to scan for JSON documents")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Keys command
    keys_parser = subparsers.add_parser(
        "keys",
        help="List all member keys with types and how often this member is in the dataset",
    )
    keys_parser.add_argument(
        "--type-count",
        type=int,
        default=1,
        help="Only list members which have at least TYPE_COUNT types (default: 1)",
    )

    # Query command
    query_parser = subparsers.add_parser(
        "query",
        help="Query the analytics of a specific member",
    )
    query_parser.add_argument("query", help='The query is similar to a jq query ".a.b.c"')
    query_parser.add_argument(
        "--files",
        action="store_true",
        help="List the documents containing the member instead of its analytics",
    )

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.version:
        console.print(f"keyscan version {__version__}")
        return 0

    if not args.command:
        parser.print_help()
        return 0

    if not args.dir:
        parser.error("the following arguments are required: dir")

    if args.command == "keys" and args.type_count < 0:
        parser.error("--type-count must not be negative")

    _setup_logging(args.verbose)

    try:
        if args.command == "query":
            # Fail on a bad query before scanning anything
            parse_query(args.query)

        scanner = KeyScanner(
            args.dir,
            extensions=args.extensions or DEFAULT_EXTENSIONS,
            workers=args.jobs,
            progress=not args.no_progress,
        )
        tree = scanner.scan()

        if args.command == "keys":
            for line in iter_keys(tree, args.type_count):
                print(line)

        elif args.command == "query":
            if args.files:
                lines = query_files(tree, args.query, scanner.root)
            else:
                lines = [query_json(tree, args.query)]
            for line in lines:
                print(line)

    except ParseError as e:
        console.print(f"Failed to parse query:\n\t{e}", style="bold red", markup=False)
        return 1
    except KeyNotFoundError as e:
        console.print(f"Error: {e}", style="bold red", markup=False)
        return 1
    except (FileNotFoundError, NotADirectoryError) as e:
        console.print(f"Error: {e}", style="bold red", markup=False)
        return 1
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted.[/yellow]")
        return 130
    except Exception as e:
        console.print(f"Error: {e}", style="bold red", markup=False)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
