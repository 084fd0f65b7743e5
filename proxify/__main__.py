#!/usr/bin/env python3
r"""proxify CLI.

Commands:
    python -m proxify --version        Show version
    python -m proxify info             Show detailed version and system info
    python -m proxify check DOCS       Inspect a documentation database

Examples:
    # Show detailed system info (for bug reports)
    python -m proxify info

    # Report duplicate and unrecognized entries of a docs export
    python -m proxify check docs/reference/data.json --root p5
"""

from __future__ import annotations

import argparse
import logging
import sys
from collections import Counter
from typing import List, Optional, Sequence

from ._version import __version__
from .schema import ClassRegistry
from .settings import ProxifySettings
from .utils import MetadataError


def cmd_info(args: argparse.Namespace) -> int:
    """Show detailed version and system information."""
    from ._version import print_version_info

    print_version_info()
    return 0


def cmd_check(args: argparse.Namespace) -> int:
    """Load a documentation database and report what a pass would see."""
    try:
        docs = ClassRegistry.from_file(args.docs)
    except MetadataError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    settings = ProxifySettings(root_name=args.root)
    pattern = settings.class_pattern
    unrecognized: List[str] = [
        name
        for name in docs.class_names()
        if name != settings.root_name and not pattern.match(name)
    ]
    counts = Counter(
        (item.class_, item.name) for item in docs.classitems if item.class_ and item.name
    )
    duplicates = sorted(
        f"{cls}.{name}" for (cls, name), count in counts.items() if count > 1
    )
    unnamed = sum(1 for item in docs.classitems if not item.name)

    print(f"Classes    : {len(docs.classes)}")
    print(f"Members    : {len(counts)}")
    print(f"Unnamed    : {unnamed}")
    print(f"Duplicates : {len(duplicates)}")
    for name in duplicates:
        print(f"  - {name}")
    print(f"Unrecognized classes : {len(unrecognized)}")
    for name in unrecognized:
        print(f"  - {name}")
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="python -m proxify",
        description="Documentation-driven method interception",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m proxify --version        Show version
  python -m proxify info             Show detailed system info
  python -m proxify check data.json  Inspect a documentation database
        """,
    )
    parser.add_argument(
        "-V",
        "--version",
        action="version",
        version=f"proxify {__version__}",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Verbose output",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    info_parser = subparsers.add_parser(
        "info",
        help="Show detailed version and system information",
        description="Display version, Python, platform, and dependency information.",
    )
    info_parser.set_defaults(func=cmd_info)

    check_parser = subparsers.add_parser(
        "check",
        help="Inspect a documentation database",
        description="Count classes and members, list duplicates and unrecognized classes.",
    )
    check_parser.add_argument("docs", help="Path to the docs export (data.json)")
    check_parser.add_argument(
        "--root",
        default="p5",
        help="Documented name of the root class (default: p5)",
    )
    check_parser.set_defaults(func=cmd_check)

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.command is None:
        parser.print_help()
        return 0

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
