"""
Inspect simple_list archives from the command line.

Usage:
    python -m listarchive show path/to/list
    python -m listarchive show path/to/list --scalars --typed-arrays
    python -m listarchive json path/to/list --indent 2
"""

import argparse
import json
import sys
from pathlib import Path
from typing import Any, Optional

import numpy as np

from .cli_util import setup_logging
from .errors import ListArchiveError
from .list_archive import CONTENTS_FILE, ListOptions, decompress_tree, read_list
from .storage import LocalStorage
from .vectors import ListValue, Vector

INDENT = "  "


def format_value(value: Any, label: Optional[str] = None, depth: int = 0) -> list[str]:
    """Render a decoded value as indented lines, one per element."""
    prefix = INDENT * depth + (f"{label}: " if label is not None else "")

    if isinstance(value, ListValue):
        lines = [f"{prefix}list ({len(value)})"]
        for i, item in enumerate(value):
            name = value.names[i] if value.names is not None else f"[{i}]"
            lines.extend(format_value(item, name, depth + 1))
        return lines

    if isinstance(value, Vector):
        if value.scalar:
            return [f"{prefix}{value.type_name} {value.values[0]!r} (scalar)"]
        if value.names is not None:
            pairs = ", ".join(f"{n}={v!r}" for n, v in zip(value.names, value.values))
            return [f"{prefix}{value.type_name} [{pairs}]"]
        return [f"{prefix}{value.type_name} {value.values!r}"]

    if isinstance(value, np.ndarray):
        return [f"{prefix}array {value.dtype} shape {value.shape}"]

    if value is None:
        return [f"{prefix}nothing"]

    if isinstance(value, (str, bool, int, float)):
        return [f"{prefix}{value!r}"]

    return [f"{prefix}{type(value).__name__}"]


def show(path: str, scalars: bool = False, typed_arrays: bool = False):
    options = ListOptions(to_scalar=scalars, to_typed_array=typed_arrays)
    value = read_list(path, options=options)
    for line in format_value(value):
        print(line)


def dump_json(path: str, indent: Optional[int] = 2):
    storage = LocalStorage()
    node = decompress_tree(storage.read(Path(path) / CONTENTS_FILE), path)
    print(json.dumps(node, indent=indent))


def main(argv=None):
    parser = argparse.ArgumentParser(
        prog="listarchive",
        description="Inspect simple_list archives",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s show out/my_list                  # Print the decoded list
  %(prog)s show out/my_list --scalars        # Report scalars as bare values
  %(prog)s json out/my_list --indent 0       # Print the stored JSON tree
""",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Log codec debug events to stderr",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    show_parser = subparsers.add_parser("show", help="Print the decoded list")
    show_parser.add_argument("path", help="Directory containing the saved list")
    show_parser.add_argument(
        "--scalars",
        action="store_true",
        help="Report unnamed scalars as bare values",
    )
    show_parser.add_argument(
        "--typed-arrays",
        action="store_true",
        help="Report unnamed numeric vectors without missing values as arrays",
    )

    json_parser = subparsers.add_parser("json", help="Print the stored JSON tree")
    json_parser.add_argument("path", help="Directory containing the saved list")
    json_parser.add_argument(
        "--indent",
        type=int,
        default=2,
        help="JSON indentation (default: 2)",
    )

    args = parser.parse_args(argv)
    setup_logging(debug=args.debug)

    if not Path(args.path).exists():
        print(f"Error: not found: {args.path}")
        sys.exit(1)

    try:
        if args.command == "show":
            show(args.path, scalars=args.scalars, typed_arrays=args.typed_arrays)
        else:
            dump_json(args.path, indent=args.indent)
    except ListArchiveError as e:
        print(f"Error: {e}")
        sys.exit(2)


if __name__ == "__main__":
    main()
