"""
Polyview CLI entry point.

Usage:
    polyview compile component.json [--target-version 1|2] [--no-format]
                                    [--template-only] [-o OUT] [--log-level LEVEL]
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from polyview import __version__
from polyview.codegen import compile_component, render_block
from polyview.config import TargetVersion
from polyview.errors import PolyviewError
from polyview.ir.serialization import read_component
from polyview.ir.spec import BuiltInNode, Node

logger = logging.getLogger(__name__)

LOG_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}


def _configure_logging(level_name: str) -> None:
    logging.basicConfig(
        level=LOG_LEVELS.get(level_name.lower(), logging.WARNING),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def cmd_compile(args: argparse.Namespace) -> int:
    """Compile one serialized component and print or write the result."""
    component = read_component(args.file)
    if args.template_only:
        root = Node(name=BuiltInNode.FRAGMENT.value, children=component.children)
        output = render_block(root)
    else:
        output = compile_component(
            component,
            {
                "target_version": TargetVersion.parse(args.target_version),
                "format": not args.no_format,
            },
        )

    if args.output:
        path = Path(args.output)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(output, encoding="utf-8")
        logger.info("Wrote %s", path)
    else:
        sys.stdout.write(output)
        if not output.endswith("\n"):
            sys.stdout.write("\n")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="polyview",
        description="Compile component IR into framework source code",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    subparsers = parser.add_subparsers(dest="command", required=True)

    compile_parser = subparsers.add_parser("compile", help="Compile a component IR JSON file")
    compile_parser.add_argument("file", help="Path to the serialized component")
    compile_parser.add_argument(
        "--target-version",
        choices=[version.value for version in TargetVersion],
        default=TargetVersion.V1.value,
        help="Aurelia generation to target (default: 1)",
    )
    compile_parser.add_argument("--no-format", action="store_true", help="Skip the formatting stage")
    compile_parser.add_argument(
        "--template-only",
        action="store_true",
        help="Render only the view markup of the component tree",
    )
    compile_parser.add_argument("-o", "--output", help="Write output to this file instead of stdout")
    compile_parser.add_argument(
        "--log-level",
        default="warning",
        choices=sorted(LOG_LEVELS),
        help="Logging verbosity (default: warning)",
    )
    compile_parser.set_defaults(func=cmd_compile)
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main CLI entrypoint.

    Args:
        argv: Command-line arguments (None uses sys.argv[1:])

    Returns:
        Process exit code
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.log_level)

    try:
        return args.func(args)
    except PolyviewError as exc:
        print(f"Error: {exc.format()}", file=sys.stderr)
        return 1
    except OSError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
