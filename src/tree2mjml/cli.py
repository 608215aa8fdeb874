"""Command-line interface for tree2mjml.

Usage::

    tree2mjml template.json                    # writes template.mjml
    tree2mjml template.json -o email.mjml      # explicit output path
    tree2mjml template.json --compile          # also writes template.html
    tree2mjml template.json --strict           # reject malformed trees
    tree2mjml --list-components                # list available components
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from tree2mjml import __version__
from tree2mjml.compiler import compile_markup
from tree2mjml.config import TREE2MJML_LOG_LEVEL
from tree2mjml.converter import Converter
from tree2mjml.exceptions import Tree2MjmlError
from tree2mjml.registry import COMPONENT_GROUPS, components_in_group


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tree2mjml",
        description="Convert an email editor tree (JSON) to MJML.",
    )
    parser.add_argument(
        "input",
        nargs="?",
        help="Path to the tree JSON file to convert.",
    )
    parser.add_argument(
        "-o", "--output",
        help="Output MJML file path. Defaults to <input>.mjml.",
    )
    parser.add_argument(
        "-e", "--encoding",
        default="utf-8",
        help="Input file encoding (default: %(default)s).",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Fail on trees that break structural invariants.",
    )
    parser.add_argument(
        "--compile",
        action="store_true",
        help="Also compile the MJML to HTML through the compiler service.",
    )
    parser.add_argument(
        "--html-output",
        help="Output HTML file path for --compile. Defaults to <input>.html.",
    )
    parser.add_argument(
        "--compiler-url",
        help="Compiler endpoint (default: $TREE2MJML_COMPILER_URL).",
    )
    parser.add_argument(
        "--list-components",
        action="store_true",
        help="List available component types and exit.",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Print progress information.",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    return parser


def _print_components() -> None:
    print("Available components:")
    for key, label in COMPONENT_GROUPS:
        print(f"{label}:")
        for definition in components_in_group(key):
            flags = []
            if definition.is_container:
                flags.append("container")
            if definition.is_self_closing:
                flags.append("self-closing")
            suffix = f" ({', '.join(flags)})" if flags else ""
            print(f"  - {definition.type}{suffix}")


def main(argv: list[str] | None = None) -> int:
    """Entry point for the CLI."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else TREE2MJML_LOG_LEVEL,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.list_components:
        _print_components()
        return 0

    if not args.input:
        parser.error("the following argument is required: input")

    input_path = Path(args.input)
    if not input_path.is_file():
        print(f"Error: file not found: {input_path}", file=sys.stderr)
        return 1

    output_path = Path(args.output) if args.output else input_path.with_suffix(".mjml")

    if args.verbose:
        print(f"Input:  {input_path}")
        print(f"Output: {output_path}")

    try:
        converter = Converter(strict=args.strict, compiler_url=args.compiler_url)
        mjml = converter.convert_file(input_path, output_path, encoding=args.encoding)
    except (Tree2MjmlError, OSError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    print(f"Converted: {output_path}")

    if args.compile:
        html_path = Path(args.html_output) if args.html_output else input_path.with_suffix(".html")
        try:
            result = asyncio.run(compile_markup(mjml, url=args.compiler_url))
        except Tree2MjmlError as exc:
            print(f"Error: {exc}", file=sys.stderr)
            return 1
        html_path.parent.mkdir(parents=True, exist_ok=True)
        html_path.write_text(result.html, encoding="utf-8")
        for warning in result.warnings:
            where = f" <{warning.tag_name}>" if warning.tag_name else ""
            line = f" line {warning.line}" if warning.line is not None else ""
            print(f"Warning{where}{line}: {warning.message}", file=sys.stderr)
        print(f"Compiled: {html_path}")

    if args.verbose:
        print(f"Done. {output_path.stat().st_size} bytes written.")

    return 0


if __name__ == "__main__":
    sys.exit(main())
