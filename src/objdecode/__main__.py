"""Command-line interface for objdecode."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from objdecode import load_obj
from objdecode.diagnostics import Diagnostic, Severity, format_diagnostic
from objdecode.exceptions import OBJParseError
from objdecode.tokenizer import Tokenizer


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the CLI.

    :return: The configured argument parser.
    """
    parser = argparse.ArgumentParser(
        prog="objdecode",
        description="Check and inspect Wavefront OBJ files",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    check_parser = subparsers.add_parser(
        "check",
        help="Parse an OBJ file and report every problem found",
        description="Parse an OBJ file, print its diagnostics and a summary of the loaded mesh",
    )

    check_parser.add_argument(
        "input",
        type=Path,
        help="path to the input OBJ file",
    )

    check_parser.add_argument(
        "--keep-comments",
        action="store_true",
        help="pass comments to the element parsers instead of discarding them",
    )

    check_parser.add_argument(
        "--no-warnings",
        action="store_true",
        help="do not print warnings, such as unsupported elements",
    )

    check_parser.add_argument(
        "--strict",
        action="store_true",
        help="stop at the first error instead of skipping the offending line",
    )

    tokens_parser = subparsers.add_parser(
        "tokens",
        help="Print the tokens of an OBJ file",
        description="Print the kind and text of every token of an OBJ file",
    )

    tokens_parser.add_argument(
        "input",
        type=Path,
        help="path to the input OBJ file",
    )

    tokens_parser.add_argument(
        "--keep-comments",
        action="store_true",
        help="print comment tokens as well",
    )

    return parser


def check_command(args: argparse.Namespace) -> int:
    """Execute the check command.

    :param args: The parsed command-line arguments.
    :return: Exit code (0 for success, non-zero for error).
    """
    errors = 0

    def report(diagnostic: Diagnostic) -> None:
        nonlocal errors
        if diagnostic.severity is Severity.ERROR:
            errors += 1
        elif args.no_warnings:
            return

        print(format_diagnostic(diagnostic), file=sys.stderr)

    try:
        mesh = load_obj(args.input, skip_comments=not args.keep_comments, strict=args.strict, report=report)
    except FileNotFoundError:
        print(f"Error: Input file not found: {args.input}", file=sys.stderr)
        return 1
    except OBJParseError as e:
        print(format_diagnostic(e.diagnostic), file=sys.stderr)
        print(f"Error: Failed to parse OBJ file: {e}", file=sys.stderr)
        return 1
    except OSError as e:
        print(f"Error: Failed to read input file: {e}", file=sys.stderr)
        return 1

    print(f"Vertices: {mesh.num_vertices}")
    print(f"Texture Coordinates: {len(mesh.texture_coords)}")
    print(f"Normals: {len(mesh.normals)}")
    print(f"Triangles: {mesh.num_faces}")

    if errors:
        print(f"✗ Found {errors} error(s) in '{args.input}'")
        return 1

    print(f"✓ No errors found in '{args.input}'")
    return 0


def tokens_command(args: argparse.Namespace) -> int:
    """Execute the tokens command.

    :param args: The parsed command-line arguments.
    :return: Exit code (0 for success, non-zero for error).
    """
    try:
        with open(args.input, "rb") as file:
            for token in Tokenizer(file, skip_comments=not args.keep_comments):
                print(f"{token.position.line + 1}:{token.position.column + 1} {token.kind.name} {token.lexeme!r}")
    except OSError as e:
        print(f"Error: Failed to read input file: {e}", file=sys.stderr)
        return 1

    return 0


def main() -> int:
    """Main entry point for the CLI.

    :return: The exit code (0 for success, non-zero for error).
    """
    parser = create_parser()
    args = parser.parse_args()

    logging.basicConfig(format="%(message)s")

    if args.command == "check":
        return check_command(args)

    if args.command == "tokens":
        return tokens_command(args)

    return 1


if __name__ == "__main__":
    sys.exit(main())
