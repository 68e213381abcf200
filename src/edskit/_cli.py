"""Command-line interface for edskit."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from pydantic import ValidationError

from edskit._errors import EDSError
from edskit._models import RunDescription
from edskit.read import parse
from edskit.write import write_eds


def generate_command(args: argparse.Namespace) -> int:
    """Execute the generate subcommand.

    Returns
    -------
    int
        Exit code (0 for success, 1 for an invalid run or template, 2 for other
        errors)
    """
    try:
        data = json.loads(Path(args.run).read_text(encoding="utf-8"))
        run = RunDescription.coerce(data)
        filename = args.filename or Path(args.output).name
        # the file name is backslash-joined onto the directory
        directory = args.directory.rstrip("\\")
        write_eds(args.output, directory, filename, run, template=args.template)
    except (EDSError, ValidationError) as e:
        print(f"✗ Could not generate {args.output}:\n{e}", file=sys.stderr)
        return 1
    except Exception as e:
        print(f"✗ Error: {e}", file=sys.stderr)
        return 2
    print(f"✓ Wrote {args.output} ({len(run.wells)} wells)")
    return 0


def parse_command(args: argparse.Namespace) -> int:
    """Execute the parse subcommand, printing the result as JSON."""
    try:
        result = parse(args.path)
    except EDSError as e:
        print(f"✗ Could not parse {args.path}: {e}", file=sys.stderr)
        return 1
    except Exception as e:
        print(f"✗ Error: {e}", file=sys.stderr)
        return 2

    exclude = set()
    if not args.results:
        exclude.add("results")
    if not args.wells:
        exclude.add("wells")
    print(result.model_dump_json(indent=2, exclude=exclude, exclude_none=True))
    return 0


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the CLI.

    Parameters
    ----------
    argv : list[str] | None
        Command-line arguments (defaults to sys.argv[1:])

    Returns
    -------
    int
        Exit code
    """
    parser = argparse.ArgumentParser(
        prog="edskit",
        description="Generate and parse qPCR .eds archives",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Log pipeline progress"
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    gen_parser = subparsers.add_parser(
        "generate", help="Generate an .eds archive from a JSON run description"
    )
    gen_parser.add_argument("run", help="Path to the run description (JSON)")
    gen_parser.add_argument("output", help="Path or URI of the .eds file to write")
    gen_parser.add_argument(
        "--directory",
        default="C:",
        help="Directory recorded as the archive's location on the instrument PC",
    )
    gen_parser.add_argument(
        "--filename",
        default=None,
        help="File name recorded in the archive (defaults to the output's name)",
    )
    gen_parser.add_argument(
        "--template", default=None, help="Template directory or URI to build from"
    )
    gen_parser.set_defaults(func=generate_command)

    parse_parser = subparsers.add_parser(
        "parse", help="Print the contents of a completed .eds archive as JSON"
    )
    parse_parser.add_argument("path", help="Path or URI of the .eds archive")
    parse_parser.add_argument(
        "--results", action="store_true", help="Include analysis result rows"
    )
    parse_parser.add_argument(
        "--wells", action="store_true", help="Include multicomponent data per well"
    )
    parse_parser.set_defaults(func=parse_command)

    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    if args.command is None:
        parser.print_help()
        return 0
    return args.func(args)


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
