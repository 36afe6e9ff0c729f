"""Command-line entry point: Orchestra repository XML → Markdown.

Configuration (CLI flags take precedence over the config file):
    --paragraph-delimiter  token for paragraph breaks in table cells (default: "/P/")
    --pedigree             include provenance columns
    --fixml                include FIXML abbreviated names and categories
    --config               YAML file with the same settings

Usage:
    orchestra2md OrchestraFIXLatest.xml -o fix.md
    orchestra2md repo.xml -e events.jsonl --pedigree
    python -m orchestra2md repo.xml > repo.md

Exit codes: 0 on success, 1 on any input, config or I/O error.
"""

from __future__ import annotations

import argparse
import dataclasses
import logging
import sys
from contextlib import ExitStack
from typing import TextIO

from orchestra2md.config import ConfigError, GeneratorConfig, load_config
from orchestra2md.generator import generate_markdown
from orchestra2md.schema_parser import SchemaParseError

logger = logging.getLogger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse CLI arguments.

    Args:
        argv: Argument list to parse. If None, reads from sys.argv[1:]. Pass an
              explicit list in tests.
    """
    parser = argparse.ArgumentParser(
        prog="orchestra2md",
        description="Generate a Markdown document from an Orchestra repository.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("input", metavar="INPUT", help="Orchestra repository XML file")
    parser.add_argument(
        "-o", "--output",
        metavar="FILE",
        help="Markdown output file (default: stdout)",
    )
    parser.add_argument(
        "-e", "--events",
        metavar="FILE",
        help="write diagnostics as JSON lines to FILE",
    )
    parser.add_argument(
        "--paragraph-delimiter",
        metavar="TOKEN",
        help="token for a paragraph break inside a table cell (default: '/P/')",
    )
    parser.add_argument(
        "--pedigree",
        action="store_true",
        help="include provenance columns (added, updated, deprecated, ...)",
    )
    parser.add_argument(
        "--fixml",
        action="store_true",
        help="include FIXML attributes (abbreviated names, categories)",
    )
    parser.add_argument("--config", metavar="FILE", help="YAML generator config file")
    parser.add_argument("-v", "--verbose", action="store_true", help="log debug events")
    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> GeneratorConfig:
    """Merge the optional config file with CLI flags; flags win."""
    config = load_config(args.config) if args.config else GeneratorConfig()
    overrides: dict[str, object] = {}
    if args.paragraph_delimiter is not None:
        if not args.paragraph_delimiter:
            raise ConfigError(
                "--paragraph-delimiter must not be empty. "
                "Fix: use a token that does not occur in ordinary prose, e.g. '/P/'."
            )
        overrides["paragraph_delimiter"] = args.paragraph_delimiter
    if args.pedigree:
        overrides["include_pedigree"] = True
    if args.fixml:
        overrides["include_fixml"] = True
    return dataclasses.replace(config, **overrides)


def main(argv: list[str] | None = None) -> int:
    """CLI entry point. Returns 0 on success, 1 on error."""
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s %(message)s",
        stream=sys.stderr,
    )

    try:
        config = build_config(args)
        with ExitStack() as stack:
            sink: TextIO = (
                stack.enter_context(open(args.output, "w", encoding="utf-8"))
                if args.output
                else sys.stdout
            )
            json_sink: TextIO | None = (
                stack.enter_context(open(args.events, "w", encoding="utf-8"))
                if args.events
                else None
            )
            generate_markdown(args.input, sink, json_sink=json_sink, config=config)
    except (SchemaParseError, ValueError) as e:
        # ConfigError is a ValueError.
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if args.output:
        logger.info("Wrote %s", args.output)
    return 0


if __name__ == "__main__":
    sys.exit(main())
