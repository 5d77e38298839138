"""Command-line interface for turning change ops into Cypher statements."""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

from cypherops.config import CypherOpsConfig
from cypherops.errors import CypherOpsError
from cypherops.parsing.classifier import entity_kind
from cypherops.query.assembler import QueryAssembler


def setup_logging(verbose: bool = False) -> None:
    """Configure logging for CLI.

    Args:
        verbose: Enable verbose (DEBUG) logging
    """
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stderr,
    )


def load_config(args: argparse.Namespace) -> CypherOpsConfig:
    """Load configuration from .env, environment variables and flags.

    Args:
        args: Command-line arguments

    Returns:
        Configuration for the assembler
    """
    # Load .env file if it exists
    load_dotenv()

    config = CypherOpsConfig()
    if getattr(args, "no_escape", False):
        config.escape_strings = False
    return config


def read_ops(source: str, jsonl: bool = False) -> List[dict]:
    """Read a batch of ops from a file or stdin.

    Args:
        source: File path, or '-' for stdin
        jsonl: Whether the input holds one op per line instead of a JSON array

    Returns:
        List of op dictionaries

    Raises:
        ValueError: If the input is not valid JSON or not a list of ops
    """
    if source == "-":
        text = sys.stdin.read()
    else:
        text = Path(source).read_text(encoding="utf-8")

    try:
        if jsonl:
            ops = [json.loads(line) for line in text.splitlines() if line.strip()]
        else:
            ops = json.loads(text)
    except json.JSONDecodeError as e:
        raise ValueError(f"Cannot parse ops from {source}: {e}") from e

    if not isinstance(ops, list):
        raise ValueError(f"Expected a list of ops in {source}, got {type(ops).__name__}")

    return ops


def cmd_convert(args: argparse.Namespace) -> int:
    """Convert a batch of ops into statements and print them as JSON.

    Args:
        args: Command-line arguments

    Returns:
        Exit code (0 for success, 1 for failure)
    """
    setup_logging(args.verbose)
    logger = logging.getLogger(__name__)

    if args.input != "-" and not Path(args.input).exists():
        logger.error(f"File not found: {args.input}")
        return 1

    try:
        config = load_config(args)
        ops = read_ops(args.input, jsonl=args.jsonl)

        logger.info(f"Converting {len(ops)} ops from {args.input}")
        result = QueryAssembler(config).assemble(ops)

        output = json.dumps(result.to_dict(), indent=2)
        if args.output:
            Path(args.output).write_text(output + "\n", encoding="utf-8")
            logger.info(f"Wrote statements to {args.output}")
        else:
            print(output)

        if result.unsupported:
            logger.warning(f"Skipped {len(result.unsupported)} unsupported refs")
        return 0

    except (CypherOpsError, ValueError, OSError) as e:
        logger.error(f"Error converting ops: {e}", exc_info=args.verbose)
        return 1


def cmd_classify(args: argparse.Namespace) -> int:
    """Print the entity kind of each ref.

    Args:
        args: Command-line arguments

    Returns:
        Exit code
    """
    setup_logging(args.verbose)

    for ref in args.refs:
        print(f"{ref}\t{entity_kind(ref).value}")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point.

    Args:
        argv: Arguments to parse instead of sys.argv

    Returns:
        Exit code
    """
    parser = argparse.ArgumentParser(
        description="cypherops: translate key/value change ops into Cypher statements",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable verbose (DEBUG) logging"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # convert command
    parser_convert = subparsers.add_parser(
        "convert", help="Convert a batch of ops into MERGE and relationship statements"
    )
    parser_convert.add_argument("input", help="Path to ops JSON file, or '-' for stdin")
    parser_convert.add_argument(
        "--jsonl", action="store_true", help="Input holds one JSON op per line"
    )
    parser_convert.add_argument("--output", help="Write the JSON result to this file")
    parser_convert.add_argument(
        "--no-escape",
        action="store_true",
        help="Interpolate strings without escaping (legacy output)",
    )
    parser_convert.set_defaults(func=cmd_convert)

    # classify command
    parser_classify = subparsers.add_parser(
        "classify", help="Show whether refs are pages, lists or components"
    )
    parser_classify.add_argument("refs", nargs="+", help="Refs to classify")
    parser_classify.set_defaults(func=cmd_classify)

    args = parser.parse_args(argv)

    if not hasattr(args, "func"):
        parser.print_help()
        return 1

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
