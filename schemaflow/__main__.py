"""CLI entry point for schemaflow.

Loads a schema module, compiles it into a graph of object and enum nodes,
lays the graph out and writes the JSON artifact consumed by node-graph
canvases. A text summary of the graph is printed to stdout.

Usage:
    python -m schemaflow schemas/shop.py
    python -m schemaflow schemas/shop.py --root OrderSchema --direction TB
"""

import argparse
import sys

from dotenv import load_dotenv

from schemaflow.config import LAYOUT_DIRECTIONS, get_log_level
from schemaflow.core import get_logger, setup_logging
from schemaflow.graph import (
    InvariantViolation,
    SchemaDepthError,
    compile_dictionary,
    compile_tree,
)
from schemaflow.layout import layout_graph
from schemaflow.loader import load_dictionary
from schemaflow.output import build_artifact, format_graph_summary, write_artifact
from schemaflow.schema import SchemaCycleError

logger = get_logger("cli")


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="schemaflow",
        description="Visualize schema modules as a graph of types and references",
    )
    parser.add_argument(
        "schema_file",
        nargs="?",
        default=None,
        help="Python module defining schemas (default: SCHEMAFLOW_SCHEMA_PATH, "
        "else the bundled examples)",
    )
    parser.add_argument(
        "--output",
        "-o",
        default=None,
        help="Artifact path (default: SCHEMAFLOW_OUTPUT_PATH)",
    )
    parser.add_argument(
        "--direction",
        "-d",
        type=str.upper,
        choices=LAYOUT_DIRECTIONS,
        default=None,
        help="Layout direction (default: SCHEMAFLOW_LAYOUT_DIRECTION)",
    )
    parser.add_argument(
        "--root",
        default=None,
        help="Only graph this schema and the schemas it references",
    )
    parser.add_argument(
        "--max-depth",
        type=int,
        default=None,
        help="Maximum nesting depth (default: SCHEMAFLOW_MAX_DEPTH)",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable debug logging",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the CLI."""
    # Load environment variables from .env file
    load_dotenv()

    args = build_parser().parse_args(argv)
    setup_logging("DEBUG" if args.verbose else get_log_level())

    result = load_dictionary(args.schema_file)
    if result.fallback:
        logger.warning(f"Showing bundled examples instead: {result.error}")

    try:
        if args.root:
            if args.root not in result.dictionary:
                logger.error(f"Unknown root schema: {args.root}")
                logger.info(f"Available schemas: {', '.join(result.dictionary)}")
                return 1
            graph = compile_tree(
                result.dictionary[args.root],
                result.dictionary,
                max_depth=args.max_depth,
            )
        else:
            graph = compile_dictionary(result.dictionary, max_depth=args.max_depth)
    except (InvariantViolation, SchemaDepthError, SchemaCycleError) as e:
        logger.error(f"Compile failed: {e}")
        return 1

    graph = layout_graph(graph, direction=args.direction)
    print(format_graph_summary(graph))

    write_artifact(build_artifact(graph, result), args.output)
    return 0


if __name__ == "__main__":
    sys.exit(main())
