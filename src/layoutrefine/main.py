"""
Command-line Runner
===================
Refines a node list stored as JSON.

Usage:
    $ python -m layoutrefine nodes.json -o refined.json --config raster.json
"""
import argparse
import logging
import sys
from typing import List, Optional

from layoutrefine.config import DEFAULT_CONFIG, load_config
from layoutrefine.logging_config import setup_logging
from layoutrefine.model.io import dump_nodes, load_nodes, save_nodes
from layoutrefine.postprocessor import GraphPostprocessor

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="layoutrefine",
        description="Pull in outliers, snap to the raster and remove overlaps of a graph layout.",
    )
    parser.add_argument("nodes", help="JSON file with the positioned nodes")
    parser.add_argument("-o", "--output", help="Write the refined nodes here instead of stdout")
    parser.add_argument("-c", "--config", help="JSON file with the raster configuration")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    parser.add_argument("--log-file", help="Additionally write the log to this file")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(level=logging.DEBUG if args.verbose else logging.INFO, log_file=args.log_file)

    try:
        config = load_config(args.config) if args.config else DEFAULT_CONFIG
        nodes = load_nodes(args.nodes)

        result = GraphPostprocessor(config).do_postprocessing(nodes)
        if not result.skipped:
            logger.info(f"Postprocessing done in {result.iterations} passes.")

        if args.output:
            save_nodes(nodes, args.output)
        else:
            sys.stdout.write(dump_nodes(nodes) + "\n")
    except (OSError, ValueError) as e:
        logger.exception(f"Postprocessing failed: {e}")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
