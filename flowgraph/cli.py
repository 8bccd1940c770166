"""CLI entry point for flowgraph.

Usage:
    # Compile a saved diagram (JSON or YAML) to pipeline source
    python -m flowgraph compile diagram.json
    python -m flowgraph compile diagram.yaml --catalog blocks.json --set compiler.max_steps=10

    # List a block catalog the way the editor sidebar shows it
    python -m flowgraph blocks blocks.json

    # Version
    python -m flowgraph version
"""
from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional

from flowgraph import __version__
from flowgraph.compiler.errors import PipelineCompileError
from flowgraph.compiler.linearizer import PipelineCompiler
from flowgraph.config import load_config, load_document
from flowgraph.foundation.block import BlockKind
from flowgraph.foundation.graph import DiagramModel
from flowgraph.foundation.registry import BlockRegistry
from flowgraph.pipeline.catalog import normalize_catalog, parse_catalog

logger = logging.getLogger(__name__)

KIND_LABELS = {
    BlockKind.PRODUCER: "Producer",
    BlockKind.PRODUCER_CONSUMER: "Producer & consumer",
    BlockKind.CONSUMER: "Consumer",
}


def _error_text(error: Exception) -> str:
    # KeyError wraps its message in quotes
    if isinstance(error, KeyError) and error.args:
        return str(error.args[0])
    return str(error)


def _load_registry(path: str) -> BlockRegistry:
    return BlockRegistry(normalize_catalog(parse_catalog(load_document(path))))


def _setup_logging(level: str) -> None:
    logging.basicConfig(format="%(levelname)s %(name)s: %(message)s")
    # basicConfig ignores level once root has handlers
    logging.getLogger("flowgraph").setLevel(level.upper())


def _cmd_compile(args: argparse.Namespace) -> int:
    try:
        cfg = load_config(args.config, args.overrides)
        _setup_logging(str(cfg.log_level))
        diagram = DiagramModel.from_config(load_document(args.diagram))
        logger.debug("Loaded diagram %s: %d node(s), %d link(s)", args.diagram, len(diagram), len(diagram.get_links()))
        if args.catalog:
            registry = _load_registry(args.catalog)
            for node in diagram.nodes:
                if registry.get(node.name, node.block_type) is None:
                    raise KeyError(f"Unknown block {node.name!r} ({node.block_type.value}) on node {node.node_id}")
        source = PipelineCompiler.from_config(cfg).compile(diagram)
    except PipelineCompileError as e:
        print(str(e), file=sys.stderr)
        return 1
    except (KeyError, ValueError, OSError) as e:
        print(f"Error: {_error_text(e)}", file=sys.stderr)
        return 1
    print(source)
    return 0


def _cmd_blocks(args: argparse.Namespace) -> int:
    try:
        registry = _load_registry(args.catalog)
    except (KeyError, ValueError, OSError) as e:
        print(f"Error: {_error_text(e)}", file=sys.stderr)
        return 1
    for kind, blocks in registry.grouped().items():
        print(f"{KIND_LABELS[kind]}:")
        for block in blocks:
            marker = " *" if block.has_settings else ""
            print(f"  {block.name}{marker}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="flowgraph",
        description="flowgraph: compile visual block diagrams into pipeline source",
    )
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # === COMPILE ===
    compile_parser = subparsers.add_parser("compile", help="Compile a diagram file to pipeline source")
    compile_parser.add_argument("diagram", type=str, help="Diagram file (.json or .yaml)")
    compile_parser.add_argument("--catalog", type=str, default=None, help="Block catalog to check nodes against")
    compile_parser.add_argument("--config", type=str, default=None, help="YAML config file")
    compile_parser.add_argument(
        "--set", dest="overrides", action="append", default=[], metavar="KEY=VALUE",
        help="Config override, e.g. compiler.max_steps=10",
    )

    # === BLOCKS ===
    blocks_parser = subparsers.add_parser("blocks", help="List a block catalog by kind")
    blocks_parser.add_argument("catalog", type=str)

    # === VERSION ===
    subparsers.add_parser("version", help="Show version")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command == "compile":
        return _cmd_compile(args)
    if args.command == "blocks":
        return _cmd_blocks(args)
    if args.command == "version":
        print(f"flowgraph {__version__}")
        return 0
    parser.print_help()
    return 0


if __name__ == "__main__":
    sys.exit(main())
