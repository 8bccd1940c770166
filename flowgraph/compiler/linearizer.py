"""Pipeline compiler: diagram -> linear pipeline source.

The backend executes a strict pipe chain (each stage consumes the previous stage's
output), so a diagram is only valid when it reduces to a simple path from one producer
to one consumer. The first violated rule is raised; the diagram is never modified.
"""
from __future__ import annotations

import logging
from typing import Any, List, Mapping, Optional

from flowgraph.compiler.errors import (
    BranchingError,
    CycleDetectedError,
    MergingError,
    MultipleProducersError,
    NoProducerError,
    PipelineCompileError,
    PipelineTooLongError,
    UnterminatedPipelineError,
)
from flowgraph.compiler.script import node_to_fragment
from flowgraph.foundation.block import BlockKind
from flowgraph.foundation.graph import DiagramModel
from flowgraph.foundation.node import NodeInstance

logger = logging.getLogger(__name__)

PIPELINE_SEPARATOR = "\n| "
DEFAULT_MAX_STEPS = 50


class PipelineCompiler:
    """Validates the diagram shape and serializes the producer -> consumer chain."""

    def __init__(
        self,
        max_steps: int = DEFAULT_MAX_STEPS,
        separator: str = PIPELINE_SEPARATOR,
        *,
        omit_empty_values: bool = False,
        reject_fan_in: bool = False,
    ):
        """
        Args:
            max_steps: Links followed from the producer before giving up.
            separator: Text placed between node fragments.
            omit_empty_values: Drop None / "" / [] / {} properties from fragments.
            reject_fan_in: Raise MergingError when a chain node has several incoming links.
        """
        if max_steps < 1:
            raise ValueError("max_steps must be >= 1")
        self.max_steps = max_steps
        self.separator = separator
        self.omit_empty_values = omit_empty_values
        self.reject_fan_in = reject_fan_in

    @classmethod
    def from_config(cls, config: Optional[Mapping[str, Any]] = None) -> PipelineCompiler:
        """Build from a full config (with a "compiler" section) or the section itself."""
        if config is None:
            return cls()
        section = config.get("compiler", config)
        return cls(
            max_steps=int(section.get("max_steps", DEFAULT_MAX_STEPS)),
            separator=str(section.get("separator", PIPELINE_SEPARATOR)),
            omit_empty_values=bool(section.get("omit_empty_values", False)),
            reject_fan_in=bool(section.get("reject_fan_in", False)),
        )

    def linearize(self, diagram: DiagramModel) -> List[NodeInstance]:
        """Ordered chain of nodes from the producer to the consumer."""
        producers = diagram.get_nodes_by_type(BlockKind.PRODUCER)
        if not producers:
            raise NoProducerError()
        if len(producers) > 1:
            raise MultipleProducersError(producers[1].node_id)

        current = producers[0]
        chain = [current]
        visited = {current.node_id}
        steps = 0

        while True:
            if current.block_type.has_out_port:
                links = diagram.get_links_out(current.node_id, port_index=0)
            else:
                links = []
            if not links:
                raise UnterminatedPipelineError(current.node_id)
            if len(links) > 1:
                raise BranchingError(current.node_id)

            next_node = diagram.get_node(links[0].target_node)
            if next_node.node_id in visited:
                raise CycleDetectedError(next_node.node_id)
            chain.append(next_node)
            visited.add(next_node.node_id)
            current = next_node

            steps += 1
            if steps > self.max_steps:
                raise PipelineTooLongError(current.node_id)
            if current.block_type == BlockKind.CONSUMER:
                break

        if self.reject_fan_in:
            for node in chain[1:]:
                if len(diagram.get_links_in(node.node_id)) > 1:
                    raise MergingError(node.node_id)
        return chain

    def compile(self, diagram: DiagramModel) -> str:
        """Pipeline source: one fragment per chain node, joined by the separator."""
        try:
            chain = self.linearize(diagram)
        except PipelineCompileError as e:
            logger.warning("Pipeline compilation failed: %s", e)
            raise
        source = self.separator.join(
            node_to_fragment(node, omit_empty_values=self.omit_empty_values) for node in chain
        )
        logger.info("Compiled pipeline of %d blocks: %s", len(chain), " | ".join(n.name for n in chain))
        return source


def compile_pipeline(diagram: DiagramModel, **kwargs: Any) -> str:
    """Compile with a one-off PipelineCompiler(**kwargs)."""
    return PipelineCompiler(**kwargs).compile(diagram)
