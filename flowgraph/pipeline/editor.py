"""Editor session: the command layer between a canvas UI and the compiler.

The UI forwards user actions (drop a block, connect two ports, click a node's settings
icon, confirm a settings form, ask for the source). Settings clicks produce an explicit
OpenSettings command instead of a callback stored on the node.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple, Union

from flowgraph.compiler.errors import PipelineCompileError
from flowgraph.compiler.linearizer import PipelineCompiler
from flowgraph.foundation.block import BlockDefinition, BlockKind
from flowgraph.foundation.graph import DiagramModel, Link
from flowgraph.foundation.node import NodeInstance
from flowgraph.foundation.registry import BlockRegistry
from flowgraph.pipeline.catalog import normalize_catalog, parse_catalog
from flowgraph.pipeline.definition import PipelineDefinition

logger = logging.getLogger(__name__)

# Dropped blocks are centred on the pointer
DROP_OFFSET = (30, 20)


@dataclass(frozen=True)
class OpenSettings:
    """Command for the UI: show the settings form of a node."""
    node_id: str
    title: str
    schema: Dict[str, Any] = field(default_factory=dict)
    initial_data: Dict[str, Any] = field(default_factory=dict)


class PipelineEditor:
    """One "new pipeline" editing session: catalog, diagram, compiled source and alerts."""

    def __init__(
        self,
        blocks: Optional[Iterable[Union[BlockDefinition, Mapping[str, Any]]]] = None,
        *,
        compiler: Optional[PipelineCompiler] = None,
        diagram: Optional[DiagramModel] = None,
    ):
        self.registry = BlockRegistry()
        self.diagram = diagram if diagram is not None else DiagramModel()
        self.compiler = compiler or PipelineCompiler()
        self.alerts: List[str] = []
        self.source = ""
        self.active_settings: Optional[OpenSettings] = None
        if blocks is not None:
            self.update_blocks(blocks)

    # --- Catalog ---

    def update_blocks(self, blocks: Iterable[Union[BlockDefinition, Mapping[str, Any]]]) -> None:
        """Install a freshly fetched catalog (raw dicts or definitions)."""
        blocks = list(blocks)
        raw = [b for b in blocks if not isinstance(b, BlockDefinition)]
        definitions = [b for b in blocks if isinstance(b, BlockDefinition)] + parse_catalog(raw)
        self.registry.update_definitions(normalize_catalog(definitions))

    def catalog_error(self, error: Exception) -> None:
        """Record a failed catalog fetch."""
        self.alerts.append(f"Couldn't retrieve block descriptions: {error}")

    def sidebar(self) -> Dict[BlockKind, List[BlockDefinition]]:
        return self.registry.grouped()

    # --- Graph edits ---

    def drop_block(
        self,
        name: str,
        position: Tuple[float, float] = (0, 0),
        block_type: Optional[BlockKind] = None,
    ) -> NodeInstance:
        node = self.registry.create_node(
            name,
            block_type,
            position=(position[0] - DROP_OFFSET[0], position[1] - DROP_OFFSET[1]),
        )
        self.diagram.add_node(node)
        return node

    def connect(self, source_node: str, target_node: str) -> Link:
        return self.diagram.connect(source_node, target_node)

    def remove_node(self, node_id: str) -> NodeInstance:
        return self.diagram.remove_node(node_id)

    # --- Settings ---

    def _definition_for(self, node: NodeInstance) -> Optional[BlockDefinition]:
        return self.registry.get(node.name, node.block_type)

    def has_settings(self, node_id: str) -> bool:
        node = self.diagram.get_node(node_id)
        if node is None:
            return False
        block = self._definition_for(node)
        return block is not None and block.has_settings

    def request_settings(self, node_id: str) -> Optional[OpenSettings]:
        """
        Settings icon clicked: lock the diagram and return the form command.
        None when the node's block is no longer in the catalog.
        """
        node = self.diagram.get_node(node_id)
        if node is None:
            raise ValueError(f"Node not found: {node_id}")
        block = self._definition_for(node)
        if block is None:
            logger.debug("No definition for %s (%s); settings not shown", node.name, node.block_type.value)
            return None
        self.diagram.set_locked(True)
        self.active_settings = OpenSettings(
            node_id=node_id,
            title=f"Settings for {node.name}",
            schema=dict(block.schema),
            initial_data=node.properties,
        )
        return self.active_settings

    def apply_settings(self, properties: Mapping[str, Any]) -> None:
        """Settings form confirmed: store the properties and unlock the diagram."""
        if self.active_settings is None:
            raise RuntimeError("No settings form is open")
        node = self.diagram.get_node(self.active_settings.node_id)
        if node is not None:
            node.set_properties(properties)
        self._close_settings()

    def cancel_settings(self) -> None:
        self._close_settings()

    def _close_settings(self) -> None:
        self.active_settings = None
        self.diagram.set_locked(False)

    # --- Source ---

    def generate_source(self) -> Optional[str]:
        """Compile the diagram; on failure record the message as an alert and return None."""
        try:
            self.source = self.compiler.compile(self.diagram)
        except PipelineCompileError as e:
            self.alerts.append(str(e))
            return None
        return self.source

    def build_definition(self, name: str, description: str = "", schema_text: str = "") -> PipelineDefinition:
        if not self.source:
            raise ValueError("Generate the pipeline source first")
        return PipelineDefinition.from_form(name, self.source, description=description, schema_text=schema_text)
