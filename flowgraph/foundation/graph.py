"""
Diagram model: arena of nodes plus links stored as value tuples.

- Nodes (node_id -> NodeInstance), links (source_node, source_port, target_node, target_port)
  where ports are indexes among the node's ports of that direction.
- Edits are validated when they happen (existing nodes, OUT -> IN, no self-links).
  Ports may hold several links; pipeline shape rules are checked by the compiler.
- Serialize structure (config) with schema_version; from_config rebuilds through the same checks.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Optional, Set

from flowgraph.foundation.block import BlockKind
from flowgraph.foundation.node import NodeInstance
from flowgraph.foundation.port import PortDirection

logger = logging.getLogger(__name__)

# Schema version for config roundtrip and future migrations
DIAGRAM_CONFIG_SCHEMA_VERSION = "1.0"


class DiagramLockedError(RuntimeError):
    """Raised on a structural edit while the diagram is locked (settings form open)."""


@dataclass(frozen=True)
class Link:
    """Single link: (source_node, source_port) -> (target_node, target_port)."""

    source_node: str
    target_node: str
    source_port: int = 0
    target_port: int = 0

    def __post_init__(self) -> None:
        for name in ("source_node", "target_node"):
            v = getattr(self, name)
            if not v or not v.strip():
                raise ValueError(f"{name} must be non-empty")
        for name in ("source_port", "target_port"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must be a non-negative port index")

    def to_config(self) -> Dict[str, Any]:
        return {
            "source_node": self.source_node,
            "source_port": self.source_port,
            "target_node": self.target_node,
            "target_port": self.target_port,
        }


class DiagramModel:
    """
    Everything currently on the canvas: nodes and the links between their ports.
    Single owner, mutated in place by user edits; the compiler only reads it.
    """

    def __init__(self, diagram_id: Optional[str] = None) -> None:
        self._diagram_id = diagram_id or "diagram"
        self._nodes: Dict[str, NodeInstance] = {}
        self._links: List[Link] = []
        self._in_links_by_node: Dict[str, List[Link]] = {}
        self._out_links_by_node: Dict[str, List[Link]] = {}
        self._locked = False

    @property
    def diagram_id(self) -> str:
        return self._diagram_id

    @property
    def node_ids(self) -> Set[str]:
        return set(self._nodes)

    @property
    def nodes(self) -> List[NodeInstance]:
        """Nodes in insertion order."""
        return list(self._nodes.values())

    def __len__(self) -> int:
        return len(self._nodes)

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._nodes

    def __iter__(self) -> Iterator[NodeInstance]:
        return iter(self.nodes)

    # --- Lock ---

    @property
    def locked(self) -> bool:
        return self._locked

    def set_locked(self, locked: bool = True) -> None:
        self._locked = locked

    def _check_unlocked(self) -> None:
        if self._locked:
            raise DiagramLockedError(f"Diagram {self._diagram_id!r} is locked")

    # --- Nodes ---

    def add_node(self, node: NodeInstance) -> str:
        self._check_unlocked()
        if node.node_id in self._nodes:
            raise ValueError(f"Node already exists: {node.node_id}")
        self._nodes[node.node_id] = node
        self._in_links_by_node.setdefault(node.node_id, [])
        self._out_links_by_node.setdefault(node.node_id, [])
        logger.debug("Added node %s (%s)", node.node_id, node.name)
        return node.node_id

    def remove_node(self, node_id: str) -> NodeInstance:
        """Remove a node and every link touching it."""
        self._check_unlocked()
        node = self._nodes.get(node_id)
        if node is None:
            raise ValueError(f"Node not found: {node_id}")
        touching = self._in_links_by_node.get(node_id, []) + self._out_links_by_node.get(node_id, [])
        for link in touching:
            self._drop_link(link)
        del self._nodes[node_id]
        self._in_links_by_node.pop(node_id, None)
        self._out_links_by_node.pop(node_id, None)
        logger.debug("Removed node %s and %d link(s)", node_id, len(touching))
        return node

    def get_node(self, node_id: str) -> Optional[NodeInstance]:
        return self._nodes.get(node_id)

    def get_nodes_by_type(self, block_type: BlockKind) -> List[NodeInstance]:
        return [n for n in self._nodes.values() if n.block_type == block_type]

    # --- Links ---

    def add_link(self, link: Link) -> None:
        self._check_unlocked()
        if link in self._links:
            return  # idempotent
        self._validate_link(link)
        self._links.append(link)
        self._in_links_by_node.setdefault(link.target_node, []).append(link)
        self._out_links_by_node.setdefault(link.source_node, []).append(link)
        logger.debug("Linked %s -> %s", link.source_node, link.target_node)

    def connect(self, source_node: str, target_node: str) -> Link:
        """Link the out-port of source_node to the in-port of target_node."""
        link = Link(source_node, target_node)
        self.add_link(link)
        return link

    def remove_link(self, link: Link) -> None:
        self._check_unlocked()
        if link not in self._links:
            raise ValueError(f"Link not found: {link}")
        self._drop_link(link)

    def _drop_link(self, link: Link) -> None:
        self._links.remove(link)
        self._in_links_by_node[link.target_node].remove(link)
        self._out_links_by_node[link.source_node].remove(link)

    def _validate_link(self, link: Link) -> None:
        if link.source_node not in self._nodes:
            raise ValueError(f"Source node not found: {link.source_node}")
        if link.target_node not in self._nodes:
            raise ValueError(f"Target node not found: {link.target_node}")
        if link.source_node == link.target_node:
            raise ValueError(f"Cannot link node {link.source_node} to itself")
        sp = self._nodes[link.source_node].get_port(PortDirection.OUT, link.source_port)
        tp = self._nodes[link.target_node].get_port(PortDirection.IN, link.target_port)
        if sp is None:
            raise ValueError(f"Out port #{link.source_port} not found on node {link.source_node}")
        if tp is None:
            raise ValueError(f"In port #{link.target_port} not found on node {link.target_node}")
        if not sp.compatible_with(tp):
            raise ValueError(f"Ports incompatible: {link.source_node}.{sp.name} -> {link.target_node}.{tp.name}")

    def get_links_in(self, node_id: str) -> List[Link]:
        return list(self._in_links_by_node.get(node_id, []))

    def get_links_out(self, node_id: str, port_index: Optional[int] = None) -> List[Link]:
        links = self._out_links_by_node.get(node_id, [])
        if port_index is None:
            return list(links)
        return [e for e in links if e.source_port == port_index]

    def get_links(self) -> List[Link]:
        return list(self._links)

    # --- Serialization: structure (config) ---

    def to_config(self) -> Dict[str, Any]:
        """Structure of the diagram: schema_version, nodes with properties and position, links."""
        nodes_cfg = [
            {
                "node_id": node.node_id,
                "name": node.name,
                "type": node.block_type.value,
                "properties": node.properties,
                "position": list(node.position),
            }
            for node in self._nodes.values()
        ]
        return {
            "schema_version": DIAGRAM_CONFIG_SCHEMA_VERSION,
            "diagram_id": self._diagram_id,
            "nodes": nodes_cfg,
            "links": [link.to_config() for link in self._links],
        }

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> DiagramModel:
        """Build a diagram from config: nodes first, then links (validated like user edits)."""
        version = config.get("schema_version", DIAGRAM_CONFIG_SCHEMA_VERSION)
        if version != DIAGRAM_CONFIG_SCHEMA_VERSION:
            raise ValueError(
                f"Unsupported diagram schema_version {version!r}; expected {DIAGRAM_CONFIG_SCHEMA_VERSION!r}"
            )
        d = cls(diagram_id=config.get("diagram_id", "diagram"))
        for nc in config.get("nodes", []):
            position = nc.get("position") or (0, 0)
            d.add_node(NodeInstance(
                nc["node_id"],
                nc["name"],
                BlockKind(nc["type"]),
                properties=nc.get("properties") or {},
                position=(position[0], position[1]),
            ))
        for lc in config.get("links", []):
            d.add_link(Link(
                source_node=lc["source_node"],
                target_node=lc["target_node"],
                source_port=lc.get("source_port", 0),
                target_port=lc.get("target_port", 0),
            ))
        return d
