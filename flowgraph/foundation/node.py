"""
Diagram node: one dropped block instance on the canvas.

- node_id (unique in the diagram), block name and kind, property bag, position.
- Ports are derived from the kind; links are maintained by DiagramModel.
"""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional, Tuple

from flowgraph.foundation.block import BlockKind
from flowgraph.foundation.port import Port, PortDirection


class NodeInstance:
    """
    Place in the diagram: unique node_id and exactly one block (name + kind).
    Holds the user-edited properties; does not hold links or callbacks.
    """

    __slots__ = ("_node_id", "_name", "_block_type", "_properties", "position", "_ports")

    def __init__(
        self,
        node_id: str,
        name: str,
        block_type: BlockKind,
        *,
        properties: Optional[Mapping[str, Any]] = None,
        position: Tuple[float, float] = (0, 0),
    ) -> None:
        if not node_id or not node_id.strip():
            raise ValueError("node_id must be non-empty")
        if not name or not name.strip():
            raise ValueError("name must be non-empty")
        self._node_id = node_id.strip()
        self._name = name
        self._block_type = BlockKind(block_type)
        self._properties: Dict[str, Any] = dict(properties or {})
        self.position = (position[0], position[1])
        self._ports = self._block_type.declare_ports()

    @property
    def node_id(self) -> str:
        return self._node_id

    @property
    def name(self) -> str:
        return self._name

    @property
    def block_type(self) -> BlockKind:
        return self._block_type

    @property
    def properties(self) -> Dict[str, Any]:
        """Copy of the property bag."""
        return dict(self._properties)

    def set_properties(self, properties: Mapping[str, Any]) -> None:
        self._properties = dict(properties)

    # --- Ports ---

    @property
    def ports(self) -> List[Port]:
        return list(self._ports)

    def get_input_ports(self) -> List[Port]:
        return [p for p in self._ports if p.is_input]

    def get_output_ports(self) -> List[Port]:
        return [p for p in self._ports if p.is_output]

    def get_port(self, direction: PortDirection, index: int = 0) -> Optional[Port]:
        """Port by direction and index among ports of that direction, or None."""
        matching = [p for p in self._ports if p.direction == direction]
        if 0 <= index < len(matching):
            return matching[index]
        return None

    def __repr__(self) -> str:
        return (
            f"NodeInstance(node_id={self.node_id!r}, name={self.name!r}, "
            f"block_type={self.block_type.value!r})"
        )
