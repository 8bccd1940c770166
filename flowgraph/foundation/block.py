"""
Block definitions: what the catalog knows about a processing block.

- BlockKind decides which ports a node of this block exposes.
- BlockDefinition is immutable once fetched; a catalog refresh replaces the whole set.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping

from flowgraph.foundation.port import Port, in_port, out_port


class BlockKind(str, Enum):
    """Port capability of a block: emits data, consumes data, or both."""

    PRODUCER = "producer"
    CONSUMER = "consumer"
    PRODUCER_CONSUMER = "producer_consumer"

    @property
    def has_in_port(self) -> bool:
        return self in (BlockKind.CONSUMER, BlockKind.PRODUCER_CONSUMER)

    @property
    def has_out_port(self) -> bool:
        return self in (BlockKind.PRODUCER, BlockKind.PRODUCER_CONSUMER)

    def declare_ports(self) -> List[Port]:
        """Ports for a node of this kind: in-port first, then out-port."""
        ports: List[Port] = []
        if self.has_in_port:
            ports.append(in_port())
        if self.has_out_port:
            ports.append(out_port())
        return ports


@dataclass(frozen=True)
class BlockDefinition:
    """Catalog entry: name (unique per kind), kind and JSON-schema-like settings schema."""

    name: str
    type: BlockKind
    schema: Dict[str, Any] = field(default_factory=dict, hash=False)

    def __post_init__(self) -> None:
        if not self.name or not self.name.strip():
            raise ValueError("Block name must be non-empty")
        if not isinstance(self.type, BlockKind):
            object.__setattr__(self, "type", BlockKind(self.type))

    @property
    def key(self) -> tuple[BlockKind, str]:
        return (self.type, self.name)

    @property
    def has_settings(self) -> bool:
        """Blocks with an empty schema or no schema properties have nothing to configure."""
        return bool(self.schema) and bool(self.schema.get("properties"))

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> BlockDefinition:
        """Parse the catalog shape {"name", "type", "schema"}."""
        for key in ("name", "type"):
            if key not in data:
                raise KeyError(f"block definition must contain {key!r}")
        try:
            kind = BlockKind(data["type"])
        except ValueError:
            known = ", ".join(k.value for k in BlockKind)
            raise ValueError(f"Unknown block type: {data['type']!r}. Known: {known}") from None
        return cls(name=data["name"], type=kind, schema=dict(data.get("schema") or {}))

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "type": self.type.value, "schema": dict(self.schema)}
