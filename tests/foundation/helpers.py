"""Catalog, node and diagram helpers for flowgraph tests."""

from typing import Any, Dict, List, Optional

from flowgraph.foundation.block import BlockDefinition, BlockKind
from flowgraph.foundation.graph import DiagramModel
from flowgraph.foundation.node import NodeInstance

RAW_CATALOG: List[Dict[str, Any]] = [
    {
        "name": "http_source",
        "type": "producer",
        "schema": {"type": "object", "properties": {"url": {"type": "string"}}},
    },
    {"name": "json_mapper", "type": "producer_consumer", "schema": {}},
    {
        "name": "mqtt_sink",
        "type": "consumer",
        "schema": {"type": "object", "properties": {"topic": {"type": "string"}}},
    },
    {"name": "to_json", "type": "producer_consumer", "schema": {"type": "object", "properties": {}}},
]


def catalog() -> List[BlockDefinition]:
    return [BlockDefinition.from_dict(entry) for entry in RAW_CATALOG]


def make_node(
    node_id: str,
    block_type: BlockKind,
    name: Optional[str] = None,
    properties: Optional[Dict[str, Any]] = None,
) -> NodeInstance:
    return NodeInstance(node_id, name or f"block_{node_id}", block_type, properties=properties)


def make_chain(length: int) -> DiagramModel:
    """producer -> mid_1 -> ... -> consumer with `length` nodes in total (length >= 2)."""
    d = DiagramModel("chain")
    ids = [f"n{i}" for i in range(length)]
    for i, nid in enumerate(ids):
        if i == 0:
            kind = BlockKind.PRODUCER
        elif i == length - 1:
            kind = BlockKind.CONSUMER
        else:
            kind = BlockKind.PRODUCER_CONSUMER
        d.add_node(make_node(nid, kind, name=f"block_{i}"))
    for src, dst in zip(ids, ids[1:]):
        d.connect(src, dst)
    return d
