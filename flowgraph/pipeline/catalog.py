"""Block catalog: parse the catalog response and prepare it for the registry."""
from __future__ import annotations

import copy
import logging
from typing import Any, Iterable, List, Mapping

from flowgraph.foundation.block import BlockDefinition, BlockKind

logger = logging.getLogger(__name__)

CONTAINER_BLOCK = "container"


def parse_catalog(raw: Iterable[Mapping[str, Any]]) -> List[BlockDefinition]:
    """[{"name", "type", "schema"}, ...] -> BlockDefinitions (fails on the first bad entry)."""
    return [BlockDefinition.from_dict(entry) for entry in raw]


def _without_type_property(schema: Mapping[str, Any]) -> dict:
    schema = copy.deepcopy(dict(schema))
    properties = schema.get("properties")
    if isinstance(properties, dict):
        properties.pop("type", None)
    return schema


def normalize_catalog(blocks: Iterable[BlockDefinition]) -> List[BlockDefinition]:
    """
    Expand the generic container block into its three kinds.

    The container is published once as producer_consumer with a "type" setting; on the
    canvas it is offered as producer, producer_consumer and consumer instead, and the
    serializer writes its type. Without a container the list is returned unchanged.
    """
    blocks = list(blocks)
    container = next(
        (b for b in blocks if b.name == CONTAINER_BLOCK and b.type == BlockKind.PRODUCER_CONSUMER),
        None,
    )
    if container is None:
        return blocks
    schema = _without_type_property(container.schema)
    variants = [
        BlockDefinition(CONTAINER_BLOCK, kind, copy.deepcopy(schema))
        for kind in (BlockKind.PRODUCER_CONSUMER, BlockKind.CONSUMER, BlockKind.PRODUCER)
    ]
    logger.debug("Expanded %r into %d block kinds", CONTAINER_BLOCK, len(variants))
    return [b for b in blocks if b.name != CONTAINER_BLOCK] + variants
