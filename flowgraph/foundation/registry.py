"""
Block Registry: (block_type, name) -> BlockDefinition; manufacture diagram nodes.

- update_definitions(blocks) replaces the whole catalog in one reference swap.
- create_node(name, block_type=None) -> NodeInstance with empty properties.
"""

from __future__ import annotations

import logging
import uuid
from typing import Dict, Iterable, List, Optional, Tuple

from flowgraph.foundation.block import BlockDefinition, BlockKind
from flowgraph.foundation.node import NodeInstance

logger = logging.getLogger(__name__)

# Sidebar order of the editor
KIND_ORDER = (BlockKind.PRODUCER, BlockKind.PRODUCER_CONSUMER, BlockKind.CONSUMER)


class UnknownBlockError(KeyError):
    """No definition for the requested block in the current catalog."""

    def __str__(self) -> str:
        return str(self.args[0]) if self.args else "Unknown block"


class AmbiguousBlockError(KeyError):
    """Block name exists for several kinds and no kind was given."""

    def __str__(self) -> str:
        return str(self.args[0]) if self.args else "Ambiguous block"


class BlockRegistry:
    """
    Maps (block_type, name) to the catalog definition.
    create_node(name) builds a NodeInstance using the definition's kind.
    """

    def __init__(self, blocks: Optional[Iterable[BlockDefinition]] = None) -> None:
        self._definitions: Dict[Tuple[BlockKind, str], BlockDefinition] = {}
        self.update_definitions(blocks)

    def update_definitions(self, blocks: Optional[Iterable[BlockDefinition]]) -> None:
        """
        Replace the catalog wholesale. Blocks missing from the new list can no longer be
        used for new nodes; nodes already on a diagram are unaffected.
        """
        definitions: Dict[Tuple[BlockKind, str], BlockDefinition] = {}
        for block in blocks or ():
            definitions[block.key] = block
        # Single assignment: readers see the old mapping or the new one, never a mix.
        self._definitions = definitions
        logger.debug("Block catalog updated: %d definition(s)", len(definitions))

    def get(self, name: str, block_type: Optional[BlockKind] = None) -> Optional[BlockDefinition]:
        """Definition for name (and kind, if given); None if absent or ambiguous."""
        try:
            return self._resolve(self._definitions, name, block_type)
        except KeyError:
            return None

    def resolve(self, name: str, block_type: Optional[BlockKind] = None) -> BlockDefinition:
        """Like get(), but raise UnknownBlockError / AmbiguousBlockError."""
        return self._resolve(self._definitions, name, block_type)

    @staticmethod
    def _resolve(
        definitions: Dict[Tuple[BlockKind, str], BlockDefinition],
        name: str,
        block_type: Optional[BlockKind],
    ) -> BlockDefinition:
        if block_type is not None:
            block = definitions.get((BlockKind(block_type), name))
            if block is None:
                raise UnknownBlockError(f"No such block: {name!r} ({BlockKind(block_type).value})")
            return block
        matches = [b for (_, n), b in definitions.items() if n == name]
        if not matches:
            available = ", ".join(sorted({n for _, n in definitions}))
            raise UnknownBlockError(f"No such block: {name!r}. Registered: {available}")
        if len(matches) > 1:
            kinds = ", ".join(sorted(b.type.value for b in matches))
            raise AmbiguousBlockError(f"Block {name!r} exists as {kinds}; pass block_type")
        return matches[0]

    def create_node(
        self,
        name: str,
        block_type: Optional[BlockKind] = None,
        *,
        node_id: Optional[str] = None,
        position: Tuple[float, float] = (0, 0),
    ) -> NodeInstance:
        """
        New node for a dropped block: kind copied from the definition, empty properties,
        ports derived from the kind. Does not touch any diagram.
        """
        definitions = self._definitions
        block = self._resolve(definitions, name, block_type)
        return NodeInstance(
            node_id or uuid.uuid4().hex,
            block.name,
            block.type,
            position=position,
        )

    def definitions(self) -> List[BlockDefinition]:
        return list(self._definitions.values())

    def grouped(self) -> Dict[BlockKind, List[BlockDefinition]]:
        """Definitions by kind (producer, producer_consumer, consumer), each sorted by name."""
        snapshot = list(self._definitions.values())
        return {
            kind: sorted((b for b in snapshot if b.type == kind), key=lambda b: b.name)
            for kind in KIND_ORDER
        }

    def __contains__(self, name: object) -> bool:
        return any(n == name for _, n in self._definitions)

    def __len__(self) -> int:
        return len(self._definitions)
