"""
Foundation level: Port, BlockDefinition, NodeInstance, DiagramModel, Registry.
"""

from flowgraph.foundation.port import Port, PortDirection
from flowgraph.foundation.block import BlockDefinition, BlockKind
from flowgraph.foundation.node import NodeInstance
from flowgraph.foundation.graph import DiagramLockedError, DiagramModel, Link
from flowgraph.foundation.registry import AmbiguousBlockError, BlockRegistry, UnknownBlockError

__all__ = [
    "Port",
    "PortDirection",
    "BlockDefinition",
    "BlockKind",
    "NodeInstance",
    "DiagramLockedError",
    "DiagramModel",
    "Link",
    "AmbiguousBlockError",
    "BlockRegistry",
    "UnknownBlockError",
]
