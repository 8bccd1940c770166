"""
flowgraph: visual pipeline compiler.

Levels: foundation (blocks, nodes, diagram, registry) → compiler → pipeline (catalog, editor, registration).
"""

__version__ = "0.1.0"

from flowgraph.foundation import (
    BlockDefinition,
    BlockKind,
    BlockRegistry,
    DiagramModel,
    Link,
    NodeInstance,
    Port,
    PortDirection,
)
from flowgraph.compiler import PipelineCompileError, PipelineCompiler, compile_pipeline
from flowgraph.pipeline import OpenSettings, PipelineDefinition, PipelineEditor

__all__ = [
    "__version__",
    "BlockDefinition",
    "BlockKind",
    "BlockRegistry",
    "DiagramModel",
    "Link",
    "NodeInstance",
    "Port",
    "PortDirection",
    "PipelineCompileError",
    "PipelineCompiler",
    "compile_pipeline",
    "OpenSettings",
    "PipelineDefinition",
    "PipelineEditor",
]
