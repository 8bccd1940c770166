"""
Pipeline level: catalog preparation, editor session, registration payload.
"""

from flowgraph.pipeline.catalog import normalize_catalog, parse_catalog
from flowgraph.pipeline.definition import PipelineDefinition
from flowgraph.pipeline.editor import OpenSettings, PipelineEditor

__all__ = [
    "normalize_catalog",
    "parse_catalog",
    "PipelineDefinition",
    "OpenSettings",
    "PipelineEditor",
]
