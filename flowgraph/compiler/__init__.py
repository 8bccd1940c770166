"""
Compiler level: diagram -> textual pipeline source.
"""

from flowgraph.compiler.errors import (
    BranchingError,
    CompileErrorKind,
    CycleDetectedError,
    MergingError,
    MultipleProducersError,
    NoProducerError,
    PipelineCompileError,
    PipelineTooLongError,
    UnterminatedPipelineError,
)
from flowgraph.compiler.linearizer import (
    DEFAULT_MAX_STEPS,
    PIPELINE_SEPARATOR,
    PipelineCompiler,
    compile_pipeline,
)
from flowgraph.compiler.script import UnsupportedValueError, encode_value, node_to_fragment

__all__ = [
    "BranchingError",
    "CompileErrorKind",
    "CycleDetectedError",
    "MergingError",
    "MultipleProducersError",
    "NoProducerError",
    "PipelineCompileError",
    "PipelineTooLongError",
    "UnterminatedPipelineError",
    "DEFAULT_MAX_STEPS",
    "PIPELINE_SEPARATOR",
    "PipelineCompiler",
    "compile_pipeline",
    "UnsupportedValueError",
    "encode_value",
    "node_to_fragment",
]
