"""
Compile errors: one exception per structural rule.

str(error) is the message shown to the user as-is.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional


class CompileErrorKind(str, Enum):
    NO_PRODUCER = "no_producer"
    MULTIPLE_PRODUCERS = "multiple_producers"
    UNTERMINATED_PIPELINE = "unterminated_pipeline"
    BRANCHING = "branching"
    CYCLE_DETECTED = "cycle_detected"
    PIPELINE_TOO_LONG = "pipeline_too_long"
    MERGING = "merging"


class PipelineCompileError(ValueError):
    """Base class: the diagram cannot be turned into a linear pipeline."""

    kind: CompileErrorKind
    message: str = "Invalid pipeline"

    def __init__(self, node_id: Optional[str] = None) -> None:
        super().__init__(self.message)
        self.node_id = node_id

    def __str__(self) -> str:
        return self.message


class NoProducerError(PipelineCompileError):
    kind = CompileErrorKind.NO_PRODUCER
    message = "Pipelines must start with a producer block"


class MultipleProducersError(PipelineCompileError):
    kind = CompileErrorKind.MULTIPLE_PRODUCERS
    message = "Multiple producer blocks are not supported"


class UnterminatedPipelineError(PipelineCompileError):
    kind = CompileErrorKind.UNTERMINATED_PIPELINE
    message = "Pipelines must end with a consumer block"


class BranchingError(PipelineCompileError):
    kind = CompileErrorKind.BRANCHING
    message = "Multiple out connections are not supported"


class CycleDetectedError(PipelineCompileError):
    kind = CompileErrorKind.CYCLE_DETECTED
    message = "Pipelines cannot form a loop"


class PipelineTooLongError(PipelineCompileError):
    kind = CompileErrorKind.PIPELINE_TOO_LONG
    message = "Pipeline too long"


class MergingError(PipelineCompileError):
    kind = CompileErrorKind.MERGING
    message = "Multiple in connections are not supported"
