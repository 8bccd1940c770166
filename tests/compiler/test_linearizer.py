"""Tests for compiler.PipelineCompiler: chain walking and structural errors."""

import pytest

from flowgraph.compiler import (
    BranchingError,
    CompileErrorKind,
    CycleDetectedError,
    MergingError,
    MultipleProducersError,
    NoProducerError,
    PipelineCompileError,
    PipelineCompiler,
    PipelineTooLongError,
    UnterminatedPipelineError,
    compile_pipeline,
    node_to_fragment,
)
from flowgraph.config import load_config
from flowgraph.foundation.block import BlockKind
from flowgraph.foundation.graph import DiagramModel
from tests.foundation.helpers import make_chain, make_node


def _diagram(*nodes) -> DiagramModel:
    d = DiagramModel()
    for node in nodes:
        d.add_node(node)
    return d


@pytest.mark.parametrize("length", [2, 3, 5, 10])
def test_chain_compiles_in_order(length: int) -> None:
    d = make_chain(length)
    source = compile_pipeline(d)
    fragments = source.split("\n| ")
    assert len(fragments) == length
    assert fragments == [f"block_{i}" for i in range(length)]


def test_concrete_scenario() -> None:
    a = make_node("A", BlockKind.PRODUCER, "http_source", {"url": "http://x"})
    b = make_node("B", BlockKind.PRODUCER_CONSUMER, "json_mapper", {})
    c = make_node("C", BlockKind.CONSUMER, "mqtt_sink", {"topic": "t"})
    d = _diagram(c, b, a)  # insertion order must not matter
    d.connect("A", "B")
    d.connect("B", "C")
    source = PipelineCompiler().compile(d)
    expected = "\n| ".join(node_to_fragment(n) for n in (a, b, c))
    assert source == expected
    assert source == 'http_source\n    .url("http://x")\n| json_mapper\n| mqtt_sink\n    .topic("t")'


def test_empty_diagram_has_no_producer() -> None:
    with pytest.raises(NoProducerError, match="Pipelines must start with a producer block"):
        compile_pipeline(DiagramModel())


def test_producer_consumer_alone_is_not_a_producer() -> None:
    d = _diagram(make_node("M", BlockKind.PRODUCER_CONSUMER), make_node("C", BlockKind.CONSUMER))
    d.connect("M", "C")
    with pytest.raises(NoProducerError):
        compile_pipeline(d)


def test_two_producers() -> None:
    d = _diagram(make_node("P1", BlockKind.PRODUCER), make_node("P2", BlockKind.PRODUCER))
    with pytest.raises(MultipleProducersError, match="Multiple producer blocks are not supported"):
        compile_pipeline(d)


def test_two_producers_even_when_linked() -> None:
    d = make_chain(3)
    d.add_node(make_node("P2", BlockKind.PRODUCER))
    d.connect("P2", "n1")
    with pytest.raises(MultipleProducersError):
        compile_pipeline(d)


def test_producer_without_link_is_unterminated() -> None:
    d = _diagram(make_node("P", BlockKind.PRODUCER))
    with pytest.raises(UnterminatedPipelineError, match="Pipelines must end with a consumer block") as exc:
        compile_pipeline(d)
    assert exc.value.node_id == "P"


def test_chain_ending_in_producer_consumer_is_unterminated() -> None:
    d = _diagram(make_node("P", BlockKind.PRODUCER), make_node("M", BlockKind.PRODUCER_CONSUMER))
    d.connect("P", "M")
    with pytest.raises(UnterminatedPipelineError) as exc:
        compile_pipeline(d)
    assert exc.value.node_id == "M"


def test_branching_from_producer() -> None:
    d = _diagram(
        make_node("P", BlockKind.PRODUCER),
        make_node("C1", BlockKind.CONSUMER),
        make_node("C2", BlockKind.CONSUMER),
    )
    d.connect("P", "C1")
    d.connect("P", "C2")
    with pytest.raises(BranchingError, match="Multiple out connections are not supported") as exc:
        compile_pipeline(d)
    assert exc.value.node_id == "P"


def test_cycle_detected() -> None:
    d = _diagram(
        make_node("P", BlockKind.PRODUCER),
        make_node("A", BlockKind.PRODUCER_CONSUMER),
        make_node("B", BlockKind.PRODUCER_CONSUMER),
    )
    d.connect("P", "A")
    d.connect("A", "B")
    d.connect("B", "A")
    with pytest.raises(CycleDetectedError, match="Pipelines cannot form a loop") as exc:
        compile_pipeline(d)
    assert exc.value.node_id == "A"


def test_too_long() -> None:
    with pytest.raises(PipelineTooLongError, match="Pipeline too long"):
        compile_pipeline(make_chain(52))


def test_longest_allowed_chain() -> None:
    # producer + 50 links
    source = compile_pipeline(make_chain(51))
    assert len(source.split("\n| ")) == 51


def test_max_steps_is_configurable() -> None:
    compiler = PipelineCompiler(max_steps=3)
    assert compiler.compile(make_chain(4))
    with pytest.raises(PipelineTooLongError):
        compiler.compile(make_chain(5))


def test_invalid_max_steps() -> None:
    with pytest.raises(ValueError, match="max_steps"):
        PipelineCompiler(max_steps=0)


def test_fan_in_on_chain_rejected_when_enabled() -> None:
    d = make_chain(3)
    d.add_node(make_node("X", BlockKind.PRODUCER_CONSUMER))
    d.connect("X", "n2")
    with pytest.raises(MergingError, match="Multiple in connections are not supported") as exc:
        compile_pipeline(d, reject_fan_in=True)
    assert exc.value.node_id == "n2"


def test_fan_in_on_chain_allowed_by_default() -> None:
    d = make_chain(3)
    d.add_node(make_node("X", BlockKind.PRODUCER_CONSUMER))
    d.connect("X", "n2")
    source = compile_pipeline(d)
    assert source == "block_0\n| block_1\n| block_2"


def test_off_path_nodes_are_ignored() -> None:
    d = make_chain(3)
    d.add_node(make_node("X", BlockKind.PRODUCER_CONSUMER))
    d.add_node(make_node("Y", BlockKind.CONSUMER))
    d.connect("X", "Y")
    assert compile_pipeline(d) == "block_0\n| block_1\n| block_2"


def test_compile_is_idempotent_and_pure() -> None:
    d = make_chain(4)
    d.get_node("n1").set_properties({"b": 2, "a": [1, {"y": True, "x": None}]})
    before = d.to_config()
    compiler = PipelineCompiler()
    assert compiler.compile(d) == compiler.compile(d)
    assert d.to_config() == before


def test_linearize_returns_chain() -> None:
    d = make_chain(3)
    chain = PipelineCompiler().linearize(d)
    assert [n.node_id for n in chain] == ["n0", "n1", "n2"]


def test_errors_share_base_and_kind() -> None:
    with pytest.raises(PipelineCompileError) as exc:
        compile_pipeline(DiagramModel())
    assert isinstance(exc.value, ValueError)
    assert exc.value.kind is CompileErrorKind.NO_PRODUCER
    assert str(exc.value) == "Pipelines must start with a producer block"


def test_failure_is_logged(caplog: pytest.LogCaptureFixture) -> None:
    with pytest.raises(NoProducerError):
        compile_pipeline(DiagramModel())
    assert any("compilation failed" in r.getMessage() for r in caplog.records)


def test_from_config() -> None:
    cfg = load_config(overrides=["compiler.max_steps=2", "compiler.separator=' || '"])
    compiler = PipelineCompiler.from_config(cfg)
    assert compiler.max_steps == 2
    assert compiler.compile(make_chain(3)) == "block_0 || block_1 || block_2"
    assert PipelineCompiler.from_config(None).max_steps == 50
    assert PipelineCompiler.from_config({"max_steps": 7}).max_steps == 7
    assert PipelineCompiler.from_config(None).reject_fan_in is False
    assert PipelineCompiler.from_config(load_config(overrides=["compiler.reject_fan_in=true"])).reject_fan_in is True
