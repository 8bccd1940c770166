"""Tests for pipeline.catalog: parsing and container expansion."""

import pytest

from flowgraph.foundation.block import BlockDefinition, BlockKind
from flowgraph.pipeline.catalog import normalize_catalog, parse_catalog
from tests.foundation.helpers import RAW_CATALOG

CONTAINER = {
    "name": "container",
    "type": "producer_consumer",
    "schema": {
        "type": "object",
        "properties": {"image": {"type": "string"}, "type": {"type": "string"}},
    },
}


def test_parse_catalog() -> None:
    blocks = parse_catalog(RAW_CATALOG)
    assert [b.name for b in blocks] == [entry["name"] for entry in RAW_CATALOG]
    assert blocks[0].type is BlockKind.PRODUCER


def test_parse_catalog_bad_entry() -> None:
    with pytest.raises(ValueError, match="Unknown block type"):
        parse_catalog([{"name": "x", "type": "bogus"}])


def test_normalize_without_container_is_unchanged() -> None:
    blocks = parse_catalog(RAW_CATALOG)
    assert normalize_catalog(blocks) == blocks


def test_normalize_expands_container() -> None:
    blocks = normalize_catalog(parse_catalog(RAW_CATALOG + [CONTAINER]))
    containers = [b for b in blocks if b.name == "container"]
    assert {b.type for b in containers} == set(BlockKind)
    for b in containers:
        assert set(b.schema["properties"]) == {"image"}
    assert len(blocks) == len(RAW_CATALOG) + 3


def test_normalize_does_not_mutate_input() -> None:
    original = BlockDefinition.from_dict(CONTAINER)
    normalize_catalog([original])
    assert "type" in original.schema["properties"]


def test_container_of_other_kind_is_left_alone() -> None:
    blocks = [BlockDefinition("container", BlockKind.PRODUCER)]
    assert normalize_catalog(blocks) == blocks
