"""
Node -> text fragment of the pipeline source.

    name
        .key(value)
        .other_key(value)

Keys are emitted sorted (nested objects too), so deep-equal property maps give the same
fragment whatever their insertion order. Strings are JSON-quoted so distinct strings
never collide.
"""

from __future__ import annotations

import json
import math
from typing import Any, Mapping

from flowgraph.foundation.block import BlockKind
from flowgraph.foundation.node import NodeInstance

PARAM_PREFIX = "\n    ."

# Blocks whose fragment differs from "name + params"
CONTAINER_BLOCK = "container"
DYNAMIC_POOL_BLOCK = "dynamic_virtual_device_pool"
DYNAMIC_POOL_SCRIPT_NAME = "virtual_device_pool"


class UnsupportedValueError(TypeError):
    """Property value has no pipeline-source representation."""


def is_empty_value(value: Any) -> bool:
    """None, "", [] and {} count as unset."""
    if value is None:
        return True
    if isinstance(value, (str, list, tuple, dict)):
        return len(value) == 0
    return False


def _encode_key(key: Any) -> str:
    if not isinstance(key, str):
        raise UnsupportedValueError(f"Property keys must be strings, got {type(key).__name__}")
    return key if key.isidentifier() else json.dumps(key, ensure_ascii=False)


def encode_value(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str):
        return json.dumps(value, ensure_ascii=False)
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        if math.isnan(value) or math.isinf(value):
            raise UnsupportedValueError(f"Cannot encode non-finite number {value!r}")
        return json.dumps(value)
    if isinstance(value, (list, tuple)):
        return "[" + ",".join(encode_value(v) for v in value) + "]"
    if isinstance(value, Mapping):
        items = sorted(value.items(), key=lambda kv: str(kv[0]))
        return "{" + ",".join(f"{_encode_key(k)}: {encode_value(v)}" for k, v in items) + "}"
    raise UnsupportedValueError(f"Cannot encode value of type {type(value).__name__}")


def encode_params(properties: Mapping[str, Any], *, omit_empty_values: bool = False) -> str:
    parts = []
    for key in sorted(properties, key=str):
        value = properties[key]
        if omit_empty_values and is_empty_value(value):
            continue
        parts.append(f"{PARAM_PREFIX}{_encode_key(key)}({encode_value(value)})")
    return "".join(parts)


def node_to_fragment(node: NodeInstance, *, omit_empty_values: bool = False) -> str:
    """Fragment for one node: block name followed by its parameters."""
    params = encode_params(node.properties, omit_empty_values=omit_empty_values)
    if node.name == CONTAINER_BLOCK:
        return f"{node.name}{params}{PARAM_PREFIX}type({encode_value(BlockKind(node.block_type).value)})"
    if node.name == DYNAMIC_POOL_BLOCK:
        return f"{DYNAMIC_POOL_SCRIPT_NAME}{params}"
    return f"{node.name}{params}"
