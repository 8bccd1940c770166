"""Pydantic model for pipeline registration.

The compiled source is registered together with a user-supplied name, description and an
optional JSON schema describing the parameters used to instantiate the pipeline.
"""
from __future__ import annotations

import json
from typing import Any, Dict

from jsonschema import Draft4Validator
from jsonschema.exceptions import SchemaError
from pydantic import BaseModel, Field, field_validator


class PipelineDefinition(BaseModel):
    """Registration payload for a compiled pipeline."""
    model_config = {"populate_by_name": True, "frozen": True}

    name: str = Field(..., description="Pipeline name")
    source: str = Field(..., description="Compiled pipeline source")
    description: str = Field(default="", description="Free-form description")
    pipeline_schema: Dict[str, Any] = Field(
        default_factory=dict,
        alias="schema",
        description="JSON schema of the instantiation parameters",
    )

    @field_validator("name", "source")
    @classmethod
    def _non_empty(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must be non-empty")
        return value

    @field_validator("pipeline_schema")
    @classmethod
    def _valid_schema(cls, value: Dict[str, Any]) -> Dict[str, Any]:
        # Draft-04 meta-schema, as the flow engine expects
        try:
            Draft4Validator.check_schema(value)
        except SchemaError as e:
            raise ValueError(f"Schema is not a valid JSON schema: {e.message}") from e
        return value

    @classmethod
    def from_form(
        cls,
        name: str,
        source: str,
        description: str = "",
        schema_text: str = "",
    ) -> PipelineDefinition:
        """Build from the raw form fields; an empty schema text means no parameters."""
        schema: Dict[str, Any] = {}
        if schema_text.strip():
            try:
                schema = json.loads(schema_text)
            except json.JSONDecodeError as e:
                raise ValueError(f"Schema is not valid JSON: {e.msg}") from e
            if not isinstance(schema, dict):
                raise ValueError("Schema must be a JSON object")
        return cls(name=name, source=source, description=description, schema=schema)

    def to_payload(self) -> Dict[str, Any]:
        """Request body for the pipeline registration endpoint."""
        return {"data": self.model_dump(by_alias=True)}
