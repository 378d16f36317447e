"""Schema validation for vendoring configuration.

Schemas are JSON Schema documents stored as YAML under
``gitvendor/data/schemas/`` and validated with Draft 2020-12.
"""
from __future__ import annotations

from typing import Any, Dict, List

from jsonschema import Draft202012Validator

from gitvendor.data import read_yaml


class SchemaValidationError(ValueError):
    """Raised when a payload does not satisfy its schema."""

    def __init__(self, message: str, errors: List[str] | None = None) -> None:
        super().__init__(message)
        self.errors = list(errors or [])


def load_schema(schema_name: str) -> Dict[str, Any]:
    """Load a bundled schema.

    Automatically appends ``.schema.yaml`` when no extension is present.
    """
    if not schema_name.endswith((".yaml", ".yml")):
        schema_name = f"{schema_name}.schema.yaml"
    schema = read_yaml("schemas", schema_name)
    if not isinstance(schema, dict):
        raise ValueError(f"Schema must be a YAML mapping, got {type(schema).__name__}")
    return schema


def _format_error(error: Any) -> str:
    location = "/".join(str(p) for p in error.absolute_path)
    return f"{location or '<root>'}: {error.message}"


def validate_payload(payload: Any, schema_name: str) -> None:
    """Validate ``payload`` and raise with every error found.

    Raises:
        SchemaValidationError: If validation fails
    """
    validator = Draft202012Validator(load_schema(schema_name))
    errors = sorted(validator.iter_errors(payload), key=lambda e: list(e.absolute_path))
    if errors:
        messages = [_format_error(e) for e in errors]
        raise SchemaValidationError(
            f"Validation failed against schema '{schema_name}': {'; '.join(messages)}",
            messages,
        )


__all__ = ["SchemaValidationError", "load_schema", "validate_payload"]
