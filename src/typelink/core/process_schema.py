"""JSON Schema definitions for typelink process definition documents.

A process document lists the operation nodes of one process, their typed
ports and any explicit wiring. Everything else is inferred by the linker.

Example usage:
    >>> from typelink.core import validate_process
    >>>
    >>> doc = {
    ...     "name": "align",
    ...     "nodes": [
    ...         {"alias": "read", "operation": "read-fastq",
    ...          "outputs": [{"name": "reads", "type": "Fastq"}]},
    ...         {"alias": "align", "operation": "bwa-mem",
    ...          "inputs": [{"name": "reads", "type": "Fastq"}],
    ...          "outputs": [{"name": "bam", "type": "Bam"}]},
    ...     ],
    ... }
    >>> validate_process(doc)  # No exception raised

Nested processes are written inline with a ``process`` key in place of
``operation``; their ports come from the nested process's own boundary.
"""

import json
from typing import Any, Union

import jsonschema
from jsonschema import Draft7Validator
from jsonschema import ValidationError as JsonSchemaValidationError


class ValidationError(Exception):
    """Validation error with a field path and an optional suggestion.

    Attributes:
        message (str): The validation error message
        path (str): Dotted path to the invalid field (e.g., "nodes[0].alias")
        suggestion (str): Optional suggestion for fixing the error
    """

    def __init__(self, message: str, path: str = "", suggestion: str = ""):
        self.message = message
        self.path = path
        self.suggestion = suggestion

        full_message = "Validation error"
        if path:
            full_message += f" at {path}"
        full_message += f": {message}"
        if suggestion:
            full_message += f"\n{suggestion}"

        super().__init__(full_message)


PORT_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {
        "name": {"type": "string", "minLength": 1, "description": "Property name of the port"},
        "type": {"type": "string", "minLength": 1, "description": "Data type; matching is by exact equality"},
    },
    "required": ["name", "type"],
    "additionalProperties": False,
}

LINK_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {
        "property": {"type": "string", "description": "Input property of this node being fed"},
        "source": {"type": "string", "description": "Alias of the producing node"},
        "source_property": {
            "type": "string",
            "description": "Output property of the source (defaults to its only output of the matching type)",
        },
    },
    "required": ["property", "source"],
    "additionalProperties": False,
}

PROCESS_SCHEMA: dict[str, Any] = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "definitions": {
        "process": {
            "type": "object",
            "properties": {
                "name": {"type": "string", "description": "Human-readable process name"},
                "nodes": {
                    "type": "array",
                    "items": {"$ref": "#/definitions/node"},
                    "minItems": 1,
                },
            },
            "required": ["nodes"],
            "additionalProperties": False,
        },
        "node": {
            "type": "object",
            "properties": {
                "alias": {"type": "string", "minLength": 1, "description": "Unique alias within the process"},
                "operation": {"type": "string", "description": "Identifier of the operation to run"},
                "params": {"type": "object", "additionalProperties": True},
                "process": {"$ref": "#/definitions/process"},
                "inputs": {"type": "array", "items": PORT_SCHEMA, "default": []},
                "outputs": {"type": "array", "items": PORT_SCHEMA, "default": []},
                "links": {"type": "array", "items": LINK_SCHEMA, "default": []},
                "explicit_inputs": {"type": "array", "items": {"type": "string"}, "default": []},
            },
            "required": ["alias"],
            "oneOf": [{"required": ["operation"]}, {"required": ["process"]}],
            "additionalProperties": False,
        },
    },
    "$ref": "#/definitions/process",
}


def _format_path(path: list) -> str:
    """Format a jsonschema path into a readable string like "nodes[0].alias"."""
    formatted = ""
    for i, component in enumerate(path):
        if isinstance(component, int):
            formatted += f"[{component}]"
        else:
            if i > 0:
                formatted += "."
            formatted += str(component)
    return formatted or "root"


def _get_suggestion(error: JsonSchemaValidationError) -> str:
    if error.validator == "required":
        match = error.message.split("'")
        if len(match) >= 2:
            return f"Add the required field '{match[1]}'"
        return "Add the missing required field"
    elif error.validator == "type":
        expected = error.validator_value
        actual = type(error.instance).__name__
        return f"Change type from '{actual}' to '{expected}'"
    elif error.validator == "oneOf":
        return "Each node needs exactly one of 'operation' or 'process'"
    elif error.validator == "additionalProperties":
        return "Remove unknown properties or check field names"
    elif error.validator == "minItems":
        return "Add at least one node to the process"

    return ""


def validate_process(data: Union[dict[str, Any], str]) -> dict[str, Any]:
    """Validate a process definition document against the schema.

    Args:
        data: The document (dict or JSON string)

    Returns:
        The parsed document

    Raises:
        ValidationError: If the document is invalid
        ValueError: If JSON parsing fails
    """
    if isinstance(data, str):
        try:
            data = json.loads(data)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON: {e}") from e

    validator = Draft7Validator(PROCESS_SCHEMA)

    try:
        validator.check_schema(PROCESS_SCHEMA)
    except jsonschema.SchemaError as e:
        raise RuntimeError(f"Schema definition error: {e}") from e

    errors = list(validator.iter_errors(data))
    if errors:
        error = errors[0]
        raise ValidationError(
            message=error.message,
            path=_format_path(list(error.absolute_path)),
            suggestion=_get_suggestion(error),
        )

    return data  # type: ignore[return-value]
