"""JSON Schema for test suite documents."""

from typing import Any

import jsonschema

TEST_SUITE_SCHEMA: dict[str, Any] = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "type": "object",
    "required": ["name"],
    "properties": {
        "name": {"type": "string", "minLength": 1},
        "description": {"type": ["string", "null"]},
        "queries": {
            "type": "array",
            "items": {
                "type": "object",
                "required": ["name", "engine", "value"],
                "properties": {
                    "name": {"type": "string", "minLength": 1},
                    "engine": {"type": "string", "minLength": 1},
                    "value": {"type": "string"},
                    "metadata": {
                        "type": "array",
                        "items": {
                            "type": "object",
                            "required": ["key", "value"],
                            "properties": {
                                "key": {"type": "string"},
                                "value": {"type": "string"},
                            },
                            "additionalProperties": False,
                        },
                    },
                },
                "additionalProperties": False,
            },
        },
        "tests": {
            "type": "array",
            "items": {
                "type": "object",
                "required": ["name"],
                "properties": {
                    "name": {"type": "string", "minLength": 1},
                    "description": {"type": ["string", "null"]},
                    "asserts": {"type": "array", "items": {"type": "string"}},
                    "warnOnly": {"type": "boolean"},
                },
                "additionalProperties": False,
            },
        },
    },
    "additionalProperties": False,
}


def validate_schema(data: Any) -> list[str]:
    """Validate data against the test suite JSON Schema.

    Args:
        data: Decoded document

    Returns:
        List of validation error messages (empty if valid)
    """
    validator = jsonschema.Draft7Validator(TEST_SUITE_SCHEMA)
    errors = []

    for error in validator.iter_errors(data):
        path = ".".join(str(p) for p in error.path) if error.path else "root"
        errors.append(f"{path}: {error.message}")

    return errors
