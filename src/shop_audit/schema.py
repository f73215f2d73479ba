"""Structured-output schemas in the Gemini ``responseSchema`` dialect."""

import json
from typing import Any


OBJECT = "OBJECT"
STRING = "STRING"
ARRAY = "ARRAY"

PLACEHOLDER_TEXT = "Placeholder: API key is missing, content not generated."


class SchemaError(ValueError):
    """Generated text is not JSON or does not match the requested schema."""


def string(description: str | None = None) -> dict[str, Any]:
    node: dict[str, Any] = {"type": STRING}
    if description:
        node["description"] = description
    return node


def array(items: dict[str, Any], description: str | None = None) -> dict[str, Any]:
    node: dict[str, Any] = {"type": ARRAY, "items": items}
    if description:
        node["description"] = description
    return node


def obj(
    properties: dict[str, dict[str, Any]],
    required: list[str] | None = None,
    description: str | None = None,
) -> dict[str, Any]:
    """Build an OBJECT node.

    Every property is required unless ``required`` says otherwise, and the
    declared order is kept as ``propertyOrdering`` so the model emits fields
    in a stable order.
    """
    node: dict[str, Any] = {
        "type": OBJECT,
        "properties": properties,
        "required": list(properties) if required is None else list(required),
        "propertyOrdering": list(properties),
    }
    if description:
        node["description"] = description
    return node


def validate(value: Any, schema: dict[str, Any], path: str = "$") -> list[str]:
    """Return a list of problems with ``value`` against ``schema`` (empty if valid).

    Unknown properties are allowed; only declared types and required fields
    are checked.
    """
    kind = schema.get("type")
    problems: list[str] = []

    if kind == OBJECT:
        if not isinstance(value, dict):
            return [f"{path}: expected object, got {type(value).__name__}"]
        properties = schema.get("properties", {})
        for name in schema.get("required", []):
            if name not in value or value[name] is None:
                problems.append(f"{path}.{name}: required field missing")
        for name, child in properties.items():
            if name in value and value[name] is not None:
                problems.extend(validate(value[name], child, f"{path}.{name}"))
    elif kind == ARRAY:
        if not isinstance(value, list):
            return [f"{path}: expected array, got {type(value).__name__}"]
        items = schema.get("items")
        if items:
            for i, item in enumerate(value):
                problems.extend(validate(item, items, f"{path}[{i}]"))
    elif kind == STRING:
        if not isinstance(value, str):
            problems.append(f"{path}: expected string, got {type(value).__name__}")

    return problems


def placeholder(schema: dict[str, Any]) -> Any:
    """Build a value shaped like ``schema`` for degraded (no credential) mode."""
    kind = schema.get("type")
    if kind == OBJECT:
        return {
            name: placeholder(child)
            for name, child in schema.get("properties", {}).items()
        }
    if kind == ARRAY:
        return []
    return PLACEHOLDER_TEXT


def parse_structured(text: str, schema: dict[str, Any]) -> dict[str, Any]:
    """Parse generated JSON text and check it against ``schema``.

    Raises:
        SchemaError: if the text is not JSON or does not conform.
    """
    try:
        payload = json.loads(text)
    except (TypeError, json.JSONDecodeError) as e:
        raise SchemaError(f"AI response was not valid JSON: {e}") from e

    problems = validate(payload, schema)
    if problems:
        raise SchemaError("AI response did not match the expected schema: " + "; ".join(problems))
    return payload
