"""Schema materializer: expands an OpenAPI schema into an example value tree.

Objects become dicts (declared property order kept), arrays become a
single-element list, primitives become fixed placeholders. The result is
shaped correctly up front, so json.dumps can serialize it directly.
"""

from __future__ import annotations

from typing import Any

from openapi2bruno.errors import SchemaCycleError
from openapi2bruno.parser.openapi import get_schema_type, resolve_ref

PLACEHOLDER = "{{PLACEHOLDER}}"

_PRIMITIVES: dict[str, Any] = {
    "string": PLACEHOLDER,
    "integer": 0,
    "number": 0.0,
    "boolean": False,
}


def materialize(schema: dict[str, Any] | None, document: dict[str, Any]) -> Any:
    """Build an example value for a schema node.

    Returns None when schema is None. Raises SchemaResolutionError for a
    broken $ref and SchemaCycleError for a schema that references itself.
    """
    if schema is None:
        return None
    return _materialize(schema, document, ())


def _materialize(schema: Any, document: dict[str, Any], stack: tuple[str, ...]) -> Any:
    if not isinstance(schema, dict):
        return PLACEHOLDER

    if "$ref" in schema:
        ref = schema["$ref"]
        if ref in stack:
            chain = " -> ".join(stack + (ref,))
            raise SchemaCycleError(f"Self-referencing schema is not supported: {chain}", ref=ref)
        return _materialize(resolve_ref(document, ref), document, stack + (ref,))

    schema_type = get_schema_type(schema)

    if schema_type == "object":
        result = {}
        for name, prop in (schema.get("properties") or {}).items():
            if prop is None:
                continue
            result[name] = _materialize(prop, document, stack)
        return result

    if schema_type == "array":
        items = schema.get("items")
        if items is None:
            return []
        return [_materialize(items, document, stack)]

    if schema_type is None:
        composed = _materialize_composition(schema, document, stack)
        if composed is not None:
            return composed

    return _PRIMITIVES.get(schema_type, PLACEHOLDER)


def _materialize_composition(schema: dict[str, Any], document: dict[str, Any], stack: tuple[str, ...]) -> Any:
    """Handle untyped allOf / oneOf / anyOf nodes; None if the node has none."""
    if schema.get("allOf"):
        merged: dict[str, Any] = {}
        for part in schema["allOf"]:
            value = _materialize(part, document, stack)
            if isinstance(value, dict):
                merged.update(value)
            elif not merged:
                return value
        return merged

    for key in ("oneOf", "anyOf"):
        options = schema.get(key)
        if options:
            return _materialize(options[0], document, stack)

    return None
