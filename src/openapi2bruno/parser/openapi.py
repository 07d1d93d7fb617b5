"""OpenAPI 3.x document loader and operation parser.

Loads a JSON or YAML document from disk, checks its top-level shape and
turns every path/method entry into an ApiOperation.
"""

import json
from pathlib import Path
from typing import Any

import yaml

from openapi2bruno.errors import (
    DocumentParseError,
    InputNotFoundError,
    InputUnreadableError,
    SchemaCycleError,
    SchemaResolutionError,
    UnsupportedVersionError,
)

from .base import HTTP_METHODS, ApiOperation, Param
from .detect import detect_version

YAML_SUFFIXES = (".yaml", ".yml")


def load_document(file_path: Path) -> dict[str, Any]:
    """Read and validate an OpenAPI document from disk."""
    if not file_path.is_file():
        raise InputNotFoundError(f"OpenAPI document not found: {file_path}")
    try:
        text = file_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise InputUnreadableError(f"Cannot read {file_path}: {e}") from e

    document = parse_document_text(text, as_yaml=file_path.suffix.lower() in YAML_SUFFIXES)
    check_document(document)
    return document


def parse_document_text(text: str, as_yaml: bool = False) -> Any:
    """Parse document text as JSON, or YAML when as_yaml is set."""
    if as_yaml:
        try:
            return yaml.safe_load(text)
        except yaml.YAMLError as e:
            raise DocumentParseError(f"Invalid YAML: {e}") from e
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise DocumentParseError(f"Invalid JSON: {e.msg} (line {e.lineno}, column {e.colno})") from e


def check_document(document: Any) -> None:
    """Reject documents this tool cannot convert."""
    if not isinstance(document, dict):
        raise DocumentParseError("Top level of the document must be a JSON object")

    if detect_version(document) == "swagger2":
        raise UnsupportedVersionError(
            "Swagger 2.0 documents are not supported. "
            "Convert the document to OpenAPI 3.x first (for example with swagger2openapi)."
        )

    if not isinstance(document.get("paths"), dict):
        raise DocumentParseError("Document has no 'paths' object")


def resolve_ref(document: dict[str, Any], ref: str) -> Any:
    """Walk an internal '#/a/b/c' pointer through the document.

    Raises SchemaResolutionError for external pointers or missing segments.
    """
    if not isinstance(ref, str) or not ref.startswith("#"):
        raise SchemaResolutionError(
            f"Cannot resolve '{ref}': only internal '#/...' references are supported", ref=ref
        )

    node: Any = document
    walked: list[str] = []
    for raw in ref[1:].split("/"):
        if not raw:
            continue
        segment = raw.replace("~1", "/").replace("~0", "~")
        if isinstance(node, dict) and segment in node:
            node = node[segment]
        elif isinstance(node, list) and segment.isdigit() and int(segment) < len(node):
            node = node[int(segment)]
        else:
            raise SchemaResolutionError(
                f"Cannot resolve '{ref}': '{segment}' not found",
                ref=ref,
                context={"resolved": "#/" + "/".join(walked)},
            )
        walked.append(segment)
    return node


def get_schema_type(schema: Any, default: str | None = None) -> str | None:
    """The schema's 'type'; for an OpenAPI 3.1 list like ['string', 'null'], the first non-null entry."""
    if not isinstance(schema, dict):
        return default
    schema_type = schema.get("type")
    if isinstance(schema_type, list):
        schema_type = next((t for t in schema_type if t != "null"), None)
    return schema_type if isinstance(schema_type, str) else default


def deref(document: dict[str, Any], node: Any) -> Any:
    """Follow $ref chains until a non-reference node is reached."""
    seen: list[str] = []
    while isinstance(node, dict) and "$ref" in node:
        ref = node["$ref"]
        if ref in seen:
            raise SchemaCycleError(f"Reference cycle: {' -> '.join(seen + [ref])}", ref=ref)
        seen.append(ref)
        node = resolve_ref(document, ref)
    return node


def parse_operations(document: dict[str, Any]) -> list[ApiOperation]:
    """Parse every supported path/method entry, in document order."""
    operations = []
    for path, path_item in document.get("paths", {}).items():
        if not isinstance(path_item, dict):
            continue
        shared = _parse_parameters(document, path_item.get("parameters", []))

        for method in HTTP_METHODS:
            operation = path_item.get(method)
            if not isinstance(operation, dict):
                continue

            own = _parse_parameters(document, operation.get("parameters", []))
            operations.append(
                ApiOperation(
                    method=method,
                    path=path,
                    operation_id=operation.get("operationId") or None,
                    tags=[str(t) for t in operation.get("tags", []) or []],
                    summary=operation.get("summary", "") or "",
                    description=operation.get("description", "") or "",
                    parameters=_merge_parameters(shared, own),
                    request_body=_parse_request_body(document, operation.get("requestBody")),
                )
            )
    return operations


def _parse_parameters(document: dict[str, Any], params: list[Any]) -> list[Param]:
    result = []
    for p in params or []:
        p = deref(document, p)
        if not isinstance(p, dict) or "name" not in p:
            continue
        schema = deref(document, p.get("schema") or {})
        result.append(
            Param(
                name=str(p["name"]),
                location=p.get("in", "query"),
                required=bool(p.get("required", False)),
                param_type=get_schema_type(schema, default="string"),
                description=p.get("description", "") or "",
            )
        )
    return result


def _merge_parameters(shared: list[Param], own: list[Param]) -> list[Param]:
    """Path-item parameters first, overridden by operation parameters with the same (name, in)."""
    overridden = {(p.name, p.location) for p in own}
    return [p for p in shared if (p.name, p.location) not in overridden] + own


def _parse_request_body(document: dict[str, Any], body: Any) -> dict[str, Any] | None:
    if not body:
        return None
    body = deref(document, body)
    if not isinstance(body, dict):
        return None
    content = body.get("content") or {}
    return {
        media_type: media.get("schema")
        for media_type, media in content.items()
        if isinstance(media, dict)
    }
