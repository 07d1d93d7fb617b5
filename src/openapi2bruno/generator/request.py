"""Request file builder: renders one operation as a Bruno .bru request file."""

import json
import re
from fnmatch import fnmatchcase
from typing import Any

from openapi2bruno.generator.schema import PLACEHOLDER, materialize
from openapi2bruno.parser.base import ApiOperation, Param, ResolvedIdentity

BODY_METHODS = ("post", "put", "patch")

# Preference order; wildcards are fnmatch patterns
JSON_MEDIA_TYPES = ("application/json", "application/*+json", "text/json")

FALLBACK_BODY = {"example": PLACEHOLDER}

INDENT = "  "

_PATH_VAR = re.compile(r"\{([^{}]+)\}")


def select_json_schema(content: dict[str, Any]) -> tuple[str, Any] | None:
    """Return (media_type, schema) for the preferred JSON media type, or None."""
    normalized = [(mt, mt.split(";")[0].strip().lower(), schema) for mt, schema in content.items()]
    for preferred in JSON_MEDIA_TYPES:
        for media_type, bare, schema in normalized:
            if fnmatchcase(bare, preferred):
                return media_type, schema
    return None


def to_bruno_url(path: str) -> str:
    """'/users/{userId}' -> '{{baseUrl}}/users/{{userId}}'."""
    return "{{baseUrl}}" + _PATH_VAR.sub(r"{{\1}}", path)


class RequestFileBuilder:
    """Renders the sections of a .bru request file in their fixed order."""

    def __init__(self, document: dict[str, Any]):
        self.document = document

    def build(self, operation: ApiOperation, identity: ResolvedIdentity) -> str:
        body = self._body_value(operation)

        blocks = [
            self._render_meta(identity),
            self._render_request_line(operation, has_body=body is not None),
        ]
        query = operation.params_in("query")
        if query:
            blocks.append(self._render_query(query))
        headers = operation.params_in("header")
        if headers:
            blocks.append(self._render_headers(headers))
        if body is not None:
            blocks.append(self._render_body(body))
        path_vars = operation.params_in("path")
        if path_vars:
            blocks.append(self._render_path_vars(path_vars))
        blocks.append(self._render_settings())

        return "\n\n".join(blocks) + "\n"

    # -- body -----------------------------------------------------------------

    def _body_value(self, operation: ApiOperation) -> Any:
        """Example body for the operation, or None when it sends no body."""
        if operation.method.lower() not in BODY_METHODS or operation.request_body is None:
            return None

        selected = select_json_schema(operation.request_body)
        if selected is None or selected[1] is None:
            return dict(FALLBACK_BODY)

        value = materialize(selected[1], self.document)
        return dict(FALLBACK_BODY) if value is None else value

    # -- sections -------------------------------------------------------------

    def _block(self, name: str, lines: list[str]) -> str:
        inner = "".join(f"{INDENT}{line}\n" for line in lines)
        return f"{name} {{\n{inner}}}"

    def _render_meta(self, identity: ResolvedIdentity) -> str:
        return self._block("meta", [
            f"name: {identity.file_name}",
            "type: http",
            "seq: 1",
        ])

    def _render_request_line(self, operation: ApiOperation, has_body: bool) -> str:
        return self._block(operation.method.lower(), [
            f"url: {to_bruno_url(operation.path)}",
            f"body: {'json' if has_body else 'none'}",
            "auth: inherit",
        ])

    def _render_query(self, params: list[Param]) -> str:
        # '~' marks a param as disabled in Bruno
        lines = [f"{'' if p.required else '~'}{p.name}: {PLACEHOLDER}" for p in params]
        return self._block("params:query", lines)

    def _render_headers(self, params: list[Param]) -> str:
        return self._block("headers", [f"{p.name}: {PLACEHOLDER}" for p in params])

    def _render_body(self, value: Any) -> str:
        text = json.dumps(value, indent=2, ensure_ascii=False)
        return self._block("body:json", text.splitlines())

    def _render_path_vars(self, params: list[Param]) -> str:
        return self._block("vars:pre-request", [f"{p.name}: {PLACEHOLDER}" for p in params])

    def _render_settings(self) -> str:
        return self._block("settings", [
            "encodeUrl: true",
            "timeout: 0",
        ])


def build_request_file(operation: ApiOperation, identity: ResolvedIdentity, document: dict[str, Any]) -> str:
    """Render the .bru text for one operation."""
    return RequestFileBuilder(document).build(operation, identity)
