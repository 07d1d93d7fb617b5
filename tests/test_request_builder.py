import json

from openapi2bruno.generator.request import (
    RequestFileBuilder,
    build_request_file,
    select_json_schema,
    to_bruno_url,
)
from openapi2bruno.generator.schema import PLACEHOLDER
from openapi2bruno.parser.base import ApiOperation, Param, ResolvedIdentity

PERSON = {"type": "object", "properties": {"name": {"type": "string"}, "age": {"type": "integer"}}}

GET_USER_BRU = """meta {
  name: Get-Users-ByUserId
  type: http
  seq: 1
}

get {
  url: {{baseUrl}}/users/{{userId}}
  body: none
  auth: inherit
}

params:query {
  ~limit: {{PLACEHOLDER}}
  expand: {{PLACEHOLDER}}
}

headers {
  X-Trace: {{PLACEHOLDER}}
}

vars:pre-request {
  userId: {{PLACEHOLDER}}
}

settings {
  encodeUrl: true
  timeout: 0
}
"""

CREATE_PERSON_BRU = """meta {
  name: CreatePerson
  type: http
  seq: 1
}

post {
  url: {{baseUrl}}/people
  body: json
  auth: inherit
}

body:json {
  {
    "name": "{{PLACEHOLDER}}",
    "age": 0
  }
}

settings {
  encodeUrl: true
  timeout: 0
}
"""


def _op(method: str, path: str, parameters=None, request_body=None) -> ApiOperation:
    return ApiOperation(method=method, path=path, parameters=parameters or [], request_body=request_body)


def _identity(file_name: str) -> ResolvedIdentity:
    return ResolvedIdentity(group_name="Group", file_name=file_name)


def _body_json(text: str):
    """Extract and parse the JSON inside the body:json block."""
    start = text.index("body:json {\n") + len("body:json {\n")
    end = text.index("\n}\n", start)
    return json.loads(text[start:end])


class TestFullRender:
    def test_get_with_all_param_sections(self):
        op = _op("get", "/users/{userId}", [
            Param(name="userId", location="path", required=True),
            Param(name="limit", location="query", required=False),
            Param(name="expand", location="query", required=True),
            Param(name="X-Trace", location="header"),
        ])
        assert build_request_file(op, _identity("Get-Users-ByUserId"), {}) == GET_USER_BRU

    def test_post_with_body(self):
        op = _op("post", "/people", request_body={"application/json": PERSON})
        assert build_request_file(op, _identity("CreatePerson"), {}) == CREATE_PERSON_BRU


class TestSections:
    def test_meta_uses_resolved_file_name(self):
        op = ApiOperation(method="get", path="/a", summary="A nice summary")
        text = build_request_file(op, _identity("Get-A"), {})
        assert "name: Get-A" in text
        assert "A nice summary" not in text

    def test_no_empty_sections(self):
        text = build_request_file(_op("delete", "/items"), _identity("Delete-Items"), {})
        for block in ("params:query", "headers", "body:json", "vars:pre-request"):
            assert block not in text
        assert text.startswith("meta {")
        assert "delete {" in text
        assert "settings {" in text

    def test_cookie_params_ignored(self):
        op = _op("get", "/a", [Param(name="session", location="cookie")])
        assert "session" not in build_request_file(op, _identity("Get-A"), {})

    def test_section_order(self):
        op = _op("put", "/users/{id}", [
            Param(name="id", location="path", required=True),
            Param(name="dryRun", location="query"),
            Param(name="X-Key", location="header"),
        ], request_body={"application/json": PERSON})
        text = build_request_file(op, _identity("Put-Users-ById"), {})
        markers = ["meta {", "put {", "params:query {", "headers {", "body:json {", "vars:pre-request {", "settings {"]
        positions = [text.index(m) for m in markers]
        assert positions == sorted(positions)
        assert "\n\n\n" not in text

    def test_body_indented_under_section(self):
        op = _op("patch", "/people/{id}", request_body={"application/json": PERSON})
        text = build_request_file(op, _identity("Patch"), {})
        block = text[text.index("body:json {"):]
        body_lines = block.split("\n")[1:5]
        assert all(line.startswith("  ") for line in body_lines)


class TestBody:
    def test_get_never_has_body(self):
        op = _op("get", "/people", request_body={"application/json": PERSON})
        text = build_request_file(op, _identity("Get-People"), {})
        assert "body: none" in text
        assert "body:json" not in text

    def test_post_without_request_body(self):
        text = build_request_file(_op("post", "/ping"), _identity("Post-Ping"), {})
        assert "body: none" in text
        assert "body:json" not in text

    def test_non_json_media_type_uses_fallback(self):
        op = _op("post", "/upload", request_body={"multipart/form-data": {"type": "object"}})
        text = build_request_file(op, _identity("Upload"), {})
        assert "body: json" in text
        assert _body_json(text) == {"example": PLACEHOLDER}

    def test_declared_body_without_content_uses_fallback(self):
        op = _op("post", "/upload", request_body={})
        assert _body_json(build_request_file(op, _identity("Upload"), {})) == {"example": PLACEHOLDER}

    def test_media_type_without_schema_uses_fallback(self):
        op = _op("post", "/upload", request_body={"application/json": None})
        assert _body_json(build_request_file(op, _identity("Upload"), {})) == {"example": PLACEHOLDER}

    def test_body_resolves_refs(self):
        document = {"components": {"schemas": {"Person": PERSON}}}
        op = _op("post", "/people", request_body={"application/json": {"$ref": "#/components/schemas/Person"}})
        text = RequestFileBuilder(document).build(op, _identity("Create"))
        assert _body_json(text) == {"name": PLACEHOLDER, "age": 0}

    def test_nested_arrays_are_valid_json(self):
        schema = {"type": "object", "properties": {
            "matrix": {"type": "array", "items": {"type": "array", "items": {"type": "number"}}},
            "rows": {"type": "array", "items": {"type": "object", "properties": {"id": {"type": "integer"}}}},
        }}
        op = _op("post", "/grid", request_body={"application/json": schema})
        assert _body_json(build_request_file(op, _identity("Grid"), {})) == {"matrix": [[0.0]], "rows": [{"id": 0}]}


class TestSelectJsonSchema:
    def test_prefers_application_json(self):
        content = {"text/json": {"type": "integer"}, "application/json": {"type": "string"}}
        assert select_json_schema(content) == ("application/json", {"type": "string"})

    def test_vendor_json(self):
        content = {"application/xml": {}, "application/vnd.api+json": {"type": "string"}}
        assert select_json_schema(content)[0] == "application/vnd.api+json"

    def test_ignores_parameters_and_case(self):
        content = {"Application/JSON; charset=utf-8": {"type": "string"}}
        assert select_json_schema(content)[1] == {"type": "string"}

    def test_text_json_last(self):
        assert select_json_schema({"text/json": {"type": "string"}})[0] == "text/json"

    def test_no_match(self):
        assert select_json_schema({"application/xml": {}}) is None


class TestUrl:
    def test_path_vars(self):
        assert to_bruno_url("/a/{x}/b/{y}") == "{{baseUrl}}/a/{{x}}/b/{{y}}"

    def test_no_vars(self):
        assert to_bruno_url("/a") == "{{baseUrl}}/a"
