import pydantic
import pytest

from openapi2bruno.parser.base import ApiOperation, GeneratedFile, Param, ResolvedIdentity


class TestParam:
    def test_defaults(self):
        p = Param(name="id", location="path")
        assert p.required is False
        assert p.param_type == "string"
        assert p.description == ""


class TestApiOperation:
    def test_create_minimal_operation(self):
        op = ApiOperation(method="get", path="/api/users")
        assert op.operation_id is None
        assert op.tags == []
        assert op.parameters == []
        assert op.request_body is None

    def test_params_in(self):
        op = ApiOperation(
            method="get",
            path="/users/{id}",
            parameters=[
                Param(name="id", location="path", required=True),
                Param(name="q", location="query"),
                Param(name="page", location="query"),
            ],
        )
        assert [p.name for p in op.params_in("query")] == ["q", "page"]
        assert op.params_in("header") == []

    def test_serialization_roundtrip(self):
        op = ApiOperation(
            method="delete",
            path="/api/users/{id}",
            parameters=[Param(name="id", location="path", required=True, param_type="integer")],
            tags=["users"],
        )
        op2 = ApiOperation(**op.model_dump())
        assert op2 == op


class TestImmutability:
    def test_identity_frozen(self):
        identity = ResolvedIdentity(group_name="Users", file_name="Get-Users")
        with pytest.raises(pydantic.ValidationError):
            identity.file_name = "Other"

    def test_generated_file_frozen(self):
        f = GeneratedFile(path="bruno.json", content="{}")
        with pytest.raises(pydantic.ValidationError):
            f.content = "changed"
