"""Data models for parsed OpenAPI operations and generated output.

The parser turns a raw OpenAPI document into these models; the generators
consume them and produce GeneratedFile values for the CLI to persist.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

HTTP_METHODS = ("get", "post", "put", "delete", "patch", "options", "head")


class Param(BaseModel):
    """A single operation parameter (path, query, header, or cookie)."""

    model_config = ConfigDict(frozen=True)

    name: str
    location: str  # path / query / header / cookie
    required: bool = False
    param_type: str = "string"
    description: str = ""


class ApiOperation(BaseModel):
    """One HTTP method bound to one path template."""

    model_config = ConfigDict(frozen=True)

    method: str  # lower-case: get / post / put / ...
    path: str  # /users/{userId}
    operation_id: str | None = None
    tags: list[str] = Field(default_factory=list)
    summary: str = ""
    description: str = ""
    parameters: list[Param] = Field(default_factory=list)
    request_body: dict[str, Any] | None = None  # {media_type: schema}

    def params_in(self, location: str) -> list[Param]:
        return [p for p in self.parameters if p.location == location]


class ResolvedIdentity(BaseModel):
    """Group (folder) and file name resolved for one operation."""

    model_config = ConfigDict(frozen=True)

    group_name: str
    file_name: str


class GeneratedFile(BaseModel):
    """A file path relative to the collection root plus its text content."""

    model_config = ConfigDict(frozen=True)

    path: str
    content: str


class GenerationStats(BaseModel):
    """Summary of one generation run."""

    model_config = ConfigDict(frozen=True)

    collection_name: str
    total_operations: int
    group_counts: dict[str, int]
    environment_count: int
    warnings: list[str] = Field(default_factory=list)
