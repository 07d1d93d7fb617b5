"""Collection walker: turns a parsed document into the files of a Bruno collection.

Nothing is written here: the walker returns GeneratedFile values and run
statistics, and the caller decides where and whether to persist them.
"""

from __future__ import annotations

import re
from typing import Any

from openapi2bruno.config import ResolvedConfig
from openapi2bruno.generator.environment import (
    build_collection_file,
    build_environment_file,
    build_folder_file,
    collection_name,
)
from openapi2bruno.generator.request import RequestFileBuilder
from openapi2bruno.naming import resolve_file_name, resolve_group_name
from openapi2bruno.parser.base import ApiOperation, GeneratedFile, GenerationStats, ResolvedIdentity
from openapi2bruno.parser.openapi import parse_operations

DEFAULT_BASE_URL = "https://api.example.com/v1"
DEFAULT_API_NAME = "API"

KNOWN_LOCATIONS = ("path", "query", "header", "cookie")

# Lower-cased names that generated folders and request files must not take
RESERVED_DIRS = ("environments",)
RESERVED_FILE_NAMES = ("folder",)

_UNSAFE_PATH_CHARS = re.compile(r'[\\/:*?"<>|]')
_SERVER_VAR = re.compile(r"\{([^{}]+)\}")


def resolve_base_url(document: dict[str, Any], environment: str, overrides: dict[str, str] | None = None) -> str:
    """Base URL for one environment.

    Priority: explicit override, host + basePath, first server, default.
    """
    if overrides and overrides.get(environment):
        return overrides[environment]

    host, base_path = document.get("host"), document.get("basePath")
    if host and base_path:
        schemes = document.get("schemes") or ["https"]
        return f"{schemes[0]}://{host}{base_path}"

    servers = document.get("servers") or []
    if servers and isinstance(servers[0], dict) and servers[0].get("url"):
        return _expand_server_url(servers[0])

    return DEFAULT_BASE_URL


def _expand_server_url(server: dict[str, Any]) -> str:
    variables = server.get("variables") or {}

    def _default(match: re.Match) -> str:
        var = variables.get(match.group(1))
        if isinstance(var, dict) and "default" in var:
            return str(var["default"])
        return match.group(0)

    return _SERVER_VAR.sub(_default, server["url"])


def api_name(document: dict[str, Any]) -> str:
    info = document.get("info") or {}
    title = info.get("title") if isinstance(info, dict) else None
    return str(title).strip() if title and str(title).strip() else DEFAULT_API_NAME


def safe_dir_name(name: str) -> str:
    """Replace characters that cannot appear in a single path component."""
    return _UNSAFE_PATH_CHARS.sub("-", name).strip() or "_"


class CollectionWalker:
    """Walks every operation once and assembles the collection's files."""

    def __init__(self, document: dict[str, Any], config: ResolvedConfig | None = None):
        self.document = document
        self.config = config or ResolvedConfig()
        self.builder = RequestFileBuilder(document)

    def generate(self, operations: list[ApiOperation] | None = None) -> tuple[list[GeneratedFile], GenerationStats]:
        """Generate all files.

        operations defaults to every operation in the document; pass a
        filtered list to generate a subset.
        """
        if operations is None:
            operations = parse_operations(self.document)

        name = collection_name(self.config.company, api_name(self.document))
        files = [GeneratedFile(path="bruno.json", content=build_collection_file(name))]
        warnings: list[str] = []

        environments = self._environment_files(warnings)
        files.extend(environments)

        group_counts: dict[str, int] = {}
        for operation, identity, folder in self.identities(operations, warnings):
            group = identity.group_name
            if group not in group_counts:
                group_counts[group] = 0
                files.append(GeneratedFile(path=f"{folder}/folder.bru", content=build_folder_file(group)))

            for p in operation.parameters:
                if p.location not in KNOWN_LOCATIONS:
                    warnings.append(
                        f"{operation.method.upper()} {operation.path}: ignored parameter "
                        f"'{p.name}' with unknown location '{p.location}'"
                    )

            files.append(GeneratedFile(
                path=f"{folder}/{identity.file_name}.bru",
                content=self.builder.build(operation, identity),
            ))
            group_counts[group] += 1

        stats = GenerationStats(
            collection_name=name,
            total_operations=sum(group_counts.values()),
            group_counts=group_counts,
            environment_count=len(environments),
            warnings=warnings,
        )
        return files, stats

    def identities(
        self,
        operations: list[ApiOperation],
        warnings: list[str] | None = None,
    ) -> list[tuple[ApiOperation, ResolvedIdentity, str]]:
        """Resolve (operation, identity, folder directory) for every operation.

        Folder directories and file names are unique case-insensitively:
        a second group mapping to a taken directory, or a repeated file name
        within a folder, gets -2, -3, ... appended and a warning.
        """
        if warnings is None:
            warnings = []

        folders: dict[str, str] = {}
        claimed = set(RESERVED_DIRS)
        used_names: dict[str, set[str]] = {}
        result = []
        for operation in operations:
            group = resolve_group_name(operation.path, operation.tags, operation.operation_id)
            if group not in folders:
                folders[group] = self._claim_folder(group, claimed, warnings)
            folder = folders[group]

            taken = used_names.setdefault(folder.lower(), set(RESERVED_FILE_NAMES))
            file_name = resolve_file_name(operation.method, operation.path, operation.operation_id)
            unique = _with_suffix(file_name, taken)
            if unique != file_name:
                warnings.append(
                    f"{operation.method.upper()} {operation.path}: file name '{file_name}' "
                    f"already used in '{group}', renamed to '{unique}'"
                )
            taken.add(unique.lower())

            result.append((operation, ResolvedIdentity(group_name=group, file_name=unique), folder))
        return result

    def _claim_folder(self, group: str, claimed: set[str], warnings: list[str]) -> str:
        base = safe_dir_name(group)
        folder = _with_suffix(base, claimed)
        if folder != base:
            warnings.append(f"Group '{group}' maps to an existing folder '{base}', using '{folder}'")
        claimed.add(folder.lower())
        return folder

    def _environment_files(self, warnings: list[str]) -> list[GeneratedFile]:
        files = []
        seen: set[str] = set()
        for env in self.config.environments:
            if env in seen:
                warnings.append(f"Duplicate environment '{env}' skipped")
                continue
            seen.add(env)
            base_url = resolve_base_url(self.document, env, self.config.base_urls)
            files.append(GeneratedFile(
                path=f"environments/{safe_dir_name(env)}.bru",
                content=build_environment_file(base_url),
            ))
        return files


def _with_suffix(name: str, taken: set[str]) -> str:
    """name, or name-2, name-3, ... whichever is not taken (case-insensitive)."""
    if name.lower() not in taken:
        return name
    n = 2
    while f"{name}-{n}".lower() in taken:
        n += 1
    return f"{name}-{n}"


def generate_collection(
    document: dict[str, Any],
    config: ResolvedConfig | None = None,
    operations: list[ApiOperation] | None = None,
) -> tuple[list[GeneratedFile], GenerationStats]:
    """Generate every file of a collection for a parsed document."""
    return CollectionWalker(document, config).generate(operations)
