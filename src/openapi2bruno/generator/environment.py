"""Builders for the small fixed-shape files of a collection.

Environment files, folder markers and the bruno.json collection metadata.
"""

import json

COLLECTION_IGNORE = ["node_modules", ".git"]


def build_environment_file(base_url: str) -> str:
    """Environment with a single baseUrl variable and an empty secret block."""
    return (
        "vars {\n"
        f"  baseUrl: {base_url}\n"
        "}\n"
        "vars:secret [\n"
        "\n"
        "]\n"
    )


def build_folder_file(group_name: str) -> str:
    return (
        "meta {\n"
        f"  name: {group_name}\n"
        "  type: folder\n"
        "}\n"
    )


def collection_name(company: str, api_name: str) -> str:
    return f"{company} - {api_name}"


def build_collection_file(name: str) -> str:
    """bruno.json content for the collection root."""
    data = {
        "version": "1",
        "name": name,
        "type": "collection",
        "ignore": COLLECTION_IGNORE,
    }
    return json.dumps(data, indent=2, ensure_ascii=False) + "\n"
