"""Detect which OpenAPI dialect a parsed document uses."""

from typing import Any


def detect_version(document: Any) -> str:
    """Detect the OpenAPI dialect of a parsed document.

    Returns: 'openapi3', 'swagger2', or 'unknown'.
    """
    if not isinstance(document, dict):
        return "unknown"

    version = document.get("openapi")
    if isinstance(version, str) and version.startswith("3"):
        return "openapi3"

    if str(document.get("swagger", "")).startswith("2"):
        return "swagger2"

    # Bare 2.0 shape: top-level definitions with no components section
    if "definitions" in document and "components" not in document and "openapi" not in document:
        return "swagger2"

    if "openapi" in document:
        return "openapi3"
    return "unknown"
