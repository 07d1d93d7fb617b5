"""Exception hierarchy for document loading and collection generation.

Every failure the core can raise derives from ConversionError, so the CLI
only needs to catch one type to turn it into a single readable message.
"""

from typing import Any


class ConversionError(Exception):
    """Base exception for all conversion errors."""

    error_code: str = "CONVERSION_ERROR"

    def __init__(self, message: str, context: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}('{self.message}', code='{self.error_code}')"


class InputNotFoundError(ConversionError):
    """Raised when the document path does not point to a file."""

    error_code = "INPUT_NOT_FOUND"


class InputUnreadableError(ConversionError):
    """Raised when the document file exists but cannot be read."""

    error_code = "INPUT_UNREADABLE"


class DocumentParseError(ConversionError):
    """Raised when the document is not valid JSON/YAML or has no paths mapping."""

    error_code = "DOCUMENT_PARSE_ERROR"


class UnsupportedVersionError(DocumentParseError):
    """Raised for Swagger 2.0 documents."""

    error_code = "UNSUPPORTED_VERSION"


class SchemaResolutionError(ConversionError):
    """Raised when a $ref pointer cannot be walked to a node."""

    error_code = "SCHEMA_RESOLUTION_ERROR"

    def __init__(self, message: str, ref: str | None = None, context: dict[str, Any] | None = None):
        super().__init__(message, context=context)
        self.ref = ref


class SchemaCycleError(SchemaResolutionError):
    """Raised when a schema references itself, directly or transitively."""

    error_code = "SCHEMA_CYCLE"


class ConfigError(ConversionError):
    """Raised when the configuration file is missing or malformed."""

    error_code = "CONFIG_ERROR"
