from openapi2bruno.errors import (
    ConfigError,
    ConversionError,
    DocumentParseError,
    InputNotFoundError,
    InputUnreadableError,
    SchemaCycleError,
    SchemaResolutionError,
    UnsupportedVersionError,
)


class TestErrorHierarchy:
    def test_all_are_conversion_errors(self):
        for cls in (
            ConfigError,
            DocumentParseError,
            InputNotFoundError,
            InputUnreadableError,
            SchemaCycleError,
            SchemaResolutionError,
            UnsupportedVersionError,
        ):
            assert issubclass(cls, ConversionError)

    def test_unsupported_version_is_a_parse_error(self):
        assert issubclass(UnsupportedVersionError, DocumentParseError)

    def test_cycle_is_a_resolution_error(self):
        exc = SchemaCycleError("loop", ref="#/a")
        assert isinstance(exc, SchemaResolutionError)
        assert exc.ref == "#/a"
        assert exc.error_code == "SCHEMA_CYCLE"

    def test_message_and_context(self):
        exc = InputNotFoundError("missing", context={"path": "x"})
        assert str(exc) == "missing"
        assert exc.context == {"path": "x"}
        assert "INPUT_NOT_FOUND" in repr(exc)
