"""
Unit tests for the exceptions module.

This module tests the custom exception classes.
"""

from postmeta.exceptions import (
    ConfigurationError,
    DocumentError,
    DocumentReadError,
    MalformedMetadataError,
    NotFoundError,
    PostmetaError,
    TypeMismatchError,
    ValidationError,
)
from postmeta.ingestion import Violation


class TestPostmetaError:
    """Tests for the PostmetaError class."""

    def test_init(self):
        """Test initialization with a message."""
        error = PostmetaError("Test error")
        assert error.message == "Test error"
        assert error.exit_code == 1
        assert str(error) == "Test error"

    def test_init_with_exit_code(self):
        """Test initialization with a custom exit code."""
        error = PostmetaError("Test error", exit_code=42)
        assert error.exit_code == 42


class TestConfigurationError:
    """Tests for the ConfigurationError class."""

    def test_init(self):
        error = ConfigurationError("Configuration error")
        assert error.message == "Configuration error"
        assert error.exit_code == 2
        assert error.config_file is None

    def test_init_with_config_file(self):
        error = ConfigurationError("Configuration error", config_file="postmeta.toml")
        assert error.message == "Configuration error (config file: postmeta.toml)"
        assert error.config_file == "postmeta.toml"


class TestNotFoundError:
    def test_init(self):
        error = NotFoundError("Content root not found: x", root="x")
        assert error.exit_code == 3
        assert error.root == "x"
        assert isinstance(error, PostmetaError)


class TestDocumentErrors:
    """Tests for the per-document error classes."""

    def test_path_is_appended(self):
        error = MalformedMetadataError("Missing front-matter", path="posts/a.md")
        assert error.message == "Missing front-matter (file: posts/a.md)"
        assert error.reason == "Missing front-matter"
        assert error.path == "posts/a.md"
        assert error.exit_code == 4

    def test_without_path(self):
        error = DocumentReadError("Cannot read file")
        assert error.message == "Cannot read file"
        assert error.path is None

    def test_subclasses(self):
        for cls in (DocumentReadError, MalformedMetadataError):
            assert issubclass(cls, DocumentError)
        assert issubclass(TypeMismatchError, DocumentError)
        assert issubclass(ValidationError, DocumentError)

    def test_type_mismatch_names_field(self):
        error = TypeMismatchError("not a date", field="date", value="x", path="a.md")
        assert error.field == "date"
        assert error.value == "x"
        assert error.reason == "date: not a date"
        assert "date" in str(error)


class TestValidationError:
    """Tests for the ValidationError class."""

    def test_carries_all_violations(self):
        violations = [
            Violation("title", "title is missing or empty"),
            Violation("date", "date is missing"),
        ]
        error = ValidationError(violations, path="a.md")
        assert error.violations == violations
        assert error.fields == ["title", "date"]
        assert error.reason.startswith("2 problems: ")
        assert "title: title is missing or empty" in str(error)
        assert "date: date is missing" in str(error)

    def test_single_violation(self):
        error = ValidationError([Violation("title", "title is missing or empty")])
        assert error.reason == "1 problem: title: title is missing or empty"
