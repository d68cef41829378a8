"""
Exception classes for postmeta.

Every error carries a CLI exit code. Errors tied to a single content file
also carry its path so batch reports can point at the offending post.
"""

from typing import Any, List, Optional, Sequence


class PostmetaError(Exception):
    """
    Base exception class for all postmeta errors.
    """

    def __init__(self, message: str, exit_code: int = 1):
        """
        Initialize the exception.

        Args:
            message: Error message.
            exit_code: Exit code to use when this exception causes program termination.
        """
        self.message = message
        self.exit_code = exit_code
        super().__init__(message)


class ConfigurationError(PostmetaError):
    """
    Exception raised for configuration-related errors.
    """

    def __init__(
        self, message: str, config_file: Optional[str] = None, exit_code: int = 2
    ):
        self.config_file = config_file
        if config_file:
            message = f"{message} (config file: {config_file})"
        super().__init__(message, exit_code)


class NotFoundError(PostmetaError):
    """
    Exception raised when the content root does not exist.
    """

    def __init__(self, message: str, root: Optional[str] = None, exit_code: int = 3):
        self.root = root
        super().__init__(message, exit_code)


class DocumentError(PostmetaError):
    """
    Base class for errors that concern a single content file.

    These never abort a batch; the pipeline records them against the
    document that raised them.
    """

    def __init__(self, message: str, path: Optional[str] = None, exit_code: int = 4):
        """
        Initialize the exception.

        Args:
            message: Error message.
            path: Identifier of the document that caused the error.
            exit_code: Exit code to use when this exception causes program termination.
        """
        self.path = path
        self.reason = message
        if path:
            message = f"{message} (file: {path})"
        super().__init__(message, exit_code)


class DocumentReadError(DocumentError):
    """
    Exception raised when a content file cannot be read or decoded.
    """


class MalformedMetadataError(DocumentError):
    """
    Exception raised when the front-matter fences are missing or unbalanced,
    or the block between them is not a decodable mapping.
    """


class TypeMismatchError(DocumentError):
    """
    Exception raised when a front-matter value cannot be coerced to the
    type of its field.
    """

    def __init__(
        self,
        message: str,
        field: str,
        value: Any = None,
        path: Optional[str] = None,
        exit_code: int = 4,
    ):
        self.field = field
        self.value = value
        super().__init__(f"{field}: {message}", path, exit_code)


class ValidationError(DocumentError):
    """
    Exception raised when a parsed document violates one or more invariants.

    All violations found are carried in ``violations``, not only the first.
    """

    def __init__(
        self,
        violations: Sequence[Any],
        path: Optional[str] = None,
        exit_code: int = 4,
    ):
        self.violations: List[Any] = list(violations)
        count = len(self.violations)
        details = "; ".join(str(v) for v in self.violations)
        noun = "problem" if count == 1 else "problems"
        super().__init__(f"{count} {noun}: {details}", path, exit_code)

    @property
    def fields(self) -> List[str]:
        """Names of the fields that have at least one violation."""
        seen: List[str] = []
        for violation in self.violations:
            name = getattr(violation, "field", None)
            if name and name not in seen:
                seen.append(name)
        return seen
