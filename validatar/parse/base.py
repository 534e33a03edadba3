"""Base parser interface and helpers shared by the bundled parsers."""

from abc import ABC, abstractmethod
from typing import Any, BinaryIO

from pydantic import ValidationError as PydanticValidationError

from validatar.common.models import TestSuite
from validatar.core.exceptions import ParseError
from validatar.parse.schema import validate_schema


class Parser(ABC):
    """Converts the bytes of one file format into a TestSuite.

    The declared ``name`` doubles as the file extension the parser handles.
    Implementations must not keep a reference to the stream after ``parse``
    returns.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Format name, matched against file extensions."""

    @abstractmethod
    def parse(self, stream: BinaryIO) -> TestSuite:
        """Parse a test suite from a binary stream.

        Args:
            stream: Open binary stream positioned at the start of the document.

        Returns:
            Parsed TestSuite.

        Raises:
            ParseError: If the content is malformed.
        """


def stream_name(stream: BinaryIO) -> str | None:
    """Return the file name behind a stream, if it has one."""
    name = getattr(stream, "name", None)
    return name if isinstance(name, str) else None


def build_test_suite(data: Any, file_path: str | None = None) -> TestSuite:
    """Validate a decoded document and build a TestSuite from it.

    Args:
        data: Decoded document (dict-like)
        file_path: Optional file path for error messages

    Returns:
        Validated TestSuite object

    Raises:
        ParseError: If schema or model validation fails
    """
    schema_errors = validate_schema(data)
    if schema_errors:
        error_msg = "Schema validation failed:\n  " + "\n  ".join(schema_errors)
        raise ParseError(error_msg, file_path=file_path)

    try:
        return TestSuite.model_validate(data)
    except PydanticValidationError as e:
        errors = []
        for error in e.errors():
            loc = ".".join(str(x) for x in error["loc"])
            errors.append(f"{loc}: {error['msg']}")

        error_msg = "Model validation failed:\n  " + "\n  ".join(errors)
        raise ParseError(error_msg, file_path=file_path) from e
