"""Validatar exceptions."""

from pathlib import Path


class ValidatarError(Exception):
    """Base exception for all Validatar errors."""


class RegistryError(ValidatarError):
    """Base exception for parser registry errors."""


class DuplicateParserError(RegistryError):
    """Two parsers declared the same format name."""

    def __init__(self, name: str, existing: type, replacement: type):
        self.name = name
        self.existing = existing
        self.replacement = replacement
        super().__init__(
            f"Parser name '{name}' declared by both "
            f"{existing.__qualname__} and {replacement.__qualname__}"
        )


class LoaderError(ValidatarError):
    """Base exception for loader errors."""


class SuitePathError(LoaderError):
    """A test suite path does not exist or cannot be opened."""

    def __init__(self, path: str | Path, reason: str = "not found"):
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"Cannot open test suite path {self.path}: {reason}")


class ParseError(LoaderError):
    """Malformed test suite content, with optional location information."""

    def __init__(
        self,
        message: str,
        line: int | None = None,
        column: int | None = None,
        file_path: str | None = None,
    ):
        self.message = message
        self.line = line
        self.column = column
        self.file_path = file_path

        location_parts = []
        if file_path:
            location_parts.append(f"File: {file_path}")
        if line is not None:
            location_parts.append(f"Line: {line}")
        if column is not None:
            location_parts.append(f"Column: {column}")

        if location_parts:
            full_message = f"{', '.join(location_parts)}: {message}"
        else:
            full_message = message

        super().__init__(full_message)
