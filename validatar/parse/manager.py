"""Suite loader: resolves a path into parsed test suites."""

import logging
import os
from pathlib import Path

from validatar.common.models import TestSuite
from validatar.core.exceptions import ParseError, SuitePathError
from validatar.core.logging import bind_context
from validatar.parse.registry import ParserRegistry


def file_extension(file_name: str) -> str | None:
    """Return the text after the last dot of a file name.

    Names without a dot, or whose last dot is the first character, have
    no extension.

    Example:
        >>> file_extension("a.b.c.xml")
        'xml'
        >>> file_extension(".hidden") is None
        True
    """
    index = file_name.rfind(".")
    return file_name[index + 1 :] if index > 0 else None


class ParseManager:
    """Load test suites from a file or a directory of files.

    Each file is handed to the parser registered for its extension. Files
    nobody can parse, and files whose content is malformed, are logged and
    skipped so that one bad file never blocks the rest of a directory.
    """

    def __init__(
        self,
        registry: ParserRegistry | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        """Initialize the manager.

        Args:
            registry: Parser registry to dispatch to. Defaults to a registry of
                every discovered parser.
            logger: Logger for progress and skip messages
        """
        self.registry = registry if registry is not None else ParserRegistry()
        self.logger = logger or logging.getLogger(__name__)

    def load(self, path: str | os.PathLike[str] | None) -> list[TestSuite]:
        """Load every test suite found at path.

        Args:
            path: A suite file, a directory of suite files, or None

        Returns:
            Loaded suites, in sorted file name order for directories. None
            yields an empty list.

        Raises:
            SuitePathError: If path does not exist or cannot be read
        """
        test_suites: list[TestSuite] = []
        if path is None:
            return test_suites

        path = Path(path)
        if not path.exists():
            raise SuitePathError(path)
        if not os.access(path, os.R_OK):
            raise SuitePathError(path, "permission denied")

        if path.is_file():
            self.logger.info("TestSuite parameter is a file, loading...")
            suite = self.get_test_suite(path)
            if suite is not None:
                test_suites.append(suite)
        else:
            self.logger.info(
                "TestSuite parameter is a folder, loading all files inside..."
            )
            try:
                children = sorted(path.iterdir(), key=lambda child: child.name)
            except OSError as e:
                raise SuitePathError(path, e.strerror or str(e)) from e
            for child in children:
                suite = self.get_test_suite(child)
                if suite is not None:
                    test_suites.append(suite)

        self.logger.info(f"Loaded {len(test_suites)} test suite(s) from {path}")
        return test_suites

    def get_test_suite(self, path: Path) -> TestSuite | None:
        """Parse a single file.

        Args:
            path: File to parse

        Returns:
            The parsed suite, or None if path is not a file, has no matching
            parser, or its parser fails on the content.

        Raises:
            SuitePathError: If the file cannot be opened
        """
        if not path.is_file():
            self.logger.debug(f"Skipping {path}: not a regular file")
            return None

        extension = file_extension(path.name)
        parser = self.registry.get(extension) if extension is not None else None
        if parser is None:
            self.logger.warning(
                f"Unable to parse {path}. File extension does not match any "
                "known parsers. Skipping..."
            )
            return None

        with bind_context(suite_file=str(path), parser=parser.name):
            try:
                with path.open("rb") as stream:
                    suite = parser.parse(stream)
            except ParseError as e:
                self.logger.error(f"Unable to parse {path}: {e}. Skipping...")
                return None
            except OSError as e:
                raise SuitePathError(path, e.strerror or str(e)) from e
            except Exception as e:
                self.logger.error(
                    f"Parser {parser.name} failed on {path}: {e!r}. Skipping..."
                )
                return None

        suite.source = path
        self.logger.debug(f"Parsed suite '{suite.name}' from {path}")
        return suite
