"""Parser registry: discovers parsers and indexes them by format name."""

import logging
from collections.abc import Iterable, Iterator, Mapping
from importlib.metadata import entry_points
from types import MappingProxyType

from validatar.core.exceptions import DuplicateParserError
from validatar.parse.base import Parser

logger = logging.getLogger(__name__)

# Entry point group for third-party parsers
PARSER_GROUP = "validatar.parsers"

_registered_parsers: list[type[Parser]] = []


def register_parser(parser_class: type[Parser]) -> type[Parser]:
    """Class decorator adding a parser to the built-in parser list.

    Example:
        @register_parser
        class CSVParser(Parser):
            ...
    """
    if parser_class not in _registered_parsers:
        _registered_parsers.append(parser_class)
    return parser_class


def registered_parsers() -> list[type[Parser]]:
    """Return parser classes registered with register_parser, in order."""
    return list(_registered_parsers)


def load_entry_point_parsers(group: str = PARSER_GROUP) -> list[type[Parser]]:
    """Load parser classes advertised by installed packages.

    Entry points that fail to import are logged and skipped.
    """
    classes: list[type[Parser]] = []
    for ep in entry_points(group=group):
        try:
            classes.append(ep.load())
            logger.debug(f"Discovered parser entry point '{ep.name}' ({ep.value})")
        except Exception as e:
            logger.warning(
                f"Failed to load parser entry point '{ep.name}' from "
                f"'{ep.value}': {e}"
            )
    return classes


def discover_parser_classes() -> list[type[Parser]]:
    """Return built-in parsers followed by entry point parsers."""
    return registered_parsers() + load_entry_point_parsers()


class ParserRegistry(Mapping[str, Parser]):
    """Read-only mapping from format name to parser instance.

    The registry is filled once in the constructor and never changes
    afterwards, so one instance can be shared between loaders.
    """

    def __init__(
        self,
        parser_classes: Iterable[type[Parser]] | None = None,
        strict: bool = False,
    ) -> None:
        """Instantiate and index parsers.

        Args:
            parser_classes: Parser classes to register, in order. Defaults to
                discover_parser_classes().
            strict: Raise DuplicateParserError when two parsers declare the
                same name instead of keeping the last one.

        Raises:
            DuplicateParserError: If strict and a name is declared twice.
        """
        if parser_classes is None:
            parser_classes = discover_parser_classes()

        parsers: dict[str, Parser] = {}
        for parser_class in parser_classes:
            try:
                parser = parser_class()
                name = parser.name
            except Exception as e:
                logger.warning(f"Error instantiating parser {parser_class!r}: {e}")
                continue

            existing = parsers.get(name)
            if existing is not None:
                if strict:
                    raise DuplicateParserError(name, type(existing), parser_class)
                logger.warning(
                    f"Parser {parser_class.__qualname__} replaces "
                    f"{type(existing).__qualname__} for format '{name}'"
                )
                # Re-insert so iteration follows the winning registration
                del parsers[name]

            parsers[name] = parser
            logger.info(f"Setup parser {name}")

        self._parsers: Mapping[str, Parser] = MappingProxyType(parsers)

    def __getitem__(self, name: str) -> Parser:
        return self._parsers[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._parsers)

    def __len__(self) -> int:
        return len(self._parsers)

    def __repr__(self) -> str:
        return f"ParserRegistry({list(self._parsers)!r})"

    def names(self) -> list[str]:
        """List registered format names."""
        return list(self._parsers)
