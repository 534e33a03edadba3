"""Test suite parsing: parser registry, suite loader and parameter expansion."""

from validatar.parse.base import Parser
from validatar.parse.json_parser import JSONParser
from validatar.parse.manager import ParseManager, file_extension
from validatar.parse.parameters import (
    expand_parameters,
    expand_suite_parameters,
    find_placeholders,
    find_unresolved,
    substitute,
)
from validatar.parse.registry import (
    PARSER_GROUP,
    ParserRegistry,
    discover_parser_classes,
    register_parser,
)
from validatar.parse.yaml_parser import YAMLParser

__all__ = [
    "PARSER_GROUP",
    "JSONParser",
    "ParseManager",
    "Parser",
    "ParserRegistry",
    "YAMLParser",
    "discover_parser_classes",
    "expand_parameters",
    "expand_suite_parameters",
    "file_extension",
    "find_placeholders",
    "find_unresolved",
    "register_parser",
    "substitute",
]
