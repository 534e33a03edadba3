"""YAML test suite parser built on ruamel.yaml."""

from typing import BinaryIO

from ruamel.yaml import YAML
from ruamel.yaml.error import MarkedYAMLError, YAMLError

from validatar.common.models import TestSuite
from validatar.core.exceptions import ParseError
from validatar.parse.base import Parser, build_test_suite, stream_name
from validatar.parse.registry import register_parser


@register_parser
class YAMLParser(Parser):
    """Parses ``.yaml`` test suite files.

    Example document:

        name: Orders
        queries:
          - name: Count
            engine: hive
            value: "SELECT COUNT(*) AS cnt FROM ${table}"
        tests:
          - name: NotEmpty
            asserts:
              - Count.cnt > 0
    """

    def __init__(self) -> None:
        self.yaml = YAML(typ="safe", pure=True)

    @property
    def name(self) -> str:
        return "yaml"

    def parse(self, stream: BinaryIO) -> TestSuite:
        file_path = stream_name(stream)
        try:
            data = self.yaml.load(stream)
        except MarkedYAMLError as e:
            # ruamel marks are zero based
            line = e.problem_mark.line + 1 if e.problem_mark else None
            column = e.problem_mark.column + 1 if e.problem_mark else None
            raise ParseError(
                f"YAML parsing error: {e.problem}",
                line=line,
                column=column,
                file_path=file_path,
            ) from e
        except (YAMLError, UnicodeDecodeError) as e:
            raise ParseError(f"Failed to parse YAML: {e}", file_path=file_path) from e
        except RecursionError as e:
            raise ParseError(
                "YAML document is nested too deeply", file_path=file_path
            ) from e

        if data is None:
            raise ParseError("Empty YAML document", file_path=file_path)

        return build_test_suite(data, file_path)
