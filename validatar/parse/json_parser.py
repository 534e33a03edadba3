"""JSON test suite parser."""

import json
from typing import BinaryIO

from validatar.common.models import TestSuite
from validatar.core.exceptions import ParseError
from validatar.parse.base import Parser, build_test_suite, stream_name
from validatar.parse.registry import register_parser


@register_parser
class JSONParser(Parser):
    """Parses ``.json`` test suite files with the same layout as YAML ones."""

    @property
    def name(self) -> str:
        return "json"

    def parse(self, stream: BinaryIO) -> TestSuite:
        file_path = stream_name(stream)
        try:
            data = json.load(stream)
        except json.JSONDecodeError as e:
            raise ParseError(
                f"JSON parsing error: {e.msg}",
                line=e.lineno,
                column=e.colno,
                file_path=file_path,
            ) from e
        except UnicodeDecodeError as e:
            raise ParseError(f"Failed to decode JSON: {e}", file_path=file_path) from e
        except RecursionError as e:
            raise ParseError(
                "JSON document is nested too deeply", file_path=file_path
            ) from e

        return build_test_suite(data, file_path)
