"""Data models shared by parsers, the loader and the expander."""

from validatar.common.models import Metadata, Query, TestCase, TestSuite

__all__ = ["Metadata", "Query", "TestCase", "TestSuite"]
