"""Shared pytest fixtures for Validatar tests."""

from collections.abc import Iterator
from pathlib import Path

import pytest

from validatar.common.models import Query, TestSuite
from validatar.core.logging import reset_logging


@pytest.fixture
def fixtures_dir() -> Path:
    """Return path to the fixtures directory."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def suites_dir(fixtures_dir: Path) -> Path:
    """Return path to the suite fixtures directory."""
    return fixtures_dir / "suites"


@pytest.fixture
def orders_suite_path(suites_dir: Path) -> Path:
    """Return path to the YAML orders suite."""
    return suites_dir / "orders.yaml"


@pytest.fixture
def customers_suite_path(suites_dir: Path) -> Path:
    """Return path to the JSON customers suite."""
    return suites_dir / "customers.json"


@pytest.fixture
def sample_parameters() -> dict[str, str]:
    """Return sample query parameters."""
    return {"col": "id", "table": "orders", "date": "2026-10-18"}


@pytest.fixture
def make_suite():
    """Return a factory building a suite from raw query texts."""

    def _make_suite(*values: str, name: str = "suite") -> TestSuite:
        return TestSuite(
            name=name,
            queries=[
                Query(name=f"q{i}", engine="hive", value=value)
                for i, value in enumerate(values)
            ],
        )

    return _make_suite


@pytest.fixture
def clean_logging() -> Iterator[None]:
    """Reset logging configuration around a test."""
    reset_logging()
    yield
    reset_logging()
