"""Data models for test suites and their queries."""

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field


class Metadata(BaseModel):
    """Free-form key/value pair attached to a query."""

    key: str = Field(..., description="Metadata key")
    value: str = Field(..., description="Metadata value")


class Query(BaseModel):
    """A named query run by an execution engine."""

    name: str = Field(..., description="Query name, referenced by assertions")
    engine: str = Field(..., description="Execution engine that runs the query")
    value: str = Field(..., description="Raw query text, possibly templated")
    metadata: list[Metadata] = Field(
        default_factory=list, description="Engine-specific metadata"
    )

    def get_metadata(self, key: str) -> str | None:
        """Return the value of the first metadata entry with the given key."""
        for entry in self.metadata:
            if entry.key == key:
                return entry.value
        return None


class TestCase(BaseModel):
    """A set of assertions over query results."""

    __test__ = False

    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(..., description="Test name")
    description: str | None = Field(None, description="Optional test description")
    asserts: list[str] = Field(
        default_factory=list, description="Assertion expressions"
    )
    warn_only: bool = Field(
        False,
        alias="warnOnly",
        description="Report failures as warnings instead of failing the suite",
    )


class TestSuite(BaseModel):
    """Queries and the tests that check their results."""

    __test__ = False

    name: str = Field(..., description="Suite name")
    description: str | None = Field(None, description="Optional suite description")
    queries: list[Query] = Field(default_factory=list, description="Suite queries")
    tests: list[TestCase] = Field(default_factory=list, description="Suite tests")
    source: Path | None = Field(
        None, exclude=True, description="File the suite was loaded from"
    )

    def get_query(self, name: str) -> Query | None:
        """Return the query with the given name, if any."""
        for query in self.queries:
            if query.name == name:
                return query
        return None
