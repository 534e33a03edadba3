"""Parameter expansion for ``${name}`` placeholders in query text.

A placeholder is ``${`` followed by the shortest run of characters up to the
next ``}`` on the same line. The inner name is looked up verbatim. Known names
are replaced by their value, unknown ones are left in the text as they are, and
replacement values are inserted literally without being scanned again.
"""

from collections.abc import Iterator, Mapping

from validatar.common.models import TestSuite

PLACEHOLDER_START = "${"
PLACEHOLDER_END = "}"

# Characters a placeholder name never spans
LINE_TERMINATORS = frozenset("\n\r\x85\u2028\u2029")


def _scan(text: str) -> Iterator[tuple[int, int, str]]:
    """Yield (start, end, name) for each placeholder, left to right.

    ``end`` is the index just past the closing brace. A ``${`` whose name
    would run across a line break is plain text, and scanning resumes right
    after it.
    """
    position = 0
    while True:
        start = text.find(PLACEHOLDER_START, position)
        if start == -1:
            return
        name_start = start + len(PLACEHOLDER_START)
        close = text.find(PLACEHOLDER_END, name_start)
        if close == -1:
            # Unterminated, everything from here on is literal
            return
        name = text[name_start:close]
        if LINE_TERMINATORS.isdisjoint(name):
            yield start, close + 1, name
            position = close + 1
        else:
            position = name_start


def find_placeholders(text: str) -> list[str]:
    """Return placeholder names in the order they appear in text."""
    return [name for _, _, name in _scan(text)]


def substitute(text: str, parameters: Mapping[str, str]) -> str:
    """Replace known placeholders in text.

    Args:
        text: Query text containing zero or more placeholders
        parameters: Parameter name to replacement value

    Returns:
        Text with every known placeholder replaced

    Example:
        >>> substitute("SELECT ${col} FROM ${t}", {"col": "id"})
        'SELECT id FROM ${t}'
    """
    parts: list[str] = []
    position = 0
    for start, end, name in _scan(text):
        parts.append(text[position:start])
        if name in parameters:
            parts.append(parameters[name])
        else:
            parts.append(text[start:end])
        position = end
    parts.append(text[position:])
    return "".join(parts)


def expand_suite_parameters(
    suite: TestSuite, parameter_map: Mapping[str, str] | None
) -> None:
    """Expand placeholders in every query of a suite, in place.

    A None parameter_map leaves the suite untouched.
    """
    if parameter_map is None:
        return
    for query in suite.queries:
        query.value = substitute(query.value, parameter_map)


def expand_parameters(
    suites: list[TestSuite], parameter_map: Mapping[str, str] | None
) -> list[TestSuite]:
    """Expand placeholders in every query of every suite, in place.

    Args:
        suites: Loaded test suites
        parameter_map: Parameter name to value, or None to skip expansion

    Returns:
        The same list object, for chaining.
    """
    for suite in suites:
        expand_suite_parameters(suite, parameter_map)
    return suites


def find_unresolved(suites: list[TestSuite]) -> list[str]:
    """Return the sorted names of placeholders still present in queries."""
    unresolved: set[str] = set()
    for suite in suites:
        for query in suite.queries:
            unresolved.update(find_placeholders(query.value))
    return sorted(unresolved)
