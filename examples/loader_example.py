"""Example demonstrating ParseManager and parameter expansion."""

from validatar.parse import ParseManager, expand_parameters, find_unresolved

# Load every suite in the fixtures directory, in file name order
manager = ParseManager()
suites = manager.load("tests/fixtures/suites")

print(f"Parsers: {', '.join(manager.registry.names())}")
print(f"Loaded {len(suites)} suite(s)")

# Fill in ${...} placeholders; names without a value stay in the query text
expand_parameters(suites, {"table": "orders", "col": "id", "region": "emea"})

for suite in suites:
    print(f"\nSuite: {suite.name} ({suite.source})")
    for query in suite.queries:
        print(f"  - {query.name} [{query.engine}]: {query.value}")

print(f"\nUnresolved: {find_unresolved(suites)}")
