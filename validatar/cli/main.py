"""Main CLI entry point for Validatar."""

import json
import sys
from pathlib import Path
from typing import Any

import click

from validatar import __version__
from validatar.common.models import TestSuite
from validatar.core.exceptions import DuplicateParserError, SuitePathError
from validatar.core.logging import configure_logging
from validatar.core.settings import ValidatarSettings, get_settings
from validatar.parse import (
    ParseManager,
    ParserRegistry,
    expand_parameters,
    find_unresolved,
)

EXIT_SUCCESS = 0
EXIT_FAILURE = 1  # Nothing could be loaded
EXIT_ERROR = 2  # Error (missing path, bad option, registry conflict)


class ConfigContext:
    """Context object to hold configuration state."""

    def __init__(self) -> None:
        self.settings: ValidatarSettings | None = None
        self.config_file: Path | None = None
        self.verbose: bool = False

    def load_config(self, config_path: Path | None = None) -> ValidatarSettings:
        """Load settings, from config_path if given.

        Without an explicit path, validatar.config.yaml is searched for in the
        current directory and its parents.
        """
        if config_path is not None and not config_path.exists():
            raise click.ClickException(f"Config file not found: {config_path}")
        self.settings = get_settings(config_file=config_path)
        self.config_file = config_path
        return self.settings

    def get_settings(self) -> ValidatarSettings:
        """Return loaded settings, loading defaults on first use."""
        if self.settings is None:
            return self.load_config()
        return self.settings


pass_config = click.make_pass_decorator(ConfigContext, ensure=True)


def _parse_parameters(
    ctx: click.Context, param: click.Parameter, values: tuple[str, ...]
) -> dict[str, str]:
    """Turn NAME=VALUE option values into a dict."""
    parameters: dict[str, str] = {}
    for item in values:
        if "=" not in item:
            raise click.BadParameter(f"expected NAME=VALUE, got '{item}'")
        key, value = item.split("=", 1)
        parameters[key] = value
    return parameters


def _suite_to_dict(suite: TestSuite) -> dict[str, Any]:
    data = suite.model_dump(mode="json", by_alias=True)
    data["source"] = str(suite.source) if suite.source else None
    return data


def _echo_suite(suite: TestSuite, verbose: bool) -> None:
    source = f" ({suite.source})" if suite.source else ""
    click.echo(f"Suite: {suite.name}{source}")
    if suite.description:
        click.echo(f"  {suite.description}")
    click.echo(f"  Queries: {len(suite.queries)}")
    for query in suite.queries:
        click.echo(f"    - {query.name} [{query.engine}]: {query.value}")
    click.echo(f"  Tests: {len(suite.tests)}")
    if verbose:
        for test in suite.tests:
            warn = " (warn only)" if test.warn_only else ""
            click.echo(f"    - {test.name}{warn}")
            for assertion in test.asserts:
                click.echo(f"        {assertion}")


@click.group(invoke_without_command=True)
@click.option(
    "--config",
    "-c",
    "config_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Path to validatar.config.yaml configuration file",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose output and debug logging",
)
@click.version_option(version=__version__, prog_name="validatar")
@click.pass_context
def cli(ctx: click.Context, config_file: Path | None, verbose: bool) -> None:
    """Validatar - load and parameterize query test suites.

    Examples:

      # Load every suite in a directory
      validatar load suites/

      # Fill in ${table} placeholders
      validatar load suites/orders.yaml -p table=orders

      # List supported file formats
      validatar parsers
    """
    ctx.ensure_object(ConfigContext)
    config_ctx = ctx.obj
    config_ctx.verbose = verbose

    settings = config_ctx.load_config(config_file)
    configure_logging(
        level="DEBUG" if verbose else settings.logging.level,
        json_output=settings.logging.json_output,
        log_file=settings.logging.file,
        module_levels=settings.logging.modules,
    )

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


@cli.command(name="version")
def version_cmd() -> None:
    """Show Validatar version information."""
    click.echo(f"Validatar v{__version__}")
    click.echo(f"Python: {sys.version.split()[0]}")
    click.echo(f"Platform: {sys.platform}")


@cli.command(name="load")
@click.argument("path", type=click.Path(path_type=Path))
@click.option(
    "--parameter",
    "-p",
    "parameters",
    multiple=True,
    callback=_parse_parameters,
    metavar="NAME=VALUE",
    help="Value for a ${NAME} placeholder (repeatable)",
)
@click.option(
    "--strict-parsers",
    is_flag=True,
    help="Fail when two parsers declare the same format name",
)
@click.option(
    "--json",
    "json_output",
    is_flag=True,
    help="Print suites as a JSON document",
)
@pass_config
def load_cmd(
    config_ctx: ConfigContext,
    path: Path,
    parameters: dict[str, str],
    strict_parsers: bool,
    json_output: bool,
) -> None:
    """Load test suites from PATH and expand query parameters.

    PATH is a suite file or a directory whose files are loaded in name order.
    Parameters given on the command line override those from configuration.

    Exit Codes:

      0 - At least one suite loaded
      1 - No suite could be loaded
      2 - Error occurred
    """
    settings = config_ctx.get_settings()
    strict = strict_parsers or settings.strict_parsers

    try:
        manager = ParseManager(registry=ParserRegistry(strict=strict))
        suites = manager.load(path)
    except (SuitePathError, DuplicateParserError) as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(EXIT_ERROR)

    parameter_map = {**settings.parameters, **parameters}
    expand_parameters(suites, parameter_map)

    unresolved = find_unresolved(suites)
    if unresolved:
        click.echo(
            f"Warning: unresolved parameters: {', '.join(unresolved)}", err=True
        )

    if json_output:
        click.echo(json.dumps([_suite_to_dict(s) for s in suites], indent=2))
    else:
        for suite in suites:
            _echo_suite(suite, config_ctx.verbose)
        click.echo(f"Loaded {len(suites)} suite(s)")

    sys.exit(EXIT_SUCCESS if suites else EXIT_FAILURE)


@cli.command(name="parsers")
@pass_config
def parsers_cmd(config_ctx: ConfigContext) -> None:
    """List available test suite formats."""
    settings = config_ctx.get_settings()
    try:
        registry = ParserRegistry(strict=settings.strict_parsers)
    except DuplicateParserError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(EXIT_ERROR)

    if not registry:
        click.echo("No parsers available")
        return

    for name, parser in registry.items():
        parser_class = type(parser)
        click.echo(f"{name}\t{parser_class.__module__}.{parser_class.__qualname__}")


def main() -> None:
    """Main entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()
