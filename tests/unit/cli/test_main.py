"""Tests for CLI main module."""

import json
import logging
from pathlib import Path
from unittest.mock import patch

import pytest
from click.testing import CliRunner

from validatar import __version__
from validatar.cli.main import (
    EXIT_ERROR,
    EXIT_FAILURE,
    EXIT_SUCCESS,
    ConfigContext,
    cli,
)
from validatar.core.logging import get_module_log_level
from validatar.parse import JSONParser, YAMLParser


@pytest.fixture
def runner() -> CliRunner:
    """Create a CLI runner with quiet logging."""
    return CliRunner(env={"VALIDATAR_LOGGING__LEVEL": "ERROR"})


@pytest.fixture(autouse=True)
def isolated(
    clean_logging: None, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    """Run in an empty directory so no config file is picked up."""
    work_dir = tmp_path / "work"
    work_dir.mkdir()
    monkeypatch.chdir(work_dir)
    for name in ["STRICT_PARSERS", "PARAMETERS", "LOGGING__MODULES"]:
        monkeypatch.delenv(f"VALIDATAR_{name}", raising=False)


@pytest.fixture
def suite_dir(tmp_path: Path) -> Path:
    """Directory holding one YAML suite, one JSON suite and a stray file."""
    directory = tmp_path / "suites"
    directory.mkdir()
    (directory / "b_orders.yaml").write_text(
        "name: Orders\n"
        "queries:\n"
        "  - name: Count\n"
        "    engine: hive\n"
        "    value: SELECT COUNT(*) FROM ${table} WHERE dt = '${date}'\n"
        "tests:\n"
        "  - name: NotEmpty\n"
        "    asserts: [Count.cnt > 0]\n"
        "    warnOnly: true\n"
    )
    (directory / "a_customers.json").write_text(
        json.dumps(
            {
                "name": "Customers",
                "queries": [
                    {"name": "All", "engine": "hive", "value": "SELECT * FROM ${table}"}
                ],
            }
        )
    )
    (directory / "notes.txt").write_text("not a suite")
    return directory


class TestExitCodes:
    """Tests for exit codes constants."""

    def test_exit_codes_defined(self) -> None:
        """Test that exit codes are defined correctly."""
        assert EXIT_SUCCESS == 0
        assert EXIT_FAILURE == 1
        assert EXIT_ERROR == 2


class TestConfigContext:
    """Tests for ConfigContext class."""

    def test_init(self) -> None:
        """Test ConfigContext initialization."""
        ctx = ConfigContext()

        assert ctx.settings is None
        assert ctx.config_file is None
        assert ctx.verbose is False

    def test_get_settings_loads_defaults(self) -> None:
        """Test settings are loaded on first access."""
        ctx = ConfigContext()

        settings = ctx.get_settings()

        assert settings.parameters == {}
        assert ctx.get_settings() is settings

    def test_load_config_file(self, tmp_path: Path) -> None:
        """Test loading settings from an explicit file."""
        config_file = tmp_path / "validatar.config.yaml"
        config_file.write_text("parameters:\n  table: orders\n")

        ctx = ConfigContext()
        settings = ctx.load_config(config_file)

        assert ctx.config_file == config_file
        assert settings.parameters == {"table": "orders"}


class TestCLIBasics:
    """Tests for the command group and simple commands."""

    def test_help_without_command(self, runner: CliRunner) -> None:
        """Test the group prints help when no command is given."""
        result = runner.invoke(cli, [])

        assert result.exit_code == 0
        assert "load" in result.output
        assert "parsers" in result.output

    def test_version_option(self, runner: CliRunner) -> None:
        """Test --version prints the package version."""
        result = runner.invoke(cli, ["--version"])

        assert result.exit_code == 0
        assert __version__ in result.output

    def test_version_command(self, runner: CliRunner) -> None:
        """Test the version command."""
        result = runner.invoke(cli, ["version"])

        assert result.exit_code == 0
        assert f"Validatar v{__version__}" in result.output

    def test_parsers_command(self, runner: CliRunner) -> None:
        """Test bundled formats are listed."""
        result = runner.invoke(cli, ["parsers"])

        assert result.exit_code == 0
        assert "yaml\tvalidatar.parse.yaml_parser.YAMLParser" in result.output
        assert "json\tvalidatar.parse.json_parser.JSONParser" in result.output


class TestLoggingOptions:
    """Tests for logging configured by the command group."""

    def test_log_level_from_environment(self, runner: CliRunner) -> None:
        """Test VALIDATAR_LOGGING__LEVEL sets the root log level."""
        result = runner.invoke(
            cli, ["parsers"], env={"VALIDATAR_LOGGING__LEVEL": "DEBUG"}
        )

        assert result.exit_code == EXIT_SUCCESS
        assert logging.getLogger().level == logging.DEBUG

    def test_verbose_forces_debug(self, runner: CliRunner) -> None:
        """Test -v wins over the configured level."""
        result = runner.invoke(cli, ["-v", "parsers"])

        assert result.exit_code == EXIT_SUCCESS
        assert logging.getLogger().level == logging.DEBUG

    def test_module_levels_from_config(
        self, runner: CliRunner, tmp_path: Path
    ) -> None:
        """Test per-module levels from the config file reach the loggers."""
        config_file = tmp_path / "validatar.config.yaml"
        config_file.write_text(
            "logging:\n  modules:\n    validatar.parse.registry: DEBUG\n"
        )

        result = runner.invoke(cli, ["-c", str(config_file), "parsers"])

        assert result.exit_code == EXIT_SUCCESS
        assert get_module_log_level("validatar.parse.registry") == logging.DEBUG
        assert logging.getLogger("validatar.parse.registry").isEnabledFor(
            logging.DEBUG
        )
        assert not logging.getLogger("validatar.parse.manager").isEnabledFor(
            logging.DEBUG
        )


class TestLoadCommand:
    """Tests for the load command."""

    def test_load_directory_with_parameters(
        self, runner: CliRunner, suite_dir: Path
    ) -> None:
        """Test suites are loaded in name order and parameters expanded."""
        result = runner.invoke(
            cli,
            ["load", str(suite_dir), "-p", "table=orders", "-p", "date=2026-10-18"],
        )

        assert result.exit_code == EXIT_SUCCESS
        assert result.output.index("Suite: Customers") < result.output.index(
            "Suite: Orders"
        )
        assert "SELECT * FROM orders" in result.output
        assert "WHERE dt = '2026-10-18'" in result.output
        assert "Loaded 2 suite(s)" in result.output
        assert "unresolved" not in result.output

    def test_load_warns_about_unresolved(
        self, runner: CliRunner, suite_dir: Path
    ) -> None:
        """Test placeholders without values are kept and reported."""
        result = runner.invoke(cli, ["load", str(suite_dir), "-p", "table=t"])

        assert result.exit_code == EXIT_SUCCESS
        assert "dt = '${date}'" in result.output
        assert "unresolved parameters: date" in result.output

    def test_load_parameter_value_with_equals(
        self, runner: CliRunner, suite_dir: Path
    ) -> None:
        """Test only the first '=' separates name and value."""
        result = runner.invoke(
            cli,
            ["load", str(suite_dir / "a_customers.json"), "-p", "table=a=b"],
        )

        assert result.exit_code == EXIT_SUCCESS
        assert "SELECT * FROM a=b" in result.output

    def test_load_bad_parameter_syntax(
        self, runner: CliRunner, suite_dir: Path
    ) -> None:
        """Test parameters without '=' are usage errors."""
        result = runner.invoke(cli, ["load", str(suite_dir), "-p", "table"])

        assert result.exit_code == EXIT_ERROR
        assert "NAME=VALUE" in result.output

    def test_load_missing_path(self, runner: CliRunner, tmp_path: Path) -> None:
        """Test a missing path exits with the error code."""
        result = runner.invoke(cli, ["load", str(tmp_path / "missing")])

        assert result.exit_code == EXIT_ERROR
        assert "Cannot open test suite path" in result.output

    def test_load_nothing_loaded(self, runner: CliRunner, tmp_path: Path) -> None:
        """Test a directory without suites exits with the failure code."""
        empty = tmp_path / "empty"
        empty.mkdir()

        result = runner.invoke(cli, ["load", str(empty)])

        assert result.exit_code == EXIT_FAILURE
        assert "Loaded 0 suite(s)" in result.output

    def test_load_json_output(self, runner: CliRunner, suite_dir: Path) -> None:
        """Test --json prints the expanded suites as a JSON array."""
        result = runner.invoke(
            cli,
            [
                "load",
                str(suite_dir),
                "--json",
                "-p",
                "table=orders",
                "-p",
                "date=2026-10-18",
            ],
        )

        assert result.exit_code == EXIT_SUCCESS
        data = json.loads(result.output)
        assert [s["name"] for s in data] == ["Customers", "Orders"]
        assert data[0]["queries"][0]["value"] == "SELECT * FROM orders"
        assert data[1]["tests"][0]["warnOnly"] is True
        assert data[1]["source"] == str(suite_dir / "b_orders.yaml")

    def test_load_verbose_lists_tests(
        self, runner: CliRunner, suite_dir: Path
    ) -> None:
        """Test verbose output includes tests and their assertions."""
        result = runner.invoke(cli, ["-v", "load", str(suite_dir / "b_orders.yaml")])

        assert result.exit_code == EXIT_SUCCESS
        assert "NotEmpty (warn only)" in result.output
        assert "Count.cnt > 0" in result.output

    def test_load_parameters_from_config(
        self, runner: CliRunner, suite_dir: Path, tmp_path: Path
    ) -> None:
        """Test command line parameters override configured ones."""
        config_file = tmp_path / "validatar.config.yaml"
        config_file.write_text(
            "parameters:\n  table: configured\n  date: '2026-01-01'\n"
        )

        result = runner.invoke(
            cli,
            ["-c", str(config_file), "load", str(suite_dir), "-p", "table=cli"],
        )

        assert result.exit_code == EXIT_SUCCESS
        assert "FROM cli" in result.output
        assert "dt = '2026-01-01'" in result.output

    def test_load_strict_parsers_conflict(
        self, runner: CliRunner, suite_dir: Path
    ) -> None:
        """Test duplicate parser names abort the load in strict mode."""

        class OtherYAMLParser(YAMLParser):
            pass

        with patch(
            "validatar.parse.registry.discover_parser_classes",
            return_value=[YAMLParser, JSONParser, OtherYAMLParser],
        ):
            lenient = runner.invoke(cli, ["load", str(suite_dir)])
            strict = runner.invoke(cli, ["load", str(suite_dir), "--strict-parsers"])

        assert lenient.exit_code == EXIT_SUCCESS
        assert strict.exit_code == EXIT_ERROR
        assert "Parser name 'yaml' declared by both" in strict.output
