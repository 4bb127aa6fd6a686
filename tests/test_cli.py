"""
Tests for the layered-config command line tool

Usage:
    pytest tests/test_cli.py -v
"""

import json
import logging
import os

import pytest
import yaml

from layered_config.cli import EXIT_FAILURE, EXIT_SUCCESS, create_argument_parser, main
from layered_config.logging_config import LOGGER_NAME


@pytest.fixture(autouse=True)
def reset_package_logger():
    """main() installs handlers on the package logger; drop them afterwards."""
    yield
    package_logger = logging.getLogger(LOGGER_NAME)
    package_logger.handlers.clear()
    package_logger.setLevel(logging.NOTSET)


class TestArgumentParser:
    """Test argument parsing."""

    def test_defaults(self):
        args = create_argument_parser().parse_args([])
        assert args.action == "show"
        assert args.env == "APP_ENV"
        assert args.conf == "config.yaml"
        assert args.format == "json"
        assert args.verbose is False

    def test_single_dash_long_flags(self):
        args = create_argument_parser().parse_args(
            ["-action", "show", "-env", "STAGE", "-conf", ".env", "-format", "yaml"]
        )
        assert (args.action, args.env, args.conf, args.format) == ("show", "STAGE", ".env", "yaml")

    def test_invalid_format_rejected(self):
        with pytest.raises(SystemExit):
            create_argument_parser().parse_args(["-format", "xml"])


class TestMain:
    """Test the show action end to end."""

    def test_show_json_with_profile(self, write_file, capsys):
        base = write_file("config.yaml", "APP_NAME: Base\nAPP_PORT: 8000\n")
        write_file("config-dev.yaml", "APP_PORT: 8001\n")
        os.environ["APP_ENV"] = "dev"

        assert main(["-conf", str(base)]) == EXIT_SUCCESS

        out = capsys.readouterr().out
        assert json.loads(out) == {"APP_NAME": "Base", "APP_PORT": 8001}
        assert out.endswith("\n")

    def test_show_yaml_from_dotenv(self, write_file, capsys):
        base = write_file(".env", "APP_NAME=Dotenv\nAPP_DEBUG=true\n")
        write_file(".env.qa", "APP_DEBUG=false\n")
        os.environ["STAGE"] = "qa"

        code = main(["-action=show", "-env", "STAGE", "-conf", str(base), "-format", "yaml"])

        assert code == EXIT_SUCCESS
        assert yaml.safe_load(capsys.readouterr().out) == {
            "APP_NAME": "Dotenv",
            "APP_DEBUG": False,
        }

    def test_unknown_action(self, write_file, capsys):
        base = write_file("config.yaml", "A: 1\n")
        assert main(["-action", "explode", "-conf", str(base)]) == EXIT_FAILURE
        captured = capsys.readouterr()
        assert captured.out == ""
        assert "unknown action" in captured.err

    def test_missing_file(self, tmp_path, capsys):
        assert main(["-conf", str(tmp_path / "absent.yaml")]) == EXIT_FAILURE
        captured = capsys.readouterr()
        assert captured.out == ""
        assert "absent.yaml" in captured.err

    def test_malformed_file(self, write_file, capsys):
        base = write_file("config.json", "{oops")
        assert main(["-conf", str(base)]) == EXIT_FAILURE
        assert capsys.readouterr().out == ""

    def test_invalid_tool_settings(self, write_file, capsys):
        base = write_file("config.yaml", "A: 1\n")
        os.environ["LAYERED_CONFIG_LOG_FORMAT"] = "xml"
        assert main(["-conf", str(base)]) == EXIT_FAILURE
        assert "LAYERED_CONFIG_" in capsys.readouterr().err

    def test_json_log_format(self, write_file, capsys):
        base = write_file("config.yaml", "A: 1\n")
        os.environ["LAYERED_CONFIG_LOG_FORMAT"] = "json"

        assert main(["-v", "-conf", str(base)]) == EXIT_SUCCESS

        records = [json.loads(line) for line in capsys.readouterr().err.splitlines()]
        messages = [record["message"] for record in records]
        assert "resolve_profile_success" in messages
        assert "load_file_success" in messages
