"""
Tests for the command-line interface.
"""
import json
import re
from datetime import datetime
from pathlib import Path
from unittest.mock import patch

import pytest

from s3_uploader.cli import build_options, create_parser, load_config, main, parse_metadata
from s3_uploader.exceptions import ConfigurationError


def _parse(*argv):
    return create_parser().parse_args(list(argv))


def test_load_config_without_file():
    """Test that no config file means no values."""
    assert load_config(None) == {}


def test_load_config_reads_json(tmp_path):
    """Test that a JSON config file is loaded."""
    config = tmp_path / "config.json"
    config.write_text(json.dumps({"threads": 2, "region": "eu-west-1"}))

    assert load_config(config) == {"threads": 2, "region": "eu-west-1"}


@pytest.mark.parametrize("content", ["{not json", "[1, 2]"])
def test_load_config_rejects_bad_files(tmp_path, content):
    """Test that broken config files raise instead of being ignored."""
    config = tmp_path / "config.json"
    config.write_text(content)

    with pytest.raises(ConfigurationError):
        load_config(config)


def test_parse_metadata():
    """Test KEY=VALUE parsing for metadata flags."""
    assert parse_metadata(["a=1", "b=x=y"]) == {"a": "1", "b": "x=y"}
    with pytest.raises(ConfigurationError):
        parse_metadata(["novalue"])


def test_build_options_from_flags():
    """Test that command line flags become upload options."""
    args = _parse("dir", "src", "bucket", "-d", "logs", "-w", "3", "-p", "*.log",
                  "--public", "--path-style", "-m", "team=ops",
                  "--gzip", "--gzip-working-dir", "/tmp/gz",
                  "--since", "2024-01-01T00:00:00")

    options = build_options(args)

    assert options.destination_dir == "logs/"
    assert options.threads == 3
    assert options.pattern == "*.log"
    assert options.public is True
    assert options.path_style is True
    assert options.metadata == {"team": "ops"}
    assert options.gzip is True
    assert options.gzip_working_dir == Path("/tmp/gz")
    assert options.time_range[0] == datetime(2024, 1, 1)


def test_flags_override_config_file(tmp_path):
    """Test that explicit flags win over the config file."""
    config = tmp_path / "config.json"
    config.write_text(json.dumps({"threads": 2, "region": "eu-west-1",
                                  "metadata": {"a": "1"}}))
    args = _parse("-c", str(config), "dir", "src", "bucket", "-w", "7", "-m", "b=2")

    options = build_options(args)

    assert options.threads == 7
    assert options.region == "eu-west-1"
    assert options.metadata == {"a": "1", "b": "2"}


def test_regex_flag_compiles_pattern():
    """Test that --regex turns the pattern into a compiled regex."""
    options = build_options(_parse("dir", "src", "bucket", "-p", r"^\d+\.csv$", "--regex"))

    assert isinstance(options.pattern, re.Pattern)
    assert options.pattern.search("123.csv")


def test_invalid_regex_is_a_configuration_error():
    """Test that a bad regex is reported as a configuration error."""
    with pytest.raises(ConfigurationError):
        build_options(_parse("dir", "src", "bucket", "-p", "(", "--regex"))


def test_main_dispatches_dir_command(tmp_path):
    """Test that the dir command uploads a directory."""
    with patch('s3_uploader.cli.UploadCoordinator') as coordinator:
        main(["dir", str(tmp_path), "my-bucket", "-w", "2"])

    coordinator.assert_called_once()
    assert coordinator.call_args.args[0].threads == 2
    coordinator.return_value.upload_directory.assert_called_once_with(tmp_path, "my-bucket")


def test_main_dispatches_file_command(tmp_path):
    """Test that the file command uploads a single file."""
    report = tmp_path / "report.csv"

    with patch('s3_uploader.cli.UploadCoordinator') as coordinator:
        main(["file", str(report), "archive", "-d", "2024"])

    assert coordinator.call_args.args[0].destination_dir == "2024/"
    coordinator.return_value.upload_file.assert_called_once_with(report, "archive")


def test_main_exits_non_zero_on_error(tmp_path):
    """Test that uploader errors become exit status 1."""
    with pytest.raises(SystemExit) as exc_info:
        main(["dir", str(tmp_path / "missing"), "bucket"])

    assert exc_info.value.code == 1
