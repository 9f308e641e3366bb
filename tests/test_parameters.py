"""Unit tests for configuration loading."""

import pytest

from bp_ledger.utils.exceptions import ConfigurationError
from bp_ledger.utils.parameters import ParameterLoader


def test_load_config(tmp_path) -> None:
    """Test loading a YAML configuration."""
    config_file = tmp_path / "config.yaml"
    config_file.write_text(
        "storage:\n"
        "  data_dir: /tmp/bp\n"
        "  storage_key: bp_entries\n"
        "processing:\n"
        "  timezone: America/Santiago\n"
        "logging:\n"
        "  level: DEBUG\n",
        encoding="utf-8",
    )

    loader = ParameterLoader(str(config_file))

    if loader.get_storage_config().data_dir != "/tmp/bp":
        raise AssertionError("Expected data_dir from file")
    if loader.get_processing_config().timezone != "America/Santiago":
        raise AssertionError("Expected timezone from file")
    if loader.get_record_id_config().algorithm != "sha256":
        raise AssertionError("Expected default hash algorithm")
    if loader.get_output_config().indent != 2:
        raise AssertionError("Expected default export indent")
    if loader.get_logging_config().level != "DEBUG":
        raise AssertionError("Expected log level from file")


def test_missing_config_raises(tmp_path) -> None:
    """Test that a missing configuration file is reported."""
    with pytest.raises(ConfigurationError):
        ParameterLoader(str(tmp_path / "missing.yaml"))


def test_invalid_config_values_raise(tmp_path) -> None:
    """Test that invalid values are rejected."""
    bad_configs = [
        "processing:\n  timezone: Mars/Olympus\n",
        "record_id:\n  algorithm: shake_128\n",
        "storage:\n  storage_key: ../escape\n",
        "- just\n- a list\n",
        "storage: [unclosed\n",
    ]
    for index, content in enumerate(bad_configs):
        config_file = tmp_path / f"config_{index}.yaml"
        config_file.write_text(content, encoding="utf-8")

        with pytest.raises(ConfigurationError):
            ParameterLoader(str(config_file))
