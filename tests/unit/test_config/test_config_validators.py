"""
Unit tests for configuration validation and loading.
"""

from pathlib import Path

import pytest

from procmon.config import (
    get_config,
    is_config_loaded,
    set_config_path,
    validate_app_config,
    validate_archive_config,
    validate_chart_config,
    validate_sampler_config,
)
from procmon.models.config import AppConfig
from procmon.validation import ConfigurationError


@pytest.mark.unit
class TestSamplerConfigValidation:
    """Test cases for the [monitor.sampling] table."""

    def test_defaults(self):
        config = validate_sampler_config({})

        assert config.interval_seconds == 1.0
        assert config.history_capacity == 10800
        assert config.max_cycles is None
        assert config.output == "sar-u"
        assert config.header_interval == 30
        assert config.daemon is False

    def test_valid_values(self, sample_config_data):
        config = validate_sampler_config({**sample_config_data["sampling"], "max_cycles": 12})

        assert config.interval_seconds == 0.5
        assert config.history_capacity == 100
        assert config.max_cycles == 12

    @pytest.mark.parametrize("settings, field", [
        ({"interval_seconds": 0}, "interval_seconds"),
        ({"interval_seconds": -1.5}, "interval_seconds"),
        ({"interval_seconds": "fast"}, "interval_seconds"),
        ({"history_capacity": 0}, "history_capacity"),
        ({"history_capacity": True}, "history_capacity"),
        ({"max_cycles": 0}, "max_cycles"),
        ({"output": "sar-x"}, "output"),
        ({"header_interval": 0}, "header_interval"),
        ({"daemon": "yes"}, "daemon"),
    ])
    def test_invalid_values(self, settings, field):
        with pytest.raises(ConfigurationError) as exc_info:
            validate_sampler_config(settings)

        assert field in exc_info.value.field_name


@pytest.mark.unit
class TestArchiveAndChartValidation:
    """Test cases for the [monitor.archive] and [monitor.charts] tables."""

    def test_relative_directory_resolved_against_config(self, temp_dir):
        config = validate_archive_config({"enabled": True, "directory": "archive"}, temp_dir)

        assert config.enabled is True
        assert config.directory == temp_dir / "archive"
        assert config.every_samples == 60
        assert config.partition_minutes == 10

    def test_directory_that_is_a_file(self, temp_dir):
        (temp_dir / "taken").write_text("")

        with pytest.raises(ConfigurationError):
            validate_archive_config({"directory": "taken"}, temp_dir)

    @pytest.mark.parametrize("settings", [
        {"directory": ""},
        {"directory": 5},
        {"every_samples": 0},
        {"partition_minutes": 0},
        {"enabled": 1},
    ])
    def test_invalid_archive_values(self, settings, temp_dir):
        with pytest.raises(ConfigurationError):
            validate_archive_config(settings, temp_dir)

    def test_chart_size(self, temp_dir):
        config = validate_chart_config({"width": 1000, "height": 700}, temp_dir)

        assert (config.width, config.height) == (1000, 700)
        assert config.output_dir == temp_dir / "charts"

        with pytest.raises(ConfigurationError):
            validate_chart_config({"width": 10}, temp_dir)

    def test_cadence_longer_than_history_rejected(self, temp_dir):
        """Samples would be evicted before the first scheduled write."""
        data = {"monitor": {
            "sampling": {"history_capacity": 3},
            "archive": {"enabled": True, "directory": "archive", "every_samples": 5},
        }}

        with pytest.raises(ConfigurationError) as excinfo:
            validate_app_config(data, temp_dir)

        assert excinfo.value.field_name == "monitor.archive.every_samples"

    def test_cadence_ignored_without_archive(self, temp_dir):
        data = {"monitor": {
            "sampling": {"history_capacity": 3},
            "archive": {"enabled": False, "every_samples": 5},
        }}

        config = validate_app_config(data, temp_dir)

        assert config.archive.every_samples == 5

    def test_monitor_must_be_table(self):
        with pytest.raises(ConfigurationError):
            validate_app_config({"monitor": 3})


@pytest.mark.unit
class TestConfigManager:
    """Test cases for the cached configuration singleton."""

    def test_load_from_file(self, config_files):
        set_config_path(config_files["config"])

        config = get_config()

        assert config.sampler.interval_seconds == 0.5
        assert config.archive.enabled is True
        assert config.archive.directory == config_files["dir"] / "archive"
        assert config.charts.width == 1200
        assert config.history_needed is True
        assert get_config() is config

    def test_missing_file_uses_defaults(self, temp_dir):
        set_config_path(temp_dir / "absent.toml")

        assert get_config() == AppConfig()

    def test_malformed_file_raises(self, temp_dir):
        import tomllib

        path = temp_dir / "config.toml"
        path.write_text("[monitor.sampling\ninterval_seconds = ")
        set_config_path(path)

        with pytest.raises(tomllib.TOMLDecodeError):
            get_config()

    def test_invalid_value_in_file(self, config_files, sample_config_data):
        import toml

        sample_config_data["sampling"]["interval_seconds"] = 0
        with open(config_files["config"], "w") as f:
            toml.dump({"monitor": sample_config_data}, f)
        set_config_path(config_files["config"])

        with pytest.raises(ConfigurationError):
            get_config()

    def test_shipped_config_is_valid(self):
        set_config_path(Path(__file__).parent.parent.parent.parent / "conf" / "config.toml")

        config = get_config()

        assert config.sampler.output == "sar-u"
        assert config.archive.enabled is False

    def test_cache_cleared_on_new_path(self, config_files, temp_dir):
        set_config_path(config_files["config"])
        get_config()
        assert is_config_loaded() is True

        set_config_path(temp_dir / "absent.toml")

        assert is_config_loaded() is False
        assert get_config().sampler.interval_seconds == 1.0
