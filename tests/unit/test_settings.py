"""
Unit tests for configuration loader (export_parity/config/settings.py)

Tests covering:
- Option precedence: explicit value, environment variable, default
- YAML settings files and schema validation
- Rejection of illegal option values
"""

import pytest

from export_parity.config.settings import (
    DEFAULT_RESULTS_DIR,
    DEFAULT_SCRATCH_DIR,
    KEEP_SCRATCH_ENV,
    LOG_LEVEL_ENV,
    REPORT_FORMAT_ENV,
    SCRATCH_DIR_ENV,
    ConfigurationError,
    Settings,
    get_option_value,
)


class TestGetOptionValue:
    """Tests for single option resolution."""

    def test_explicit_value_wins(self, monkeypatch):
        monkeypatch.setenv(REPORT_FORMAT_ENV, "json")
        assert get_option_value("markdown", ("text", "json", "markdown"), "format", REPORT_FORMAT_ENV) == "markdown"

    def test_environment_before_default(self, monkeypatch):
        monkeypatch.setenv(REPORT_FORMAT_ENV, "json")
        assert get_option_value(None, ("text", "json"), "format", REPORT_FORMAT_ENV, "text") == "json"

    def test_default(self):
        assert get_option_value(None, ("text", "json"), "format", REPORT_FORMAT_ENV, "text") == "text"

    def test_free_form_none(self):
        assert get_option_value(None, None, "directory") is None

    def test_case_insensitive_match_returns_canonical(self):
        assert get_option_value("debug", ("DEBUG", "INFO"), "log level") == "DEBUG"

    def test_boolean_normalized(self):
        assert get_option_value(True, ("true", "false"), "flag") == "true"
        assert get_option_value(False, ("true", "false"), "flag") == "false"

    def test_illegal_value(self):
        with pytest.raises(ConfigurationError, match="Unsupported format 'xml'"):
            get_option_value("xml", ("text", "json"), "format")

    def test_missing_required_value(self):
        with pytest.raises(ConfigurationError):
            get_option_value(None, ("text", "json"), "format")


class TestSettingsLoad:
    """Tests for Settings.load()."""

    def test_defaults(self):
        settings = Settings.load()
        assert settings.results_dir == DEFAULT_RESULTS_DIR
        assert settings.scratch_dir == DEFAULT_SCRATCH_DIR
        assert settings.keep_scratch is False
        assert settings.report_format == "text"
        assert settings.log_level == "INFO"
        assert settings.write_reports is False

    def test_defaults_match_dataclass(self):
        assert Settings.load() == Settings()

    def test_environment(self, monkeypatch):
        monkeypatch.setenv(SCRATCH_DIR_ENV, "/tmp/scratch")
        monkeypatch.setenv(KEEP_SCRATCH_ENV, "TRUE")
        monkeypatch.setenv(LOG_LEVEL_ENV, "warning")

        settings = Settings.load()

        assert settings.scratch_dir == "/tmp/scratch"
        assert settings.keep_scratch is True
        assert settings.log_level == "WARNING"

    def test_overrides_beat_environment(self, monkeypatch):
        monkeypatch.setenv(REPORT_FORMAT_ENV, "json")
        settings = Settings.load(overrides={"report_format": "markdown"})
        assert settings.report_format == "markdown"

    def test_none_overrides_ignored(self, monkeypatch):
        monkeypatch.setenv(REPORT_FORMAT_ENV, "json")
        settings = Settings.load(overrides={"report_format": None, "keep_scratch": None})
        assert settings.report_format == "json"
        assert settings.keep_scratch is False

    def test_illegal_environment_value(self, monkeypatch):
        monkeypatch.setenv(KEEP_SCRATCH_ENV, "maybe")
        with pytest.raises(ConfigurationError, match="keep scratch"):
            Settings.load()

    def test_paths(self):
        settings = Settings(results_dir="out", scratch_dir="tmp")
        assert settings.results_path.name == "out"
        assert settings.scratch_path.name == "tmp"

    def test_to_dict(self):
        assert Settings().to_dict()["report_format"] == "text"


class TestSettingsFile:
    """Tests for YAML settings files."""

    def test_file_values(self, tmp_path):
        path = tmp_path / "settings.yaml"
        path.write_text(
            "results_dir: reports\nkeep_scratch: true\nreport_format: markdown\nlog_level: DEBUG\n",
            encoding="utf-8",
        )

        settings = Settings.load(config_path=str(path))

        assert settings.results_dir == "reports"
        assert settings.keep_scratch is True
        assert settings.report_format == "markdown"
        assert settings.log_level == "DEBUG"

    def test_file_beats_environment(self, tmp_path, monkeypatch):
        monkeypatch.setenv(REPORT_FORMAT_ENV, "json")
        path = tmp_path / "settings.yaml"
        path.write_text("report_format: markdown\n", encoding="utf-8")

        assert Settings.load(config_path=str(path)).report_format == "markdown"

    def test_overrides_beat_file(self, tmp_path):
        path = tmp_path / "settings.yaml"
        path.write_text("report_format: markdown\n", encoding="utf-8")

        settings = Settings.load(config_path=str(path), overrides={"report_format": "json"})
        assert settings.report_format == "json"

    def test_empty_file(self, tmp_path):
        path = tmp_path / "settings.yaml"
        path.write_text("", encoding="utf-8")
        assert Settings.load(config_path=str(path)) == Settings()

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError, match="not found"):
            Settings.load(config_path=str(tmp_path / "missing.yaml"))

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "settings.yaml"
        path.write_text("report_format: [text\n", encoding="utf-8")
        with pytest.raises(ConfigurationError, match="Invalid YAML"):
            Settings.load(config_path=str(path))

    def test_unknown_key(self, tmp_path):
        path = tmp_path / "settings.yaml"
        path.write_text("colour: blue\n", encoding="utf-8")
        with pytest.raises(ConfigurationError, match="validation failed"):
            Settings.load(config_path=str(path))

    def test_wrong_type(self, tmp_path):
        path = tmp_path / "settings.yaml"
        path.write_text("keep_scratch: sometimes\n", encoding="utf-8")
        with pytest.raises(ConfigurationError, match="validation failed"):
            Settings.load(config_path=str(path))

    def test_illegal_enum(self, tmp_path):
        path = tmp_path / "settings.yaml"
        path.write_text("report_format: xml\n", encoding="utf-8")
        with pytest.raises(ConfigurationError):
            Settings.load(config_path=str(path))
