"""
Configuration loader for export comparison runs

Resolves options from explicit values, an optional YAML settings file,
environment variables and defaults, in that order of precedence. Settings are
plain objects handed to the code that needs them; nothing here is global.
"""

import logging
import os
from dataclasses import dataclass, asdict
from pathlib import Path
from pprint import pformat
from typing import Any, Dict, Iterable, Optional

import jsonschema
import yaml

logger = logging.getLogger(__name__)


class ConfigurationError(Exception):
    """Exception raised for configuration-related errors."""

    pass


REPORT_FORMATS = ("text", "json", "markdown")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")
BOOLEAN_VALUES = ("true", "false")

# Environment variables consulted when a value is not given explicitly
RESULTS_DIR_ENV = "EXPORT_PARITY_RESULTS_DIR"
SCRATCH_DIR_ENV = "EXPORT_PARITY_SCRATCH_DIR"
KEEP_SCRATCH_ENV = "EXPORT_PARITY_KEEP_SCRATCH"
REPORT_FORMAT_ENV = "EXPORT_PARITY_REPORT_FORMAT"
LOG_LEVEL_ENV = "EXPORT_PARITY_LOG_LEVEL"
WRITE_REPORTS_ENV = "EXPORT_PARITY_WRITE_REPORTS"

DEFAULT_RESULTS_DIR = "comparison-results"
# Kept under cwd so CI workspaces clean up anything left behind
DEFAULT_SCRATCH_DIR = "./export_parity_tmp"

SETTINGS_SCHEMA: Dict[str, Any] = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "type": "object",
    "additionalProperties": False,
    "properties": {
        "results_dir": {"type": "string", "minLength": 1},
        "scratch_dir": {"type": "string", "minLength": 1},
        "keep_scratch": {"type": "boolean"},
        "report_format": {"type": "string", "enum": list(REPORT_FORMATS)},
        "log_level": {"type": "string", "enum": list(LOG_LEVELS)},
        "write_reports": {"type": "boolean"},
    },
}


def get_option_value(
    value: Any,
    legal_values: Optional[Iterable[str]],
    description: str,
    env_var_name: Optional[str] = None,
    default_value: Any = None,
) -> Optional[str]:
    """
    Resolve a single option.

    An explicitly given value takes precedence, then the environment
    variable, then the default.

    Args:
        value: Explicit value (None if not given)
        legal_values: Allowed values, or None for free-form options
        description: Human-readable option name for error messages
        env_var_name: Environment variable to consult
        default_value: Fallback value

    Returns:
        Resolved value as a string, or None

    Raises:
        ConfigurationError: If the resolved value is not a legal value
    """
    if value is None and env_var_name:
        value = os.getenv(env_var_name)
    if value is None:
        value = default_value

    if value is not None:
        value = str(value).lower() if isinstance(value, bool) else str(value)

    if legal_values is not None:
        # Case-insensitive match, returned in its canonical spelling
        legal = {str(v).lower(): v for v in legal_values}
        if value is None or value.lower() not in legal:
            raise ConfigurationError(f"Unsupported {description} '{value}'")
        value = legal[value.lower()]

    return value


@dataclass
class Settings:
    """
    Typed comparison settings.

    Attributes:
        results_dir: Where rendered reports are written
        scratch_dir: Where export archives are unpacked
        keep_scratch: Keep unpacked archives after the run
        report_format: Output format for the CLI (text, json, markdown)
        log_level: Level for package loggers
        write_reports: Also write JSON and Markdown reports to results_dir
    """

    results_dir: str = DEFAULT_RESULTS_DIR
    scratch_dir: str = DEFAULT_SCRATCH_DIR
    keep_scratch: bool = False
    report_format: str = "text"
    log_level: str = "INFO"
    write_reports: bool = False

    @classmethod
    def load(
        cls,
        config_path: Optional[str] = None,
        overrides: Optional[Dict[str, Any]] = None,
    ) -> "Settings":
        """
        Resolve settings from overrides, YAML file, environment and defaults.

        Args:
            config_path: Optional path to a YAML settings file
            overrides: Explicit values (e.g. from command-line flags); None
                entries are ignored

        Returns:
            Settings instance

        Raises:
            ConfigurationError: If the file is unreadable, invalid YAML, fails
                schema validation, or any option has an illegal value
        """
        file_values = cls._load_file(config_path) if config_path else {}
        explicit = dict(file_values)
        explicit.update({k: v for k, v in (overrides or {}).items() if v is not None})

        settings = cls(
            results_dir=get_option_value(
                explicit.get("results_dir"), None, "results directory",
                RESULTS_DIR_ENV, DEFAULT_RESULTS_DIR,
            ),
            scratch_dir=get_option_value(
                explicit.get("scratch_dir"), None, "scratch directory",
                SCRATCH_DIR_ENV, DEFAULT_SCRATCH_DIR,
            ),
            keep_scratch=get_option_value(
                explicit.get("keep_scratch"), BOOLEAN_VALUES, "'keep scratch directory'",
                KEEP_SCRATCH_ENV, "false",
            ) == "true",
            report_format=get_option_value(
                explicit.get("report_format"), REPORT_FORMATS, "report format",
                REPORT_FORMAT_ENV, "text",
            ),
            log_level=get_option_value(
                explicit.get("log_level"), LOG_LEVELS, "log level",
                LOG_LEVEL_ENV, "INFO",
            ),
            write_reports=get_option_value(
                explicit.get("write_reports"), BOOLEAN_VALUES, "'write report files'",
                WRITE_REPORTS_ENV, "false",
            ) == "true",
        )

        logger.debug(f"Export comparison configuration:\n\n{pformat(settings.to_dict())}\n")
        return settings

    @staticmethod
    def _load_file(config_path: str) -> Dict[str, Any]:
        """
        Load and validate a YAML settings file.

        Raises:
            ConfigurationError: If the file is missing, invalid or fails validation
        """
        path = Path(config_path)
        try:
            with path.open("r", encoding="utf-8") as f:
                content = yaml.safe_load(f)
        except FileNotFoundError as e:
            raise ConfigurationError(f"Settings file not found: {config_path}") from e
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in {config_path}: {e}") from e

        if not content:
            logger.warning(f"Empty settings file: {config_path}")
            return {}

        try:
            jsonschema.validate(instance=content, schema=SETTINGS_SCHEMA)
        except jsonschema.ValidationError as e:
            raise ConfigurationError(f"Settings file validation failed: {e.message}") from e

        logger.info(f"Loaded settings from {config_path}")
        return content

    @property
    def results_path(self) -> Path:
        return Path(self.results_dir)

    @property
    def scratch_path(self) -> Path:
        return Path(self.scratch_dir)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
