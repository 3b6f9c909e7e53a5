"""Configuration module."""

from .settings import ConfigurationError, Settings, get_option_value

__all__ = ["ConfigurationError", "Settings", "get_option_value"]
