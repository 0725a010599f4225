"""Core types: errors and constants."""

from envconf.core.errors import (
    ConfigError,
    ConfigurationError,
    FetchError,
    FetchFailedError,
    FetchNotFoundError,
    KeyNotFoundError,
)

__all__ = [
    "ConfigError",
    "ConfigurationError",
    "FetchError",
    "FetchFailedError",
    "FetchNotFoundError",
    "KeyNotFoundError",
]
