"""Environment-scoped configuration resolved from host identity."""

from envconf.core.errors import (
    ConfigError,
    ConfigurationError,
    FetchError,
    FetchFailedError,
    FetchNotFoundError,
    KeyNotFoundError,
)
from envconf.host import HostDescriptor
from envconf.loader import ConfigFetcher
from envconf.matcher import compose_host, match_environment
from envconf.merge import deep_merge
from envconf.paths import is_absent_or_falsy, read_dict_value
from envconf.store import Configuration

__version__ = "0.1.0"

__all__ = [
    "ConfigError",
    "ConfigFetcher",
    "Configuration",
    "ConfigurationError",
    "FetchError",
    "FetchFailedError",
    "FetchNotFoundError",
    "HostDescriptor",
    "KeyNotFoundError",
    "__version__",
    "compose_host",
    "deep_merge",
    "is_absent_or_falsy",
    "match_environment",
    "read_dict_value",
]
