"""Configuration defaults."""

from __future__ import annotations

from typing import Any

DEFAULT_ENVIRONMENT = "default"
DEFAULT_DIRECTORY = "config"
DEFAULT_CONFIG_FILE = "config.json"

# Historical boundary groups around host patterns; "W" is a literal character.
HOST_PATTERN_PREFIX = "(?:^|W)"
HOST_PATTERN_SUFFIX = "(?:$|W)"

ConfigObject = dict[str, Any]
Environments = dict[str, list[str] | None]
