"""Environment selection from host patterns."""

from __future__ import annotations

import re
from collections.abc import Mapping, Sequence

from loguru import logger

from envconf.core.constants import HOST_PATTERN_PREFIX, HOST_PATTERN_SUFFIX
from envconf.core.errors import ConfigurationError
from envconf.host import HostDescriptor


def compose_host(host: HostDescriptor, base_path_mode: bool = False) -> str:
    """Build the string host patterns are matched against."""
    composed = host.host_name
    if host.port != "":
        composed += ":" + host.port
    if base_path_mode and host.path_name:
        composed += host.path_name
    return composed


def pattern_matches(pattern: str, composed: str) -> bool:
    """Patterns are regex fragments; an invalid one raises ConfigurationError."""
    try:
        return re.search(HOST_PATTERN_PREFIX + pattern + HOST_PATTERN_SUFFIX, composed) is not None
    except re.error as exc:
        raise ConfigurationError(
            f"Invalid host pattern {pattern!r}: {exc}",
            code="invalid_host_pattern",
            details={"pattern": pattern},
            original_error=exc,
        ) from exc


def match_environment(
    host: HostDescriptor,
    base_path_mode: bool,
    environments: Mapping[str, Sequence[str] | None] | None,
) -> str | None:
    """Return the first environment whose pattern matches host, else None.

    Environments and their patterns are tried in order; the first hit wins.
    Environments without patterns are skipped.
    """
    if not environments:
        return None

    composed = compose_host(host, base_path_mode)
    for name, patterns in environments.items():
        if not patterns:
            continue
        for pattern in patterns:
            if pattern_matches(pattern, composed):
                logger.debug("Environment {} matched {} via {!r}", name, composed, pattern)
                return name

    logger.debug("No environment matched {}", composed)
    return None
