"""Environment-scoped configuration store."""

from __future__ import annotations

import posixpath
from collections.abc import Mapping
from typing import Any, Protocol

from loguru import logger

from envconf.core.constants import (
    DEFAULT_CONFIG_FILE,
    DEFAULT_DIRECTORY,
    DEFAULT_ENVIRONMENT,
    ConfigObject,
    Environments,
)
from envconf.core.errors import ConfigurationError, FetchError, KeyNotFoundError
from envconf.host import HostDescriptor
from envconf.loader import ConfigFetcher
from envconf.matcher import match_environment
from envconf.merge import deep_merge
from envconf.paths import child, is_absent_or_falsy, read_dict_value


class Fetcher(Protocol):
    """Anything that can load a configuration object by path."""

    async def fetch(self, path: str) -> ConfigObject: ...


class Configuration:
    """Configuration values resolved against the environment matching this host.

    The config object holds environment-agnostic values at the top level and
    one section per environment. `get` prefers the active environment's
    section and, in cascade mode, falls back to the top level.
    """

    def __init__(self, host: HostDescriptor | None = None, *, fetcher: Fetcher | None = None) -> None:
        self._host = host if host is not None else HostDescriptor.from_env()
        self._fetcher: Fetcher = fetcher if fetcher is not None else ConfigFetcher()
        self._environment = DEFAULT_ENVIRONMENT
        self._environments: Environments | None = None
        self._directory = DEFAULT_DIRECTORY
        self._config_file = DEFAULT_CONFIG_FILE
        self._cascade_mode = True
        self._base_path_mode = False
        self._config_object: ConfigObject = {}
        self._config_merge_object: ConfigObject | None = {}

    @property
    def host(self) -> HostDescriptor:
        return self._host

    @property
    def directory(self) -> str:
        """Location of the primary config file."""
        return self._directory

    @directory.setter
    def directory(self, value: str) -> None:
        self._directory = value

    @property
    def config_file(self) -> str:
        """File name of the primary config file inside `directory`."""
        return self._config_file

    @config_file.setter
    def config_file(self, value: str) -> None:
        self._config_file = value

    @property
    def config_path(self) -> str:
        return posixpath.join(self._directory, self._config_file)

    @property
    def environment(self) -> str:
        return self._environment

    @environment.setter
    def environment(self, value: str) -> None:
        self._environment = value

    @property
    def environments(self) -> Environments | None:
        return self._environments

    @environments.setter
    def environments(self, value: Environments | None) -> None:
        """Store host patterns per environment and re-run `check`. None is ignored."""
        if value is not None:
            self._environments = value
            self.check()

    @property
    def cascade_mode(self) -> bool:
        """Whether environment lookups fall back to top-level values."""
        return self._cascade_mode

    @cascade_mode.setter
    def cascade_mode(self, value: bool | None) -> None:
        self._cascade_mode = True if value is None else value

    @property
    def base_path_mode(self) -> bool:
        return self._base_path_mode

    def set_base_path_mode(self, value: bool | None) -> None:
        """Include the URL path in host matching (several apps on one domain)."""
        self._base_path_mode = bool(value)

    @property
    def config_object(self) -> ConfigObject:
        return self._config_object

    @property
    def config_merge_object(self) -> ConfigObject | None:
        """Patches staged by `lazy_merge`, or None once committed."""
        return self._config_merge_object

    @property
    def environment_enabled(self) -> bool:
        """True when a named, non-default environment is active."""
        return not (self._environment == DEFAULT_ENVIRONMENT or not self._environment)

    @property
    def environment_exists(self) -> bool:
        """True when the active environment has a section in the config object."""
        return self._environment in self._config_object

    def is_environment(self, name: str) -> bool:
        return name == self._environment

    def check(self) -> bool:
        """Select the environment whose host patterns match; False leaves it unchanged."""
        matched = match_environment(self._host, self._base_path_mode, self._environments)
        if matched is None:
            return False
        self._environment = matched
        return True

    def get_dict_value(self, base: Any, key: str) -> Any:
        return read_dict_value(base, key)

    def get(self, key: str, default: Any = None) -> Any:
        """Resolve key, returning default when nothing non-falsy is found.

        Dot-free keys read the environment section first, then (cascade mode)
        the top level. Dotted keys are only looked up inside an environment
        when its section exists; the top-level cascade applies from there.
        """
        if "." not in key:
            if not self.environment_enabled:
                value = self._config_object.get(key)
                return default if is_absent_or_falsy(value) else value

            if self.environment_exists:
                value = child(self._config_object[self._environment], key)
                if not is_absent_or_falsy(value):
                    return value
            if self._cascade_mode:
                value = self._config_object.get(key)
                if not is_absent_or_falsy(value):
                    return value
            return default

        if not self.environment_enabled:
            try:
                return read_dict_value(self._config_object, key)
            except KeyNotFoundError:
                return default

        if self.environment_exists:
            try:
                return read_dict_value(self._config_object[self._environment], key)
            except KeyNotFoundError:
                if self._cascade_mode:
                    try:
                        return read_dict_value(self._config_object, key)
                    except KeyNotFoundError:
                        pass
        return default

    def set(self, key: str, value: Any) -> None:
        """Write a top-level key or a single `parent.child` key."""
        if "." not in key:
            self._config_object[key] = value
            return

        parts = key.split(".")
        if len(parts) > 2:
            logger.warning("set() supports one level of nesting; ignoring {} in {}", ".".join(parts[2:]), key)
        parent, name = parts[0], parts[1]
        if parent not in self._config_object:
            self._config_object[parent] = {}
        section = self._config_object[parent]
        if not isinstance(section, dict):
            raise ConfigurationError(
                f"Cannot set {key}: {parent} is not a section",
                code="parent_not_mapping",
                details={"key": key, "type": type(section).__name__},
            )
        section[name] = value

    def set_all(self, obj: ConfigObject) -> None:
        """Replace the whole config object."""
        self._config_object = obj

    def get_all(self) -> ConfigObject:
        return self._config_object

    def merge(self, obj: Mapping[str, Any]) -> None:
        """Deep-merge obj into the config object now."""
        self._config_object = deep_merge(self._config_object, obj)
        logger.debug("Merged {} top-level keys into configuration", len(obj))

    def lazy_merge(self, obj: Mapping[str, Any]) -> None:
        """Stage obj to be merged by the next `commit` (run by `load_config`)."""
        self._config_merge_object = deep_merge(self._config_merge_object or {}, obj)

    stage = lazy_merge

    def commit(self) -> None:
        """Apply staged patches to the config object and clear the stage."""
        if self._config_merge_object is None:
            return
        staged = self._config_merge_object
        self._config_merge_object = None
        self.merge(staged)

    async def load_config_file(self, path: str) -> ConfigObject:
        return await self._fetcher.fetch(path)

    async def load_config(self) -> None:
        """Fetch the primary config file, replace the config object, then commit staged patches."""
        data = await self.load_config_file(self.config_path)
        self.set_all(data)
        self.commit()
        logger.info("Configuration loaded from {} (environment: {})", self.config_path, self._environment)

    async def merge_config_file(self, path: str, optional: bool = False) -> None:
        """Fetch path and stage it with `lazy_merge`; optional failures are ignored."""
        try:
            data = await self.load_config_file(path)
        except FetchError as exc:
            if optional:
                logger.warning("Optional configuration {} skipped: {}", path, exc)
                return
            raise
        self.lazy_merge(data)
