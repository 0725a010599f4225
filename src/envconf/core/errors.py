"""envconf domain exceptions."""

from __future__ import annotations


class ConfigError(Exception):
    """Base for envconf errors."""

    def __init__(
        self,
        message: str,
        *,
        code: str | None = None,
        details: dict[str, object] | None = None,
        original_error: BaseException | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.details = details or {}
        self.original_error = original_error


class ConfigurationError(ConfigError):
    """Invalid use of the configuration store."""


class KeyNotFoundError(ConfigError):
    """Dotted key segment missing or falsy."""

    def __init__(self, key: str, segment: str) -> None:
        super().__init__(
            f"Key {segment} not found",
            code="key_not_found",
            details={"key": key, "segment": segment},
        )
        self.key = key
        self.segment = segment


class FetchError(ConfigError):
    """Configuration source could not be loaded."""

    def __init__(
        self,
        message: str,
        *,
        path: str,
        code: str | None = None,
        details: dict[str, object] | None = None,
        original_error: BaseException | None = None,
    ) -> None:
        super().__init__(
            message,
            code=code,
            details={"path": path, **(details or {})},
            original_error=original_error,
        )
        self.path = path


class FetchNotFoundError(FetchError):
    """Configuration source does not exist (HTTP 404 or missing file)."""


class FetchFailedError(FetchError):
    """Network, status or parse failure while loading a configuration source."""
