"""Async configuration transport: HTTP via httpx, local files via pathlib."""

from __future__ import annotations

import asyncio
import json
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import httpx
import yaml
from loguru import logger
from tenacity import (
    AsyncRetrying,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)
from tenacity.wait import wait_base

from envconf.core.constants import ConfigObject
from envconf.core.errors import FetchFailedError, FetchNotFoundError

_YAML_SUFFIXES = (".yaml", ".yml")


def _is_transient(exc: BaseException) -> bool:
    """Transport errors and 5xx responses are worth another attempt."""
    if isinstance(exc, httpx.TransportError):
        return True
    if isinstance(exc, httpx.HTTPStatusError):
        return exc.response.status_code >= 500
    return False


def _is_url(path: str) -> bool:
    return path.startswith(("http://", "https://"))


def _ensure_mapping(data: Any, path: str) -> ConfigObject:
    if not isinstance(data, Mapping):
        raise FetchFailedError(
            f"Configuration file {path} must contain an object",
            path=path,
            code="invalid_structure",
            details={"type": type(data).__name__},
        )
    return dict(data)


class ConfigFetcher:
    """Loads configuration objects from URLs or local files.

    HTTP requests retry transient failures with tenacity; a 404 or a missing
    file raises FetchNotFoundError, anything else FetchFailedError.
    """

    def __init__(
        self,
        base_url: str | None = None,
        *,
        timeout: float = 10.0,
        attempts: int = 3,
        wait: wait_base | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        headers: dict[str, str] | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/") if base_url else None
        self._timeout = timeout
        self._attempts = attempts
        self._wait = wait or wait_exponential(multiplier=0.5, min=0.5, max=5)
        self._transport = transport
        self._headers = {"Accept": "application/json", **(headers or {})}

    def _url_for(self, path: str) -> str | None:
        if _is_url(path):
            return path
        if self._base_url:
            return f"{self._base_url}/{path.lstrip('/')}"
        return None

    async def fetch(self, path: str) -> ConfigObject:
        """Load and parse the configuration object at path."""
        url = self._url_for(path)
        if url is not None:
            return await self._fetch_http(url)
        return await asyncio.to_thread(self._fetch_file, Path(path))

    async def _get(self, client: httpx.AsyncClient, url: str) -> httpx.Response:
        async for attempt in AsyncRetrying(
            stop=stop_after_attempt(self._attempts),
            wait=self._wait,
            retry=retry_if_exception(_is_transient),
            reraise=True,
        ):
            with attempt:
                resp = await client.get(url, headers=self._headers)
                if resp.status_code != 404:
                    resp.raise_for_status()
        return resp

    async def _fetch_http(self, url: str) -> ConfigObject:
        logger.debug("Fetching configuration {}", url)
        async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
            try:
                resp = await self._get(client, url)
            except httpx.HTTPStatusError as exc:
                logger.warning("Configuration request {} failed: {}", url, exc.response.status_code)
                raise FetchFailedError(
                    f"Configuration file could not be loaded: {url}",
                    path=url,
                    code="http_status",
                    details={"status_code": exc.response.status_code},
                    original_error=exc,
                ) from exc
            except httpx.HTTPError as exc:
                logger.warning("Configuration request {} failed: {}", url, exc)
                raise FetchFailedError(
                    f"Configuration file could not be found or loaded: {url}",
                    path=url,
                    code="transport",
                    original_error=exc,
                ) from exc

        if resp.status_code == 404:
            logger.warning("Configuration file not found: {}", url)
            raise FetchNotFoundError(
                f"Configuration file could not be found: {url}",
                path=url,
                code="not_found",
            )

        try:
            data = resp.json()
        except ValueError as exc:
            raise FetchFailedError(
                f"Configuration file {url} is not valid JSON",
                path=url,
                code="invalid_json",
                original_error=exc,
            ) from exc
        return _ensure_mapping(data, url)

    def _fetch_file(self, path: Path) -> ConfigObject:
        logger.debug("Reading configuration {}", path)
        if not path.is_file():
            logger.warning("Configuration file not found: {}", path)
            raise FetchNotFoundError(
                f"Configuration file could not be found: {path}",
                path=str(path),
                code="not_found",
            )

        try:
            text = path.read_text(encoding="utf-8")
            if path.suffix.lower() in _YAML_SUFFIXES:
                data = yaml.safe_load(text)
                if data is None:
                    data = {}
            else:
                data = json.loads(text)
        except (OSError, ValueError, yaml.YAMLError) as exc:
            logger.error("Failed to parse configuration {}: {}", path, exc)
            raise FetchFailedError(
                f"Configuration file could not be loaded: {path}",
                path=str(path),
                code="parse_error",
                original_error=exc,
            ) from exc
        return _ensure_mapping(data, str(path))
