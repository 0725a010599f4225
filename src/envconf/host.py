"""Host identity used to select a configuration environment."""

from __future__ import annotations

import os
from dataclasses import dataclass

import httpx


@dataclass(frozen=True)
class HostDescriptor:
    """Hostname, port and optional path of the running application."""

    host_name: str
    port: str = ""  # "" when no explicit port
    path_name: str | None = None  # only set for paths longer than "/"

    @classmethod
    def from_location(cls, hostname: str, port: str = "", pathname: str = "") -> HostDescriptor:
        """Build from location-style strings."""
        path_name = pathname if pathname and len(pathname) > 1 else None
        return cls(host_name=hostname, port=port or "", path_name=path_name)

    @classmethod
    def from_url(cls, url: str) -> HostDescriptor:
        """Build from an absolute URL such as https://www.qa.com:8443/feature1."""
        parsed = httpx.URL(url)
        port = str(parsed.port) if parsed.port is not None else ""
        return cls.from_location(parsed.host, port, parsed.path)

    @classmethod
    def from_env(cls) -> HostDescriptor:
        """Build from ENVCONF_HOSTNAME / ENVCONF_PORT / ENVCONF_PATHNAME (.env aware)."""
        from dotenv import load_dotenv

        load_dotenv()
        return cls.from_location(
            os.environ.get("ENVCONF_HOSTNAME") or "localhost",
            os.environ.get("ENVCONF_PORT", ""),
            os.environ.get("ENVCONF_PATHNAME", ""),
        )
