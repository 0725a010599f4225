"""envconf entrypoint. Loads a config, selects the host's environment, prints resolved keys."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import os
import sys
from typing import Any

from loguru import logger

from envconf import __version__
from envconf.core.constants import Environments
from envconf.core.errors import FetchError
from envconf.host import HostDescriptor
from envconf.store import Configuration

# Third-party libraries to intercept and route through loguru
_INTERCEPTED_LIBRARIES = ["httpx", "httpcore"]


def _intercept_logging(level: str) -> None:
    """Route third-party library logs to loguru."""

    class InterceptHandler(logging.Handler):
        def emit(self, record: logging.LogRecord) -> None:
            try:
                log_level = logger.level(record.levelname).name
            except ValueError:
                log_level = str(record.levelno)
            msg = record.getMessage().replace("{", "{{").replace("}", "}}")
            logger.patch(
                lambda r: r.update(
                    name=record.name,
                    function=record.funcName,
                    line=record.lineno,
                ),
            ).opt(exception=record.exc_info).log(log_level, msg)

    for lib in _INTERCEPTED_LIBRARIES:
        lib_logger = logging.getLogger(lib)
        lib_logger.handlers = [InterceptHandler()]
        lib_logger.propagate = False
        lib_logger.setLevel(level)


def setup_logging(verbose: bool = False) -> None:
    """Configure loguru on stderr.
    Level: verbose=True or LOG_LEVEL=DEBUG enables DEBUG; otherwise WARNING so stdout stays clean."""
    level = "WARNING"
    if verbose:
        level = "DEBUG"
    else:
        env_level = (os.environ.get("LOG_LEVEL") or "").upper()
        if env_level in ("DEBUG", "INFO", "WARNING", "ERROR"):
            level = env_level

    logger.remove()
    logger.add(
        sys.stderr,
        level=level,
        format="<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan> | {message}",
    )
    _intercept_logging(level)


def parse_environments(specs: list[str]) -> Environments | None:
    """Parse NAME=PATTERN[,PATTERN...] options, keeping their order."""
    if not specs:
        return None
    environments: Environments = {}
    for spec in specs:
        name, sep, patterns = spec.partition("=")
        if not sep or not name:
            raise argparse.ArgumentTypeError(f"invalid environment {spec!r}, expected NAME=PATTERN[,PATTERN]")
        environments[name] = [p for p in patterns.split(",") if p]
    return environments


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="envconf",
        description="Resolve configuration values for the environment matching this host",
    )
    parser.add_argument("keys", nargs="*", metavar="KEY", help="Dotted keys to resolve (default: print everything)")
    parser.add_argument(
        "--config",
        "-c",
        default="config/config.json",
        help="Path or URL of the primary config file (default: config/config.json)",
    )
    parser.add_argument("--url", help="Host identity as a URL (default: ENVCONF_HOSTNAME/PORT/PATHNAME)")
    parser.add_argument(
        "--env",
        "-e",
        action="append",
        default=[],
        metavar="NAME=PATTERN[,PATTERN]",
        help="Environment host patterns, tried in the order given",
    )
    parser.add_argument("--environment", help="Force the active environment")
    parser.add_argument("--merge", action="append", default=[], metavar="PATH", help="Config file merged over the primary")
    parser.add_argument(
        "--optional-merge",
        action="append",
        default=[],
        metavar="PATH",
        help="Like --merge but ignored when it cannot be loaded",
    )
    parser.add_argument("--base-path-mode", action="store_true", help="Include the URL path in host matching")
    parser.add_argument("--no-cascade", action="store_true", help="Do not fall back to top-level values")
    parser.add_argument("--default", help="Value printed for keys that do not resolve")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def build_configuration(args: argparse.Namespace) -> Configuration:
    host = HostDescriptor.from_url(args.url) if args.url else HostDescriptor.from_env()
    config = Configuration(host)
    config.cascade_mode = not args.no_cascade
    config.set_base_path_mode(args.base_path_mode)
    directory, _, file_name = args.config.rpartition("/")
    config.directory = directory
    config.config_file = file_name
    if args.environment:
        config.environment = args.environment
    environments = parse_environments(args.env)
    if environments is not None:
        config.environments = environments
    return config


async def load(config: Configuration, merges: list[str], optional_merges: list[str]) -> None:
    """Stage extra files, then load the primary config (which commits them)."""
    for path in merges:
        await config.merge_config_file(path)
    for path in optional_merges:
        await config.merge_config_file(path, optional=True)
    await config.load_config()


def render(config: Configuration, keys: list[str], default: Any) -> str:
    if not keys:
        return json.dumps(config.get_all(), indent=2)
    if len(keys) == 1:
        value = config.get(keys[0], default)
        return value if isinstance(value, str) else json.dumps(value, indent=2)
    return json.dumps({key: config.get(key, default) for key in keys}, indent=2)


def main(argv: list[str] | None = None) -> None:
    """Main entrypoint."""
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(args.verbose)

    try:
        config = build_configuration(args)
    except argparse.ArgumentTypeError as exc:
        parser.error(str(exc))

    try:
        asyncio.run(load(config, args.merge, args.optional_merge))
    except FetchError as exc:
        logger.error("{}", exc)
        sys.exit(1)

    logger.debug("Active environment: {}", config.environment)
    print(render(config, args.keys, args.default))


if __name__ == "__main__":
    main()
