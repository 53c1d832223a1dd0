from __future__ import annotations

import argparse
import logging
import shlex
import sys
from pathlib import Path
from typing import Sequence

import uvicorn

from .app import (
    DEFAULT_CONFIG_DIR,
    DEFAULT_ENVIRONMENT,
    DEFAULT_HOST,
    DEFAULT_PORT,
    ServerConfig,
    create_app,
    load_config,
)
from .config import ConfigError
from .config.cluster import DEFAULT_TOOL_COMMAND
from .config.export import config_dump_payload, config_migrate_payload, dump_yaml

logger = logging.getLogger("workbench")


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Workbench web application")
    parser.add_argument(
        "command",
        nargs="?",
        default="serve",
        choices=("serve", "config-dump", "config-migrate", "config-check"),
        help="serve (default), print the effective config, print migrated legacy keys, or only validate",
    )
    parser.add_argument("--host", default=DEFAULT_HOST, help="Host interface to bind to")
    parser.add_argument("--port", type=int, default=DEFAULT_PORT, help="Port to listen on")
    parser.add_argument(
        "--config-dir",
        type=Path,
        default=DEFAULT_CONFIG_DIR,
        help="Directory holding the legacy application.yml files",
    )
    parser.add_argument(
        "--environment",
        default=DEFAULT_ENVIRONMENT,
        help="Section of application.yml to apply on top of 'common'",
    )
    parser.add_argument(
        "--config-tool",
        default=" ".join(DEFAULT_TOOL_COMMAND),
        help="Command providing the config-defaults and config-dump subcommands",
    )
    parser.add_argument("--log-level", default="info", help="Log level")
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    config = ServerConfig(
        host=args.host,
        port=args.port,
        config_dir=args.config_dir,
        environment=args.environment,
        tool_command=tuple(shlex.split(args.config_tool)),
        log_level=args.log_level,
    )

    try:
        loaded = load_config(config)
    except ConfigError as exc:
        logger.error("Invalid configuration: %s", exc)
        return 1

    if args.command == "config-dump":
        sys.stdout.write(dump_yaml(config_dump_payload(loaded)))
        return 0
    if args.command == "config-migrate":
        sys.stdout.write(dump_yaml(config_migrate_payload(loaded)))
        return 0

    try:
        app = create_app(config, loaded=loaded)
    except ConfigError as exc:
        logger.error("Invalid configuration: %s", exc)
        return 1
    if args.command == "config-check":
        return 0

    uvicorn.run(app, host=config.host, port=config.port, log_level=args.log_level.lower())
    return 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
