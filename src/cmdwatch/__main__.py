"""Command-line entry point for the command file watcher."""
from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import List, Optional

from .actions import CommandDispatcher
from .config import DEFAULT_CONFIG_PATH, AppConfig, ConfigError, WatchBackend, load_config, resolve_paths
from .monitor import CommandFileMonitor


def main(argv: Optional[List[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Run filesystem commands written to a command file")
    parser.add_argument(
        "--config",
        default=None,
        help=f"Path to the YAML configuration file (default: {DEFAULT_CONFIG_PATH} if present)",
    )
    parser.add_argument(
        "--command-file",
        default=None,
        help="File to watch for commands (default: command.txt)",
    )
    parser.add_argument(
        "--base-dir",
        default=None,
        help="Directory that relative command paths are resolved against (default: current directory)",
    )
    parser.add_argument(
        "--backend",
        choices=[option.value for option in WatchBackend],
        default=None,
        help="Change notification backend",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        help="Logging level (DEBUG, INFO, WARNING, ERROR)",
    )
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s - %(message)s",
    )

    try:
        app_config = _load_app_config(args.config)
    except ConfigError as exc:
        logging.error("%s", exc)
        raise SystemExit(2) from exc

    watcher_config = app_config.watcher
    if args.command_file is not None:
        watcher_config.command_file = Path(args.command_file)
    if args.base_dir is not None:
        watcher_config.base_dir = Path(args.base_dir)
    if args.backend is not None:
        watcher_config.backend = WatchBackend(args.backend)
    watcher_config = resolve_paths(watcher_config)

    try:
        dispatcher = CommandDispatcher.from_config(app_config.handlers, root_path=watcher_config.base_dir)
    except RuntimeError as exc:
        logging.error("%s", exc)
        raise SystemExit(2) from exc

    monitor = CommandFileMonitor(watcher_config, dispatcher)
    try:
        monitor.run()
    except OSError as exc:
        logging.error("Cannot watch command file %s: %s", watcher_config.command_file, exc)
        raise SystemExit(1) from exc


def _load_app_config(config: Optional[str]) -> AppConfig:
    if config is not None:
        return load_config(Path(config))
    if DEFAULT_CONFIG_PATH.exists():
        return load_config(DEFAULT_CONFIG_PATH)
    return AppConfig()


if __name__ == "__main__":
    main()
