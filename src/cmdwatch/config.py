"""Configuration loading utilities for the command file watcher."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml # type: ignore

from .commands import CommandKeyword


logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path("cmdwatch.yaml")
DEFAULT_COMMAND_FILE = Path("command.txt")
DEFAULT_HANDLER_MODULE = "cmdwatch.file_actions"
DEFAULT_HANDLER_FUNCTIONS: Dict[CommandKeyword, str] = {
    CommandKeyword.CREATE_FILE: "create_file",
    CommandKeyword.DELETE_FILE: "delete_file",
    CommandKeyword.ADD_TO_FILE: "append_to_file",
    CommandKeyword.DELETE_DIRECTORY: "delete_directory",
    CommandKeyword.CREATE_DIRECTORY: "create_directory",
    CommandKeyword.RENAME_FILE: "rename_file",
}


class ConfigError(Exception):
    """Raised when the configuration file is missing or invalid."""


class WatchBackend(str, Enum):
    """Notification mechanisms available to the watcher."""

    NATIVE = "native"
    POLLING = "polling"


@dataclass
class WatcherConfig:
    """Options describing which file to watch and how."""

    command_file: Path = DEFAULT_COMMAND_FILE
    base_dir: Path = Path(".")
    encoding: str = "utf-8"
    backend: WatchBackend = WatchBackend.NATIVE
    poll_interval: float = 1.0


@dataclass
class HandlerConfig:
    """Location of the callable that performs one command."""

    keyword: CommandKeyword
    module: str = DEFAULT_HANDLER_MODULE
    function: str = ""


@dataclass
class AppConfig:
    """Top-level configuration structure."""

    watcher: WatcherConfig = field(default_factory=WatcherConfig)
    handlers: List[HandlerConfig] = field(default_factory=lambda: default_handlers())


def default_handlers() -> List[HandlerConfig]:
    """Handler table pointing every keyword at the built-in filesystem actions."""

    return [
        HandlerConfig(keyword=keyword, module=DEFAULT_HANDLER_MODULE, function=function)
        for keyword, function in DEFAULT_HANDLER_FUNCTIONS.items()
    ]


def load_config(path: Path) -> AppConfig:
    """Load and validate the YAML configuration file."""

    if not path.exists():
        raise ConfigError(f"Configuration file not found: {path}")

    try:
        data = yaml.safe_load(path.read_text())
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse YAML configuration: {exc}") from exc

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError("Configuration root must be a mapping")

    watcher_cfg = _parse_watcher_config(data.get("watcher"), config_path=path)
    handlers_cfg = _parse_handlers_config(data.get("handlers"))

    return AppConfig(watcher=watcher_cfg, handlers=handlers_cfg)


def _parse_watcher_config(raw: Any, *, config_path: Path) -> WatcherConfig:
    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise ConfigError("'watcher' section must be a mapping")

    command_file = _parse_path_field(
        raw.get("command_file", str(DEFAULT_COMMAND_FILE)),
        field_name="watcher.command_file",
        config_path=config_path,
    )
    base_dir = _parse_path_field(
        raw.get("base_dir", "."),
        field_name="watcher.base_dir",
        config_path=config_path,
    )

    encoding = raw.get("encoding", "utf-8")
    if not isinstance(encoding, str) or not encoding:
        raise ConfigError("watcher.encoding must be a non-empty string")

    backend_raw = raw.get("backend", WatchBackend.NATIVE.value)
    try:
        backend = WatchBackend(backend_raw)
    except ValueError as exc:
        allowed = ", ".join(option.value for option in WatchBackend)
        raise ConfigError(f"watcher.backend must be one of: {allowed}") from exc

    poll_interval = raw.get("poll_interval", 1.0)
    try:
        poll_interval_val = float(poll_interval)
    except (TypeError, ValueError) as exc:
        raise ConfigError("watcher.poll_interval must be numeric") from exc
    if poll_interval_val <= 0:
        raise ConfigError("watcher.poll_interval must be positive")

    return WatcherConfig(
        command_file=command_file,
        base_dir=base_dir,
        encoding=encoding,
        backend=backend,
        poll_interval=poll_interval_val,
    )


def _parse_handlers_config(raw: Any) -> List[HandlerConfig]:
    handlers = {cfg.keyword: cfg for cfg in default_handlers()}
    if raw is None:
        return list(handlers.values())
    if not isinstance(raw, dict):
        raise ConfigError("'handlers' section must be a mapping of command keyword to handler")

    for name, item in raw.items():
        try:
            keyword = CommandKeyword(name)
        except ValueError as exc:
            allowed = ", ".join(option.value for option in CommandKeyword)
            raise ConfigError(f"handlers key {name!r} must be one of: {allowed}") from exc

        if not isinstance(item, dict):
            raise ConfigError(f"handlers[{name!r}] must be a mapping")

        module = item.get("module")
        function = item.get("function", DEFAULT_HANDLER_FUNCTIONS[keyword])
        if not isinstance(module, str) or not isinstance(function, str):
            raise ConfigError(f"handlers[{name!r}] must include 'module' and 'function' strings")

        handlers[keyword] = HandlerConfig(keyword=keyword, module=module, function=function)
        logger.info("Loaded handler override '%s' (%s.%s)", keyword.value, module, function)

    return list(handlers.values())


def _parse_path_field(value: Any, *, field_name: str, config_path: Path) -> Path:
    if not isinstance(value, str) or not value:
        raise ConfigError(f"{field_name} must be a non-empty string")
    path = Path(value)
    if not path.is_absolute():
        path = (config_path.parent / path).resolve()
    return path


def resolve_paths(config: WatcherConfig, *, cwd: Optional[Path] = None) -> WatcherConfig:
    """Return a copy of ``config`` with relative paths anchored at ``cwd``."""

    anchor = cwd or Path.cwd()
    command_file = config.command_file
    if not command_file.is_absolute():
        command_file = anchor / command_file
    base_dir = config.base_dir
    if not base_dir.is_absolute():
        base_dir = anchor / base_dir
    return WatcherConfig(
        command_file=command_file,
        base_dir=base_dir,
        encoding=config.encoding,
        backend=config.backend,
        poll_interval=config.poll_interval,
    )
