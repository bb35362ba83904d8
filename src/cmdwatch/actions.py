"""Handler loading and command dispatch."""
from __future__ import annotations

import importlib
import logging
from dataclasses import dataclass
from pathlib import Path
from types import ModuleType
from typing import Any, Callable, Dict, Iterable, Mapping, Optional, cast

from .commands import Command, CommandKeyword, parse_command
from .config import HandlerConfig

logger = logging.getLogger(__name__)


Handler = Callable[[Any, "ActionContext"], None]


@dataclass(frozen=True)
class ActionContext:
    """Context passed to command handlers."""

    root_path: Path

    def resolve(self, path: str) -> Path:
        """Anchor a path taken from a command line at the base directory."""

        return self.root_path / path


class CommandDispatcher:
    """Maps each command keyword to exactly one handler and invokes it."""

    def __init__(self, handlers: Mapping[CommandKeyword, Handler], *, root_path: Path):
        missing = [keyword.value for keyword in CommandKeyword if keyword not in handlers]
        if missing:
            raise RuntimeError(f"No handler registered for: {', '.join(missing)}")
        self._handlers: Dict[CommandKeyword, Handler] = dict(handlers)
        self._context = ActionContext(root_path=root_path)

    @classmethod
    def from_config(cls, handlers: Iterable[HandlerConfig], *, root_path: Path) -> "CommandDispatcher":
        return cls({cfg.keyword: _load_handler(cfg) for cfg in handlers}, root_path=root_path)

    @property
    def root_path(self) -> Path:
        return self._context.root_path

    def dispatch(self, line: str) -> Optional[Command]:
        """Parse ``line`` and run the matching handler; unknown lines are ignored."""

        command = parse_command(line)
        if command is None:
            return None
        handler = self._handlers[command.keyword]
        logger.debug("Dispatching %s to %s", command, getattr(handler, "__name__", handler))
        self._safe_invoke(handler, command)
        return command

    def _safe_invoke(self, handler: Handler, command: Command) -> None:
        try:
            handler(command, self._context)
        except Exception:
            logger.exception("Handler for '%s' failed on %s", command.keyword.value, command)


def _load_handler(config: HandlerConfig) -> Handler:
    module = _import_module(config.module)
    try:
        handler = getattr(module, config.function)
    except AttributeError as exc:
        raise RuntimeError(
            f"Handler for '{config.keyword.value}' could not find function '{config.function}' in {config.module}"
        ) from exc

    if not callable(handler):
        raise RuntimeError(
            f"Handler for '{config.keyword.value}' attribute '{config.function}' in {config.module} is not callable"
        )

    return cast(Handler, handler)


def _import_module(module_path: str) -> ModuleType:
    try:
        return importlib.import_module(module_path)
    except ImportError as exc:
        raise RuntimeError(f"Unable to import handler module '{module_path}'") from exc
