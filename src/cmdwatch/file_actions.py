"""Handlers that carry out command file instructions on the filesystem.

Every handler reports its outcome through logging only. Missing targets are
reported at INFO level, any other ``OSError`` at ERROR level, and nothing is
raised to the caller.
"""
from __future__ import annotations

import logging
import shutil

from .actions import ActionContext
from .commands import (
    AppendToFile,
    CreateDirectory,
    CreateFile,
    DeleteDirectory,
    DeleteFile,
    RenameFile,
)

logger = logging.getLogger(__name__)


def create_file(command: CreateFile, context: ActionContext) -> None:
    """Create an empty file unless one already exists."""

    path = context.resolve(command.path)
    try:
        with path.open("x"):
            pass
    except FileExistsError:
        logger.info("File %s already exists", command.path)
        return
    except OSError as exc:
        logger.error("Could not create file %s: %s", command.path, exc)
        return
    logger.info("Created file %s", command.path)


def delete_file(command: DeleteFile, context: ActionContext) -> None:
    path = context.resolve(command.path)
    try:
        path.unlink()
    except FileNotFoundError:
        logger.info("File %s does not exist", command.path)
        return
    except OSError as exc:
        logger.error("Could not delete file %s: %s", command.path, exc)
        return
    logger.info("Deleted file %s", command.path)


def rename_file(command: RenameFile, context: ActionContext) -> None:
    """Rename or move ``command.source`` to ``command.destination``."""

    if not command.destination:
        logger.error("Rename of %s needs a destination ('rename file <path> to <newPath>')", command.source)
        return

    source = context.resolve(command.source)
    try:
        source.rename(context.resolve(command.destination))
    except FileNotFoundError as exc:
        if source.exists():
            logger.error("Could not rename %s to %s: %s", command.source, command.destination, exc)
        else:
            logger.info("File %s does not exist", command.source)
        return
    except OSError as exc:
        logger.error("Could not rename %s to %s: %s", command.source, command.destination, exc)
        return
    logger.info("Renamed %s to %s", command.source, command.destination)


def append_to_file(command: AppendToFile, context: ActionContext) -> None:
    """Append the payload verbatim; no separator is inserted before it."""

    path = context.resolve(command.path)
    try:
        with path.open("a", encoding="utf-8") as handle:
            handle.write(command.data)
    except OSError as exc:
        logger.error("Could not append to file %s: %s", command.path, exc)
        return
    logger.info("Appended %s characters to %s", len(command.data), command.path)


def create_directory(command: CreateDirectory, context: ActionContext) -> None:
    path = context.resolve(command.path)
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        logger.error("Could not create directory %s: %s", command.path, exc)
        return
    logger.info("Created directory %s", command.path)


def delete_directory(command: DeleteDirectory, context: ActionContext) -> None:
    """Remove a directory together with everything inside it."""

    path = context.resolve(command.path)
    try:
        shutil.rmtree(path)
    except FileNotFoundError:
        logger.info("Directory %s does not exist", command.path)
        return
    except OSError as exc:
        logger.error("Could not delete directory %s: %s", command.path, exc)
        return
    logger.info("Deleted directory %s", command.path)
