"""Parsing of command lines into typed commands."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import ClassVar, Optional, Union


class CommandKeyword(str, Enum):
    """Keywords recognised at the start of a command line, in match order."""

    CREATE_FILE = "create file"
    DELETE_FILE = "delete file"
    ADD_TO_FILE = "add to file"
    DELETE_DIRECTORY = "delete directory"
    CREATE_DIRECTORY = "create directory"
    RENAME_FILE = "rename file"


KEYWORD_SEPARATOR = " "
RENAME_SEPARATOR = " to "


@dataclass(frozen=True)
class CreateFile:
    keyword: ClassVar[CommandKeyword] = CommandKeyword.CREATE_FILE

    path: str


@dataclass(frozen=True)
class DeleteFile:
    keyword: ClassVar[CommandKeyword] = CommandKeyword.DELETE_FILE

    path: str


@dataclass(frozen=True)
class AppendToFile:
    keyword: ClassVar[CommandKeyword] = CommandKeyword.ADD_TO_FILE

    path: str
    data: str


@dataclass(frozen=True)
class DeleteDirectory:
    keyword: ClassVar[CommandKeyword] = CommandKeyword.DELETE_DIRECTORY

    path: str


@dataclass(frozen=True)
class CreateDirectory:
    keyword: ClassVar[CommandKeyword] = CommandKeyword.CREATE_DIRECTORY

    path: str


@dataclass(frozen=True)
class RenameFile:
    keyword: ClassVar[CommandKeyword] = CommandKeyword.RENAME_FILE

    source: str
    destination: str


Command = Union[CreateFile, DeleteFile, AppendToFile, DeleteDirectory, CreateDirectory, RenameFile]


def parse_command(line: str) -> Optional[Command]:
    """Parse the contents of the command file.

    The line must start with one of the :class:`CommandKeyword` values followed
    by a single space. Trailing line terminators are dropped first. Lines that
    match no keyword yield ``None``.
    """

    line = line.rstrip("\r\n")
    for keyword in CommandKeyword:
        prefix = keyword.value + KEYWORD_SEPARATOR
        if line.startswith(prefix):
            remainder = line[len(prefix) :]
            return _build_command(keyword, remainder)
    return None


def _build_command(keyword: CommandKeyword, remainder: str) -> Command:
    if keyword is CommandKeyword.CREATE_FILE:
        return CreateFile(path=remainder)
    if keyword is CommandKeyword.DELETE_FILE:
        return DeleteFile(path=remainder)
    if keyword is CommandKeyword.ADD_TO_FILE:
        tokens = remainder.split(" ")
        return AppendToFile(path=tokens[0], data=" ".join(tokens[1:]))
    if keyword is CommandKeyword.DELETE_DIRECTORY:
        return DeleteDirectory(path=remainder)
    if keyword is CommandKeyword.CREATE_DIRECTORY:
        return CreateDirectory(path=remainder)
    if keyword is CommandKeyword.RENAME_FILE:
        parts = remainder.split(RENAME_SEPARATOR)
        destination = parts[1] if len(parts) > 1 else ""
        return RenameFile(source=parts[0], destination=destination)
    raise ValueError(f"Unhandled command keyword: {keyword!r}")
