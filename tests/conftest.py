"""Shared fixtures for the command file watcher tests."""
from pathlib import Path

import pytest

from cmdwatch.actions import ActionContext, CommandDispatcher
from cmdwatch.config import default_handlers


@pytest.fixture
def context(tmp_path: Path) -> ActionContext:
    return ActionContext(root_path=tmp_path)


@pytest.fixture
def dispatcher(tmp_path: Path) -> CommandDispatcher:
    """Dispatcher wired to the built-in filesystem handlers, rooted at tmp_path."""
    return CommandDispatcher.from_config(default_handlers(), root_path=tmp_path)
