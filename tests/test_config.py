from pathlib import Path

import pytest

from cmdwatch.commands import CommandKeyword
from cmdwatch.config import (
    AppConfig,
    ConfigError,
    WatchBackend,
    WatcherConfig,
    load_config,
    resolve_paths,
)


def write_config(tmp_path: Path, text: str) -> Path:
    path = tmp_path / "cmdwatch.yaml"
    path.write_text(text)
    return path


def test_defaults():
    config = AppConfig()

    assert config.watcher.command_file == Path("command.txt")
    assert config.watcher.backend is WatchBackend.NATIVE
    assert {cfg.keyword for cfg in config.handlers} == set(CommandKeyword)


def test_missing_file_raises(tmp_path):
    with pytest.raises(ConfigError, match="not found"):
        load_config(tmp_path / "absent.yaml")


def test_empty_file_gives_defaults_relative_to_config(tmp_path):
    config = load_config(write_config(tmp_path, ""))

    assert config.watcher.command_file == (tmp_path / "command.txt").resolve()
    assert config.watcher.base_dir == tmp_path.resolve()
    assert config.watcher.encoding == "utf-8"


def test_watcher_section(tmp_path):
    config = load_config(
        write_config(
            tmp_path,
            "watcher:\n"
            "  command_file: cmds/input.txt\n"
            "  base_dir: /srv/data\n"
            "  encoding: latin-1\n"
            "  backend: polling\n"
            "  poll_interval: 0.5\n",
        )
    )

    assert config.watcher.command_file == (tmp_path / "cmds" / "input.txt").resolve()
    assert config.watcher.base_dir == Path("/srv/data")
    assert config.watcher.encoding == "latin-1"
    assert config.watcher.backend is WatchBackend.POLLING
    assert config.watcher.poll_interval == 0.5


@pytest.mark.parametrize(
    "text, message",
    [
        ("- a\n- b\n", "root must be a mapping"),
        ("watcher: []\n", "'watcher' section must be a mapping"),
        ("watcher:\n  backend: fanotify\n", "watcher.backend must be one of"),
        ("watcher:\n  poll_interval: soon\n", "poll_interval must be numeric"),
        ("watcher:\n  poll_interval: 0\n", "poll_interval must be positive"),
        ("watcher:\n  command_file: 3\n", "watcher.command_file must be a non-empty string"),
        ("handlers: []\n", "'handlers' section must be a mapping"),
        ("handlers:\n  copy file:\n    module: x\n", "handlers key 'copy file' must be one of"),
        ("handlers:\n  create file: nope\n", "must be a mapping"),
        ("handlers:\n  create file:\n    function: f\n", "must include 'module' and 'function'"),
    ],
)
def test_invalid_config(tmp_path, text, message):
    with pytest.raises(ConfigError, match=message):
        load_config(write_config(tmp_path, text))


def test_malformed_yaml_raises_config_error(tmp_path):
    with pytest.raises(ConfigError, match="Failed to parse YAML configuration"):
        load_config(write_config(tmp_path, "watcher: [unclosed\n"))


def test_handler_override_keeps_other_defaults(tmp_path):
    config = load_config(
        write_config(
            tmp_path,
            "handlers:\n"
            "  create file:\n"
            "    module: mypkg.handlers\n",
        )
    )

    by_keyword = {cfg.keyword: cfg for cfg in config.handlers}
    assert by_keyword[CommandKeyword.CREATE_FILE].module == "mypkg.handlers"
    assert by_keyword[CommandKeyword.CREATE_FILE].function == "create_file"
    assert by_keyword[CommandKeyword.DELETE_FILE].module == "cmdwatch.file_actions"


def test_resolve_paths_anchors_relative_paths(tmp_path):
    resolved = resolve_paths(WatcherConfig(command_file=Path("c.txt"), base_dir=Path("work")), cwd=tmp_path)

    assert resolved.command_file == tmp_path / "c.txt"
    assert resolved.base_dir == tmp_path / "work"
