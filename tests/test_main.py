from __future__ import annotations

from pathlib import Path

import pytest

from termtris import utils
from termtris.main import build_config, describe_keys, main, parse_args
from termtris.settings import GameMode, NetRole, SettingsManager
from termtris.utils import DEFAULT_PORT


@pytest.fixture
def manager(monkeypatch, tmp_path: Path) -> SettingsManager:
    monkeypatch.setattr(utils, "DATA_DIR", tmp_path)
    monkeypatch.setattr(utils, "SETTINGS_FILE", tmp_path / "settings.json")
    return SettingsManager()


def test_defaults_give_endless_game(manager: SettingsManager) -> None:
    config = build_config(parse_args([]), manager)
    assert config.mode is GameMode.ENDLESS
    assert config.role is NetRole.NONE
    assert config.port == DEFAULT_PORT


def test_listen_and_connect_select_versus(manager: SettingsManager) -> None:
    server = build_config(parse_args(["--listen", "4000", "--level", "12"]), manager)
    assert (server.mode, server.role, server.port, server.level) == (GameMode.VERSUS, NetRole.SERVER, 4000, 9)
    client = build_config(parse_args(["--connect", "example.org:4001"]), manager)
    assert (client.role, client.host, client.port) == (NetRole.CLIENT, "example.org", 4001)


def test_connect_without_port_uses_default(manager: SettingsManager) -> None:
    client = build_config(parse_args(["--connect", "peer"]), manager)
    assert client.host == "peer"
    assert client.port == DEFAULT_PORT


def test_versus_needs_a_peer_flag() -> None:
    with pytest.raises(SystemExit):
        parse_args(["--mode", "versus"])


def test_listen_and_connect_are_exclusive() -> None:
    with pytest.raises(SystemExit):
        parse_args(["--listen", "1", "--connect", "a:1"])


def test_sound_dir_overrides_preferences(manager: SettingsManager) -> None:
    config = build_config(parse_args(["--sound-dir", "/tmp/snd"]), manager)
    assert config.preferences.sound_dir == "/tmp/snd"
    assert manager.sound_root == Path("/tmp/snd")


def test_keys_flag_prints_bindings(manager: SettingsManager, capsys) -> None:
    assert main(["--keys"]) == 0
    out = capsys.readouterr().out
    assert "rotate_back" in out
    assert "Esc" in out
    assert describe_keys(manager).splitlines()[0].startswith("left")
