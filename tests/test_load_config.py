from __future__ import annotations

from pathlib import Path

import pytest

from submodsorter.constants import OFFICIAL_MODULES, REQUIRED_MODULES
from submodsorter.errors import ParseInvalid
from submodsorter.load_config import (
    dump_user_load_order,
    load_program_config,
    load_user_load_order,
)
from submodsorter.models import LoadOrderEntry


def test_missing_program_config_uses_defaults(tmp_path: Path):
    config = load_program_config(tmp_path / "config.toml")
    assert config.game is None
    assert config.game_mode == "singleplayer"
    assert config.official_modules == OFFICIAL_MODULES
    assert config.required_modules == REQUIRED_MODULES
    assert config.external_ids == {}
    assert config.launcher_data.name == "LauncherData.xml"


def test_program_config_resolves_relative_paths(tmp_path: Path):
    path = tmp_path / "config.toml"
    path.write_text(
        'game = "Bannerlord"\n'
        'launcher_data = "Configs/LauncherData.xml"\n'
        'required_modules = ["Native", "SandBoxCore"]\n'
        "\n"
        "[external_ids]\n"
        '"Bannerlord.Harmony" = "harmony-2006"\n',
        encoding="utf-8",
    )
    config = load_program_config(path)
    assert config.game == tmp_path / "Bannerlord"
    assert config.launcher_data == tmp_path / "Configs" / "LauncherData.xml"
    assert config.required_modules == ("Native", "SandBoxCore")
    assert config.external_ids == {"Bannerlord.Harmony": "harmony-2006"}


def test_invalid_toml_is_parse_invalid(tmp_path: Path):
    path = tmp_path / "config.toml"
    path.write_text("game = 'a'\ngame = 'b'\n", encoding="utf-8")
    with pytest.raises(ParseInvalid):
        load_program_config(path)


def test_load_user_load_order(tmp_path: Path):
    path = tmp_path / "loadorder.toml"
    path.write_text(
        '[load_order.Native]\nposition = 0\nenabled = true\nlocked = true\n\n'
        '[load_order."harmony-2006"]\nposition = 1\nenabled = false\n\n'
        '[load_order.Unplaced]\n',
        encoding="utf-8",
    )
    load_order = load_user_load_order(path)
    assert load_order["Native"] == LoadOrderEntry(position=0, enabled=True, locked=True)
    assert load_order["harmony-2006"] == LoadOrderEntry(position=1, enabled=False, locked=False)
    assert load_order["Unplaced"] == LoadOrderEntry(position=2, enabled=True, locked=False)


def test_missing_load_order_is_empty(tmp_path: Path):
    assert load_user_load_order(tmp_path / "loadorder.toml") == {}


def test_dumped_load_order_loads_back(tmp_path: Path):
    load_order = {
        "Native": LoadOrderEntry(position=0, enabled=True, locked=True),
        "mod-b": LoadOrderEntry(position=1, enabled=False),
    }
    path = tmp_path / "loadorder.toml"
    path.write_text(dump_user_load_order(load_order), encoding="utf-8")
    assert load_user_load_order(path) == load_order


@pytest.mark.parametrize(
    "table",
    [
        'position = 0\nenabled = "false"\n',
        'position = 0\nlocked = 1\n',
        'position = "first"\n',
        "position = true\n",
    ],
)
def test_load_order_entry_with_wrong_types_is_parse_invalid(tmp_path: Path, table: str):
    path = tmp_path / "loadorder.toml"
    path.write_text(f"[load_order.MyMod]\n{table}", encoding="utf-8")
    with pytest.raises(ParseInvalid) as excinfo:
        load_user_load_order(path)
    assert "MyMod" in str(excinfo.value)
