from __future__ import annotations

from pathlib import Path
from typing import Iterable, Sequence

import pytest

from submodsorter.models import LoadOrderEntry, ModuleRecord


def submodule_xml(module_id: str | None, dependencies: Sequence[str] = (), name: str | None = None) -> str:
    deps = "".join(f'<DependedModule Id="{dep}"/>' for dep in dependencies)
    id_node = f'<Id value="{module_id}"/>' if module_id is not None else ""
    return (
        '<?xml version="1.0" encoding="utf-8"?>\n'
        "<Module>\n"
        f'  <Name value="{name or module_id or ""}"/>\n'
        f"  {id_node}\n"
        '  <Version value="v1.0.0"/>\n'
        f"  <DependedModules>{deps}</DependedModules>\n"
        "</Module>\n"
    )


def launcher_xml(singleplayer: Iterable[tuple[str, bool]], multiplayer: Iterable[tuple[str, bool]] = ()) -> str:
    def mod_datas(entries: Iterable[tuple[str, bool]]) -> str:
        return "".join(
            f"<UserModData><Id>{mod_id}</Id><IsSelected>{str(enabled).lower()}</IsSelected></UserModData>"
            for mod_id, enabled in entries
        )

    return (
        '<?xml version="1.0" encoding="utf-8"?>\n'
        "<UserData>\n"
        "  <GameType>Singleplayer</GameType>\n"
        f"  <SingleplayerData><ModDatas>{mod_datas(singleplayer)}</ModDatas></SingleplayerData>\n"
        f"  <MultiplayerData><ModDatas>{mod_datas(multiplayer)}</ModDatas></MultiplayerData>\n"
        "</UserData>\n"
    )


class GameTree:
    def __init__(self, root: Path) -> None:
        self.root = root
        self.modules = root / "Modules"
        self.modules.mkdir(parents=True)

    def add_module(
        self,
        module_id: str,
        dependencies: Sequence[str] = (),
        folder: str | None = None,
        file_name: str = "SubModule.xml",
    ) -> Path:
        module_dir = self.modules / (folder or module_id)
        module_dir.mkdir(parents=True, exist_ok=True)
        path = module_dir / file_name
        path.write_text(submodule_xml(module_id, dependencies), encoding="utf-8")
        return path


@pytest.fixture
def game_tree(tmp_path: Path) -> GameTree:
    tree = GameTree(tmp_path / "game")
    tree.add_module("Native")
    return tree


def record(module_id: str, *dependencies: str, external_id: str | None = None) -> ModuleRecord:
    return ModuleRecord(id=module_id, external_id=external_id or module_id, dependencies=tuple(dependencies))


def entry(position: int, enabled: bool = True, locked: bool = False) -> LoadOrderEntry:
    return LoadOrderEntry(position=position, enabled=enabled, locked=locked)
