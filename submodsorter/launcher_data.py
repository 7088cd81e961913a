from __future__ import annotations

import xml.etree.ElementTree as ET
from pathlib import Path
from typing import List

from .errors import ParseInvalid, PreferencesNotFound
from .logging_utils import log_debug
from .models import LauncherData, LauncherModData
from .text_utils import clean_value, parse_flag

SINGLEPLAYER_MODS = "./SingleplayerData/ModDatas"
MULTIPLAYER_MODS = "./MultiplayerData/ModDatas"


def _read_mod_datas(root: ET.Element, section: str, source: Path | None) -> List[LauncherModData]:
    container = root.find(section)
    if container is None:
        raise ParseInvalid(f"missing section {section.lstrip('./')}", source)

    entries: List[LauncherModData] = []
    for node in container:
        sub_mod_id = clean_value(node.findtext("Id"))
        if not sub_mod_id:
            continue
        entries.append(
            LauncherModData(
                sub_mod_id=sub_mod_id,
                enabled=parse_flag(node.findtext("IsSelected")),
            )
        )
    return entries


def parse_launcher_data(document: str | bytes, source: Path | None = None) -> LauncherData:
    try:
        root = ET.fromstring(document)
    except ET.ParseError as exc:
        raise ParseInvalid(str(exc), source) from exc
    if root.tag != "UserData":
        raise ParseInvalid(f"unexpected root element <{root.tag}>", source)

    return LauncherData(
        singleplayer=_read_mod_datas(root, SINGLEPLAYER_MODS, source),
        multiplayer=_read_mod_datas(root, MULTIPLAYER_MODS, source),
    )


def read_launcher_data(path: Path) -> LauncherData:
    """Read the official launcher's module selections from LauncherData.xml."""

    if not path.is_file():
        raise PreferencesNotFound(path)
    data = parse_launcher_data(path.read_bytes(), source=path)
    log_debug(
        f"Launcher data: {len(data.singleplayer)} singleplayer, "
        f"{len(data.multiplayer)} multiplayer module(s)."
    )
    return data


__all__ = ["parse_launcher_data", "read_launcher_data"]
