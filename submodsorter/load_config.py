from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Tuple

import toml

from .constants import (
    GAME_MODE_SINGLEPLAYER,
    OFFICIAL_MODULES,
    REQUIRED_MODULES,
    default_launcher_data_path,
)
from .errors import ParseInvalid
from .logging_utils import log_warn
from .models import LoadOrderEntry, UserLoadOrder


@dataclass(slots=True)
class ProgramConfig:
    game: Path | None = None
    launcher_data: Path = field(default_factory=default_launcher_data_path)
    game_mode: str = GAME_MODE_SINGLEPLAYER
    official_modules: frozenset[str] = OFFICIAL_MODULES
    required_modules: Tuple[str, ...] = REQUIRED_MODULES
    external_ids: Dict[str, str] = field(default_factory=dict)


def _read_toml(path: Path) -> Dict[str, Any]:
    raw_text = path.read_text(encoding="utf-8")
    try:
        return toml.loads(raw_text)
    except toml.TomlDecodeError as exc:
        raise ParseInvalid(f"Invalid TOML: {exc}", path) from exc


def _resolve_path(base: Path, value: str | None) -> Path | None:
    if not value:
        return None
    path = Path(value).expanduser()
    if not path.is_absolute():
        path = base / path
    return path


def load_program_config(config_path: Path) -> ProgramConfig:
    """Load the program configuration from a TOML file.

    Relative paths are resolved against the directory holding the config file.
    A missing file yields the defaults.
    """

    config = ProgramConfig()
    if not config_path.exists():
        log_warn(f"Config file {config_path} not found. Proceeding with defaults.")
        return config

    raw = _read_toml(config_path)
    base = config_path.parent

    config.game = _resolve_path(base, raw.get("game"))
    launcher_data = _resolve_path(base, raw.get("launcher_data"))
    if launcher_data is not None:
        config.launcher_data = launcher_data
    config.game_mode = str(raw.get("game_mode", config.game_mode))

    official = raw.get("official_modules")
    if official is not None:
        config.official_modules = frozenset(str(name) for name in official)
    required = raw.get("required_modules")
    if required is not None:
        config.required_modules = tuple(str(name) for name in required)

    external_ids = raw.get("external_ids", {})
    if not isinstance(external_ids, dict):
        raise ParseInvalid("[external_ids] must be a table", config_path)
    config.external_ids = {str(key): str(value) for key, value in external_ids.items()}
    return config


def _entry_flag(values: Dict[str, Any], name: str, default: bool, key: str, path: Path) -> bool:
    value = values.get(name, default)
    if not isinstance(value, bool):
        raise ParseInvalid(f"load order entry '{key}': '{name}' must be true or false", path)
    return value


def _entry_position(values: Dict[str, Any], key: str, path: Path) -> int:
    value = values["position"]
    # bool is an int subclass; 'position = true' is still a mistake.
    if isinstance(value, bool) or not isinstance(value, int):
        raise ParseInvalid(f"load order entry '{key}': 'position' must be an integer", path)
    return value


def load_user_load_order(load_order_path: Path) -> UserLoadOrder:
    """Load a persisted load order keyed by external module id.

    Each ``[load_order."<id>"]`` table carries ``position``, ``enabled`` and
    ``locked``. Entries without a position are placed after the others in
    file order.
    """

    load_order: UserLoadOrder = {}
    if not load_order_path.exists():
        log_warn(f"Load-order file {load_order_path} not found. Proceeding without a load order.")
        return load_order

    raw = _read_toml(load_order_path)
    entries = raw.get("load_order", {})
    if not isinstance(entries, dict):
        raise ParseInvalid("[load_order] must be a table", load_order_path)

    unpositioned: List[Tuple[str, Dict[str, Any]]] = []
    for key, values in entries.items():
        if not isinstance(values, dict):
            raise ParseInvalid(f"load order entry '{key}' must be a table", load_order_path)
        if "position" not in values:
            unpositioned.append((key, values))
            continue
        load_order[key] = LoadOrderEntry(
            position=_entry_position(values, key, load_order_path),
            enabled=_entry_flag(values, "enabled", True, key, load_order_path),
            locked=_entry_flag(values, "locked", False, key, load_order_path),
        )

    next_position = max((entry.position for entry in load_order.values()), default=-1) + 1
    for offset, (key, values) in enumerate(unpositioned):
        load_order[key] = LoadOrderEntry(
            position=next_position + offset,
            enabled=_entry_flag(values, "enabled", True, key, load_order_path),
            locked=_entry_flag(values, "locked", False, key, load_order_path),
        )
    return load_order


def dump_user_load_order(load_order: UserLoadOrder) -> str:
    tables = {
        key: {"position": entry.position, "enabled": entry.enabled, "locked": entry.locked}
        for key, entry in sorted(load_order.items(), key=lambda item: item[1].position)
    }
    return toml.dumps({"load_order": tables})
