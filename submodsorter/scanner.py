from __future__ import annotations

from pathlib import Path
from typing import Callable, Iterable, List

from .constants import MODULES, OFFICIAL_MODULES, REQUIRED_MODULES, SUBMOD_FILE
from .errors import DiscoveryIncomplete, OfficialFilesMissing, ScanFailure, UserCancelled
from .file_utils import walk_files
from .logging_utils import log_debug, log_warn


def modules_root(game_path: Path) -> Path:
    return game_path / MODULES


def _is_official_path(path: str | Path | None) -> bool:
    if path is None:
        return False
    name = Path(path).name
    return name == MODULES or name in OFFICIAL_MODULES


def discover_submodule_files(
    game_path: Path | None,
    *,
    required_modules: Iterable[str] = REQUIRED_MODULES,
    cancel_check: Callable[[], bool] | None = None,
) -> List[Path]:
    """Return every SubModule.xml found below the game's Modules directory."""

    if game_path is None:
        raise DiscoveryIncomplete("game discovery is incomplete")
    game_path = Path(game_path)
    if not game_path.is_dir():
        raise DiscoveryIncomplete(f"game path {game_path} does not exist")

    root = modules_root(game_path)
    if not root.is_dir():
        raise OfficialFilesMissing(root)
    for module_name in required_modules:
        if not (root / module_name).is_dir():
            raise OfficialFilesMissing(root / module_name)

    try:
        module_files = walk_files(root, cancel_check=cancel_check)
    except UserCancelled:
        log_warn("Module scan cancelled, continuing without modules.")
        return []
    except FileNotFoundError as exc:
        if _is_official_path(exc.filename):
            raise OfficialFilesMissing(exc.filename) from exc
        raise ScanFailure(str(exc), exc.filename) from exc
    except OSError as exc:
        raise ScanFailure(str(exc), exc.filename) from exc

    submodules = [path for path in module_files if path.name.lower() == SUBMOD_FILE]
    log_debug(f"Found {len(submodules)} SubModule.xml file(s) under {root}")
    return submodules


__all__ = ["discover_submodule_files", "modules_root"]
