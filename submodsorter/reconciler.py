from __future__ import annotations

from typing import Iterable, List, Mapping, Sequence

from .constants import BANNERLORD_EXEC, GAME_MODE_SINGLEPLAYER, PARAMS_TEMPLATE, SUBMOD_ID_MARKER
from .logging_utils import log_debug
from .models import GameParameters, LauncherData, LoadOrderEntry, Resolution, UserLoadOrder
from .module_cache import ModuleCache


def enabled_module_ids(
    cache: ModuleCache,
    load_order: Mapping[str, LoadOrderEntry] | None,
    launcher_data: LauncherData | None = None,
) -> List[str]:
    """Return the enabled module ids in launch order.

    A non-empty user load order wins; entries whose external id no longer
    matches a cached module are dropped. Without one, the singleplayer
    selections from the official launcher are used as they are.
    """

    if load_order:
        enabled_keys = sorted(
            (key for key, entry in load_order.items() if entry.enabled),
            key=lambda key: load_order[key].position,
        )
        enabled: List[str] = []
        for key in enabled_keys:
            record = cache.find_by_external_id(key)
            if record is None:
                log_debug(f"Dropping load order entry '{key}': no matching module.")
                continue
            enabled.append(record.id)
        return enabled

    if launcher_data is None:
        return []
    return launcher_data.enabled_singleplayer_ids()


def propose_load_order(
    cache: ModuleCache,
    resolution: Resolution,
    launcher_data: LauncherData | None = None,
) -> UserLoadOrder:
    """Suggest a load order that follows the resolved dependency order.

    Official modules are always enabled and locked; other modules are enabled
    when the official launcher has them selected.
    """

    selected = set(launcher_data.enabled_singleplayer_ids()) if launcher_data else set()
    proposal: UserLoadOrder = {}
    for position, module_id in enumerate(resolution.ordered_ids):
        record = cache.lookup(module_id)
        if record is None or record.external_id is None:
            continue
        proposal[record.external_id] = LoadOrderEntry(
            position=position,
            enabled=record.official or module_id in selected,
            locked=record.official,
        )
    return proposal


def format_sub_mod_ids(module_ids: Iterable[str]) -> str:
    return "".join(f"{SUBMOD_ID_MARKER}{module_id}" for module_id in module_ids)


def build_game_parameters(
    module_ids: Sequence[str],
    game_mode: str = GAME_MODE_SINGLEPLAYER,
    template: Sequence[str] = PARAMS_TEMPLATE,
) -> GameParameters:
    mode_fragment, modules_fragment = template
    parameters = [
        mode_fragment.replace("{{gameMode}}", game_mode),
        modules_fragment.replace("{{subModIds}}", format_sub_mod_ids(module_ids)),
    ]
    return GameParameters(executable=BANNERLORD_EXEC, parameters=parameters)


def refresh_game_parameters(
    cache: ModuleCache,
    load_order: Mapping[str, LoadOrderEntry] | None,
    launcher_data: LauncherData | None = None,
    game_mode: str = GAME_MODE_SINGLEPLAYER,
) -> GameParameters:
    return build_game_parameters(enabled_module_ids(cache, load_order, launcher_data), game_mode)


__all__ = [
    "enabled_module_ids",
    "propose_load_order",
    "format_sub_mod_ids",
    "build_game_parameters",
    "refresh_game_parameters",
]
