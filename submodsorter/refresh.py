from __future__ import annotations

from pathlib import Path
from typing import Callable, List

from .constants import GAME_ID
from .errors import DiscoveryIncomplete, OfficialFilesMissing, PreferencesNotFound, ScanFailure
from .load_config import ProgramConfig
from .logging_utils import log_debug, log_error, log_info
from .manifest_parser import collect_module_records
from .launcher_data import read_launcher_data
from .models import (
    GameParameters,
    HostState,
    LauncherData,
    RefreshEvent,
    Resolution,
    UserLoadOrder,
    ValidationInfo,
)
from .module_cache import ModuleCache
from .reconciler import refresh_game_parameters
from .resolver import refresh_validation
from .scanner import discover_submodule_files

Notifier = Callable[[str, str | None], None]

LAUNCHER_DATA_MISSING = "Failed to find game launcher data"
LAUNCHER_DATA_HINT = (
    "Please run the game at least once through the official game launcher and try again"
)


def log_notification(title: str, detail: str | None = None) -> None:
    if detail:
        log_error(f"{title}: {detail}")
    else:
        log_error(title)


class LoadOrderSession:
    """Owns the module cache and the state derived from it for one game.

    Host notifications reach the session as explicit calls:
    ``refresh_on_event`` for deployment and profile switches and
    ``prepare_for_modding`` for the setup pass.
    """

    def __init__(
        self,
        config: ProgramConfig | None = None,
        notify: Notifier | None = None,
        cancel_check: Callable[[], bool] | None = None,
    ) -> None:
        self.config = config or ProgramConfig()
        self.notify: Notifier = notify or log_notification
        self.cancel_check = cancel_check
        self.cache = ModuleCache()
        self.launcher_data: LauncherData | None = None
        self.game_parameters: GameParameters | None = None
        self.last_resolution: Resolution | None = None

    def _deployed_submodule_paths(self, state: HostState) -> List[Path]:
        try:
            return discover_submodule_files(
                state.game_path,
                required_modules=self.config.required_modules,
                cancel_check=self.cancel_check,
            )
        except (OfficialFilesMissing, ScanFailure) as exc:
            self.notify(str(exc), str(exc.path) if exc.path else None)
        return []

    def _rebuild(self, state: HostState, hint: UserLoadOrder | None) -> Resolution:
        # Derived state goes with the cache so a failed pass leaves nothing
        # from the previous scan behind.
        self.cache.clear()
        self.last_resolution = None
        self.game_parameters = None
        paths = self._deployed_submodule_paths(state)
        records = collect_module_records(
            paths,
            external_ids=self.config.external_ids,
            official_modules=self.config.official_modules,
        )
        self.cache.rebuild(records)
        # Only highlights cyclic and missing dependencies; the user's load
        # order is left as it is.
        self.last_resolution = refresh_validation(self.cache, hint)
        return self.last_resolution

    def _update_parameters(self, load_order: UserLoadOrder) -> GameParameters:
        self.game_parameters = refresh_game_parameters(
            self.cache,
            load_order,
            self.launcher_data,
            game_mode=self.config.game_mode,
        )
        log_debug(f"Game parameters: {self.game_parameters.command_line}")
        return self.game_parameters

    def refresh_on_event(
        self,
        state: HostState,
        event: RefreshEvent,
        on_refreshed: Callable[[], None] | None = None,
    ) -> GameParameters | None:
        """Rebuild the cache after a deployment or profile switch.

        Events for a profile other than the active one, or for another game,
        are ignored and leave the cache untouched. A refresh that fails after
        the cache was cleared leaves no resolution and no game parameters.
        """

        if event.profile_id is None:
            return None
        if state.active_profile_id is not None and event.profile_id != state.active_profile_id:
            log_debug(f"Ignoring {event.kind.value} for inactive profile '{event.profile_id}'.")
            return None
        if state.active_game_id != GAME_ID:
            log_debug(f"Ignoring {event.kind.value}: active profile manages another game.")
            return None

        load_order = state.load_order_for(state.active_profile_id)
        try:
            self._rebuild(state, hint=load_order)
        except DiscoveryIncomplete as exc:
            # Discovery problems are reported by the setup pass.
            log_debug(f"Refresh skipped: {exc}")
            return None

        if on_refreshed is not None:
            on_refreshed()
        return self._update_parameters(load_order)

    def prepare_for_modding(self, state: HostState) -> GameParameters:
        """Setup pass: read the launcher selections and rebuild the cache.

        Launch parameters are recomputed even when the pass fails part way.
        """

        try:
            try:
                self.launcher_data = read_launcher_data(self.config.launcher_data)
            except PreferencesNotFound:
                self.notify(LAUNCHER_DATA_MISSING, LAUNCHER_DATA_HINT)
            else:
                self._rebuild(state, hint=None)
                log_info(f"Discovered {len(self.cache)} module(s).")
        except DiscoveryIncomplete as exc:
            self.notify(LAUNCHER_DATA_MISSING, str(exc))
            raise
        finally:
            # Valid to have no active profile when switching to the game.
            self._update_parameters(state.load_order_for(state.active_profile_id))
        return self.game_parameters

    def validation_for(self, external_id: str) -> ValidationInfo:
        return self.cache.validation_for(external_id)


__all__ = ["LoadOrderSession", "log_notification", "Notifier"]
