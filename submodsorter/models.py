from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Dict, List, Tuple


@dataclass(frozen=True, slots=True)
class ValidationInfo:
    cyclic: Tuple[str, ...] = ()
    missing: Tuple[str, ...] = ()

    @property
    def is_valid(self) -> bool:
        return not self.cyclic and not self.missing

    @property
    def reason(self) -> str | None:
        # Missing dependencies are reported ahead of cycles.
        if self.missing:
            return f"Missing dependencies: {';'.join(self.missing)}"
        if self.cyclic:
            return f"Cyclic dependencies: {';'.join(self.cyclic)}"
        return None


EMPTY_VALIDATION = ValidationInfo()


@dataclass(frozen=True, slots=True)
class ModuleRecord:
    id: str
    external_id: str | None = None
    dependencies: Tuple[str, ...] = ()
    load_before: Tuple[str, ...] = ()
    invalid: ValidationInfo = EMPTY_VALIDATION
    name: str | None = None
    version: str | None = None
    path: Path | None = None
    official: bool = False
    selected: bool | None = None

    @property
    def display_name(self) -> str:
        return self.name or self.id


@dataclass(frozen=True, slots=True)
class LoadOrderEntry:
    position: int
    enabled: bool = True
    locked: bool = False


UserLoadOrder = Dict[str, LoadOrderEntry]


@dataclass(frozen=True, slots=True)
class LauncherModData:
    sub_mod_id: str
    enabled: bool


@dataclass(slots=True)
class LauncherData:
    singleplayer: List[LauncherModData] = field(default_factory=list)
    multiplayer: List[LauncherModData] = field(default_factory=list)

    def enabled_singleplayer_ids(self) -> List[str]:
        return [entry.sub_mod_id for entry in self.singleplayer if entry.enabled]


@dataclass(slots=True)
class GameParameters:
    executable: str
    parameters: List[str] = field(default_factory=list)

    @property
    def command_line(self) -> str:
        return " ".join(self.parameters)


@dataclass(slots=True)
class Resolution:
    ordered_ids: List[str]
    validation: Dict[str, ValidationInfo]

    def invalid_ids(self) -> List[str]:
        return [module_id for module_id in self.ordered_ids if not self.validation[module_id].is_valid]


class EventKind(str, Enum):
    DEPLOYMENT_COMPLETED = "did-deploy"
    PROFILE_ACTIVATED = "profile-did-change"


@dataclass(frozen=True, slots=True)
class RefreshEvent:
    kind: EventKind
    profile_id: str | None


@dataclass(slots=True)
class HostState:
    active_profile_id: str | None = None
    profile_games: Dict[str, str] = field(default_factory=dict)
    game_path: Path | None = None
    load_orders: Dict[str, UserLoadOrder] = field(default_factory=dict)

    @property
    def active_game_id(self) -> str | None:
        if self.active_profile_id is None:
            return None
        return self.profile_games.get(self.active_profile_id)

    def load_order_for(self, profile_id: str | None) -> UserLoadOrder:
        if profile_id is None:
            return {}
        return dict(self.load_orders.get(profile_id, {}))
