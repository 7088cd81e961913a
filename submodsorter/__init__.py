"""Core package for Bannerlord sub-module load-order tooling."""

from .errors import (
    DiscoveryIncomplete,
    OfficialFilesMissing,
    ParseInvalid,
    PreferencesNotFound,
    ScanFailure,
    SubModSorterError,
    UserCancelled,
)
from .launcher_data import parse_launcher_data, read_launcher_data
from .load_config import ProgramConfig, load_program_config, load_user_load_order
from .manifest_parser import collect_module_records, parse_submodule_file, parse_submodule_xml
from .models import (
    EventKind,
    GameParameters,
    HostState,
    LauncherData,
    LauncherModData,
    LoadOrderEntry,
    ModuleRecord,
    RefreshEvent,
    Resolution,
    ValidationInfo,
)
from .module_cache import ModuleCache
from .reconciler import (
    build_game_parameters,
    enabled_module_ids,
    propose_load_order,
    refresh_game_parameters,
)
from .refresh import LoadOrderSession
from .report import export_report, print_resolved_order, print_validation_details
from .resolver import refresh_validation, resolve
from .scanner import discover_submodule_files

__all__ = [
    "SubModSorterError",
    "DiscoveryIncomplete",
    "OfficialFilesMissing",
    "ScanFailure",
    "ParseInvalid",
    "PreferencesNotFound",
    "UserCancelled",
    "EventKind",
    "GameParameters",
    "HostState",
    "LauncherData",
    "LauncherModData",
    "LoadOrderEntry",
    "ModuleRecord",
    "RefreshEvent",
    "Resolution",
    "ValidationInfo",
    "ModuleCache",
    "ProgramConfig",
    "load_program_config",
    "load_user_load_order",
    "discover_submodule_files",
    "parse_submodule_xml",
    "parse_submodule_file",
    "collect_module_records",
    "parse_launcher_data",
    "read_launcher_data",
    "resolve",
    "refresh_validation",
    "enabled_module_ids",
    "propose_load_order",
    "build_game_parameters",
    "refresh_game_parameters",
    "LoadOrderSession",
    "print_validation_details",
    "print_resolved_order",
    "export_report",
]
