from __future__ import annotations

import argparse
from pathlib import Path

from submodsorter import (
    HostState,
    LoadOrderSession,
    SubModSorterError,
    enabled_module_ids,
    export_report,
    load_program_config,
    load_user_load_order,
    print_resolved_order,
    print_validation_details,
    propose_load_order,
)
from submodsorter.constants import GAME_ID
from submodsorter.load_config import dump_user_load_order
from submodsorter.logging_utils import log_info, log_warn, set_verbose


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description=(
            "Scan the SubModule.xml files of a Bannerlord installation, check module "
            "dependencies for cycles and missing modules, and build the launch parameters "
            "from the user's load order."
        )
    )
    parser.add_argument(
        "--game",
        type=Path,
        default=None,
        help="Path to the game installation directory (the one holding 'Modules').",
    )
    parser.add_argument(
        "--config-path",
        type=Path,
        default=Path("config.toml"),
        help="Path to the program configuration TOML file.",
    )
    parser.add_argument(
        "--load-order",
        type=Path,
        default=None,
        help="TOML file with the persisted load order (position/enabled/locked per module).",
    )
    parser.add_argument(
        "--launcher-data",
        type=Path,
        default=None,
        help="Path to the official launcher's LauncherData.xml.",
    )
    parser.add_argument(
        "--profile",
        default="default",
        help="Profile id the load order belongs to.",
    )
    parser.add_argument(
        "--export-path",
        type=Path,
        default=Path(""),
        help="Path to save the load-order report Excel file.",
    )
    parser.add_argument(
        "--write-load-order",
        type=Path,
        default=None,
        help="Write a load order following the resolved dependency order to this TOML file.",
    )
    parser.add_argument(
        "--verbose-validation",
        action="store_true",
        default=False,
        help="Print the resolved order and every cyclic or missing dependency.",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        default=False,
        help="Print debug messages.",
    )
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    set_verbose(args.verbose)

    try:
        config = load_program_config(args.config_path.expanduser())
        load_order = load_user_load_order(args.load_order.expanduser()) if args.load_order else {}
    except SubModSorterError as exc:
        raise SystemExit(str(exc)) from exc
    if args.game is not None:
        config.game = args.game.expanduser().resolve()
    if args.launcher_data is not None:
        config.launcher_data = args.launcher_data.expanduser()
    if config.game is None:
        raise SystemExit("No game path given. Use --game or set 'game' in the config file.")

    state = HostState(
        active_profile_id=args.profile,
        profile_games={args.profile: GAME_ID},
        game_path=config.game,
        load_orders={args.profile: load_order},
    )

    session = LoadOrderSession(config)
    try:
        parameters = session.prepare_for_modding(state)
    except SubModSorterError as exc:
        raise SystemExit(str(exc)) from exc

    resolution = session.last_resolution
    if resolution is None:
        log_warn("No modules were resolved.")
    elif args.verbose_validation:
        print_resolved_order(resolution, session.cache)
        print_validation_details(session.cache)
    else:
        invalid = resolution.invalid_ids()
        if invalid:
            log_warn(f"{len(invalid)} module(s) have dependency problems: {', '.join(invalid)}")

    enabled = enabled_module_ids(session.cache, load_order, session.launcher_data)
    log_info(f"Enabled modules: {', '.join(enabled) if enabled else '(none)'}")
    log_info(f"Executable: {parameters.executable}")
    log_info(f"Parameters: {parameters.command_line}")

    if args.write_load_order is not None and resolution is not None:
        target = args.write_load_order.expanduser()
        if target.exists():
            log_warn(f"{target} already exists, not overwriting it.")
        else:
            proposal = propose_load_order(session.cache, resolution, session.launcher_data)
            target.write_text(dump_user_load_order(proposal), encoding="utf-8")
            log_info(f"Load order written to {target}")

    export_path = args.export_path
    if not export_path == Path("") and resolution is not None:
        if export_path.suffix.lower() != ".xlsx":
            export_path = export_path / "load_order_report.xlsx"
        export_report(
            output_path=export_path,
            cache=session.cache,
            resolution=resolution,
            enabled_ids=enabled,
            load_order=load_order,
        )
        log_info(f"Report saved to {export_path}")


if __name__ == "__main__":
    main()
