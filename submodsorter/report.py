from __future__ import annotations

from pathlib import Path
from typing import Any, List, Mapping, Sequence

from openpyxl import Workbook

from .file_utils import ensure_directory
from .logging_utils import log_cyclic, log_info, log_missing, log_ok
from .models import LoadOrderEntry, ModuleRecord, Resolution
from .module_cache import ModuleCache


def print_validation_details(cache: ModuleCache) -> None:
    invalid = [record for record in cache.records() if not record.invalid.is_valid]
    if not invalid:
        log_ok("No cyclic or missing dependencies found.")
        return
    for record in invalid:
        if record.invalid.missing:
            log_missing(f"{record.display_name}: {', '.join(record.invalid.missing)}", indent=2)
        if record.invalid.cyclic:
            log_cyclic(f"{record.display_name}: {', '.join(record.invalid.cyclic)}", indent=2)


def print_resolved_order(resolution: Resolution, cache: ModuleCache) -> None:
    log_info("Resolved module order:")
    for position, module_id in enumerate(resolution.ordered_ids):
        record = cache.lookup(module_id)
        label = record.display_name if record else module_id
        reason = resolution.validation[module_id].reason
        suffix = f" ({reason})" if reason else ""
        log_info(f"{position + 1:>3}. {label}{suffix}", indent=2)


def _join(values: Sequence[str]) -> str:
    return ", ".join(values)


def _module_row(index: int, record: ModuleRecord) -> List[Any]:
    return [
        index,  # scan order
        record.id,
        record.external_id or "",
        record.name or "",
        record.version or "",
        "yes" if record.official else "no",
        _join(record.dependencies),
        _join(record.invalid.cyclic),
        _join(record.invalid.missing),
        str(record.path) if record.path else "",
    ]


def export_report(
    output_path: Path,
    cache: ModuleCache,
    resolution: Resolution,
    enabled_ids: Sequence[str],
    load_order: Mapping[str, LoadOrderEntry] | None = None,
) -> None:
    """Write an Excel report of the discovered modules and both orderings."""

    ensure_directory(output_path.parent)

    workbook = Workbook()

    # Export Module sheet
    modules_sheet = workbook.active
    if not modules_sheet:
        modules_sheet = workbook.create_sheet("modules")
    else:
        modules_sheet.title = "modules"
    modules_sheet.append([
        "scan order",
        "id",
        "external id",
        "name",
        "version",
        "official",
        "dependencies",
        "cyclic",
        "missing",
        "manifest path",
    ])
    for index, record in enumerate(cache.records()):
        modules_sheet.append(_module_row(index, record))

    # Export resolved dependency order
    resolved_sheet = workbook.create_sheet("resolved_order")
    resolved_sheet.append(["position", "id", "enabled", "problem"])
    enabled_lookup = set(enabled_ids)
    for position, module_id in enumerate(resolution.ordered_ids):
        reason = resolution.validation[module_id].reason
        resolved_sheet.append([
            position,
            module_id,
            "yes" if module_id in enabled_lookup else "no",
            reason or "",
        ])

    # Export user load order
    load_order_sheet = workbook.create_sheet("load_order")
    load_order_sheet.append(["position", "external id", "module id", "enabled", "locked"])
    for key, entry in sorted((load_order or {}).items(), key=lambda item: (item[1].position, item[0])):
        record = cache.find_by_external_id(key)
        load_order_sheet.append([
            entry.position,
            key,
            record.id if record else "",
            "yes" if entry.enabled else "no",
            "yes" if entry.locked else "no",
        ])

    workbook.save(output_path)
    workbook.close()


__all__ = ["print_validation_details", "print_resolved_order", "export_report"]
