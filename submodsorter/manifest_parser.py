from __future__ import annotations

import xml.etree.ElementTree as ET
from dataclasses import replace
from pathlib import Path
from typing import Dict, Iterable, List, Mapping, Tuple

from .constants import OFFICIAL_MODULES
from .errors import ParseInvalid
from .logging_utils import log_debug, log_warn
from .models import ModuleRecord
from .text_utils import clean_value, parse_flag

LOAD_BEFORE_THIS = "loadbeforethis"
LOAD_AFTER_THIS = "loadafterthis"


def _value_of(element: ET.Element | None) -> str | None:
    """Read a manifest field written either as ``value="..."`` or as text."""

    if element is None:
        return None
    value = element.get("value")
    if value is None:
        value = element.text
    return clean_value(value)


def _unique(ids: Iterable[str], module_id: str) -> Tuple[str, ...]:
    unique: List[str] = []
    for other_id in ids:
        if other_id == module_id or other_id in unique:
            continue
        unique.append(other_id)
    return tuple(unique)


def _declared_ordering(root: ET.Element) -> Tuple[List[str], List[str]]:
    """Return (modules loading before this one, modules loading after it).

    ``LoadAfterThis`` metadata names a module that must come after this one;
    it only constrains the order and is never reported as missing.
    """

    before: List[str] = []
    after: List[str] = []
    for node in root.findall("./DependedModules/DependedModule"):
        dep_id = clean_value(node.get("Id") or node.get("id"))
        if dep_id:
            before.append(dep_id)
    for node in root.findall("./DependedModuleMetadatas/DependedModuleMetadata"):
        dep_id = clean_value(node.get("id") or node.get("Id"))
        if not dep_id or parse_flag(node.get("optional")):
            continue
        order = (clean_value(node.get("order")) or "").lower()
        if order == LOAD_BEFORE_THIS:
            before.append(dep_id)
        elif order == LOAD_AFTER_THIS:
            after.append(dep_id)
    return before, after


def parse_submodule_xml(
    document: str | bytes,
    *,
    source: Path | None = None,
    external_id: str | None = None,
    official_modules: Iterable[str] = OFFICIAL_MODULES,
) -> ModuleRecord | None:
    """Turn one SubModule.xml document into a module record.

    Returns ``None`` when the document has no module id.
    """

    try:
        root = ET.fromstring(document)
    except ET.ParseError as exc:
        raise ParseInvalid(str(exc), source) from exc

    module_id = _value_of(root.find("./Id"))
    if not module_id:
        return None

    before, after = _declared_ordering(root)

    selected_node = root.find("./IsSelected")
    selected = parse_flag(_value_of(selected_node)) if selected_node is not None else None

    return ModuleRecord(
        id=module_id,
        external_id=external_id or module_id,
        dependencies=_unique(before, module_id),
        load_before=_unique(after, module_id),
        name=_value_of(root.find("./Name")),
        version=_value_of(root.find("./Version")),
        path=source,
        official=module_id in set(official_modules),
        selected=selected,
    )


def parse_submodule_file(
    path: Path,
    *,
    external_ids: Mapping[str, str] | None = None,
    official_modules: Iterable[str] = OFFICIAL_MODULES,
) -> ModuleRecord | None:
    try:
        document = path.read_bytes()
    except OSError as exc:
        raise ParseInvalid(str(exc), path) from exc
    record = parse_submodule_xml(document, source=path, official_modules=official_modules)
    if record is None:
        log_debug(f"Skipping {path}: no module id declared")
        return None
    if external_ids and record.id in external_ids:
        return replace(record, external_id=external_ids[record.id])
    return record


def collect_module_records(
    paths: Iterable[Path],
    *,
    external_ids: Mapping[str, str] | None = None,
    official_modules: Iterable[str] = OFFICIAL_MODULES,
) -> List[ModuleRecord]:
    """Parse every manifest, keeping the first record seen for each id."""

    official = frozenset(official_modules)
    records: Dict[str, ModuleRecord] = {}
    for path in paths:
        record = parse_submodule_file(path, external_ids=external_ids, official_modules=official)
        if record is None:
            continue
        if record.id in records:
            log_warn(
                f"Duplicate module id '{record.id}' in {path}; "
                f"keeping {records[record.id].path}."
            )
            continue
        records[record.id] = record
    return list(records.values())


__all__ = ["parse_submodule_xml", "parse_submodule_file", "collect_module_records"]
