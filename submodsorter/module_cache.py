from __future__ import annotations

from dataclasses import replace
from typing import Dict, Iterable, Iterator, Mapping, Tuple

from .logging_utils import log_debug, log_warn
from .models import EMPTY_VALIDATION, ModuleRecord, ValidationInfo


class ModuleCache:
    """Owned mapping of module id to module record.

    Every mutation builds a fresh dictionary and swaps it in, so a reader
    holding the result of ``records()`` or ``all_ids()`` never sees a mix of
    two scans.
    """

    __slots__ = ("_records",)

    def __init__(self, records: Iterable[ModuleRecord] = ()) -> None:
        self._records: Dict[str, ModuleRecord] = {}
        if records:
            self.rebuild(records)

    def rebuild(self, records: Iterable[ModuleRecord]) -> None:
        fresh: Dict[str, ModuleRecord] = {}
        for record in records:
            if record.id in fresh:
                log_warn(f"Ignoring duplicate module id '{record.id}' during cache rebuild.")
                continue
            fresh[record.id] = replace(record, invalid=EMPTY_VALIDATION)
        self._records = fresh
        log_debug(f"Module cache rebuilt with {len(fresh)} module(s).")

    def clear(self) -> None:
        self._records = {}

    def lookup(self, module_id: str) -> ModuleRecord | None:
        return self._records.get(module_id)

    def all_ids(self) -> Tuple[str, ...]:
        return tuple(self._records)

    def records(self) -> Tuple[ModuleRecord, ...]:
        return tuple(self._records.values())

    def find_by_external_id(self, external_id: str) -> ModuleRecord | None:
        for record in self._records.values():
            if record.external_id == external_id:
                return record
        return None

    def apply_validation(self, validation: Mapping[str, ValidationInfo]) -> None:
        # Records without an entry are reset so results never accumulate.
        fresh = {
            module_id: replace(record, invalid=validation.get(module_id, EMPTY_VALIDATION))
            for module_id, record in self._records.items()
        }
        self._records = fresh

    def validation_for(self, external_id: str) -> ValidationInfo:
        record = self.find_by_external_id(external_id)
        if record is None or record.invalid is None:
            return EMPTY_VALIDATION
        return record.invalid

    def __contains__(self, module_id: object) -> bool:
        return module_id in self._records

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[str]:
        return iter(self.all_ids())
