from __future__ import annotations

import heapq
from typing import Dict, Iterable, List, Mapping, Sequence, Set, Tuple

from .logging_utils import log_debug
from .models import LoadOrderEntry, ModuleRecord, Resolution, ValidationInfo
from .module_cache import ModuleCache

SortKey = Tuple[int, int, int]


def _tie_break_keys(
    records: Sequence[ModuleRecord],
    hint: Mapping[str, LoadOrderEntry] | None,
) -> Dict[str, SortKey]:
    """Hinted modules sort by recorded position, the rest by scan order after them."""

    keys: Dict[str, SortKey] = {}
    for index, record in enumerate(records):
        entry = hint.get(record.external_id) if hint and record.external_id is not None else None
        if entry is not None:
            keys[record.id] = (0, entry.position, index)
        else:
            keys[record.id] = (1, 0, index)
    return keys


def _strongly_connected(nodes: Sequence[str], edges: Mapping[str, Sequence[str]]) -> List[List[str]]:
    """Iterative Tarjan over ``nodes``; edges leaving the node set are ignored."""

    node_set = set(nodes)
    index_of: Dict[str, int] = {}
    lowlink: Dict[str, int] = {}
    on_stack: Set[str] = set()
    stack: List[str] = []
    components: List[List[str]] = []
    counter = 0

    for start in nodes:
        if start in index_of:
            continue
        work: List[Tuple[str, int]] = [(start, 0)]
        while work:
            node, child_index = work.pop()
            if child_index == 0:
                index_of[node] = lowlink[node] = counter
                counter += 1
                stack.append(node)
                on_stack.add(node)
            successors = [succ for succ in edges.get(node, ()) if succ in node_set]
            recurse = False
            for position in range(child_index, len(successors)):
                succ = successors[position]
                if succ not in index_of:
                    work.append((node, position + 1))
                    work.append((succ, 0))
                    recurse = True
                    break
                if succ in on_stack:
                    lowlink[node] = min(lowlink[node], index_of[succ])
            if recurse:
                continue
            if lowlink[node] == index_of[node]:
                component: List[str] = []
                while True:
                    member = stack.pop()
                    on_stack.discard(member)
                    component.append(member)
                    if member == node:
                        break
                components.append(component)
            if work:
                parent = work[-1][0]
                lowlink[parent] = min(lowlink[parent], lowlink[node])
    return components


def resolve(
    modules: ModuleCache | Iterable[ModuleRecord],
    hint: Mapping[str, LoadOrderEntry] | None = None,
) -> Resolution:
    """Order modules so that every dependency loads before its dependents.

    Dependencies that are not present are recorded as missing and ignored for
    ordering. Modules caught in a cycle are recorded as cyclic and appended in
    scan order once everything else is placed. Neither condition raises.
    """

    records = list(modules.records()) if isinstance(modules, ModuleCache) else list(modules)
    ids = [record.id for record in records]
    scan_index = {module_id: index for index, module_id in enumerate(ids)}

    dependents: Dict[str, List[str]] = {module_id: [] for module_id in ids}
    in_degree: Dict[str, int] = {module_id: 0 for module_id in ids}
    missing: Dict[str, List[str]] = {module_id: [] for module_id in ids}

    edges: Set[Tuple[str, str]] = set()

    def add_edge(first: str, then: str) -> None:
        if first == then or (first, then) in edges:
            return
        edges.add((first, then))
        dependents[first].append(then)
        in_degree[then] += 1

    for record in records:
        for dep_id in record.dependencies:
            if dep_id in scan_index:
                add_edge(dep_id, record.id)
            elif dep_id not in missing[record.id]:
                missing[record.id].append(dep_id)
        # Load-after declarations only order modules that are present.
        for later_id in record.load_before:
            if later_id in scan_index:
                add_edge(record.id, later_id)

    keys = _tie_break_keys(records, hint)
    available: List[Tuple[SortKey, str]] = [
        (keys[module_id], module_id) for module_id in ids if in_degree[module_id] == 0
    ]
    heapq.heapify(available)

    ordered: List[str] = []
    while available:
        _, module_id = heapq.heappop(available)
        ordered.append(module_id)
        for dependent in dependents[module_id]:
            in_degree[dependent] -= 1
            if in_degree[dependent] == 0:
                heapq.heappush(available, (keys[dependent], dependent))

    cyclic: Dict[str, List[str]] = {module_id: [] for module_id in ids}
    placed = set(ordered)
    leftover = [module_id for module_id in ids if module_id not in placed]
    if leftover:
        for component in _strongly_connected(leftover, dependents):
            if len(component) < 2:
                continue
            members = sorted(component, key=scan_index.__getitem__)
            for member in members:
                cyclic[member] = [other for other in members if other != member]
        ordered.extend(leftover)

    validation = {
        module_id: ValidationInfo(cyclic=tuple(cyclic[module_id]), missing=tuple(missing[module_id]))
        for module_id in ids
    }

    log_debug(f"Resolved order: {', '.join(ordered)}")
    if leftover:
        log_debug(f"Modules left unordered by cycles: {', '.join(leftover)}")
    return Resolution(ordered_ids=ordered, validation=validation)


def refresh_validation(
    cache: ModuleCache,
    hint: Mapping[str, LoadOrderEntry] | None = None,
) -> Resolution:
    """Resolve the cache and store the validation results on its records."""

    resolution = resolve(cache, hint)
    cache.apply_validation(resolution.validation)
    return resolution


__all__ = ["resolve", "refresh_validation"]
