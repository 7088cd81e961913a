from __future__ import annotations

from pathlib import Path

from openpyxl import load_workbook

from conftest import entry, record

from submodsorter.module_cache import ModuleCache
from submodsorter.report import export_report, print_resolved_order, print_validation_details
from submodsorter.resolver import refresh_validation


def _resolved_cache():
    cache = ModuleCache([record("Native"), record("A", "B"), record("B", "A"), record("C", "Gone")])
    return cache, refresh_validation(cache)


def test_export_report_writes_all_sheets(tmp_path: Path):
    cache, resolution = _resolved_cache()
    output = tmp_path / "reports" / "load_order.xlsx"
    export_report(output, cache, resolution, ["Native", "C"], {"C": entry(1), "Native": entry(0, locked=True)})

    workbook = load_workbook(output)
    assert workbook.sheetnames == ["modules", "resolved_order", "load_order"]

    modules = list(workbook["modules"].iter_rows(values_only=True))
    assert modules[0][:3] == ("scan order", "id", "external id")
    assert [row[1] for row in modules[1:]] == ["Native", "A", "B", "C"]
    assert modules[4][8] == "Gone"

    resolved = list(workbook["resolved_order"].iter_rows(values_only=True))
    assert [row[1] for row in resolved[1:]] == resolution.ordered_ids
    assert resolved[1][2] == "yes"

    load_order = list(workbook["load_order"].iter_rows(values_only=True))
    assert [row[1] for row in load_order[1:]] == ["Native", "C"]
    assert load_order[1][4] == "yes"
    workbook.close()


def test_print_validation_details(capsys):
    cache, _ = _resolved_cache()
    print_validation_details(cache)
    output = capsys.readouterr().out
    assert "[missing] C: Gone" in output
    assert "[cyclic] A: B" in output


def test_print_validation_details_clean(capsys):
    cache = ModuleCache([record("Native")])
    refresh_validation(cache)
    print_validation_details(cache)
    assert "[ok]" in capsys.readouterr().out


def test_print_resolved_order(capsys):
    cache, resolution = _resolved_cache()
    print_resolved_order(resolution, cache)
    output = capsys.readouterr().out
    assert "1. Native" in output
    assert "(Cyclic dependencies: B)" in output
