from __future__ import annotations

from pathlib import Path

import pytest

from conftest import submodule_xml

from submodsorter.errors import ParseInvalid
from submodsorter.manifest_parser import (
    collect_module_records,
    parse_submodule_file,
    parse_submodule_xml,
)

FULL_MANIFEST = """<?xml version="1.0" encoding="utf-8"?>
<Module>
    <Name value="Calradia Expanded"/>
    <Id
        value="  CalradiaExpanded  "/>
    <Version value="v1.2.3"/>
    <DependedModules>
        <DependedModule Id="Native" DependentVersion="v1.2.0"/>
        <DependedModule Id="SandBoxCore"/>
        <DependedModule Id="Native"/>
    </DependedModules>
    <DependedModuleMetadatas>
        <DependedModuleMetadata id="Bannerlord.Harmony" order="LoadBeforeThis"/>
        <DependedModuleMetadata id="Bannerlord.MCM" order="LoadBeforeThis" optional="true"/>
        <DependedModuleMetadata id="LateMod" order="LoadAfterThis"/>
    </DependedModuleMetadatas>
    <SubModules/>
</Module>
"""


def test_parses_id_name_version_and_dependencies():
    record = parse_submodule_xml(FULL_MANIFEST)
    assert record is not None
    assert record.id == "CalradiaExpanded"
    assert record.external_id == "CalradiaExpanded"
    assert record.name == "Calradia Expanded"
    assert record.version == "v1.2.3"
    assert record.dependencies == ("Native", "SandBoxCore", "Bannerlord.Harmony")
    assert record.load_before == ("LateMod",)
    assert record.official is False
    assert record.selected is None
    assert record.invalid.is_valid


def test_formatting_does_not_change_result():
    compact = (
        '<Module><Id value="A"/><DependedModules><DependedModule Id="B"/>'
        '<DependedModule Id="C"/></DependedModules></Module>'
    )
    spaced = """
    <Module>
        <Id   value="A" />
        <DependedModules>
            <DependedModule
                Id="B" />
            <DependedModule Id=" C "/>
        </DependedModules>
    </Module>
    """
    assert parse_submodule_xml(compact) == parse_submodule_xml(spaced)


def test_missing_id_returns_none():
    assert parse_submodule_xml(submodule_xml(None, ["Native"])) is None
    assert parse_submodule_xml('<Module><Id value="   "/></Module>') is None


def test_self_dependency_is_dropped():
    record = parse_submodule_xml(submodule_xml("A", ["A", "Native"]))
    assert record.dependencies == ("Native",)


def test_official_and_selected_flags():
    record = parse_submodule_xml('<Module><Id value="Native"/><IsSelected value="True"/></Module>')
    assert record.official is True
    assert record.selected is True


def test_malformed_document_raises_parse_invalid(tmp_path: Path):
    path = tmp_path / "SubModule.xml"
    path.write_text("<Module><Id value='A'></Module", encoding="utf-8")
    with pytest.raises(ParseInvalid) as excinfo:
        parse_submodule_file(path)
    assert excinfo.value.path == path
    assert isinstance(excinfo.value, ValueError)


def test_parse_file_applies_external_id(tmp_path: Path):
    path = tmp_path / "SubModule.xml"
    path.write_text(submodule_xml("Bannerlord.Harmony"), encoding="utf-8")
    record = parse_submodule_file(path, external_ids={"Bannerlord.Harmony": "harmony-2006"})
    assert record.external_id == "harmony-2006"
    assert record.path == path


def test_collect_skips_records_without_id_and_duplicates(tmp_path: Path):
    paths = []
    for name, module_id in [("one", "A"), ("two", None), ("three", "A"), ("four", "B")]:
        path = tmp_path / name / "SubModule.xml"
        path.parent.mkdir()
        path.write_text(submodule_xml(module_id), encoding="utf-8")
        paths.append(path)

    records = collect_module_records(paths)
    assert [record.id for record in records] == ["A", "B"]
    assert records[0].path == paths[0]


def test_load_after_metadata_is_kept_apart_from_dependencies():
    document = """
    <Module>
        <Id value="Bannerlord.Harmony"/>
        <DependedModuleMetadatas>
            <DependedModuleMetadata id="Native" order="LoadAfterThis"/>
            <DependedModuleMetadata id="Sandbox" order="LoadAfterThis" optional="true"/>
            <DependedModuleMetadata id="Bannerlord.Harmony" order="LoadAfterThis"/>
        </DependedModuleMetadatas>
    </Module>
    """
    record = parse_submodule_xml(document)
    assert record.dependencies == ()
    assert record.load_before == ("Native",)
