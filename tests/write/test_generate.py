from __future__ import annotations

import io
import shutil
import xml.etree.ElementTree as ET
import zipfile
from pathlib import Path
from typing import Any

import fsspec
import pytest

from edskit import (
    EDSTemplate,
    ExperimentIncomplete,
    InvalidColumn,
    generate,
    parse,
    write_eds,
)
from edskit._template import TEMPLATE_DIR_ENV, default_template_dir

MEMBERS = [
    "Manifest.mf",
    "apldbio/",
    "apldbio/sds/",
    "apldbio/sds/analysis_protocol.xml",
    "apldbio/sds/experiment.xml",
    "apldbio/sds/plate_setup.xml",
    "apldbio/sds/tcprotocol.xml",
]


def _open(data: bytes) -> zipfile.ZipFile:
    return zipfile.ZipFile(io.BytesIO(data))


def test_archive_layout(template: EDSTemplate, run_data: dict[str, Any]) -> None:
    data = generate("C:\\somedir", "somefile.eds", run_data, template=template)
    with _open(data) as zf:
        assert zf.testzip() is None
        assert sorted(zf.namelist()) == MEMBERS
        assert zf.getinfo("apldbio/sds/").is_dir()
        info = zf.getinfo("apldbio/sds/plate_setup.xml")
        assert info.compress_type == zipfile.ZIP_DEFLATED

        # files not generated are copied byte for byte
        assert zf.read("apldbio/sds/tcprotocol.xml") == template.read_file(
            "apldbio/sds/tcprotocol.xml"
        )
        assert zf.read("Manifest.mf") == template.read_file("Manifest.mf")

        plate = ET.fromstring(zf.read("apldbio/sds/plate_setup.xml"))
        experiment = ET.fromstring(zf.read("apldbio/sds/experiment.xml"))
        protocol = ET.fromstring(zf.read("apldbio/sds/analysis_protocol.xml"))

    assert plate.findtext("BarCode") == "1337"
    assert experiment.findtext("FileName") == "C:\\somedir\\somefile.eds"
    assert len(experiment.findall("Samples")) == 5
    assert len(protocol.findall("JaxbAnalysisSettings")) == 12


def test_template_is_not_modified(
    template: EDSTemplate, run_data: dict[str, Any]
) -> None:
    before = ET.tostring(template.plate_setup.working_copy())
    generate("C:\\", "a.eds", run_data, template=template)
    generate("C:\\", "b.eds", {"barcode": "2", "wells": {"B3": "x"}}, template=template)
    assert ET.tostring(template.plate_setup.working_copy()) == before


def test_template_argument(tmp_path: Path) -> None:
    dest = tmp_path / "template"
    shutil.copytree(default_template_dir(), dest)
    (dest / "extra.txt").write_text("hello")
    data = generate("C:\\", "x.eds", {"barcode": "1", "wells": {}}, template=dest)
    with _open(data) as zf:
        assert zf.read("extra.txt") == b"hello"


def test_template_from_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    dest = tmp_path / "template"
    shutil.copytree(default_template_dir(), dest)
    (dest / "apldbio" / "sds" / "notes").mkdir()
    monkeypatch.setenv(TEMPLATE_DIR_ENV, str(dest))
    data = generate("C:\\", "x.eds", {"barcode": "1", "wells": {}})
    with _open(data) as zf:
        assert "apldbio/sds/notes/" in zf.namelist()


def test_invalid_run_writes_nothing(tmp_path: Path) -> None:
    out = tmp_path / "bad.eds"
    with pytest.raises(InvalidColumn):
        write_eds(out, "C:\\", "bad.eds", {"barcode": "1", "wells": {"A13": "x"}})
    assert not out.exists()


def test_write_eds(template: EDSTemplate, run_data: dict[str, Any], tmp_path: Path) -> None:
    out = tmp_path / "plate.eds"
    write_eds(out, "C:\\runs", "plate.eds", run_data, template=template)
    with zipfile.ZipFile(out) as zf:
        experiment = ET.fromstring(zf.read("apldbio/sds/experiment.xml"))
    assert experiment.findtext("FileName") == "C:\\runs\\plate.eds"


def test_write_eds_memory(template: EDSTemplate, run_data: dict[str, Any]) -> None:
    write_eds("memory://out/plate.eds", "C:\\", "plate.eds", run_data, template=template)
    fs = fsspec.filesystem("memory")
    with _open(fs.cat_file("/out/plate.eds")) as zf:
        assert "apldbio/sds/plate_setup.xml" in zf.namelist()


def test_generated_archive_is_not_a_completed_run(
    template: EDSTemplate, run_data: dict[str, Any]
) -> None:
    data = generate("C:\\", "plate.eds", run_data, template=template)
    # the template's run state is INIT until the instrument has run the plate
    with pytest.raises(ExperimentIncomplete) as exc_info:
        parse(data)
    assert exc_info.value.ctx["run_state"] == "INIT"
