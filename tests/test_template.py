from __future__ import annotations

import shutil
import xml.etree.ElementTree as ET
from pathlib import Path

import fsspec
import pytest

from edskit import (
    AnchorNotFound,
    EDSTemplate,
    FieldNotFound,
    RegionNotFound,
    TemplateDocument,
    TemplateIntegrityError,
)
from edskit._errors import ErrorKind
from edskit._template import default_template_dir
from edskit.write._analysis_protocol import ANALYSIS_PROTOCOL_SCHEMA
from edskit.write._experiment import EXPERIMENT_SCHEMA
from edskit.write._plate_setup import PLATE_SETUP_SCHEMA

SDS = Path("apldbio") / "sds"


@pytest.fixture
def template_copy(tmp_path: Path) -> Path:
    """A writable copy of the bundled template tree."""
    dest = tmp_path / "template"
    shutil.copytree(default_template_dir(), dest)
    return dest


def test_load_bundled(template: EDSTemplate) -> None:
    assert template.plate_setup.schema is PLATE_SETUP_SCHEMA
    assert template.experiment.schema is EXPERIMENT_SCHEMA
    assert template.analysis_protocol.schema is ANALYSIS_PROTOCOL_SCHEMA
    assert set(template.documents) == {
        "apldbio/sds/plate_setup.xml",
        "apldbio/sds/experiment.xml",
        "apldbio/sds/analysis_protocol.xml",
    }


def test_working_copy_is_independent(template: EDSTemplate) -> None:
    a = template.plate_setup.working_copy()
    b = template.plate_setup.working_copy()
    assert a is not b
    barcode = a.find("BarCode")
    assert barcode is not None
    barcode.text = "changed"
    assert template.plate_setup.working_copy().findtext("BarCode") == "TEMPLATE"


def test_env_template_dir(
    template_copy: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setenv("EDSKIT_TEMPLATE_DIR", str(template_copy))
    assert default_template_dir() == str(template_copy)
    assert EDSTemplate.load().root.endswith("template")


def test_missing_directory(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        EDSTemplate.load(tmp_path / "nope")


def test_missing_document(template_copy: Path) -> None:
    (template_copy / SDS / "experiment.xml").unlink()
    with pytest.raises(FileNotFoundError):
        EDSTemplate.load(template_copy)


def test_load_from_memory_fs(template_copy: Path) -> None:
    fs = fsspec.filesystem("memory")
    fs.put(str(template_copy), "/mem-template", recursive=True)
    try:
        loaded = EDSTemplate.load("memory://mem-template")
        assert loaded.plate_setup.working_copy().tag == "Plate"
    finally:
        fs.rm("/mem-template", recursive=True)


def _replace(path: Path, old: str, new: str) -> None:
    text = path.read_text()
    assert old in text
    path.write_text(text.replace(old, new))


def test_missing_region(template_copy: Path) -> None:
    _replace(template_copy / SDS / "plate_setup.xml", "<Id>sample</Id>", "<Id>x</Id>")
    with pytest.raises(RegionNotFound, match="'sample'") as exc_info:
        EDSTemplate.load(template_copy)
    assert exc_info.value.kind is ErrorKind.template


def test_missing_field(template_copy: Path) -> None:
    _replace(
        template_copy / SDS / "experiment.xml",
        "<Operator>Template operator</Operator>",
        "",
    )
    with pytest.raises(FieldNotFound, match="Experiment/Operator"):
        EDSTemplate.load(template_copy)


def test_missing_samples_anchor(template_copy: Path) -> None:
    path = template_copy / SDS / "experiment.xml"
    root = ET.parse(path).getroot()
    for samples in root.findall("Samples"):
        root.remove(samples)
    path.write_text(ET.tostring(root, encoding="unicode"))
    with pytest.raises(AnchorNotFound):
        EDSTemplate.load(template_copy)


def test_missing_target_settings(template_copy: Path) -> None:
    path = template_copy / SDS / "analysis_protocol.xml"
    root = ET.parse(path).getroot()
    for node in root.iter("StringValue"):
        if (node.text or "").startswith("Target"):
            node.text = "Other"
    path.write_text(ET.tostring(root, encoding="unicode"))
    with pytest.raises(AnchorNotFound) as exc_info:
        EDSTemplate.load(template_copy)
    # also an IndexError: there is no block to anchor new settings on
    assert isinstance(exc_info.value, IndexError)


def test_wrong_root() -> None:
    with pytest.raises(TemplateIntegrityError, match="<Plate>"):
        TemplateDocument.from_string("<Experiment/>", PLATE_SETUP_SCHEMA)
