from __future__ import annotations

import io
import zipfile
from typing import Any, Callable

import pytest

from edskit import EDSTemplate

PLATE_SETUP_XML = """\
<?xml version="1.0" encoding="UTF-8" standalone="yes"?>
<Plate>
    <Name>  Assay plate 7  </Name>
    <BarCode> 1337 </BarCode>
    <Description>Generated for testing</Description>
    <FeatureMap>
        <Feature>
            <Id>sample</Id>
        </Feature>
    </FeatureMap>
</Plate>
"""

EXPERIMENT_XML = """\
<?xml version="1.0" encoding="UTF-8" standalone="yes"?>
<Experiment>
    <Name>Some experiment</Name>
    <Operator>Someone</Operator>
    <RunState>{run_state}</RunState>
</Experiment>
"""

ANALYSIS_RESULT_TXT = "\r\n".join(
    [
        "Session Name = test",
        "",
        "Well\tSample Name\tDetector\tCt",
        "0\ta001\tTarget 1\t25.1",
        "0\ta001\tTarget 2\t26.3",
        "bad\trow",
        "94\tPOS\tTarget 1\t30.2",
        "",
    ]
)

MULTICOMPONENT_DATA_TXT = "\n".join(
    [
        "Multicomponent Data",
        "Well\tCycle\tDye\tFAM\tRaw  Fluor Value",
        "0\t1\tFAM\t0\t1000.5",
        "0\t2\tFAM\t0\t1010.5",
        "0\t1\tVIC\t0\t500.25",
        "95\t1\tROX\t0\t80.0",
        "",
    ]
)


@pytest.fixture(scope="session")
def template() -> EDSTemplate:
    """The template tree bundled with edskit."""
    return EDSTemplate.load()


@pytest.fixture
def run_data() -> dict[str, Any]:
    return {
        "barcode": "1337",
        "name": "Some experiment",
        "operator": "Someone",
        "wells": {
            "A1": "a001",
            "A2": "a002",
            "C4": "a028",
            "H12": False,
            "H11": True,
        },
    }


def _zip(members: dict[str, str | bytes]) -> bytes:
    buf = io.BytesIO()
    with zipfile.ZipFile(buf, "w", compression=zipfile.ZIP_DEFLATED) as zf:
        for name, text in members.items():
            zf.writestr(name, text)
    return buf.getvalue()


@pytest.fixture
def make_eds() -> Callable[..., bytes]:
    """Build the bytes of a completed-run archive, with members overridable.

    `overrides` maps member file names (e.g. "plate_setup.xml") to new text or bytes,
    or to None to leave that member out.
    """

    def _make_eds(
        run_state: str = "Complete",
        overrides: dict[str, str | bytes | None] | None = None,
    ) -> bytes:
        members: dict[str, str | bytes | None] = {
            "apldbio/sds/plate_setup.xml": PLATE_SETUP_XML,
            "apldbio/sds/experiment.xml": EXPERIMENT_XML.format(run_state=run_state),
            "apldbio/sds/analysis_result.txt": ANALYSIS_RESULT_TXT,
            "apldbio/sds/multicomponent_data.txt": MULTICOMPONENT_DATA_TXT,
        }
        for key, value in (overrides or {}).items():
            members[f"apldbio/sds/{key}"] = value
        return _zip({k: v for k, v in members.items() if v is not None})

    return _make_eds
