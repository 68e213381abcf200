"""Analysis protocol document (apldbio/sds/analysis_protocol.xml).

The protocol holds one settings block per well per target.  Blocks for targets
("Target 1", "Target 2", ...) are regenerated for every run; all other settings
blocks are carried over from the template untouched.
"""

from __future__ import annotations

import logging
import re
import xml.etree.ElementTree as ET
from collections.abc import Mapping
from typing import Any

from edskit._errors import AnchorNotFound
from edskit._models import RunDescription
from edskit._template import ANALYSIS_PROTOCOL_PATH, TemplateDocument, TemplateSchema
from edskit._wells import DEFAULT_GRID, PlateGrid, well_to_index
from edskit._xml import (
    build_element,
    insert_all_before,
    next_element_sibling,
    parent_of,
    remove_all,
    select_all,
    serialize,
    text_of,
)

__all__ = [
    "ANALYSIS_PROTOCOL_SCHEMA",
    "build_analysis_protocol",
    "find_target_settings",
    "new_analysis_settings",
]

log = logging.getLogger(__name__)

SETTINGS_PATH = "JaxbAnalysisProtocol/JaxbAnalysisSettings"
WELL_SETTINGS_TYPE = "com.apldbio.sds.platform.analysis.IWellSettings"
TARGET_NAME_RE = re.compile(r"Target\s+\d+")
TARGETS = ("Target 1", "Target 2")

# setting name -> (value type attribute, value tag, value); None means the target
# or the well index
_WELL_SETTINGS: tuple[tuple[str, str, str, str | None], ...] = (
    ("AutoBaseline", "Boolean", "BooleanValue", "false"),
    ("BaselineStart", "Integer", "IntValue", "3"),
    ("ObjectName", "String", "StringValue", None),
    ("BaselineStop", "Integer", "IntValue", "15"),
    ("WellIndex", "Integer", "IntValue", None),
    ("UseDetectorDefaults", "Boolean", "BooleanValue", "true"),
)


def settings_type(settings: ET.Element) -> str | None:
    node = settings.find(".//Type")
    if node is None:
        return None
    return (node.text or "").strip()


def settings_object_name(settings: ET.Element) -> str | None:
    """Return the value of the block's ObjectName setting, if it has one."""
    for value in settings.iter("JaxbSettingValue"):
        if text_of(value.find(".//Name")) != "ObjectName":
            continue
        node = value.find(".//JaxbValueItem/StringValue")
        if node is None:
            continue
        return (node.text or "").strip()
    return None


def find_target_settings(root: ET.Element) -> list[ET.Element]:
    """Return the per-well settings blocks that belong to a "Target <n>"."""
    found = []
    for settings in select_all(root, SETTINGS_PATH):
        if settings_type(settings) != WELL_SETTINGS_TYPE:
            continue
        name = settings_object_name(settings)
        if not name or not TARGET_NAME_RE.search(name):
            continue
        found.append(settings)
    return found


def _require_target_settings(root: ET.Element) -> list[ET.Element]:
    if not (found := find_target_settings(root)):
        raise AnchorNotFound(
            f"{ANALYSIS_PROTOCOL_PATH} must contain at least one well settings "
            "block for a 'Target <n>' to anchor new settings",
            path=SETTINGS_PATH,
        )
    return found


ANALYSIS_PROTOCOL_SCHEMA = TemplateSchema(
    member=ANALYSIS_PROTOCOL_PATH,
    root_tag="JaxbAnalysisProtocol",
    checks=(_require_target_settings,),
)


def new_analysis_settings(well_index: int, target: str) -> ET.Element:
    settings = ET.Element("JaxbAnalysisSettings")
    settings.append(build_element("Type", WELL_SETTINGS_TYPE))
    for name, value_type, value_tag, value in _WELL_SETTINGS:
        if value is None:
            value = target if name == "ObjectName" else str(well_index)
        item = ET.Element("JaxbValueItem", type=value_type)
        item.append(build_element(value_tag, value))
        setting = ET.SubElement(settings, "JaxbSettingValue")
        setting.append(build_element("Name", name))
        setting.append(item)
    return settings


def build_analysis_protocol(
    template: TemplateDocument,
    run: RunDescription | Mapping[str, Any],
    grid: PlateGrid = DEFAULT_GRID,
) -> str:
    """Return analysis_protocol.xml for `run`, built from a copy of `template`.

    All target settings blocks are replaced by one block per well for each of
    `TARGETS`, inserted where the last old block was.  Every "Target 1" block
    precedes every "Target 2" block; within a target, wells keep the iteration
    order of ``run.wells``.

    Raises
    ------
    AnchorNotFound
        If the template has no target settings block to replace.
    """
    run = RunDescription.coerce(run)
    root = template.working_copy()

    old = _require_target_settings(root)
    parent = parent_of(root, old[-1])
    ref = next_element_sibling(root, old[-1])
    remove_all(root, old)

    indices = [well_to_index(well, grid) for well in run.wells]
    for target in TARGETS:
        nodes = [new_analysis_settings(idx, target) for idx in indices]
        insert_all_before(parent, nodes, ref)  # type: ignore[arg-type]
    log.debug(
        "Replaced %d target settings blocks with %d",
        len(old),
        len(indices) * len(TARGETS),
    )

    return serialize(root)
