"""Plate setup document (apldbio/sds/plate_setup.xml)."""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from collections.abc import Mapping, Sequence
from typing import Any

from edskit._models import (
    NamedSample,
    NegativeControl,
    PositiveControl,
    RunDescription,
    render_sample,
)
from edskit._template import PLATE_SETUP_PATH, TemplateDocument, TemplateSchema
from edskit._wells import DEFAULT_GRID, PlateGrid, well_to_index
from edskit._xml import build_element, find_region_by_id, remove_all, serialize

__all__ = ["PLATE_SETUP_SCHEMA", "build_plate_setup", "new_sample"]

log = logging.getLogger(__name__)

SAMPLE_REGION = "sample"
DETECTOR_TASK_REGION = "detector-task"

PLATE_SETUP_SCHEMA = TemplateSchema(
    member=PLATE_SETUP_PATH,
    root_tag="Plate",
    fields={
        "barcode": "Plate/BarCode",
        "name": "Plate/Name",
        "description": "Plate/Description",
    },
    regions={
        SAMPLE_REGION: "Plate/FeatureMap",
        DETECTOR_TASK_REGION: "Plate/FeatureMap",
    },
)

# (target name, reporter dye, display color), one DetectorTask per well each
DETECTORS: tuple[tuple[str, str, str], ...] = (
    ("Target 1", "FAM", "-7619079"),
    ("Target 2", "VIC", "-3083422"),
)
EXPERIMENT_SAMPLE_CONCENTRATION = "100.0"


def new_sample(
    spec: NamedSample | NegativeControl | PositiveControl, *, for_experiment: bool = False
) -> ET.Element:
    """Build a <Sample> element, or the <Samples> variant used by experiment.xml."""
    label, color = render_sample(spec)
    sample = ET.Element("Samples" if for_experiment else "Sample")
    sample.append(build_element("Name", label))
    sample.append(build_element("Color", color))
    if for_experiment:
        sample.append(build_element("Concentration", EXPERIMENT_SAMPLE_CONCENTRATION))
    return sample


def _sample_feature_value(
    index: int, spec: NamedSample | NegativeControl | PositiveControl
) -> ET.Element:
    fv = ET.Element("FeatureValue")
    fv.append(build_element("Index", index))
    fv.append(build_element("FeatureItem", new_sample(spec)))
    return fv


def _detector_task(name: str, reporter: str, color: str) -> ET.Element:
    task = ET.Element("DetectorTask")
    task.append(build_element("Task", "UNKNOWN"))
    task.append(build_element("Concentration", "1.0"))
    detector = ET.SubElement(task, "Detector")
    detector.append(build_element("Name", name))
    detector.append(build_element("Reporter", reporter))
    detector.append(build_element("Quencher", "None"))
    detector.append(build_element("Color", color))
    return task


def _detector_feature_value(index: int) -> ET.Element:
    task_list = ET.Element("DetectorTaskList")
    task_list.extend(_detector_task(*detector) for detector in DETECTORS)
    fv = ET.Element("FeatureValue")
    fv.append(build_element("Index", index))
    fv.append(build_element("FeatureItem", task_list))
    return fv


def _refill_region(
    root: ET.Element, region_id: str, values: Sequence[ET.Element]
) -> None:
    region = find_region_by_id(root, PLATE_SETUP_SCHEMA.regions[region_id], region_id)
    removed = remove_all(root, region.findall("FeatureValue"))
    region.extend(values)
    log.debug(
        "Replaced %d %r feature values with %d", removed, region_id, len(values)
    )


def build_plate_setup(
    template: TemplateDocument,
    run: RunDescription | Mapping[str, Any],
    grid: PlateGrid = DEFAULT_GRID,
) -> str:
    """Return plate_setup.xml for `run`, built from a copy of `template`.

    Both the "sample" and the "detector-task" feature maps get exactly one
    FeatureValue per well, in the iteration order of ``run.wells``.

    Raises
    ------
    MissingRequiredField
        If `run` is a mapping without a barcode or wells.
    InvalidWellName, InvalidWellRow, InvalidColumn
        If a well name is not on the plate.
    """
    run = RunDescription.coerce(run)
    root = template.working_copy()

    schema = template.schema
    schema.field_node(root, "barcode").text = run.barcode
    schema.field_node(root, "name").text = run.plate_name
    schema.field_node(root, "description").text = run.plate_description

    indices = [well_to_index(well, grid) for well in run.wells]
    samples = [
        _sample_feature_value(idx, spec)
        for idx, spec in zip(indices, run.wells.values(), strict=True)
    ]
    _refill_region(root, SAMPLE_REGION, samples)
    _refill_region(root, DETECTOR_TASK_REGION, [_detector_feature_value(i) for i in indices])

    return serialize(root)
