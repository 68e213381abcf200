"""Plate identity and run state from the plate setup and experiment documents."""

from __future__ import annotations

import xml.etree.ElementTree as ET

from edskit._errors import ExperimentIncomplete, MissingBarcode, MissingRunState
from edskit._models import PlateMetadata
from edskit._xml import select, text_of

__all__ = ["COMPLETE_RUN_STATE", "extract_metadata", "read_experiment", "read_plate"]

COMPLETE_RUN_STATE = "complete"


def read_plate(plate_setup: str | bytes) -> PlateMetadata:
    """Read the plate identity from the text of plate_setup.xml.

    Raises
    ------
    MissingBarcode
        If the plate has no (or a blank) barcode.
    """
    plate = ET.fromstring(plate_setup)
    if (barcode := text_of(select(plate, "Plate/BarCode"))) is None:
        raise MissingBarcode("Plate barcode not found")

    return PlateMetadata(
        barcode=barcode,
        plate_name=text_of(select(plate, "Plate/Name")),
        plate_description=text_of(select(plate, "Plate/Description")),
    )


def read_experiment(metadata: PlateMetadata, experiment: str | bytes) -> PlateMetadata:
    """Check the run state in experiment.xml and add its operator to `metadata`.

    Raises
    ------
    MissingRunState
        If the experiment has no (or a blank) run state.
    ExperimentIncomplete
        If the run state is anything other than "complete" (case-insensitive).
    """
    exp = ET.fromstring(experiment)
    if (run_state := text_of(select(exp, "Experiment/RunState"))) is None:
        raise MissingRunState("Experiment run state not found")
    if run_state.lower() != COMPLETE_RUN_STATE:
        raise ExperimentIncomplete(
            "This .eds file does not contain a completed experiment",
            run_state=run_state,
        )

    metadata.operator_name = text_of(select(exp, "Experiment/Operator"))
    return metadata


def extract_metadata(plate_setup: str | bytes, experiment: str | bytes) -> PlateMetadata:
    """Read plate metadata from the text of plate_setup.xml and experiment.xml.

    The barcode is checked before the experiment is parsed.
    """
    return read_experiment(read_plate(plate_setup), experiment)
