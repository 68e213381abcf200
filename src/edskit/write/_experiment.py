"""Experiment document (apldbio/sds/experiment.xml)."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from operator import itemgetter
from typing import Any

from edskit._errors import AnchorNotFound
from edskit._models import RunDescription
from edskit._template import EXPERIMENT_PATH, TemplateDocument, TemplateSchema
from edskit._wells import DEFAULT_GRID, PlateGrid, well_to_index
from edskit._xml import (
    insert_all_before,
    next_element_sibling,
    parent_of,
    remove_all,
    select_all,
    serialize,
)

from ._plate_setup import new_sample

__all__ = ["EXPERIMENT_SCHEMA", "build_experiment", "experiment_file_name"]

log = logging.getLogger(__name__)

SAMPLES_PATH = "Experiment/Samples"

EXPERIMENT_SCHEMA = TemplateSchema(
    member=EXPERIMENT_PATH,
    root_tag="Experiment",
    fields={
        "name": "Experiment/Name",
        "operator": "Experiment/Operator",
        "file_name": "Experiment/FileName",
    },
    anchors={"samples": SAMPLES_PATH},
)


def experiment_file_name(directory: str, filename: str) -> str:
    r"""Return the path the instrument software expects in <FileName>.

    The instrument runs on Windows, so this is always backslash-joined,
    whatever platform edskit itself runs on.

    >>> experiment_file_name("C:\\somedir", "somefile.eds")
    'C:\\somedir\\somefile.eds'
    """
    return f"{directory}\\{filename}"


def build_experiment(
    template: TemplateDocument,
    output_directory: str,
    output_filename: str,
    run: RunDescription | Mapping[str, Any],
    grid: PlateGrid = DEFAULT_GRID,
) -> str:
    """Return experiment.xml for `run`, built from a copy of `template`.

    Existing <Samples> blocks are replaced by one block per well, sorted by well
    index, at the position of the template's last <Samples> block.
    """
    run = RunDescription.coerce(run)
    root = template.working_copy()

    schema = template.schema
    schema.field_node(root, "name").text = run.experiment_name
    schema.field_node(root, "operator").text = run.operator_name
    schema.field_node(root, "file_name").text = experiment_file_name(
        output_directory, output_filename
    )

    old_samples = select_all(root, SAMPLES_PATH)
    if not old_samples:
        raise AnchorNotFound(
            f"No {SAMPLES_PATH!r} node to anchor samples in {EXPERIMENT_PATH}",
            path=SAMPLES_PATH,
        )
    parent = parent_of(root, old_samples[-1])
    ref = next_element_sibling(root, old_samples[-1])
    remove_all(root, old_samples)

    indexed = [
        (well_to_index(well, grid), new_sample(spec, for_experiment=True))
        for well, spec in run.wells.items()
    ]
    indexed.sort(key=itemgetter(0))
    insert_all_before(parent, [node for _, node in indexed], ref)  # type: ignore[arg-type]
    log.debug("Wrote %d experiment samples", len(indexed))

    return serialize(root)
