"""Generating .eds archives from a run description."""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from typing import Any

from edskit._io import write_bytes_to_uri
from edskit._models import RunDescription
from edskit._template import EDSTemplate
from edskit._wells import DEFAULT_GRID, PlateGrid

from ._analysis_protocol import build_analysis_protocol
from ._archive import assemble_archive
from ._experiment import build_experiment
from ._plate_setup import build_plate_setup

__all__ = [
    "assemble_archive",
    "build_analysis_protocol",
    "build_experiment",
    "build_plate_setup",
    "generate",
    "write_eds",
]

log = logging.getLogger(__name__)


def _resolve_template(template: EDSTemplate | str | os.PathLike | None) -> EDSTemplate:
    if isinstance(template, EDSTemplate):
        return template
    return EDSTemplate.load(template)


def generate(
    output_directory: str,
    output_filename: str,
    run: RunDescription | Mapping[str, Any],
    *,
    template: EDSTemplate | str | os.PathLike | None = None,
    grid: PlateGrid = DEFAULT_GRID,
) -> bytes:
    r"""Generate the bytes of an .eds archive for `run`.

    Parameters
    ----------
    output_directory : str
        Directory the archive will live in on the instrument PC.  Recorded in the
        experiment document only; nothing is written there.
    output_filename : str
        File name the archive will have on the instrument PC, e.g. "plate.eds".
    run : RunDescription | Mapping[str, Any]
        The plate run.  Mappings are validated with `RunDescription.coerce`.
    template : EDSTemplate | str | os.PathLike, optional
        A loaded template, or the directory / URI to load one from.  Defaults
        to `$EDSKIT_TEMPLATE_DIR`, then to the template bundled with edskit.
    grid : PlateGrid, optional
        Plate dimensions.  Defaults to 8x12.

    Returns
    -------
    bytes
        The archive.

    Examples
    --------
    >>> data = generate(
    ...     "C:\\somedir",
    ...     "somefile.eds",
    ...     {"barcode": "1337", "wells": {"A1": "a001", "H12": False, "H11": True}},
    ... )
    >>> data[:2]
    b'PK'
    """
    run = RunDescription.coerce(run)
    tmpl = _resolve_template(template)

    plate_setup = build_plate_setup(tmpl.plate_setup, run, grid)
    experiment = build_experiment(
        tmpl.experiment, output_directory, output_filename, run, grid
    )
    analysis_protocol = build_analysis_protocol(tmpl.analysis_protocol, run, grid)
    log.debug("Built documents for plate %s (%d wells)", run.barcode, len(run.wells))

    return assemble_archive(
        tmpl,
        {
            tmpl.plate_setup.schema.member: plate_setup,
            tmpl.experiment.schema.member: experiment,
            tmpl.analysis_protocol.schema.member: analysis_protocol,
        },
    )


def write_eds(
    path: str | os.PathLike,
    output_directory: str,
    output_filename: str,
    run: RunDescription | Mapping[str, Any],
    **kwargs: Any,
) -> None:
    """Generate an .eds archive for `run` and write it to `path` (or fsspec URI).

    Keyword arguments are passed to `generate`.
    """
    write_bytes_to_uri(path, generate(output_directory, output_filename, run, **kwargs))
