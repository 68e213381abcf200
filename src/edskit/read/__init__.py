"""Parsing completed .eds archives."""

from __future__ import annotations

import logging

from edskit._models import ParseResult
from edskit._template import EXPERIMENT_PATH, PLATE_SETUP_PATH
from edskit._wells import DEFAULT_GRID, PlateGrid

from ._archive import ArchiveSource, load_archive, read_member
from ._metadata import extract_metadata, read_experiment, read_plate
from ._tables import normalize_header, parse_analysis_result, parse_multicomponent_data

__all__ = [
    "ANALYSIS_RESULT_PATH",
    "MULTICOMPONENT_DATA_PATH",
    "extract_metadata",
    "load_archive",
    "normalize_header",
    "parse",
    "parse_analysis_result",
    "parse_multicomponent_data",
    "read_experiment",
    "read_member",
    "read_plate",
]

log = logging.getLogger(__name__)

ANALYSIS_RESULT_PATH = "apldbio/sds/analysis_result.txt"
MULTICOMPONENT_DATA_PATH = "apldbio/sds/multicomponent_data.txt"


def parse(source: ArchiveSource, *, grid: PlateGrid = DEFAULT_GRID) -> ParseResult:
    """Parse a completed .eds archive.

    Parameters
    ----------
    source : str | os.PathLike | bytes | IO[bytes]
        Path or fsspec URI of the archive, its raw bytes, or an open binary file.
    grid : PlateGrid, optional
        Plate dimensions used to name wells.  Defaults to 8x12.

    Returns
    -------
    ParseResult
        Plate metadata, analysis result rows, and multicomponent data per well.

    Raises
    ------
    MissingArchiveMember
        If one of the expected documents or tables is absent.
    MissingBarcode, MissingRunState, ExperimentIncomplete
        If the archive does not describe a completed run of a barcoded plate.
    """
    with load_archive(source) as zf:
        # each document is read only once the previous one passed its checks
        metadata = read_plate(read_member(zf, PLATE_SETUP_PATH))
        metadata = read_experiment(metadata, read_member(zf, EXPERIMENT_PATH))
        log.debug("Parsing results for plate %s", metadata.barcode)
        results = parse_analysis_result(read_member(zf, ANALYSIS_RESULT_PATH))
        wells = parse_multicomponent_data(read_member(zf, MULTICOMPONENT_DATA_PATH), grid)
    return ParseResult(metadata=metadata, results=results, wells=wells)
