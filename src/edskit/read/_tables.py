"""Decoders for the tab-delimited tables exported into an .eds archive.

Both tables share a layout: free-form preamble lines, then a header row whose first
field is "Well", then one row per reading whose first field is the well index.
Rows that do not fit (blank, malformed, non-numeric well) are skipped, not errors.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Iterator

from edskit._models import MultiComponentSeries, ResultRow
from edskit._util import parse_leading_int
from edskit._wells import DEFAULT_GRID, PlateGrid, well_index_to_name

__all__ = [
    "normalize_header",
    "parse_analysis_result",
    "parse_multicomponent_data",
]

log = logging.getLogger(__name__)

_LINE_SPLIT_RE = re.compile(r"\r?\n")
_WHITESPACE_RE = re.compile(r"\s+")
_ALPHA_RE = re.compile(r"[a-zA-Z]")
HEADER_MARKER = "well"


def _data_rows(
    text: str, normalize: Callable[[list[str]], list[str]] | None = None
) -> Iterator[tuple[list[str], int, list[str]]]:
    """Yield ``(header, well_index, fields)`` for every data row in `text`.

    Any row starting with "Well" (re)sets the header; rows before the first header
    are ignored.
    """
    header: list[str] | None = None
    for line in _LINE_SPLIT_RE.split(text):
        fields = line.split("\t")
        if not fields[0]:
            continue
        if fields[0].strip().lower() == HEADER_MARKER:
            header = normalize(fields) if normalize else fields
            continue
        if header is None:
            continue
        well_index = parse_leading_int(fields[0])
        if well_index is None or well_index < 0:
            continue
        yield header, well_index, fields


def normalize_header(header: list[str]) -> list[str]:
    """Lowercase and trim header names, joining the first space run with "_".

    >>> normalize_header(["Well", " Cycle ", "Dye Name ", "Raw  Fluor Value", ""])
    ['well', 'cycle', 'dye_name', 'raw_fluor value', '']
    """
    return [
        _WHITESPACE_RE.sub("_", name.strip().lower(), count=1) if name else name
        for name in header
    ]


def parse_analysis_result(text: str) -> list[ResultRow]:
    """Decode analysis_result.txt into one dict per well row, keyed by header.

    Keys are the header fields verbatim.  Values missing from a short row are None.
    """
    rows: list[ResultRow] = []
    for header, _, fields in _data_rows(text):
        rows.append(
            {key: fields[i] if i < len(fields) else None for i, key in enumerate(header)}
        )
    log.debug("Parsed %d analysis result rows", len(rows))
    return rows


def parse_multicomponent_data(
    text: str, grid: PlateGrid = DEFAULT_GRID
) -> MultiComponentSeries:
    """Decode multicomponent_data.txt into per-well, per-dye fluorescence series.

    Returns a mapping ``{well name: {dye: {cycle: value}}}``; values are kept as the
    strings found in the file.

    Some exports carry extra groups of three numeric columns ahead of the dye name.
    While the third field holds no letter, the first three fields are dropped, so
    that the fields line up as ``well, cycle, dye, <unused>, value``.
    """
    wells: MultiComponentSeries = {}
    count = 0
    for _, well_index, fields in _data_rows(text, normalize_header):
        if len(fields) < 5:
            continue

        dyes = wells.setdefault(well_index_to_name(well_index, grid), {})

        while len(fields) > 2 and fields[2] and not _ALPHA_RE.search(fields[2]):
            fields = fields[3:]

        dye = fields[2] if len(fields) > 2 else ""
        if not dye:
            continue
        cycle = parse_leading_int(fields[1])
        if cycle is None:
            continue

        dyes.setdefault(dye, {})[cycle] = fields[4] if len(fields) > 4 else None
        count += 1

    log.debug("Parsed %d multicomponent readings for %d wells", count, len(wells))
    return wells
